# src/allure_trace/core/__init__.py
"""
Core do allure-trace.

Este pacote contém o rastreador de ciclo de vida de casos e steps:

    - core.ids        → identificadores únicos e relógio em epoch ms
    - core.types      → enums e registros de valor do schema Allure
    - core.step       → TestStep, nó recursivo da árvore de steps
    - core.case       → CaseContext, agregado raiz e regra de propagação
    - core.exceptions → exceções tipadas e payload de erro
    - core.config     → carregamento e interpretação da configuração

O core é projetado para ser:
    - determinístico (exceto identificadores e relógio)
    - testável de forma isolada
    - livre de I/O
"""

from .case import CaseContext
from .exceptions import (
    CaseLifecycleError,
    SerializationError,
    TraceErrorPayload,
    TraceException,
    UnknownStepHandleError,
    exception_to_error,
)
from .step import TestStep
from .types import (
    Attachment,
    CaseStatus,
    FailurePropagation,
    Label,
    Link,
    Parameter,
    Stage,
    StatusDetails,
    StepHandle,
    StepStatus,
)

__all__ = [
    "CaseContext",
    "TestStep",
    "CaseLifecycleError",
    "SerializationError",
    "TraceErrorPayload",
    "TraceException",
    "UnknownStepHandleError",
    "exception_to_error",
    "Attachment",
    "CaseStatus",
    "FailurePropagation",
    "Label",
    "Link",
    "Parameter",
    "Stage",
    "StatusDetails",
    "StepHandle",
    "StepStatus",
]
