# src/allure_trace/__init__.py
"""
allure-trace — registro de execução de casos de teste funcionais e geração
de documentos de resultado no formato Allure.

Este pacote raiz define o namespace público do allure-trace. Um motor de
testes externo conduz um caso por vez, sequencialmente:

    case = CaseContext()
    case.start_case("Login", "desc", 1000)
    h = case.start_step("Open page", 1000)
    case.end_step(h, 1100, True, "")
    case.finish_case(1300)
    ResultsStore(results_dir="allure-results").write_result(case)

Arquitetura em alto nível:
    - core         → CaseContext, TestStep, tipos, exceções e configuração
    - report       → serializer determinístico para `<uuid>-result.json`
    - persistence  → gravação atômica de documentos e attachments
    - engine       → CaseRunner, condução de um caso a partir de samplers

Limites explícitos:
    - Não agrega múltiplos casos de uma execução
    - Não produz relatórios em tempo real
    - Não invoca o renderizador Allure
"""

from .core import (
    Attachment,
    CaseContext,
    CaseLifecycleError,
    CaseStatus,
    FailurePropagation,
    Label,
    Link,
    Parameter,
    SerializationError,
    Stage,
    StatusDetails,
    StepHandle,
    StepStatus,
    TestStep,
    TraceException,
    UnknownStepHandleError,
)
from .report import result_filename, to_document, to_json
from .persistence import ResultsStore

__version__ = "1.0.0"

__all__ = [
    "Attachment",
    "CaseContext",
    "CaseLifecycleError",
    "CaseStatus",
    "FailurePropagation",
    "Label",
    "Link",
    "Parameter",
    "SerializationError",
    "Stage",
    "StatusDetails",
    "StepHandle",
    "StepStatus",
    "TestStep",
    "TraceException",
    "UnknownStepHandleError",
    "result_filename",
    "to_document",
    "to_json",
    "ResultsStore",
]
