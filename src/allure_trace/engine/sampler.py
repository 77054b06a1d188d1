# src/allure_trace/engine/sampler.py
"""
Contrato canônico de um Sampler executado pelo CaseRunner.

Um Sampler representa uma ação amostrada de um caso de teste (ex.: uma
requisição HTTP). O runner abre um step para cada sampler, executa-o e
registra o resultado, incluindo request/response como attachments.

Limites explícitos:
    - O sampler não encerra o próprio step (responsabilidade do runner)
    - O sampler pode abrir sub-steps via `case.start_step(parent=handle)`,
      mas deve encerrá-los antes de retornar
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Union, runtime_checkable

from allure_trace.core.case import CaseContext
from allure_trace.core.types import StepHandle


@dataclass(frozen=True)
class SampleResult:
    """
    Resultado imutável da execução de um Sampler.

    Campos:
        - passed: resultado da amostra
        - fail_reason: motivo da falha (ignorado quando `passed`)
        - request / response: payloads anexados ao step quando presentes
        - mime_type: tipo MIME de request/response
        - parameters: parâmetros locais do step (ex.: username=admin)
    """

    passed: bool
    fail_reason: str = ""
    request: Optional[Union[str, bytes]] = None
    response: Optional[Union[str, bytes]] = None
    mime_type: str = "text/plain"
    parameters: Dict[str, str] = field(default_factory=dict)


@runtime_checkable
class Sampler(Protocol):
    """Interface mínima de um sampler: nome de exibição e `run`."""

    name: str

    def run(self, case: CaseContext, handle: StepHandle) -> SampleResult:
        ...
