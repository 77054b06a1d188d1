# src/allure_trace/engine/runner.py
"""
CaseRunner — condução de um caso de teste a partir de samplers.

O runner reproduz o ciclo de uso do rastreador por um motor de testes:

    start_case → (start_step → sampler.run → anexos → end_step)* →
    finish_case → contadores → <uuid>-result.json

Guardrails:
- Exceções levantadas por um sampler são convertidas em TraceErrorPayload
  e registradas como falha do step (`"<Tipo>: <mensagem>"`), sem stack trace.
- Falhas de I/O ao gravar request/response (`OSError`) também encerram o
  step como FAILED; a execução do caso continua.
- Violações de contrato do próprio rastreador (TraceException levantada
  pelo core fora do sampler) não são capturadas.
- Com `fail_fast`, a primeira falha interrompe a execução; os samplers
  restantes não geram steps e são listados em `RunOutcome.skipped`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from allure_trace.core.case import CaseContext
from allure_trace.core.config.settings import ReportSettings
from allure_trace.core.exceptions import exception_to_error
from allure_trace.core.ids import now_millis
from allure_trace.core.types import CaseStatus, StepHandle
from allure_trace.persistence.results_store import ResultsStore

from .sampler import Sampler, SampleResult


REQUEST_ATTACHMENT = "Request"
RESPONSE_ATTACHMENT = "Response"


@dataclass(frozen=True)
class RunOutcome:
    """Resultado agregado da condução de um caso."""

    case: CaseContext
    result_path: Optional[str] = None
    skipped: List[str] = field(default_factory=list)


class CaseRunner:
    """Runner canônico de um caso (um CaseContext por execução)."""

    def __init__(
        self,
        *,
        settings: Optional[ReportSettings] = None,
        store: Optional[ResultsStore] = None,
    ):
        self.settings: ReportSettings = settings or ReportSettings()
        self.store: Optional[ResultsStore] = store

    @classmethod
    def from_settings(cls, settings: ReportSettings) -> "CaseRunner":
        """Cria um runner que grava no `results_dir` das settings."""
        store = ResultsStore(results_dir=settings.results_dir, indent=settings.indent)
        return cls(settings=settings, store=store)

    def new_case(self) -> CaseContext:
        case = CaseContext(propagation=self.settings.propagation)
        for label in self.settings.default_labels:
            case.add_label(label.name, label.value)
        return case

    # ------------------------------------------------------------------
    # Execução de um sampler
    # ------------------------------------------------------------------
    def _attach(self, case: CaseContext, handle: StepHandle, result: SampleResult) -> None:
        if self.store is None:
            return
        for role, payload in ((REQUEST_ATTACHMENT, result.request), (RESPONSE_ATTACHMENT, result.response)):
            if payload is not None:
                self.store.attach(case, handle, name=role, content=payload, mime_type=result.mime_type)

    def _run_sampler(self, case: CaseContext, sampler: Sampler) -> bool:
        handle = case.start_step(sampler.name, now_millis())
        try:
            result = sampler.run(case, handle)
            if not isinstance(result, SampleResult):
                raise TypeError(f"Sampler.run deve retornar SampleResult, recebido {type(result).__name__}")
        except Exception as e:
            error = exception_to_error(e)
            case.log(level="ERROR", message="sampler_error", step_id=handle.step_id, error=error.to_dict())
            case.end_step(handle, now_millis(), False, error.as_fail_reason())
            return False

        for name, value in result.parameters.items():
            case.add_step_parameter(handle, name, value)
        try:
            self._attach(case, handle, result)
        except OSError as e:
            error = exception_to_error(e)
            case.log(level="ERROR", message="attachment_error", step_id=handle.step_id, error=error.to_dict())
            case.end_step(handle, now_millis(), False, error.as_fail_reason())
            return False
        case.end_step(handle, now_millis(), result.passed, result.fail_reason)
        return result.passed

    # ------------------------------------------------------------------
    # Execução do caso
    # ------------------------------------------------------------------
    def run(
        self,
        *,
        name: str,
        samplers: Sequence[Sampler],
        description: str = "",
        case: Optional[CaseContext] = None,
    ) -> RunOutcome:
        """Conduz um caso completo e grava o documento quando há store.

        Args:
            name: Nome de exibição do caso.
            samplers: Samplers executados em ordem, um step cada.
            description: Descrição do caso.
            case: Caso pré-configurado (metadados já definidos); quando
                omitido, um novo caso é criado via `new_case`.
        """
        if case is None:
            case = self.new_case()
        case.start_case(name, description, now_millis())

        skipped: List[str] = []
        for i, sampler in enumerate(samplers):
            passed = self._run_sampler(case, sampler)
            if not passed and self.settings.fail_fast:
                skipped = [s.name for s in samplers[i + 1:]]
                break

        case.finish_case(now_millis())
        case.increment_summary()
        if case.status == CaseStatus.FAILED:
            case.increment_failed()
        else:
            case.increment_passed()

        result_path = None
        if self.store is not None:
            result_path = str(self.store.write_result(case))

        return RunOutcome(case=case, result_path=result_path, skipped=skipped)
