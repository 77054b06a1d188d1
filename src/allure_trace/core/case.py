# src/allure_trace/core/case.py
"""
CaseContext — contexto canônico de um caso de teste.

Este módulo define o **CaseContext**, o agregado raiz que registra o trace
de execução de um único caso de teste: identidade, metadados, a árvore
ordenada de steps, contadores de execução e o ciclo de vida do caso.

O CaseContext é um valor explícito, criado pela rotina que conduz o caso
e passado por referência a cada step. Não existe estado global: casos
paralelos devem usar instâncias distintas.

Ciclo de vida:
    NEW ──start_case──▶ RUNNING ──finish_case──▶ FINISHED

Status do caso:
    - None (unset) ──end_step(passed=False)──▶ FAILED (absorvente)
    - None (unset) ──finish_case──▶ PASSED

Princípios fundamentais:
    - `uuid` é gerado uma única vez no construtor e nunca reatribuído
    - `history_id` é sempre igual a `uuid`
    - A ordem dos steps é a ordem de chamada de `start_step`
    - O aninhamento é explícito: `start_step(parent=handle)`
    - Violações de contrato nunca corrompem steps já registrados

Observabilidade:
    - Toda transição de ciclo de vida registra um evento estruturado
      em `events` (mesmo formato de `log`)
    - Violações não fatais (ex.: `start_case` repetido) são coletadas
      em `warnings`

Limites explícitos:
    - Não é thread-safe (um único dono por caso)
    - Não grava arquivos (responsabilidade de `ResultsStore`)
    - Não serializa para JSON (responsabilidade de `report.result_json`)
    - Contadores não são derivados de `steps`; o chamador os incrementa
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from .exceptions import CaseLifecycleError, UnknownStepHandleError
from .ids import fresh_token, new_uuid, now_millis
from .step import TestStep
from .types import (
    Attachment,
    CaseStatus,
    FailurePropagation,
    Label,
    Link,
    Parameter,
    Stage,
    StepHandle,
)


class CaseContext:
    """
    Agregado raiz do trace de um caso de teste.

    Campos canônicos:
    - uuid / history_id: identidade imutável do caso
    - name, description, full_name: metadados de exibição
    - status: None (unset) até ser resolvido; depois CaseStatus
    - stage: None antes de `start_case`; depois Stage
    - start_millis / stop_millis: epoch ms
    - labels, links, parameters: metadados ordenados (duplicatas permitidas)
    - steps: steps de primeiro nível, em ordem de criação
    - events / warnings: observabilidade estruturada (fora do documento)
    """

    def __init__(self, *, propagation: FailurePropagation = FailurePropagation.CASE_ONLY):
        self._uuid: str = new_uuid()
        self.propagation = FailurePropagation(propagation)

        self.name: Optional[str] = None
        self.description: str = ""
        self.full_name: Optional[str] = None
        self.status: Optional[CaseStatus] = None
        self.stage: Optional[Stage] = None
        self.start_millis: int = 0
        self.stop_millis: int = 0

        self.labels: List[Label] = []
        self.links: List[Link] = []
        self.parameters: List[Parameter] = []
        self.steps: List[TestStep] = []

        self._summary_count = 0
        self._passed_count = 0
        self._failed_count = 0
        self._skipped_count = 0

        self.events: List[Dict[str, Any]] = []
        self.warnings: List[str] = []

        # Registro de handles: step_id -> nó, step_id -> step_id do pai
        self._nodes: Dict[str, TestStep] = {}
        self._parents: Dict[str, Optional[str]] = {}

    # -----------------------------
    # Identidade
    # -----------------------------
    @property
    def uuid(self) -> str:
        return self._uuid

    @property
    def history_id(self) -> str:
        return self._uuid

    def next_attachment_source(self) -> str:
        """Gera um `source` de attachment único no caso: `"<uuid>-<token>"`."""
        return f"{self._uuid}-{fresh_token()}"

    # -----------------------------
    # Metadados
    # -----------------------------
    def set_full_name(self, full_name: str) -> None:
        self.full_name = full_name

    def add_label(self, name: str, value: str) -> None:
        self.labels.append(Label(name=name, value=value))

    def add_link(self, name: str, url: str) -> None:
        self.links.append(Link(name=name, url=url))

    def add_parameter(self, name: str, value: str) -> None:
        self.parameters.append(Parameter(name=name, value=value))

    # -----------------------------
    # Contadores
    # -----------------------------
    @property
    def summary_count(self) -> int:
        return self._summary_count

    @property
    def passed_count(self) -> int:
        return self._passed_count

    @property
    def failed_count(self) -> int:
        return self._failed_count

    @property
    def skipped_count(self) -> int:
        return self._skipped_count

    def increment_summary(self) -> None:
        self._summary_count += 1

    def increment_passed(self) -> None:
        self._passed_count += 1

    def increment_failed(self) -> None:
        self._failed_count += 1

    def increment_skipped(self) -> None:
        self._skipped_count += 1

    # -----------------------------
    # Ciclo de vida do caso
    # -----------------------------
    def start_case(self, name: str, description: str = "", start_millis: Optional[int] = None) -> None:
        """
        Inicia o caso: define nome, descrição, timestamp de início e
        `stage = running`.

        Chamadas repetidas sobrescrevem os valores anteriores; a repetição
        é registrada em `warnings`, sem exceção.
        """
        if self.stage is not None:
            self.add_warning(f"start_case chamado novamente (stage atual: {self.stage.value})")

        self.name = name
        self.description = description
        self.start_millis = now_millis() if start_millis is None else start_millis
        self.stage = Stage.RUNNING
        self.log(level="INFO", message="case_started", name=name, start=self.start_millis)

    def finish_case(self, stop_millis: Optional[int] = None) -> None:
        """
        Encerra o caso: define `stop_millis`, `stage = finished` e resolve o
        status para PASSED quando nenhum step falhou.

        Raises:
            CaseLifecycleError: se `start_case` ainda não foi chamado.
        """
        if self.stage is None:
            raise CaseLifecycleError(
                message="finish_case chamado antes de start_case",
                details={"case_uuid": self._uuid},
                hint="Chame start_case antes de registrar steps ou encerrar o caso.",
            )

        stop = now_millis() if stop_millis is None else stop_millis
        if stop < self.start_millis:
            self.add_warning(f"stop_millis ({stop}) anterior a start_millis ({self.start_millis})")
        running = [s.name for s in self.iter_steps() if not s.is_finished]
        if running:
            self.add_warning(f"caso encerrado com steps em execução: {running}")

        self.stop_millis = stop
        if self.status is None:
            self.status = CaseStatus.PASSED
        self.stage = Stage.FINISHED
        self.log(level="INFO", message="case_finished", status=self.status.value, stop=stop)

    # -----------------------------
    # Steps
    # -----------------------------
    def start_step(
        self,
        name: str,
        start_millis: Optional[int] = None,
        parent: Optional[StepHandle] = None,
    ) -> StepHandle:
        """
        Cria um step RUNNING e o anexa ao caso (ou ao step `parent`).

        Raises:
            CaseLifecycleError: se o caso já foi encerrado.
            UnknownStepHandleError: se `parent` não pertence a este caso.
        """
        if self.stage == Stage.FINISHED:
            raise CaseLifecycleError(
                message="start_step chamado após finish_case",
                details={"case_uuid": self._uuid, "step_name": name},
            )

        parent_node = self.step(parent) if parent is not None else None
        start = now_millis() if start_millis is None else start_millis

        if parent_node is None:
            node = TestStep(name=name, start=start)
            self.steps.append(node)
        else:
            node = parent_node.add_child(name, start)

        handle = StepHandle(case_uuid=self._uuid, step_id=fresh_token())
        self._nodes[handle.step_id] = node
        self._parents[handle.step_id] = parent.step_id if parent is not None else None
        self.log(level="INFO", message="step_started", step_id=handle.step_id, name=name, start=start)
        return handle

    def end_step(
        self,
        handle: StepHandle,
        stop_millis: Optional[int] = None,
        passed: bool = True,
        fail_reason: str = "",
    ) -> None:
        """
        Encerra o step referenciado e aplica a regra de propagação.

        Propagação:
            - falha com status do caso unset ou PASSED → caso FAILED
            - sucesso nunca reverte um caso FAILED
            - com `FailurePropagation.PARENT_CHAIN`, todos os ancestrais
              do step também são marcados como FAILED

        Raises:
            UnknownStepHandleError: se o handle não foi emitido por este caso.
        """
        node = self.step(handle)
        if node.is_finished:
            self.add_warning(f"end_step repetido para o step '{node.name}'")

        stop = now_millis() if stop_millis is None else stop_millis
        if stop < node.start:
            self.add_warning(f"step '{node.name}' encerrado antes do início ({stop} < {node.start})")

        node.finish(stop=stop, passed=passed, fail_reason=fail_reason)

        if not passed:
            if self.status is None or self.status == CaseStatus.PASSED:
                self.status = CaseStatus.FAILED
            if self.propagation == FailurePropagation.PARENT_CHAIN:
                for ancestor in self._ancestors(handle.step_id):
                    ancestor.mark_failed(f"step '{node.name}' falhou: {fail_reason}")

        self.log(
            level="INFO" if passed else "ERROR",
            message="step_finished",
            step_id=handle.step_id,
            name=node.name,
            status=node.status.value,
            stop=stop,
        )

    def step(self, handle: StepHandle) -> TestStep:
        """Resolve um handle para o nó correspondente."""
        if not isinstance(handle, StepHandle) or handle.case_uuid != self._uuid or handle.step_id not in self._nodes:
            raise UnknownStepHandleError(
                message="handle de step desconhecido para este caso",
                details={"case_uuid": self._uuid, "handle": repr(handle)},
                hint="Use apenas handles retornados por start_step do mesmo caso.",
            )
        return self._nodes[handle.step_id]

    def add_attachment(
        self,
        handle: StepHandle,
        name: str,
        mime_type: str,
        source: Optional[str] = None,
    ) -> Attachment:
        """Registra um attachment no step; gera o `source` quando omitido."""
        node = self.step(handle)
        attachment = Attachment(name=name, source=source or self.next_attachment_source(), type=mime_type)
        node.add_attachment(attachment)
        return attachment

    def add_step_parameter(self, handle: StepHandle, name: str, value: str) -> None:
        self.step(handle).add_parameter(name, value)

    def iter_steps(self) -> Iterator[TestStep]:
        """Percorre todos os steps do caso em profundidade (pré-ordem)."""
        for top in self.steps:
            yield from top.iter_steps()

    def _ancestors(self, step_id: str) -> Iterator[TestStep]:
        parent_id = self._parents.get(step_id)
        while parent_id is not None:
            yield self._nodes[parent_id]
            parent_id = self._parents.get(parent_id)

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, level: str, message: str, step_id: Optional[str] = None, **extra: Any) -> None:
        event = {
            "case_uuid": self._uuid,
            "step_id": step_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)
        self.log(level="WARNING", message=message)

    def __repr__(self) -> str:
        return (
            f"CaseContext(uuid={self._uuid!r}, name={self.name!r}, "
            f"status={self.status.value if self.status else None!r}, steps={len(self.steps)})"
        )
