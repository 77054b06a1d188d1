# src/allure_trace/core/step.py
"""
TestStep — nó recursivo da árvore de steps de um caso.

Um TestStep representa uma ação amostrada durante a execução de um caso
de teste (ex.: uma requisição HTTP, uma asserção). Cada nó é dono
exclusivo de seus filhos, attachments e parâmetros locais.

Princípios fundamentais:
    - A árvore é estritamente hierárquica: nós são anexados como filhos
      apenas no momento da criação e nunca são re-parentados
    - Um nó não mantém referência ao pai (sem ciclos possíveis)
    - A ordem de inserção de filhos, attachments e parâmetros é preservada

Invariantes:
    - `status_details` existe sempre (mensagem vazia em caso de sucesso)
    - `start <= stop` quando o step está FINISHED (violações são aceitas,
      mas detectáveis via `is_consistent()`)

Limites explícitos:
    - Não propaga falhas (responsabilidade do `CaseContext`)
    - Não emite eventos de log
    - Não serializa para JSON
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .types import Attachment, Parameter, Stage, StatusDetails, StepStatus


@dataclass
class TestStep:
    """
    Nó da árvore de steps.

    Campos:
        - name: nome de exibição (ex.: "HTTP REQ: login into the system")
        - start / stop: epoch ms de início e fim (`stop` é None até encerrar)
        - status: RUNNING até `finish`, depois PASSED ou FAILED
        - stage: RUNNING até `finish`, depois FINISHED
        - status_details: mensagem de falha (vazia em sucesso)
        - attachments / parameters / steps: coleções ordenadas do nó
    """

    # Evita que o pytest tente coletar a classe como suíte de testes.
    __test__ = False

    name: str
    start: int
    stop: Optional[int] = None
    status: StepStatus = StepStatus.RUNNING
    stage: Stage = Stage.RUNNING
    status_details: StatusDetails = field(default_factory=StatusDetails)
    attachments: List[Attachment] = field(default_factory=list)
    parameters: List[Parameter] = field(default_factory=list)
    steps: List["TestStep"] = field(default_factory=list)
    # Primeira falha recebida de um descendente (FailurePropagation.PARENT_CHAIN)
    propagated_failure: Optional[str] = field(default=None, repr=False)

    # -----------------------------
    # Construção da árvore
    # -----------------------------
    def add_child(self, name: str, start: int) -> "TestStep":
        child = TestStep(name=name, start=start)
        self.steps.append(child)
        return child

    def add_attachment(self, attachment: Attachment) -> None:
        self.attachments.append(attachment)

    def add_parameter(self, name: str, value: str) -> None:
        self.parameters.append(Parameter(name=name, value=value))

    # -----------------------------
    # Ciclo de vida
    # -----------------------------
    def finish(self, *, stop: int, passed: bool, fail_reason: str = "") -> None:
        """Encerra o step.

        Cada chamada redefine status e mensagem a partir de `passed`. A
        exceção é um step marcado por `mark_failed` (falha propagada de um
        descendente): ele permanece FAILED com a mensagem propagada mesmo
        quando encerrado com `passed=True`.
        """
        self.stop = stop
        self.stage = Stage.FINISHED
        if passed and self.propagated_failure is not None:
            self.status = StepStatus.FAILED
            self.status_details.message = self.propagated_failure
            return
        self.status = StepStatus.PASSED if passed else StepStatus.FAILED
        self.status_details.message = "" if passed else fail_reason

    def mark_failed(self, reason: str) -> None:
        """Marca o step como FAILED sem encerrá-lo (propagação de descendente)."""
        self.status = StepStatus.FAILED
        if self.propagated_failure is None:
            self.propagated_failure = reason
        if not self.status_details.message:
            self.status_details.message = reason

    @property
    def is_finished(self) -> bool:
        return self.stage == Stage.FINISHED

    def is_consistent(self) -> bool:
        if self.stop is None:
            return not self.is_finished
        return self.start <= self.stop

    # -----------------------------
    # Navegação
    # -----------------------------
    def iter_steps(self) -> Iterator["TestStep"]:
        """Percorre a subárvore em profundidade (pré-ordem), incluindo o próprio nó."""
        yield self
        for child in self.steps:
            yield from child.iter_steps()
