# src/allure_trace/core/types.py
"""
Tipos canônicos do allure-trace.

Este módulo define os enums e registros de valor que compõem o trace de
um caso de teste e que são projetados diretamente no documento Allure
(`*-result.json`).

Componentes principais:
    - CaseStatus / StepStatus → estados de resultado de casos e steps
    - Stage                   → fase de ciclo de vida (running, finished)
    - FailurePropagation      → política de propagação de falhas na árvore
    - StatusDetails           → mensagem de falha de um step
    - Label, Link, Parameter  → metadados chave/valor
    - Attachment              → referência a um payload gravado externamente
    - StepHandle              → referência opaca a um step aberto

Princípios fundamentais:
    - Enums possuem valores textuais idênticos aos do schema Allure
    - Registros de metadado são imutáveis (frozen)
    - Nenhuma lógica de ciclo de vida vive neste módulo

Limites explícitos:
    - Não serializa para JSON (responsabilidade de `report.result_json`)
    - Não valida semântica de nomes de labels ou tipos MIME
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CaseStatus(str, Enum):
    """
    Resultado final de um caso de teste.

    A ausência de status (caso ainda não resolvido) é representada por
    `None` no `CaseContext`, nunca por um membro deste enum.

    Invariantes:
        - FAILED é absorvente: uma vez atingido, o caso não volta a PASSED
        - PASSED só é atribuído por `finish_case` quando nenhum step falhou
    """
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class StepStatus(str, Enum):
    """Estado de um step: RUNNING ao ser criado, PASSED/FAILED ao encerrar."""
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"


class Stage(str, Enum):
    """
    Fase de ciclo de vida de um caso ou step.

    O stage é independente do resultado: um step pode estar FINISHED e
    FAILED ao mesmo tempo.
    """
    RUNNING = "running"
    FINISHED = "finished"


class FailurePropagation(str, Enum):
    """
    Política de propagação de falhas de steps.

    Políticas:
        - CASE_ONLY: uma falha marca apenas o caso como FAILED; steps
          intermediários não herdam a falha de seus descendentes
        - PARENT_CHAIN: além do caso, todos os ancestrais do step que
          falhou são marcados como FAILED (de forma persistente)
    """
    CASE_ONLY = "case_only"
    PARENT_CHAIN = "parent_chain"


@dataclass
class StatusDetails:
    """
    Detalhes de status de um step.

    `message` é string vazia em steps bem-sucedidos e carrega o motivo da
    falha caso contrário. A instância existe sempre (nunca é `None`).
    """

    message: str = ""


@dataclass(frozen=True)
class Label:
    """Label Allure (ex.: feature=Log In, story=Positive, tag=regress)."""

    name: str
    value: str


@dataclass(frozen=True)
class Link:
    """Link externo (ex.: issue → https://tracker/issue/123)."""

    name: str
    url: str


@dataclass(frozen=True)
class Parameter:
    """Parâmetro chave/valor de caso ou step (ex.: username=admin)."""

    name: str
    value: str


@dataclass(frozen=True)
class Attachment:
    """
    Referência a um artefato gravado fora do core.

    Campos:
        - name: papel do artefato (ex.: "Request", "Response")
        - source: nome do arquivo sob o diretório de resultados
          (ex.: "<case_uuid>-<token>")
        - type: tipo MIME (ex.: "application/json", "text/plain")
    """

    name: str
    source: str
    type: str


@dataclass(frozen=True)
class StepHandle:
    """
    Referência opaca a um step criado por `CaseContext.start_step`.

    O handle só é válido para o caso que o emitiu (`case_uuid`). Handles
    construídos manualmente ou vindos de outro caso são rejeitados sem
    alterar a árvore.
    """

    case_uuid: str
    step_id: str
