"""
allure-trace — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do allure-trace e o payload
serializável usado para reportar falhas de samplers.

Objetivo:
- Permitir que o core levante exceções semânticas tipadas
- Evitar ValueError/RuntimeError genéricos em violações de contrato
- Converter exceções arbitrárias em um motivo de falha legível

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- Nenhuma exceção é silenciada pelo core.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class TraceException(Exception):
    """Base class para exceções internas do allure-trace.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Ciclo de vida
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class UnknownStepHandleError(TraceException):
    """Handle não foi emitido por `start_step` deste caso."""


@dataclass(eq=False)
class CaseLifecycleError(TraceException):
    """Operação chamada fora da ordem start_case → steps → finish_case."""


# ---------------------------------------------------------------------------
# Serialização
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class SerializationError(TraceException):
    """Valor do caso não pode ser codificado no documento Allure."""


# ---------------------------------------------------------------------------
# Payload de erro (runner)
# ---------------------------------------------------------------------------

SAMPLER_EXECUTION_ERROR = "SAMPLER_EXECUTION_ERROR"


@dataclass(frozen=True)
class TraceErrorPayload:
    """
    Payload canônico de falha de execução.

    Campos:
    - type: código estável do erro (nome da classe ou código do catálogo)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)

    def as_fail_reason(self) -> str:
        """Formata o erro como motivo de falha de step (`"<type>: <message>"`)."""
        return f"{self.type}: {self.message}"


def exception_to_error(exc: Exception) -> TraceErrorPayload:
    """Converte exceções em TraceErrorPayload (serializável, sem stack trace).

    Regras:
    - TraceException: preserva message/details/hint.
    - Outras exceções: tipo = nome da classe, mensagem = str(exc).
    """
    if isinstance(exc, TraceException):
        return TraceErrorPayload(
            type=exc.__class__.__name__,
            message=exc.message or "Erro de execução",
            details=dict(exc.details or {}),
            hint=exc.hint,
        )

    return TraceErrorPayload(
        type=exc.__class__.__name__,
        message=str(exc) or "Erro inesperado durante execução",
        details={"error_code": SAMPLER_EXECUTION_ERROR},
        hint="Verifique a requisição do sampler e o payload de resposta anexado",
    )
