# src/allure_trace/core/ids.py
"""
Geração de identificadores e relógio canônico do allure-trace.

Este módulo concentra as duas únicas fontes de não-determinismo do core:
    - identificadores únicos (UUID4) de casos e de attachments
    - o instante atual em milissegundos desde epoch

Decisões arquiteturais:
    - Identificadores são strings UUID4 canônicas (36 caracteres)
    - Timestamps são sempre inteiros em milissegundos (epoch, UTC)
    - Nenhum estado global ou contador compartilhado é mantido

Limites explícitos:
    - Não garante ordenação entre identificadores
    - Não persiste identificadores já emitidos
"""

from __future__ import annotations

import time
import uuid


def new_uuid() -> str:
    """Gera um identificador UUID4 canônico (forma textual com hífens)."""
    return str(uuid.uuid4())


def fresh_token() -> str:
    """
    Gera um token aleatório para compor identificadores derivados.

    Usado por `CaseContext.next_attachment_source()` para produzir o sufixo
    de cada `source` de attachment (`"<case_uuid>-<token>"`).
    """
    return str(uuid.uuid4())


def now_millis() -> int:
    """Retorna o instante atual em milissegundos desde epoch (UTC)."""
    return time.time_ns() // 1_000_000
