# src/allure_trace/report/result_json.py
"""
Serializer canônico do documento Allure (`<uuid>-result.json`).

Este módulo mapeia um `CaseContext` para o schema de resultado do Allure
de forma pura e determinística. A inclusão de cada campo opcional é
decidida explicitamente por este encoder, campo a campo, sem reflexão
sobre atributos do objeto.

Regras de emissão:
    - Campos com valor `None` são omitidos (nunca emitidos como `null`)
    - `steps` é sempre emitido, no caso e em cada step (possivelmente `[]`)
    - `labels`, `links`, `parameters` e `attachments` vazios são omitidos
    - `statusDetails` é emitido em todo step (mensagem vazia em sucesso)
    - Timestamps são inteiros em epoch ms, nunca datas formatadas
    - A ordem das chaves é fixa para entradas idênticas

Ordem das chaves:
    caso: uuid, historyId, name, description, fullName, status, stage,
          start, stop, labels, links, parameters, steps
    step: name, status, stage, start, stop, statusDetails, attachments,
          parameters, steps

Falhas:
    Qualquer valor não codificável (timestamp não inteiro/não finito,
    texto que não é `str`, string com surrogates isolados) levanta
    `SerializationError` indicando o caminho do campo. Nenhum campo é
    descartado silenciosamente.

Limites explícitos:
    - Não grava arquivos (responsabilidade de `ResultsStore`)
    - Não valida o contrato de ciclo de vida (steps em execução são
      serializados como estão)
"""

from __future__ import annotations

import json
import math
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from allure_trace.core.case import CaseContext
from allure_trace.core.exceptions import SerializationError
from allure_trace.core.step import TestStep


RESULT_SUFFIX = "-result.json"


def result_filename(case: CaseContext) -> str:
    """Nome canônico do documento de resultado: `"<uuid>-result.json"`."""
    return f"{case.uuid}{RESULT_SUFFIX}"


# ---------------------------------------------------------------------------
# Codificação de valores escalares
# ---------------------------------------------------------------------------

def _fail(path: str, reason: str, value: Any) -> SerializationError:
    return SerializationError(
        message=f"Valor não codificável em '{path}': {reason}",
        details={"field": path, "value": repr(value)},
        hint="Corrija o valor registrado no caso antes de gerar o documento.",
    )


def _timestamp(value: Any, path: str) -> int:
    if isinstance(value, bool):
        raise _fail(path, "timestamp booleano", value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise _fail(path, "timestamp não finito", value)
        return int(value)
    raise _fail(path, f"timestamp deve ser inteiro (epoch ms), recebido {type(value).__name__}", value)


def _text(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise _fail(path, f"texto deve ser str, recebido {type(value).__name__}", value)
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise _fail(path, "string não codificável em UTF-8", value) from e
    return value


def _enum_text(value: Any, path: str) -> str:
    if isinstance(value, Enum):
        value = value.value
    return _text(value, path)


def _pairs(items: Sequence[Any], value_attr: str, path: str) -> List[Dict[str, str]]:
    return [
        {
            "name": _text(item.name, f"{path}[{i}].name"),
            value_attr: _text(getattr(item, value_attr), f"{path}[{i}].{value_attr}"),
        }
        for i, item in enumerate(items)
    ]


# ---------------------------------------------------------------------------
# Documento
# ---------------------------------------------------------------------------

def _step_document(step: TestStep, path: str) -> Dict[str, Any]:
    doc: Dict[str, Any] = {"name": _text(step.name, f"{path}.name")}

    if step.status is not None:
        doc["status"] = _enum_text(step.status, f"{path}.status")
    if step.stage is not None:
        doc["stage"] = _enum_text(step.stage, f"{path}.stage")
    doc["start"] = _timestamp(step.start, f"{path}.start")
    if step.stop is not None:
        doc["stop"] = _timestamp(step.stop, f"{path}.stop")

    if step.status_details is not None:
        doc["statusDetails"] = {"message": _text(step.status_details.message, f"{path}.statusDetails.message")}

    if step.attachments:
        doc["attachments"] = [
            {
                "name": _text(a.name, f"{path}.attachments[{i}].name"),
                "source": _text(a.source, f"{path}.attachments[{i}].source"),
                "type": _text(a.type, f"{path}.attachments[{i}].type"),
            }
            for i, a in enumerate(step.attachments)
        ]
    if step.parameters:
        doc["parameters"] = _pairs(step.parameters, "value", f"{path}.parameters")

    doc["steps"] = [_step_document(child, f"{path}.steps[{i}]") for i, child in enumerate(step.steps)]
    return doc


def to_document(case: CaseContext) -> Dict[str, Any]:
    """
    Converte um caso no documento Allure (dict serializável em JSON).

    A função é pura: não altera o caso e produz a mesma estrutura, com a
    mesma ordem de chaves, para o mesmo estado de entrada.

    Args:
        case (CaseContext): Caso a ser convertido (tipicamente já encerrado).

    Returns:
        Dict[str, Any]: Documento no schema de resultado do Allure.

    Raises:
        SerializationError: Se algum valor não puder ser codificado.
    """
    doc: Dict[str, Any] = {
        "uuid": _text(case.uuid, "uuid"),
        "historyId": _text(case.history_id, "historyId"),
    }
    if case.name is not None:
        doc["name"] = _text(case.name, "name")
    if case.description is not None:
        doc["description"] = _text(case.description, "description")
    if case.full_name is not None:
        doc["fullName"] = _text(case.full_name, "fullName")
    if case.status is not None:
        doc["status"] = _enum_text(case.status, "status")
    if case.stage is not None:
        doc["stage"] = _enum_text(case.stage, "stage")
    doc["start"] = _timestamp(case.start_millis, "start")
    doc["stop"] = _timestamp(case.stop_millis, "stop")

    if case.labels:
        doc["labels"] = _pairs(case.labels, "value", "labels")
    if case.links:
        doc["links"] = _pairs(case.links, "url", "links")
    if case.parameters:
        doc["parameters"] = _pairs(case.parameters, "value", "parameters")

    doc["steps"] = [_step_document(step, f"steps[{i}]") for i, step in enumerate(case.steps)]
    return doc


def to_json(case: CaseContext, *, indent: Optional[int] = None) -> str:
    """
    Serializa o caso como texto JSON do documento Allure.

    Decisões arquiteturais:
        - `allow_nan=False`: valores não finitos nunca chegam ao arquivo
        - `ensure_ascii=False`: textos são preservados em UTF-8
        - A ordem das chaves segue `to_document` (sem `sort_keys`)

    Raises:
        SerializationError: Se o documento não puder ser codificado.
    """
    doc = to_document(case)
    try:
        return json.dumps(doc, ensure_ascii=False, allow_nan=False, indent=indent)
    except (TypeError, ValueError) as e:
        raise SerializationError(
            message="Falha ao codificar o documento Allure em JSON",
            details={"case_uuid": case.uuid, "error": str(e)},
        ) from e
