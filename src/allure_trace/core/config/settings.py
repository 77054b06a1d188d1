# src/allure_trace/core/config/settings.py
"""
ReportSettings — interpretação tipada da configuração de reporte.

A configuração resolvida por `load_config` é um dicionário puro. Este
módulo a converte em um objeto imutável consumido pelo runner e pela
store de resultados.

Chaves reconhecidas (v1):

    report:
      results_dir: allure-results   # sobrescrito por $ALLURE_REPORT_PATH
      indent: null                  # null = JSON compacto
    tracking:
      propagation: case_only        # case_only | parent_chain
    runner:
      fail_fast: false
    case:
      labels:                       # labels aplicados a todo caso do runner
        - {name: host, value: ci-runner-01}

Limites explícitos:
    - Chaves desconhecidas são ignoradas
    - Não valida existência do diretório de resultados
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from ..types import FailurePropagation, Label
from .errors import InvalidSettingError
from .merge import deep_merge


RESULTS_DIR_ENV = "ALLURE_REPORT_PATH"

DEFAULT_CONFIG: Dict[str, Any] = {
    "report": {"results_dir": "allure-results"},
    "tracking": {"propagation": FailurePropagation.CASE_ONLY.value},
    "runner": {"fail_fast": False},
    "case": {"labels": []},
}


@dataclass(frozen=True)
class ReportSettings:
    """Configuração efetiva de reporte (imutável)."""

    results_dir: Path = Path("allure-results")
    indent: Optional[int] = None
    propagation: FailurePropagation = FailurePropagation.CASE_ONLY
    fail_fast: bool = False
    default_labels: Tuple[Label, ...] = field(default_factory=tuple)

    @classmethod
    def from_config(
        cls,
        config: Optional[Dict[str, Any]] = None,
        *,
        env: Optional[Mapping[str, str]] = None,
    ) -> "ReportSettings":
        """
        Constrói as settings a partir de uma configuração resolvida.

        A configuração fornecida é mesclada sobre `DEFAULT_CONFIG`. A
        variável de ambiente `ALLURE_REPORT_PATH`, quando definida e não
        vazia, tem precedência sobre `report.results_dir`.

        Raises:
            InvalidSettingError: valor presente porém inválido.
            ConfigTypeConflictError: tipo incompatível com o default.
        """
        env = os.environ if env is None else env
        cfg = deep_merge(DEFAULT_CONFIG, config or {})

        report = cfg["report"]
        results_dir = env.get(RESULTS_DIR_ENV) or report.get("results_dir")
        if not results_dir:
            raise InvalidSettingError("report.results_dir não pode ser vazio")

        indent = report.get("indent")
        if indent is not None and (isinstance(indent, bool) or not isinstance(indent, int) or indent < 0):
            raise InvalidSettingError(f"report.indent inválido: {indent!r}")

        raw_policy = cfg["tracking"].get("propagation")
        try:
            propagation = FailurePropagation(raw_policy)
        except ValueError:
            allowed = [p.value for p in FailurePropagation]
            raise InvalidSettingError(
                f"tracking.propagation inválido: {raw_policy!r} (permitidos: {allowed})"
            ) from None

        fail_fast = cfg["runner"].get("fail_fast", False)
        if not isinstance(fail_fast, bool):
            raise InvalidSettingError(f"runner.fail_fast deve ser bool, recebido: {fail_fast!r}")

        labels = []
        for item in cfg["case"].get("labels") or []:
            if not isinstance(item, dict) or "name" not in item or "value" not in item:
                raise InvalidSettingError(f"case.labels: entrada inválida {item!r}")
            labels.append(Label(name=str(item["name"]), value=str(item["value"])))

        return cls(
            results_dir=Path(results_dir),
            indent=indent,
            propagation=propagation,
            fail_fast=fail_fast,
            default_labels=tuple(labels),
        )
