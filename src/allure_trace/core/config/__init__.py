# src/allure_trace/core/config/__init__.py
"""
Camada de configuração do allure-trace.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução da configuração final via deep-merge determinístico
    - Interpretação tipada em `ReportSettings`

Limites explícitos:
    - Não registra casos nem steps
    - Não grava arquivos
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    InvalidSettingError,
    UnsupportedConfigFormatError,
)
from .loader import load_config
from .merge import deep_merge
from .settings import DEFAULT_CONFIG, RESULTS_DIR_ENV, ReportSettings

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "InvalidSettingError",
    "UnsupportedConfigFormatError",
    "load_config",
    "deep_merge",
    "DEFAULT_CONFIG",
    "RESULTS_DIR_ENV",
    "ReportSettings",
]
