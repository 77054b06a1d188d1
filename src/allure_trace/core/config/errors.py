# src/allure_trace/core/config/errors.py
"""
Exceções canônicas da camada de configuração do allure-trace.

Este módulo define a hierarquia de exceções levantadas durante o
carregamento, o merge e a interpretação da configuração de reporte.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma exceção representa falha de execução de um caso de teste

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não depende do core de casos/steps
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do allure-trace.

    Permite captura genérica de falhas de configuração, distinta de
    falhas de ciclo de vida ou de serialização do caso.
    """


class DefaultsNotFoundError(ConfigError):
    """
    Exceção levantada quando o arquivo de configuração base (defaults)
    não é encontrado no caminho especificado.

    Limites explícitos:
        - Não tenta inferir ou criar defaults automaticamente
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Exceção levantada quando o formato do arquivo de configuração
    não é suportado pelo loader.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """
    Exceção levantada quando o conteúdo raiz da configuração
    não é um dicionário (`dict`).
    """


class ConfigTypeConflictError(ConfigError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"report": {"indent": 2}}
        - override: {"report": "out/"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """


class InvalidSettingError(ConfigError):
    """
    Exceção levantada quando um valor de configuração existe mas não pode
    ser interpretado (ex.: política de propagação desconhecida, indent
    negativo).
    """
