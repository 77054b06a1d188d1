# tests/conftest.py
"""
Fixtures compartilhados para testes do allure-trace.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações de reporte mínimas e determinísticas (YAML)
- casos (CaseContext) em estados controlados
- samplers dummy para testes do runner

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Timestamps são fixos (epoch ms) para tornar documentos reprodutíveis
    - Samplers dummy utilizam duck typing em vez de herança
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture grava no diretório de resultados real
    - Nenhuma fixture depende de variáveis de ambiente

Este módulo existe como infraestrutura de teste e não
como validação funcional do rastreador.
"""

import pytest


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def report_defaults_yaml() -> str:
    """
    YAML de configuração padrão semelhante ao uso real em CI.

    Returns:
        str: Conteúdo de um `allure.defaults.yaml`.
    """
    return """\
report:
  results_dir: allure-results
  indent: 2
tracking:
  propagation: case_only
runner:
  fail_fast: false
case:
  labels:
    - {name: host, value: ci-runner-01}
"""


@pytest.fixture
def report_local_yaml() -> str:
    """
    YAML de override local (ex.: depuração em máquina de desenvolvedor).

    Returns:
        str: Conteúdo de um `allure.local.yaml`.
    """
    return """\
report:
  results_dir: out/results
tracking:
  propagation: parent_chain
runner:
  fail_fast: true
"""


@pytest.fixture
def no_env(monkeypatch) -> dict:
    """Ambiente vazio para `ReportSettings.from_config`."""
    monkeypatch.delenv("ALLURE_REPORT_PATH", raising=False)
    return {}


# =====================================================
# Case fixtures
# =====================================================

@pytest.fixture
def started_case():
    """
    CaseContext iniciado com nome, descrição e start fixo (1000 ms).

    Returns:
        CaseContext: Caso em stage RUNNING, sem steps.
    """
    from allure_trace.core.case import CaseContext

    case = CaseContext()
    case.start_case("Login", "desc", 1000)
    return case


@pytest.fixture
def login_case():
    """
    Caso canônico "Login": um step aprovado e um step com timeout.

    Returns:
        CaseContext: Caso FINISHED e FAILED com dois steps de primeiro nível.
    """
    from allure_trace.core.case import CaseContext

    case = CaseContext()
    case.start_case("Login", "desc", 1000)
    a = case.start_step("Open page", 1000)
    case.end_step(a, 1100, True, "")
    b = case.start_step("Submit", 1100)
    case.end_step(b, 1300, False, "timeout")
    case.finish_case(1300)
    return case


# =====================================================
# Runner fixtures
# =====================================================

@pytest.fixture
def DummySampler():
    """
    Fixture factory que fornece uma implementação duck-typed de Sampler.

    A classe retornada executa uma função opcional `action(case, handle)`
    antes de produzir um SampleResult configurado no construtor.

    Returns:
        type: Classe _DummySampler.
    """
    from allure_trace.engine.sampler import SampleResult

    class _DummySampler:
        def __init__(
            self,
            name: str = "HTTP REQ: login",
            passed: bool = True,
            fail_reason: str = "",
            request=None,
            response=None,
            parameters=None,
            action=None,
        ):
            self.name = name
            self._result = SampleResult(
                passed=passed,
                fail_reason=fail_reason,
                request=request,
                response=response,
                mime_type="application/json",
                parameters=dict(parameters or {}),
            )
            self._action = action
            self.calls = 0

        def run(self, case, handle):
            self.calls += 1
            if self._action is not None:
                self._action(case, handle)
            return self._result

    return _DummySampler
