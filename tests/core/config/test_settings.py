# tests/core/config/test_settings.py
"""
Testes da interpretação tipada da configuração (ReportSettings).

Os testes asseguram que:
- sem configuração, os defaults são aplicados
- ALLURE_REPORT_PATH tem precedência sobre report.results_dir
- valores inválidos levantam InvalidSettingError com mensagem explícita
- labels padrão são convertidos em Label

Limites explícitos:
    - Não valida leitura de arquivos (ver test_loader)
"""

from pathlib import Path

import pytest
import yaml

from allure_trace.core.config import ConfigTypeConflictError, InvalidSettingError
from allure_trace.core.config.settings import RESULTS_DIR_ENV, ReportSettings
from allure_trace.core.types import FailurePropagation, Label


def test_defaults_without_config(no_env):
    settings = ReportSettings.from_config(None, env=no_env)
    assert settings == ReportSettings()
    assert settings.results_dir == Path("allure-results")
    assert settings.indent is None
    assert settings.propagation == FailurePropagation.CASE_ONLY
    assert settings.fail_fast is False
    assert settings.default_labels == ()


def test_from_yaml_config(no_env, report_defaults_yaml):
    settings = ReportSettings.from_config(yaml.safe_load(report_defaults_yaml), env=no_env)
    assert settings.indent == 2
    assert settings.default_labels == (Label(name="host", value="ci-runner-01"),)


def test_local_values_are_interpreted(no_env, report_local_yaml):
    settings = ReportSettings.from_config(yaml.safe_load(report_local_yaml), env=no_env)
    assert settings.results_dir == Path("out/results")
    assert settings.propagation == FailurePropagation.PARENT_CHAIN
    assert settings.fail_fast is True


def test_env_overrides_results_dir(tmp_path):
    env = {RESULTS_DIR_ENV: str(tmp_path / "from-env")}
    settings = ReportSettings.from_config({"report": {"results_dir": "ignored"}}, env=env)
    assert settings.results_dir == tmp_path / "from-env"


def test_empty_env_value_is_ignored():
    settings = ReportSettings.from_config({"report": {"results_dir": "cfg"}}, env={RESULTS_DIR_ENV: ""})
    assert settings.results_dir == Path("cfg")


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv(RESULTS_DIR_ENV, "/tmp/allure-env")
    assert ReportSettings.from_config().results_dir == Path("/tmp/allure-env")


@pytest.mark.parametrize("indent", [-1, True, "2"])
def test_invalid_indent(no_env, indent):
    with pytest.raises(InvalidSettingError):
        ReportSettings.from_config({"report": {"indent": indent}}, env=no_env)


def test_invalid_propagation(no_env):
    with pytest.raises(InvalidSettingError) as exc:
        ReportSettings.from_config({"tracking": {"propagation": "everything"}}, env=no_env)
    assert "parent_chain" in str(exc.value)


def test_fail_fast_type_conflict(no_env):
    with pytest.raises(ConfigTypeConflictError):
        ReportSettings.from_config({"runner": {"fail_fast": "yes"}}, env=no_env)


@pytest.mark.parametrize("labels", [["host"], [{"name": "host"}]])
def test_invalid_label_entries(no_env, labels):
    with pytest.raises(InvalidSettingError):
        ReportSettings.from_config({"case": {"labels": labels}}, env=no_env)


def test_settings_are_immutable(no_env):
    settings = ReportSettings.from_config(None, env=no_env)
    with pytest.raises(AttributeError):
        settings.fail_fast = True
