# tests/core/persistence/test_results_store.py
"""
Testes da ResultsStore (diretório de resultados Allure).

Os testes asseguram que:
- o documento é gravado em `{results_dir}/{uuid}-result.json`
- o conteúdo gravado é o documento serializado do caso
- a escrita é atômica: nenhum temporário ou arquivo parcial sobra
- uma falha de serialização não cria arquivo algum
- attachments são gravados antes de serem registrados no step

Limites explícitos:
    - Não valida a geração do relatório HTML
"""

import math
import os
from pathlib import Path

import pytest

try:
    from allure_trace.persistence.results_store import ResultsStore
    from allure_trace.report.result_json import to_document
    from allure_trace.core.exceptions import SerializationError, UnknownStepHandleError
except Exception as e:  # noqa: BLE001
    ResultsStore = None
    to_document = None
    SerializationError = None
    UnknownStepHandleError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que a ResultsStore e o serializer estejam disponíveis.
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing results store. Implement:\n"
            "- src/allure_trace/persistence/results_store.py (ResultsStore)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _files(directory: Path):
    return sorted(p.name for p in directory.iterdir())


def test_write_result_path_and_content(tmp_path: Path, login_case):
    _require_imports()
    store = ResultsStore(results_dir=tmp_path / "allure-results")

    path = store.write_result(login_case)

    assert path == tmp_path / "allure-results" / f"{login_case.uuid}-result.json"
    assert ResultsStore.load_result(path) == to_document(login_case)
    assert _files(path.parent) == [path.name]


def test_write_result_uses_indent(tmp_path: Path, login_case):
    _require_imports()
    compact = ResultsStore(results_dir=tmp_path / "compact").write_result(login_case)
    pretty = ResultsStore(results_dir=tmp_path / "pretty", indent=2).write_result(login_case)

    assert "\n" not in compact.read_text(encoding="utf-8")
    assert '\n  "historyId"' in pretty.read_text(encoding="utf-8")


def test_rewrite_replaces_previous_document(tmp_path: Path, started_case):
    _require_imports()
    store = ResultsStore(results_dir=tmp_path)
    store.write_result(started_case)
    started_case.finish_case(1300)
    path = store.write_result(started_case)

    assert ResultsStore.load_result(path)["stage"] == "finished"
    assert _files(tmp_path) == [path.name]


def test_serialization_error_writes_nothing(tmp_path: Path, started_case):
    """
    Verifica que um documento não codificável não deixa rastros no disco,
    nem mesmo o diretório de resultados.
    """
    _require_imports()
    results_dir = tmp_path / "allure-results"
    started_case.stop_millis = math.nan

    with pytest.raises(SerializationError):
        ResultsStore(results_dir=results_dir).write_result(started_case)

    assert not results_dir.exists()


def test_failed_replace_leaves_no_partial_file(tmp_path: Path, login_case, monkeypatch):
    _require_imports()
    store = ResultsStore(results_dir=tmp_path)

    def _boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", _boom)
    with pytest.raises(OSError):
        store.write_result(login_case)

    assert _files(tmp_path) == []


def test_write_result_logs_event(tmp_path: Path, login_case):
    _require_imports()
    path = ResultsStore(results_dir=tmp_path).write_result(login_case)
    event = login_case.events[-1]
    assert event["message"] == "result_written"
    assert event["path"] == str(path)


def test_attach_writes_payload_and_registers(tmp_path: Path, started_case):
    _require_imports()
    store = ResultsStore(results_dir=tmp_path)
    h = started_case.start_step("HTTP REQ: login", 1000)

    request = store.attach(started_case, h, name="Request", content='{"user": "admin"}', mime_type="application/json")
    response = store.attach(started_case, h, name="Response", content=b"\x00\x01binary")

    assert request.source.startswith(started_case.uuid + "-")
    assert request.source != response.source
    assert (tmp_path / request.source).read_text(encoding="utf-8") == '{"user": "admin"}'
    assert (tmp_path / response.source).read_bytes() == b"\x00\x01binary"
    assert started_case.step(h).attachments == [request, response]
    assert response.type == "text/plain"


def test_attach_with_unknown_handle_writes_nothing(tmp_path: Path, started_case):
    _require_imports()
    from allure_trace.core.case import CaseContext

    other = CaseContext()
    foreign = other.start_step("x", 0)

    with pytest.raises(UnknownStepHandleError):
        ResultsStore(results_dir=tmp_path).attach(started_case, foreign, name="Request", content="x")

    assert _files(tmp_path) == []


def test_document_references_written_attachments(tmp_path: Path, started_case):
    _require_imports()
    store = ResultsStore(results_dir=tmp_path)
    h = started_case.start_step("HTTP REQ: login", 1000)
    att = store.attach(started_case, h, name="Response", content="ok")
    started_case.end_step(h, 1100, True, "")
    started_case.finish_case(1200)

    doc = ResultsStore.load_result(store.write_result(started_case))

    sources = [a["source"] for a in doc["steps"][0]["attachments"]]
    assert sources == [att.source]
    assert (tmp_path / sources[0]).exists()


@pytest.mark.parametrize("source", ["../escape.txt", "nested/../../escape.txt", "/tmp/escape-absolute.txt"])
def test_attachment_source_must_stay_under_results_dir(tmp_path: Path, source: str):
    """
    Verifica que um `source` que escapa do diretório de resultados é
    rejeitado antes de qualquer escrita.
    """
    _require_imports()
    results_dir = tmp_path / "allure-results"
    store = ResultsStore(results_dir=results_dir)

    with pytest.raises(ValueError):
        store.write_attachment(source, "payload")

    assert not (tmp_path / "escape.txt").exists()
    assert not results_dir.exists()


def test_attachment_source_in_subdirectory_is_allowed(tmp_path: Path):
    _require_imports()
    store = ResultsStore(results_dir=tmp_path)
    path = store.write_attachment("payloads/response.json", "{}")
    assert path == tmp_path / "payloads" / "response.json"
    assert path.read_text(encoding="utf-8") == "{}"
