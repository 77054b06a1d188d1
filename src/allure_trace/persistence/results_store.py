"""Persistência canônica do diretório de resultados Allure (v1).

A store grava, sob um diretório de resultados:

- payloads de attachments em `{results_dir}/{source}`
- o documento do caso em `{results_dir}/{case_uuid}-result.json`

Estes nomes são o contrato de compatibilidade com o renderizador Allure
e não devem mudar.

Decisões (v1):
- Escrita atômica: arquivo temporário no mesmo diretório + `os.replace`.
  Uma falha nunca deixa um documento truncado no caminho final.
- Texto é gravado em UTF-8; bytes são gravados como estão.
- Erros de I/O propagam como `OSError` (sem retry).
- Metadata da gravação é registrada no Event Log do caso (evento explícito).

Limites explícitos:
- Não gera o relatório HTML (ferramenta externa `allure generate`)
- Não limpa resultados de execuções anteriores
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

from allure_trace.core.case import CaseContext
from allure_trace.core.types import Attachment, StepHandle
from allure_trace.report.result_json import result_filename, to_json


Payload = Union[str, bytes]


def _atomic_write(target: Path, data: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class ResultsStore:
    """Store canônica (v1) para o diretório de resultados Allure."""

    def __init__(self, *, results_dir: Union[str, Path], indent: Union[int, None] = None):
        self.results_dir = Path(results_dir)
        self.indent = indent

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def result_path(self, case: CaseContext) -> Path:
        return self.results_dir / result_filename(case)

    def attachment_path(self, source: str) -> Path:
        """Caminho do payload de um attachment; deve permanecer sob `results_dir`.

        Raises:
            ValueError: se `source` apontar para fora do diretório de resultados.
        """
        path = self.results_dir / source
        root = self.results_dir.resolve()
        if root not in path.resolve().parents:
            raise ValueError(f"source de attachment fora do diretório de resultados: {source!r}")
        return path

    # ------------------------------------------------------------------
    # Persist
    # ------------------------------------------------------------------
    def write_attachment(self, source: str, content: Payload) -> Path:
        """Grava o payload de um attachment sob o diretório de resultados.

        Raises:
            ValueError: se `source` escapar do diretório de resultados.
            OSError: se o filesystem rejeitar a escrita.
        """
        data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        path = self.attachment_path(source)
        _atomic_write(path, data)
        return path

    def write_result(self, case: CaseContext) -> Path:
        """Serializa o caso e grava `<uuid>-result.json` de forma atômica.

        A serialização ocorre antes de qualquer acesso ao disco: um
        `SerializationError` não cria arquivo algum.

        Raises:
            SerializationError: se o documento não puder ser codificado.
            OSError: se o filesystem rejeitar a escrita.
        """
        text = to_json(case, indent=self.indent)
        path = self.result_path(case)
        _atomic_write(path, text.encode("utf-8"))
        case.log(level="INFO", message="result_written", path=str(path))
        return path

    def attach(
        self,
        case: CaseContext,
        handle: StepHandle,
        *,
        name: str,
        content: Payload,
        mime_type: str = "text/plain",
    ) -> Attachment:
        """Grava o payload e registra o Attachment correspondente no step.

        O attachment só é registrado no step depois que o payload foi
        gravado com sucesso; uma falha de I/O não deixa referência órfã.
        """
        case.step(handle)
        source = case.next_attachment_source()
        path = self.write_attachment(source, content)
        attachment = case.add_attachment(handle, name, mime_type, source=source)
        case.log(
            level="INFO",
            message="attachment_written",
            step_id=handle.step_id,
            attachment=name,
            source=source,
            path=str(path),
        )
        return attachment

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------
    @staticmethod
    def load_result(path: Union[str, Path]) -> Dict[str, Any]:
        """Lê um documento de resultado previamente gravado."""
        return json.loads(Path(path).read_text(encoding="utf-8"))


__all__ = ["ResultsStore", "Payload"]
