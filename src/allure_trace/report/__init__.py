# src/allure_trace/report/__init__.py
"""Geração do documento de resultado Allure a partir de um CaseContext."""

from .result_json import RESULT_SUFFIX, result_filename, to_document, to_json

__all__ = ["RESULT_SUFFIX", "result_filename", "to_document", "to_json"]
