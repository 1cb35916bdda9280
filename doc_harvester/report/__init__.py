# File: doc_harvester/report/__init__.py
"""doc_harvester.report: сохранение итогового отчёта прогона."""

from doc_harvester.report.json_report import render_json

__all__ = ["render_json"]
