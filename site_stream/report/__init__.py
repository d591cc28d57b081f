# File: site_stream/report/__init__.py
"""site_stream.report: сохранение результатов обхода в файлы."""

from site_stream.report.json_report import render_json

__all__ = ["render_json"]
