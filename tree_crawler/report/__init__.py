"""tree_crawler.report: генерация отчётов (JSON и HTML) для CLI."""

from tree_crawler.report.html_report import DEFAULT_TEMPLATE_DIR, render_html
from tree_crawler.report.json_report import render_json

__all__ = ["render_json", "render_html", "DEFAULT_TEMPLATE_DIR"]
