# tree_crawler/report/json_report.py

"""
Генерация JSON-отчёта для проекта TreeCrawler.

Сериализация объекта CrawlReport в файл.
"""
import json
from pathlib import Path

from tree_crawler.aggregator import CrawlReport


def render_json(report: CrawlReport, output_path: Path | str) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект CrawlReport с данными обхода
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from tree_crawler.report.json_report import render_json
    report_path = render_json(report, 'reports/report.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = {
        'seed_url': report.seed_url,
        'max_depth': report.max_depth,
        'pages': report.pages,
        'failures': report.failures,
    }

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
