# site_stream/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteStream.

Сериализация списка PageRecord в файл в том же виде, что и payload ``scrapedData``.
"""
import json
from pathlib import Path
from typing import Iterable

from site_stream.crawler.models import PageRecord


def render_json(records: Iterable[PageRecord], output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет результаты обхода в формате JSON по указанному пути.

    :param records: страницы, собранные CrawlSession
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 вместо компактной записи
    :return: Path сохранённого файла

    Пример:
    ```python
    from site_stream.report.json_report import render_json
    report_path = render_json(records, 'reports/scraped.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = [record.to_dict() for record in records]

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2 if pretty else None)

    return output
