# doc_harvester/report/json_report.py

"""
Генерация JSON-отчёта о прогоне DocHarvester.

Сериализация объекта HarvestReport в файл.
"""
import json
from pathlib import Path

from doc_harvester.engine import HarvestReport


def render_json(report: HarvestReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект HarvestReport с итогами прогона
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 вместо компактной записи
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
