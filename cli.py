# cli.py

"""
Точка входа для запуска DocHarvester без установки пакета.

Пример запуска:
    python cli.py --config configs/default.yaml harvest --json reports/run.json
"""
from doc_harvester.cli import cli


if __name__ == '__main__':
    cli()
