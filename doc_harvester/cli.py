# === FILE: doc_harvester/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска DocHarvester через командную строку.

Команды:
  harvest   Собрать документацию по каталогу API и сохранить датасет
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Команда harvest опции:
  --catalog PATH      CSV-каталог (override catalog_path)
  --dataset DIR       Папка датасета (override dataset_dir)
  --json PATH         Сохранить JSON-отчёт о прогоне в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)

Дополнительно:
  --version, -v       Показать версию DocHarvester

Пример:
  doc-harvester harvest --catalog api-docs-urls.csv --dataset datasets --json run.json
"""
import sys
import json
from pathlib import Path

import click

from doc_harvester import __version__
from doc_harvester.config import load_config
from doc_harvester.engine import run_harvest
from doc_harvester.exceptions import CatalogReadError
from doc_harvester.logger import init_logging
from doc_harvester.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='DocHarvester, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд DocHarvester CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('harvest', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--catalog', 'catalog_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='CSV-каталог API (override catalog_path)'
)
@click.option(
    '--dataset', 'dataset_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Папка итогового датасета (override dataset_dir)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт о прогоне в файл'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.pass_context
def harvest(ctx, catalog_path, dataset_dir, json_output, pretty):
    """Собрать документацию и сформировать датасет."""
    cfg = ctx.obj['config']
    overrides = {}
    if catalog_path is not None:
        overrides['catalog_path'] = catalog_path
    if dataset_dir is not None:
        overrides['dataset_dir'] = dataset_dir
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    try:
        report = run_harvest(cfg)
    except CatalogReadError as e:
        print_error(f'Ошибка чтения каталога: {e}')

    if json_output:
        try:
            saved = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        return

    indent = 2 if pretty else None
    click.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=indent))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
