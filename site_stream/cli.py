# === FILE: site_stream/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска SiteStream через командную строку.

Команды:
  serve     Запустить WebSocket-сервер обхода
  crawl     Обойти сайт локально и вывести/сохранить результат
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...; по умолчанию log_level из конфига)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Команда crawl опции:
  --limit INT         Макс. число страниц (override max_pages)
  --json PATH         Сохранить JSON в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)

Дополнительно:
  --version, -v       Показать версию SiteStream

Пример:
  site-stream crawl https://example.com --limit 50 --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from site_stream import __version__
from site_stream.config import load_config
from site_stream.engine import start_crawl
from site_stream.logger import init_logging
from site_stream.report.json_report import render_json
from site_stream.server.app import run_server

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteStream, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML или JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default=None,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования (override log_level, по умолчанию из конфига)'
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
    """Группа команд SiteStream CLI."""
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    init_logging(
        cfg,
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default=None, help='Адрес для прослушивания (override host)')
@click.option('--port', '-p', type=int, default=None, help='TCP-порт (override port)')
@click.pass_context
def serve(ctx, host, port):
    """Запустить WebSocket-сервер обхода."""
    cfg = ctx.obj['config']
    overrides = {k: v for k, v in (('host', host), ('port', port)) if v is not None}
    run_server(cfg.model_copy(update=overrides))


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Макс. число страниц для обхода (override max_pages)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-результат в файл'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.pass_context
def crawl(ctx, url, limit, json_output, pretty):
    """Обойти сайт, начиная с URL, и вывести извлечённые секции."""
    cfg = ctx.obj['config']
    if limit is not None:
        cfg = cfg.model_copy(update={'max_pages': limit})

    async def echo_visiting(event):
        if 'visiting' in event:
            click.echo(f"Visiting {event['visiting']}", err=True)

    try:
        records = asyncio.run(start_crawl(cfg, url, emit=echo_visiting))
    except ValueError as e:
        print_error(f'Некорректный URL: {e}')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if json_output:
        try:
            saved = render_json(records, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')
        return

    indent = 2 if pretty else None
    click.echo(json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=indent))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
