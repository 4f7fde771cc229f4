#!/usr/bin/env python3
"""
Точка входа для запуска краулера TreeCrawler через командную строку.

Команды:
  crawl     Запустить обход по конфигу и выводить результаты по мере поступления
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML-конфигу (default: configs/default.yaml)
  --depth INT         Максимальная глубина обхода (override max_depth)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Команда crawl опции:
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблонами
  --scan-timeout SEC  Таймаут всего обхода (секунд)

Дополнительно:
  --version, -v       Показать версию TreeCrawler

Пример:
  tree-crawler --config configs/default.yaml --depth 3 crawl --json report.json
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import List

import click

from tree_crawler import __version__
from tree_crawler.aggregator import aggregate_results
from tree_crawler.config import load_config
from tree_crawler.crawler.models import FetchError, PageData
from tree_crawler.engine import stream_scan
from tree_crawler.logger import init_logging, logger
from tree_crawler.report.html_report import render_html
from tree_crawler.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def format_found(page: PageData) -> str:
    """Строка результата в стиле `found: <content> "<url>"`."""
    return f'found: {page.content} {json.dumps(page.url, ensure_ascii=False)}'


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='TreeCrawler, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default='configs/default.yaml',
    show_default=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--depth', '-d', 'depth',
    type=int,
    default=None,
    help='Максимальная глубина обхода (override max_depth)'
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
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, depth, log_level, log_file, log_format):
    """Группа команд TreeCrawler CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    if depth is not None:
        cfg = cfg.model_copy(update={'max_depth': depth})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами (по умолчанию встроенный шаблон)'
)
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.pass_context
def crawl_command(ctx, json_output, html_output, template_dir, scan_timeout):
    """Запустить обход и вывести результаты или сохранить отчёты."""
    cfg = ctx.obj['config']
    logger.info('Starting crawl: %s (depth %d)', cfg.seed_url, cfg.max_depth)
    streaming = not json_output and not html_output
    pages: List[PageData] = []
    failures: List[FetchError] = []

    async def _consume() -> None:
        async for page in stream_scan(cfg, failures=failures):
            pages.append(page)
            if streaming:
                click.echo(format_found(page))

    try:
        if scan_timeout:
            asyncio.run(asyncio.wait_for(_consume(), timeout=scan_timeout))
        else:
            asyncio.run(_consume())
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {scan_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    logger.info('Найдено страниц: %d, ошибок загрузки: %d', len(pages), len(failures))
    if streaming:
        return

    report = aggregate_results(pages, failures, seed_url=cfg.seed_url, max_depth=cfg.max_depth)

    if json_output:
        try:
            saved_json = render_json(report, json_output)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
