# === FILE: llms_txt/cli.py ===
#!/usr/bin/env python3
"""
Точка входа llms-txt: генерация llms.txt / llms-full.txt из командной строки.

Команды:
  init-config   Создать заготовку llms.config.yaml
  build         Собрать контент по конфигу и записать llms.txt
  crawl         Обойти sitemap и сохранить страницы как Markdown
  build-llms    Собрать llms-full.txt из сохранённых Markdown-файлов
  config        Показать проверенную конфигурацию в JSON

Общие опции:
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")
  --version, -v       Показать версию llms-txt

Пример:
  llms-txt build --config llms.config.yaml --out public/llms.txt --max-pages 50
"""
import sys
import asyncio
from pathlib import Path
from urllib.parse import urlsplit

import click
import yaml

from llms_txt import __version__
from llms_txt.config import DEFAULT_CONFIG_PATH, load_config, with_sitemap_overrides
from llms_txt.crawler.crawler import crawl_from_sitemap
from llms_txt.engine import collect_content
from llms_txt.logger import DEFAULT_FORMAT, init_logging, logger
from llms_txt.report import render, render_config_template, render_full
from llms_txt.sources.fs import load_full_documents

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

_SITEMAP_PASSTHROUGH = ("http://", "https://", "file://", "/", "./", "../")


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _load(config_path):
    try:
        return load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')


def _write(path: Path, text: str) -> Path:
    path = path.expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def resolve_sitemap_url(site_url: str, sitemap: str = None) -> str:
    """Абсолютные URL, file:// и локальные пути остаются как есть, прочее строится относительно сайта."""
    base = site_url.rstrip('/')
    if not sitemap:
        return f'{base}/sitemap.xml'
    if sitemap.startswith(_SITEMAP_PASSTHROUGH):
        return sitemap
    return f'{base}/{sitemap}'


def page_filename(url: str) -> str:
    """``https://x/docs/start`` -> ``docs_start.md``; корень сайта -> ``index.md``."""
    name = urlsplit(url).path.replace('/', '_').lstrip('_')
    return f'{name or "index"}.md'


def page_document(page) -> str:
    front = yaml.safe_dump(
        {'title': urlsplit(page.url).path or '/', 'url': page.url, 'fetchedAt': page.fetched_at},
        sort_keys=False,
        allow_unicode=True,
    )
    return f'---\n{front}---\n\n{page.markdown}\n'


config_option = click.option(
    '--config', '-c', 'config_path',
    default=str(DEFAULT_CONFIG_PATH),
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации (YAML или JSON).'
)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='llms-txt, version %(version)s')
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
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
def cli(log_level, log_file, log_format):
    """Генератор llms.txt для сайтов и документации."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )


@cli.command('init-config', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--path', 'path',
    default=str(DEFAULT_CONFIG_PATH),
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Куда записать заготовку'
)
@click.option('--force', is_flag=True, help='Перезаписать существующий файл')
@click.option('--title', default='Example Docs', show_default=True, help='Название сайта')
@click.option('--url', default='https://example.com', show_default=True, help='Базовый URL сайта')
def init_config(path, force, title, url):
    """Создать заготовку llms.config.yaml."""
    target = path.expanduser().resolve()
    if target.exists() and not force:
        print_error(f'{target} уже существует. Используйте --force для перезаписи.')
    try:
        saved = _write(target, render_config_template(title=title, url=url))
    except Exception as e:
        print_error(f'Ошибка при создании конфигурации: {e}')
    click.echo(f'Config template: {saved}')


@cli.command('build', context_settings=CONTEXT_SETTINGS)
@config_option
@click.option(
    '--out', '-o', 'out',
    default='public/llms.txt',
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Путь к итоговому llms.txt'
)
@click.option('--dry-run', is_flag=True, help='Вывести результат в stdout без записи файла')
@click.option('--sitemap', default=None, help='Временно переопределить URL sitemap')
@click.option('--max-pages', 'max_pages', type=int, default=None, help='Временный лимит страниц для обхода')
def build(config_path, out, dry_run, sitemap, max_pages):
    """Собрать контент из всех источников и записать llms.txt."""
    cfg = with_sitemap_overrides(_load(config_path), url=sitemap, max_pages=max_pages)
    try:
        items = asyncio.run(collect_content(cfg, cwd=config_path.expanduser().resolve().parent))
        markdown = render(cfg, items)
    except Exception as e:
        print_error(f'Ошибка при сборке llms.txt: {e}')

    if dry_run:
        click.echo(markdown, nl=False)
        return

    try:
        saved = _write(out, markdown)
    except Exception as e:
        print_error(f'Ошибка при сохранении llms.txt: {e}')
    click.echo(f'llms.txt: {saved}')


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@config_option
@click.option('--sitemap', default=None, help='URL или путь к sitemap (относительные считаются от URL сайта)')
@click.option('--include', default=None, help='Подстроки URL для включения, через запятую')
@click.option('--exclude', default=None, help='Подстроки URL для исключения, через запятую')
@click.option(
    '--out', '-o', 'out',
    default='./txtDir',
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help='Папка для Markdown-файлов'
)
@click.option('--max-pages', 'max_pages', type=click.IntRange(min=0), default=None, help='Макс. число страниц')
@click.option('--concurrency', type=click.IntRange(min=1), default=5, show_default=True, help='Размер пакета запросов')
@click.option('--delay-ms', 'delay_ms', type=click.IntRange(min=0), default=100, show_default=True,
              help='Пауза между пакетами (мс)')
def crawl(config_path, sitemap, include, exclude, out, max_pages, concurrency, delay_ms):
    """Обойти sitemap и сохранить каждую страницу как Markdown с front matter."""
    cfg = _load(config_path)
    sitemap_url = resolve_sitemap_url(cfg.site.url, sitemap)
    click.echo(f'Sitemap: {sitemap_url}')

    options = {
        'sitemap_url': sitemap_url,
        'include': include,
        'exclude': exclude,
        'max_pages': max_pages,
        'concurrency': concurrency,
        'delay_ms': delay_ms,
    }
    try:
        result = asyncio.run(crawl_from_sitemap(options))
    except Exception as e:
        print_error(f'Ошибка при обходе sitemap: {e}')

    out_dir = out.expanduser().resolve()
    saved = 0
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        for page in result.pages:
            # pages without markdown (failed fetches) are not written
            if not page.markdown:
                continue
            (out_dir / page_filename(page.url)).write_text(page_document(page), encoding='utf-8')
            saved += 1
    except OSError as e:
        print_error(f'Ошибка при сохранении страниц: {e}')

    logger.info('Saved %d/%d pages to %s', saved, len(result.pages), out_dir)
    click.echo(f'Saved {saved}/{len(result.pages)} pages: {out_dir}')


@cli.command('build-llms', context_settings=CONTEXT_SETTINGS)
@config_option
@click.option(
    '--source', '-s', 'sources',
    multiple=True,
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help='Папка с сохранёнными Markdown-файлами (можно несколько раз)'
)
@click.option(
    '--out', '-o', 'out',
    default='public/llms-full.txt',
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Путь к итоговому llms-full.txt'
)
def build_llms(config_path, sources, out):
    """Собрать llms-full.txt из сохранённых Markdown-файлов."""
    cfg = _load(config_path)
    try:
        docs = load_full_documents(sources, cfg.site.url)
        saved = _write(out, render_full(cfg, docs))
    except Exception as e:
        print_error(f'Ошибка при сборке llms-full.txt: {e}')
    click.echo(f'llms-full.txt ({len(docs)} documents): {saved}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@config_option
def show_config(config_path):
    """Показать текущую конфигурацию в JSON."""
    cfg = _load(config_path)
    click.echo(cfg.model_dump_json(by_alias=True, indent=2))


if __name__ == "__main__":
    cli()
