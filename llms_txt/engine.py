# File: llms_txt/engine.py
"""llms_txt.engine: сбор контента из всех источников, слияние и рендеринг."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Union

from llms_txt.aggregator import AppendMode, ContentAggregator
from llms_txt.config import LLMSConfig
from llms_txt.logger import logger
from llms_txt.models import ContentItem
from llms_txt.report.index_report import render
from llms_txt.sources import fs as fs_source
from llms_txt.sources import sitemap as sitemap_source

__all__ = ["Engine", "collect_content"]


def _resolve_dirs(dirs: List[str], cwd: Path) -> List[Path]:
    return [Path(d) if Path(d).is_absolute() else (cwd / d).resolve() for d in dirs]


async def collect_content(config: LLMSConfig, cwd: Union[str, Path, None] = None) -> List[ContentItem]:
    """
    Собирает элементы из ручного списка, файловой системы и sitemap (именно в этом порядке).

    Ручные элементы добавляются в режиме ``keep-first``; элементы с диска и из
    обхода sitemap добавляются в режиме ``prefer-incoming``, поэтому более поздний
    источник обновляет поля уже добавленного элемента с тем же URL.
    """
    base_dir = Path(cwd) if cwd is not None else Path.cwd()
    sources = config.sources
    aggregator = ContentAggregator(site_url=config.site.url)

    if sources.manual and sources.manual.items:
        aggregator.add(sources.manual.items, AppendMode.KEEP_FIRST)
        logger.debug("Manual items: %d", len(sources.manual.items))

    if sources.fs is not None:
        dirs = _resolve_dirs(sources.fs.dirs, base_dir)
        fs_items = await asyncio.to_thread(
            fs_source.collect_from_fs,
            dirs,
            sources.fs.max_files,
            sources.fs.max_chars_per_file,
        )
        aggregator.add(fs_items, AppendMode.PREFER_INCOMING)
        logger.info("Filesystem items: %d", len(fs_items))

    if sources.sitemap is not None:
        sitemap_items = await sitemap_source.collect_from_sitemap(config, sources.sitemap)
        aggregator.add(sitemap_items, AppendMode.PREFER_INCOMING)
        logger.info("Sitemap items: %d", len(sitemap_items))

    logger.info("Collected %d unique items", len(aggregator.items))
    return aggregator.items


class Engine:
    """Фасад для CLI и тестов: сбор контента и рендеринг llms.txt."""

    def __init__(self, config: LLMSConfig, cwd: Union[str, Path, None] = None) -> None:
        self.config = config
        self.cwd = cwd

    async def collect(self) -> List[ContentItem]:
        return await collect_content(self.config, cwd=self.cwd)

    async def build(self) -> str:
        """Собирает контент и возвращает готовый Markdown-индекс."""
        try:
            items = await self.collect()
        except Exception as exc:
            logger.error("Collecting content failed: %s", exc)
            raise
        return render(self.config, items)
