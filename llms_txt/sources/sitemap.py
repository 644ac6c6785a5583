# File: llms_txt/sources/sitemap.py
"""llms_txt.sources.sitemap: превращение результатов обхода sitemap в элементы контента."""

from __future__ import annotations

from typing import List, Optional

from llms_txt.config import LLMSConfig, SitemapSourceConfig, default_sitemap_url
from llms_txt.crawler import crawler
from llms_txt.crawler.models import CrawlOptions, Page
from llms_txt.logger import get_logger
from llms_txt.models import ContentItem
from llms_txt.utils import first_paragraph, limit_length

DEFAULT_SUMMARY_CHARS = 240

logger = get_logger(__name__)


def pick_summary(page: Page, max_chars: Optional[int] = None) -> Optional[str]:
    """Meta description first, then the first non-heading paragraph of the Markdown."""
    max_chars = max_chars or DEFAULT_SUMMARY_CHARS
    if page.description and page.description.strip():
        return limit_length(page.description.strip(), max_chars)
    if page.markdown:
        paragraph = first_paragraph(page.markdown)
        if paragraph:
            return limit_length(paragraph, max_chars)
    return None


def create_content_item(page: Page, max_summary_chars: Optional[int] = None) -> Optional[ContentItem]:
    if not page.url:
        return None
    if page.status and page.status >= 400:
        return None
    title = (page.title or "").strip() or page.url
    return ContentItem(title=title, url=page.url, summary=pick_summary(page, max_summary_chars))


def build_crawl_options(site_url: str, source: SitemapSourceConfig) -> CrawlOptions:
    data = {
        "sitemap_url": source.url or default_sitemap_url(site_url),
        "include": source.include,
        "exclude": source.exclude,
        "respect_robots_txt": source.respect_robots_txt,
        "max_pages": source.max_pages,
    }
    # unset values fall back to the CrawlOptions defaults
    if source.concurrency is not None:
        data["concurrency"] = source.concurrency
    if source.delay_ms is not None:
        data["delay_ms"] = source.delay_ms
    return CrawlOptions(**data)


async def collect_from_sitemap(config: LLMSConfig, source: SitemapSourceConfig) -> List[ContentItem]:
    """Обходит sitemap из *source* и возвращает элементы для успешно загруженных страниц."""
    options = build_crawl_options(config.site.url, source)
    result = await crawler.crawl_from_sitemap(options)

    items: List[ContentItem] = []
    for page in result.pages:
        item = create_content_item(page, source.max_summary_chars)
        if item is not None:
            items.append(item)
    skipped = len(result.pages) - len(items)
    if skipped:
        logger.info("Skipped %d failed pages from %s", skipped, options.sitemap_url)
    return items


__all__ = ["collect_from_sitemap", "create_content_item", "pick_summary", "build_crawl_options"]
