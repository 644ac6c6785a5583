# === FILE: llms_txt/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import Any, List, Mapping, Optional, Sequence, Union

from aiohttp import ClientSession

from llms_txt.crawler.fetcher import PAGE_ACCEPT, USER_AGENT, create_session, fetch_with_retry
from llms_txt.crawler.models import CrawlOptions, CrawlResult, Page
from llms_txt.crawler.robots import RobotsManager
from llms_txt.logger import get_logger
from llms_txt.parser.html_parser import parse_page_html
from llms_txt.parser.sitemap_parser import parse_sitemap
from llms_txt.utils import utc_iso

__all__ = ("SitemapCrawler", "crawl_page", "crawl_from_sitemap", "should_include_url")

FAILED_STATUS = 500

logger = get_logger(__name__)


def should_include_url(
    url: str,
    include: Optional[Sequence[str]] = None,
    exclude: Optional[Sequence[str]] = None,
) -> bool:
    """Exclude substrings win; a non-empty include list requires at least one match."""
    if exclude and any(pattern in url for pattern in exclude):
        return False
    if include:
        return any(pattern in url for pattern in include)
    return True


async def crawl_page(session: ClientSession, url: str) -> Page:
    """Fetch one page and convert it to Markdown. Never raises."""
    try:
        resp = await fetch_with_retry(session, url, headers={"Accept": PAGE_ACCEPT})
        if resp.status >= 400:
            logger.warning("Failed %s: HTTP %s", url, resp.status)
            return Page(url=url, status=FAILED_STATUS, fetched_at=utc_iso())
        parsed = parse_page_html(resp.text)
    except Exception as exc:
        logger.warning("Failed to crawl %s: %s", url, exc)
        return Page(url=url, status=FAILED_STATUS, fetched_at=utc_iso())

    return Page(
        url=url,
        status=resp.status,
        markdown=parsed.markdown,
        fetched_at=utc_iso(),
        title=parsed.title,
        description=parsed.description,
        html=parsed.content_html,
    )


async def _pause(delay_ms: int) -> None:
    await asyncio.sleep(delay_ms / 1000)


class SitemapCrawler:
    """Обход страниц из sitemap: фильтры, robots.txt, лимит и пакеты ограниченного размера."""

    def __init__(self, options: CrawlOptions, user_agent: str = USER_AGENT) -> None:
        self.options = options
        self.user_agent = user_agent
        self.session: Optional[ClientSession] = None
        self.disallowed_pages: List[str] = []

    async def __aenter__(self) -> SitemapCrawler:
        self.session = create_session(self.options.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> CrawlResult:
        if not self.session:
            raise RuntimeError("Session not initialized")
        opts = self.options
        start = time.monotonic()

        logger.info("Parsing sitemap: %s", opts.sitemap_url)
        all_urls = await parse_sitemap(opts.sitemap_url, self.session)

        filtered = [u for u in all_urls if u and should_include_url(u, opts.include, opts.exclude)]
        allowed = await self._apply_robots(filtered)
        targets = allowed[: opts.max_pages] if opts.max_pages is not None else list(allowed)

        logger.info("Crawling %d pages (of %d in sitemap)", len(targets), len(all_urls))

        pages: List[Page] = []
        for offset in range(0, len(targets), opts.concurrency):
            batch = targets[offset : offset + opts.concurrency]
            # gather keeps submission order regardless of completion order
            pages.extend(await asyncio.gather(*(crawl_page(self.session, url) for url in batch)))
            logger.info("Progress: %d/%d", len(pages), len(targets))
            if offset + opts.concurrency < len(targets) and opts.delay_ms > 0:
                await _pause(opts.delay_ms)

        duration = time.monotonic() - start
        logger.info("Crawl finished: %d pages in %.2f s", len(pages), duration)
        if self.disallowed_pages:
            logger.info("Blocked by robots.txt: %d", len(self.disallowed_pages))
        return CrawlResult(pages=pages)

    async def _apply_robots(self, urls: List[str]) -> List[str]:
        if not self.options.respect_robots_txt or not urls:
            return list(urls)

        robots = RobotsManager(self.session, self.user_agent)
        allowed: List[str] = []
        for url in urls:
            try:
                if not await robots.can_crawl(url):
                    logger.info("Excluded by robots.txt: %s", url)
                    self.disallowed_pages.append(url)
                    continue
            except Exception as exc:
                logger.warning("robots.txt evaluation failed, allowing %s: %s", url, exc)
            allowed.append(url)
        return allowed


async def crawl_from_sitemap(options: Union[CrawlOptions, Mapping[str, Any]]) -> CrawlResult:
    """
    Запускает обход по sitemap в собственном HTTP-сеансе и возвращает CrawlResult.

    Parameters
    ----------
    options : CrawlOptions | Mapping
        Параметры обхода; словарь проверяется моделью CrawlOptions.
    """
    if not isinstance(options, CrawlOptions):
        options = CrawlOptions.model_validate(options)
    async with SitemapCrawler(options) as crawler:
        return await crawler.crawl()
