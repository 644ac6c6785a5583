# File: llms_txt/crawler/__init__.py
"""llms_txt.crawler: обход страниц из sitemap с учётом robots.txt."""

from .crawler import SitemapCrawler, crawl_from_sitemap, crawl_page, should_include_url
from .models import CrawlOptions, CrawlResult, Page, SitemapURL
from .robots import RobotsManager

__all__ = [
    "SitemapCrawler",
    "crawl_from_sitemap",
    "crawl_page",
    "should_include_url",
    "CrawlOptions",
    "CrawlResult",
    "Page",
    "SitemapURL",
    "RobotsManager",
]
