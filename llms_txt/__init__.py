# llms_txt/__init__.py
"""
llms-txt package initializer.
Defines package version and exposes the public API.
"""
__version__ = "0.1.0"

from llms_txt.aggregator import AppendMode, ContentAggregator, append_items
from llms_txt.config import LLMSConfig, define_config, load_config
from llms_txt.crawler import CrawlOptions, CrawlResult, Page, crawl_from_sitemap
from llms_txt.engine import Engine, collect_content
from llms_txt.models import ContentItem, FullDocument, ImportantLink
from llms_txt.report import render, render_full
from llms_txt.utils import normalize_content_url, redact_pii

__all__ = [
    "__version__",
    "AppendMode",
    "ContentAggregator",
    "append_items",
    "LLMSConfig",
    "define_config",
    "load_config",
    "CrawlOptions",
    "CrawlResult",
    "Page",
    "crawl_from_sitemap",
    "Engine",
    "collect_content",
    "ContentItem",
    "FullDocument",
    "ImportantLink",
    "render",
    "render_full",
    "normalize_content_url",
    "redact_pii",
]
