# llms_txt/crawler/models.py
"""
Data models for the sitemap crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass(slots=True)
class Page:
    """Result of crawling one URL. Failed fetches still produce a Page."""

    url: str
    status: Optional[int] = None
    markdown: Optional[str] = None
    fetched_at: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    html: Optional[str] = None


@dataclass(slots=True)
class SitemapURL:
    """One ``<url>`` entry of a sitemap; only ``loc`` drives the crawl."""

    loc: str
    lastmod: Optional[str] = None
    changefreq: Optional[str] = None
    priority: Optional[float] = None


@dataclass(slots=True)
class CrawlResult:
    pages: List[Page] = field(default_factory=list)


class CrawlOptions(BaseModel):
    """Параметры одного запуска обхода по sitemap."""
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    sitemap_url: str = Field(..., min_length=1, alias="sitemapUrl", description="URL или путь к sitemap.xml.")
    include: Optional[List[str]] = Field(None, description="Подстроки, одна из которых должна быть в URL.")
    exclude: Optional[List[str]] = Field(None, description="Подстроки, исключающие URL.")
    concurrency: int = Field(5, ge=1, description="Размер пакета одновременных запросов.")
    delay_ms: int = Field(100, ge=0, alias="delayMs", description="Пауза между пакетами (мс).")
    max_pages: Optional[int] = Field(None, ge=0, alias="maxPages", description="Лимит по числу страниц.")
    respect_robots_txt: bool = Field(True, alias="respectRobotsTxt", description="Учитывать robots.txt.")
    timeout: Optional[float] = Field(None, gt=0, description="Таймаут на один запрос (секунд).")

    @field_validator("include", "exclude", mode="before")
    def _split_csv(cls, v):
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v


__all__ = ["Page", "SitemapURL", "CrawlResult", "CrawlOptions"]
