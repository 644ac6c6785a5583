# File: llms_txt/parser/sitemap_parser.py
"""llms_txt.parser.sitemap_parser: разбор sitemap.xml и sitemap-индексов в плоский список URL."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from aiohttp import ClientSession
from lxml import etree

from llms_txt.crawler.fetcher import SITEMAP_ACCEPT, fetch_with_retry
from llms_txt.crawler.models import SitemapURL
from llms_txt.logger import get_logger

MAX_SITEMAP_DEPTH = 5

logger = get_logger(__name__)


@dataclass(slots=True)
class SitemapDocument:
    """Разобранный документ: ``kind`` равен ``"urlset"``, ``"sitemapindex"`` или ``None``."""

    kind: Optional[str]
    entries: List[SitemapURL] = field(default_factory=list)

    @property
    def locs(self) -> List[str]:
        return [entry.loc for entry in self.entries]


def _child_text(element: etree._Element, name: str) -> Optional[str]:
    for child in element:
        if isinstance(child.tag, str) and etree.QName(child).localname == name:
            text = (child.text or "").strip()
            return text or None
    return None


def _children(element: etree._Element, name: str) -> List[etree._Element]:
    return [c for c in element if isinstance(c.tag, str) and etree.QName(c).localname == name]


def _priority(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def parse_sitemap_document(xml_content: str) -> SitemapDocument:
    """Разбирает XML sitemap без учёта пространств имён.

    Args:
        xml_content: строка с содержимым sitemap.xml или sitemap-индекса.

    Returns:
        SitemapDocument; нераспознанный или пустой документ даёт ``kind=None``.

    Пример:
    ```python
    doc = parse_sitemap_document(open("sitemap.xml", encoding="utf-8").read())
    print(doc.kind, doc.locs)
    ```
    """
    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False)
    try:
        root = etree.fromstring(xml_content.strip().encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as exc:
        logger.warning("Sitemap is not valid XML: %s", exc)
        return SitemapDocument(kind=None)
    if root is None:
        return SitemapDocument(kind=None)

    kind = etree.QName(root).localname
    if kind == "sitemapindex":
        entries = [
            SitemapURL(loc=loc, lastmod=_child_text(node, "lastmod"))
            for node in _children(root, "sitemap")
            if (loc := _child_text(node, "loc"))
        ]
        return SitemapDocument(kind=kind, entries=entries)

    if kind == "urlset":
        entries = [
            SitemapURL(
                loc=loc,
                lastmod=_child_text(node, "lastmod"),
                changefreq=_child_text(node, "changefreq"),
                priority=_priority(_child_text(node, "priority")),
            )
            for node in _children(root, "url")
            if (loc := _child_text(node, "loc"))
        ]
        return SitemapDocument(kind=kind, entries=entries)

    logger.warning("Unrecognized sitemap root element <%s>", kind)
    return SitemapDocument(kind=None)


async def load_sitemap_text(url_or_path: str, session: ClientSession) -> str:
    """Читает sitemap с диска (путь или ``file://``) либо загружает по HTTP."""
    if not url_or_path.startswith("http"):
        file_path = Path(url_or_path.removeprefix("file://"))
        text = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
        logger.info("Loaded sitemap from local file: %s", file_path)
        return text

    resp = await fetch_with_retry(session, url_or_path, headers={"Accept": SITEMAP_ACCEPT})
    logger.info("Sitemap %s -> HTTP %s", url_or_path, resp.status)
    return resp.text


async def parse_sitemap(
    url_or_path: str,
    session: ClientSession,
    *,
    depth: int = 0,
    max_depth: int = MAX_SITEMAP_DEPTH,
) -> List[str]:
    """Возвращает все URL страниц из sitemap, рекурсивно раскрывая sitemap-индексы в порядке документа."""
    if depth > max_depth:
        logger.warning("Sitemap nesting deeper than %d levels, skipping %s", max_depth, url_or_path)
        return []

    document = parse_sitemap_document(await load_sitemap_text(url_or_path, session))

    if document.kind == "sitemapindex":
        urls: List[str] = []
        for child in document.locs:
            urls.extend(await parse_sitemap(child, session, depth=depth + 1, max_depth=max_depth))
        return urls

    return document.locs


__all__ = ["SitemapDocument", "parse_sitemap_document", "load_sitemap_text", "parse_sitemap", "MAX_SITEMAP_DEPTH"]
