# === FILE: llms_txt/parser/html_parser.py ===
"""HTML parsing utilities for the page crawler.

The goal is **not** to be a full-blown extraction library but to turn one
fetched document into what the index needs:

* title: document ``<title>`` text or ``None`` if absent/blank.
* description: ``<meta name="description">`` content or ``None``.
* content_html: inner markup of ``<main>``, else ``<article>``, else
  ``<body>``, after page chrome (``nav``, ``header``, ``footer``) and
  non-content elements (``script``, ``style``) were removed.
* markdown: ``content_html`` converted with ATX headings and fenced code.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup
from bs4.element import Tag
from markdownify import markdownify

__all__: Sequence[str] = ("ParsedPage", "parse_page_html", "html_to_markdown", "STRIPPED_TAGS")

STRIPPED_TAGS: tuple[str, ...] = ("script", "style", "nav", "footer", "header")
CONTENT_SELECTORS: tuple[str, ...] = ("main", "article", "body")


@dataclass(slots=True)
class ParsedPage:
    """Lightweight representation of an HTML page."""

    title: Optional[str]
    description: Optional[str]
    content_html: str
    markdown: str


def _clean(value: object) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _select_content(soup: BeautifulSoup) -> str:
    for name in CONTENT_SELECTORS:
        node = soup.find(name)
        if isinstance(node, Tag):
            inner = node.decode_contents()
            if inner:
                return inner
    return ""


def html_to_markdown(html: str) -> str:
    """Convert an HTML fragment to Markdown (ATX headings, fenced code blocks)."""
    if not html:
        return ""
    return markdownify(html, heading_style="ATX").strip()


def parse_page_html(html: str) -> ParsedPage:
    """Parse a fetched HTML document into title, description and Markdown content."""
    soup = BeautifulSoup(html, "html.parser")

    title_tag = soup.find("title")
    title = _clean(title_tag.get_text()) if title_tag else None

    meta = soup.find("meta", attrs={"name": "description"})
    description = _clean(meta.get("content")) if isinstance(meta, Tag) else None

    for element in soup(list(STRIPPED_TAGS)):
        element.decompose()

    content_html = _select_content(soup)
    return ParsedPage(
        title=title,
        description=description,
        content_html=content_html,
        markdown=html_to_markdown(content_html),
    )
