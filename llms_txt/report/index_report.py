# File: llms_txt/report/index_report.py
"""llms_txt.report.index_report: компактный Markdown-индекс (llms.txt)."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from llms_txt.config import LLMSConfig
from llms_txt.models import ContentItem
from llms_txt.utils import normalize_content_url, redact_pii, utc_iso

_WS_RE = re.compile(r"\s+")


def sanitize_heading(value: Optional[str]) -> Optional[str]:
    """Схлопывает пробелы; пустая строка превращается в ``None``."""
    if not value:
        return None
    return _WS_RE.sub(" ", value.strip()) or None


def find_homepage_item(items: Sequence[ContentItem], site_url: str) -> Optional[ContentItem]:
    home = normalize_content_url(site_url, site_url)
    for item in items:
        if normalize_content_url(item.url, site_url) == home:
            return item
    return None


def header_lines(config: LLMSConfig, items: Sequence[ContentItem] = ()) -> List[str]:
    """Heading, description, intro and important links."""
    site = config.site
    homepage = find_homepage_item(items, site.url)
    title = (
        sanitize_heading(homepage.title if homepage else None)
        or sanitize_heading(site.title)
        or sanitize_heading(site.url)
        or "Site"
    )
    description = sanitize_heading(homepage.summary if homepage else None) or sanitize_heading(
        site.description
    )

    lines = [f"# {title}"]
    if description:
        lines += ["", description]

    intro = (config.intro or "").strip()
    if intro:
        lines += ["", intro]

    if config.important_links:
        lines.append("")
        for link in config.important_links:
            suffix = f": {link.description.strip()}" if link.description and link.description.strip() else ""
            lines.append(f"- [{sanitize_heading(link.label) or link.url}]({link.url}){suffix}")
    return lines


def timestamp_lines(config: LLMSConfig) -> List[str]:
    if config.render_options.include_timestamp:
        return ["", f"_Generated at: {utc_iso()}_"]
    return []


def render(config: LLMSConfig, items: Optional[Sequence[ContentItem]] = None) -> str:
    """
    Рендерит llms.txt: заголовок сайта и по одной секции на элемент контента.

    Пример:
    ```python
    from llms_txt.report.index_report import render
    text = render(config, items)
    ```
    """
    items = list(items or [])
    lines = header_lines(config, items)

    if items:
        for item in items:
            label = sanitize_heading(item.title) or item.url
            lines += ["", f"## {label}", "", f"- [{label}]({item.url})"]
    else:
        lines += ["", config.content.empty_state_message]

    # the timestamp is appended after redaction so its digits are never masked
    body = redact_pii("\n".join(lines), config.render_options.redact_pii)
    return "\n".join([body, *timestamp_lines(config)]).strip() + "\n"


__all__ = ["render", "header_lines", "timestamp_lines", "sanitize_heading", "find_homepage_item"]
