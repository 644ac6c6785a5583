# File: llms_txt/aggregator.py
"""llms_txt.aggregator: объединение элементов контента из нескольких источников без дубликатов.

Ключ идентичности: нормализованный URL (см. :func:`llms_txt.utils.normalize_content_url`).
Порядок первого появления ключа сохраняется; режим добавления определяет,
что происходит при совпадении ключа:

* ``keep-first``: входящий элемент игнорируется;
* ``prefer-incoming``: поля существующего элемента перезаписываются входящими.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from llms_txt.models import ContentItem
from llms_txt.utils import normalize_content_url


class AppendMode(str, Enum):
    KEEP_FIRST = "keep-first"
    PREFER_INCOMING = "prefer-incoming"


_MISSING = object()


def _field(item: Any, name: str) -> Any:
    """Значение поля для dict, pydantic-модели или dataclass; ``_MISSING`` если поля нет."""
    if isinstance(item, dict):
        return item.get(name, _MISSING)
    return getattr(item, name, _MISSING)


def _value(item: Any, name: str) -> Any:
    value = _field(item, name)
    return None if value is _MISSING else value


def merge_content_item(existing: ContentItem, incoming: Any) -> ContentItem:
    """Field-level merge: non-blank title, url, explicit summary (even ``""``) and tags win."""
    title = _value(incoming, "title")
    url = _value(incoming, "url")
    summary = _value(incoming, "summary")
    tags = _value(incoming, "tags")
    return ContentItem(
        title=title if isinstance(title, str) and title.strip() else existing.title,
        url=url if url is not None else existing.url,
        summary=summary if summary is not None else existing.summary,
        tags=list(tags) if tags is not None else existing.tags,
    )


def _new_item(item: Any) -> ContentItem:
    tags = _value(item, "tags")
    return ContentItem(
        title=_value(item, "title") or "",
        url=_value(item, "url"),
        summary=_value(item, "summary"),
        tags=list(tags) if tags is not None else None,
    )


def append_items(
    destination: List[ContentItem],
    items: Iterable[Any],
    index_by_url: Dict[str, int],
    site_url: str,
    mode: Union[AppendMode, str],
) -> List[ContentItem]:
    """Добавляет *items* в *destination*, обновляя индекс ``normalized url -> position``."""
    mode = AppendMode(mode)
    for item in items:
        if item is None:
            continue
        url = _value(item, "url")
        if not url:
            continue

        normalized = normalize_content_url(url, site_url)
        existing = index_by_url.get(normalized)
        if existing is not None:
            if mode is AppendMode.PREFER_INCOMING:
                destination[existing] = merge_content_item(destination[existing], item)
            continue

        index_by_url[normalized] = len(destination)
        destination.append(_new_item(item))
    return destination


@dataclass(slots=True)
class ContentAggregator:
    """Состояние одного прохода слияния: результирующий список и индекс по URL."""

    site_url: str
    items: List[ContentItem] = field(default_factory=list)
    index_by_url: Dict[str, int] = field(default_factory=dict)

    def add(self, items: Iterable[Any], mode: Union[AppendMode, str]) -> ContentAggregator:
        append_items(self.items, items, self.index_by_url, self.site_url, mode)
        return self

    def find(self, url: str) -> Optional[ContentItem]:
        position = self.index_by_url.get(normalize_content_url(url, self.site_url))
        return None if position is None else self.items[position]


__all__ = ["AppendMode", "ContentAggregator", "append_items", "merge_content_item"]
