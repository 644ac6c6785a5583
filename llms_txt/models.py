# llms_txt/models.py
"""
Data models shared by the collectors, the aggregator and the renderers.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(slots=True)
class ContentItem:
    """One addressable entry of the generated index.

    ``summary``/``tags`` set to ``None`` mean "absent"; an empty summary is a value.
    """

    title: str
    url: str
    summary: Optional[str] = None
    tags: Optional[List[str]] = None


@dataclass(slots=True)
class ImportantLink:
    """Highlighted link shown next to the site description."""

    label: str
    url: str
    description: Optional[str] = None


@dataclass(slots=True)
class FullDocument:
    """Markdown body of one page for the full-text output."""

    url: str
    md: str


__all__ = ["ContentItem", "ImportantLink", "FullDocument"]
