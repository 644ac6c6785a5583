# File: llms_txt/sources/__init__.py
"""llms_txt.sources: сборщики элементов контента (файлы на диске и sitemap)."""

from .fs import collect_from_fs
from .sitemap import collect_from_sitemap

__all__ = ["collect_from_fs", "collect_from_sitemap"]
