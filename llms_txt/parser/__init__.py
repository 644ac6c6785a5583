# File: llms_txt/parser/__init__.py
"""llms_txt.parser: разбор sitemap.xml и HTML-страниц."""

from .html_parser import ParsedPage, parse_page_html
from .sitemap_parser import parse_sitemap, parse_sitemap_document

__all__ = ["ParsedPage", "parse_page_html", "parse_sitemap", "parse_sitemap_document"]
