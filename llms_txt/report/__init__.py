# File: llms_txt/report/__init__.py
"""llms_txt.report: рендеринг llms.txt, llms-full.txt и шаблона конфигурации."""

from __future__ import annotations

from .config_template import render_config_template
from .full_report import render_full
from .index_report import render

__all__ = ["render", "render_full", "render_config_template"]
