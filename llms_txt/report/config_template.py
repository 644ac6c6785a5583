# File: llms_txt/report/config_template.py
"""llms_txt.report.config_template: заготовка llms.config.yaml из Jinja2-шаблона."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from llms_txt.config import default_sitemap_url

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "llms.config.yaml.j2"


def render_config_template(
    title: str = "Example Docs",
    url: str = "https://example.com",
    template_dir: Union[Path, str, None] = None,
) -> str:
    """Рендерит YAML-заготовку конфигурации для команды ``init-config``.

    Пример:
    ```python
    from llms_txt.report.config_template import render_config_template
    text = render_config_template(title="My Docs", url="https://docs.example.org")
    ```
    """
    env = Environment(
        loader=FileSystemLoader(str(template_dir or TEMPLATE_DIR)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "title": title,
        "url": url.rstrip("/") or url,
        "sitemap_url": default_sitemap_url(url),
    }
    return template.render(**context)


__all__ = ["render_config_template", "TEMPLATE_DIR", "TEMPLATE_NAME"]
