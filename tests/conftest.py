# File: tests/conftest.py
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Callable, Dict

import pytest
from aiohttp import web

from llms_txt.config import LLMSConfig, define_config

SITE_URL = "https://example.com"


@pytest.fixture()
def base_config_data() -> dict:
    """
    Minimal configuration mapping with a site, an intro and one important link.
    """
    return {
        "site": {
            "title": "Example Site",
            "description": "Example description",
            "url": SITE_URL,
        },
        "importantLinks": [{"label": "Docs", "url": f"{SITE_URL}/docs"}],
        "intro": "AI 向けのコンテンツ目次です。",
    }


@pytest.fixture()
def base_config(base_config_data) -> LLMSConfig:
    return define_config(base_config_data)


@pytest.fixture()
def make_tree(tmp_path) -> Callable[[Dict[str, str]], Path]:
    """
    Return a factory writing ``{relative path: content}`` under a fresh directory.
    """
    counter = {"n": 0}

    def _make(structure: Dict[str, str]) -> Path:
        counter["n"] += 1
        root = tmp_path / f"tree{counter['n']}"
        for relative, content in structure.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        root.mkdir(parents=True, exist_ok=True)
        return root

    return _make


def urlset(*locs: str) -> str:
    body = "".join(f"<url><loc>{loc}</loc></url>" for loc in locs)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{body}</urlset>'


def sitemapindex(*locs: str) -> str:
    body = "".join(f"<sitemap><loc>{loc}</loc></sitemap>" for loc in locs)
    return f'<?xml version="1.0" encoding="UTF-8"?><sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{body}</sitemapindex>'


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()
