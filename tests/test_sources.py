# File: tests/test_sources.py
"""Сборщики контента: Markdown на диске, обход sitemap и общий collect_content."""
from __future__ import annotations

import pytest

from llms_txt.config import define_config
from llms_txt.crawler import crawler as crawler_module
from llms_txt.crawler.models import CrawlResult, Page
from llms_txt.engine import Engine, collect_content
from llms_txt.sources.fs import collect_from_fs, derive_url, load_full_documents, split_front_matter
from llms_txt.sources.sitemap import collect_from_sitemap, create_content_item

HOME_MD = """---
title: ホーム
description: プロジェクトの概要
url: https://example.com/
tags:
  - overview
---

# ホーム

ようこそ。
"""


# --------------------------------------------------------------------------- #
#                                 Filesystem                                  #
# --------------------------------------------------------------------------- #


def test_front_matter_takes_precedence(make_tree):
    root = make_tree(
        {
            "index.md": HOME_MD,
            "docs/getting-started.mdx": "# Getting Started\n\nセットアップ手順を解説します。\n",
            "notes.txt": "ignored",
        }
    )
    items = collect_from_fs([root])
    assert len(items) == 2

    home = next(i for i in items if i.url == "https://example.com/")
    assert home.title == "ホーム"
    assert home.summary == "プロジェクトの概要"
    assert home.tags == ["overview"]

    guide = next(i for i in items if i.url.endswith("/docs/getting-started"))
    assert guide.title == "Getting Started"
    assert "セットアップ手順" in guide.summary


def test_limits_are_respected(make_tree):
    root = make_tree({"docs/a.md": "# A\n\n" + "A" * 100, "docs/b.md": "# B\n\n" + "B" * 100})
    items = collect_from_fs([root], max_files=1, max_chars_per_file=10)
    assert len(items) == 1
    assert items[0].summary.endswith("...")
    assert len(items[0].summary) <= 13


def test_summary_keeps_link_text(make_tree):
    root = make_tree({"docs/link.md": "# Link Test\n\nFirst paragraph references the [Guide](https://example.com/docs/guide).\n"})
    (item,) = collect_from_fs([root])
    assert "Guide" in item.summary
    assert "](" not in item.summary


def test_title_falls_back_to_file_name(make_tree):
    root = make_tree({"plain.md": "Just text."})
    (item,) = collect_from_fs([root])
    assert item.title == "plain"
    assert item.url == "/plain"
    assert item.summary == "Just text."


def test_broken_files_and_dirs_are_skipped(make_tree, tmp_path):
    root = make_tree({"bad.md": "---\n- not\n- a mapping\n---\nbody", "good.md": "# Good"})
    items = collect_from_fs([tmp_path / "does-not-exist", root])
    assert [i.title for i in items] == ["Good"]


@pytest.mark.parametrize(
    "path,expected",
    [
        ("index.md", "/"),
        ("docs/index.mdx", "/docs"),
        ("docs/guide.markdown", "/docs/guide"),
        ("a/b/c.md", "/a/b/c"),
    ],
)
def test_derive_url(path, expected):
    assert derive_url(path) == expected


def test_split_front_matter_without_block():
    assert split_front_matter("# Title\n") == ({}, "# Title\n")


def test_load_full_documents(make_tree):
    root = make_tree(
        {
            "docs_start.md": "---\ntitle: /docs/start\nurl: https://example.com/docs/start\nfetchedAt: 2024-01-01T00:00:00.000Z\n---\n\n# Start\n\nBody\n",
            "guide.md": "# Guide\n",
        }
    )
    docs = load_full_documents([root], "https://example.com")
    assert [d.url for d in docs] == ["https://example.com/docs/start", "https://example.com/guide"]
    assert docs[0].md == "# Start\n\nBody"


# --------------------------------------------------------------------------- #
#                                   Sitemap                                   #
# --------------------------------------------------------------------------- #


def test_create_content_item():
    page = Page(url="https://example.com/a", status=200, markdown="# A\n\nFirst paragraph.", title=" A ")
    item = create_content_item(page)
    assert item.title == "A"
    assert item.summary == "First paragraph."

    untitled = create_content_item(Page(url="https://example.com/b", status=200, description="Meta"))
    assert untitled.title == "https://example.com/b"
    assert untitled.summary == "Meta"

    assert create_content_item(Page(url="https://example.com/c", status=404)) is None
    assert create_content_item(Page(url="https://example.com/d", status=500)) is None


@pytest.mark.asyncio()
async def test_collect_from_sitemap_builds_options(monkeypatch, base_config_data):
    captured = {}

    async def fake_crawl(options):
        captured["options"] = options
        return CrawlResult(
            pages=[
                Page(url="https://example.com/", status=200, title="Home", markdown="Welcome."),
                Page(url="https://example.com/gone", status=404),
            ]
        )

    monkeypatch.setattr(crawler_module, "crawl_from_sitemap", fake_crawl)
    config = define_config({**base_config_data, "sources": {"sitemap": {"maxPages": 5, "include": ["/"]}}})

    items = await collect_from_sitemap(config, config.sources.sitemap)

    options = captured["options"]
    assert options.sitemap_url == "https://example.com/sitemap.xml"
    assert options.max_pages == 5
    assert options.include == ["/"]
    assert options.concurrency == 5
    assert [i.url for i in items] == ["https://example.com/"]
    assert items[0].summary == "Welcome."


@pytest.mark.asyncio()
async def test_collect_from_local_sitemap(tmp_path, monkeypatch, base_config_data):
    sitemap = tmp_path / "sitemap.xml"
    sitemap.write_text(
        "<urlset><url><loc>https://example.com/a</loc></url><url><loc>https://example.com/b</loc></url></urlset>",
        encoding="utf-8",
    )

    async def fake_page(session, url):
        return Page(url=url, status=200, title=url.rsplit("/", 1)[-1].upper(), markdown="Text.")

    monkeypatch.setattr(crawler_module, "crawl_page", fake_page)
    config = define_config(
        {
            **base_config_data,
            "sources": {"sitemap": {"url": f"file://{sitemap}", "respectRobotsTxt": False, "delayMs": 0}},
        }
    )
    items = await collect_from_sitemap(config, config.sources.sitemap)
    assert [(i.title, i.url) for i in items] == [("A", "https://example.com/a"), ("B", "https://example.com/b")]


# --------------------------------------------------------------------------- #
#                              collect_content                                #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_manual_and_fs_are_combined(make_tree):
    root = make_tree({"docs/guide.md": "# Guide\n\nThis is a guide page.\n"})
    config = define_config(
        {
            "site": {"title": "Example", "url": "https://example.com"},
            "sources": {
                "manual": {"items": [{"title": "Overview", "url": "https://example.com/overview", "summary": "Manual"}]},
                "fs": {"dirs": [str(root)]},
            },
        }
    )
    items = await collect_content(config)
    assert [i.url for i in items] == ["https://example.com/overview", "/docs/guide"]


@pytest.mark.asyncio()
async def test_duplicate_urls_collapse(make_tree):
    root = make_tree({"index.md": "# Overview\n\nFrom disk.\n"})
    config = define_config(
        {
            "site": {"title": "Example", "url": "https://example.com"},
            "sources": {
                "manual": {"items": [{"title": "Overview", "url": "/", "summary": "Manual summary"}]},
                "fs": {"dirs": ["."]},
            },
        }
    )
    items = await collect_content(config, cwd=root)

    assert len([i for i in items if i.url == "/"]) == 1
    # later sources are merged over the manual entry
    assert items[0].summary == "From disk."


@pytest.mark.asyncio()
async def test_sitemap_is_merged_last(monkeypatch, base_config_data):
    async def fake_crawl(options):
        return CrawlResult(pages=[Page(url="https://example.com/start/", status=200, title="Crawled", markdown="New.")])

    monkeypatch.setattr(crawler_module, "crawl_from_sitemap", fake_crawl)
    config = define_config(
        {
            **base_config_data,
            "sources": {
                "manual": {"items": [{"title": "Start", "url": "/start", "tags": ["guide"]}]},
                "sitemap": {},
            },
        }
    )
    engine = Engine(config)
    items = await engine.collect()
    assert len(items) == 1
    assert items[0].title == "Crawled"
    assert items[0].tags == ["guide"]

    markdown = await engine.build()
    assert "## Crawled" in markdown
