# File: tests/test_cli.py
"""Тесты для CLI (`llms_txt/cli.py`) с использованием click.testing.CliRunner.
Проверяют команды `init-config`, `build`, `crawl`, `build-llms`, `config`, `--version`,
а также обработку ошибок.
"""
import json

import pytest
from click.testing import CliRunner

import llms_txt.cli as cli_module
from llms_txt.cli import cli, page_filename, resolve_sitemap_url
from llms_txt.crawler.models import CrawlResult, Page
from llms_txt.models import ContentItem


@pytest.fixture()
def config_file(tmp_path, base_config_data):
    path = tmp_path / "llms.config.json"
    path.write_text(json.dumps(base_config_data), encoding="utf-8")
    return path


@pytest.fixture()
def fake_collect(monkeypatch):
    """Патчим collect_content, чтобы build не обращался к сети и диску."""
    calls = {}

    async def fake(config, cwd=None):
        calls["config"] = config
        calls["cwd"] = cwd
        return [ContentItem(title="Getting Started", url="https://example.com/start")]

    monkeypatch.setattr(cli_module, "collect_content", fake)
    return calls


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "llms-txt" in result.output


def test_init_config_writes_template(tmp_path):
    target = tmp_path / "conf" / "llms.config.yaml"
    runner = CliRunner()

    result = runner.invoke(cli, ["init-config", "--path", str(target), "--title", "Docs", "--url", "https://docs.example.org"])
    assert result.exit_code == 0
    assert 'title: "Docs"' in target.read_text(encoding="utf-8")

    again = runner.invoke(cli, ["init-config", "--path", str(target)])
    assert again.exit_code == 1
    assert "--force" in again.output

    forced = runner.invoke(cli, ["init-config", "--path", str(target), "--force"])
    assert forced.exit_code == 0
    assert 'title: "Example Docs"' in target.read_text(encoding="utf-8")


def test_show_config(config_file):
    result = CliRunner().invoke(cli, ["config", "--config", str(config_file)])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["site"]["url"] == "https://example.com"
    assert data["renderOptions"]["redactPII"] is False


def test_missing_config_exits_with_error(tmp_path):
    result = CliRunner().invoke(cli, ["config", "--config", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_build_dry_run(config_file, fake_collect):
    result = CliRunner().invoke(cli, ["build", "--config", str(config_file), "--dry-run"])
    assert result.exit_code == 0
    assert "# Example Site" in result.stdout
    assert "- [Getting Started](https://example.com/start)" in result.stdout
    assert fake_collect["cwd"] == config_file.parent.resolve()


def test_build_writes_file_with_overrides(tmp_path, config_file, fake_collect):
    out = tmp_path / "public" / "llms.txt"
    result = CliRunner().invoke(
        cli,
        ["build", "--config", str(config_file), "--out", str(out), "--sitemap", "https://example.com/s.xml", "--max-pages", "3"],
    )
    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8").startswith("# Example Site")
    sitemap = fake_collect["config"].sources.sitemap
    assert sitemap.url == "https://example.com/s.xml"
    assert sitemap.max_pages == 3


def test_build_failure_exits_with_error(config_file, monkeypatch):
    async def broken(config, cwd=None):
        raise RuntimeError("network down")

    monkeypatch.setattr(cli_module, "collect_content", broken)
    result = CliRunner().invoke(cli, ["build", "--config", str(config_file), "--dry-run"])
    assert result.exit_code == 1
    assert "network down" in result.output


def test_crawl_saves_markdown(tmp_path, config_file, monkeypatch):
    captured = {}

    async def fake_crawl(options):
        captured["options"] = options
        return CrawlResult(
            pages=[
                Page(url="https://example.com/", status=200, markdown="# Home", fetched_at="2024-01-01T00:00:00.000Z"),
                Page(url="https://example.com/docs/start", status=200, markdown="# Start", fetched_at="2024-01-01T00:00:00.000Z"),
                Page(url="https://example.com/broken", status=500, fetched_at="2024-01-01T00:00:00.000Z"),
            ]
        )

    monkeypatch.setattr(cli_module, "crawl_from_sitemap", fake_crawl)
    out = tmp_path / "txtDir"
    result = CliRunner().invoke(
        cli,
        ["crawl", "--config", str(config_file), "--out", str(out), "--include", "/docs,/", "--concurrency", "2", "--delay-ms", "0"],
    )

    assert result.exit_code == 0
    assert sorted(p.name for p in out.iterdir()) == ["docs_start.md", "index.md"]
    text = (out / "docs_start.md").read_text(encoding="utf-8")
    assert text.startswith("---\ntitle: /docs/start\nurl: https://example.com/docs/start\n")
    assert text.rstrip().endswith("# Start")

    options = captured["options"]
    assert options["sitemap_url"] == "https://example.com/sitemap.xml"
    assert options["include"] == "/docs,/"
    assert options["concurrency"] == 2


def test_crawl_then_build_llms(tmp_path, config_file):
    source = tmp_path / "txtDir"
    source.mkdir()
    (source / "docs_start.md").write_text(
        "---\ntitle: /docs/start\nurl: https://example.com/docs/start\n---\n\n# Start\n\nSetup guide.\n",
        encoding="utf-8",
    )
    out = tmp_path / "public" / "llms-full.txt"

    result = CliRunner().invoke(cli, ["build-llms", "--config", str(config_file), "--source", str(source), "--out", str(out)])
    assert result.exit_code == 0
    text = out.read_text(encoding="utf-8")
    assert "### https://example.com/docs/start" in text
    assert "Setup guide." in text


def test_build_llms_requires_source(config_file):
    result = CliRunner().invoke(cli, ["build-llms", "--config", str(config_file)])
    assert result.exit_code != 0


@pytest.mark.parametrize(
    "sitemap,expected",
    [
        (None, "https://example.com/sitemap.xml"),
        ("https://cdn.example.com/s.xml", "https://cdn.example.com/s.xml"),
        ("file:///tmp/s.xml", "file:///tmp/s.xml"),
        ("./local.xml", "./local.xml"),
        ("sitemaps/main.xml", "https://example.com/sitemaps/main.xml"),
    ],
)
def test_resolve_sitemap_url(sitemap, expected):
    assert resolve_sitemap_url("https://example.com/", sitemap) == expected


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://example.com/", "index.md"),
        ("https://example.com", "index.md"),
        ("https://example.com/docs/start", "docs_start.md"),
    ],
)
def test_page_filename(url, expected):
    assert page_filename(url) == expected
