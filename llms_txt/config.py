# === FILE: llms_txt/config.py ===
"""
Модуль для загрузки и валидации конфигурации llms-txt.
Используется Pydantic для описания схемы и проверки данных.

Ключи файла конфигурации пишутся в camelCase (``importantLinks``,
``renderOptions``), атрибуты моделей доступны в snake_case.
"""
from __future__ import annotations

import errno
import json
import os
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union
from urllib.parse import urlsplit

import yaml
from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

ConfigLocale = Literal["en", "ja"]
ManualItemTag = Literal["dev", "doc", "guide", "api"]
MANUAL_TAG_OPTIONS: tuple[str, ...] = ("dev", "doc", "guide", "api")

DEFAULT_LOCALE: ConfigLocale = "en"
DEFAULT_CONFIG_PATH = Path("llms.config.yaml")

LOCALE_MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {"invalid_url": "Invalid url"},
    "ja": {"invalid_url": "無効なURLです"},
}

CONFIG_DEFAULTS: Dict[str, Any] = {
    "content": {
        "heading": "Content Index",
        "empty_state_message": "まだ収集されたコンテンツはありません。",
    },
    "render_options": {
        "include_timestamp": False,
        "redact_pii": False,
        "full": {
            "heading": "Full Content",
            "index_heading": "Full Content Index",
            "include_index": True,
            "max_doc_chars": 4000,
            "max_total_chars": 200_000,
        },
    },
}

_locale: ContextVar[str] = ContextVar("llms_txt_config_locale", default=DEFAULT_LOCALE)
_http_url = TypeAdapter(AnyHttpUrl)


def _invalid_url_message() -> str:
    return LOCALE_MESSAGES.get(_locale.get(), LOCALE_MESSAGES[DEFAULT_LOCALE])["invalid_url"]


def _check_http_url(value: str) -> str:
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError(_invalid_url_message()) from None
    return value


def is_content_url(value: str) -> bool:
    """Абсолютный URL со схемой и хостом или путь от корня сайта."""
    if value.startswith("/"):
        return True
    parts = urlsplit(value)
    return bool(parts.scheme and (parts.netloc or parts.path))


class _Model(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SiteConfig(_Model):
    title: str
    description: Optional[str] = None
    url: str

    @field_validator("url")
    def _check_url(cls, v: str) -> str:
        return _check_http_url(v)


class LinkConfig(_Model):
    label: str
    url: str
    description: Optional[str] = None

    @field_validator("url")
    def _check_url(cls, v: str) -> str:
        return _check_http_url(v)


class ManualItemConfig(_Model):
    title: str
    url: str = Field(..., min_length=1)
    summary: Optional[str] = None
    tags: Optional[List[ManualItemTag]] = None

    @field_validator("url")
    def _content_url(cls, v: str) -> str:
        v = v.strip()
        if not is_content_url(v):
            raise ValueError(_invalid_url_message())
        return v


class ManualSourceConfig(_Model):
    items: List[ManualItemConfig]


class FSSourceConfig(_Model):
    dirs: List[str] = Field(..., min_length=1)
    max_files: Optional[int] = Field(None, gt=0)
    max_chars_per_file: Optional[int] = Field(None, gt=0)

    @field_validator("dirs")
    def _no_tmp_dirs(cls, v: List[str]) -> List[str]:
        if any(not d for d in v):
            raise ValueError("Directory entries must not be empty.")
        if any(d.strip().lower().endswith(".tmp") for d in v):
            raise ValueError("Directories ending with .tmp are not allowed.")
        return v


class SitemapSourceConfig(_Model):
    url: Optional[str] = None
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None
    respect_robots_txt: bool = True
    concurrency: Optional[int] = Field(None, gt=0)
    delay_ms: Optional[int] = Field(None, ge=0)
    max_pages: Optional[int] = Field(None, gt=0)
    max_summary_chars: Optional[int] = Field(None, gt=0)

    @field_validator("url")
    def _sitemap_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not urlsplit(v).scheme:
            raise ValueError(_invalid_url_message())
        return v

    @field_validator("include", "exclude")
    def _non_empty_patterns(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is not None and any(not p for p in v):
            raise ValueError("Patterns must not be empty.")
        return v


class SourcesConfig(_Model):
    manual: Optional[ManualSourceConfig] = None
    fs: Optional[FSSourceConfig] = None
    sitemap: Optional[SitemapSourceConfig] = None


class ContentSectionConfig(_Model):
    heading: str = CONFIG_DEFAULTS["content"]["heading"]
    empty_state_message: str = CONFIG_DEFAULTS["content"]["empty_state_message"]


class FullRenderOptions(_Model):
    heading: str = CONFIG_DEFAULTS["render_options"]["full"]["heading"]
    index_heading: str = CONFIG_DEFAULTS["render_options"]["full"]["index_heading"]
    include_index: bool = CONFIG_DEFAULTS["render_options"]["full"]["include_index"]
    max_docs: Optional[int] = Field(None, gt=0)
    max_doc_chars: int = Field(CONFIG_DEFAULTS["render_options"]["full"]["max_doc_chars"], gt=0)
    max_total_chars: int = Field(CONFIG_DEFAULTS["render_options"]["full"]["max_total_chars"], gt=0)


class RenderOptions(_Model):
    include_timestamp: bool = CONFIG_DEFAULTS["render_options"]["include_timestamp"]
    redact_pii: bool = Field(CONFIG_DEFAULTS["render_options"]["redact_pii"], alias="redactPII")
    full: FullRenderOptions = Field(default_factory=FullRenderOptions)


class LLMSConfig(_Model):
    """Проверенная конфигурация одного сайта."""

    site: SiteConfig
    intro: Optional[str] = None
    important_links: List[LinkConfig] = Field(default_factory=list)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    content: ContentSectionConfig = Field(default_factory=ContentSectionConfig)
    render_options: RenderOptions = Field(default_factory=RenderOptions)


def define_config(data: Union[Dict[str, Any], LLMSConfig], locale: ConfigLocale = DEFAULT_LOCALE) -> LLMSConfig:
    """Проверяет словарь конфигурации; *locale* выбирает язык сообщений об ошибках URL."""
    if isinstance(data, LLMSConfig):
        return data
    token = _locale.set(locale if locale in LOCALE_MESSAGES else DEFAULT_LOCALE)
    try:
        return LLMSConfig.model_validate(data)
    finally:
        _locale.reset(token)


def default_sitemap_url(site_url: str) -> str:
    return f"{site_url.rstrip('/')}/sitemap.xml"


def with_sitemap_overrides(
    config: LLMSConfig,
    url: Optional[str] = None,
    max_pages: Optional[int] = None,
) -> LLMSConfig:
    """Возвращает копию конфигурации с временными параметрами sitemap из CLI."""
    url = url.strip() if url else None
    if max_pages is not None and max_pages <= 0:
        max_pages = None
    if not url and max_pages is None:
        return config

    current = config.sources.sitemap or SitemapSourceConfig()
    update: Dict[str, Any] = {}
    if url:
        update["url"] = url
    if max_pages is not None:
        update["max_pages"] = max_pages
    sitemap = current.model_copy(update=update)
    sources = config.sources.model_copy(update={"sitemap": sitemap})
    return config.model_copy(update={"sources": sources})


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None], locale: ConfigLocale = DEFAULT_LOCALE) -> LLMSConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект LLMSConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(DEFAULT_CONFIG_PATH))
        path_obj = DEFAULT_CONFIG_PATH
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return define_config(data, locale=locale)
