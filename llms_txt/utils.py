# File: llms_txt/utils.py
"""llms_txt.utils: URL normalisation, PII redaction and text helpers shared across the package."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Iterable, Optional, Pattern, Sequence
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from llms_txt.logger import logger

__all__: Sequence[str] = (
    "normalize_content_url",
    "strip_tracking_params",
    "redact_pii",
    "utc_iso",
    "strip_markdown",
    "limit_length",
    "first_paragraph",
)

ELLIPSIS = "..."

_EMAIL_RE = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
_PHONE_RE = re.compile(r"(?<!\d)(?:\+?\d{1,3}[-.\s]?)?(?:\(?\d{2,4}\)?[-.\s]?){2,3}\d{2,4}(?!\d)")
_MIN_PHONE_DIGITS = 7

_IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]*\)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]*\)")
_MD_SYMBOLS_RE = re.compile(r"[`*_~>#-]")
_WS_RE = re.compile(r"\s+")
_HEADING_RE = re.compile(r"^#{1,6}\s")
_BLOCK_SPLIT_RE = re.compile(r"\n{2,}")


def _strip_trailing_slash(value: str) -> str:
    if value.endswith("/") and len(value) > 1:
        return value[:-1]
    return value


def normalize_content_url(url: str, site_url: str) -> str:
    """Приводит URL к ключу дедупликации: разрешает относительно сайта и убирает один завершающий слеш."""
    try:
        resolved = urljoin(site_url, url)
        parts = urlsplit(resolved)
    except ValueError:
        logger.debug("Could not resolve %s against %s", url, site_url)
        return _strip_trailing_slash(url)

    if parts.scheme and parts.netloc:
        resolved = urlunsplit(
            (parts.scheme.lower(), parts.netloc.lower(), parts.path or "/", parts.query, parts.fragment)
        )
    return _strip_trailing_slash(resolved)


def strip_tracking_params(url: str) -> str:
    """Удаляет из URL параметры ``utm_*``; некорректный URL возвращается как есть."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc:
        return url
    kept = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if not k.lower().startswith("utm_")]
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", urlencode(kept), parts.fragment))


def _phone_or_keep(match: re.Match[str]) -> str:
    digits = re.sub(r"\D", "", match.group(0))
    if len(digits) < _MIN_PHONE_DIGITS:
        return match.group(0)
    return "[redacted-phone]"


def redact_pii(text: str, enabled: bool, extra: Iterable[Pattern[str] | str] = ()) -> str:
    """Mask e-mail addresses, phone-like digit runs and any *extra* patterns."""
    if not enabled:
        return text
    result = _EMAIL_RE.sub("[redacted-email]", text)
    result = _PHONE_RE.sub(_phone_or_keep, result)
    for pattern in extra:
        result = re.sub(pattern, "[redacted]", result)
    return result


def utc_iso(moment: Optional[datetime] = None) -> str:
    """ISO-8601 timestamp in UTC with millisecond precision and a ``Z`` suffix."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def strip_markdown(text: str) -> str:
    """Plain text of a Markdown fragment; link labels are kept, images dropped."""
    text = _IMAGE_RE.sub("", text)
    text = _LINK_RE.sub(lambda m: m.group(1), text)
    text = _MD_SYMBOLS_RE.sub("", text)
    return _WS_RE.sub(" ", text).strip()


def limit_length(text: str, max_chars: Optional[int]) -> str:
    if not max_chars or max_chars <= 0 or len(text) <= max_chars:
        return text
    return text[:max_chars].rstrip() + ELLIPSIS


def first_paragraph(markdown: str) -> Optional[str]:
    """Первый непустой абзац Markdown, не являющийся заголовком, в виде простого текста."""
    for block in _BLOCK_SPLIT_RE.split(markdown):
        trimmed = block.strip()
        if not trimmed or _HEADING_RE.match(trimmed):
            continue
        plain = strip_markdown(block)
        if plain:
            return plain
    return None
