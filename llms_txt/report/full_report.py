# File: llms_txt/report/full_report.py
"""llms_txt.report.full_report: llms-full.txt с полным текстом документов и лимитами по символам."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from llms_txt.config import LLMSConfig
from llms_txt.models import FullDocument
from llms_txt.report.index_report import header_lines, timestamp_lines
from llms_txt.utils import ELLIPSIS, redact_pii

TRUNCATION_NOTICE = "> _Content truncated to respect the configured limits._"
TRUNCATED_MARK = " _(truncated)_"

_PLACEHOLDER_RE = re.compile(r"\[redacted(?:-[a-z]+)?\]")


@dataclass(slots=True)
class RenderedDoc:
    url: str
    content: str
    truncated: bool


def _doc_field(doc: Any, name: str) -> Any:
    if isinstance(doc, dict):
        return doc.get(name)
    return getattr(doc, name, None)


def truncate_content(text: str, limit: int) -> Tuple[str, int]:
    """
    Отрезает *text* так, чтобы он уложился в *limit* символов бюджета.

    Плейсхолдеры редакции (``[redacted-email]`` и т.п.) переносятся целиком и
    бюджет не расходуют. Возвращает (результат, израсходованные символы).
    """
    out: List[str] = []
    consumed = 0
    pos = 0
    while pos < len(text) and consumed < limit:
        placeholder = _PLACEHOLDER_RE.match(text, pos)
        if placeholder:
            out.append(placeholder.group(0))
            pos = placeholder.end()
            continue
        out.append(text[pos])
        consumed += 1
        pos += 1
    # trailing placeholders are free as well
    while pos < len(text):
        placeholder = _PLACEHOLDER_RE.match(text, pos)
        if not placeholder:
            break
        out.append(placeholder.group(0))
        pos = placeholder.end()
    return "".join(out), consumed


def _prepare_docs(config: LLMSConfig, docs: Sequence[Any]) -> List[RenderedDoc]:
    opts = config.render_options.full
    redact = config.render_options.redact_pii
    selected = list(docs)[: opts.max_docs] if opts.max_docs else list(docs)

    remaining = opts.max_total_chars
    rendered: List[RenderedDoc] = []
    for doc in selected:
        if remaining <= 0:
            break
        url = (_doc_field(doc, "url") or "").strip()
        raw = (_doc_field(doc, "md") or "").strip()
        if not url:
            continue

        redacted = redact_pii(raw, redact)
        content, consumed = truncate_content(redacted, min(opts.max_doc_chars, remaining))
        # cut only when the budget ran out before the end of the redacted text
        truncated = len(content) < len(redacted)
        content = content.rstrip()
        if truncated and not content.endswith(ELLIPSIS):
            content += ELLIPSIS

        remaining -= consumed
        rendered.append(RenderedDoc(url=url, content=content, truncated=truncated))
    return rendered


def render_full(config: LLMSConfig, docs: Optional[Sequence[FullDocument]] = None) -> str:
    """
    Рендерит llms-full.txt: шапку сайта, оглавление и текст каждого документа.

    Документы обрезаются по ``max_doc_chars`` и общему бюджету ``max_total_chars``,
    после обрезки добавляется уведомление.
    """
    opts = config.render_options.full
    rendered = _prepare_docs(config, docs or [])

    lines = header_lines(config)
    lines += ["", f"## {opts.heading}"]

    if not rendered:
        lines += ["", f"- {config.content.empty_state_message}"]
    else:
        if opts.include_index:
            lines += ["", f"### {opts.index_heading}", ""]
            for doc in rendered:
                lines.append(f"- {doc.url}{TRUNCATED_MARK if doc.truncated else ''}")
        for doc in rendered:
            lines += ["", f"### {doc.url}", ""]
            if doc.content:
                lines.append(doc.content)
            if doc.truncated:
                lines += ["", TRUNCATION_NOTICE]

    # the timestamp is appended after redaction so its digits are never masked
    body = redact_pii("\n".join(lines), config.render_options.redact_pii)
    return "\n".join([body, *timestamp_lines(config)]).strip() + "\n"


__all__ = ["render_full", "truncate_content", "TRUNCATION_NOTICE"]
