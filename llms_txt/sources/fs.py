# File: llms_txt/sources/fs.py
"""llms_txt.sources.fs: сбор элементов контента из Markdown-файлов на диске."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import yaml

from llms_txt.logger import get_logger
from llms_txt.models import ContentItem, FullDocument
from llms_txt.utils import first_paragraph, limit_length, normalize_content_url

__all__: Sequence[str] = (
    "MARKDOWN_EXTENSIONS",
    "collect_from_fs",
    "load_full_documents",
    "parse_markdown_file",
    "derive_url",
)

MARKDOWN_EXTENSIONS = frozenset({".md", ".mdx", ".markdown"})

_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
_FIRST_HEADING_RE = re.compile(r"^#{1,6}\s+(.+)", re.MULTILINE)
_MD_SUFFIX_RE = re.compile(r"\.(md|mdx|markdown)$", re.IGNORECASE)

logger = get_logger(__name__)


@dataclass(slots=True)
class ParsedFile:
    """Разобранный Markdown-файл: путь относительно корня и поля ContentItem."""

    path: str
    title: str
    url: str
    summary: Optional[str] = None
    tags: Optional[List[str]] = None


def split_front_matter(raw: str) -> Tuple[Dict[str, Any], str]:
    """Отделяет YAML front matter от тела документа."""
    match = _FRONT_MATTER_RE.match(raw)
    if not match:
        return {}, raw
    data = yaml.safe_load(match.group(1)) or {}
    if not isinstance(data, dict):
        raise TypeError(f"Front matter must be a mapping, got {type(data).__name__}")
    return data, raw[match.end():]


def walk_markdown_files(root: Path) -> List[Path]:
    """Все Markdown-файлы под *root*, отсортированные по пути."""
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")
    files = [p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in MARKDOWN_EXTENSIONS]
    return sorted(files, key=lambda p: p.as_posix())


def derive_url(relative_path: str) -> str:
    """``docs/guide.md`` -> ``/docs/guide``; ``index.md`` -> ``/``; ``a/index.md`` -> ``/a``."""
    without_ext = _MD_SUFFIX_RE.sub("", relative_path)
    if without_ext.lower() == "index":
        return "/"
    if without_ext.lower().endswith("/index"):
        without_ext = without_ext[: -len("/index")]
    segments = [s for s in without_ext.split("/") if s]
    return "/" + "/".join(segments)


def _pick_title(data: Dict[str, Any], content: str, fallback: str) -> str:
    title = data.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    match = _FIRST_HEADING_RE.search(content)
    if match:
        return match.group(1).strip()
    return fallback


def _pick_summary(data: Dict[str, Any], content: str, max_chars: Optional[int]) -> Optional[str]:
    description = data.get("description")
    if isinstance(description, str) and description.strip():
        return limit_length(description.strip(), max_chars)
    paragraph = first_paragraph(content)
    return limit_length(paragraph, max_chars) if paragraph else None


def _normalize_tags(tags: Any) -> Optional[List[str]]:
    if isinstance(tags, list):
        return [t.strip() for t in tags if isinstance(t, str) and t.strip()]
    if isinstance(tags, str):
        return [t.strip() for t in tags.split(",") if t.strip()]
    return None


def parse_markdown_file(root: Path, file_path: Path, max_chars: Optional[int] = None) -> ParsedFile:
    data, content = split_front_matter(file_path.read_text(encoding="utf-8"))
    relative = file_path.relative_to(root).as_posix()
    fallback_title = _MD_SUFFIX_RE.sub("", file_path.name)

    url = data.get("url")
    if not (isinstance(url, str) and url.strip()):
        url = derive_url(relative)

    return ParsedFile(
        path=relative,
        title=_pick_title(data, content, fallback_title),
        url=url.strip(),
        summary=_pick_summary(data, content, max_chars),
        tags=_normalize_tags(data.get("tags")),
    )


def collect_from_fs(
    dirs: Sequence[Union[str, Path]],
    max_files: Optional[int] = None,
    max_chars_per_file: Optional[int] = None,
) -> List[ContentItem]:
    """Собирает ContentItem из всех Markdown-файлов в *dirs*; ошибки чтения логируются и пропускаются."""
    results: List[ContentItem] = []
    seen: set[Path] = set()
    limit = max_files if max_files is not None else float("inf")

    for raw_dir in dirs:
        if len(results) >= limit:
            break
        root = Path(raw_dir).expanduser().resolve()
        try:
            files = walk_markdown_files(root)
        except OSError as exc:
            logger.warning("collect_from_fs: failed to read directory %s: %s", root, exc)
            continue

        for file_path in files:
            if len(results) >= limit:
                break
            if file_path in seen:
                continue
            try:
                parsed = parse_markdown_file(root, file_path, max_chars_per_file)
            except (OSError, UnicodeDecodeError, yaml.YAMLError, TypeError) as exc:
                logger.warning("collect_from_fs: failed to parse %s: %s", file_path, exc)
                continue
            seen.add(file_path)
            results.append(ContentItem(title=parsed.title, url=parsed.url, summary=parsed.summary, tags=parsed.tags))

    logger.debug("Collected %d items from %d directories", len(results), len(dirs))
    return results


def load_full_documents(dirs: Sequence[Union[str, Path]], site_url: str) -> List[FullDocument]:
    """
    Читает сохранённые Markdown-файлы (например, результат ``llms-txt crawl``) как полные документы.

    URL берётся из front matter, иначе выводится из пути файла и разрешается
    относительно *site_url*. Тело документа идёт без front matter.
    """
    documents: List[FullDocument] = []
    for raw_dir in dirs:
        root = Path(raw_dir).expanduser().resolve()
        try:
            files = walk_markdown_files(root)
        except OSError as exc:
            logger.warning("load_full_documents: failed to read directory %s: %s", root, exc)
            continue

        for file_path in files:
            try:
                data, body = split_front_matter(file_path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, yaml.YAMLError, TypeError) as exc:
                logger.warning("load_full_documents: failed to parse %s: %s", file_path, exc)
                continue
            url = data.get("url")
            if not (isinstance(url, str) and url.strip()):
                url = derive_url(file_path.relative_to(root).as_posix())
            documents.append(FullDocument(url=normalize_content_url(url.strip(), site_url), md=body.strip()))

    logger.debug("Loaded %d documents from %d directories", len(documents), len(dirs))
    return documents
