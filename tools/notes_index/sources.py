from __future__ import annotations

import asyncio
import pathlib
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol

import nbformat
import yaml
from nbformat.validator import validate
from pydantic import ValidationError

from .config import DOCUMENT_PATTERNS
from .models import Document
from .utils import (
    _norm_text,
    normalize_frontmatter_dates,
    parse_frontmatter,
    slugify,
)

Predicate = Callable[[Document], bool]

_H1_RE = re.compile(r'^\s*#\s+(.+?)\s*(?:\{\s*#[-a-z0-9]+\s*\})?\s*$', re.MULTILINE)


class DocumentSourceError(Exception):
    """A content file could not be turned into a valid Document."""

    def __init__(self, path: pathlib.Path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class DocumentSource(Protocol):
    async def get_all(self, predicate: Optional[Predicate] = None) -> List[Document]:
        ...


class InMemoryDocumentSource:
    def __init__(self, documents: Iterable[Document]):
        self._documents = list(documents)

    async def get_all(self, predicate: Optional[Predicate] = None) -> List[Document]:
        return [d for d in self._documents if predicate is None or predicate(d)]


def _is_hidden(base: pathlib.Path, path: pathlib.Path) -> bool:
    # .ipynb_checkpoints, .obsidian and friends
    return any(part.startswith(".") for part in path.relative_to(base).parts)


def document_id(base: pathlib.Path, path: pathlib.Path) -> str:
    rel = path.relative_to(base).with_suffix("")
    return "/".join(slugify(part) for part in rel.parts)


def _first_h1(nb) -> Optional[str]:
    for cell in nb.cells:
        if cell.get("cell_type") != "markdown":
            continue
        m = _H1_RE.search(_norm_text(cell.get("source", "")))
        if m:
            return m.group(1).strip()
    return None


def read_markdown_frontmatter(path: pathlib.Path) -> Dict[str, Any]:
    try:
        text = _norm_text(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentSourceError(path, f"unreadable file: {exc}") from exc
    try:
        fm, _ = parse_frontmatter(text)
    except yaml.YAMLError as exc:
        raise DocumentSourceError(path, f"invalid frontmatter: {exc}") from exc
    if fm is None:
        raise DocumentSourceError(path, "missing frontmatter")
    if not isinstance(fm, dict):
        raise DocumentSourceError(path, "frontmatter is not a mapping")
    return fm


def read_notebook_frontmatter(path: pathlib.Path) -> Dict[str, Any]:
    try:
        nb = nbformat.read(str(path), as_version=4)
        validate(nb)
    except (OSError, ValueError, nbformat.ValidationError) as exc:
        raise DocumentSourceError(path, f"invalid notebook: {exc}") from exc

    fm = dict(nb.metadata)
    if not fm.get("title"):
        title = _first_h1(nb)
        if title:
            fm["title"] = title
    return fm


def load_document(base: pathlib.Path, path: pathlib.Path) -> Document:
    if path.suffix.lower() == ".ipynb":
        fm = read_notebook_frontmatter(path)
    else:
        fm = read_markdown_frontmatter(path)

    fm = normalize_frontmatter_dates(fm)
    data = {**fm, "id": str(fm.get("slug") or document_id(base, path))}
    try:
        return Document.model_validate(data)
    except ValidationError as exc:
        raise DocumentSourceError(path, f"schema validation failed: {exc}") from exc


class FileDocumentSource:
    """
    Documents read from a content directory.

    - Markdown: YAML frontmatter between `---` lines
    - Notebooks: top-level notebook metadata, title falls back to the first H1
    - Files are visited in sorted path order, which is the source order
      every view falls back to on ties
    """

    def __init__(
        self,
        base: pathlib.Path,
        patterns: Iterable[str] = DOCUMENT_PATTERNS,
    ):
        self.base = pathlib.Path(base)
        self.patterns = tuple(patterns)

    def paths(self) -> List[pathlib.Path]:
        if not self.base.exists():
            return []
        found = set()
        for pattern in self.patterns:
            found.update(
                p for p in self.base.glob(pattern)
                if p.is_file() and not _is_hidden(self.base, p)
            )
        return sorted(found, key=lambda p: p.relative_to(self.base).as_posix())

    def _load_all(self) -> List[Document]:
        return [load_document(self.base, p) for p in self.paths()]

    async def get_all(self, predicate: Optional[Predicate] = None) -> List[Document]:
        docs = await asyncio.to_thread(self._load_all)
        return [d for d in docs if predicate is None or predicate(d)]
