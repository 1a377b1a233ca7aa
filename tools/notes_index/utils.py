from __future__ import annotations

import pathlib
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

import yaml

from .config import DASHES_RE, SLUG_RE


def slugify(s: str) -> str:
    return DASHES_RE.sub("-", SLUG_RE.sub("-", s.lower()).strip("-"))


def read_yaml(path: pathlib.Path) -> Dict[str, Any]:
    if path.exists():
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return {}


def _norm_text(s: str) -> str:
    return s.replace('\r\n', '\n').replace('\r', '\n').lstrip('\ufeff')


def _coerce_date_like(v):
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str):
        s = v.strip().strip('"').strip("'")
        try:
            return date.fromisoformat(s)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(s).date()
        except ValueError:
            return v
    return v


def normalize_frontmatter_dates(
    fm: Dict[str, Any],
    keys=("published", "updated"),
) -> Dict[str, Any]:
    if not isinstance(fm, dict):
        return fm
    for k in keys:
        if k in fm:
            fm[k] = _coerce_date_like(fm[k])
    return fm


def _plain(v):
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, dict):
        return {k: _plain(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_plain(x) for x in v]
    return v


def yaml_dump(data: Dict[str, Any]) -> str:
    """Dump with dates as plain YYYY-MM-DD scalars and keys in insertion order."""
    return yaml.safe_dump(
        _plain(data), sort_keys=False, allow_unicode=True
    )


def parse_frontmatter(text: str) -> Tuple[Optional[Dict[str, Any]], str]:
    s = text.lstrip()
    if not s.startswith("---\n") and not s.startswith("---\r\n"):
        return None, text

    lines = s.splitlines(keepends=True)
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            fm_text = "".join(lines[1:i])
            body = "".join(lines[i + 1 :])
            fm = yaml.safe_load(fm_text) or {}
            return fm, body
    return None, text
