from __future__ import annotations

import hashlib
from typing import Callable

from .config import HASH_SLUG_LENGTH, SLUG_MODES
from .utils import slugify


def raw_slug(value: str) -> str:
    # Document ids may be nested paths; keep the separators.
    return "/".join(slugify(part) for part in value.split("/"))


def hash_slug(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:HASH_SLUG_LENGTH]


def id_to_slug(value: str, mode: str = "HASH") -> str:
    """
    Turn a document id, tag name or category name into a URL path segment.

    RAW keeps the value readable (slugified), HASH replaces it with a short
    stable digest so that any label maps to a safe segment.
    """
    return make_id_to_slug(mode)(value)


def make_id_to_slug(mode: str) -> Callable[[str], str]:
    mode = (mode or "").upper()
    if mode == "RAW":
        return raw_slug
    if mode == "HASH":
        return hash_slug
    raise ValueError(
        f"unknown slug mode {mode!r}, expected one of {', '.join(SLUG_MODES)}"
    )
