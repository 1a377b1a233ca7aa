#!/usr/bin/env python3
from __future__ import annotations

import pathlib
import re
from typing import Dict, List

# ---------- Paths

# This assumes the package sits in tools/ at the repo root.
ROOT = pathlib.Path(__file__).resolve().parents[2]
SITE_CONFIG_NAME = "site.yml"
DATA_OUT = pathlib.PurePosixPath("src") / "data"

# ---------- Config

SLUG_MODES = ("RAW", "HASH")
HASH_SLUG_LENGTH = 16
DOCUMENT_PATTERNS = ("**/*.md", "**/*.ipynb")
TAG_PREFIX = "/tags"
CATEGORY_PREFIX = "/categories"
DEFAULT_LOCATION = "/notes"

DEFAULT_COLLECTIONS: List[Dict[str, str]] = [
    {"name": "posts", "base": "src/content/posts", "location": "/posts"},
    {"name": "notes", "base": "src/content/notes", "location": "/notes"},
]

# Some shared regexes

SLUG_RE = re.compile(r"[^a-z0-9-]+")
DASHES_RE = re.compile(r"-{2,}")

