#!/usr/bin/env python3
"""
Build navigation data for the site's content collections.

- Collections come from site.yml (default: posts, notes)
- Each collection -> <out>/<name>.yml with four views:
  sorted (prev/next links), archive (by year), tags, categories
- Drafts are dropped only with --production (or `production: true`)

Rendering the pages is left to the site generator reading these files.
"""

from __future__ import annotations

import argparse
import asyncio
import pathlib
import sys
from typing import Any, Dict, List, Optional

import yaml

from .aggregate import build_views
from .config import (
    DATA_OUT,
    DEFAULT_COLLECTIONS,
    ROOT,
    SITE_CONFIG_NAME,
    SLUG_MODES,
)
from .export import write_views
from .models import CollectionViews
from .slugs import make_id_to_slug
from .sources import DocumentSourceError, FileDocumentSource
from .utils import read_yaml


def load_site_config(path: pathlib.Path) -> Dict[str, Any]:
    cfg = read_yaml(path)
    if not isinstance(cfg, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    slug_mode = str(cfg.get("slugMode") or "HASH").upper()
    if slug_mode not in SLUG_MODES:
        raise ValueError(
            f"{path}: slugMode must be one of {', '.join(SLUG_MODES)}, "
            f"got {cfg.get('slugMode')!r}"
        )

    collections: List[Dict[str, str]] = []
    for c in cfg.get("collections") or DEFAULT_COLLECTIONS:
        if not isinstance(c, dict) or not c.get("name") or not c.get("base"):
            raise ValueError(
                f"{path}: each collection needs a name and a base, got {c!r}"
            )
        name = str(c["name"])
        location = c.get("location") or f"/{name}"
        collections.append(
            {
                "name": name,
                "base": str(c["base"]),
                "location": "/" + str(location).strip("/"),
            }
        )

    production = cfg.get("production", False)
    if not isinstance(production, bool):
        raise ValueError(
            f"{path}: production must be true or false, got {production!r}"
        )

    return {
        "slugMode": slug_mode,
        "production": production,
        "collections": collections,
        "out": cfg.get("out"),
    }


async def build_collection(
    root: pathlib.Path,
    collection: Dict[str, str],
    production: bool,
    slug_mode: str,
) -> CollectionViews:
    source = FileDocumentSource(root / collection["base"])
    return await build_views(
        source,
        production,
        id_to_slug=make_id_to_slug(slug_mode),
        prefix=collection["location"],
    )


async def build_all(
    root: pathlib.Path, cfg: Dict[str, Any], production: bool
) -> Dict[str, CollectionViews]:
    collections = cfg["collections"]
    results = await asyncio.gather(
        *(
            build_collection(root, c, production, cfg["slugMode"])
            for c in collections
        )
    )
    return {c["name"]: views for c, views in zip(collections, results)}


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="notes-index",
        description="Build sorted/archive/tag/category data for site content.",
    )
    parser.add_argument("--root", type=pathlib.Path, default=ROOT)
    parser.add_argument("--config", type=pathlib.Path, default=None)
    parser.add_argument("--out", type=pathlib.Path, default=None)
    parser.add_argument(
        "--production",
        action="store_true",
        help="drop documents marked draft: true",
    )
    args = parser.parse_args(argv)

    root = args.root.resolve()
    config_path = args.config or root / SITE_CONFIG_NAME
    try:
        cfg = load_site_config(config_path)
    except (ValueError, yaml.YAMLError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    production = args.production or cfg["production"]
    out_dir = args.out or root / (cfg["out"] or DATA_OUT)

    try:
        all_views = asyncio.run(build_all(root, cfg, production))
    except DocumentSourceError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    for name, views in all_views.items():
        if not views.sorted:
            print(f"- no documents in {name}")
        out_path = out_dir / f"{name}.yml"
        write_views(views, out_path)
        print(
            f"✓ {name}: {len(views.sorted)} documents, "
            f"{len(views.tags)} tags, {len(views.categories)} categories"
            + (" (production)" if production else "")
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
