from __future__ import annotations

import pathlib
from typing import Any, Dict, List

from .models import CollectionViews, LinkedDocument, NavEntry
from .utils import yaml_dump


def _entry(e: NavEntry) -> Dict[str, Any]:
    out: Dict[str, Any] = {"title": e.title, "url": e.location, "date": e.date}
    if e.tags:
        out["tags"] = list(e.tags)
    return out


def _linked(item: LinkedDocument) -> Dict[str, Any]:
    doc = item.document
    out: Dict[str, Any] = {
        "id": doc.id,
        "title": doc.title,
        "url": item.location,
        "published": doc.published,
    }
    if doc.tags:
        out["tags"] = list(doc.tags)
    if doc.category:
        out["category"] = doc.category
    if item.next_location is not None:
        out["next"] = {"title": item.next_title, "url": item.next_location}
    if item.prev_location is not None:
        out["prev"] = {"title": item.prev_title, "url": item.prev_location}
    return out


def _groups(groups) -> Dict[str, Any]:
    return {
        slug: {
            "name": g.name,
            "slug": g.slug,
            "url": g.location,
            "entries": [_entry(e) for e in g.entries],
        }
        for slug, g in groups.items()
    }


def views_to_data(views: CollectionViews) -> Dict[str, Any]:
    sorted_items: List[Dict[str, Any]] = [_linked(i) for i in views.sorted]
    return {
        "sorted": sorted_items,
        "archive": {
            year: [_entry(e) for e in entries]
            for year, entries in views.archive.items()
        },
        "tags": _groups(views.tags),
        "categories": _groups(views.categories),
    }


def write_views(views: CollectionViews, out_path: pathlib.Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(yaml_dump(views_to_data(views)), encoding="utf-8")
