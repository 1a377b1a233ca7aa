"""
Views over a collection of documents.

Every view is built in two phases: one awaited fetch from the document
source (already filtered for production), then a synchronous build that
does no I/O. The `build_*` functions are that second phase and can be
called directly on a list of documents.

- sorted:     newest first, with next/prev links to the neighbours
- archive:    year -> entries, both newest first
- tags:       tag slug -> Tag, entries in source order
- categories: category slug -> Category, entries in source order
"""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence

from .config import CATEGORY_PREFIX, DEFAULT_LOCATION, TAG_PREFIX
from .models import (
    Category,
    CollectionViews,
    Document,
    LinkedDocument,
    NavEntry,
    Tag,
)
from .slugs import hash_slug
from .sources import DocumentSource
from .visibility import visibility_predicate

SlugFn = Callable[[str], str]


def document_location(doc: Document, id_to_slug: SlugFn, prefix: str) -> str:
    return f"{prefix.rstrip('/')}/{id_to_slug(doc.id)}"


def nav_entry(doc: Document, id_to_slug: SlugFn, prefix: str) -> NavEntry:
    return NavEntry(
        title=doc.title,
        location=document_location(doc, id_to_slug, prefix),
        date=doc.published,
        tags=doc.tags,
    )


def sort_newest_first(docs: Sequence[Document]) -> List[Document]:
    # sorted() is stable and reverse=True keeps ties in source order
    return sorted(docs, key=lambda d: d.published, reverse=True)


def build_chronological_sequence(
    docs: Sequence[Document],
    id_to_slug: SlugFn = hash_slug,
    prefix: str = DEFAULT_LOCATION,
) -> List[LinkedDocument]:
    ordered = sort_newest_first(docs)
    locations = [document_location(d, id_to_slug, prefix) for d in ordered]
    last = len(ordered) - 1

    out: List[LinkedDocument] = []
    for i, doc in enumerate(ordered):
        links = {}
        if i > 0:
            links["next_location"] = locations[i - 1]
            links["next_title"] = ordered[i - 1].title
        if i < last:
            links["prev_location"] = locations[i + 1]
            links["prev_title"] = ordered[i + 1].title
        out.append(LinkedDocument(document=doc, location=locations[i], **links))
    return out


def build_year_index(
    docs: Sequence[Document],
    id_to_slug: SlugFn = hash_slug,
    prefix: str = DEFAULT_LOCATION,
) -> Dict[int, List[NavEntry]]:
    buckets: Dict[int, List[NavEntry]] = {}
    for doc in docs:
        year = doc.published.year
        if year not in buckets:
            buckets[year] = []
        buckets[year].append(nav_entry(doc, id_to_slug, prefix))

    return {
        year: sorted(buckets[year], key=lambda e: e.date, reverse=True)
        for year in sorted(buckets, reverse=True)
    }


def _group_by_label(
    docs: Sequence[Document],
    labels: Callable[[Document], List[str]],
    id_to_slug: SlugFn,
    prefix: str,
) -> Dict[str, tuple]:
    # slug -> (first-seen name, entries); a later name that maps to the same
    # slug is merged into the existing group.
    groups: Dict[str, tuple] = {}
    for doc in docs:
        for label in labels(doc):
            slug = id_to_slug(label)
            if slug not in groups:
                groups[slug] = (label, [])
            groups[slug][1].append(nav_entry(doc, id_to_slug, prefix))
    return groups


def build_tag_index(
    docs: Sequence[Document],
    id_to_slug: SlugFn = hash_slug,
    prefix: str = DEFAULT_LOCATION,
) -> Dict[str, Tag]:
    groups = _group_by_label(docs, lambda d: d.tags or [], id_to_slug, prefix)
    return {
        slug: Tag(
            name=name,
            slug=slug,
            location=f"{TAG_PREFIX}/{slug}",
            entries=entries,
        )
        for slug, (name, entries) in groups.items()
    }


def build_category_index(
    docs: Sequence[Document],
    id_to_slug: SlugFn = hash_slug,
    prefix: str = DEFAULT_LOCATION,
) -> Dict[str, Category]:
    groups = _group_by_label(
        docs, lambda d: [d.category] if d.category else [], id_to_slug, prefix
    )
    return {
        slug: Category(
            name=name,
            slug=slug,
            location=f"{CATEGORY_PREFIX}/{slug}",
            entries=entries,
        )
        for slug, (name, entries) in groups.items()
    }


# ---------- Async entry points


async def fetch_visible(source: DocumentSource, production: bool) -> List[Document]:
    return await source.get_all(visibility_predicate(production))


async def get_sorted(
    source: DocumentSource,
    production: bool,
    id_to_slug: SlugFn = hash_slug,
    prefix: str = DEFAULT_LOCATION,
) -> List[LinkedDocument]:
    docs = await fetch_visible(source, production)
    return build_chronological_sequence(docs, id_to_slug, prefix)


async def get_year_index(
    source: DocumentSource,
    production: bool,
    id_to_slug: SlugFn = hash_slug,
    prefix: str = DEFAULT_LOCATION,
) -> Dict[int, List[NavEntry]]:
    docs = await fetch_visible(source, production)
    return build_year_index(docs, id_to_slug, prefix)


async def get_tags(
    source: DocumentSource,
    production: bool,
    id_to_slug: SlugFn = hash_slug,
    prefix: str = DEFAULT_LOCATION,
) -> Dict[str, Tag]:
    docs = await fetch_visible(source, production)
    return build_tag_index(docs, id_to_slug, prefix)


async def get_categories(
    source: DocumentSource,
    production: bool,
    id_to_slug: SlugFn = hash_slug,
    prefix: str = DEFAULT_LOCATION,
) -> Dict[str, Category]:
    docs = await fetch_visible(source, production)
    return build_category_index(docs, id_to_slug, prefix)


async def build_views(
    source: DocumentSource,
    production: bool,
    id_to_slug: SlugFn = hash_slug,
    prefix: str = DEFAULT_LOCATION,
) -> CollectionViews:
    docs = await fetch_visible(source, production)
    return CollectionViews(
        sorted=build_chronological_sequence(docs, id_to_slug, prefix),
        archive=build_year_index(docs, id_to_slug, prefix),
        tags=build_tag_index(docs, id_to_slug, prefix),
        categories=build_category_index(docs, id_to_slug, prefix),
    )
