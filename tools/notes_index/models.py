"""Pydantic models for source documents and the views derived from them.

`Document` is the validated frontmatter of one content file. The remaining
models are projections built by the aggregator and are frozen so that a
view, once built, cannot be edited in place.
"""

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import _coerce_date_like


class Document(BaseModel):
    """Schema for a post or note.

    Attributes:
        id: Unique identifier within its collection (path-derived or `slug`).
        title: Display title.
        published: Publication date; mandatory.
        draft: Excluded from production builds when true.
        tags: Tag names in the order written in the frontmatter.
        category: Single optional category name.
    """
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)
    id: str = Field(..., min_length=1)
    title: str
    published: dt.date
    draft: Optional[bool] = None
    description: Optional[str] = None
    cover: Optional[str] = None
    tags: Optional[List[str]] = None
    category: Optional[str] = None
    author: Optional[str] = None
    source_link: Optional[str] = Field(default=None, alias="sourceLink")
    license_name: Optional[str] = Field(default=None, alias="licenseName")
    license_url: Optional[str] = Field(default=None, alias="licenseUrl")

    @field_validator("published", mode="before")
    @classmethod
    def _calendar_date(cls, v):
        return _coerce_date_like(v)


class NavEntry(BaseModel):
    """Lightweight projection of a Document used by the index views."""
    model_config = ConfigDict(frozen=True)
    title: str
    location: str
    date: dt.date
    tags: Optional[List[str]] = None


class LinkedDocument(BaseModel):
    """A Document placed in the chronological sequence.

    `next_*` points at the entry before it in the list (newer), `prev_*` at
    the entry after it (older).
    """
    model_config = ConfigDict(frozen=True)
    document: Document
    location: str
    next_location: Optional[str] = None
    next_title: Optional[str] = None
    prev_location: Optional[str] = None
    prev_title: Optional[str] = None


class Tag(BaseModel):
    model_config = ConfigDict(frozen=True)
    name: str
    slug: str
    location: str
    entries: List[NavEntry] = Field(default_factory=list)


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)
    name: str
    slug: str
    location: str
    entries: List[NavEntry] = Field(default_factory=list)


class CollectionViews(BaseModel):
    """All four views of one collection, built from a single fetch."""
    model_config = ConfigDict(frozen=True)
    sorted: List[LinkedDocument]
    archive: Dict[int, List[NavEntry]]
    tags: Dict[str, Tag]
    categories: Dict[str, Category]
