from __future__ import annotations

from datetime import date

import pytest

from notes_index.models import Document


def _doc(doc_id: str, published: str, **kw) -> Document:
    return Document(id=doc_id, title=kw.pop("title", doc_id.upper()),
                    published=date.fromisoformat(published), **kw)


@pytest.fixture
def make_doc():
    return _doc


@pytest.fixture
def abc_docs():
    # Source order A, B, C
    return [
        _doc("a", "2024-01-10", tags=["t1", "t2"]),
        _doc("b", "2024-06-01", tags=["t1"]),
        _doc("c", "2023-12-01", tags=[]),
    ]

