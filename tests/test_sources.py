from __future__ import annotations

import asyncio
from datetime import date

import nbformat
import pytest
from nbformat.v4 import new_markdown_cell, new_notebook

from notes_index.sources import DocumentSourceError, FileDocumentSource
from notes_index.visibility import visibility_predicate


def _write(path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_reads_markdown_frontmatter(tmp_path) -> None:
    _write(
        tmp_path / "2024" / "First Note.md",
        "---\ntitle: First\npublished: 2024-01-10\ntags: [t1, t2]\n"
        "category: Essays\nsourceLink: https://example.com\n---\n\nBody\n",
    )
    (doc,) = asyncio.run(FileDocumentSource(tmp_path).get_all())
    assert doc.id == "2024/first-note"
    assert doc.title == "First"
    assert doc.published == date(2024, 1, 10)
    assert doc.tags == ["t1", "t2"]
    assert doc.category == "Essays"
    assert doc.source_link == "https://example.com"
    assert doc.draft is None


def test_slug_key_overrides_id_and_quoted_dates(tmp_path) -> None:
    _write(
        tmp_path / "a.md",
        "---\ntitle: A\npublished: \"2024-02-03\"\nslug: custom-id\n---\n",
    )
    (doc,) = asyncio.run(FileDocumentSource(tmp_path).get_all())
    assert doc.id == "custom-id"
    assert doc.published == date(2024, 2, 3)


def test_datetime_published_becomes_date(tmp_path) -> None:
    _write(tmp_path / "a.md", "---\ntitle: A\npublished: 2024-02-03 10:30:00\n---\n")
    (doc,) = asyncio.run(FileDocumentSource(tmp_path).get_all())
    assert doc.published == date(2024, 2, 3)


def test_sorted_path_order_and_predicate(tmp_path) -> None:
    _write(tmp_path / "b.md", "---\ntitle: B\npublished: 2024-01-01\n---\n")
    _write(tmp_path / "a.md", "---\ntitle: A\npublished: 2024-01-01\ndraft: true\n---\n")
    _write(tmp_path / "c.md", "---\ntitle: C\npublished: 2024-01-01\n---\n")
    _write(tmp_path / "notes.txt", "ignored")
    source = FileDocumentSource(tmp_path)

    assert [d.id for d in asyncio.run(source.get_all())] == ["a", "b", "c"]
    visible = asyncio.run(source.get_all(visibility_predicate(True)))
    assert [d.id for d in visible] == ["b", "c"]


def test_reads_notebook_metadata(tmp_path) -> None:
    nb = new_notebook(
        cells=[new_markdown_cell("# Plotting Things\n\nSome text")],
        metadata={"published": "2023-05-06", "tags": ["plots"]},
    )
    nbformat.write(nb, str(tmp_path / "plots.ipynb"))

    (doc,) = asyncio.run(FileDocumentSource(tmp_path).get_all())
    assert doc.id == "plots"
    assert doc.title == "Plotting Things"
    assert doc.published == date(2023, 5, 6)
    assert doc.tags == ["plots"]


def test_missing_directory_is_empty(tmp_path) -> None:
    assert asyncio.run(FileDocumentSource(tmp_path / "nope").get_all()) == []


@pytest.mark.parametrize(
    "text",
    [
        "no frontmatter here\n",
        "---\ntitle: A\n---\n",
        "---\ntitle: [unclosed\npublished: 2024-01-01\n---\n",
        "---\ntitle: A\npublished: not-a-date\n---\n",
    ],
)
def test_invalid_markdown_raises(tmp_path, text) -> None:
    _write(tmp_path / "ok.md", "---\ntitle: OK\npublished: 2024-01-01\n---\n")
    _write(tmp_path / "bad.md", text)
    with pytest.raises(DocumentSourceError) as info:
        asyncio.run(FileDocumentSource(tmp_path).get_all())
    assert info.value.path == tmp_path / "bad.md"


def test_invalid_notebook_raises(tmp_path) -> None:
    _write(tmp_path / "broken.ipynb", "{ not json")
    with pytest.raises(DocumentSourceError):
        asyncio.run(FileDocumentSource(tmp_path).get_all())


def test_notebook_failing_schema_raises(tmp_path) -> None:
    _write(
        tmp_path / "bad.ipynb",
        '{"nbformat": 4, "nbformat_minor": 4, '
        '"metadata": {"title": "Bad", "published": "2024-01-01"}, '
        '"cells": [{"cell_type": "markdown", "metadata": {}}]}',
    )
    with pytest.raises(DocumentSourceError) as info:
        asyncio.run(FileDocumentSource(tmp_path).get_all())
    assert info.value.path == tmp_path / "bad.ipynb"


def test_hidden_directories_skipped(tmp_path) -> None:
    _write(tmp_path / "a.md", "---\ntitle: A\npublished: 2024-01-01\n---\n")
    _write(
        tmp_path / ".ipynb_checkpoints" / "a-checkpoint.md",
        "---\ntitle: A\npublished: 2024-01-01\n---\n",
    )
    _write(tmp_path / "sub" / ".obsidian" / "x.md", "not a document")
    _write(tmp_path / ".draft.md", "---\ntitle: H\npublished: 2024-01-01\n---\n")
    docs = asyncio.run(FileDocumentSource(tmp_path).get_all())
    assert [d.id for d in docs] == ["a"]


def test_undecodable_markdown_raises(tmp_path) -> None:
    (tmp_path / "bad.md").write_bytes(b"---\ntitle: \xff\xfe\n---\n")
    with pytest.raises(DocumentSourceError, match="unreadable file"):
        asyncio.run(FileDocumentSource(tmp_path).get_all())


def test_leading_blank_lines_before_frontmatter(tmp_path) -> None:
    _write(tmp_path / "a.md", "\n\n---\ntitle: A\npublished: 2024-01-01\n---\nBody\n")
    (doc,) = asyncio.run(FileDocumentSource(tmp_path).get_all())
    assert doc.title == "A"
