from __future__ import annotations

from typing import Callable, Iterable, List

from .models import Document


def is_visible(doc: Document, production: bool) -> bool:
    return (not production) or doc.draft is not True


def visibility_predicate(production: bool) -> Callable[[Document], bool]:
    def _visible(doc: Document) -> bool:
        return is_visible(doc, production)

    return _visible


def filter_documents(docs: Iterable[Document], production: bool) -> List[Document]:
    return [d for d in docs if is_visible(d, production)]
