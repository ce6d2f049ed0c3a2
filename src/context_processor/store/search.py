"""Document search: tag filtering, full-text scoring and related documents.

Everything here is a linear scan over an in-memory list of Documents.
The store loads the records and hands them in; nothing here touches disk.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from context_processor.core.exceptions import ValidationError

from .models import Document

TITLE_WEIGHT = 3
CONTENT_WEIGHT = 1
SEARCHABLE_FIELDS = ("title", "content")


@dataclass
class SearchResult:
    """A full-text match with its relevance score.

    Attributes:
        document: The matched document.
        score: Weighted occurrence count (higher = more relevant).
    """

    document: Document
    score: int

    def __repr__(self) -> str:
        return f"SearchResult(id='{self.document.id}', score={self.score})"


def paginate(items: Sequence[Document], limit: int | None = None, offset: int = 0) -> list[Document]:
    """Return ``items[offset:offset + limit]``; ``limit=None`` means everything after ``offset``."""
    if offset is None:
        offset = 0
    if offset < 0:
        raise ValidationError(f"offset must be >= 0, got {offset}")
    if limit is not None and limit < 0:
        raise ValidationError(f"limit must be >= 0, got {limit}")
    end = None if limit is None else offset + limit
    return list(items[offset:end])


def filter_by_tags(docs: Iterable[Document], tags: Sequence[str] | None) -> list[Document]:
    """Keep documents carrying every tag in ``tags``. No tags keeps everything."""
    if not tags:
        return list(docs)
    if isinstance(tags, str) or not all(isinstance(t, str) for t in tags):
        raise ValidationError("Search tags must be a list of strings")
    return [doc for doc in docs if doc.has_tags(list(tags))]


def query_terms(query: str | None) -> list[str]:
    """Lowercased, whitespace-split terms with duplicates removed."""
    if not query or not isinstance(query, str):
        return []
    return list(dict.fromkeys(query.lower().split()))


def score_document(doc: Document, terms: Sequence[str], fields: Sequence[str] = SEARCHABLE_FIELDS) -> int:
    """Sum of weighted substring occurrences of ``terms`` in ``fields``."""
    title = doc.title.lower() if "title" in fields else ""
    content = doc.content.lower() if "content" in fields else ""
    score = 0
    for term in terms:
        if title:
            score += TITLE_WEIGHT * title.count(term)
        if content:
            score += CONTENT_WEIGHT * content.count(term)
    return score


def full_text_search(
    docs: Iterable[Document],
    query: str,
    limit: int = 50,
    fields: Sequence[str] = SEARCHABLE_FIELDS,
) -> list[SearchResult]:
    """Rank documents by :func:`score_document`.

    Ties are broken by title (case-insensitive), then id. Documents that
    match nothing are dropped; an empty query matches nothing.
    """
    if isinstance(fields, str):
        fields = (fields,)
    unknown = [f for f in fields if f not in SEARCHABLE_FIELDS]
    if unknown or not fields:
        raise ValidationError(f"Unknown search field(s) {unknown}; valid: {', '.join(SEARCHABLE_FIELDS)}")
    if limit is not None and limit < 0:
        raise ValidationError(f"limit must be >= 0, got {limit}")

    terms = query_terms(query)
    if not terms:
        return []

    results = []
    for doc in docs:
        score = score_document(doc, terms, fields)
        if score > 0:
            results.append(SearchResult(document=doc, score=score))

    results.sort(key=lambda r: (-r.score, r.document.title.lower(), r.document.id))
    return results if limit is None else results[:limit]


def related_documents(target: Document, docs: Iterable[Document], limit: int = 5) -> list[Document]:
    """Other documents sharing at least one tag with ``target``."""
    if not target.tags:
        return []
    wanted = set(target.tags)
    related = [doc for doc in docs if doc.id != target.id and wanted.intersection(doc.tags)]
    return related[:limit]
