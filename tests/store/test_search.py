"""Tests for context_processor.store.search."""

from datetime import datetime, timedelta, timezone

import pytest

from context_processor.core.exceptions import ValidationError
from context_processor.store.models import Document
from context_processor.store.search import (
    filter_by_tags,
    full_text_search,
    paginate,
    query_terms,
    related_documents,
    score_document,
)

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def doc(doc_id, title="Title", content="content", tags=(), minutes=0):
    stamp = T0 + timedelta(minutes=minutes)
    return Document(
        id=doc_id, title=title, content=content, tags=list(tags), created_at=stamp, updated_at=stamp
    )


class TestPaginate:
    items = [doc(str(i)) for i in range(5)]

    @pytest.mark.parametrize(
        "limit,offset,expected",
        [
            (None, 0, ["0", "1", "2", "3", "4"]),
            (2, 0, ["0", "1"]),
            (2, 3, ["3", "4"]),
            (10, 4, ["4"]),
            (None, 2, ["2", "3", "4"]),
            (0, 0, []),
            (3, 5, []),
            (3, 99, []),
        ],
    )
    def test_slices(self, limit, offset, expected):
        assert [d.id for d in paginate(self.items, limit, offset)] == expected

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError, match="offset"):
            paginate(self.items, None, -1)
        with pytest.raises(ValidationError, match="limit"):
            paginate(self.items, -1, 0)


class TestFilterByTags:
    docs = [
        doc("1", tags=["javascript"]),
        doc("2", tags=["javascript", "async"]),
        doc("3", tags=["react", "javascript"]),
    ]

    def test_and_semantics(self):
        assert [d.id for d in filter_by_tags(self.docs, ["javascript", "async"])] == ["2"]

    def test_single_tag(self):
        assert [d.id for d in filter_by_tags(self.docs, ["javascript"])] == ["1", "2", "3"]

    def test_query_order_irrelevant(self):
        assert [d.id for d in filter_by_tags(self.docs, ["javascript", "react"])] == ["3"]

    @pytest.mark.parametrize("tags", [[], None])
    def test_empty_query_matches_all(self, tags):
        assert len(filter_by_tags(self.docs, tags)) == 3

    def test_exact_match_only(self):
        assert filter_by_tags(self.docs, ["JavaScript"]) == []
        assert filter_by_tags(self.docs, ["java"]) == []

    def test_bare_string_rejected(self):
        with pytest.raises(ValidationError):
            filter_by_tags(self.docs, "javascript")


class TestScoring:
    def test_query_terms(self):
        assert query_terms("  Testing   GUIDE testing ") == ["testing", "guide"]
        assert query_terms("") == []
        assert query_terms("   ") == []
        assert query_terms(None) == []

    def test_title_weighted(self):
        d = doc("1", title="Async guide", content="async and async")
        assert score_document(d, ["async"]) == 3 + 2
        assert score_document(d, ["async"], fields=("title",)) == 3
        assert score_document(d, ["async"], fields=("content",)) == 2


class TestFullTextSearch:
    def test_title_match_ranks_first(self):
        title_match = doc("t", title="TypeScript Guide", content="A comprehensive guide to development")
        content_match = doc("c", title="Development Guide", content="This guide covers TypeScript")
        results = full_text_search([content_match, title_match], "TypeScript")
        assert [r.document.id for r in results] == ["t", "c"]

    def test_alphabetical_tiebreak(self):
        z = doc("z", title="Zulu Guide", content="Content about testing")
        a = doc("a", title="Alpha Guide", content="Content about testing")
        results = full_text_search([z, a], "Guide")
        assert [r.document.title for r in results] == ["Alpha Guide", "Zulu Guide"]

    def test_all_terms_rank_higher(self):
        both = doc("both", title="TypeScript async programming", content="Guide to async programming in TypeScript")
        one_title = doc("one", title="TypeScript basics", content="Introduction to TypeScript")
        content_only = doc("content", title="Development Guide", content="Contains some async examples")
        results = full_text_search([content_only, one_title, both], "TypeScript async")
        assert results[0].document.id == "both"
        assert len(results) == 3

    def test_no_match_and_empty_query(self):
        docs = [doc("1", title="Python", content="Learn Python")]
        assert full_text_search(docs, "haskell") == []
        assert full_text_search(docs, "") == []
        assert full_text_search(docs, "   ") == []
        assert full_text_search([], "python") == []

    def test_special_characters_are_literal(self):
        docs = [doc("1", title="C++ tips", content="Use std::vector (carefully).")]
        assert len(full_text_search(docs, "c++")) == 1
        assert len(full_text_search(docs, "(carefully)")) == 1
        assert full_text_search(docs, ".*") == []

    def test_limit(self):
        docs = [doc(str(i), title=f"guide {i}") for i in range(10)]
        assert len(full_text_search(docs, "guide", limit=3)) == 3

    def test_fields(self):
        docs = [doc("t", title="Async", content="x"), doc("c", title="x", content="async")]
        assert [r.document.id for r in full_text_search(docs, "async", fields=("title",))] == ["t"]
        assert [r.document.id for r in full_text_search(docs, "async", fields=("content",))] == ["c"]
        assert [r.document.id for r in full_text_search(docs, "async", fields="content")] == ["c"]

    def test_bad_fields(self):
        with pytest.raises(ValidationError, match="Unknown search field"):
            full_text_search([], "x", fields=("tags",))
        with pytest.raises(ValidationError):
            full_text_search([], "x", fields=())


class TestRelated:
    def test_shares_a_tag(self):
        target = doc("t", tags=["python", "web"])
        others = [
            target,
            doc("1", tags=["web"]),
            doc("2", tags=["rust"]),
            doc("3", tags=["python"]),
        ]
        assert [d.id for d in related_documents(target, others)] == ["1", "3"]

    def test_limit_and_untagged(self):
        target = doc("t", tags=["x"])
        others = [doc(str(i), tags=["x"]) for i in range(8)]
        assert len(related_documents(target, others, limit=5)) == 5
        assert related_documents(doc("u"), others) == []
