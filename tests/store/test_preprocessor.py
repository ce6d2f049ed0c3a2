"""Tests for context_processor.store.preprocessor."""

import pytest

from context_processor.store.models import ContextModel, Strategy, StrategyResult
from context_processor.store.preprocessor import (
    Preprocessor,
    analyze,
    clarify,
    clarity_report,
    fetch,
    find_urls,
    search,
)


class TestClarify:
    def test_removes_filler_phrases(self):
        result = clarify("The system basically provides features. It is kind of fast.")
        assert result.content == "The system provides features. It is fast."
        assert result.metadata["clarity"]["removed"] == 2

    def test_case_insensitive_and_leading_comma(self):
        result = clarify("Basically, the cache works. You know, it is Sort Of done.")
        assert result.content == "the cache works. it is done."

    def test_whole_words_only(self):
        text = "Sorting is a kind offer, not literal."
        assert clarify(text).content == text

    def test_keeps_indentation(self):
        text = "def f():\n    return 1  # basically fine"
        assert clarify(text).content == "def f():\n    return 1 # fine"

    def test_clean_content_unchanged(self):
        text = "The authentication system validates user credentials against the database."
        result = clarify(text)
        assert result.content == text
        assert result.metadata["clarity"] == {"score": 100, "issues": [], "removed": 0}
        assert result.strategy is Strategy.CLARIFY


class TestClarityReport:
    def test_vague_words_cost_two_points_each(self):
        report = clarity_report("It basically works. It generally works. It usually works.")
        assert report["score"] == 94
        assert report["issues"] == ["Found 3 vague word(s)"]

    def test_many_pronouns(self):
        report = clarity_report("It is. This is. That is. They are. It was. This was.")
        assert "Multiple ambiguous pronouns detected" in report["issues"]
        assert report["score"] == 90

    def test_passive_voice(self):
        report = clarity_report("It was parsed and the rows were loaded, files are cached, data is stored.")
        assert "Heavy use of passive voice" in report["issues"]

    def test_score_floor(self):
        assert clarity_report("basically " * 80)["score"] == 0


class TestAnalyze:
    def test_statistics(self):
        content = "First sentence here. Second one!\n\nNew paragraph? Yes."
        result = analyze(content)
        analysis = result.metadata["analysis"]
        assert result.content == content
        assert analysis["word_count"] == 8
        assert analysis["sentence_count"] == 4
        assert analysis["paragraph_count"] == 2

    def test_complexity_levels(self):
        assert analyze("The cat sat. It was red.").metadata["analysis"]["complexity"] == "low"
        complex_text = "The implementation methodology incorporates sophisticated algorithmic paradigms."
        assert analyze(complex_text).metadata["analysis"]["complexity"] == "high"

    def test_average_word_length_rounded(self):
        analysis = analyze("aa bbb").metadata["analysis"]
        assert analysis["average_word_length"] == 2.5

    def test_top_five_keywords(self):
        text = "storage storage storage python python caching search quick tests extra words"
        keywords = analyze(text).metadata["analysis"]["keywords"]
        assert keywords == ["storage", "python", "caching", "search", "quick"]

    def test_whitespace_only(self):
        analysis = analyze("   ").metadata["analysis"]
        assert analysis["word_count"] == 0
        assert analysis["average_word_length"] == 0.0
        assert analysis["keywords"] == []


class TestSearch:
    def test_top_three_keywords_become_tags(self):
        text = "Async programming with async functions and promises. Promises make async programming easier."
        result = search(text)
        assert result.tags == ["async", "programming", "promises"]
        assert result.metadata == {"search_keywords": ["async", "programming", "promises"]}
        assert result.content == text

    def test_no_keywords(self):
        assert search("a bb cc").tags == []


class TestFetch:
    def test_finds_urls_without_changing_content(self):
        text = "See https://example.com/docs, and http://foo.org/a?b=1). Also https://example.com/docs."
        result = fetch(text)
        assert result.content == text
        assert result.metadata["urls"] == ["https://example.com/docs", "http://foo.org/a?b=1"]

    def test_caps_at_five(self):
        text = " ".join(f"https://site{i}.com" for i in range(8))
        assert len(find_urls(text)) == 5

    def test_no_urls(self):
        assert fetch("no links here, just ftp://old.example").metadata["urls"] == []

    def test_bare_scheme_ignored(self):
        assert find_urls("visit https:// later") == []


class TestPreprocessor:
    def test_run_chains_output(self):
        calls = []

        def upper(content):
            calls.append(content)
            return StrategyResult(Strategy.CLARIFY, content.upper())

        def exclaim(content):
            calls.append(content)
            return StrategyResult(Strategy.ANALYZE, content + "!")

        pre = Preprocessor({Strategy.CLARIFY: upper, Strategy.ANALYZE: exclaim})
        results = pre.run("hi", [Strategy.CLARIFY, Strategy.ANALYZE])
        assert calls == ["hi", "HI"]
        assert results[-1].content == "HI!"

    def test_process_comprehensive(self):
        model = ContextModel(
            "comprehensive", "", (Strategy.CLARIFY, Strategy.ANALYZE, Strategy.SEARCH, Strategy.FETCH)
        )
        content = "Caching basically speeds requests. Caching helps requests. Docs: https://example.com/cache"
        result = Preprocessor().process(model, content, tags=["perf"], metadata={"author": "me"})

        assert result.processed_content == "Caching speeds requests. Caching helps requests. Docs: https://example.com/cache"
        assert result.applied_strategies == ["clarify", "analyze", "search", "fetch"]
        assert result.tags == ["perf", "caching", "requests", "speeds"]
        assert result.metadata["author"] == "me"
        assert result.metadata["urls"] == ["https://example.com/cache"]
        assert set(result.metadata) == {"author", "clarity", "analysis", "search_keywords", "urls"}

    def test_process_does_not_mutate_inputs(self):
        model = ContextModel("s", "", (Strategy.SEARCH,))
        tags = ["existing"]
        metadata = {"k": 1}
        Preprocessor().process(model, "keyword keyword", tags=tags, metadata=metadata)
        assert tags == ["existing"]
        assert metadata == {"k": 1}

    def test_search_tags_not_duplicated(self):
        model = ContextModel("s", "", (Strategy.SEARCH,))
        result = Preprocessor().process(model, "python python", tags=["python"])
        assert result.tags == ["python"]

    def test_strategy_metadata_overrides_caller_keys(self):
        model = ContextModel("f", "", (Strategy.FETCH,))
        result = Preprocessor().process(model, "no links", metadata={"urls": "mine"})
        assert result.metadata["urls"] == []

    def test_empty_model_returns_content(self):
        model = ContextModel("noop", "", ())
        result = Preprocessor().process(model, "same")
        assert result.processed_content == "same"
        assert result.applied_strategies == []

    def test_unknown_strategy_name(self):
        with pytest.raises(ValueError):
            Preprocessor().run("text", ["translate"])
