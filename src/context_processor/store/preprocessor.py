"""Preprocessing strategies and the pipeline that chains them.

Every strategy is a pure function ``str -> StrategyResult``: it returns the
content for the next step plus side data (metadata keys, extra tags). Only
``clarify`` rewrites the text; the others pass it through unchanged and
report what they found.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import Any

from loguru import logger

from context_processor.core.utils.text import collapse_spaces, extract_keywords

from .models import ContextModel, ProcessingResult, Strategy, StrategyResult

ANALYZE_KEYWORDS = 5
SEARCH_KEYWORDS = 3
MAX_URLS = 5

FILLER_PHRASES = ("basically", "essentially", "literally", "kind of", "sort of", "you know")

_FILLER_RE = re.compile(
    r"\b(?:" + "|".join(r"\s+".join(map(re.escape, p.split())) for p in FILLER_PHRASES) + r")\b,?[ \t]*",
    re.IGNORECASE,
)
_PRONOUN_RE = re.compile(r"\b(?:it|this|that|they)\b", re.IGNORECASE)
_PASSIVE_RE = re.compile(r"\b(?:is|are|was|were)\s+\w+ed\b", re.IGNORECASE)
_VAGUE_RE = re.compile(r"\b(?:basically|generally|usually|kind\s+of|sort\s+of)\b", re.IGNORECASE)
_URL_RE = re.compile(r"https?://\S+")
_URL_TRAILING = ".,;:!?)]}'\""


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def _without_urls(content: str) -> str:
    return _URL_RE.sub(" ", content)


def clarity_report(content: str) -> dict[str, Any]:
    """Score how clear ``content`` reads (0-100) and list the issues found."""
    issues: list[str] = []
    score = 100

    if len(_PRONOUN_RE.findall(content)) > 5:
        issues.append("Multiple ambiguous pronouns detected")
        score -= 10

    if len(_PASSIVE_RE.findall(content)) > 3:
        issues.append("Heavy use of passive voice")
        score -= 5

    vague = len(_VAGUE_RE.findall(content))
    if vague:
        issues.append(f"Found {vague} vague word(s)")
        score -= vague * 2

    return {"score": max(0, score), "issues": issues}


def clarify(content: str) -> StrategyResult:
    """Strip filler and hedge phrases."""
    report = clarity_report(content)
    cleaned, removed = _FILLER_RE.subn("", content)
    if removed:
        cleaned = collapse_spaces(cleaned)
    report["removed"] = removed
    return StrategyResult(Strategy.CLARIFY, cleaned, metadata={"clarity": report})


def analyze(content: str) -> StrategyResult:
    """Attach word/sentence/paragraph statistics and the top keywords."""
    words = content.split()
    sentences = [s for s in re.split(r"[.!?]+", content) if s.strip()]
    paragraphs = [p for p in re.split(r"\n\s*\n", content) if p.strip()]
    avg_len = sum(len(w) for w in words) / len(words) if words else 0.0

    if avg_len > 6:
        complexity = "high"
    elif avg_len > 4:
        complexity = "medium"
    else:
        complexity = "low"

    analysis = {
        "word_count": len(words),
        "sentence_count": len(sentences),
        "paragraph_count": len(paragraphs),
        "average_word_length": round(avg_len, 2),
        "complexity": complexity,
        "keywords": extract_keywords(_without_urls(content), top_n=ANALYZE_KEYWORDS),
    }
    return StrategyResult(Strategy.ANALYZE, content, metadata={"analysis": analysis})


def search(content: str) -> StrategyResult:
    """Turn the top keywords into search tags."""
    keywords = extract_keywords(_without_urls(content), top_n=SEARCH_KEYWORDS)
    return StrategyResult(Strategy.SEARCH, content, metadata={"search_keywords": keywords}, tags=keywords)


def find_urls(content: str, limit: int = MAX_URLS) -> list[str]:
    """Return unique http(s) URLs in first-seen order, trailing punctuation removed."""
    urls: list[str] = []
    for match in _URL_RE.findall(content):
        url = match.rstrip(_URL_TRAILING)
        if url in ("http://", "https://") or url in urls:
            continue
        urls.append(url)
        if len(urls) >= limit:
            break
    return urls


def fetch(content: str) -> StrategyResult:
    """List embedded URLs without touching the text."""
    return StrategyResult(Strategy.FETCH, content, metadata={"urls": find_urls(content)})


STRATEGIES: dict[Strategy, Callable[[str], StrategyResult]] = {
    Strategy.CLARIFY: clarify,
    Strategy.ANALYZE: analyze,
    Strategy.SEARCH: search,
    Strategy.FETCH: fetch,
}


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class Preprocessor:
    """Run a model's strategies in order over a document's content."""

    def __init__(self, strategies: dict[Strategy, Callable[[str], StrategyResult]] | None = None):
        self.strategies = dict(strategies or STRATEGIES)

    def run(self, content: str, strategies: Iterable[Strategy]) -> list[StrategyResult]:
        """Chain ``strategies``: each one sees the previous one's output."""
        results: list[StrategyResult] = []
        current = content
        for strategy in strategies:
            result = self.strategies[Strategy(strategy)](current)
            logger.debug(f"Strategy {result.strategy.value} applied ({len(current)} -> {len(result.content)} chars)")
            results.append(result)
            current = result.content
        return results

    def process(
        self,
        model: ContextModel,
        content: str,
        tags: list[str] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ProcessingResult:
        """Apply ``model`` and fold every strategy's side data into tags/metadata.

        Strategy metadata keys overwrite same-named caller keys; strategy tags
        are appended unless already present. Inputs are not mutated.
        """
        merged_tags = list(tags or [])
        merged_metadata = dict(metadata or {})
        results = self.run(content, model.strategies)

        for result in results:
            merged_metadata.update(result.metadata)
            for tag in result.tags:
                if tag not in merged_tags:
                    merged_tags.append(tag)

        return ProcessingResult(
            processed_content=results[-1].content if results else content,
            metadata=merged_metadata,
            tags=merged_tags,
            applied_strategies=[r.strategy.value for r in results],
        )
