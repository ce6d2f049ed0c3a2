"""Text processing utilities: whitespace normalization, tokenizing, keyword ranking."""

import re
from collections import Counter

STOP_WORDS = frozenset(
    {
        "about", "above", "after", "again", "against", "among", "and", "another",
        "because", "been", "before", "being", "below", "between", "both", "could",
        "does", "doing", "during", "each", "every", "from", "further", "have",
        "having", "here", "into", "itself", "might", "more", "most", "other",
        "ought", "over", "same", "shall", "should", "since", "some", "such",
        "than", "that", "their", "theirs", "them", "themselves", "then", "there",
        "these", "they", "this", "those", "through", "under", "until", "very",
        "were", "what", "when", "where", "which", "while", "whose", "with",
        "within", "without", "would", "your", "yours", "yourself", "still", "the",
    }
)  # fmt: skip

_NON_WORD_RE = re.compile(r"[^\w\s]")
_SPACES_RE = re.compile(r"(?<=\S)[ \t]{2,}")


def collapse_spaces(text: str) -> str:
    """Collapse inner runs of spaces/tabs and drop space before punctuation.

    Newlines and leading indentation are kept.
    """
    text = _SPACES_RE.sub(" ", text)
    text = re.sub(r"(?<=\S)[ \t]+([,.;:!?])", r"\1", text)
    return "\n".join(line.rstrip() for line in text.split("\n"))


def tokenize(text: str) -> list[str]:
    """Lowercase and split on anything that is not a word character."""
    if not text or not isinstance(text, str):
        return []
    return _NON_WORD_RE.sub(" ", text.lower()).split()


def extract_keywords(text: str, top_n: int = 10, min_word_length: int = 5) -> list[str]:
    """Return up to ``top_n`` keywords ranked by frequency.

    Words shorter than ``min_word_length``, stop words and pure numbers are
    ignored. Equal frequencies keep first-seen order.
    """
    words = [
        w for w in tokenize(text) if len(w) >= min_word_length and w not in STOP_WORDS and not w.isdigit()
    ]
    return [word for word, _count in Counter(words).most_common(top_n)]


def truncate_text(text: str, max_length: int = 100, ellipsis: str = "...") -> str:
    """Truncate text to max_length, appending ellipsis if truncated."""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ellipsis)] + ellipsis
