"""Core data models for the context store.

Documents are plain dataclasses that convert to and from the JSON records
kept on disk. Model descriptors are frozen: the registry hands out the same
objects to every caller.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from context_processor.core.exceptions import ValidationError
from context_processor.core.utils.text import truncate_text

MAX_ID_LENGTH = 128
_ID_FORBIDDEN = ("/", "\\", "\0")


class Strategy(StrEnum):
    """Preprocessing strategies a model can chain."""

    CLARIFY = "clarify"  # Strip filler/hedge phrases
    ANALYZE = "analyze"  # Summary statistics + keywords
    SEARCH = "search"  # Keyword tags for search
    FETCH = "fetch"  # Detect embedded URLs


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_id(doc_id: Any) -> str:
    """Return ``doc_id`` if it is usable as a record file name, else raise ValidationError.

    Any non-empty stem of at most MAX_ID_LENGTH characters is accepted unless
    it starts with ``.`` or contains a path separator or NUL.
    """
    if (
        not isinstance(doc_id, str)
        or not 0 < len(doc_id) <= MAX_ID_LENGTH
        or doc_id.startswith(".")
        or any(ch in doc_id for ch in _ID_FORBIDDEN)
    ):
        raise ValidationError(
            f"Invalid document id {doc_id!r}: must be 1-{MAX_ID_LENGTH} characters without '/', '\\' or NUL "
            "and must not start with '.'"
        )
    return doc_id


def _check_json_value(value: Any, where: str) -> None:
    """Raise ValidationError unless ``value`` survives a JSON round trip unchanged."""
    if value is None or isinstance(value, (str, bool, int)):
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError(f"Metadata value at {where} must be a finite number, got {value!r}")
        return
    if isinstance(value, list):
        for i, item in enumerate(value):
            _check_json_value(item, f"{where}[{i}]")
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise ValidationError(f"Metadata keys must be strings, got {key!r} at {where}")
            _check_json_value(item, f"{where}.{key}")
        return
    raise ValidationError(f"Metadata value at {where} is not JSON-serialisable: {type(value).__name__}")


def _validate_fields(title: Any, content: Any, tags: Any, metadata: Any) -> None:
    if not title or not isinstance(title, str):
        raise ValidationError("Title must be a non-empty string")
    if not content or not isinstance(content, str):
        raise ValidationError("Content must be a non-empty string")
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise ValidationError("Tags must be a list of strings")
    if not isinstance(metadata, dict):
        raise ValidationError("Metadata must be a dictionary")
    _check_json_value(metadata, "metadata")


def _parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken to be UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class DocumentDraft:
    """What a caller hands to ``ContextStore.save``.

    Attributes:
        title: Free-text title (required).
        content: Free-text body (required).
        tags: Ordered tags; duplicates allowed.
        metadata: Arbitrary JSON-serialisable metadata.
        id: Existing id to overwrite, or None to allocate a new one.
    """

    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    id: str | None = None

    def __post_init__(self):
        if self.tags is None:
            self.tags = []
        if self.metadata is None:
            self.metadata = {}
        _validate_fields(self.title, self.content, self.tags, self.metadata)
        if self.id is not None:
            validate_id(self.id)


@dataclass
class Document:
    """A stored document.

    ``content`` is always what the caller saved; ``processed_content`` holds
    the output of the preprocessing model named in ``model``, if any.
    """

    id: str
    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    processed_content: str | None = None
    model: str | None = None
    applied_strategies: list[str] = field(default_factory=list)

    def has_tags(self, tags: list[str]) -> bool:
        """True if every tag in ``tags`` is one of this document's tags."""
        return all(tag in self.tags for tag in tags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "processed_content": self.processed_content,
            "tags": list(self.tags),
            "metadata": self.metadata,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "model": self.model,
            "applied_strategies": list(self.applied_strategies),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Document:
        """Build a Document from a stored record, raising ValidationError if malformed."""
        if not isinstance(data, dict):
            raise ValidationError("Invalid record: not an object")
        missing = [key for key in ("id", "title", "content", "created_at", "updated_at") if not data.get(key)]
        if missing:
            raise ValidationError(f"Invalid record: missing required fields {', '.join(missing)}")

        tags = data.get("tags") or []
        metadata = data.get("metadata") or {}
        _validate_fields(data["title"], data["content"], tags, metadata)
        try:
            created_at = _parse_timestamp(data["created_at"])
            updated_at = _parse_timestamp(data["updated_at"])
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid record timestamps: {e}") from e

        return cls(
            id=validate_id(data["id"]),
            title=data["title"],
            content=data["content"],
            tags=list(tags),
            metadata=metadata,
            created_at=created_at,
            updated_at=updated_at,
            processed_content=data.get("processed_content"),
            model=data.get("model"),
            applied_strategies=list(data.get("applied_strategies") or []),
        )

    def __repr__(self) -> str:
        return f"Document(id='{self.id}', title='{truncate_text(self.title, 40)}', tags={self.tags})"


@dataclass(frozen=True)
class ContextModel:
    """A named, ordered chain of preprocessing strategies."""

    name: str
    description: str
    strategies: tuple[Strategy, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "strategies": [s.value for s in self.strategies],
        }


@dataclass
class StrategyResult:
    """Output of one strategy: rewritten content plus side data.

    Attributes:
        strategy: Which strategy produced this.
        content: The (possibly unchanged) content handed to the next strategy.
        metadata: Keys merged shallowly into the document's metadata.
        tags: Tags appended to the document (skipping ones already present).
    """

    strategy: Strategy
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)


@dataclass
class ProcessingResult:
    """Combined output of running a model over a draft."""

    processed_content: str
    metadata: dict[str, Any]
    tags: list[str]
    applied_strategies: list[str] = field(default_factory=list)
