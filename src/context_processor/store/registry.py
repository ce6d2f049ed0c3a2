"""Read-only catalog of named preprocessing models.

The built-in models are always present. Extra models can be loaded from a
YAML or JSON file at construction time; after that the catalog never changes.

Models file format::

    models:
      - name: links_only
        description: Only detect URLs
        strategies: [fetch]
      - name: tidy
        description: Clarify, then analyze
        strategies:
          - type: clarify
          - {type: analyze, enabled: false}
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from typing import Any

import yaml
from loguru import logger

from context_processor.core.exceptions import ConfigurationError, ModelNotFoundError

from .models import ContextModel, Strategy

DEFAULT_MODELS: tuple[ContextModel, ...] = (
    ContextModel(
        name="clarify",
        description=(
            "Strip filler and hedge phrases (basically, essentially, literally, kind of, sort of, you know). "
            "Records a clarity score and issues under metadata['clarity']."
        ),
        strategies=(Strategy.CLARIFY,),
    ),
    ContextModel(
        name="search_optimized",
        description=(
            "Enrich for search: metadata['analysis'] gets text statistics and the top 5 keywords; "
            "the top 3 keywords are appended to tags and recorded in metadata['search_keywords']. "
            "Keywords are lowercase words of 5+ letters, stop words excluded, ranked by frequency "
            "with ties in first-seen order."
        ),
        strategies=(Strategy.ANALYZE, Strategy.SEARCH),
    ),
    ContextModel(
        name="comprehensive",
        description=(
            "Clarify, analyze, search and fetch in that order: filler removal, statistics and top 5 "
            "keywords in metadata['analysis'], top 3 keywords appended to tags, and up to 5 URLs "
            "listed in metadata['urls']. Keyword ties keep first-seen order."
        ),
        strategies=(Strategy.CLARIFY, Strategy.ANALYZE, Strategy.SEARCH, Strategy.FETCH),
    ),
)


def _parse_strategies(name: str, entries: Any) -> tuple[Strategy, ...]:
    if not isinstance(entries, list):
        raise ConfigurationError(f"Model '{name}': strategies must be a list")
    strategies: list[Strategy] = []
    for entry in entries:
        if isinstance(entry, dict):
            if not entry.get("enabled", True):
                continue
            entry = entry.get("type") or entry.get("name")
        try:
            strategies.append(Strategy(entry))
        except ValueError:
            valid = ", ".join(s.value for s in Strategy)
            raise ConfigurationError(f"Model '{name}': unknown strategy {entry!r} (valid: {valid})") from None
    return tuple(strategies)


def _parse_model(data: Any) -> ContextModel:
    if not isinstance(data, dict) or not data.get("name"):
        raise ConfigurationError(f"Invalid model entry: {data!r}")
    name = str(data["name"])
    return ContextModel(
        name=name,
        description=str(data.get("description", "")),
        strategies=_parse_strategies(name, data.get("strategies", [])),
    )


class ModelRegistry:
    """Named preprocessing models, in registration order."""

    def __init__(self, models: Iterable[ContextModel] | None = None, include_defaults: bool = True):
        self._models: dict[str, ContextModel] = {}
        if include_defaults:
            for model in DEFAULT_MODELS:
                self._models[model.name] = model
        for model in models or ():
            self._models[model.name] = model

    @classmethod
    def from_file(cls, path: str, include_defaults: bool = True) -> ModelRegistry:
        """Build a registry from a YAML/JSON models file (plus the built-ins)."""
        if not os.path.exists(path):
            raise ConfigurationError(f"Models file not found: {path}")
        ext = os.path.splitext(path)[1].lower()
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f) if ext == ".json" else yaml.safe_load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot parse models file {path}: {e}") from e

        entries = (data or {}).get("models") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise ConfigurationError(f"Models file {path} must contain a 'models' list")

        models = [_parse_model(entry) for entry in entries]
        logger.info(f"Loaded {len(models)} model(s) from {path}")
        return cls(models, include_defaults=include_defaults)

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)

    def names(self) -> list[str]:
        return list(self._models)

    def list_models(self) -> list[ContextModel]:
        return list(self._models.values())

    def get_model_info(self, name: str) -> ContextModel:
        """Return the model called ``name``.

        Raises:
            ModelNotFoundError: ``name`` is not registered.
        """
        try:
            return self._models[name]
        except KeyError:
            available = ", ".join(self._models) or "none"
            raise ModelNotFoundError(f"Model not found: {name} (available: {available})") from None
