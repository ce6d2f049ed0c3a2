"""Shared setup logic for CLI commands."""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import click

from context_processor.core.exceptions import ContextProcessorError

if TYPE_CHECKING:
    from context_processor.store import ContextStore


@dataclass
class CliState:
    """Global options, resolved into a store on first use."""

    root: str | None = None
    config_file: str | None = None
    log_level: str | None = None
    _store: ContextStore | None = field(default=None, repr=False)

    def get_store(self) -> ContextStore:
        if self._store is None:
            from context_processor.core.config import Config
            from context_processor.core.utils.logging import setup_logging
            from context_processor.store import ContextStore

            with domain_errors():
                config = Config(config_file=self.config_file)
                if self.root:
                    config.set("storage.root", self.root)
                setup_logging(config, level=self.log_level)
                self._store = ContextStore.from_config(config)
        return self._store


@contextmanager
def domain_errors() -> Iterator[None]:
    """Turn library errors into ``Error: <message>`` on stderr with exit code 1."""
    try:
        yield
    except ContextProcessorError as e:
        raise click.ClickException(str(e)) from e


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def parse_meta(pairs: tuple[str, ...]) -> dict[str, Any]:
    """Parse ``KEY=VALUE`` pairs; values that parse as JSON keep their JSON type."""
    metadata: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--meta")
        try:
            metadata[key] = json.loads(raw)
        except json.JSONDecodeError:
            metadata[key] = raw
    return metadata
