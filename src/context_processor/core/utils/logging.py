"""
Logging configuration using loguru.

The library only emits through ``loguru.logger``; it never adds sinks on
import. The CLI calls setup_logging() with the loaded Config, whose
``logging`` section picks the level, the optional log file and its rotation.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from context_processor.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from context_processor.core.config import Config

# {name} is the emitting module, e.g. context_processor.store.storage
CONSOLE_FORMAT = "<level>{level: <7}</level> <cyan>{name}</cyan>: {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {name}:{function}:{line} | {message}"


def resolve_level(level: object) -> str:
    """Upper-case ``level`` and check loguru knows it."""
    name = str(level).strip().upper()
    try:
        logger.level(name)
    except ValueError as e:
        raise ConfigurationError(f"Unknown log level: {level!r}") from e
    return name


def setup_logging(config: Config | None = None, level: str | None = None) -> None:
    """
    Replace loguru's sinks with a stderr sink and, if ``logging.file`` is set, a rotating file sink.

    Args:
        config: Source of ``logging.level``, ``logging.file``, ``logging.rotation``
            and ``logging.retention``. Defaults apply when omitted.
        level: Overrides ``logging.level`` (the CLI's ``--log-level``).

    Raises:
        ConfigurationError: unknown level name.
    """
    section = (config.get("logging") if config else None) or {}
    level_name = resolve_level(level or section.get("level") or "WARNING")

    logger.remove()
    logger.add(sys.stderr, level=level_name, format=CONSOLE_FORMAT)

    log_file = section.get("file")
    if log_file:
        path = Path(str(log_file)).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(path),
            level=level_name,
            format=FILE_FORMAT,
            rotation=section.get("rotation") or "10 MB",
            retention=section.get("retention") or "7 days",
            encoding="utf-8",
        )
    logger.debug(f"Logging at {level_name}" + (f", file {log_file}" if log_file else ""))
