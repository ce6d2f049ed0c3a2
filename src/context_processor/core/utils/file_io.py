"""
File I/O utilities: atomic JSON writes and timestamped backups.

All functions operate on explicit paths: no implicit directory lookups.
"""

from __future__ import annotations

import json
import os
import re
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

BACKUP_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S%f"
_BACKUP_SUFFIX_RE = re.compile(r"\.\d{8}T\d{12}(?:_\d{4})?\.backup\.json")


def atomic_write_json(path: Path, data: Any, indent: int = 2) -> None:
    """Serialize ``data`` to ``path`` via a temp file + ``os.replace``.

    Parent directories are created as needed. The target is either the old
    content or the complete new content, never a partial write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def read_json(path: Path) -> Any:
    """Read and parse a UTF-8 JSON file."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def backup_file(file_path: Path, backup_dir: Path, stem: str | None = None) -> Path | None:
    """Copy ``file_path`` into ``backup_dir`` with a UTC timestamp. Returns the backup path.

    Backups are named ``<stem>.<YYYYmmddTHHMMSSffffff>.backup.json``, with a
    zero-padded ``_NNNN`` counter after the timestamp on collision, so that a
    lexical sort is also a chronological sort. Returns None if the source is missing.
    """
    if not file_path.exists():
        return None

    stem = stem or file_path.stem
    timestamp = datetime.now(timezone.utc).strftime(BACKUP_TIMESTAMP_FORMAT)
    backup_dir.mkdir(parents=True, exist_ok=True)
    backup_path = backup_dir / f"{stem}.{timestamp}.backup.json"
    counter = 1
    while backup_path.exists():
        backup_path = backup_dir / f"{stem}.{timestamp}_{counter:04d}.backup.json"
        counter += 1
    shutil.copy2(file_path, backup_path)
    return backup_path


def list_backups(backup_dir: Path, stem: str) -> list[Path]:
    """Return backups for ``stem``, newest first.

    Names must match exactly, so backups of ``notes.v2`` are never listed as
    backups of ``notes``.
    """
    if not backup_dir.is_dir():
        return []
    prefix = stem + "."
    matches = [
        p
        for p in backup_dir.iterdir()
        if p.name.startswith(prefix) and _BACKUP_SUFFIX_RE.fullmatch(p.name, len(stem))
    ]
    return sorted(matches, reverse=True)


def prune_backups(backup_dir: Path, stem: str, keep: int) -> int:
    """Delete all but the ``keep`` newest backups of ``stem``. Returns the number removed."""
    removed = 0
    for old in list_backups(backup_dir, stem)[max(keep, 0) :]:
        old.unlink(missing_ok=True)
        removed += 1
    return removed
