"""File-backed document storage: one JSON record per document.

Layout under the storage root::

    <root>/<id>.json                                  current record
    <root>/.backups/<id>.<timestamp>.backup.json      copies taken before overwrite/delete

A record that fails to parse is restored from its newest readable backup.
Single-writer: nothing here locks the directory against other processes.
"""

from __future__ import annotations

import errno
import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from loguru import logger

from context_processor.core.exceptions import (
    CorruptedRecordError,
    DocumentNotFoundError,
    StorageError,
    StoragePermissionError,
    ValidationError,
)
from context_processor.core.utils.file_io import (
    atomic_write_json,
    backup_file,
    list_backups,
    prune_backups,
    read_json,
)

from .models import Document, validate_id

BACKUP_DIR_NAME = ".backups"
RECORD_SUFFIX = ".json"


@contextmanager
def _os_errors(action: str, path: Path) -> Iterator[None]:
    """Translate OSError into the storage error taxonomy."""
    try:
        yield
    except PermissionError as e:
        raise StoragePermissionError(f"Permission denied: cannot {action} '{path}'") from e
    except OSError as e:
        if e.errno == errno.ENOSPC:
            raise StorageError(f"Disk full: cannot {action} '{path}'") from e
        raise StorageError(f"Failed to {action} '{path}': {e}") from e


class DocumentStorage:
    """Read and write Document records under a root directory."""

    def __init__(self, root: str | Path = "./contexts", max_backups: int = 5) -> None:
        self.root = Path(root).expanduser()
        self.backup_dir = self.root / BACKUP_DIR_NAME
        self.max_backups = max_backups
        self.last_skipped = 0
        self._ensure_dir()

    def _ensure_dir(self) -> None:
        with _os_errors("create storage directory", self.root):
            self.root.mkdir(parents=True, exist_ok=True)
            self.backup_dir.mkdir(exist_ok=True)

    def _record_path(self, doc_id: str) -> Path:
        return self.root / f"{validate_id(doc_id)}{RECORD_SUFFIX}"

    def _existing_path(self, doc_id: str) -> Path | None:
        """Record path for ``doc_id``, or None if no such record (malformed ids included)."""
        try:
            path = self._record_path(doc_id)
        except ValidationError:
            return None
        return path if path.is_file() else None

    def exists(self, doc_id: str) -> bool:
        return self._existing_path(doc_id) is not None

    # -- Write --------------------------------------------------------------

    def write(self, doc: Document) -> None:
        """Persist ``doc``, backing up any previous version first."""
        path = self._record_path(doc.id)
        with _os_errors("write", path):
            if path.exists():
                backup_file(path, self.backup_dir, stem=doc.id)
            atomic_write_json(path, doc.to_dict())
            self._prune(doc.id)
        logger.debug(f"Wrote record {doc.id} ({path})")

    def remove(self, doc_id: str) -> bool:
        """Delete a record. Returns True if deleted, False if it didn't exist."""
        path = self._existing_path(doc_id)
        if path is None:
            return False
        with _os_errors("delete", path):
            backup_file(path, self.backup_dir, stem=doc_id)
            path.unlink()
            self._prune(doc_id)
        logger.debug(f"Deleted record {doc_id}")
        return True

    def _prune(self, doc_id: str) -> None:
        removed = prune_backups(self.backup_dir, doc_id, self.max_backups)
        if removed:
            logger.debug(f"Pruned {removed} old backup(s) of {doc_id}")

    # -- Read ---------------------------------------------------------------

    def _parse(self, path: Path) -> Document:
        data = read_json(path)
        return Document.from_dict(data)

    def read(self, doc_id: str) -> Document:
        """Load a record, restoring from backup if it is corrupted.

        Raises:
            DocumentNotFoundError: no record for ``doc_id``.
            CorruptedRecordError: unreadable and no valid backup.
        """
        path = self._existing_path(doc_id)
        if path is None:
            raise DocumentNotFoundError(f"Document not found: {doc_id}")

        try:
            with _os_errors("read", path):
                return self._parse(path)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"Corrupted record for {doc_id} ({e}), attempting recovery from backup")
            restored = self._restore(doc_id)
            if restored is None:
                raise CorruptedRecordError(
                    f"Record for '{doc_id}' is corrupted and no valid backup was found"
                ) from e
            return restored

    def read_all(self) -> list[Document]:
        """Load every record in creation order, skipping unrecoverable ones."""
        with _os_errors("list storage directory", self.root):
            paths = sorted(self.root.glob(f"*{RECORD_SUFFIX}"))

        docs: list[Document] = []
        skipped: list[str] = []
        for path in paths:
            if path.name.startswith("."):
                continue
            try:
                with _os_errors("read", path):
                    docs.append(self._parse(path))
                continue
            except (json.JSONDecodeError, UnicodeDecodeError, ValidationError, StorageError) as e:
                logger.warning(f"Unreadable record {path.name}: {e}")

            try:
                restored = self._restore(path.stem)
            except ValidationError:
                restored = None
            if restored is None:
                skipped.append(path.name)
            else:
                docs.append(restored)

        if skipped:
            logger.warning(f"Skipped {len(skipped)} unreadable record(s): {', '.join(skipped)}")
        self.last_skipped = len(skipped)

        docs.sort(key=lambda d: (d.created_at, d.id))
        return docs

    def _restore(self, doc_id: str) -> Document | None:
        """Rewrite the main record from the newest parseable backup."""
        path = self._record_path(doc_id)
        for backup in list_backups(self.backup_dir, doc_id):
            try:
                doc = self._parse(backup)
            except (OSError, json.JSONDecodeError, UnicodeDecodeError, ValidationError):
                continue
            if doc.id != doc_id:
                continue
            with _os_errors("restore", path):
                atomic_write_json(path, doc.to_dict())
            logger.warning(f"Restored record {doc_id} from backup {backup.name}")
            return doc
        return None
