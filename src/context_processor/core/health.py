"""Aggregated health check: single call to assess a store's health.

Combines storage accessibility, document/model counts and operation
metrics into one status object for monitoring and the ``health`` command.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from context_processor.store.store import ContextStore

ERROR_RATIO_WARNING = 0.10


@dataclass
class HealthStatus:
    """Snapshot of store health."""

    healthy: bool = True
    """Overall health: False if the storage root cannot be used."""

    storage_root: str = ""

    storage_writable: bool = True

    document_count: int = 0

    skipped_records: int = 0
    """Records found unreadable (and not restorable) during the last listing."""

    model_count: int = 0

    uptime: float = 0.0

    total_operations: int = 0

    total_errors: int = 0

    warnings: list[str] = field(default_factory=list)
    """Human-readable warnings for degraded subsystems."""

    def to_dict(self) -> dict:
        return asdict(self)


def check_health(store: ContextStore) -> HealthStatus:
    """Assess storage, registry and operation health of ``store``.

    Returns:
        A :class:`HealthStatus` snapshot.
    """
    root = store.storage.root
    status = HealthStatus(storage_root=str(root))

    if not root.is_dir() or not os.access(root, os.W_OK | os.X_OK):
        status.healthy = False
        status.storage_writable = False
        status.warnings.append(f"Storage root is not writable: {root}")
    else:
        status.document_count = store.count()
        status.skipped_records = store.storage.last_skipped
        if status.skipped_records:
            status.warnings.append(f"{status.skipped_records} unreadable record(s) skipped")

    status.model_count = len(store.list_models())

    summary = store.metrics.summary()
    status.uptime = summary["uptime"]
    status.total_operations = sum(op["count"] for op in summary["operations"].values())
    status.total_errors = summary["errors"]["total"]
    if status.total_operations and status.total_errors / status.total_operations > ERROR_RATIO_WARNING:
        status.warnings.append(
            f"Error ratio high ({status.total_errors}/{status.total_operations} operations failed)"
        )

    logger.info(f"Health check: healthy={status.healthy} documents={status.document_count}")
    return status
