"""Operation metrics for a context store.

Counts calls, durations and failures per operation name. Each store owns
its own collector, so two stores in one process never share numbers.
"""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from loguru import logger


@dataclass
class OperationMetrics:
    """Running totals for one operation."""

    count: int = 0
    total_duration: float = 0.0
    errors: int = 0
    last_executed: float | None = None

    @property
    def avg_duration(self) -> float:
        return self.total_duration / self.count if self.count else 0.0

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "total_duration": self.total_duration,
            "avg_duration": self.avg_duration,
            "errors": self.errors,
            "last_executed": self.last_executed,
        }


class MetricsCollector:
    """Track per-operation call counts, durations and errors.

    Usage::

        metrics = MetricsCollector()
        with metrics.track("save"):
            do_save()
        metrics.summary()["operations"]["save"]["count"]  # -> 1
    """

    def __init__(self) -> None:
        self._start = time.monotonic()
        self._operations: dict[str, OperationMetrics] = {}
        self._errors_by_type: dict[str, int] = {}

    @contextmanager
    def track(self, operation: str) -> Iterator[None]:
        """Time the wrapped block and record an error if it raises."""
        started = time.perf_counter()
        try:
            yield
        except Exception as e:
            self.record_error(operation, type(e).__name__)
            raise
        finally:
            self._record(operation, time.perf_counter() - started)

    def _record(self, operation: str, duration: float) -> None:
        op = self._operations.setdefault(operation, OperationMetrics())
        op.count += 1
        op.total_duration += duration
        op.last_executed = time.time()
        logger.debug(f"Operation completed: {operation} ({duration * 1000:.2f} ms, count={op.count})")

    def record_error(self, operation: str, error_type: str) -> None:
        """Count a failure of ``operation`` under ``error_type``."""
        self._operations.setdefault(operation, OperationMetrics()).errors += 1
        self._errors_by_type[error_type] = self._errors_by_type.get(error_type, 0) + 1

    @property
    def uptime(self) -> float:
        """Seconds since the collector was created or reset."""
        return time.monotonic() - self._start

    def get(self, operation: str) -> OperationMetrics:
        return self._operations.get(operation, OperationMetrics())

    def summary(self) -> dict:
        """Snapshot of uptime, per-operation totals and errors by type."""
        return {
            "uptime": self.uptime,
            "operations": {name: op.to_dict() for name, op in self._operations.items()},
            "errors": {
                "total": sum(self._errors_by_type.values()),
                "by_type": dict(self._errors_by_type),
            },
        }

    def reset(self) -> None:
        self._start = time.monotonic()
        self._operations.clear()
        self._errors_by_type.clear()
