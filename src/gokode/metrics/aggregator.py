"""Thread-safe store of per-file metrics."""

from __future__ import annotations

import threading
from typing import Mapping

from ..exceptions import UnregisteredFileError
from ..logging_config import get_logger
from .models import MetricsSnapshot, MetricValue

logger = get_logger(__name__)


class MetricsAggregator:
    """Maps a file id to its metric entry (metric name -> value).

    Thread-safe: the walker registers files and the workers record metrics
    concurrently; one lock guards entry mutation and snapshotting, so a
    snapshot never sees a half-applied :meth:`set_metrics` call.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, dict[str, MetricValue]] = {}
        self._rejected = 0

    def register_file(self, file_id: str) -> None:
        """Create an empty entry for ``file_id``.

        Registering the same id again replaces its entry with an empty one;
        there is never more than one entry per id.
        """
        with self._lock:
            if file_id in self._entries:
                logger.debug("File registered again: %s", file_id)
            self._entries[file_id] = {}

    def set_metric(self, file_id: str, name: str, value: MetricValue) -> None:
        """Record one metric for a registered file.

        Raises:
            UnregisteredFileError: If ``file_id`` was never registered. The
                write is skipped; callers log and continue.
        """
        self.set_metrics(file_id, {name: value})

    def set_metrics(self, file_id: str, values: Mapping[str, MetricValue]) -> None:
        """Record several metrics for a file as one atomic update.

        Raises:
            UnregisteredFileError: If ``file_id`` was never registered.
        """
        with self._lock:
            entry = self._entries.get(file_id)
            if entry is None:
                self._rejected += 1
                raise UnregisteredFileError(file_id, ", ".join(values) or "<none>")
            entry.update(values)

    def is_registered(self, file_id: str) -> bool:
        with self._lock:
            return file_id in self._entries

    def snapshot(self) -> MetricsSnapshot:
        """Return an immutable, internally consistent copy of all entries."""
        with self._lock:
            return MetricsSnapshot(self._entries)

    @property
    def rejected_writes(self) -> int:
        """Number of writes refused because the file was not registered."""
        with self._lock:
            return self._rejected

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, file_id: object) -> bool:
        with self._lock:
            return file_id in self._entries
