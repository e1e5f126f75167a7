"""Data types shared by the metrics pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import IO, Iterator, Mapping, Optional, Union

MetricValue = Union[int, float, str]


class PipelineState(Enum):
    """Lifecycle of a single metrics run. States are never re-entered."""

    IDLE = "idle"
    RUNNING = "running"  # walker and workers active
    DRAINING = "draining"  # queue closed, workers finishing
    BARRIER = "barrier"  # every worker has exited
    SERIALIZING = "serializing"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class WorkItem:
    """An open source file handed from the walker to exactly one worker.

    The worker that dequeues the item owns ``stream`` and must close it.
    """

    file_id: str
    path: Path
    stream: IO[str]

    def close(self) -> None:
        self.stream.close()


class MetricsSnapshot(Mapping[str, Mapping[str, MetricValue]]):
    """Immutable point-in-time copy of the aggregator contents."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, Mapping[str, MetricValue]]):
        frozen = {file_id: MappingProxyType(dict(metrics)) for file_id, metrics in entries.items()}
        self._entries: Mapping[str, Mapping[str, MetricValue]] = MappingProxyType(frozen)

    def __getitem__(self, file_id: str) -> Mapping[str, MetricValue]:
        return self._entries[file_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"MetricsSnapshot({len(self)} files)"

    def to_dict(self) -> dict[str, dict[str, MetricValue]]:
        """Plain, key-sorted copy suitable for JSON serialization."""
        return {file_id: dict(sorted(self._entries[file_id].items())) for file_id in sorted(self._entries)}

    def metric(self, name: str) -> dict[str, MetricValue]:
        """Values of one metric keyed by file id (files lacking it are omitted)."""
        return {
            file_id: metrics[name]
            for file_id, metrics in self._entries.items()
            if name in metrics
        }


@dataclass
class PipelineResult:
    """Outcome of a completed metrics run."""

    snapshot: MetricsSnapshot
    report_path: Optional[Path] = None
    files_discovered: int = 0
    files_skipped: list[str] = field(default_factory=list)
    files_failed: list[str] = field(default_factory=list)
    rejected_writes: int = 0
    elapsed_seconds: float = 0.0

    @property
    def files_measured(self) -> int:
        return self.files_discovered - len(self.files_failed)

    @property
    def total_rows(self) -> int:
        return sum(
            value for value in self.snapshot.metric("number_of_rows").values() if isinstance(value, int)
        )
