"""Fixed-size pool of metric worker threads."""

from __future__ import annotations

import threading
from typing import Optional, Sequence

from ..exceptions import FileAccessError, UnregisteredFileError
from ..logging_config import get_logger
from .aggregator import MetricsAggregator
from .calculators import LineCount, MetricCalculator
from .models import MetricValue, WorkItem
from .work_queue import WorkQueue

logger = get_logger(__name__)

DEFAULT_WORKERS = 5


class WorkerPool:
    """N threads that consume work items and record metrics.

    Each worker reads one file at a time, computes every calculator over its
    text and stores the results with a single aggregator update. Failures
    are per file: they are logged and counted, and the worker moves on.
    Workers exit when the queue is exhausted or cancelled.
    """

    def __init__(
        self,
        queue: WorkQueue[WorkItem],
        aggregator: MetricsAggregator,
        calculators: Optional[Sequence[MetricCalculator]] = None,
        size: int = DEFAULT_WORKERS,
        cancel_event: Optional[threading.Event] = None,
    ):
        if size < 1:
            raise ValueError("worker pool size must be at least 1")
        self.queue = queue
        self.aggregator = aggregator
        self.calculators = list(calculators) if calculators else [LineCount()]
        self.size = size
        self.cancel_event = cancel_event or threading.Event()

        self._threads: list[threading.Thread] = []
        self._lock = threading.Lock()
        self._failed: list[str] = []
        self._processed = 0

    def start(self) -> None:
        """Start every worker thread. Must be called once, before the walk."""
        if self._threads:
            raise RuntimeError("worker pool already started")
        for index in range(self.size):
            thread = threading.Thread(
                target=self._work, name=f"gokode-worker-{index}", daemon=True
            )
            self._threads.append(thread)
            thread.start()
        logger.debug("Started %d metric workers", self.size)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every worker has exited (the completion barrier).

        Returns:
            True if all workers exited, False if ``timeout`` elapsed first.
        """
        for thread in self._threads:
            thread.join(timeout)
            if thread.is_alive():
                return False
        return True

    def alive(self) -> int:
        return sum(1 for thread in self._threads if thread.is_alive())

    @property
    def failed(self) -> list[str]:
        with self._lock:
            return list(self._failed)

    @property
    def processed(self) -> int:
        with self._lock:
            return self._processed

    # ── Worker loop ────────────────────────────────────────────

    def _work(self) -> None:
        while True:
            item = self.queue.get()
            if item is None:
                return
            try:
                if self.cancel_event.is_set():
                    return
                self._process(item)
            finally:
                item.close()

    def _process(self, item: WorkItem) -> None:
        try:
            values = self.measure(item)
        except FileAccessError as e:
            logger.warning("Skipping metrics for %s: %s", item.file_id, e)
            with self._lock:
                self._failed.append(item.file_id)
            return
        except Exception:
            # A dead worker could leave the walker blocked on a full queue.
            logger.exception("Metric calculation crashed for %s", item.file_id)
            with self._lock:
                self._failed.append(item.file_id)
            return

        try:
            self.aggregator.set_metrics(item.file_id, values)
        except UnregisteredFileError as e:
            logger.error("%s", e)
            return

        with self._lock:
            self._processed += 1

    def measure(self, item: WorkItem) -> dict[str, MetricValue]:
        """Read ``item`` as text and run every calculator over it.

        Raises:
            FileAccessError: If the stream cannot be read.
        """
        try:
            text = item.stream.read()
        except (OSError, ValueError) as e:
            # ValueError: stream already closed
            raise FileAccessError(item.path, f"Read failed: {e}")
        return {calc.name: calc.compute(text) for calc in self.calculators}
