"""One metrics run: walker thread, worker pool, barrier, report.

State machine::

    IDLE -> RUNNING -> DRAINING -> BARRIER -> SERIALIZING -> DONE
                                      \\-> FAILED | CANCELLED

A pipeline instance runs once; create a new one for the next run.
"""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Optional

from ..config import GokodeConfig
from ..exceptions import (
    MetricsError,
    PipelineCancelledError,
    PipelineStateError,
    ReportWriteError,
)
from ..logging_config import get_logger
from .aggregator import MetricsAggregator
from .calculators import build_calculators
from .models import PipelineResult, PipelineState, WorkItem
from .walker import Walker, WalkStats
from .work_queue import WorkQueue
from .workers import WorkerPool
from .writer import ReportWriter

logger = get_logger(__name__)

# Cancellation reason used when Ctrl-C stops a run.
INTERRUPTED = "interrupted"


class MetricsPipeline:
    """Discovers files under ``root`` and writes their metrics report."""

    def __init__(
        self,
        root: Path,
        config: Optional[GokodeConfig] = None,
        output: Optional[Path] = None,
        aggregator: Optional[MetricsAggregator] = None,
    ):
        self.root = Path(root)
        self.config = config or GokodeConfig()
        if output is None:
            output = self.config.metrics_dir(self.root) / self.config.report_name
        self.output = Path(output)
        self.aggregator = aggregator or MetricsAggregator()
        self.calculators = build_calculators(self.config.metrics)

        self.cancel_event = threading.Event()
        self.queue: WorkQueue[WorkItem] = WorkQueue(self.config.effective_queue_size)

        self._state = PipelineState.IDLE
        self._state_lock = threading.Lock()
        self._walk_stats: Optional[WalkStats] = None
        self._walk_error: Optional[BaseException] = None
        self._cancel_reason = "cancelled"

    # ── State ──────────────────────────────────────────────────

    @property
    def state(self) -> PipelineState:
        with self._state_lock:
            return self._state

    def _set_state(self, state: PipelineState) -> None:
        with self._state_lock:
            logger.debug("Pipeline %s -> %s", self._state.value, state.value)
            self._state = state

    def cancel(self, reason: str = "cancelled") -> None:
        """Stop the run: no new files are opened, waiters wake, workers exit.

        Safe to call from any thread, any number of times.
        """
        if self.cancel_event.is_set():
            return
        self._cancel_reason = reason
        self.cancel_event.set()
        self.queue.cancel()
        logger.info("Metrics pipeline cancelled: %s", reason)

    # ── Run ────────────────────────────────────────────────────

    def run(self, write_report: bool = True) -> PipelineResult:
        """Walk, measure, wait for the workers, then write the report.

        Args:
            write_report: Serialize the snapshot to :attr:`output`.

        Returns:
            PipelineResult with the snapshot and run counters.

        Raises:
            TraversalError: If the walk failed. No report is written.
            ReportWriteError: If the report could not be written.
            PipelineCancelledError: If the run was cancelled.
            PipelineStateError: If this pipeline already ran.
        """
        with self._state_lock:
            if self._state is not PipelineState.IDLE:
                raise PipelineStateError(self._state.value, "run")
            self._state = PipelineState.RUNNING

        started = time.perf_counter()
        pool = WorkerPool(
            self.queue,
            self.aggregator,
            calculators=self.calculators,
            size=self.config.workers,
            cancel_event=self.cancel_event,
        )
        walker = Walker(
            self.root,
            self.aggregator,
            self.queue,
            config=self.config,
            cancel_event=self.cancel_event,
        )

        # Workers first, so the walker's first put has a consumer.
        pool.start()
        walker_thread = threading.Thread(
            target=self._walk, args=(walker,), name="gokode-walker", daemon=True
        )
        walker_thread.start()

        try:
            walker_thread.join()
            self._set_state(PipelineState.DRAINING)
            pool.wait()
        except KeyboardInterrupt:
            self.cancel(INTERRUPTED)
            walker_thread.join()
            pool.wait()

        self._release_leftovers()
        self._set_state(PipelineState.BARRIER)

        stats = self._walk_stats or WalkStats()
        if self.cancel_event.is_set() or stats.cancelled:
            self._set_state(PipelineState.CANCELLED)
            raise PipelineCancelledError(self._cancel_reason)

        if self._walk_error is not None:
            self._set_state(PipelineState.FAILED)
            raise self._walk_error

        snapshot = self.aggregator.snapshot()
        result = PipelineResult(
            snapshot=snapshot,
            files_discovered=stats.discovered,
            files_skipped=list(stats.skipped),
            files_failed=pool.failed,
            rejected_writes=self.aggregator.rejected_writes,
        )

        if write_report:
            self._set_state(PipelineState.SERIALIZING)
            try:
                result.report_path = ReportWriter(self.output).write(snapshot)
            except ReportWriteError:
                self._set_state(PipelineState.FAILED)
                raise

        result.elapsed_seconds = time.perf_counter() - started
        self._set_state(PipelineState.DONE)
        logger.info(
            "Measured %d files in %.2fs (%d skipped, %d failed)",
            result.files_measured,
            result.elapsed_seconds,
            len(result.files_skipped),
            len(result.files_failed),
        )
        return result

    def _walk(self, walker: Walker) -> None:
        try:
            self._walk_stats = walker.walk()
        except MetricsError as e:
            logger.error("%s", e)
            self._walk_error = e
        except Exception as e:
            logger.exception("Walker crashed")
            self._walk_error = e

    def _release_leftovers(self) -> None:
        # Items left behind by a cancelled run still hold open handles.
        leftovers = self.queue.drain()
        for item in leftovers:
            item.close()
        if leftovers:
            logger.debug("Closed %d undelivered files", len(leftovers))
