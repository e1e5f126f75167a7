"""Bounded handoff queue between the walker and the worker pool.

``queue.Queue`` has no notion of closing, so this is a small condition
variable queue with three observable states:

* ``OPEN`` -- accepting items.
* ``DRAINING`` -- closed; already queued items are still delivered.
* ``EXHAUSTED`` -- closed and empty; :meth:`WorkQueue.get` returns ``None``.

Cancellation is orthogonal: it wakes every blocked producer and consumer,
after which :meth:`put` raises and :meth:`get` returns ``None``. Items still
queued at that point are handed back by :meth:`drain` so their handles can be
closed.
"""

from __future__ import annotations

import threading
from collections import deque
from enum import Enum
from typing import Generic, Optional, TypeVar

from ..exceptions import PipelineCancelledError, QueueClosedError

T = TypeVar("T")


class QueueState(Enum):
    OPEN = "open"
    DRAINING = "draining"
    EXHAUSTED = "exhausted"


class WorkQueue(Generic[T]):
    """FIFO queue with blocking put, explicit close, and cancellation."""

    def __init__(self, maxsize: int = 0) -> None:
        if maxsize < 0:
            raise ValueError("maxsize must be >= 0 (0 means unbounded)")
        self.maxsize = maxsize
        self._items: deque[T] = deque()
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)
        self._closed = False
        self._cancelled = False

    # ── Producer side ──────────────────────────────────────────

    def put(self, item: T, timeout: Optional[float] = None) -> None:
        """Append ``item``, blocking while the queue is full.

        Never drops an item: it either enqueues or raises.

        Raises:
            QueueClosedError: If the queue was closed.
            PipelineCancelledError: If the queue was cancelled while waiting.
            TimeoutError: If ``timeout`` elapsed with the queue still full.
        """
        with self._not_full:
            if not self._not_full.wait_for(self._can_put, timeout=timeout):
                raise TimeoutError("timed out waiting for free space in work queue")
            if self._cancelled:
                raise PipelineCancelledError("work queue cancelled")
            if self._closed:
                raise QueueClosedError(self._state().value)
            self._items.append(item)
            self._not_empty.notify()

    def close(self) -> bool:
        """Stop accepting items. Returns False if the queue was already closed."""
        with self._lock:
            if self._closed:
                return False
            self._closed = True
            # Wake idle consumers so they can observe EXHAUSTED, and blocked
            # producers so they fail instead of waiting forever.
            self._not_empty.notify_all()
            self._not_full.notify_all()
            return True

    # ── Consumer side ──────────────────────────────────────────

    def get(self, timeout: Optional[float] = None) -> Optional[T]:
        """Remove and return the next item.

        Returns ``None`` once the queue is closed and empty, or cancelled.

        Raises:
            TimeoutError: If ``timeout`` elapsed with the queue open and empty.
        """
        with self._not_empty:
            if not self._not_empty.wait_for(self._can_get, timeout=timeout):
                raise TimeoutError("timed out waiting for work queue item")
            if self._cancelled or not self._items:
                return None
            item = self._items.popleft()
            self._not_full.notify()
            return item

    # ── Cancellation ───────────────────────────────────────────

    def cancel(self) -> None:
        """Wake every waiter; subsequent puts raise and gets return None."""
        with self._lock:
            self._cancelled = True
            self._closed = True
            self._not_empty.notify_all()
            self._not_full.notify_all()

    def drain(self) -> list[T]:
        """Remove and return every queued item without delivering it."""
        with self._lock:
            items = list(self._items)
            self._items.clear()
            self._not_full.notify_all()
            return items

    # ── Introspection ──────────────────────────────────────────

    @property
    def state(self) -> QueueState:
        with self._lock:
            return self._state()

    @property
    def cancelled(self) -> bool:
        with self._lock:
            return self._cancelled

    def qsize(self) -> int:
        with self._lock:
            return len(self._items)

    def _state(self) -> QueueState:
        if not self._closed:
            return QueueState.OPEN
        if self._items and not self._cancelled:
            return QueueState.DRAINING
        return QueueState.EXHAUSTED

    def _can_put(self) -> bool:
        if self._cancelled or self._closed:
            return True
        return self.maxsize <= 0 or len(self._items) < self.maxsize

    def _can_get(self) -> bool:
        return bool(self._items) or self._closed or self._cancelled
