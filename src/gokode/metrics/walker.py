"""Directory walker: discovers source files and feeds the work queue."""

from __future__ import annotations

import fnmatch
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from ..config import GokodeConfig
from ..exceptions import FileAccessError, PipelineCancelledError, TraversalError
from ..logging_config import get_logger
from .aggregator import MetricsAggregator
from .models import WorkItem
from .work_queue import WorkQueue

logger = get_logger(__name__)


@dataclass
class WalkStats:
    """What the walker did during one traversal."""

    discovered: int = 0
    skipped: list[str] = field(default_factory=list)
    cancelled: bool = False


class Walker:
    """Recursively discovers matching files under ``root``.

    For every match the walker opens the file, registers it in the
    aggregator and only then puts it on the queue, so a worker can never
    receive an unregistered file. The put blocks while the queue is full.
    The queue is closed exactly once when the walk ends, however it ends.
    """

    def __init__(
        self,
        root: Path,
        aggregator: MetricsAggregator,
        queue: WorkQueue[WorkItem],
        config: Optional[GokodeConfig] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.root = Path(root)
        self.aggregator = aggregator
        self.queue = queue
        self.config = config or GokodeConfig()
        self.cancel_event = cancel_event or threading.Event()
        self._extensions = frozenset(ext.lower() for ext in self.config.extensions)
        self._exclude_dirs = frozenset(self.config.exclude_dirs)

    # ── Discovery ──────────────────────────────────────────────

    def iter_candidates(self) -> Iterator[tuple[str, Path]]:
        """Lazily yield ``(file_id, path)`` for every matching regular file.

        Raises:
            TraversalError: If the root is unusable or a directory cannot be
                listed.
        """
        if not self.root.exists():
            raise TraversalError(self.root, "root directory does not exist")
        if not self.root.is_dir():
            raise TraversalError(self.root, "root path is not a directory")

        follow = self.config.follow_symlinks
        seen_dirs: set[tuple[int, int]] = set()

        def _on_error(err: OSError) -> None:
            raise TraversalError(self.root, str(err.strerror or err), Path(err.filename or self.root))

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=_on_error, followlinks=follow):
            current = Path(dirpath)
            if follow:
                try:
                    st = current.stat()
                except OSError as e:
                    raise TraversalError(self.root, f"cannot stat directory: {e}", current)
                key = (st.st_dev, st.st_ino)
                if key in seen_dirs:
                    # Symlink cycle, already walked.
                    dirnames[:] = []
                    continue
                seen_dirs.add(key)

            dirnames[:] = sorted(d for d in dirnames if self._keep_dir(current, d))

            for name in sorted(filenames):
                path = current / name
                file_id = path.relative_to(self.root).as_posix()
                if self._keep_file(path, file_id):
                    yield file_id, path

    def _keep_dir(self, parent: Path, name: str) -> bool:
        if name in self._exclude_dirs:
            return False
        if name.startswith(".") and not self.config.allow_hidden_files:
            return False
        if not self.config.follow_symlinks and (parent / name).is_symlink():
            return False
        return True

    def _keep_file(self, path: Path, file_id: str) -> bool:
        name = path.name
        if os.path.splitext(name)[1].lower() not in self._extensions:
            return False
        if name.startswith(".") and not self.config.allow_hidden_files:
            return False
        if any(fnmatch.fnmatch(file_id, pattern) for pattern in self.config.exclude_patterns):
            return False
        # Symlinked files count when they resolve to a regular file; broken
        # links and special files do not.
        return path.is_file()

    # ── Feeding the queue ──────────────────────────────────────

    def walk(self) -> WalkStats:
        """Traverse the tree and enqueue every readable match.

        Returns:
            WalkStats for the traversal.

        Raises:
            TraversalError: On a fatal traversal failure. The queue is
                closed before the error propagates.
        """
        stats = WalkStats()
        try:
            for file_id, path in self.iter_candidates():
                if self.cancel_event.is_set():
                    stats.cancelled = True
                    break

                stream = self._open(path, file_id, stats)
                if stream is None:
                    continue

                self.aggregator.register_file(file_id)
                item = WorkItem(file_id=file_id, path=path, stream=stream)
                try:
                    self.queue.put(item)
                except PipelineCancelledError:
                    item.close()
                    stats.cancelled = True
                    break
                stats.discovered += 1
                logger.debug("Queued %s", file_id)
        finally:
            self.queue.close()

        logger.info(
            "Walk finished: %d files queued, %d skipped%s",
            stats.discovered,
            len(stats.skipped),
            " (cancelled)" if stats.cancelled else "",
        )
        return stats

    def _open(self, path: Path, file_id: str, stats: WalkStats):
        try:
            size = path.stat().st_size
            if size > self.config.max_file_size_bytes:
                logger.warning(
                    "Skipping %s: %.2fMB exceeds the %.2fMB limit",
                    file_id,
                    size / (1024 * 1024),
                    self.config.max_file_size_mb,
                )
                stats.skipped.append(file_id)
                return None
            return open(path, encoding="utf-8", errors="replace")
        except OSError as e:
            err = FileAccessError(path, f"Cannot open file: {e}")
            logger.warning("Skipping %s: %s", file_id, err)
            stats.skipped.append(file_id)
            return None
