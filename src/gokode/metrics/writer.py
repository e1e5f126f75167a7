"""Serializes a metrics snapshot to the JSON report."""

from __future__ import annotations

import json
from pathlib import Path

from ..exceptions import FileAccessError, ReportWriteError
from ..file_ops import atomic_write_text
from ..logging_config import get_logger
from .models import MetricsSnapshot

logger = get_logger(__name__)


class ReportWriter:
    """Writes ``{file_id: {metric: value}}`` as JSON.

    The document is published atomically, so readers either see the
    previous report or the complete new one.
    """

    def __init__(self, path: Path, indent: int = 2):
        self.path = Path(path)
        self.indent = indent

    def render(self, snapshot: MetricsSnapshot) -> str:
        try:
            return json.dumps(
                snapshot.to_dict(), indent=self.indent, sort_keys=True, allow_nan=False
            ) + "\n"
        except (TypeError, ValueError) as e:
            raise ReportWriteError(self.path, f"Serialization failed: {e}")

    def write(self, snapshot: MetricsSnapshot) -> Path:
        """Serialize ``snapshot`` and publish it at :attr:`path`.

        Raises:
            ReportWriteError: If serialization or any filesystem step fails.
                No partial file is left behind.
        """
        content = self.render(snapshot)
        try:
            atomic_write_text(self.path, content)
        except FileAccessError as e:
            raise ReportWriteError(self.path, e.reason)

        logger.info("Wrote metrics for %d files to %s", len(snapshot), self.path)
        return self.path
