"""Metrics pipeline exceptions: file access, traversal, aggregation, output."""

from pathlib import Path
from typing import Optional

from .base import GokodeError


class MetricsError(GokodeError):
    """Base class for metrics pipeline errors."""

    pass


class FileAccessError(MetricsError):
    """Raised when a single file cannot be opened or read.

    Recoverable: the file is logged and skipped, the run continues.
    """

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class UnregisteredFileError(MetricsError):
    """Raised when a metric is written for a file that was never registered.

    Recoverable: the write is skipped.
    """

    def __init__(self, file_id: str, metric: str):
        super().__init__(
            f"File is not registered: {file_id}",
            details={"file_id": file_id, "metric": metric},
        )
        self.file_id = file_id
        self.metric = metric


class TraversalError(MetricsError):
    """Raised when directory traversal cannot continue."""

    def __init__(self, root: Path, reason: str, path: Optional[Path] = None):
        details = {"root": str(root), "reason": reason}
        if path is not None:
            details["path"] = str(path)
        super().__init__(f"Directory traversal failed: {root}", details=details)
        self.root = root
        self.reason = reason
        self.path = path


class ReportWriteError(MetricsError):
    """Raised when the metrics report cannot be serialized or published."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot write report: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class PipelineStateError(MetricsError):
    """Raised when a pipeline is used outside its lifecycle (e.g. run twice)."""

    def __init__(self, state: str, operation: str):
        super().__init__(
            f"Cannot {operation} a pipeline in state {state}",
            details={"state": state, "operation": operation},
        )
        self.state = state
        self.operation = operation


class PipelineCancelledError(MetricsError):
    """Raised when a run is cancelled before the report is written."""

    def __init__(self, reason: str = "cancelled"):
        super().__init__("Metrics pipeline was cancelled", details={"reason": reason})
        self.reason = reason


class QueueClosedError(MetricsError):
    """Raised when putting onto a work queue that no longer accepts items."""

    def __init__(self, state: str):
        super().__init__("Work queue is closed", details={"state": state})
        self.state = state
