"""Exception hierarchy for gokode."""

from .base import GokodeError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError
from .metrics import (
    FileAccessError,
    MetricsError,
    PipelineCancelledError,
    PipelineStateError,
    QueueClosedError,
    ReportWriteError,
    TraversalError,
    UnregisteredFileError,
)
from .tools import ToolError

__all__ = [
    "GokodeError",
    "MetricsError",
    "FileAccessError",
    "UnregisteredFileError",
    "TraversalError",
    "ReportWriteError",
    "PipelineStateError",
    "PipelineCancelledError",
    "QueueClosedError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "ToolError",
]
