"""Concurrent file discovery and per-file metrics.

The walker registers each source file in the aggregator and hands it to a
fixed pool of worker threads through a bounded work queue. Once every worker
has exited the aggregator snapshot is written as the JSON report.
"""

from .aggregator import MetricsAggregator
from .calculators import LineCount, MetricCalculator, build_calculators, register_calculator
from .models import MetricsSnapshot, MetricValue, PipelineResult, PipelineState, WorkItem
from .pipeline import MetricsPipeline
from .walker import Walker, WalkStats
from .work_queue import QueueState, WorkQueue
from .workers import WorkerPool
from .writer import ReportWriter

__all__ = [
    "MetricsAggregator",
    "MetricsPipeline",
    "MetricsSnapshot",
    "MetricValue",
    "MetricCalculator",
    "LineCount",
    "PipelineResult",
    "PipelineState",
    "QueueState",
    "ReportWriter",
    "Walker",
    "WalkStats",
    "WorkItem",
    "WorkQueue",
    "WorkerPool",
    "build_calculators",
    "register_calculator",
]
