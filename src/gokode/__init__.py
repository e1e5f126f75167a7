"""
gokode - Go code analysis and quality tool

Wraps gofmt, go vet, golangci-lint, go test coverage and gocyclo, computes
per-file metrics with a concurrent walker/worker pipeline, and renders the
results as an HTML dashboard.
"""

__version__ = "0.3.0"

from .api import collect_metrics
from .config import GokodeConfig, load_config
from .metrics import MetricsPipeline, PipelineResult

__all__ = [
    "collect_metrics",  # Main entry point
    "MetricsPipeline",
    "PipelineResult",
    "GokodeConfig",
    "load_config",
]
