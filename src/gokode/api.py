"""Public API for gokode.

Example:
    >>> from gokode import collect_metrics
    >>>
    >>> result = collect_metrics("/path/to/project")
    >>> result.snapshot["cmd/main.go"]["number_of_rows"]
    42
    >>>
    >>> # Without writing metrics/report.json
    >>> result = collect_metrics("/path/to/project", write_report=False, workers=1)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config import GokodeConfig, load_config
from .logging_config import get_logger
from .metrics import MetricsPipeline, PipelineResult

logger = get_logger(__name__)


def collect_metrics(
    path: str = ".",
    output: Optional[Path] = None,
    config: Optional[GokodeConfig] = None,
    config_file: Optional[Path] = None,
    write_report: bool = True,
    **overrides,
) -> PipelineResult:
    """Compute per-file metrics for every source file under ``path``.

    Args:
        path: Project root to walk
        output: Report file (default: ``<path>/metrics/report.json``)
        config: Ready configuration; when omitted it is loaded with
            :func:`load_config` from ``config_file`` and ``overrides``
        config_file: Optional TOML config file
        write_report: Serialize the report after the workers finish
        **overrides: Configuration overrides (e.g. ``workers=8``)

    Returns:
        PipelineResult with the snapshot and run counters

    Raises:
        GokodeError: Traversal, report or configuration failures
    """
    if config is None:
        config = load_config(config_file=config_file, **overrides)
    pipeline = MetricsPipeline(Path(path), config=config, output=output)
    logger.debug("Collecting metrics under %s with %d workers", path, config.workers)
    return pipeline.run(write_report=write_report)
