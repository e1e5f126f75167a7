"""Collects the artifacts of a metrics directory into one summary."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .. import artifacts
from ..file_ops import read_text_if_exists
from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class LintIssue:
    linter: str
    text: str
    filename: str = ""
    line: int = 0
    column: int = 0
    source_lines: list[str] = field(default_factory=list)

    @property
    def location(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "LintIssue":
        # golangci-lint emits CamelCase keys; accept lowercase as well
        def pick(obj: dict[str, Any], key: str, default: Any) -> Any:
            if key in obj:
                return obj[key]
            return obj.get(key[0].lower() + key[1:], default)

        pos = pick(data, "Pos", {}) or {}
        return cls(
            linter=str(pick(data, "FromLinter", "")),
            text=str(pick(data, "Text", "")),
            filename=str(pick(pos, "Filename", "")),
            line=int(pick(pos, "Line", 0) or 0),
            column=int(pick(pos, "Column", 0) or 0),
            source_lines=[str(s) for s in (pick(data, "SourceLines", []) or [])],
        )


@dataclass
class DashboardSummary:
    """Everything the HTML dashboard renders."""

    metrics_dir: Path
    timestamp: str
    vet_output: str = ""
    vet_issue_count: int = 0
    lint_issues: list[LintIssue] = field(default_factory=list)
    coverage_profile: str = ""
    coverage_percent: Optional[float] = None
    coverage_html: Optional[str] = None
    gocyclo_lines: list[str] = field(default_factory=list)
    file_metrics: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def lint_issue_count(self) -> int:
        return len(self.lint_issues)

    @property
    def total_rows(self) -> int:
        return sum(
            m.get("number_of_rows", 0)
            for m in self.file_metrics.values()
            if isinstance(m.get("number_of_rows", 0), int)
        )


def collect_summary(metrics_dir: Path, now: Optional[datetime] = None) -> DashboardSummary:
    """Read every known artifact in ``metrics_dir``; missing ones stay empty.

    Raises:
        FileAccessError: If an existing artifact cannot be read.
    """
    metrics_dir = Path(metrics_dir)
    summary = DashboardSummary(
        metrics_dir=metrics_dir,
        timestamp=(now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S"),
    )

    summary.vet_output = read_text_if_exists(metrics_dir / artifacts.VET_OUTPUT)
    summary.vet_issue_count = sum(
        1 for line in summary.vet_output.strip().splitlines() if line.strip()
    )

    summary.lint_issues = parse_lint_report(
        read_text_if_exists(metrics_dir / artifacts.LINT_REPORT)
    )

    summary.coverage_profile = read_text_if_exists(metrics_dir / artifacts.COVERAGE_PROFILE)
    summary.coverage_percent = parse_coverage_profile(summary.coverage_profile)
    if (metrics_dir / artifacts.COVERAGE_HTML).exists():
        summary.coverage_html = artifacts.COVERAGE_HTML

    gocyclo = read_text_if_exists(metrics_dir / artifacts.GOCYCLO_OUTPUT).strip()
    summary.gocyclo_lines = gocyclo.splitlines() if gocyclo else []

    summary.file_metrics = parse_metrics_report(
        read_text_if_exists(metrics_dir / artifacts.METRICS_REPORT)
    )
    return summary


def parse_lint_report(text: str) -> list[LintIssue]:
    if not text.strip():
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Lint report is not valid JSON, ignoring it")
        return []
    if not isinstance(data, dict):
        return []
    raw = data.get("Issues") or data.get("issues") or []
    issues = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        try:
            issues.append(LintIssue.from_json(item))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping malformed lint issue: %s", e)
    return issues


def parse_metrics_report(text: str) -> dict[str, dict[str, Any]]:
    if not text.strip():
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Metrics report is not valid JSON, ignoring it")
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(k): v for k, v in data.items() if isinstance(v, dict)}


def parse_coverage_profile(text: str) -> Optional[float]:
    """Statement coverage percentage of a ``go test -coverprofile`` file.

    Each block line is ``file:start,end statements count``; a block counts as
    covered when ``count > 0``. Blocks repeated across packages are merged.
    """
    blocks: dict[str, tuple[int, bool]] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("mode:"):
            continue
        parts = line.rsplit(" ", 2)
        if len(parts) != 3:
            continue
        block, statements, count = parts
        try:
            n_statements = int(statements)
            covered = int(count) > 0
        except ValueError:
            continue
        previous = blocks.get(block)
        blocks[block] = (n_statements, covered or (previous is not None and previous[1]))

    total = sum(n for n, _ in blocks.values())
    if total == 0:
        return None
    covered_total = sum(n for n, covered in blocks.values() if covered)
    return round(100.0 * covered_total / total, 1)
