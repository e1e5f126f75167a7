"""Runs the external Go quality tools and stores their artifacts.

Findings reported by ``go vet``, ``golangci-lint`` and ``gocyclo`` never fail
a step; only a tool that cannot run, failing tests, or an artifact that
cannot be written raise :class:`ToolError`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .. import artifacts
from ..config import GokodeConfig
from ..exceptions import FileAccessError, ToolError
from ..file_ops import atomic_write_text
from ..logging_config import get_logger
from .install import ensure_installed
from .process import run_command

logger = get_logger(__name__)


@dataclass
class ToolResult:
    """Outcome of one tool step."""

    tool: str
    returncode: int
    artifact: Optional[Path] = None
    issue_count: int = 0
    output: str = ""

    @property
    def clean(self) -> bool:
        return self.returncode == 0 and self.issue_count == 0


def count_issue_lines(output: str) -> int:
    """Non-empty lines of tool output, ignoring ``#`` package headers."""
    return sum(
        1 for line in output.splitlines() if line.strip() and not line.lstrip().startswith("#")
    )


def count_lint_issues(report: str) -> int:
    try:
        data = json.loads(report)
    except (json.JSONDecodeError, ValueError):
        return 0
    if not isinstance(data, dict):
        return 0
    issues = data.get("Issues") or data.get("issues") or []
    return len(issues) if isinstance(issues, list) else 0


class ToolRunner:
    """Runs each tool in ``path`` and writes artifacts to ``metrics_dir``."""

    def __init__(
        self,
        path: Path,
        metrics_dir: Optional[Path] = None,
        config: Optional[GokodeConfig] = None,
    ):
        self.path = Path(path)
        self.config = config or GokodeConfig()
        self.metrics_dir = Path(metrics_dir) if metrics_dir else self.config.metrics_dir(self.path)
        self.timeout = self.config.timeout_seconds

    def _artifact(self, name: str) -> Path:
        return self.metrics_dir / name

    def _write(self, tool: str, path: Path, content: str) -> Path:
        try:
            return atomic_write_text(path, content)
        except FileAccessError as e:
            raise ToolError(tool, f"cannot write {path.name}: {e.reason}")

    def format(self) -> ToolResult:
        """``gofmt -w -s .``"""
        proc = run_command(["gofmt", "-w", "-s", "."], cwd=self.path, timeout=self.timeout)
        if proc.returncode != 0:
            raise ToolError("gofmt", proc.stdout.strip() or "formatting failed", proc.returncode)
        return ToolResult("gofmt", proc.returncode, output=proc.stdout)

    def vet(self) -> ToolResult:
        """``go vet ./...``; combined output goes to ``vet.txt``."""
        proc = run_command(["go", "vet", "./..."], cwd=self.path, timeout=self.timeout)
        target = self._write("go vet", self._artifact(artifacts.VET_OUTPUT), proc.stdout)
        issues = count_issue_lines(proc.stdout) if proc.returncode != 0 else 0
        if issues:
            logger.warning("go vet found %d issue lines (see %s)", issues, target)
        return ToolResult("go vet", proc.returncode, target, issues, proc.stdout)

    def lint(self, fix: bool = False) -> ToolResult:
        """``golangci-lint run --out-format json ./...``, pretty-printed to ``lint.json``."""
        ensure_installed("golangci-lint", self.config)
        args = ["golangci-lint", "run", "--out-format", "json", "./..."]
        if fix:
            args.append("--fix")
        proc = run_command(args, cwd=self.path, timeout=self.timeout)

        # golangci-lint may print warnings around the JSON document
        output = proc.stdout.strip()
        report = output
        start = output.find("{")
        if start != -1:
            try:
                report = json.dumps(json.loads(output[start:]), indent=2) + "\n"
            except json.JSONDecodeError:
                report = output

        target = self._write("golangci-lint", self._artifact(artifacts.LINT_REPORT), report)
        issues = count_lint_issues(report)
        if issues:
            logger.warning("golangci-lint found %d issues (see %s)", issues, target)
        return ToolResult("golangci-lint", proc.returncode, target, issues, output)

    def test(self) -> ToolResult:
        """``go test ./... -v`` with output streamed to the terminal."""
        proc = run_command(
            ["go", "test", "./...", "-v"], cwd=self.path, timeout=self.timeout, capture=False
        )
        if proc.returncode != 0:
            raise ToolError("go test", "tests failed", proc.returncode)
        return ToolResult("go test", proc.returncode)

    def coverage(self) -> ToolResult:
        """Coverage profile plus its HTML rendering."""
        profile = self._artifact(artifacts.COVERAGE_PROFILE)
        html = self._artifact(artifacts.COVERAGE_HTML)
        self.metrics_dir.mkdir(parents=True, exist_ok=True)

        proc = run_command(
            ["go", "test", "./...", f"-coverprofile={profile}"],
            cwd=self.path,
            timeout=self.timeout,
            capture=False,
        )
        if proc.returncode != 0:
            raise ToolError("go test", "coverage tests failed", proc.returncode)

        proc = run_command(
            ["go", "tool", "cover", f"-html={profile}", "-o", str(html)],
            cwd=self.path,
            timeout=self.timeout,
        )
        if proc.returncode != 0:
            raise ToolError("go tool cover", proc.stdout.strip() or "cannot render HTML", proc.returncode)
        return ToolResult("coverage", 0, html)

    def gocyclo(self) -> ToolResult:
        """``gocyclo .``; a non-zero exit only means complex functions were found."""
        ensure_installed("gocyclo", self.config)
        proc = run_command(["gocyclo", "."], cwd=self.path, timeout=self.timeout)
        target = self._write("gocyclo", self._artifact(artifacts.GOCYCLO_OUTPUT), proc.stdout)
        return ToolResult("gocyclo", proc.returncode, target, 0, proc.stdout)
