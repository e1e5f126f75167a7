"""Single-tool commands: fmt, vet, lint, test, coverage, gocyclo."""

from pathlib import Path
from typing import Optional

import typer

from ..tools import ToolResult, ToolRunner
from . import app
from ._common import (
    ConfigOption,
    MetricsDirOption,
    PathArgument,
    QuietOption,
    VerboseOption,
    console,
    handle_errors,
    prepare,
    step_done,
)


def report_findings(result: ToolResult, label: str) -> None:
    """Findings never fail a step; they are only reported."""
    if result.issue_count:
        console.print(
            f"[yellow]{label} found {result.issue_count} issue(s)[/yellow] (see {result.artifact})"
        )
    target = f" (output: {result.artifact})" if result.artifact else ""
    step_done(f"{label} complete{target}")


@app.command()
def fmt(
    path: Path = PathArgument,
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """Format code with gofmt (-w -s)."""
    with handle_errors(verbose):
        root, cfg, metrics_dir = prepare(path, config, None, verbose, quiet)
        console.print("Formatting code with gofmt...")
        ToolRunner(root, metrics_dir, cfg).format()
        step_done("Format complete")


@app.command()
def vet(
    path: Path = PathArgument,
    config: Optional[Path] = ConfigOption,
    metrics_dir: Optional[Path] = MetricsDirOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """Run go vet and write its output to metrics/vet.txt."""
    with handle_errors(verbose):
        root, cfg, mdir = prepare(path, config, metrics_dir, verbose, quiet)
        console.print("Running go vet...")
        report_findings(ToolRunner(root, mdir, cfg).vet(), "Vet")


@app.command()
def lint(
    path: Path = PathArgument,
    fix: bool = typer.Option(False, "--fix", help="Let golangci-lint apply fixes"),
    config: Optional[Path] = ConfigOption,
    metrics_dir: Optional[Path] = MetricsDirOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """Run golangci-lint and write its JSON report to metrics/lint.json."""
    with handle_errors(verbose):
        root, cfg, mdir = prepare(path, config, metrics_dir, verbose, quiet)
        console.print(f"Running golangci-lint{' with --fix' if fix else ''}...")
        report_findings(ToolRunner(root, mdir, cfg).lint(fix=fix), "Lint")


@app.command()
def test(
    path: Path = PathArgument,
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """Run go test ./... -v."""
    with handle_errors(verbose):
        root, cfg, mdir = prepare(path, config, None, verbose, quiet)
        console.print("Running tests...")
        ToolRunner(root, mdir, cfg).test()
        step_done("Tests passed")


@app.command()
def coverage(
    path: Path = PathArgument,
    config: Optional[Path] = ConfigOption,
    metrics_dir: Optional[Path] = MetricsDirOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """Run tests with coverage (metrics/coverage.out and coverage.html)."""
    with handle_errors(verbose):
        root, cfg, mdir = prepare(path, config, metrics_dir, verbose, quiet)
        console.print("Running tests with coverage...")
        result = ToolRunner(root, mdir, cfg).coverage()
        step_done(f"Coverage complete (HTML: {result.artifact})")


@app.command()
def gocyclo(
    path: Path = PathArgument,
    config: Optional[Path] = ConfigOption,
    metrics_dir: Optional[Path] = MetricsDirOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """Run cyclomatic complexity analysis (metrics/gocyclo.txt)."""
    with handle_errors(verbose):
        root, cfg, mdir = prepare(path, config, metrics_dir, verbose, quiet)
        console.print("Running cyclomatic complexity analysis...")
        report_findings(ToolRunner(root, mdir, cfg).gocyclo(), "Cyclomatic complexity analysis")
