"""Full analysis command: every tool, metrics, then the HTML dashboard."""

from pathlib import Path
from typing import Callable, Optional

import typer

from ..dashboard import generate_report
from ..exceptions import GokodeError
from ..tools import ToolRunner
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
from .metrics import run_metrics
from .steps import report_findings


@app.command()
def analyse(
    path: Path = PathArgument,
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", help="Number of metric workers", min=1, max=64
    ),
    config: Optional[Path] = ConfigOption,
    metrics_dir: Optional[Path] = MetricsDirOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """
    Run full analysis: fmt, vet, lint with fixes, tests, coverage, gocyclo,
    per-file metrics and the HTML report.

    Stops at the first failing step. Vet, lint and complexity findings are
    reported but do not fail the run.
    """
    with handle_errors(verbose):
        root, cfg, mdir = prepare(path, config, metrics_dir, verbose, quiet, workers=workers)
        runner = ToolRunner(root, mdir, cfg)

        def format_step() -> None:
            runner.format()
            step_done("Format complete")

        def test_step() -> None:
            runner.test()
            step_done("Tests passed")

        def coverage_step() -> None:
            runner.coverage()
            step_done("Coverage complete")

        def html_step() -> None:
            step_done(f"HTML report generated: {generate_report(mdir)}")

        steps: list[tuple[str, Callable[[], object]]] = [
            ("Format", format_step),
            ("Vet", lambda: report_findings(runner.vet(), "Vet")),
            ("Lint with fixes", lambda: report_findings(runner.lint(fix=True), "Lint")),
            ("Tests", test_step),
            ("Coverage", coverage_step),
            (
                "Cyclomatic complexity",
                lambda: report_findings(runner.gocyclo(), "Cyclomatic complexity analysis"),
            ),
            ("Metrics", lambda: run_metrics(root, cfg, mdir / cfg.report_name)),
            ("HTML report", html_step),
        ]

        console.print("Starting full analysis...")
        for name, step in steps:
            console.print(f"\n[bold]=== {name} ===[/bold]")
            try:
                step()
            except GokodeError:
                console.print(f"[red]Analysis failed at step:[/red] {name}")
                raise

        console.print("\n[bold]=== Analysis complete ===[/bold]")
        console.print(f"Reports written to: {mdir}")
