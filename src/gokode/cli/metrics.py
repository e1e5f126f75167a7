"""Per-file metrics command."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..config import GokodeConfig
from ..metrics import MetricsPipeline, PipelineResult
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


def run_metrics(root: Path, cfg: GokodeConfig, output: Path, show_top: int = 0) -> PipelineResult:
    """Run the metrics pipeline with a spinner and print a short summary."""
    pipeline = MetricsPipeline(root, config=cfg, output=output)
    with console.status(f"Counting lines with {cfg.workers} workers..."):
        result = pipeline.run()

    if result.files_skipped or result.files_failed:
        console.print(
            f"[yellow]{len(result.files_skipped)} file(s) skipped, "
            f"{len(result.files_failed)} could not be read[/yellow]"
        )

    if show_top and len(result.snapshot):
        table = Table(title="Largest files", show_edge=False)
        table.add_column("File", style="cyan")
        table.add_column("Lines", justify="right")
        rows = result.snapshot.metric("number_of_rows")
        for file_id, value in sorted(rows.items(), key=lambda kv: (-int(kv[1]), kv[0]))[:show_top]:
            table.add_row(file_id, str(value))
        console.print(table)

    step_done(
        f"Metrics complete: {len(result.snapshot)} files, {result.total_rows} lines "
        f"(report: {result.report_path})"
    )
    return result


@app.command()
def metrics(
    path: Path = PathArgument,
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Number of metric workers (default: 5)",
        min=1,
        max=64,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Report file (default: <metrics-dir>/report.json)",
        dir_okay=False,
    ),
    top: int = typer.Option(0, "--top", "-t", help="Show the N largest files", min=0),
    config: Optional[Path] = ConfigOption,
    metrics_dir: Optional[Path] = MetricsDirOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """
    Count lines of every source file and write metrics/report.json.

    [bold cyan]Examples:[/bold cyan]

      gokode metrics

      gokode metrics ./myproject --workers 8 --top 10
    """
    with handle_errors(verbose):
        root, cfg, mdir = prepare(path, config, metrics_dir, verbose, quiet, workers=workers)
        run_metrics(root, cfg, output or mdir / cfg.report_name, show_top=top)
