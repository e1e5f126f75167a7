"""Report command -- render the HTML dashboard from existing artifacts."""

from pathlib import Path
from typing import Optional

from ..dashboard import generate_report
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


@app.command()
def report(
    path: Path = PathArgument,
    config: Optional[Path] = ConfigOption,
    metrics_dir: Optional[Path] = MetricsDirOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """Generate metrics/report.html from the artifacts already collected."""
    with handle_errors(verbose):
        _, _, mdir = prepare(path, config, metrics_dir, verbose, quiet)
        console.print("Generating HTML report...")
        target = generate_report(mdir)
        step_done(f"HTML report generated: {target}")
