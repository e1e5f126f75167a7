"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="gokode",
    help="gokode - Go code analysis and quality tool",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"gokode {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """Run Go quality tools, per-file metrics and an HTML summary."""


# Import subcommands to register them
from .analyse import analyse as _analyse  # noqa: F401, E402
from .metrics import metrics as _metrics  # noqa: F401, E402
from .report import report as _report  # noqa: F401, E402
from .steps import (  # noqa: F401, E402
    coverage as _coverage,
    fmt as _fmt,
    gocyclo as _gocyclo,
    lint as _lint,
    test as _test,
    vet as _vet,
)
from .tools import tools as _tools  # noqa: F401, E402
