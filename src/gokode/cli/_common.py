"""Shared CLI helpers."""

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import GokodeConfig, load_config
from ..exceptions import GokodeError, InvalidPathError, PipelineCancelledError
from ..logging_config import get_logger, setup_logging
from ..metrics.pipeline import INTERRUPTED

console = Console()
logger = get_logger(__name__)

PathArgument = typer.Argument(
    Path("."),
    help="Target directory (default: current directory)",
    file_okay=False,
    dir_okay=True,
)
ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Configuration file path (TOML format)",
    exists=True,
    file_okay=True,
    dir_okay=False,
    readable=True,
)
MetricsDirOption = typer.Option(
    None,
    "--metrics-dir",
    help="Directory for artifacts (default: <path>/metrics)",
    file_okay=False,
)
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable verbose (DEBUG) logging")
QuietOption = typer.Option(False, "--quiet", "-q", help="Suppress all but ERROR logging")


def validate_root_directory(path: Path) -> Path:
    """
    Validate that a target directory can be analyzed.

    Returns:
        Resolved absolute path

    Raises:
        InvalidPathError: If path is missing, not a directory or unreadable
    """
    try:
        resolved = path.resolve()
    except (OSError, RuntimeError) as e:
        raise InvalidPathError(path, f"Cannot resolve path: {e}")

    if not resolved.exists():
        raise InvalidPathError(resolved, "Directory does not exist")
    if not resolved.is_dir():
        raise InvalidPathError(resolved, "Path is not a directory")
    if not os.access(resolved, os.R_OK):
        raise InvalidPathError(resolved, "Directory is not readable")

    return resolved


def resolve_config(
    config: Optional[Path] = None,
    workers: Optional[int] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> GokodeConfig:
    """Build configuration from CLI options and configure logging from it.

    ``--verbose``/``--quiet`` override the ``verbosity`` of config files and
    ``GOKODE_VERBOSITY``.
    """
    cfg = load_config(config_file=config, workers=workers, verbose=verbose, quiet=quiet)
    setup_logging(verbosity=cfg.verbosity)
    return cfg


def resolve_metrics_dir(root: Path, config: GokodeConfig, metrics_dir: Optional[Path]) -> Path:
    """Create and return the artifact directory."""
    target = metrics_dir.resolve() if metrics_dir else config.metrics_dir(root)
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InvalidPathError(target, f"Cannot create metrics directory: {e}")
    return target


def step_done(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


@contextmanager
def handle_errors(verbose: bool = False) -> Iterator[None]:
    """Map gokode errors to exit codes: 1 for failures, 130 for Ctrl-C."""
    try:
        yield
    except typer.Exit:
        raise
    except PipelineCancelledError as e:
        if e.reason != INTERRUPTED:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)
    except GokodeError as e:
        logger.debug("%s: %s", e.__class__.__name__, e)
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


def prepare(
    path: Path,
    config: Optional[Path],
    metrics_dir: Optional[Path],
    verbose: bool,
    quiet: bool,
    workers: Optional[int] = None,
) -> tuple[Path, GokodeConfig, Path]:
    """Set up logging and resolve (root, config, metrics dir) for a command."""
    cfg = resolve_config(config=config, workers=workers, verbose=verbose, quiet=quiet)
    root = validate_root_directory(path)
    return root, cfg, resolve_metrics_dir(root, cfg, metrics_dir)
