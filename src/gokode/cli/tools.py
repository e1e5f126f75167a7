"""Tool installation command."""

from pathlib import Path
from typing import Optional

from ..tools import install_all
from . import app
from ._common import ConfigOption, QuietOption, VerboseOption, console, handle_errors, resolve_config, step_done


@app.command()
def tools(
    config: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
):
    """Install required tools (golangci-lint, gocyclo) with go install."""
    with handle_errors(verbose):
        cfg = resolve_config(config=config, verbose=verbose, quiet=quiet)
        console.print("Installing required tools...")
        for tool in install_all(cfg):
            step_done(f"{tool} installed")
        step_done("All tools installed successfully")
