"""Subprocess helper shared by the tool runner and the installer."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional, Sequence

from ..exceptions import ToolError
from ..logging_config import get_logger

logger = get_logger(__name__)


def run_command(
    args: Sequence[str],
    cwd: Optional[Path] = None,
    timeout: Optional[float] = None,
    capture: bool = True,
) -> subprocess.CompletedProcess:
    """Run an external command.

    Args:
        args: Command line, program first
        cwd: Working directory
        timeout: Seconds before the process is killed
        capture: Capture stdout and stderr combined into ``stdout``. When
            False the child inherits the terminal.

    Returns:
        The completed process; a non-zero return code is not an error here.

    Raises:
        ToolError: If the program is missing or times out.
    """
    tool = args[0]
    logger.debug("Running %s (cwd=%s)", " ".join(args), cwd)
    try:
        if capture:
            return subprocess.run(
                list(args),
                cwd=cwd,
                timeout=timeout,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        return subprocess.run(list(args), cwd=cwd, timeout=timeout)
    except FileNotFoundError:
        raise ToolError(tool, "executable not found on PATH")
    except subprocess.TimeoutExpired:
        raise ToolError(tool, f"timed out after {timeout}s")
