"""Installation of the Go tools gokode depends on."""

from __future__ import annotations

import shutil
from typing import Optional

from ..config import GokodeConfig
from ..exceptions import ToolError
from ..logging_config import get_logger
from .process import run_command

logger = get_logger(__name__)

GOLANGCI_LINT_MODULE = "github.com/golangci/golangci-lint/cmd/golangci-lint"
GOCYCLO_MODULE = "github.com/fzipp/gocyclo/cmd/gocyclo"


def is_installed(tool: str) -> bool:
    """Check if a tool is available on PATH."""
    return shutil.which(tool) is not None


def go_install(module: str, version: str, timeout: Optional[float] = None) -> None:
    """Run ``go install module@version``.

    Raises:
        ToolError: If ``go`` is missing or the install fails.
    """
    target = f"{module}@{version}"
    logger.info("Installing %s", target)
    proc = run_command(["go", "install", target], timeout=timeout)
    if proc.returncode != 0:
        raise ToolError("go install", f"{target}: {proc.stdout.strip()}", proc.returncode)


def install_golangci_lint(config: Optional[GokodeConfig] = None) -> None:
    config = config or GokodeConfig()
    go_install(GOLANGCI_LINT_MODULE, config.golangci_lint_version, config.timeout_seconds)


def install_gocyclo(config: Optional[GokodeConfig] = None) -> None:
    config = config or GokodeConfig()
    go_install(GOCYCLO_MODULE, config.gocyclo_version, config.timeout_seconds)


INSTALLERS = {
    "golangci-lint": install_golangci_lint,
    "gocyclo": install_gocyclo,
}


def ensure_installed(tool: str, config: Optional[GokodeConfig] = None) -> bool:
    """Install ``tool`` if it is missing.

    Returns:
        True if an install was performed.

    Raises:
        ToolError: If the tool is unknown or the install fails.
    """
    if is_installed(tool):
        return False
    installer = INSTALLERS.get(tool)
    if installer is None:
        raise ToolError(tool, "not installed and no installer is known")
    logger.warning("%s not found, installing", tool)
    installer(config)
    return True


def install_all(config: Optional[GokodeConfig] = None) -> list[str]:
    """Install every tool, continuing past failures.

    Returns:
        Names of the installed tools.

    Raises:
        ToolError: If any install failed (after trying all of them).
    """
    installed: list[str] = []
    failures: list[str] = []
    for tool, installer in INSTALLERS.items():
        try:
            installer(config)
        except ToolError as e:
            logger.error("%s", e)
            failures.append(tool)
        else:
            installed.append(tool)
    if failures:
        raise ToolError("install", f"failed to install: {', '.join(failures)}")
    return installed
