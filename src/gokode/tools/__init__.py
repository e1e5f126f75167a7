"""Wrappers around the external Go tools (gofmt, vet, golangci-lint, gocyclo)."""

from .install import ensure_installed, install_all, is_installed
from .runner import ToolResult, ToolRunner

__all__ = ["ToolRunner", "ToolResult", "ensure_installed", "install_all", "is_installed"]
