"""External tool exceptions."""

from typing import Optional

from .base import GokodeError


class ToolError(GokodeError):
    """Raised when an external tool fails, times out, or cannot be installed."""

    def __init__(self, tool: str, reason: str, returncode: Optional[int] = None):
        details = {"tool": tool, "reason": reason}
        if returncode is not None:
            details["returncode"] = str(returncode)
        super().__init__(f"{tool} failed", details=details)
        self.tool = tool
        self.reason = reason
        self.returncode = returncode
