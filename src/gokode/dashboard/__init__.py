"""HTML dashboard built from the artifacts of a metrics directory."""

from .collector import DashboardSummary, LintIssue, collect_summary
from .html import generate_report, render_html

__all__ = ["DashboardSummary", "LintIssue", "collect_summary", "generate_report", "render_html"]
