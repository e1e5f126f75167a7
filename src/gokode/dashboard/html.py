"""Render the metrics directory as a self-contained HTML dashboard.

The page has no external dependencies (no CDN, no scripts), so it can be
opened from a local file:// path or archived as a CI artifact.
"""

from __future__ import annotations

from html import escape
from pathlib import Path
from typing import Optional

from .. import artifacts
from ..file_ops import atomic_write_text
from ..logging_config import get_logger
from .collector import DashboardSummary, LintIssue, collect_summary

logger = get_logger(__name__)

# Files listed in the line-count table, largest first.
MAX_FILE_ROWS = 200


def generate_report(metrics_dir: Path, output_path: Optional[Path] = None) -> Path:
    """Collect the artifacts of ``metrics_dir`` and write ``report.html``.

    Returns:
        Path of the generated HTML file.

    Raises:
        FileAccessError: If an artifact cannot be read or the page written.
    """
    metrics_dir = Path(metrics_dir)
    summary = collect_summary(metrics_dir)
    target = Path(output_path) if output_path else metrics_dir / artifacts.HTML_REPORT
    atomic_write_text(target, render_html(summary))
    logger.info("HTML report generated: %s", target)
    return target


def render_html(summary: DashboardSummary) -> str:
    sections = "\n".join(
        [
            _vet_section(summary),
            _lint_section(summary),
            _coverage_section(summary),
            _gocyclo_section(summary),
            _files_section(summary),
        ]
    )
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>gokode code analysis report</title>
<style>
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
body {{ font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif; line-height: 1.6; color: #333; background: #f5f5f5; padding: 20px; }}
.container {{ max-width: 1200px; margin: 0 auto; background: #fff; border-radius: 8px; box-shadow: 0 2px 8px rgba(0,0,0,0.1); overflow: hidden; }}
header {{ background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: #fff; padding: 30px; text-align: center; }}
header h1 {{ font-size: 2.2em; margin-bottom: 10px; }}
.timestamp {{ opacity: 0.9; font-size: 0.95em; }}
.content {{ padding: 30px; }}
.section {{ margin-bottom: 40px; }}
.section h2 {{ color: #667eea; margin-bottom: 20px; padding-bottom: 10px; border-bottom: 2px solid #667eea; font-size: 1.6em; }}
.metric-card {{ background: #f8f9fa; border-left: 4px solid #667eea; padding: 20px; margin-bottom: 20px; border-radius: 4px; }}
.metric-card h3 {{ color: #495057; margin-bottom: 10px; font-size: 1.2em; }}
.status-ok {{ color: #28a745; font-weight: bold; }}
.status-warning {{ color: #d39e00; font-weight: bold; }}
.status-error {{ color: #dc3545; font-weight: bold; }}
.issue-count {{ display: inline-block; background: #dc3545; color: #fff; padding: 2px 12px; border-radius: 12px; font-size: 0.9em; margin-left: 10px; }}
pre {{ background: #f4f4f4; border: 1px solid #ddd; border-radius: 4px; padding: 15px; overflow-x: auto; font-size: 0.9em; line-height: 1.4; }}
.issue-item {{ background: #fff; border: 1px solid #e9ecef; border-radius: 4px; padding: 15px; margin-bottom: 10px; }}
.issue-header {{ display: flex; justify-content: space-between; align-items: center; margin-bottom: 10px; }}
.issue-linter {{ background: #667eea; color: #fff; padding: 3px 8px; border-radius: 3px; font-size: 0.85em; }}
.issue-location {{ color: #6c757d; font-size: 0.9em; }}
.issue-code {{ background: #f8f9fa; border-left: 3px solid #dc3545; padding: 10px; font-family: monospace; font-size: 0.85em; white-space: pre; overflow-x: auto; }}
table {{ width: 100%; border-collapse: collapse; font-size: 0.9em; }}
th, td {{ text-align: left; padding: 6px 10px; border-bottom: 1px solid #e9ecef; }}
td.num {{ text-align: right; font-variant-numeric: tabular-nums; }}
.links {{ margin-top: 20px; }}
.links a {{ display: inline-block; background: #667eea; color: #fff; padding: 8px 18px; text-decoration: none; border-radius: 4px; margin-right: 10px; }}
footer {{ background: #f8f9fa; padding: 20px; text-align: center; color: #6c757d; font-size: 0.9em; }}
</style>
</head>
<body>
<div class="container">
<header>
  <h1>gokode code analysis report</h1>
  <div class="timestamp">Generated: {escape(summary.timestamp)}</div>
</header>
<div class="content">
{sections}
</div>
<footer>Generated by <strong>gokode</strong> | all reports are stored in <code>{escape(str(summary.metrics_dir))}</code></footer>
</div>
</body>
</html>
"""


# ── Sections ─────────────────────────────────────────────────────────


def _status(ok: bool, ok_text: str, bad_text: str, count: Optional[int] = None) -> str:
    if ok:
        return f'<span class="status-ok">{ok_text}</span>'
    badge = f'<span class="issue-count">{count}</span>' if count is not None else ""
    return f'<span class="status-error">{bad_text}</span>{badge}'


def _vet_section(summary: DashboardSummary) -> str:
    status = _status(
        summary.vet_issue_count == 0, "No issues found", "Issues found", summary.vet_issue_count
    )
    body = (
        f"<pre>{escape(summary.vet_output)}</pre>"
        if summary.vet_output.strip()
        else '<p class="status-ok">go vet finished without findings.</p>'
    )
    return f"""<div class="section">
<h2>Go Vet</h2>
<div class="metric-card"><h3>Status: {status}</h3>{body}</div>
</div>"""


def _lint_issue(issue: LintIssue) -> str:
    code = ""
    if issue.source_lines:
        code = f'<div class="issue-code">{escape(chr(10).join(issue.source_lines))}</div>'
    return f"""<div class="issue-item">
<div class="issue-header"><span class="issue-linter">{escape(issue.linter)}</span><span class="issue-location">{escape(issue.location)}</span></div>
<div class="issue-text">{escape(issue.text)}</div>{code}
</div>"""


def _lint_section(summary: DashboardSummary) -> str:
    status = _status(
        summary.lint_issue_count == 0, "No issues found", "Issues found", summary.lint_issue_count
    )
    if summary.lint_issues:
        body = "\n".join(_lint_issue(issue) for issue in summary.lint_issues)
    else:
        body = '<p class="status-ok">golangci-lint finished without findings.</p>'
    return f"""<div class="section">
<h2>Golangci-lint</h2>
<div class="metric-card"><h3>Status: {status}</h3>{body}</div>
<div class="links"><a href="{artifacts.LINT_REPORT}" target="_blank">View JSON report</a></div>
</div>"""


def _coverage_section(summary: DashboardSummary) -> str:
    if summary.coverage_profile.strip():
        status = '<span class="status-ok">Coverage report generated</span>'
        percent = (
            f"<p>Statement coverage: <strong>{summary.coverage_percent:.1f}%</strong></p>"
            if summary.coverage_percent is not None
            else ""
        )
        link = (
            f'<div class="links"><a href="{escape(summary.coverage_html)}" target="_blank">Open HTML coverage report</a></div>'
            if summary.coverage_html
            else ""
        )
        body = percent + link
    else:
        status = '<span class="status-warning">No coverage data</span>'
        body = "<p>Test coverage data is missing.</p>"
    return f"""<div class="section">
<h2>Test coverage</h2>
<div class="metric-card"><h3>Status: {status}</h3>{body}</div>
</div>"""


def _gocyclo_section(summary: DashboardSummary) -> str:
    if summary.gocyclo_lines:
        status = '<span class="status-ok">Analysis complete</span>'
        body = f"<pre>{escape(chr(10).join(summary.gocyclo_lines))}</pre>"
    else:
        status = '<span class="status-warning">No data</span>'
        body = "<p>Cyclomatic complexity data is missing.</p>"
    return f"""<div class="section">
<h2>Cyclomatic complexity</h2>
<div class="metric-card"><h3>Status: {status}</h3>{body}</div>
</div>"""


def _files_section(summary: DashboardSummary) -> str:
    if not summary.file_metrics:
        return """<div class="section">
<h2>File metrics</h2>
<div class="metric-card"><h3>Status: <span class="status-warning">No data</span></h3><p>Per-file metrics are missing.</p></div>
</div>"""

    ordered = sorted(
        summary.file_metrics.items(),
        key=lambda kv: (-_as_int(kv[1].get("number_of_rows")), kv[0]),
    )
    rows = "\n".join(
        f'<tr><td>{escape(file_id)}</td><td class="num">{escape(str(metrics.get("number_of_rows", "")))}</td></tr>'
        for file_id, metrics in ordered[:MAX_FILE_ROWS]
    )
    more = ""
    if len(ordered) > MAX_FILE_ROWS:
        more = f"<p>{len(ordered) - MAX_FILE_ROWS} more files in {artifacts.METRICS_REPORT}.</p>"
    return f"""<div class="section">
<h2>File metrics</h2>
<div class="metric-card"><h3>{len(summary.file_metrics)} files, {summary.total_rows} lines</h3>
<table><thead><tr><th>File</th><th>Lines</th></tr></thead><tbody>
{rows}
</tbody></table>{more}</div>
<div class="links"><a href="{artifacts.METRICS_REPORT}" target="_blank">View JSON report</a></div>
</div>"""


def _as_int(value: object) -> int:
    return value if isinstance(value, int) else 0
