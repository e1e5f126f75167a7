"""Tests for the HTML dashboard."""

import json
from datetime import datetime

import pytest

from gokode.dashboard import LintIssue, collect_summary, generate_report, render_html
from gokode.dashboard.collector import parse_coverage_profile, parse_lint_report
from gokode.dashboard import html as html_module


@pytest.fixture
def metrics_dir(tmp_path):
    mdir = tmp_path / "metrics"
    mdir.mkdir()
    return mdir


def write_artifacts(mdir):
    (mdir / "vet.txt").write_text("# demo\n./main.go:3:2: unreachable code\n")
    (mdir / "lint.json").write_text(
        json.dumps(
            {
                "Issues": [
                    {
                        "FromLinter": "errcheck",
                        "Text": "Error return value of <f.Close> is not checked",
                        "Pos": {"Filename": "main.go", "Line": 12, "Column": 2},
                        "SourceLines": ["\tf.Close()"],
                    }
                ]
            }
        )
    )
    (mdir / "coverage.out").write_text(
        "mode: set\n"
        "example.com/demo/main.go:3.13,5.2 2 1\n"
        "example.com/demo/main.go:7.13,9.2 2 0\n"
    )
    (mdir / "coverage.html").write_text("<html></html>")
    (mdir / "gocyclo.txt").write_text("16 main run main.go:5:1\n")
    (mdir / "report.json").write_text(
        json.dumps({"main.go": {"number_of_rows": 10}, "pkg/a.go": {"number_of_rows": 5}})
    )


class TestCollector:
    def test_empty_directory(self, metrics_dir):
        summary = collect_summary(metrics_dir, now=datetime(2024, 5, 1, 12, 0, 0))
        assert summary.timestamp == "2024-05-01 12:00:00"
        assert summary.vet_issue_count == 0
        assert summary.lint_issue_count == 0
        assert summary.coverage_percent is None
        assert summary.coverage_html is None
        assert summary.gocyclo_lines == []
        assert summary.file_metrics == {}

    def test_all_artifacts(self, metrics_dir):
        write_artifacts(metrics_dir)
        summary = collect_summary(metrics_dir)
        assert summary.vet_issue_count == 2
        assert summary.lint_issue_count == 1
        assert summary.lint_issues[0].location == "main.go:12:2"
        assert summary.coverage_percent == 50.0
        assert summary.coverage_html == "coverage.html"
        assert summary.gocyclo_lines == ["16 main run main.go:5:1"]
        assert summary.total_rows == 15

    def test_invalid_json_is_ignored(self, metrics_dir):
        (metrics_dir / "lint.json").write_text("level=error msg=boom")
        (metrics_dir / "report.json").write_text("{")
        summary = collect_summary(metrics_dir)
        assert summary.lint_issues == []
        assert summary.file_metrics == {}


class TestParsers:
    def test_lowercase_lint_keys(self):
        issues = parse_lint_report(
            json.dumps({"issues": [{"fromLinter": "govet", "text": "x", "pos": {"line": 4}}]})
        )
        assert issues == [LintIssue(linter="govet", text="x", line=4)]

    def test_malformed_issue_is_skipped(self):
        report = json.dumps(
            {
                "Issues": [
                    {"FromLinter": "govet", "Text": "bad", "Pos": {"Line": "twelve"}},
                    {"FromLinter": "errcheck", "Text": "bad", "Pos": "main.go"},
                    {"FromLinter": "unused", "Text": "ok", "Pos": {"Filename": "a.go", "Line": 3}},
                ]
            }
        )
        issues = parse_lint_report(report)
        assert [issue.linter for issue in issues] == ["unused"]

    def test_coverage_merges_repeated_blocks(self):
        profile = "mode: count\na.go:1.1,2.2 4 0\na.go:1.1,2.2 4 3\nb.go:1.1,2.2 1 0\n"
        assert parse_coverage_profile(profile) == 80.0

    def test_coverage_without_blocks(self):
        assert parse_coverage_profile("mode: set\n") is None


class TestRender:
    def test_sections_present(self, metrics_dir):
        write_artifacts(metrics_dir)
        page = render_html(collect_summary(metrics_dir))
        for heading in ["Go Vet", "Golangci-lint", "Test coverage", "Cyclomatic complexity", "File metrics"]:
            assert f"<h2>{heading}</h2>" in page
        assert "Statement coverage: <strong>50.0%</strong>" in page
        assert 'href="coverage.html"' in page

    def test_output_is_escaped(self, metrics_dir):
        write_artifacts(metrics_dir)
        page = render_html(collect_summary(metrics_dir))
        assert "&lt;f.Close&gt;" in page
        assert "<f.Close>" not in page

    def test_missing_data_messages(self, metrics_dir):
        page = render_html(collect_summary(metrics_dir))
        assert "Test coverage data is missing." in page
        assert "Cyclomatic complexity data is missing." in page
        assert "Per-file metrics are missing." in page

    def test_file_table_is_capped(self, metrics_dir, monkeypatch):
        monkeypatch.setattr(html_module, "MAX_FILE_ROWS", 2)
        (metrics_dir / "report.json").write_text(
            json.dumps({f"f{i}.go": {"number_of_rows": i} for i in range(5)})
        )
        page = render_html(collect_summary(metrics_dir))
        assert "f4.go" in page
        assert "f3.go" in page
        assert "f0.go" not in page
        assert "3 more files in report.json." in page


class TestGenerateReport:
    def test_malformed_lint_report_does_not_fail(self, metrics_dir):
        (metrics_dir / "lint.json").write_text(
            json.dumps({"Issues": [{"FromLinter": "govet", "Pos": {"Line": "x"}}]})
        )
        target = generate_report(metrics_dir)
        assert "golangci-lint finished without findings." in target.read_text()

    def test_writes_report_html(self, metrics_dir):
        write_artifacts(metrics_dir)
        target = generate_report(metrics_dir)
        assert target == metrics_dir / "report.html"
        assert target.read_text().startswith("<!DOCTYPE html>")

    def test_custom_output(self, metrics_dir, tmp_path):
        target = generate_report(metrics_dir, tmp_path / "site" / "index.html")
        assert target.exists()
