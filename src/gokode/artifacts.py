"""File names of the artifacts gokode writes into the metrics directory."""

METRICS_REPORT = "report.json"
VET_OUTPUT = "vet.txt"
LINT_REPORT = "lint.json"
COVERAGE_PROFILE = "coverage.out"
COVERAGE_HTML = "coverage.html"
GOCYCLO_OUTPUT = "gocyclo.txt"
HTML_REPORT = "report.html"
