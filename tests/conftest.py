"""Shared test fixtures for gokode."""

from pathlib import Path
from typing import Callable

import pytest


def render_go_source(rows: int) -> str:
    """Go source text with exactly ``rows`` newline-terminated lines."""
    if rows == 0:
        return ""
    lines = ["package main"] + [f"// line {i}" for i in range(1, rows)]
    return "\n".join(lines) + "\n"


@pytest.fixture
def make_tree(tmp_path) -> Callable[[dict[str, str]], Path]:
    """Build a directory tree from ``{relative_path: content}``."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def three_file_tree(make_tree) -> Path:
    """Three Go files of 10, 0 and 5 lines plus non-matching files."""
    return make_tree(
        {
            "main.go": render_go_source(10),
            "pkg/empty.go": render_go_source(0),
            "pkg/util/util.go": render_go_source(5),
            "README.md": "# readme\n",
            "go.mod": "module example.com/demo\n",
        }
    )


@pytest.fixture
def wide_tree(make_tree) -> Path:
    """Sixty Go files across nested packages, file ``i`` has ``i`` lines."""
    files = {}
    for i in range(60):
        files[f"pkg{i % 6}/sub{i % 4}/file{i}.go"] = render_go_source(i)
    return make_tree(files)


@pytest.fixture
def go_source() -> Callable[[int], str]:
    """Factory for Go source text with an exact line count."""
    return render_go_source
