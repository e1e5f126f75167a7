"""Tests for the worker pool and metric calculators."""

import io
import threading
from pathlib import Path

import pytest

from gokode.exceptions import InvalidConfigError
from gokode.metrics import (
    LineCount,
    MetricsAggregator,
    WorkerPool,
    WorkItem,
    WorkQueue,
    build_calculators,
)


def make_item(file_id, text):
    return WorkItem(file_id=file_id, path=Path(file_id), stream=io.StringIO(text))


class FailingStream(io.StringIO):
    def read(self, *args):
        raise OSError("device went away")


class TestLineCount:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("", 0),
            ("\n", 1),
            ("package main", 1),
            ("package main\n", 1),
            ("a\nb\nc\n", 3),
            ("a\nb\nc", 3),
            ("\n\n\n", 3),
        ],
    )
    def test_convention(self, text, expected):
        assert LineCount().compute(text) == expected

    def test_crlf_file_counts_like_lf(self, tmp_path):
        path = tmp_path / "win.go"
        path.write_bytes(b"package main\r\n\r\nfunc main() {}\r\n")
        with open(path, encoding="utf-8") as f:
            assert LineCount().compute(f.read()) == 3


class TestBuildCalculators:
    def test_default_metric(self):
        calcs = build_calculators(["number_of_rows"])
        assert [c.name for c in calcs] == ["number_of_rows"]

    def test_unknown_metric(self):
        with pytest.raises(InvalidConfigError):
            build_calculators(["halstead"])


class TestWorkerPool:
    def run_pool(self, items, size=3, calculators=None):
        agg = MetricsAggregator()
        queue = WorkQueue(maxsize=0)
        for item in items:
            agg.register_file(item.file_id)
            queue.put(item)
        queue.close()
        pool = WorkerPool(queue, agg, calculators=calculators, size=size)
        pool.start()
        assert pool.wait(timeout=5)
        return pool, agg

    def test_counts_rows(self):
        items = [make_item("a.go", "x\ny\n"), make_item("b.go", ""), make_item("c.go", "z")]
        pool, agg = self.run_pool(items)
        assert agg.snapshot().metric("number_of_rows") == {"a.go": 2, "b.go": 0, "c.go": 1}
        assert pool.processed == 3
        assert pool.failed == []

    def test_streams_closed(self):
        items = [make_item(f"{i}.go", "x\n") for i in range(10)]
        self.run_pool(items)
        assert all(item.stream.closed for item in items)

    def test_read_failure_is_per_file(self):
        bad = WorkItem(file_id="bad.go", path=Path("bad.go"), stream=FailingStream())
        items = [make_item("a.go", "x\n"), bad, make_item("c.go", "y\n")]
        pool, agg = self.run_pool(items, size=1)
        snap = agg.snapshot()
        assert snap["a.go"]["number_of_rows"] == 1
        assert snap["c.go"]["number_of_rows"] == 1
        assert snap["bad.go"] == {}
        assert pool.failed == ["bad.go"]
        assert bad.stream.closed

    def test_crashing_calculator_does_not_kill_worker(self):
        class Exploding:
            name = "explode"

            def compute(self, text):
                if "boom" in text:
                    raise RuntimeError("boom")
                return 1

        items = [make_item("a.go", "boom"), make_item("b.go", "fine")]
        pool, agg = self.run_pool(items, size=1, calculators=[Exploding()])
        assert pool.failed == ["a.go"]
        assert agg.snapshot()["b.go"] == {"explode": 1}

    def test_unregistered_item_is_rejected(self):
        agg = MetricsAggregator()
        queue = WorkQueue(maxsize=0)
        queue.put(make_item("ghost.go", "x\n"))
        queue.close()
        pool = WorkerPool(queue, agg, size=1)
        pool.start()
        assert pool.wait(timeout=5)
        assert agg.rejected_writes == 1
        assert "ghost.go" not in agg
        assert pool.processed == 0

    def test_workers_exit_on_cancel(self):
        queue = WorkQueue(maxsize=1)
        pool = WorkerPool(queue, MetricsAggregator(), size=4, cancel_event=threading.Event())
        pool.start()
        assert pool.alive() == 4
        queue.cancel()
        assert pool.wait(timeout=2)
        assert pool.alive() == 0

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            WorkerPool(WorkQueue(maxsize=1), MetricsAggregator(), size=0)

    def test_start_twice(self):
        queue = WorkQueue(maxsize=1)
        pool = WorkerPool(queue, MetricsAggregator(), size=1)
        pool.start()
        try:
            with pytest.raises(RuntimeError):
                pool.start()
        finally:
            queue.close()
            pool.wait(timeout=2)
