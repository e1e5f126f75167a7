"""Tests for the directory walker."""

import os
import threading
import time

import pytest

from gokode.config import GokodeConfig
from gokode.exceptions import TraversalError
from gokode.metrics import MetricsAggregator, QueueState, Walker, WorkQueue


def drain(queue):
    items = []
    while True:
        item = queue.get(timeout=1)
        if item is None:
            return items
        items.append(item)


def walk_all(root, config=None):
    agg = MetricsAggregator()
    queue = WorkQueue(maxsize=0)
    stats = Walker(root, agg, queue, config=config).walk()
    items = drain(queue)
    for item in items:
        item.close()
    return stats, agg, items


class TestDiscovery:
    def test_finds_only_go_files(self, three_file_tree):
        stats, agg, items = walk_all(three_file_tree)
        ids = sorted(item.file_id for item in items)
        assert ids == ["main.go", "pkg/empty.go", "pkg/util/util.go"]
        assert stats.discovered == 3
        assert sorted(agg.snapshot()) == ids

    def test_ids_are_relative_posix_paths(self, three_file_tree):
        _, _, items = walk_all(three_file_tree)
        for item in items:
            assert not item.file_id.startswith("/")
            assert "\\" not in item.file_id

    def test_uppercase_extension_matches(self, make_tree, go_source):
        root = make_tree({"LEGACY.GO": go_source(2)})
        _, _, items = walk_all(root)
        assert [item.file_id for item in items] == ["LEGACY.GO"]

    def test_vendor_and_hidden_included_by_default(self, make_tree, go_source):
        root = make_tree(
            {
                "main.go": go_source(1),
                "vendor/dep/dep.go": go_source(1),
                ".gen/x.go": go_source(1),
                ".hidden.go": go_source(1),
            }
        )
        _, agg, items = walk_all(root)
        expected = [".gen/x.go", ".hidden.go", "main.go", "vendor/dep/dep.go"]
        assert sorted(item.file_id for item in items) == expected
        assert sorted(agg.snapshot()) == expected

    def test_vendor_and_hidden_pruned_when_configured(self, make_tree, go_source):
        root = make_tree(
            {
                "main.go": go_source(1),
                "vendor/dep/dep.go": go_source(1),
                ".git/hooks/x.go": go_source(1),
                ".hidden.go": go_source(1),
            }
        )
        config = GokodeConfig(exclude_dirs=["vendor"], allow_hidden_files=False)
        _, _, items = walk_all(root, config)
        assert [item.file_id for item in items] == ["main.go"]

    def test_exclude_patterns(self, make_tree, go_source):
        root = make_tree(
            {"main.go": go_source(1), "main_test.go": go_source(1), "pkg/a_test.go": go_source(1)}
        )
        config = GokodeConfig(exclude_patterns=["*_test.go"])
        _, _, items = walk_all(root, config)
        assert [item.file_id for item in items] == ["main.go"]

    def test_custom_extensions(self, make_tree, go_source):
        root = make_tree({"main.go": go_source(1), "go.mod": "module x\n"})
        _, _, items = walk_all(root, GokodeConfig(extensions=[".go", ".mod"]))
        assert sorted(item.file_id for item in items) == ["go.mod", "main.go"]

    def test_empty_directory(self, tmp_path):
        stats, agg, items = walk_all(tmp_path)
        assert stats.discovered == 0
        assert items == []
        assert len(agg) == 0

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinked_dirs_not_followed_by_default(self, make_tree, tmp_path, go_source):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "ext.go").write_text(go_source(3))
        root = make_tree({"main.go": go_source(1)})
        os.symlink(outside, root / "linked")
        os.symlink(outside / "ext.go", root / "alias.go")
        _, _, items = walk_all(root)
        assert sorted(item.file_id for item in items) == ["alias.go", "main.go"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlink_cycle_terminates(self, make_tree, go_source):
        root = make_tree({"pkg/a.go": go_source(1)})
        os.symlink(root, root / "pkg" / "loop")
        _, _, items = walk_all(root, GokodeConfig(follow_symlinks=True))
        assert "pkg/a.go" in [item.file_id for item in items]


class TestSkipping:
    def test_oversized_file_skipped(self, make_tree, go_source):
        root = make_tree({"big.go": "x" * 2048, "small.go": go_source(1)})
        config = GokodeConfig(max_file_size_mb=1 / 1024)
        stats, agg, items = walk_all(root, config)
        assert [item.file_id for item in items] == ["small.go"]
        assert stats.skipped == ["big.go"]
        assert "big.go" not in agg

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX non-root")
    def test_unreadable_file_skipped(self, make_tree, go_source):
        root = make_tree({"locked.go": go_source(1), "open.go": go_source(1)})
        (root / "locked.go").chmod(0)
        try:
            stats, agg, items = walk_all(root)
        finally:
            (root / "locked.go").chmod(0o644)
        assert [item.file_id for item in items] == ["open.go"]
        assert stats.skipped == ["locked.go"]
        assert "locked.go" not in agg


class TestErrors:
    def test_missing_root(self, tmp_path):
        queue = WorkQueue(maxsize=1)
        walker = Walker(tmp_path / "nope", MetricsAggregator(), queue)
        with pytest.raises(TraversalError):
            walker.walk()
        assert queue.state is QueueState.EXHAUSTED

    def test_root_is_file(self, tmp_path, go_source):
        target = tmp_path / "main.go"
        target.write_text(go_source(1))
        with pytest.raises(TraversalError):
            Walker(target, MetricsAggregator(), WorkQueue(maxsize=1)).walk()


class TestQueueing:
    def test_registers_before_enqueue(self, wide_tree):
        agg = MetricsAggregator()
        queue = WorkQueue(maxsize=1)
        unregistered = []

        def consumer():
            while True:
                item = queue.get()
                if item is None:
                    return
                if not agg.is_registered(item.file_id):
                    unregistered.append(item.file_id)
                item.close()

        t = threading.Thread(target=consumer)
        t.start()
        stats = Walker(wide_tree, agg, queue).walk()
        t.join(timeout=10)
        assert stats.discovered == 60
        assert unregistered == []

    def test_queue_closed_after_walk(self, three_file_tree):
        queue = WorkQueue(maxsize=0)
        Walker(three_file_tree, MetricsAggregator(), queue).walk()
        assert queue.state is QueueState.DRAINING
        for item in drain(queue):
            item.close()
        assert queue.state is QueueState.EXHAUSTED

    def test_cancel_unblocks_full_queue(self, wide_tree):
        queue = WorkQueue(maxsize=1)
        cancel = threading.Event()
        walker = Walker(wide_tree, MetricsAggregator(), queue, cancel_event=cancel)
        result = {}
        t = threading.Thread(target=lambda: result.setdefault("stats", walker.walk()))
        t.start()
        time.sleep(0.1)
        assert t.is_alive()

        cancel.set()
        queue.cancel()
        t.join(timeout=2)
        assert not t.is_alive()
        assert result["stats"].cancelled

        leftovers = queue.drain()
        assert len(leftovers) == 1
        for item in leftovers:
            item.close()
            assert item.stream.closed
