import pytest

from tetris_ai.perf import PerformanceTracker


class FakeClock:
    def __init__(self) -> None:
        self.current = 0.0

    def advance(self, delta: float) -> None:
        self.current += delta

    def __call__(self) -> float:
        return self.current


def test_tracker_records_basic_stats():
    clock = FakeClock()
    tracker = PerformanceTracker(clock=clock)
    with tracker.section("search"):
        clock.advance(0.5)
    summary = tracker.summary()
    assert len(summary) == 1
    row = summary[0]
    assert row["name"] == "search"
    assert row["count"] == 1
    assert row["total"] == pytest.approx(0.5)
    assert row["self"] == pytest.approx(0.5)
    assert row["average"] == pytest.approx(0.5)
    assert row["min"] == pytest.approx(0.5)
    assert row["max"] == pytest.approx(0.5)


def test_tracker_nested_sections_compute_exclusive_time():
    clock = FakeClock()
    tracker = PerformanceTracker(clock=clock)
    with tracker.section("move"):
        clock.advance(0.5)
        with tracker.section("commit"):
            clock.advance(0.2)
        clock.advance(0.3)
    stats = {row["name"]: row for row in tracker.summary(sort_by="total")}
    assert stats["move"]["total"] == pytest.approx(1.0)
    assert stats["move"]["self"] == pytest.approx(0.8)
    assert stats["commit"]["total"] == pytest.approx(0.2)
    assert stats["commit"]["self"] == pytest.approx(0.2)


def test_section_is_recorded_when_body_raises():
    clock = FakeClock()
    tracker = PerformanceTracker(clock=clock)
    with pytest.raises(KeyError):
        with tracker.section("search"):
            clock.advance(0.1)
            raise KeyError("boom")
    assert tracker.summary()[0]["count"] == 1


def test_summary_sorting_and_errors():
    clock = FakeClock()
    tracker = PerformanceTracker(clock=clock)
    with tracker.section("a"):
        clock.advance(0.1)
    for _ in range(2):
        with tracker.section("b"):
            clock.advance(0.3)
    assert [row["name"] for row in tracker.summary(sort_by="total")] == ["b", "a"]
    assert [row["name"] for row in tracker.summary(sort_by="count", descending=False)] == ["a", "b"]
    assert tracker.summary(sort_by="self")[0]["name"] == "b"
    with pytest.raises(ValueError):
        tracker.summary(sort_by="unknown")


def test_counters_accumulate():
    tracker = PerformanceTracker()
    tracker.count("nodes", 5)
    tracker.count("nodes")
    tracker.count("moves")
    assert tracker.counters() == {"nodes": 6, "moves": 1}


def test_disable_enable_and_reset():
    clock = FakeClock()
    tracker = PerformanceTracker(clock=clock)
    tracker.disable()
    with tracker.section("ignored"):
        clock.advance(0.4)
    tracker.count("nodes", 3)
    assert tracker.summary() == []
    assert tracker.counters() == {}
    tracker.enable()
    with tracker.section("active"):
        clock.advance(0.2)
    tracker.count("nodes")
    assert tracker.summary()[0]["name"] == "active"
    tracker.reset()
    assert tracker.summary() == []
    assert tracker.counters() == {}


def test_snapshot_is_a_copy():
    clock = FakeClock()
    tracker = PerformanceTracker(clock=clock)
    with tracker.section("search"):
        clock.advance(0.25)
    snapshot = tracker.snapshot()
    with tracker.section("search"):
        clock.advance(0.25)
    assert snapshot["search"].count == 1
    assert snapshot["search"].total == pytest.approx(0.25)
    assert tracker.snapshot()["search"].count == 2
