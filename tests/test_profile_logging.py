import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from examples.profile_search import log_summary, run_game
from tetris_ai.perf import PerformanceTracker


class FakeClock:
    def __init__(self) -> None:
        self.current = 0.0

    def advance(self, delta: float) -> None:
        self.current += delta

    def __call__(self) -> float:
        return self.current


def test_log_summary_limits_rows_and_output(caplog):
    clock = FakeClock()
    tracker = PerformanceTracker(clock=clock)
    with tracker.section("search"):
        clock.advance(0.5)
    with tracker.section("commit"):
        clock.advance(0.1)
    tracker.count("nodes", 42)

    with caplog.at_level(logging.INFO, logger="examples.profile_search"):
        summary = log_summary(tracker, limit=1, index=7)

    assert len(summary) == 1
    assert summary[0]["name"] == "search"
    message = "".join(caplog.messages)
    assert "Game 7" in message
    assert "search" in message
    assert "commit" not in message
    assert "nodes=42" in message


def test_run_game_feeds_the_tracker():
    tracker = PerformanceTracker()
    dropped = run_game(4, tracker, seed=5, depth=0, lookahead=True)
    assert dropped == 4
    names = {row["name"] for row in tracker.summary()}
    assert names == {"search", "commit"}
    assert tracker.summary(sort_by="count")[0]["count"] == 4
    assert tracker.counters()["nodes"] > 0
