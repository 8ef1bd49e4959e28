"""Profile the placement search using :mod:`tetris_ai.perf`.

Run with::

    PYTHONPATH=src python examples/profile_search.py

Pass ``--help`` to see options for playing several games and enabling
periodic performance logging summaries.
"""

from __future__ import annotations

import argparse
import logging
import random

from tetris_ai.ai import SearchEngine
from tetris_ai.exceptions import NoLegalMoveError
from tetris_ai.perf import PerformanceTracker
from tetris_ai.tetromino import random_kind


LOGGER = logging.getLogger(__name__)


def run_game(pieces: int, tracker: PerformanceTracker, *, seed: int, depth: int, lookahead: bool) -> int:
    """Play up to ``pieces`` moves and return how many were dropped."""

    rng = random.Random(seed)
    engine = SearchEngine(depth=depth, rng=rng, profiler=tracker)
    engine.set_pending(random_kind(rng))
    for _ in range(pieces):
        try:
            if lookahead:
                engine.commit_and_advance(random_kind(rng))
            else:
                engine.drop(random_kind(rng))
        except NoLegalMoveError:
            break
    return engine.board.pieces_dropped


def _format_summary(summary: list[dict[str, float | int]], counters: dict[str, int], limit: int = 10) -> str:
    if not summary:
        return "No timings recorded."
    parts: list[str] = []
    for row in summary[:limit]:
        total_ms = row["total"] * 1000.0
        avg_ms = row["average"] * 1000.0
        parts.append(f"{row['name']}: total={total_ms:.3f}ms, count={int(row['count'])}, avg={avg_ms:.3f}ms")
    parts.extend(f"{name}={value}" for name, value in sorted(counters.items()))
    return "; ".join(parts)


def print_summary(tracker: PerformanceTracker, limit: int = 10) -> None:
    summary = tracker.summary(sort_by="total")
    if not summary:
        print("No timings recorded.")
        return
    width = max(len(row["name"]) for row in summary[:limit])
    header = f"{'Section':<{width}}  Total (ms)  Self (ms)  Count  Avg (ms)"
    print(header)
    print("-" * len(header))
    for row in summary[:limit]:
        print(
            f"{row['name']:<{width}}  {row['total'] * 1000.0:10.3f}  {row['self'] * 1000.0:8.3f}"
            f"  {int(row['count']):5d}  {row['average'] * 1000.0:8.3f}"
        )
    for name, value in sorted(tracker.counters().items()):
        print(f"{name}: {value}")


def log_summary(tracker: PerformanceTracker, *, limit: int, index: int) -> list[dict[str, float | int]]:
    summary = tracker.summary(sort_by="total")
    limit = max(0, limit)
    limited_summary = summary[:limit] if limit else []
    message = _format_summary(limited_summary, tracker.counters(), limit=limit)
    LOGGER.info("Game %d performance: %s", index, message)
    return limited_summary


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--pieces", type=int, default=50, help="Maximum pieces per game.")
    parser.add_argument("--games", type=int, default=1, help="How many games to play.")
    parser.add_argument("--depth", type=int, default=1, help="Adversarial plies searched.")
    parser.add_argument("--seed", type=int, default=42, help="Seed of the first game.")
    parser.add_argument(
        "--no-lookahead",
        dest="lookahead",
        action="store_false",
        help="Ignore the next piece (cheaper search).",
    )
    parser.add_argument(
        "--log-interval",
        type=int,
        default=5,
        help="Emit a performance summary every N games (0 disables periodic logging).",
    )
    parser.add_argument("--summary-limit", type=int, default=10, help="Maximum number of sections in summaries.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (e.g. DEBUG, INFO, WARNING).")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")

    tracker = PerformanceTracker()
    for game_idx in range(1, args.games + 1):
        dropped = run_game(
            args.pieces, tracker, seed=args.seed + game_idx - 1, depth=args.depth, lookahead=args.lookahead
        )
        LOGGER.info("Game %d dropped %d pieces", game_idx, dropped)
        last = game_idx == args.games
        if last or (args.log_interval > 0 and game_idx % args.log_interval == 0):
            log_summary(tracker, limit=args.summary_limit, index=game_idx)
            if not last:
                tracker.reset()

    print_summary(tracker, limit=args.summary_limit)


if __name__ == "__main__":
    main()
