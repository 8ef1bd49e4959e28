"""Light-weight profiling helpers for the search engine.

A :class:`PerformanceTracker` records wall-clock time of labelled, possibly
nested sections (inclusive and exclusive of child sections) plus plain
counters such as the number of boards evaluated.  The engine only touches it
when one is passed in, so searches run without profiling overhead by default.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterator, List, Optional


@dataclass
class PerfStat:
    """Aggregated timing information for a single label."""

    count: int = 0
    total: float = 0.0
    self_time: float = 0.0
    min_time: Optional[float] = None
    max_time: float = 0.0

    def add(self, total: float, exclusive: float) -> None:
        self.count += 1
        self.total += total
        self.self_time += exclusive
        if self.min_time is None or total < self.min_time:
            self.min_time = total
        if total > self.max_time:
            self.max_time = total

    @property
    def average(self) -> float:
        """Return the average inclusive time in seconds."""

        return self.total / self.count if self.count else 0.0


@dataclass
class _Frame:
    name: str
    start: float
    children: float = 0.0


class PerformanceTracker:
    """Collect section timings and counters for search runs."""

    def __init__(
        self,
        *,
        clock: Optional[Callable[[], float]] = None,
        enabled: bool = True,
    ) -> None:
        self._clock = clock or time.perf_counter
        self.enabled = enabled
        self._stats: Dict[str, PerfStat] = {}
        self._counters: Dict[str, int] = {}
        self._stack: List[_Frame] = []

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def reset(self) -> None:
        """Clear accumulated statistics, counters and open sections."""

        self._stats.clear()
        self._counters.clear()
        self._stack.clear()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Time the body of a ``with`` block under ``name``."""

        if not self.enabled:
            yield
            return
        frame = _Frame(name=name, start=self._clock())
        self._stack.append(frame)
        try:
            yield
        finally:
            self._close(frame)

    def _close(self, frame: _Frame) -> None:
        elapsed = self._clock() - frame.start
        if not self._stack or self._stack[-1] is not frame:
            raise RuntimeError("Timer stack out of sync")
        self._stack.pop()
        exclusive = max(0.0, elapsed - frame.children)
        self._stats.setdefault(frame.name, PerfStat()).add(elapsed, exclusive)
        if self._stack:
            self._stack[-1].children += elapsed

    def count(self, name: str, amount: int = 1) -> None:
        """Add ``amount`` to the counter ``name``."""

        if self.enabled:
            self._counters[name] = self._counters.get(name, 0) + amount

    def counters(self) -> Dict[str, int]:
        return dict(self._counters)

    def snapshot(self) -> Dict[str, PerfStat]:
        """Return a copy of the accumulated timing statistics."""

        return {name: replace(stat) for name, stat in self._stats.items()}

    def summary(
        self, *, sort_by: str = "total", descending: bool = True
    ) -> List[Dict[str, float | int]]:
        """Return one row per section, sorted by ``sort_by``."""

        key_map = {
            "total": lambda item: item[1].total,
            "self": lambda item: item[1].self_time,
            "count": lambda item: item[1].count,
            "average": lambda item: item[1].average,
            "max": lambda item: item[1].max_time,
        }
        if sort_by not in key_map:
            raise ValueError(f"Unknown sort key: {sort_by}")
        items = sorted(self._stats.items(), key=key_map[sort_by], reverse=descending)
        return [
            {
                "name": name,
                "count": stat.count,
                "total": stat.total,
                "self": stat.self_time,
                "average": stat.average,
                "min": stat.min_time if stat.min_time is not None else 0.0,
                "max": stat.max_time,
            }
            for name, stat in items
        ]


__all__ = ["PerfStat", "PerformanceTracker"]
