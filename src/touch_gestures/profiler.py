"""Timing for the stages of a gesture pipeline.

Each recognizer's ``on_event`` call, the looper drain and the whole event
turn are timed separately so a host can see which recognizer dominates.
"""

from __future__ import annotations

import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator


@dataclass
class StageStats:
    """Rolling timing statistics for one stage."""
    name: str
    avg_ms: float
    min_ms: float
    max_ms: float
    p95_ms: float
    call_count: int


class PipelineProfiler:
    """Times named stages with ``time.perf_counter``.

    Usage:
        profiler = PipelineProfiler()

        with profiler.stage("drag"):
            drag.on_event(event)

        print(profiler.summary())

    Stages are created on first use. Only the most recent ``window_size``
    timings of a stage are kept; the call count covers all of them.
    """

    def __init__(self, window_size: int = 240):
        self._window_size = window_size
        self._timings: dict[str, deque[float]] = {}
        self._counts: dict[str, int] = {}
        self._enabled = True

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        if not self._enabled:
            yield
            return

        if name not in self._timings:
            self._timings[name] = deque(maxlen=self._window_size)
            self._counts[name] = 0

        t0 = time.perf_counter()
        try:
            yield
        finally:
            self._timings[name].append((time.perf_counter() - t0) * 1000.0)
            self._counts[name] += 1

    @property
    def stages(self) -> list[str]:
        return list(self._timings)

    def get_stage_stats(self, name: str) -> StageStats | None:
        timings = self._timings.get(name)
        if not timings:
            return None

        ordered = sorted(timings)
        n = len(ordered)
        return StageStats(
            name=name,
            avg_ms=sum(ordered) / n,
            min_ms=ordered[0],
            max_ms=ordered[-1],
            p95_ms=ordered[int(n * 0.95)] if n >= 2 else ordered[-1],
            call_count=self._counts[name],
        )

    def summary(self) -> dict[str, dict]:
        """Stats of every stage that has run, keyed by stage name."""
        result = {}
        for name in self._timings:
            stats = self.get_stage_stats(name)
            if stats is None:
                continue
            result[name] = {
                "avg_ms": round(stats.avg_ms, 3),
                "min_ms": round(stats.min_ms, 3),
                "max_ms": round(stats.max_ms, 3),
                "p95_ms": round(stats.p95_ms, 3),
                "calls": stats.call_count,
            }
        return result

    def reset(self):
        self._timings.clear()
        self._counts.clear()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool):
        self._enabled = value
