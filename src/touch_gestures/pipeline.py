"""Host-side harness that feeds one event stream to several recognizers.

The pipeline plays the role of the UI toolkit: it owns the element, runs the
element's looper between events and forwards every pointer event to each
attached recognizer. It does not arbitrate; each recognizer sees every event
and keeps its own state.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from touch_gestures.element import Element
from touch_gestures.events import PointerEvent
from touch_gestures.gestures import (
    DragGestureRecognizer,
    RotateGestureRecognizer,
    ScaleGestureRecognizer,
)
from touch_gestures.profiler import PipelineProfiler
from touch_gestures.recognizer import GestureRecognizer, GestureState

logger = logging.getLogger("touch_gestures.pipeline")


@dataclass
class GestureUpdate:
    """One state transition observed on a recognizer."""
    recognizer: str
    state: GestureState
    magnitude: tuple[float, ...]
    velocity: tuple[float, ...]
    event_time: Optional[float]  # None when fired by a looper callback

    def to_dict(self) -> dict:
        return {
            "recognizer": self.recognizer,
            "state": self.state.value,
            "magnitude": list(self.magnitude),
            "velocity": list(self.velocity),
            "event_time": self.event_time,
        }


@dataclass
class PipelineStats:
    total_events: int
    total_transitions: int
    avg_latency_ms: float
    states: dict[str, str] = field(default_factory=dict)
    profiler_summary: dict = field(default_factory=dict)


class GesturePipeline:
    """Dispatches pointer events to a set of recognizers on one element.

    Usage:
        pipeline = GesturePipeline.with_defaults()
        pipeline.on_update(lambda u: print(u.recognizer, u.state))
        for event in events:
            pipeline.process(event)
        pipeline.flush()
    """

    def __init__(
        self,
        element: Optional[Element] = None,
        recognizers: Optional[Iterable[GestureRecognizer]] = None,
        enable_profiling: bool = True,
    ):
        self.element = element if element is not None else Element()
        self.recognizers: list[GestureRecognizer] = []
        self.profiler = PipelineProfiler()
        self.profiler.enabled = enable_profiling

        self._callbacks: list[Callable[[GestureUpdate], None]] = []
        self._event_time: Optional[float] = None
        self._latencies: deque[float] = deque(maxlen=240)
        self._total_events = 0
        self._total_transitions = 0

        for recognizer in recognizers or ():
            self.add(recognizer)

    @classmethod
    def with_defaults(
        cls,
        element: Optional[Element] = None,
        slop: Optional[float] = None,
        enable_profiling: bool = True,
    ) -> GesturePipeline:
        """Pipeline running drag, rotate and scale side by side.

        ``slop`` overrides the default slop of the drag and scale
        recognizers; rotation keeps its angular default.
        """
        return cls(
            element=element,
            recognizers=[
                DragGestureRecognizer(slop=slop),
                RotateGestureRecognizer(),
                ScaleGestureRecognizer(slop=slop),
            ],
            enable_profiling=enable_profiling,
        )

    def add(self, recognizer: GestureRecognizer):
        """Attach ``recognizer`` to the pipeline's element."""
        recognizer.element = self.element
        recognizer.add_state_change_listener(self._on_state_change)
        self.recognizers.append(recognizer)
        logger.debug("Added %s recognizer", recognizer.name)

    def remove(self, recognizer: GestureRecognizer):
        """Detach ``recognizer``; a pending reset to POSSIBLE is applied now."""
        self.recognizers.remove(recognizer)
        recognizer.remove_state_change_listener(self._on_state_change)
        recognizer.element = None

    def get(self, name: str) -> Optional[GestureRecognizer]:
        for recognizer in self.recognizers:
            if recognizer.name == name:
                return recognizer
        return None

    def on_update(self, callback: Callable[[GestureUpdate], None]):
        """Register a callback for every recognizer transition."""
        self._callbacks.append(callback)

    def process(self, event: PointerEvent):
        """Run one event turn: drain deferred work, dispatch, drain again."""
        t0 = time.perf_counter()
        self._total_events += 1

        with self.profiler.stage("total"):
            self.flush()
            self._event_time = event.event_time
            try:
                for recognizer in self.recognizers:
                    with self.profiler.stage(recognizer.name):
                        recognizer.on_event(event)
            finally:
                self._event_time = None
            self.flush()

        self._latencies.append(time.perf_counter() - t0)

    def process_all(self, events: Iterable[PointerEvent]) -> int:
        count = 0
        for event in events:
            self.process(event)
            count += 1
        return count

    def flush(self) -> int:
        """Run callbacks posted to the element's looper, if it can be drained."""
        run_pending = getattr(self.element.looper, "run_pending", None)
        if run_pending is None:
            return 0
        with self.profiler.stage("looper"):
            return run_pending()

    def _on_state_change(self, recognizer: GestureRecognizer):
        self._total_transitions += 1
        update = GestureUpdate(
            recognizer=recognizer.name,
            state=recognizer.state,
            magnitude=recognizer.magnitude,
            velocity=recognizer.velocities,
            event_time=self._event_time,
        )
        for cb in self._callbacks:
            cb(update)

    @property
    def stats(self) -> PipelineStats:
        if self._latencies:
            avg_latency = sum(self._latencies) / len(self._latencies)
        else:
            avg_latency = 0.0

        return PipelineStats(
            total_events=self._total_events,
            total_transitions=self._total_transitions,
            avg_latency_ms=avg_latency * 1000,
            states={r.name: r.state.value for r in self.recognizers},
            profiler_summary=self.profiler.summary(),
        )

    def reset(self):
        """Clear counters and timings. Recognizer state is left alone."""
        self._latencies.clear()
        self._total_events = 0
        self._total_transitions = 0
        self.profiler.reset()
