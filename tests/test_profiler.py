"""Tests for the stage profiler."""

import time

import pytest

from touch_gestures.profiler import PipelineProfiler


class TestPipelineProfiler:
    def test_stage_timing(self):
        profiler = PipelineProfiler()
        with profiler.stage("drag"):
            time.sleep(0.001)

        stats = profiler.get_stage_stats("drag")
        assert stats is not None
        assert stats.call_count == 1
        assert stats.avg_ms >= 0.5

    def test_stages_created_on_use(self):
        profiler = PipelineProfiler()
        assert profiler.stages == []
        with profiler.stage("scale"):
            pass
        assert profiler.stages == ["scale"]

    def test_call_count_outlives_window(self):
        profiler = PipelineProfiler(window_size=5)
        for _ in range(12):
            with profiler.stage("rotate"):
                pass
        assert profiler.get_stage_stats("rotate").call_count == 12

    def test_summary(self):
        profiler = PipelineProfiler()
        with profiler.stage("drag"):
            pass
        with profiler.stage("total"):
            pass

        summary = profiler.summary()
        assert set(summary) == {"drag", "total"}
        assert summary["drag"]["calls"] == 1
        assert "p95_ms" in summary["total"]

    def test_timing_recorded_when_stage_raises(self):
        profiler = PipelineProfiler()
        with pytest.raises(KeyError):
            with profiler.stage("drag"):
                raise KeyError("x")
        assert profiler.get_stage_stats("drag").call_count == 1

    def test_disabled(self):
        profiler = PipelineProfiler()
        profiler.enabled = False
        with profiler.stage("drag"):
            pass
        assert profiler.get_stage_stats("drag") is None
        assert profiler.summary() == {}

    def test_reset(self):
        profiler = PipelineProfiler()
        with profiler.stage("drag"):
            pass
        profiler.reset()
        assert profiler.get_stage_stats("drag") is None
