"""touch-gestures CLI.

Usage:
    touch-gestures replay drag.json                 Run a recording through the recognizers
    touch-gestures synthesize pinch -o pinch.json   Write a synthetic recording
    touch-gestures benchmark                        Time the recognizers on synthetic input
    touch-gestures config                           Show the effective touch configuration
"""

from __future__ import annotations

import json
import logging
import math
import time
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
import yaml

from touch_gestures.config import get_config, load_config, set_config
from touch_gestures.events import EventSequence

app = typer.Typer(
    name="touch-gestures",
    help="✋ Drag, pinch and rotate recognition for multi-pointer touch streams.",
    add_completion=False,
)


class SyntheticKind(str, Enum):
    drag = "drag"
    pinch = "pinch"
    rotate = "rotate"


def synthesize(kind: SyntheticKind, steps: int = 20, frame_ms: float = 16.0) -> EventSequence:
    """Build a complete, well-formed gesture of the given kind."""
    seq = EventSequence(frame_ms=frame_ms)
    steps = max(1, steps)

    if kind == SyntheticKind.drag:
        seq.down(0, 0)
        for i in range(1, steps + 1):
            seq.move((200.0 * i / steps, 50.0 * i / steps))
        seq.up(200, 50)
        return seq

    if kind == SyntheticKind.pinch:
        a, b = (50.0, 100.0), (150.0, 100.0)
        seq.down(*a)
        seq.pointer_down(1, a, b)
        for i in range(1, steps + 1):
            half = 50.0 + 100.0 * i / steps
            a, b = (100.0 - half, 100.0), (100.0 + half, 100.0)
            seq.move(a, b)
        seq.pointer_up(1, a, b)
        seq.up(*a)
        return seq

    # rotate: pointer 1 orbits pointer 0 by a quarter turn
    pivot = (200.0, 200.0)
    radius = 100.0
    b = (pivot[0] + radius, pivot[1])
    seq.down(*pivot)
    seq.pointer_down(1, pivot, b)
    for i in range(1, steps + 1):
        theta = (math.pi / 2) * i / steps
        b = (pivot[0] + radius * math.cos(theta), pivot[1] + radius * math.sin(theta))
        seq.move(pivot, b)
    seq.pointer_up(1, pivot, b)
    seq.up(*pivot)
    return seq


@app.callback()
def main_options(
    log_level: str = typer.Option("warning", "--log-level", help="Logging level"),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Touch configuration YAML (overrides $TOUCH_GESTURES_CONFIG)"
    ),
):
    """Options shared by every command."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    if config_path is not None:
        set_config(load_config(config_path))


@app.command()
def replay(
    recording: str = typer.Argument(..., help="Path to a .json or .yaml recording"),
    speed: float = typer.Option(1.0, help="Playback speed multiplier"),
    realtime: bool = typer.Option(False, help="Play at original timing"),
    slop: Optional[float] = typer.Option(None, help="Override drag/scale slop in pixels"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print centroid and velocity too"),
):
    """Replay a recorded event stream through drag, rotate and scale."""
    from touch_gestures.pipeline import GesturePipeline
    from touch_gestures.recorder import EventPlayer

    path = Path(recording)
    if not path.exists():
        typer.echo(f"❌ Recording not found: {recording}", err=True)
        raise typer.Exit(1)

    try:
        player = EventPlayer.load(path)
    except (ValueError, KeyError, json.JSONDecodeError, yaml.YAMLError) as e:
        typer.echo(f"❌ Could not read {recording}: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"▶️  Replaying {path.name} ({player.event_count} events, {player.duration:.0f} ms)")

    pipeline = GesturePipeline.with_defaults(slop=slop)

    def on_update(update):
        when = "-" if update.event_time is None else f"{update.event_time:.0f}ms"
        magnitude = ", ".join(f"{m:.3f}" for m in update.magnitude)
        typer.echo(f"   {when:>8} {update.recognizer:6s} {update.state.name:10s} [{magnitude}]")
        if verbose:
            typer.echo(f"            {pipeline.get(update.recognizer).describe()}")

    pipeline.on_update(on_update)

    events = player.play_realtime(speed=speed) if realtime else player.play()
    pipeline.process_all(events)
    pipeline.flush()

    stats = pipeline.stats
    typer.echo(f"\n✅ Replay complete. {stats.total_transitions} transitions.")


@app.command("synthesize")
def synthesize_command(
    kind: SyntheticKind = typer.Argument(..., help="Gesture to generate"),
    output: str = typer.Option("gesture.json", "-o", "--output", help="Output file (.json or .yaml)"),
    steps: int = typer.Option(20, help="Number of move events"),
    frame_ms: float = typer.Option(16.0, help="Milliseconds between events"),
):
    """Write a synthetic drag, pinch or rotate recording."""
    from touch_gestures.recorder import EventRecorder

    recorder = EventRecorder()
    recorder.start()
    recorder.extend(synthesize(kind, steps=steps, frame_ms=frame_ms))
    recorder.stop()

    path = recorder.save(output)
    typer.echo(f"💾 Wrote {recorder.event_count} {kind.value} events to {path}")


@app.command()
def benchmark(
    iterations: int = typer.Option(200, help="Gestures per kind"),
    steps: int = typer.Option(20, help="Move events per gesture"),
):
    """Time the recognizers over synthetic gestures."""
    from touch_gestures.pipeline import GesturePipeline

    typer.echo(f"⚡ Running benchmark: {iterations} gestures per kind, {steps} moves each")

    pipeline = GesturePipeline.with_defaults()
    gestures = [list(synthesize(kind, steps=steps)) for kind in SyntheticKind]

    t0 = time.perf_counter()
    for _ in range(iterations):
        for events in gestures:
            pipeline.process_all(events)
    elapsed = time.perf_counter() - t0
    pipeline.flush()

    stats = pipeline.stats
    per_event_us = elapsed / max(1, stats.total_events) * 1e6

    typer.echo(f"\n📊 Results:")
    typer.echo(f"   Events:        {stats.total_events}")
    typer.echo(f"   Transitions:   {stats.total_transitions}")
    typer.echo(f"   Per event:     {per_event_us:.1f} µs")

    typer.echo(f"\n📈 Stage breakdown:")
    for name, s in stats.profiler_summary.items():
        typer.echo(f"   {name:10s} avg={s['avg_ms']:.4f}ms  p95={s['p95_ms']:.4f}ms")


@app.command()
def config():
    """Print the effective touch configuration as YAML."""
    cfg = get_config()
    data = cfg.to_dict()
    data["scaled_touch_slop"] = cfg.scaled_touch_slop
    data["scaled_maximum_fling_velocity"] = cfg.scaled_maximum_fling_velocity
    typer.echo(yaml.safe_dump(data, sort_keys=False).rstrip())


def main():
    app()


if __name__ == "__main__":
    main()
