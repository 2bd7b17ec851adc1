#!/usr/bin/env python3
"""Drive an element's transform with drag, pinch and rotate.

Plays a synthetic two-finger gesture (the fingers spread apart while
turning) against one element and folds each finished gesture into the
element's transform, printing the recognizer readings as they change.

Usage:
    python examples/demo_transform.py
    python examples/demo_transform.py --turn 45 --spread 2.0 --steps 30
"""

import argparse
import math
import sys

sys.path.insert(0, "src")
from touch_gestures import (
    DragGestureRecognizer,
    Element,
    EventSequence,
    GestureState,
    RotateGestureRecognizer,
    ScaleGestureRecognizer,
    Transform,
)


def two_finger_gesture(turn_deg: float, spread: float, steps: int) -> EventSequence:
    seq = EventSequence()
    center = (200.0, 200.0)
    radius = 50.0

    def fingers(theta, r):
        dx, dy = r * math.cos(theta), r * math.sin(theta)
        return (center[0] - dx, center[1] - dy), (center[0] + dx, center[1] + dy)

    a, b = fingers(0.0, radius)
    seq.down(*a)
    seq.pointer_down(1, a, b)
    for i in range(1, steps + 1):
        t = i / steps
        a, b = fingers(math.radians(turn_deg) * t, radius * (1 + (spread - 1) * t))
        seq.move(a, b)
    seq.pointer_up(1, a, b)
    seq.up(*a)
    return seq


def main():
    parser = argparse.ArgumentParser(description="Apply gestures to an element transform")
    parser.add_argument("--turn", type=float, default=30.0, help="Rotation in degrees")
    parser.add_argument("--spread", type=float, default=1.5, help="Final span / initial span")
    parser.add_argument("--steps", type=int, default=20, help="Number of move events")
    args = parser.parse_args()

    element = Element(name="card")
    drag = DragGestureRecognizer(element=element)
    rotate = RotateGestureRecognizer(element=element)
    scale = ScaleGestureRecognizer(element=element)
    recognizers = [drag, rotate, scale]

    # Final readings of each gesture, captured before the recognizer rests.
    finished = {}

    def on_change(recognizer):
        print(recognizer.describe())
        if recognizer.state is GestureState.CHANGED:
            finished[recognizer.name] = recognizer.magnitude

    for r in recognizers:
        r.add_state_change_listener(on_change)

    for event in two_finger_gesture(args.turn, args.spread, args.steps):
        element.looper.run_pending()
        for r in recognizers:
            r.on_event(event)
    element.looper.run_pending()

    tx, ty = finished.get("drag", (0.0, 0.0))
    (rotation,) = finished.get("rotate", (0.0,))
    (s,) = finished.get("scale", (1.0,))
    element.transform = Transform(
        scale_x=s,
        scale_y=s,
        rotation=math.degrees(rotation),
        translation_x=tx,
        translation_y=ty,
        pivot_x=200.0,
        pivot_y=200.0,
    )
    print(f"\n{element}")


if __name__ == "__main__":
    main()
