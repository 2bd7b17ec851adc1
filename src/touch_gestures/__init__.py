"""touch-gestures - continuous drag, pinch and rotate recognition from pointer events."""

__version__ = "0.1.0"

from touch_gestures.config import ViewConfiguration, get_config, load_config
from touch_gestures.element import Element
from touch_gestures.events import EventSequence, PointerAction, PointerEvent
from touch_gestures.geometry import Transform
from touch_gestures.gestures import (
    DragGestureRecognizer,
    RotateGestureRecognizer,
    ScaleGestureRecognizer,
)
from touch_gestures.looper import AsyncioLooper, Looper
from touch_gestures.pipeline import GesturePipeline, GestureUpdate
from touch_gestures.profiler import PipelineProfiler
from touch_gestures.recognizer import DetachedRecognizerError, GestureRecognizer, GestureState
from touch_gestures.recorder import EventPlayer, EventRecorder
from touch_gestures.velocity import Accumulation, ValueVelocityTracker, VelocityTracker
