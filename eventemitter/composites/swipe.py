"""``swipe`` synthesised from ``touchstart`` and ``touchend``.

The first ``swipe`` listener added to a native emitter hooks the two touch
events on its target; the last one removed unhooks them. Touch payloads carry
``x`` and ``y`` coordinates, either on the event or in ``event.data``.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from ..core.emitter import EventEmitter

logger = logging.getLogger(__name__)

SWIPE_THRESHOLD = 50.0


def _point(event: Any) -> Tuple[float, float]:
    data = getattr(event, "data", None)
    if isinstance(data, Mapping):
        return float(data.get("x", 0)), float(data.get("y", 0))
    return float(getattr(event, "x", 0)), float(getattr(event, "y", 0))


def swipe_direction(dx: float, dy: float, threshold: float) -> Optional[str]:
    if max(abs(dx), abs(dy)) < threshold:
        return None
    if abs(dx) >= abs(dy):
        return "right" if dx > 0 else "left"
    return "down" if dy > 0 else "up"


class SwipeTracker:
    """Per-emitter touch state."""

    def __init__(self, emitter: "EventEmitter", threshold: float) -> None:
        self._emitter = weakref.ref(emitter)
        self.threshold = threshold
        self.listeners = 0
        self._start: Optional[Tuple[float, float]] = None

    def on_touch_start(self, event: Any) -> None:
        self._start = _point(event)

    def on_touch_end(self, event: Any) -> None:
        if self._start is None:
            return
        start_x, start_y = self._start
        self._start = None
        end_x, end_y = _point(event)
        dx, dy = end_x - start_x, end_y - start_y

        direction = swipe_direction(dx, dy, self.threshold)
        emitter = self._emitter()
        if direction is None or emitter is None:
            return
        logger.debug("Swipe %s detected on %r", direction, emitter.target)
        emitter.emit("swipe", {"direction": direction, "dx": dx, "dy": dy})

    @property
    def hooks(self) -> List[Tuple[str, Callable[[Any], None]]]:
        return [("touchstart", self.on_touch_start), ("touchend", self.on_touch_end)]


class SwipeDescriptor:
    name = "swipe"

    def __init__(self, threshold: float = SWIPE_THRESHOLD) -> None:
        self.threshold = threshold
        self._trackers: "weakref.WeakKeyDictionary[EventEmitter, SwipeTracker]" = weakref.WeakKeyDictionary()

    def tracker_for(self, emitter: "EventEmitter") -> Optional[SwipeTracker]:
        return self._trackers.get(emitter)

    def add_listener(self, emitter: "EventEmitter", name: str, listener: Callable, capture: bool) -> None:
        tracker = self._trackers.get(emitter)
        if tracker is None:
            tracker = SwipeTracker(emitter, self.threshold)
            for touch_event, hook in tracker.hooks:
                emitter.target.add_event_listener(touch_event, hook)
            self._trackers[emitter] = tracker
        tracker.listeners += 1

    def remove_listener(self, emitter: "EventEmitter", name: str, listener: Callable, capture: bool) -> None:
        tracker = self._trackers.get(emitter)
        # the hook runs before the emitter drops the listener locally
        if tracker is None or listener not in emitter.listeners(name):
            return
        tracker.listeners -= 1
        if tracker.listeners > 0:
            return
        for touch_event, hook in tracker.hooks:
            emitter.target.remove_event_listener(touch_event, hook)
        del self._trackers[emitter]


swipe = SwipeDescriptor()


def get_descriptors() -> List[SwipeDescriptor]:
    return [swipe]
