"""Native event primitives.

A target is *native* when it dispatches events by itself through the
``add_event_listener`` / ``remove_event_listener`` / ``dispatch_event``
protocol. :class:`EventTarget` is a reference implementation of that protocol
with DOM semantics (capture, target and bubble phases along a ``parent``
chain) and :class:`NativeEvent` is the event record it dispatches.
"""

from __future__ import annotations

import time
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, List, Optional, Tuple

NativeListener = Callable[["NativeEvent"], Any]

NATIVE_METHODS = ("add_event_listener", "remove_event_listener", "dispatch_event")


class Capability(str, Enum):
    """How an emitter reaches the listeners of its target."""

    NATIVE = "native"
    PURE = "pure"

    @classmethod
    def detect(cls, target: Any) -> "Capability":
        """Return ``NATIVE`` if the target implements the full native protocol."""

        if all(callable(getattr(target, method, None)) for method in NATIVE_METHODS):
            return cls.NATIVE
        return cls.PURE


class EventPhase(IntEnum):
    NONE = 0
    CAPTURING = 1
    AT_TARGET = 2
    BUBBLING = 3


class NativeEvent:
    """Event record dispatched through native targets."""

    def __init__(self, type: str, *, bubbles: bool = False, cancelable: bool = False) -> None:
        self.type = type
        self.bubbles = bool(bubbles)
        self.cancelable = bool(cancelable)
        self.default_prevented = False
        self.target: Optional[Any] = None
        self.current_target: Optional[Any] = None
        self.event_phase = EventPhase.NONE
        self.time_stamp = time.time()
        self.data: Any = None
        self._propagation_stopped = False
        self._immediate_propagation_stopped = False

    def prevent_default(self) -> None:
        if self.cancelable:
            self.default_prevented = True

    def stop_propagation(self) -> None:
        self._propagation_stopped = True

    def stop_immediate_propagation(self) -> None:
        self._propagation_stopped = True
        self._immediate_propagation_stopped = True

    @property
    def propagation_stopped(self) -> bool:
        return self._propagation_stopped

    def __repr__(self) -> str:
        return f"NativeEvent(type={self.type!r}, bubbles={self.bubbles}, cancelable={self.cancelable})"


EventFactory = Callable[..., NativeEvent]


class EventTarget:
    """In-process native event target.

    Each ``(listener, capture)`` pair is registered at most once, like the DOM
    does. Events travel from the root of the ``parent`` chain down to the
    target (capture) and back up (bubble) when ``event.bubbles`` is set.
    """

    def __init__(self, parent: Optional["EventTarget"] = None) -> None:
        self.parent = parent
        self._native_listeners: Dict[str, List[Tuple[NativeListener, bool]]] = {}

    def add_event_listener(self, name: str, listener: NativeListener, capture: bool = False) -> None:
        entries = self._native_listeners.setdefault(name, [])
        entry = (listener, bool(capture))
        if entry in entries:
            return
        entries.append(entry)

    def remove_event_listener(self, name: str, listener: NativeListener, capture: bool = False) -> None:
        entries = self._native_listeners.get(name)
        if not entries:
            return
        entry = (listener, bool(capture))
        if entry in entries:
            entries.remove(entry)
        if not entries:
            self._native_listeners.pop(name, None)

    def dispatch_event(self, event: NativeEvent) -> bool:
        """Dispatch ``event`` and return ``False`` if its default was prevented."""

        event.target = self
        path: List[EventTarget] = []
        node = self.parent
        while node is not None:
            path.append(node)
            node = node.parent

        for node in reversed(path):
            if event.propagation_stopped:
                break
            node._invoke(event, EventPhase.CAPTURING)

        if not event.propagation_stopped:
            self._invoke(event, EventPhase.AT_TARGET)

        if event.bubbles:
            for node in path:
                if event.propagation_stopped:
                    break
                node._invoke(event, EventPhase.BUBBLING)

        event.event_phase = EventPhase.NONE
        event.current_target = None
        return not event.default_prevented

    def _invoke(self, event: NativeEvent, phase: EventPhase) -> None:
        entries = list(self._native_listeners.get(event.type, ()))
        if not entries:
            return

        event.current_target = self
        event.event_phase = phase
        for listener, capture in entries:
            if phase is EventPhase.CAPTURING and not capture:
                continue
            if phase is EventPhase.BUBBLING and capture:
                continue
            listener(event)
            if event._immediate_propagation_stopped:
                break
