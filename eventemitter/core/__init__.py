"""Core components of the event emitter."""

from .aggregation import Aggregation
from .descriptor import CompositeEventRegistry, EventDescriptor, composite_events
from .emitter import EventEmitter
from .native import Capability, EventTarget, NativeEvent

__all__ = [
    "Aggregation",
    "Capability",
    "CompositeEventRegistry",
    "EventDescriptor",
    "EventEmitter",
    "EventTarget",
    "NativeEvent",
    "composite_events",
]
