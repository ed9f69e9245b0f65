"""Event emitter with synchronous, serial and parallel dispatch."""

from .core.aggregation import Aggregation
from .core.descriptor import EventDescriptor, define_event, get_event_descriptor, register
from .core.emitter import EventEmitter
from .core.exceptions import (
    DescriptorLoadError,
    EventEmitterError,
    InvalidDescriptorError,
    InvalidListenerError,
)
from .core.native import Capability, EventTarget, NativeEvent
from .decorators import emit_on_success

__all__ = [
    "Aggregation",
    "Capability",
    "DescriptorLoadError",
    "EventDescriptor",
    "EventEmitter",
    "EventEmitterError",
    "EventTarget",
    "InvalidDescriptorError",
    "InvalidListenerError",
    "NativeEvent",
    "define_event",
    "emit_on_success",
    "get_event_descriptor",
    "register",
]
