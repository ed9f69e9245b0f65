"""Event emitter with in-memory and native dispatch."""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
import weakref
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple, Union

from .. import runtime
from .aggregation import Aggregation
from .descriptor import define_event as _define_event
from .descriptor import get_event_descriptor as _get_event_descriptor
from .descriptor import register as _register
from .descriptor import resolve_hook
from .exceptions import InvalidListenerError
from .native import Capability

logger = logging.getLogger(__name__)

Listener = Callable[[Any], Any]
EmitResult = Union[bool, List[Any], None]


class _TargetRegistry:
    """Maps target identity to the single emitter raising events on its behalf.

    Entries do not own their emitter: the emitter holds its target, so an
    entry disappears together with the pair and ids are never reused while
    it exists.
    """

    def __init__(self) -> None:
        self._emitters: "weakref.WeakValueDictionary[int, EventEmitter]" = weakref.WeakValueDictionary()
        self._lock = threading.RLock()

    def get(self, target: Any) -> Optional["EventEmitter"]:
        return self._emitters.get(id(target))

    def bind(self, target: Any, emitter: "EventEmitter") -> "EventEmitter":
        with self._lock:
            return self._emitters.setdefault(id(target), emitter)

    def __len__(self) -> int:
        return len(self._emitters)


_targets = _TargetRegistry()


def _payload_fields(data: Any) -> Iterable[Tuple[str, Any]]:
    if data is None:
        return ()
    if isinstance(data, Mapping):
        return [(key, value) for key, value in data.items() if isinstance(key, str)]
    if hasattr(data, "__dict__"):
        return list(vars(data).items())
    return ()


class EventEmitter:
    """Register named listeners and emit events to them.

    ``EventEmitter(target)`` returns the emitter already bound to ``target``
    when there is one; without a target the emitter raises events on its own
    behalf. Targets implementing ``add_event_listener`` /
    ``remove_event_listener`` / ``dispatch_event`` are driven natively: their
    listeners are registered on the target and emission becomes a native
    dispatch.

    The emitter holds its target; the pair stays linked while the emitter is
    referenced.

    Listeners receive the emitted payload as their only argument. A listener
    returning exactly ``False`` asks for propagation to stop; ``emit`` still
    runs the remaining listeners while ``emit_async`` skips them.
    """

    def __new__(cls, target: Any = None, **options: Any) -> "EventEmitter":
        if target is not None:
            if isinstance(target, EventEmitter) and target.target is target:
                return target
            existing = _targets.get(target)
            if existing is not None:
                return existing
        return super().__new__(cls)

    def __init__(
        self,
        target: Any = None,
        *,
        max_listeners: Optional[int] = None,
        aggregate: Optional[Union[Aggregation, str]] = None,
    ) -> None:
        if getattr(self, "_initialised", False):
            return

        if target is None or target is self:
            self._target: Any = None
        else:
            self._target = target
            _targets.bind(target, self)

        self.capability = Capability.detect(self.target)
        self.max_listeners = max_listeners if max_listeners is not None else runtime.default_max_listeners()
        self.aggregate = Aggregation(aggregate) if aggregate is not None else runtime.default_aggregation()
        self._listeners: Dict[str, List[Listener]] = {}
        self._scheduled: Set["asyncio.Task[Any]"] = set()
        self._initialised = True

    @property
    def target(self) -> Any:
        if self._target is None:
            return self
        return self._target

    @property
    def is_native(self) -> bool:
        return self.capability is Capability.NATIVE

    # ------------------------------------------------------------------
    # Composite events
    # ------------------------------------------------------------------
    register = staticmethod(_register)
    define_event = staticmethod(_define_event)
    get_event_descriptor = staticmethod(_get_event_descriptor)

    # ------------------------------------------------------------------
    # Listener registry
    # ------------------------------------------------------------------
    def add_listener(self, name: str, listener: Listener, capture: bool = False) -> None:
        if not callable(listener):
            raise InvalidListenerError(name, listener)

        if self.is_native:
            self._add_native_listener(name, listener, capture)

        listeners = self._listeners.setdefault(name, [])
        listeners.append(listener)
        if len(listeners) == self.max_listeners + 1:
            logger.warning(
                "Event '%s' has more than %d listeners on %r",
                name,
                self.max_listeners,
                self.target,
            )

    on = add_listener

    def remove_listener(
        self,
        name: Optional[str] = None,
        listener: Optional[Listener] = None,
        capture: bool = False,
    ) -> None:
        if name and listener is not None:
            if self.is_native:
                self._remove_native_listener(name, listener, capture)
            listeners = self._listeners.get(name)
            if not listeners:
                return
            for index, candidate in enumerate(listeners):
                if candidate == listener:
                    del listeners[index]
                    break
            if not listeners:
                self._listeners.pop(name, None)
        elif name:
            if self.is_native:
                for registered in list(self._listeners.get(name, ())):
                    self._remove_native_listener(name, registered, capture)
            self._listeners.pop(name, None)
        else:
            for registered_name in list(self._listeners):
                self.remove_listener(registered_name, None, capture)
            self._listeners = {}

    off = remove_listener

    def remove_all_listeners(self, name: Optional[str] = None) -> None:
        self.remove_listener(name)

    def listeners(self, name: str) -> List[Listener]:
        return list(self._listeners.get(name, ()))

    def listener_count(self, name: str) -> int:
        return len(self._listeners.get(name, ()))

    def event_names(self) -> List[str]:
        return list(self._listeners)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def emit(
        self,
        name: str,
        data: Any = None,
        can_bubble: bool = False,
        cancel_able: bool = False,
    ) -> EmitResult:
        """Invoke every listener for ``name`` synchronously, in registration order."""

        if self.is_native:
            return self._emit_native(name, data, can_bubble, cancel_able)

        stop_propagation = False
        results: List[Any] = []
        for listener in self._snapshot(name):
            result = listener(data)
            if inspect.iscoroutine(result):
                result = self._schedule(name, result)
            elif result is False:
                stop_propagation = True
            results.append(result)

        if self.aggregate is Aggregation.RESULTS:
            return results
        return stop_propagation

    async def emit_async(
        self,
        name: str,
        data: Any = None,
        can_bubble: bool = False,
        cancel_able: bool = False,
    ) -> Optional[bool]:
        """Invoke listeners one after another, awaiting each result.

        A listener settling to ``False`` stops the emission and the remaining
        listeners are never started. Failures propagate unchanged.
        """

        if self.is_native:
            return self._emit_native(name, data, can_bubble, cancel_able)

        for listener in self._snapshot(name):
            result = listener(data)
            if inspect.isawaitable(result):
                result = await result
            if result is False:
                return True
        return False

    emit_serial = emit_async

    async def emit_parallel(
        self,
        name: str,
        data: Any = None,
        can_bubble: bool = False,
        cancel_able: bool = False,
    ) -> EmitResult:
        """Start every listener at once and wait for all of them.

        Results are reported in registration order. The first failure observed
        fails the emission; listeners still running are not cancelled.
        """

        if self.is_native:
            return self._emit_native(name, data, can_bubble, cancel_able)

        listeners = self._snapshot(name)
        if not listeners:
            return [] if self.aggregate is Aggregation.RESULTS else False

        loop = asyncio.get_running_loop()
        outstanding = [self._start(listener, data, loop) for listener in listeners]
        results = await asyncio.gather(*outstanding)

        if self.aggregate is Aggregation.RESULTS:
            return list(results)
        return any(result is False for result in results)

    def _snapshot(self, name: str) -> List[Listener]:
        return list(self._listeners.get(name, ()))

    @staticmethod
    def _start(listener: Listener, data: Any, loop: asyncio.AbstractEventLoop) -> "asyncio.Future[Any]":
        try:
            result = listener(data)
        except Exception as exc:
            failed = loop.create_future()
            failed.set_exception(exc)
            return failed

        if inspect.isawaitable(result):
            return asyncio.ensure_future(result)

        settled = loop.create_future()
        settled.set_result(result)
        return settled

    def _schedule(self, name: str, coroutine: Any) -> Optional["asyncio.Task[Any]"]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                "Listener for event '%s' returned a coroutine outside of an event loop; it was not run",
                name,
            )
            coroutine.close()
            return None

        task = loop.create_task(coroutine)
        self._scheduled.add(task)
        task.add_done_callback(self._scheduled.discard)
        return task

    # ------------------------------------------------------------------
    # Native bridge
    # ------------------------------------------------------------------
    def _add_native_listener(self, name: str, listener: Listener, capture: bool) -> None:
        self.target.add_event_listener(name, listener, capture)
        descriptor = _get_event_descriptor(name)
        if descriptor is None:
            return
        resolve_hook(descriptor, "add_listener", "on")(self, name, listener, capture)

    def _remove_native_listener(self, name: str, listener: Listener, capture: bool) -> None:
        self.target.remove_event_listener(name, listener, capture)
        descriptor = _get_event_descriptor(name)
        if descriptor is None:
            return
        resolve_hook(descriptor, "remove_listener", "off")(self, name, listener, capture)

    def _emit_native(self, name: str, data: Any, can_bubble: bool, cancel_able: bool) -> Optional[bool]:
        factory = runtime.get_event_factory()
        if factory is None:
            logger.debug("No native event factory installed; '%s' not dispatched", name)
            return None

        event = factory(name, bubbles=bool(can_bubble), cancelable=bool(cancel_able))
        for key, value in _payload_fields(data):
            # fields the event already defines are read-only
            if key == "data" or hasattr(event, key):
                continue
            setattr(event, key, value)
        event.data = data
        return self.target.dispatch_event(event)

    def __repr__(self) -> str:
        target = "self" if self._target is None else repr(self.target)
        return f"<{type(self).__name__} target={target} capability={self.capability.value}>"
