"""Process-wide registry of composite event descriptors.

A composite event is an event name whose native registration is augmented by
a descriptor, so that e.g. ``swipe`` can be synthesised from ``touchstart`` and
``touchend``. Feature modules register their descriptors while the process
starts; every native emitter consults the registry afterwards.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, Union

from .exceptions import InvalidDescriptorError

if TYPE_CHECKING:  # pragma: no cover
    from .emitter import EventEmitter

logger = logging.getLogger(__name__)

DescriptorHook = Callable[["EventEmitter", str, Callable[..., Any], bool], None]


@dataclass(frozen=True, slots=True)
class EventDescriptor:
    """Hooks run when listeners for ``name`` are added to or removed from a native emitter."""

    name: Union[str, Sequence[str]]
    add_listener: DescriptorHook
    remove_listener: DescriptorHook

    @property
    def names(self) -> List[str]:
        return split_names(self.name)


def split_names(name: Union[str, Sequence[str], None]) -> List[str]:
    """Normalise a descriptor name into a list; strings may be comma separated."""

    if not name:
        return []
    if isinstance(name, str):
        candidates: Sequence[str] = name.split(",")
    else:
        candidates = name
    return [item.strip() for item in candidates if item and item.strip()]


def resolve_hook(descriptor: Any, hook: str, alias: str) -> DescriptorHook:
    """Return the ``hook`` callable of ``descriptor``, falling back to ``alias``."""

    if isinstance(descriptor, dict):
        candidate = descriptor.get(hook) or descriptor.get(alias)
    else:
        candidate = getattr(descriptor, hook, None) or getattr(descriptor, alias, None)
    if not callable(candidate):
        raise InvalidDescriptorError(descriptor, hook)
    return candidate


class CompositeEventRegistry:
    """Mapping from event name to descriptor; the last registration wins."""

    def __init__(self) -> None:
        self._descriptors: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def register(self, descriptor: Any) -> None:
        if descriptor is None:
            return
        raw_name = descriptor.get("name") if isinstance(descriptor, dict) else getattr(descriptor, "name", None)
        names = split_names(raw_name)
        if not names:
            return

        resolve_hook(descriptor, "add_listener", "on")
        resolve_hook(descriptor, "remove_listener", "off")

        with self._lock:
            for name in names:
                if name in self._descriptors:
                    logger.debug("Replacing descriptor for composite event '%s'", name)
                self._descriptors[name] = descriptor
        logger.debug("Registered composite event descriptor for %s", names)

    def unregister(self, name: str) -> None:
        with self._lock:
            self._descriptors.pop(name, None)

    def get(self, name: str) -> Optional[Any]:
        return self._descriptors.get(name)

    def names(self) -> List[str]:
        with self._lock:
            return list(self._descriptors)

    def clear(self) -> None:
        """Remove every descriptor (for start-up reconfiguration and tests)."""

        with self._lock:
            self._descriptors.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)


composite_events = CompositeEventRegistry()


def register(descriptor: Any) -> None:
    """Install a composite event descriptor in the process-wide registry."""

    composite_events.register(descriptor)


define_event = register


def get_event_descriptor(name: str) -> Optional[Any]:
    return composite_events.get(name)


def unregister(name: str) -> None:
    composite_events.unregister(name)


def clear() -> None:
    composite_events.clear()
