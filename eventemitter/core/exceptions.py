"""Custom exceptions for the event emitter."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional


class EventEmitterError(Exception):
    """Base exception for the event emitter."""


class InvalidListenerError(EventEmitterError, TypeError):
    """Raised when a listener that cannot be called is registered."""

    def __init__(self, name: str, listener: Any) -> None:
        self.name = name
        self.listener = listener
        super().__init__(
            f"Listener for event '{name}' must be callable, got {type(listener).__name__}"
        )


class InvalidDescriptorError(EventEmitterError, TypeError):
    """Raised when a composite event descriptor exposes no usable hooks."""

    def __init__(self, descriptor: Any, missing: str) -> None:
        self.descriptor = descriptor
        self.missing = missing
        super().__init__(f"Event descriptor {descriptor!r} has no '{missing}' hook")


@dataclass(slots=True)
class DescriptorSource:
    """Where a composite event module was loaded from."""

    name: str
    path: Path

    def __str__(self) -> str:  # pragma: no cover - repr helper
        return f"{self.name} ({self.path})"


class DescriptorLoadError(EventEmitterError):
    """Raised when a composite event module cannot be loaded."""

    def __init__(self, source: DescriptorSource, reason: str, cause: Optional[BaseException] = None):
        self.source = source
        self.reason = reason
        self.cause = cause
        super().__init__(f"Cannot load event descriptors from {source}: {reason}")
