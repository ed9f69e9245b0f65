"""Decorators for automatic event emission."""

from __future__ import annotations

import inspect
import logging
from functools import wraps
from typing import Any, Callable, Optional

from .core.emitter import EventEmitter

logger = logging.getLogger(__name__)

_NOTHING = object()


def emit_on_success(
    emitter: EventEmitter,
    name: str,
    data_extractor: Optional[Callable[..., Any]] = None,
    condition: Optional[Callable[..., bool]] = None,
):
    """
    Decorator emitting ``name`` on ``emitter`` after the wrapped function returns.

    Args:
        emitter: The emitter that raises the event.
        name: The event name.
        data_extractor: Optional function building the payload.
                        Signature: (*args, result, **kwargs) -> Any
                        If None, the function result is the payload.
        condition: Optional predicate deciding whether to emit.
                   Signature: (*args, result, **kwargs) -> bool

    Synchronous functions emit through ``emit``; coroutine functions through
    ``emit_async``, so their serial listeners are awaited before the wrapper
    returns. Exceptions raised by the wrapped function propagate and nothing
    is emitted.

    Usage:
        @emit_on_success(emitter, "saved", data_extractor=lambda item, result: {"id": result})
        def save(item):
            ...
    """

    def decorator(func: Callable) -> Callable:
        is_async = inspect.iscoroutinefunction(func)

        def _build_payload(result: Any, *args, **kwargs) -> Any:
            if condition:
                try:
                    if not condition(*args, result=result, **kwargs):
                        return _NOTHING
                except Exception as e:
                    logger.warning(
                        "Failed to evaluate condition for %s: %s",
                        func.__name__,
                        e,
                        exc_info=True,
                    )
                    return _NOTHING

            if not data_extractor:
                return result

            try:
                return data_extractor(*args, result=result, **kwargs)
            except Exception as e:
                logger.warning(
                    "Failed to extract '%s' payload for %s: %s",
                    name,
                    func.__name__,
                    e,
                    exc_info=True,
                )
                return _NOTHING

        if is_async:
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                result = await func(*args, **kwargs)
                payload = _build_payload(result, *args, **kwargs)
                if payload is not _NOTHING:
                    await emitter.emit_async(name, payload)
                return result

            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            result = func(*args, **kwargs)
            payload = _build_payload(result, *args, **kwargs)
            if payload is not _NOTHING:
                emitter.emit(name, payload)
            return result

        return sync_wrapper

    return decorator
