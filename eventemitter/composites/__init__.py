"""Composite events shipped with the package."""

from ..core.descriptor import register
from .swipe import SwipeDescriptor, swipe


def install() -> None:
    """Register the built-in composite events."""
    register(swipe)


__all__ = ["SwipeDescriptor", "install", "swipe"]
