"""Configuration helpers for the event emitter."""

from .config_loader import EmitterConfigLoader
from .config_schema import EmitterConfig

__all__ = ["EmitterConfigLoader", "EmitterConfig"]
