"""Runtime helpers to access the emitter process singletons."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from .config.config_loader import EmitterConfigLoader
from .config.config_schema import EmitterConfig
from .core.aggregation import Aggregation
from .core.descriptor import register
from .core.exceptions import DescriptorLoadError
from .core.native import EventFactory, NativeEvent
from .descriptor_loader import DescriptorLoader
from .settings import get_settings

logger = logging.getLogger(__name__)

_event_factory: Optional[EventFactory] = NativeEvent
_config_loader: Optional[EmitterConfigLoader] = None
_config: Optional[EmitterConfig] = None


def set_event_factory(factory: Optional[EventFactory]) -> None:
    """Install the factory used to build native events (``None`` disables native emission)."""
    global _event_factory
    _event_factory = factory


def get_event_factory() -> Optional[EventFactory]:
    return _event_factory


def reset_event_factory() -> None:
    """Restore the built-in ``NativeEvent`` factory."""
    set_event_factory(NativeEvent)


def set_config_loader(loader: EmitterConfigLoader) -> None:
    global _config_loader
    _config_loader = loader


def get_config_loader() -> EmitterConfigLoader:
    if _config_loader is None:
        raise RuntimeError("Emitter configuration loader not initialised")
    return _config_loader


def set_config(config: Optional[EmitterConfig]) -> None:
    global _config
    _config = config


def get_config() -> Optional[EmitterConfig]:
    return _config


def default_max_listeners() -> int:
    if _config is not None:
        return _config.max_listeners
    return get_settings().max_listeners


def default_aggregation() -> Aggregation:
    if _config is not None:
        return _config.aggregate
    return get_settings().aggregate


def configure_logging(level: Optional[str] = None) -> None:
    """Apply ``level`` (or the configured one) to the package logger."""

    logging.getLogger("eventemitter").setLevel((level or get_settings().log_level).upper())


def bootstrap(config_path: Optional[str | Path] = None) -> EmitterConfig:
    """Load the configuration file and register the composite events it enables."""

    path = config_path or get_settings().config_path
    if not path:
        raise RuntimeError("No emitter configuration path given and EVENT_EMITTER_CONFIG_PATH is unset")

    loader = EmitterConfigLoader(path)
    config = loader.refresh()
    set_config_loader(loader)
    set_config(config)

    registered = load_descriptors(config)
    logger.info(
        "Emitter runtime bootstrapped from %s (descriptor modules: %s)", loader.path, registered
    )
    return config


def load_descriptors(config: EmitterConfig) -> List[str]:
    """Import the enabled descriptor modules and register what they expose."""

    descriptor_loader = DescriptorLoader(config.descriptor_directories)
    registered: List[str] = []
    for name, module in descriptor_loader.discover().items():
        if not config.is_module_enabled(name):
            logger.debug("Descriptor module '%s' is disabled", name)
            continue

        try:
            descriptors = descriptor_loader.collect(module)
        except DescriptorLoadError:
            logger.exception("Failed to load descriptor module '%s'", name)
            continue

        for descriptor in descriptors:
            register(descriptor)
        registered.append(name)

    return registered
