"""Utility to load the emitter configuration file."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, MutableMapping, Optional

import yaml
from pydantic import ValidationError

from .config_schema import EmitterConfig


class EmitterConfigLoader:
    """Load and cache the emitter configuration file."""

    def __init__(self, config_path: str | Path) -> None:
        self._path = Path(config_path)
        self._lock = threading.RLock()
        self._cached_config: Optional[EmitterConfig] = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, use_cache: bool = True) -> EmitterConfig:
        with self._lock:
            if use_cache and self._cached_config is not None:
                return self._cached_config.model_copy(deep=True)

            if not self._path.exists():
                raise FileNotFoundError(
                    f"Emitter configuration file '{self._path}' does not exist"
                )

            raw_config = self._read_yaml()
            try:
                config = EmitterConfig.model_validate(raw_config)
            except ValidationError as exc:
                raise ValueError(f"Invalid emitter configuration in '{self._path}'") from exc
            self._cached_config = config
            return config.model_copy(deep=True)

    def refresh(self) -> EmitterConfig:
        return self.load(use_cache=False)

    def _read_yaml(self) -> MutableMapping[str, Any]:
        with self._path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
            if not isinstance(data, MutableMapping):
                raise ValueError("Emitter configuration must be a YAML mapping")
            return dict(data)
