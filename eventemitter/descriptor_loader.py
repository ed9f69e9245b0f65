"""Discovery and import of composite event modules."""

from __future__ import annotations

import importlib.util
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Iterable, List, Optional

from .core.exceptions import DescriptorLoadError, DescriptorSource

logger = logging.getLogger(__name__)

DESCRIPTOR_FACTORIES = ("get_descriptors", "create_descriptors")
DESCRIPTOR_ATTRIBUTES = ("DESCRIPTORS", "DESCRIPTOR")


@dataclass(frozen=True, slots=True)
class DescriptorModule:
    """A module candidate found in one of the configured directories."""

    name: str
    base_path: Path
    entrypoint: Path

    @property
    def source(self) -> DescriptorSource:
        return DescriptorSource(name=self.name, path=self.entrypoint)


class DescriptorLoader:
    """Find modules that define composite events and collect their descriptors."""

    def __init__(self, directories: Optional[Iterable[str]] = None) -> None:
        self._directories: List[Path] = []
        self.set_directories(directories or [])

    @property
    def directories(self) -> List[Path]:
        return list(self._directories)

    def set_directories(self, directories: Iterable[str]) -> None:
        self._directories = [Path(directory) for directory in directories]

    def discover(self) -> Dict[str, DescriptorModule]:
        discovered: Dict[str, DescriptorModule] = {}
        for base_dir in self._directories:
            if not base_dir.is_dir():
                logger.debug("Descriptor directory %s does not exist", base_dir)
                continue

            for candidate in sorted(base_dir.iterdir()):
                if candidate.name.startswith(("__", ".")):
                    continue
                module = self._build_module(candidate)
                if module is None:
                    continue

                if module.name in discovered:
                    logger.warning(
                        "Descriptor module '%s' already discovered at %s; skipping %s",
                        module.name,
                        discovered[module.name].entrypoint,
                        module.entrypoint,
                    )
                    continue

                discovered[module.name] = module

        return discovered

    def load_module(self, module: DescriptorModule) -> ModuleType:
        module_name = f"eventemitter_descriptors_{module.name}"
        spec = importlib.util.spec_from_file_location(module_name, module.entrypoint)
        if spec is None or spec.loader is None:
            raise DescriptorLoadError(module.source, "no import spec")

        loaded = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = loaded
        try:
            spec.loader.exec_module(loaded)
        except Exception as exc:
            sys.modules.pop(module_name, None)
            raise DescriptorLoadError(module.source, "import failed", exc) from exc
        return loaded

    def collect(self, module: DescriptorModule) -> List[Any]:
        """Import ``module`` and return the descriptors it exposes."""

        loaded = self.load_module(module)

        for attr in DESCRIPTOR_FACTORIES:
            factory = getattr(loaded, attr, None)
            if callable(factory):
                return _as_list(factory())

        for attr in DESCRIPTOR_ATTRIBUTES:
            value = getattr(loaded, attr, None)
            if value is not None:
                return _as_list(value)

        raise DescriptorLoadError(module.source, "module exposes no descriptors")

    def _build_module(self, candidate: Path) -> Optional[DescriptorModule]:
        if candidate.is_dir():
            entry = candidate / "plugin.py"
            if not entry.exists():
                entry = candidate / "__init__.py"
            if not entry.exists():
                return None
            return DescriptorModule(name=candidate.name, base_path=candidate, entrypoint=entry)

        if candidate.is_file() and candidate.suffix == ".py":
            return DescriptorModule(
                name=candidate.stem,
                base_path=candidate.parent,
                entrypoint=candidate,
            )

        return None


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]
