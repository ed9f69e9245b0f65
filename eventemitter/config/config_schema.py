"""Pydantic models describing the emitter configuration file."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.aggregation import Aggregation
from ..settings import DEFAULT_MAX_LISTENERS


class EmitterConfig(BaseModel):
    """Root configuration model for the event emitter."""

    model_config = ConfigDict(extra="forbid")

    max_listeners: int = Field(default=DEFAULT_MAX_LISTENERS, ge=1)
    aggregate: Aggregation = Aggregation.STOP_FLAG
    descriptor_directories: List[str] = Field(default_factory=list)
    enabled_descriptors: List[str] = Field(default_factory=list)
    disabled_descriptors: List[str] = Field(default_factory=list)

    @field_validator("descriptor_directories", mode="after")
    @classmethod
    def normalise_directories(cls, value: Sequence[str]) -> List[str]:
        return [str(Path(directory)) for directory in value if str(directory).strip()]

    @field_validator("enabled_descriptors", "disabled_descriptors", mode="after")
    @classmethod
    def normalise_module_lists(cls, value: Sequence[str]) -> List[str]:
        seen: set[str] = set()
        ordered: list[str] = []
        for module in value:
            module_name = module.strip()
            if module_name and module_name not in seen:
                seen.add(module_name)
                ordered.append(module_name)
        return ordered

    def is_module_enabled(self, module_name: Optional[str]) -> bool:
        name = (module_name or "").strip()
        if not name:
            return False

        if name in self.disabled_descriptors:
            return False

        if self.enabled_descriptors:
            return name in self.enabled_descriptors

        return True
