"""
Environment settings for the event emitter
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.aggregation import Aggregation

DEFAULT_MAX_LISTENERS = 1024


class EmitterSettings(BaseSettings):
    """Defaults applied to emitters that do not override them"""

    model_config = SettingsConfigDict(
        env_prefix="EVENT_EMITTER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Soft cap per event name, exceeding it only logs a warning
    max_listeners: int = Field(default=DEFAULT_MAX_LISTENERS, ge=1)
    aggregate: Aggregation = Field(default=Aggregation.STOP_FLAG)

    # Logging
    log_level: str = Field(default="WARNING")

    # YAML configuration used by runtime.bootstrap()
    config_path: Optional[str] = Field(default=None)


@lru_cache()
def get_settings() -> EmitterSettings:
    """Get cached emitter settings instance"""
    return EmitterSettings()
