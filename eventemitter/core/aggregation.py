"""Result aggregation modes shared by the emitter and its configuration."""

from __future__ import annotations

from enum import Enum


class Aggregation(str, Enum):
    """What ``emit`` and ``emit_parallel`` report back to the caller."""

    STOP_FLAG = "stop_flag"
    RESULTS = "results"

