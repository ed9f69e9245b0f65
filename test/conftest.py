import pytest

from eventemitter import runtime
from eventemitter.core import descriptor
from eventemitter.settings import get_settings


@pytest.fixture(autouse=True)
def isolated_runtime(monkeypatch):
    """Give every test an empty composite registry and the default native event factory."""
    for variable in ("EVENT_EMITTER_MAX_LISTENERS", "EVENT_EMITTER_AGGREGATE", "EVENT_EMITTER_CONFIG_PATH"):
        monkeypatch.delenv(variable, raising=False)
    get_settings.cache_clear()
    descriptor.clear()
    runtime.reset_event_factory()
    runtime.set_config(None)

    yield

    descriptor.clear()
    runtime.reset_event_factory()
    runtime.set_config(None)
    get_settings.cache_clear()
