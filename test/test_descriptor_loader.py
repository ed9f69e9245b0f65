import logging
import textwrap

import pytest
import yaml

from eventemitter import DescriptorLoadError, EventEmitter, get_event_descriptor, runtime
from eventemitter.descriptor_loader import DescriptorLoader

DESCRIPTOR_MODULE = textwrap.dedent(
    """
    calls = []


    class TapDescriptor:
        name = ["tap", "double-tap"]

        def add_listener(self, emitter, name, listener, capture):
            calls.append(("add", name))

        def remove_listener(self, emitter, name, listener, capture):
            calls.append(("remove", name))


    def get_descriptors():
        return [TapDescriptor()]
    """
)


def _write_config(path, **values):
    path.write_text(yaml.safe_dump(values), encoding="utf-8")
    return path


def _write_module(directory, name, source, package=False):
    directory.mkdir(parents=True, exist_ok=True)
    if package:
        package_dir = directory / name
        package_dir.mkdir()
        (package_dir / "__init__.py").write_text("", encoding="utf-8")
        (package_dir / "plugin.py").write_text(source, encoding="utf-8")
    else:
        (directory / f"{name}.py").write_text(source, encoding="utf-8")


def test_discover_finds_files_and_packages(tmp_path):
    directory = tmp_path / "composites"
    _write_module(directory, "tap", DESCRIPTOR_MODULE)
    _write_module(directory, "press", "DESCRIPTOR = None\n", package=True)
    (directory / "notes.txt").write_text("ignored", encoding="utf-8")
    (directory / "__init__.py").write_text("", encoding="utf-8")

    discovered = DescriptorLoader([str(directory), str(tmp_path / "missing")]).discover()

    assert sorted(discovered) == ["press", "tap"]
    assert discovered["press"].entrypoint.name == "plugin.py"


def test_first_directory_wins_on_duplicate_names(tmp_path):
    _write_module(tmp_path / "a", "tap", DESCRIPTOR_MODULE)
    _write_module(tmp_path / "b", "tap", DESCRIPTOR_MODULE)

    discovered = DescriptorLoader([str(tmp_path / "a"), str(tmp_path / "b")]).discover()

    assert discovered["tap"].base_path == tmp_path / "a"


def test_collect_accepts_descriptor_attributes(tmp_path):
    source = textwrap.dedent(
        """
        def _noop(*args):
            return None

        DESCRIPTOR = {"name": "hold", "add_listener": _noop, "remove_listener": _noop}
        """
    )
    _write_module(tmp_path, "hold", source)
    loader = DescriptorLoader([str(tmp_path)])

    descriptors = loader.collect(loader.discover()["hold"])

    assert [descriptor["name"] for descriptor in descriptors] == ["hold"]


def test_collect_rejects_modules_without_descriptors(tmp_path):
    _write_module(tmp_path, "empty", "VALUE = 1\n")
    loader = DescriptorLoader([str(tmp_path)])

    with pytest.raises(DescriptorLoadError, match="exposes no descriptors"):
        loader.collect(loader.discover()["empty"])


def test_collect_wraps_import_errors(tmp_path):
    _write_module(tmp_path, "broken", "raise RuntimeError('nope')\n")
    loader = DescriptorLoader([str(tmp_path)])

    with pytest.raises(DescriptorLoadError) as excinfo:
        loader.collect(loader.discover()["broken"])

    assert isinstance(excinfo.value.cause, RuntimeError)


def test_bootstrap_registers_enabled_descriptor_modules(tmp_path):
    directory = tmp_path / "composites"
    _write_module(directory, "tap", DESCRIPTOR_MODULE)
    _write_module(directory, "disabled", "raise RuntimeError('must not be imported')\n")
    config_path = _write_config(
        tmp_path / "emitter.yaml",
        max_listeners=8,
        aggregate="results",
        descriptor_directories=[str(directory)],
        disabled_descriptors=["disabled"],
    )

    config = runtime.bootstrap(config_path)

    assert config.max_listeners == 8
    assert get_event_descriptor("tap") is not None
    assert get_event_descriptor("tap") is get_event_descriptor("double-tap")
    assert runtime.get_config_loader().path == config_path

    emitter = EventEmitter()
    assert emitter.max_listeners == 8
    assert emitter.emit("nothing") == []


def test_bootstrap_uses_configured_path(tmp_path, monkeypatch):
    config_path = _write_config(tmp_path / "emitter.yaml", max_listeners=3)
    monkeypatch.setenv("EVENT_EMITTER_CONFIG_PATH", str(config_path))
    from eventemitter.settings import get_settings

    get_settings.cache_clear()

    assert runtime.bootstrap().max_listeners == 3


def test_bootstrap_requires_a_path():
    with pytest.raises(RuntimeError):
        runtime.bootstrap()


def test_bootstrap_skips_modules_that_fail_to_load(tmp_path, caplog):
    directory = tmp_path / "composites"
    _write_module(directory, "broken", "raise RuntimeError('nope')\n")
    _write_module(
        directory,
        "press",
        "DESCRIPTOR = {'name': 'press', 'on': print, 'off': print}\n",
    )
    config_path = _write_config(tmp_path / "emitter.yaml", descriptor_directories=[str(directory)])

    with caplog.at_level(logging.ERROR, logger="eventemitter"):
        runtime.bootstrap(config_path)

    assert get_event_descriptor("press") is not None
    assert runtime.get_config().descriptor_directories == [str(directory)]
    failures = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert len(failures) == 1
    assert "broken" in failures[0].getMessage()
    assert isinstance(failures[0].exc_info[1], DescriptorLoadError)
