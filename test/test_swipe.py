import pytest

from eventemitter import EventEmitter, EventTarget, NativeEvent, get_event_descriptor, runtime
from eventemitter.composites import install, swipe
from eventemitter.composites.swipe import swipe_direction


@pytest.fixture
def touch_surface():
    install()
    runtime.set_event_factory(NativeEvent)
    target = EventTarget()
    return target, EventEmitter(target)


def _drag(emitter, start, end):
    emitter.emit("touchstart", {"x": start[0], "y": start[1]})
    emitter.emit("touchend", {"x": end[0], "y": end[1]})


def test_install_registers_swipe():
    install()

    assert get_event_descriptor("swipe") is swipe


def test_swipe_is_synthesised_from_touch_events(touch_surface):
    _, emitter = touch_surface
    received: list[NativeEvent] = []
    emitter.on("swipe", received.append)

    _drag(emitter, (10, 10), (100, 20))

    assert len(received) == 1
    assert received[0].type == "swipe"
    assert received[0].direction == "right"
    assert received[0].data == {"direction": "right", "dx": 90.0, "dy": 10.0}


def test_short_drag_is_not_a_swipe(touch_surface):
    _, emitter = touch_surface
    received: list[NativeEvent] = []
    emitter.on("swipe", received.append)

    _drag(emitter, (10, 10), (30, 20))

    assert received == []


def test_touch_hooks_live_as_long_as_swipe_listeners(touch_surface):
    _, emitter = touch_surface
    first, second = [], []
    emitter.on("swipe", first.append)
    emitter.on("swipe", second.append)
    tracker = swipe.tracker_for(emitter)
    assert tracker is not None and tracker.listeners == 2

    emitter.off("swipe", first.append)
    assert swipe.tracker_for(emitter) is tracker

    emitter.off("swipe", second.append)
    assert swipe.tracker_for(emitter) is None

    _drag(emitter, (0, 0), (0, -200))
    assert first == [] and second == []


def test_removing_all_swipe_listeners_unhooks(touch_surface):
    _, emitter = touch_surface
    emitter.on("swipe", print)
    emitter.on("swipe", repr)

    emitter.off("swipe")

    assert swipe.tracker_for(emitter) is None


def test_removing_unknown_listener_keeps_hooks(touch_surface):
    _, emitter = touch_surface
    emitter.on("swipe", print)

    emitter.off("swipe", repr)

    assert swipe.tracker_for(emitter).listeners == 1


@pytest.mark.parametrize(
    "dx, dy, expected",
    [
        (80, 10, "right"),
        (-80, 10, "left"),
        (5, 90, "down"),
        (5, -90, "up"),
        (20, 20, None),
    ],
)
def test_swipe_direction(dx, dy, expected):
    assert swipe_direction(dx, dy, 50) == expected
