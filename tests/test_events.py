import pytest

from mprisbridge.core.errors import InvalidArgumentError, MPRISError
from mprisbridge.core.events import EventHub, PlayerEvent


def test_callbacks_run_in_registration_order():
    hub = EventHub()
    seen = []
    hub.register(PlayerEvent.PLAY, lambda: seen.append("first"))
    hub.register(PlayerEvent.PLAY, lambda: seen.append("second"))

    assert hub.emit(PlayerEvent.PLAY) is True
    assert seen == ["first", "second"]


def test_emit_without_listeners():
    assert EventHub().emit(PlayerEvent.NEXT) is False


@pytest.mark.parametrize("name,event", [
    ("playpause", PlayerEvent.PLAY_PAUSE),
    ("loopStatus", PlayerEvent.LOOP_STATUS),
    ("activatePlaylist", PlayerEvent.ACTIVATE_PLAYLIST),
    ("error", PlayerEvent.ERROR),
])
def test_event_names(name, event):
    assert EventHub.coerce(name) is event


def test_unknown_event_name():
    with pytest.raises(InvalidArgumentError):
        EventHub().register("explode", lambda: None)


def test_string_and_enum_registration_are_equivalent():
    hub = EventHub()
    seen = []
    hub.register("seek", seen.append)
    hub.emit(PlayerEvent.SEEK, -5)
    assert seen == [-5]


def test_unregister():
    hub = EventHub()
    seen = []
    callback = hub.register(PlayerEvent.STOP, lambda: seen.append(1))
    hub.unregister(PlayerEvent.STOP, callback)
    hub.unregister(PlayerEvent.STOP, callback)

    hub.emit(PlayerEvent.STOP)

    assert seen == []
    assert hub.listeners(PlayerEvent.STOP) == []


def test_callback_errors_propagate():
    hub = EventHub()

    def _boom():
        raise MPRISError("handler failed")

    hub.register(PlayerEvent.QUIT, _boom)
    with pytest.raises(MPRISError):
        hub.emit(PlayerEvent.QUIT)


def test_unhandled_error_event_is_not_raised():
    assert EventHub().emit(PlayerEvent.ERROR, MPRISError("bus gone")) is False


def test_player_on_as_decorator(player):
    seen = []

    @player.on(PlayerEvent.VOLUME)
    def _volume(level):
        seen.append(level)

    player.emit("volume", 0.4)
    player.off(PlayerEvent.VOLUME, _volume)
    player.emit("volume", 0.9)

    assert seen == [0.4]
