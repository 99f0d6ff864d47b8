import os

import dbus
import dbus.bus
import dbus.exceptions
import pytest

from mprisbridge.core.errors import (
    BusRegistrationError,
    InvalidPositionError,
    MPRISError,
    UnknownInterfaceError,
)
from mprisbridge.core.events import PlayerEvent
from mprisbridge.core.player import Player
from mprisbridge.dbuslayer.service import (
    MprisService,
    PlayerObject,
    PlaylistsObject,
    RootObject,
    TrackListObject,
    build_object_class,
    create_player,
)
from mprisbridge.mpris_ref.constants import *


@pytest.fixture
def exported(player):
    """Unexported bus object for the all-facets player."""
    obj = build_object_class(player.facets)(player)
    player.attach(obj)
    return obj


def test_object_class_per_facet_combination():
    full = build_object_class(["root", "player", "trackList", "playlists"])
    assert build_object_class(["playlists", "trackList", "player", "root"]) is full
    assert issubclass(full, (RootObject,))
    assert issubclass(full, PlayerObject)
    assert issubclass(full, TrackListObject)
    assert issubclass(full, PlaylistsObject)

    only_root = build_object_class(["root"])
    assert only_root is not full
    assert not issubclass(only_root, PlayerObject)


def test_properties_get(exported):
    assert exported.Get(PLAYER_INTERFACE, "PlaybackStatus") == "Stopped"
    assert isinstance(exported.Get(PLAYER_INTERFACE, "Position"), dbus.Int64)
    everything = exported.GetAll(ROOT_INTERFACE)
    assert everything["Identity"] == "Test player"
    assert bool(everything["HasTrackList"]) is True


def test_properties_unknown_interface(exported):
    with pytest.raises(UnknownInterfaceError) as info:
        exported.Get("org.example.Nope", "Anything")
    assert info.value._dbus_error_name == DBUS_ERROR_UNKNOWN_INTERFACE


def test_position_error_reaches_caller():
    player = Player(name="p", position_source=lambda: float("nan"))
    obj = build_object_class(player.facets)(player)
    with pytest.raises(InvalidPositionError):
        obj.Get(PLAYER_INTERFACE, "Position")


def test_properties_set_is_an_event(player, exported, events):
    exported.Set(PLAYER_INTERFACE, "Volume", dbus.Double(0.25))
    assert events.of(PlayerEvent.VOLUME) == [(0.25,)]
    assert player.volume == 0.0


def test_methods_delegate_to_facets(player, exported, events):
    exported.PlayPause()
    exported.Raise()
    exported.GoTo(dbus.ObjectPath(player.object_path("track/0")))
    exported.ActivatePlaylist(dbus.ObjectPath(player.object_path("playlist/0")))

    assert [e for e, _ in events.calls] == [
        PlayerEvent.PLAY_PAUSE,
        PlayerEvent.RAISE,
        PlayerEvent.GO_TO,
        PlayerEvent.ACTIVATE_PLAYLIST,
    ]


def test_get_playlists_through_object(player, exported):
    player.set_playlists([("/p/z", "Z", ""), ("/p/a", "A", "")])
    result = exported.GetPlaylists(dbus.UInt32(0), dbus.UInt32(5), dbus.String("Alphabetical"), dbus.Boolean(False))
    assert [str(p[1]) for p in result] == ["A", "Z"]


def test_disabled_facet_method():
    player = Player(name="p", supported_interfaces=[])
    obj = build_object_class(["root", "player"])(player)
    with pytest.raises(MPRISError):
        obj.Play()


def test_emit_signal_checks_interface(exported):
    with pytest.raises(MPRISError):
        exported.emit_signal(PLAYER_INTERFACE, "TrackAdded", {}, NO_TRACK)
    with pytest.raises(MPRISError):
        exported.emit_signal(PLAYER_INTERFACE, "Exploded")


def test_unexported_object_swallows_emission(player, exported):
    player.playback_status = "Playing"
    assert player.seeked(12) == 12


def test_introspection_lists_properties(player, exported, fake_bus):
    xml = exported.Introspect(object_path=MPRIS_PATH, connection=fake_bus)

    assert '<interface name="org.mpris.MediaPlayer2.Player">' in xml
    assert '<method name="Next">' in xml
    assert '<property name="PlaybackStatus" type="s" access="read"/>' in xml
    assert '<property name="LoopStatus" type="s" access="readwrite"/>' in xml
    assert '<property name="Metadata" type="a{sv}" access="read"/>' in xml
    assert '<property name="ActivePlaylist" type="(b(oss))" access="read"/>' in xml
    assert '<property name="Tracks" type="ao" access="read"/>' in xml
    assert '<property name="Fullscreen" type="b" access="readwrite"/>' in xml
    assert '<property name="Position" type="x" access="read">' in xml
    assert EMITS_CHANGED_SIGNAL_ANNOTATION in xml
    assert xml.count("<property ") == sum(len(f.attributes) for f in player.interfaces.values())


# ---------------------------------------------------------------------------
# MprisService
# ---------------------------------------------------------------------------

def test_publish(player, fake_bus):
    service = MprisService(player, bus=fake_bus)

    assert service.publish() is True

    assert service.published
    assert service.bus_name == "org.mpris.MediaPlayer2.test"
    assert fake_bus.requested == [("org.mpris.MediaPlayer2.test", dbus.bus.NAME_FLAG_DO_NOT_QUEUE)]
    assert MPRIS_PATH in fake_bus.registered
    assert fake_bus.exit_on_disconnect is False
    assert player.emitter is service.object


def test_published_changes_reach_the_bus(player, fake_bus):
    MprisService(player, bus=fake_bus).publish()

    player.playback_status = "Playing"
    player.seeked(-5.7)

    (interface, changed, invalidated), = fake_bus.sent("PropertiesChanged")
    assert interface == PLAYER_INTERFACE
    assert changed == {"PlaybackStatus": "Playing"}
    assert invalidated == []
    assert fake_bus.sent("Seeked") == [[-6]]


def test_published_tracklist_signal(player, fake_bus, track_factory):
    MprisService(player, bus=fake_bus).publish()

    player.tracks = [track_factory(0)]

    (ids, current), = fake_bus.sent("TrackListReplaced")
    assert list(ids) == [track_factory(0)["mpris:trackid"]]
    assert current == NO_TRACK


def test_name_taken_falls_back_to_instance_name(player, bus_factory):
    bus = bus_factory(replies=[dbus.bus.REQUEST_NAME_REPLY_EXISTS, dbus.bus.REQUEST_NAME_REPLY_PRIMARY_OWNER])
    service = MprisService(player, bus=bus)

    assert service.publish() is True

    expected = f"org.mpris.MediaPlayer2.test.instance{os.getpid()}"
    assert service.bus_name == expected
    assert [name for name, _ in bus.requested] == ["org.mpris.MediaPlayer2.test", expected]


def test_name_fallback_failure_is_one_error_event(player, bus_factory, events):
    bus = bus_factory(replies=[dbus.bus.REQUEST_NAME_REPLY_EXISTS, dbus.bus.REQUEST_NAME_REPLY_EXISTS])
    service = MprisService(player, bus=bus)

    assert service.publish() is False

    assert len(bus.requested) == 2
    (error,), = events.of(PlayerEvent.ERROR)
    assert isinstance(error, BusRegistrationError)
    assert error.code == RESULT_ERR_NOT_CONNECTED
    assert not service.published


def test_bus_error_is_mapped(player, bus_factory, events):
    failure = dbus.exceptions.DBusException("denied", name="org.freedesktop.DBus.Error.AccessDenied")
    service = MprisService(player, bus=bus_factory(request_error=failure))

    assert service.publish() is False

    (error,), = events.of(PlayerEvent.ERROR)
    assert isinstance(error, BusRegistrationError)
    assert "AccessDenied" in str(error)


def test_disconnect_is_reported_once(player, fake_bus, events):
    service = MprisService(player, bus=fake_bus)
    service.publish()

    fake_bus.disconnect()
    fake_bus.disconnect()

    (error,), = events.of(PlayerEvent.ERROR)
    assert error.code == RESULT_ERR_NOT_CONNECTED
    assert not player.attached
    assert not service.published


def test_unpublish(player, fake_bus):
    service = MprisService(player, bus=fake_bus)
    service.publish()

    service.unpublish()

    assert fake_bus.released == ["org.mpris.MediaPlayer2.test"]
    assert MPRIS_PATH not in fake_bus.registered
    assert not player.attached
    assert service.object is None


def test_create_player(fake_bus):
    player, service = create_player(bus=fake_bus, name="made", supported_interfaces=["player", "trackList"])

    assert player.facets == ("root", "player", "trackList")
    assert service.bus_name == "org.mpris.MediaPlayer2.made"
    assert isinstance(service.object, TrackListObject)
