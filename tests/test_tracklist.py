import dbus
import pytest

from mprisbridge.core.errors import InvalidArgumentError, InvalidObjectPathError
from mprisbridge.core.events import AddTrackRequest, PlayerEvent
from mprisbridge.core.player import Player
from mprisbridge.mpris_ref.constants import NO_TRACK, TRACKLIST_INTERFACE


@pytest.fixture
def facet(player):
    return player.facet("trackList")


@pytest.fixture
def two_tracks(player, track_factory, emitter):
    player.tracks = [track_factory(0), track_factory(1)]
    emitter.changes.clear()
    emitter.signals.clear()
    return player.tracks


def test_defaults(player, facet):
    assert player.tracks == []
    assert facet.get("Tracks") == []
    assert player.can_edit_tracks is False


def test_has_track_list_follows_facet(player):
    assert player.has_track_list is True
    assert Player(name="plain").has_track_list is False


def test_set_tracks_publishes_ids_and_replaces(player, track_factory, emitter):
    tracks = [track_factory(0), track_factory(1)]
    player.set_tracks(tracks)

    assert player.tracks == tracks
    assert emitter.changed(TRACKLIST_INTERFACE) == ["Tracks"]
    wire = emitter.changes[-1][1]["Tracks"]
    assert wire.signature == "o"
    assert list(wire) == [t["mpris:trackid"] for t in tracks]

    interface, name, (ids, current) = emitter.signals[-1]
    assert (interface, name) == (TRACKLIST_INTERFACE, "TrackListReplaced")
    assert list(ids) == list(wire)
    assert current == NO_TRACK


def test_replaced_cursor_uses_current_metadata(player, track_factory, emitter):
    tracks = [track_factory(0), track_factory(1)]
    player.metadata = tracks[1]
    player.tracks = tracks
    assert emitter.signals[-1][2][1] == tracks[1]["mpris:trackid"]


def test_replaced_cursor_can_be_explicit(player, track_factory, emitter):
    tracks = [track_factory(0), track_factory(1)]
    player.set_tracks(tracks, current_track=tracks[0]["mpris:trackid"])
    assert emitter.signals[-1][2][1] == tracks[0]["mpris:trackid"]


def test_set_tracks_with_bad_id_leaves_list_alone(player, two_tracks, emitter):
    with pytest.raises(InvalidObjectPathError):
        player.tracks = [{"mpris:trackid": "broken id"}]
    assert player.tracks == two_tracks
    assert emitter.signals == []


def test_set_tracks_with_bad_cursor_publishes_nothing(player, two_tracks, track_factory, emitter):
    with pytest.raises(InvalidObjectPathError):
        player.set_tracks([track_factory(5)], current_track="not a path")
    assert player.tracks == two_tracks
    assert emitter.changes == []
    assert emitter.signals == []


def test_tracks_property_returns_a_copy(player, two_tracks):
    player.tracks.append({"mpris:trackid": "/x"})
    assert len(player.tracks) == 2


def test_get_track_index(player, two_tracks):
    assert player.get_track_index(two_tracks[1]["mpris:trackid"]) == 1
    assert player.get_track_index("/org/mprisbridge/test/track/9") == -1
    assert player.get_track(two_tracks[0]["mpris:trackid"]) == two_tracks[0]
    assert player.get_track("/nope") is None


def test_add_third_track_uses_previous_last_as_cursor(player, two_tracks, track_factory, emitter):
    new = track_factory(2)

    after = player.add_track(new)

    assert after == two_tracks[1]["mpris:trackid"]
    assert len(player.tracks) == 3
    assert emitter.changed(TRACKLIST_INTERFACE) == ["Tracks"]
    interface, name, (metadata, cursor) = emitter.signals[-1]
    assert name == "TrackAdded"
    assert metadata["mpris:trackid"] == new["mpris:trackid"]
    assert cursor == after


@pytest.mark.parametrize("existing", [0, 1])
def test_add_track_to_short_list_uses_no_track(player, track_factory, emitter, existing):
    player.tracks = [track_factory(i) for i in range(existing)]
    assert player.add_track(track_factory(5)) == NO_TRACK
    assert emitter.signals[-1][2][1] == NO_TRACK


def test_add_track_requires_id(player):
    with pytest.raises(InvalidArgumentError):
        player.add_track({"xesam:title": "anonymous"})
    with pytest.raises(InvalidObjectPathError):
        player.add_track({"mpris:trackid": "no/leading/slash"})
    assert player.tracks == []


def test_remove_track(player, two_tracks, emitter):
    removed = two_tracks[0]["mpris:trackid"]

    assert player.remove_track(removed) is True

    assert player.tracks == two_tracks[1:]
    assert emitter.signals[-1] == (TRACKLIST_INTERFACE, "TrackRemoved", (removed,))


def test_remove_unknown_track_is_ignored(player, two_tracks, emitter):
    assert player.remove_track("/org/mprisbridge/test/track/7") is False
    assert player.tracks == two_tracks
    assert emitter.signals == []
    assert emitter.changes == []


def test_update_track(player, two_tracks, emitter):
    changed = dict(two_tracks[1], **{"xesam:title": "Renamed"})

    assert player.update_track(changed) is True

    assert player.get_track(changed["mpris:trackid"])["xesam:title"] == "Renamed"
    interface, name, (track_id, metadata) = emitter.signals[-1]
    assert name == "TrackMetadataChanged"
    assert track_id == changed["mpris:trackid"]
    assert metadata["xesam:title"] == "Renamed"


def test_update_unknown_track(player, two_tracks, track_factory, emitter):
    assert player.update_track(track_factory(8)) is False
    assert emitter.signals == []


def test_get_tracks_metadata_matches_by_membership(facet, two_tracks):
    ids = [two_tracks[1]["mpris:trackid"], "/org/mprisbridge/test/track/42", two_tracks[0]["mpris:trackid"]]

    result = facet.GetTracksMetadata([dbus.ObjectPath(i) for i in ids])

    assert result.signature == "a{sv}"
    assert [m["mpris:trackid"] for m in result] == [t["mpris:trackid"] for t in two_tracks]
    assert all(isinstance(m["mpris:length"], dbus.Int64) for m in result)


def test_add_track_call_is_only_an_event(player, facet, events, two_tracks):
    facet.AddTrack("file:///a.ogg", dbus.ObjectPath(NO_TRACK), dbus.Boolean(True))

    assert events.of(PlayerEvent.ADD_TRACK) == [(AddTrackRequest("file:///a.ogg", NO_TRACK, True),)]
    assert player.tracks == two_tracks


def test_remove_and_goto_calls_are_events(player, facet, events, two_tracks):
    track_id = two_tracks[0]["mpris:trackid"]
    facet.RemoveTrack(dbus.ObjectPath(track_id))
    facet.GoTo(dbus.ObjectPath(track_id))

    assert events.of(PlayerEvent.REMOVE_TRACK) == [(track_id,)]
    assert events.of(PlayerEvent.GO_TO) == [(track_id,)]
    assert player.tracks == two_tracks
