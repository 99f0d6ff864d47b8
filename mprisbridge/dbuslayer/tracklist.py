"""TrackList facet: the ``org.mpris.MediaPlayer2.TrackList`` interface."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

import dbus

from mprisbridge.core.errors import InvalidArgumentError
from mprisbridge.core.events import AddTrackRequest, PlayerEvent
from mprisbridge.core.log import print_and_log, LOG__DEBUG
from mprisbridge.mpris_ref.constants import METADATA_TRACKID, NO_TRACK, TRACKLIST_INTERFACE
from mprisbridge.mpris_ref.utils import assert_object_path_valid, metadata_to_dbus, tracks_to_dbus

from .interface import MprisInterface

__all__ = ["TrackListInterface"]

Track = Dict[str, Any]


def _track_id(track: Mapping[str, Any]) -> str:
    track_id = track.get(METADATA_TRACKID)
    if not track_id:
        raise InvalidArgumentError("track", f"missing {METADATA_TRACKID}")
    return assert_object_path_valid(track_id)


class TrackListInterface(MprisInterface):
    """Ordered track collection.

    Bus calls that would edit the list only raise events.  The application
    publishes the resulting list through :meth:`set_tracks`, :meth:`add_track`
    or :meth:`remove_track`.
    """

    INTERFACE = TRACKLIST_INTERFACE

    def __init__(self, player):
        super().__init__(player)
        self._tracks: List[Track] = []
        self.declare("Tracks", "ao", [], encode=tracks_to_dbus)
        self.declare("CanEditTracks", "b", False)

    # ------------------------------------------------------------------
    # Native side -------------------------------------------------------
    # ------------------------------------------------------------------

    @property
    def tracks(self) -> List[Track]:
        return list(self._tracks)

    def set(self, name: str, value: Any) -> None:
        if name == "Tracks":
            self.set_tracks(value)
            return
        super().set(name, value)

    def _publish(self, tracks: List[Track]) -> None:
        # Encoding validates every id before anything is stored
        super().set("Tracks", tracks)
        self._tracks = tracks

    def get_track_index(self, track_id: str) -> int:
        for i, track in enumerate(self._tracks):
            if track.get(METADATA_TRACKID) == track_id:
                return i
        return -1

    def get_track(self, track_id: str) -> Optional[Track]:
        index = self.get_track_index(track_id)
        return self._tracks[index] if index >= 0 else None

    def set_tracks(self, tracks: Iterable[Mapping[str, Any]], current_track: Optional[str] = None) -> None:
        """Replace the whole list and emit TrackListReplaced."""
        if current_track is not None:
            assert_object_path_valid(current_track)
        self._publish([dict(t) for t in tracks])
        self.TrackListReplaced(current_track)

    def add_track(self, track: Mapping[str, Any]) -> str:
        """Append *track*, emit TrackAdded and return the after-track id that was sent."""
        _track_id(track)
        tracks = self._tracks + [dict(track)]
        after_track = NO_TRACK
        if len(tracks) > 2:
            after_track = tracks[-2].get(METADATA_TRACKID) or NO_TRACK
        self._publish(tracks)
        self.TrackAdded(track, after_track)
        return after_track

    def remove_track(self, track_id: str) -> bool:
        index = self.get_track_index(track_id)
        if index < 0:
            print_and_log(f"[-] remove_track: {track_id} is not in the track list", LOG__DEBUG)
            return False
        self._publish(self._tracks[:index] + self._tracks[index + 1:])
        self.TrackRemoved(track_id)
        return True

    def update_track(self, track: Mapping[str, Any]) -> bool:
        """Replace the entry with the same id and emit TrackMetadataChanged."""
        track_id = _track_id(track)
        index = self.get_track_index(track_id)
        if index < 0:
            print_and_log(f"[-] update_track: {track_id} is not in the track list", LOG__DEBUG)
            return False
        self._tracks[index] = dict(track)
        self.TrackMetadataChanged(track_id, track)
        return True

    def _current_track_id(self) -> str:
        current = self.player.current_track_id()
        if current and self.get_track_index(current) >= 0:
            return current
        return NO_TRACK

    # ------------------------------------------------------------------
    # Bus methods -------------------------------------------------------
    # ------------------------------------------------------------------

    def GetTracksMetadata(self, track_ids: Iterable[str]) -> dbus.Array:
        # Matched by membership; the result follows track-list order
        wanted = {str(i) for i in track_ids}
        return dbus.Array(
            [metadata_to_dbus(t) for t in self._tracks if t.get(METADATA_TRACKID) in wanted],
            signature="a{sv}",
        )

    def AddTrack(self, uri: str, after_track: str, set_as_current: bool) -> None:
        self.player.emit(PlayerEvent.ADD_TRACK, AddTrackRequest(str(uri), str(after_track), bool(set_as_current)))

    def RemoveTrack(self, track_id: str) -> None:
        self.player.emit(PlayerEvent.REMOVE_TRACK, str(track_id))

    def GoTo(self, track_id: str) -> None:
        self.player.emit(PlayerEvent.GO_TO, str(track_id))

    # ------------------------------------------------------------------
    # Signals -----------------------------------------------------------
    # ------------------------------------------------------------------

    def TrackListReplaced(self, current_track: Optional[str] = None):
        if current_track is None:
            current_track = self._current_track_id()
        tracks = self.attribute("Tracks").value
        current = dbus.ObjectPath(assert_object_path_valid(current_track))
        self.emit_signal("TrackListReplaced", tracks, current)
        return tracks, current

    def TrackAdded(self, metadata: Mapping[str, Any], after_track: str):
        wire = metadata_to_dbus(metadata)
        after = dbus.ObjectPath(assert_object_path_valid(after_track))
        self.emit_signal("TrackAdded", wire, after)
        return wire, after

    def TrackRemoved(self, track_id: str) -> dbus.ObjectPath:
        path = dbus.ObjectPath(assert_object_path_valid(track_id))
        self.emit_signal("TrackRemoved", path)
        return path

    def TrackMetadataChanged(self, track_id: str, metadata: Mapping[str, Any]):
        path = dbus.ObjectPath(assert_object_path_valid(track_id))
        wire = metadata_to_dbus(metadata)
        self.emit_signal("TrackMetadataChanged", path, wire)
        return path, wire
