"""Playlists facet: the ``org.mpris.MediaPlayer2.Playlists`` interface."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

import dbus

from mprisbridge.core.events import PlayerEvent
from mprisbridge.mpris_ref.constants import ORDERINGS, ORDERING_ALPHABETICAL, PLAYLISTS_INTERFACE
from mprisbridge.mpris_ref.utils import (
    Playlist,
    active_playlist_to_dbus,
    active_playlist_to_python,
    assert_object_path_valid,
    playlist_to_dbus,
)

from .interface import MprisInterface

__all__ = ["PlaylistsInterface"]


class PlaylistsInterface(MprisInterface):
    """Playlist collection plus the currently active playlist.

    The collection is only ever replaced as a whole by :meth:`set_playlists`.
    """

    INTERFACE = PLAYLISTS_INTERFACE

    def __init__(self, player):
        super().__init__(player)
        self._playlists: List[Playlist] = []
        self.declare("PlaylistCount", "u", 0)
        self.declare("Orderings", "as", list(ORDERINGS))
        self.declare("ActivePlaylist", "(b(oss))", None,
                     encode=active_playlist_to_dbus, decode=active_playlist_to_python)

    @property
    def playlists(self) -> List[Playlist]:
        return list(self._playlists)

    def get_playlist_index(self, playlist_id: str) -> int:
        for i, playlist in enumerate(self._playlists):
            if playlist.id == playlist_id:
                return i
        return -1

    def set_playlists(self, playlists: Iterable[Any]) -> None:
        """Replace the collection, update PlaylistCount and announce every entry."""
        playlists = [Playlist.coerce(p) for p in playlists]
        for playlist in playlists:
            assert_object_path_valid(playlist.id)
        self._playlists = playlists
        self.set("PlaylistCount", len(playlists))
        for playlist in playlists:
            self.PlaylistChanged(playlist)

    def set_active_playlist(self, playlist_id: Optional[str]) -> None:
        """Publish the playlist with *playlist_id* as active, or no active playlist if unknown."""
        index = self.get_playlist_index(playlist_id) if playlist_id else -1
        self.set("ActivePlaylist", self._playlists[index] if index >= 0 else None)

    # Bus methods

    def ActivatePlaylist(self, playlist_id: str) -> None:
        self.player.emit(PlayerEvent.ACTIVATE_PLAYLIST, str(playlist_id))

    def GetPlaylists(self, index: int, max_count: int, order: str, reverse_order: bool) -> dbus.Array:
        playlists = list(self._playlists)
        if order == ORDERING_ALPHABETICAL:
            # sorted() is stable: equal names keep their collection order
            playlists = sorted(playlists, key=lambda p: p.name)
        start = int(index)
        window = playlists[start:start + int(max_count)]
        if reverse_order:
            window.reverse()
        return dbus.Array([playlist_to_dbus(p) for p in window], signature="(oss)")

    # Signals

    def PlaylistChanged(self, playlist: Any) -> dbus.Struct:
        wire = playlist_to_dbus(playlist)
        self.emit_signal("PlaylistChanged", wire)
        return wire
