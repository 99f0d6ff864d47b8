"""
Player aggregate.

A :class:`Player` is the explicit context object an application builds once
and hands to the bus adapter.  It owns the enabled facets, routes native
property access to them and carries the observer channel that bus calls are
turned into::

    player = Player(name="demo", identity="Demo player",
                    supported_interfaces=["player", "trackList"])

    @player.on(PlayerEvent.PLAY)
    def _play():
        backend.play()
        player.playback_status = "Playing"
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from mprisbridge.core.errors import (
    InvalidArgumentError,
    NotSupportedError,
    UnknownInterfaceError,
    UnknownPropertyError,
)
from mprisbridge.core.events import EventHub, EventLike, PlayerEvent
from mprisbridge.core.log import print_and_log, LOG__DEBUG
from mprisbridge.dbuslayer.interface import MprisInterface, NullEmitter
from mprisbridge.dbuslayer.player import PlayerInterface
from mprisbridge.dbuslayer.playlists import PlaylistsInterface
from mprisbridge.dbuslayer.root import RootInterface
from mprisbridge.dbuslayer.tracklist import TrackListInterface
from mprisbridge.mpris_ref import utils
from mprisbridge.mpris_ref.constants import *

__all__ = ["Player"]


def _evented(facet: str, name: str, doc: str = "") -> property:
    """Native accessor for one facet attribute; setting it emits PropertiesChanged."""

    def fget(self):
        return self.facet(facet).get(name)

    def fset(self, value):
        self.facet(facet).set(name, value)

    return property(fget, fset, doc=doc or f"``{name}`` on the {facet} facet.")


class Player:
    """Native side of one MPRIS media player.

    Parameters
    ----------
    name : str
        Bus name suffix, the service is exported as ``org.mpris.MediaPlayer2.<name>``
    identity : str
        Friendly name shown by clients
    desktop_entry : str
        Basename of the application's .desktop file, without the extension
    supported_uri_schemes, supported_mime_types : Iterable[str], optional
        What ``OpenUri`` accepts
    supported_interfaces : Iterable[str]
        Optional facets to enable: ``player``, ``trackList``, ``playlists``.
        The root facet is always present.
    position_source : Callable[[], float], optional
        Returns the current position in microseconds; must not block
    """

    def __init__(self, name: str = "mprisbridge", identity: str = "", desktop_entry: str = "",
                 supported_uri_schemes: Optional[Iterable[str]] = None,
                 supported_mime_types: Optional[Iterable[str]] = None,
                 supported_interfaces: Iterable[str] = (FACET_PLAYER,),
                 position_source: Optional[Callable[[], Any]] = None):
        self.name = name
        self.service_name = utils.assert_bus_name_valid(f"{MPRIS_BUS_NAME_PREFIX}.{name}")

        requested = set(supported_interfaces)
        unknown = requested - set(FACET_ORDER)
        if unknown:
            raise InvalidArgumentError("supported_interfaces", f"unknown facets {sorted(unknown)}")
        self.facets: Tuple[str, ...] = tuple(f for f in FACET_ORDER if f == FACET_ROOT or f in requested)

        self.position_source = position_source
        self.events = EventHub()
        self.emitter = NullEmitter()

        self.interfaces: Dict[str, MprisInterface] = {}
        self.interfaces[FACET_ROOT] = RootInterface(
            self,
            identity=identity,
            desktop_entry=desktop_entry,
            supported_uri_schemes=supported_uri_schemes,
            supported_mime_types=supported_mime_types,
            has_track_list=FACET_TRACKLIST in self.facets,
        )
        if FACET_PLAYER in self.facets:
            self.interfaces[FACET_PLAYER] = PlayerInterface(self)
        if FACET_TRACKLIST in self.facets:
            self.interfaces[FACET_TRACKLIST] = TrackListInterface(self)
        if FACET_PLAYLISTS in self.facets:
            self.interfaces[FACET_PLAYLISTS] = PlaylistsInterface(self)

        print_and_log(f"[*] Player {self.service_name} built with facets {', '.join(self.facets)}", LOG__DEBUG)

    # ------------------------------------------------------------------
    # Observer channel --------------------------------------------------
    # ------------------------------------------------------------------

    def on(self, event: EventLike, callback: Optional[Callable[..., Any]] = None):
        """Register *callback* for *event*; without a callback, act as a decorator."""
        if callback is None:
            return lambda cb: self.events.register(event, cb)
        return self.events.register(event, callback)

    def off(self, event: EventLike, callback: Callable[..., Any]) -> None:
        self.events.unregister(event, callback)

    def emit(self, event: EventLike, *args: Any) -> bool:
        return self.events.emit(event, *args)

    # ------------------------------------------------------------------
    # Bus wiring --------------------------------------------------------
    # ------------------------------------------------------------------

    def attach(self, emitter) -> None:
        """Route change notifications and signals through *emitter* (the exported object)."""
        self.emitter = emitter

    def detach(self) -> None:
        self.emitter = NullEmitter()

    @property
    def attached(self) -> bool:
        return not isinstance(self.emitter, NullEmitter)

    def facet(self, key: str) -> MprisInterface:
        try:
            return self.interfaces[key]
        except KeyError:
            raise NotSupportedError(f"{key} interface is not enabled on {self.service_name}")

    def interface_by_name(self, interface: str) -> MprisInterface:
        for facet in self.interfaces.values():
            if facet.INTERFACE == interface:
                return facet
        raise UnknownInterfaceError(interface)

    # ------------------------------------------------------------------
    # Generic property access ------------------------------------------
    # ------------------------------------------------------------------

    def _owner(self, name: str, interface: Optional[str]) -> MprisInterface:
        if interface is not None:
            return self.interface_by_name(interface)
        for facet in self.interfaces.values():
            if facet.has_property(name):
                return facet
        raise UnknownPropertyError(", ".join(f.INTERFACE for f in self.interfaces.values()), name)

    def get_property(self, name: str, interface: Optional[str] = None) -> Any:
        """Return the native value of the MPRIS property *name* (e.g. ``"PlaybackStatus"``)."""
        return self._owner(name, interface).get(name)

    def set_property(self, name: str, value: Any, interface: Optional[str] = None) -> None:
        self._owner(name, interface).set(name, value)

    # Root
    identity = _evented(FACET_ROOT, "Identity")
    desktop_entry = _evented(FACET_ROOT, "DesktopEntry")
    fullscreen = _evented(FACET_ROOT, "Fullscreen")
    supported_uri_schemes = _evented(FACET_ROOT, "SupportedUriSchemes")
    supported_mime_types = _evented(FACET_ROOT, "SupportedMimeTypes")
    can_quit = _evented(FACET_ROOT, "CanQuit")
    can_raise = _evented(FACET_ROOT, "CanRaise")
    can_set_fullscreen = _evented(FACET_ROOT, "CanSetFullscreen")
    has_track_list = _evented(FACET_ROOT, "HasTrackList")

    # Player
    playback_status = _evented(FACET_PLAYER, "PlaybackStatus", "One of Playing, Paused, Stopped.")
    loop_status = _evented(FACET_PLAYER, "LoopStatus", "One of None, Track, Playlist.")
    rate = _evented(FACET_PLAYER, "Rate")
    shuffle = _evented(FACET_PLAYER, "Shuffle")
    metadata = _evented(FACET_PLAYER, "Metadata", "Metadata of the current track as a plain dict.")
    volume = _evented(FACET_PLAYER, "Volume")
    minimum_rate = _evented(FACET_PLAYER, "MinimumRate")
    maximum_rate = _evented(FACET_PLAYER, "MaximumRate")
    can_control = _evented(FACET_PLAYER, "CanControl")
    can_pause = _evented(FACET_PLAYER, "CanPause")
    can_play = _evented(FACET_PLAYER, "CanPlay")
    can_seek = _evented(FACET_PLAYER, "CanSeek")
    can_go_next = _evented(FACET_PLAYER, "CanGoNext")
    can_go_previous = _evented(FACET_PLAYER, "CanGoPrevious")

    # TrackList
    can_edit_tracks = _evented(FACET_TRACKLIST, "CanEditTracks")

    # Playlists
    playlist_count = _evented(FACET_PLAYLISTS, "PlaylistCount")

    @property
    def active_playlist(self) -> Optional[utils.Playlist]:
        return self.facet(FACET_PLAYLISTS).get("ActivePlaylist")

    @active_playlist.setter
    def active_playlist(self, playlist: Any) -> None:
        """Publish *playlist* (a Playlist, mapping or triple) as active; None clears it."""
        self.facet(FACET_PLAYLISTS).set("ActivePlaylist", playlist)

    # ------------------------------------------------------------------
    # Position ----------------------------------------------------------
    # ------------------------------------------------------------------

    def get_position(self) -> Any:
        """Current position in microseconds, as reported by the position source (0 without one)."""
        if self.position_source is None:
            return 0
        return self.position_source()

    @property
    def position(self) -> int:
        return self.facet(FACET_PLAYER).get("Position")

    def seeked(self, position: Any) -> int:
        """Emit ``Seeked`` with the floored *position*; returns the value sent."""
        return self.facet(FACET_PLAYER).Seeked(position)

    def current_track_id(self) -> Optional[str]:
        player = self.interfaces.get(FACET_PLAYER)
        if player is None:
            return None
        return player.get("Metadata").get(METADATA_TRACKID)

    # ------------------------------------------------------------------
    # Track list --------------------------------------------------------
    # ------------------------------------------------------------------

    @property
    def tracks(self) -> List[Dict[str, Any]]:
        return self.facet(FACET_TRACKLIST).tracks

    @tracks.setter
    def tracks(self, tracks: Iterable[Mapping[str, Any]]) -> None:
        self.set_tracks(tracks)

    def set_tracks(self, tracks: Iterable[Mapping[str, Any]], current_track: Optional[str] = None) -> None:
        self.facet(FACET_TRACKLIST).set_tracks(tracks, current_track)

    def get_track_index(self, track_id: str) -> int:
        return self.facet(FACET_TRACKLIST).get_track_index(track_id)

    def get_track(self, track_id: str) -> Optional[Dict[str, Any]]:
        return self.facet(FACET_TRACKLIST).get_track(track_id)

    def add_track(self, track: Mapping[str, Any]) -> str:
        return self.facet(FACET_TRACKLIST).add_track(track)

    def remove_track(self, track_id: str) -> bool:
        return self.facet(FACET_TRACKLIST).remove_track(track_id)

    def update_track(self, track: Mapping[str, Any]) -> bool:
        return self.facet(FACET_TRACKLIST).update_track(track)

    # ------------------------------------------------------------------
    # Playlists ---------------------------------------------------------
    # ------------------------------------------------------------------

    @property
    def playlists(self) -> List[utils.Playlist]:
        return self.facet(FACET_PLAYLISTS).playlists

    def set_playlists(self, playlists: Iterable[Any]) -> None:
        self.facet(FACET_PLAYLISTS).set_playlists(playlists)

    def get_playlist_index(self, playlist_id: str) -> int:
        return self.facet(FACET_PLAYLISTS).get_playlist_index(playlist_id)

    def set_active_playlist(self, playlist_id: Optional[str]) -> None:
        self.facet(FACET_PLAYLISTS).set_active_playlist(playlist_id)

    # ------------------------------------------------------------------
    # Identifiers -------------------------------------------------------
    # ------------------------------------------------------------------

    def object_path(self, subpath: Optional[str] = None) -> str:
        """Valid object path under this player's root, e.g. ``player.object_path("track/0")``."""
        return utils.object_path(self.name, subpath)

    def __repr__(self) -> str:
        return f"<Player {self.service_name} facets={list(self.facets)}>"
