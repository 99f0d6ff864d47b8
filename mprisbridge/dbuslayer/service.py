"""
MPRIS bus adapter.

dbus-python allows a single exported object per path, while MPRIS spreads the
player over up to four interfaces on ``/org/mpris/MediaPlayer2``.  Each facet
therefore contributes a ``dbus.service.Object`` subclass carrying its
decorated methods and signals, and :func:`build_object_class` combines the
enabled ones into the class that actually gets exported.  The exported object
holds no state; every call is delegated to the facets of the owning
:class:`mprisbridge.core.player.Player`.
"""

from __future__ import annotations

import os
import types
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple
from xml.sax.saxutils import quoteattr

import dbus
import dbus.bus
import dbus.exceptions
import dbus.service

from mprisbridge.core import config
from mprisbridge.core.errors import (
    BusRegistrationError,
    MPRISError,
    map_dbus_error,
)
from mprisbridge.core.events import PlayerEvent
from mprisbridge.core.log import print_and_log, LOG__DEBUG, LOG__GENERAL
from mprisbridge.mpris_ref.constants import *

__all__ = [
    "MprisObjectBase",
    "RootObject",
    "PlayerObject",
    "TrackListObject",
    "PlaylistsObject",
    "MprisService",
    "build_object_class",
    "create_player",
]

_NAME_OK = (
    dbus.bus.REQUEST_NAME_REPLY_PRIMARY_OWNER,
    dbus.bus.REQUEST_NAME_REPLY_ALREADY_OWNER,
)


def _property_xml(facet) -> str:
    lines = []
    for attribute in facet.attributes:
        access = "readwrite" if attribute.writable else "read"
        head = '    <property name=%s type=%s access="%s"' % (
            quoteattr(attribute.name), quoteattr(attribute.signature), access)
        if attribute.computed:
            lines.append(head + ">\n")
            lines.append('      <annotation name="%s" value="false"/>\n' % EMITS_CHANGED_SIGNAL_ANNOTATION)
            lines.append("    </property>\n")
        else:
            lines.append(head + "/>\n")
    return "".join(lines)


class MprisObjectBase(dbus.service.Object):
    """Exported object: Properties, Introspectable and signal emission.

    Parameters
    ----------
    player : Player
        Aggregate whose facets answer every call
    conn : dbus.connection.Connection, optional
        Connection to export on immediately; None leaves the object unexported
    object_path : str, optional
        Path to export at when *conn* is given
    """

    def __init__(self, player, conn=None, object_path=None):
        if conn is not None and object_path is None:
            object_path = MPRIS_PATH
        super().__init__(conn, object_path)
        self.player = player

    def _facet(self, key: str):
        return self.player.facet(key)

    # ------------------------------------------------------------------
    # org.freedesktop.DBus.Properties ----------------------------------
    # ------------------------------------------------------------------

    @dbus.service.method(DBUS_PROPERTIES, in_signature="ss", out_signature="v")
    def Get(self, interface, prop):
        return self.player.interface_by_name(str(interface)).get_wire(str(prop))

    @dbus.service.method(DBUS_PROPERTIES, in_signature="s", out_signature="a{sv}")
    def GetAll(self, interface):
        return self.player.interface_by_name(str(interface)).get_all_wire()

    @dbus.service.method(DBUS_PROPERTIES, in_signature="ssv")
    def Set(self, interface, prop, value):
        self.player.interface_by_name(str(interface)).set_from_bus(str(prop), value)

    @dbus.service.signal(DBUS_PROPERTIES, signature="sa{sv}as")
    def PropertiesChanged(self, interface, changed, invalidated):
        pass

    # ------------------------------------------------------------------
    # Emitter protocol used by the facets ------------------------------
    # ------------------------------------------------------------------

    def emit_properties_changed(self, interface: str, changed: Mapping[str, Any],
                                invalidated: Iterable[str] = ()) -> None:
        self.PropertiesChanged(
            interface,
            dbus.Dictionary(dict(changed), signature="sv"),
            dbus.Array(list(invalidated), signature="s"),
        )

    def emit_signal(self, interface: str, name: str, *args: Any) -> None:
        signal = getattr(self, name, None)
        if (signal is None or not getattr(signal, "_dbus_is_signal", False)
                or signal._dbus_interface != interface):
            raise MPRISError(f"No signal {interface}.{name} on {type(self).__name__}")
        signal(*args)

    # ------------------------------------------------------------------
    # org.freedesktop.DBus.Introspectable ------------------------------
    # ------------------------------------------------------------------

    @dbus.service.method(INTROSPECT_INTERFACE, in_signature="", out_signature="s",
                         path_keyword="object_path", connection_keyword="connection")
    def Introspect(self, object_path, connection):
        xml = dbus.service.Object.Introspect(self, object_path, connection)
        for facet in self.player.interfaces.values():
            marker = '  <interface name="%s">\n' % facet.INTERFACE
            xml = xml.replace(marker, marker + _property_xml(facet), 1)
        return xml


class RootObject(MprisObjectBase):

    @dbus.service.method(ROOT_INTERFACE)
    def Raise(self):
        self._facet(FACET_ROOT).Raise()

    @dbus.service.method(ROOT_INTERFACE)
    def Quit(self):
        self._facet(FACET_ROOT).Quit()


class PlayerObject(MprisObjectBase):

    @dbus.service.method(PLAYER_INTERFACE)
    def Next(self):
        self._facet(FACET_PLAYER).Next()

    @dbus.service.method(PLAYER_INTERFACE)
    def Previous(self):
        self._facet(FACET_PLAYER).Previous()

    @dbus.service.method(PLAYER_INTERFACE)
    def Pause(self):
        self._facet(FACET_PLAYER).Pause()

    @dbus.service.method(PLAYER_INTERFACE)
    def PlayPause(self):
        self._facet(FACET_PLAYER).PlayPause()

    @dbus.service.method(PLAYER_INTERFACE)
    def Stop(self):
        self._facet(FACET_PLAYER).Stop()

    @dbus.service.method(PLAYER_INTERFACE)
    def Play(self):
        self._facet(FACET_PLAYER).Play()

    @dbus.service.method(PLAYER_INTERFACE, in_signature="x")
    def Seek(self, offset):
        self._facet(FACET_PLAYER).Seek(offset)

    @dbus.service.method(PLAYER_INTERFACE, in_signature="ox")
    def SetPosition(self, track_id, position):
        self._facet(FACET_PLAYER).SetPosition(track_id, position)

    @dbus.service.method(PLAYER_INTERFACE, in_signature="s")
    def OpenUri(self, uri):
        self._facet(FACET_PLAYER).OpenUri(uri)

    @dbus.service.signal(PLAYER_INTERFACE, signature="x")
    def Seeked(self, position):
        pass


class TrackListObject(MprisObjectBase):

    @dbus.service.method(TRACKLIST_INTERFACE, in_signature="ao", out_signature="aa{sv}")
    def GetTracksMetadata(self, track_ids):
        return self._facet(FACET_TRACKLIST).GetTracksMetadata(track_ids)

    @dbus.service.method(TRACKLIST_INTERFACE, in_signature="sob")
    def AddTrack(self, uri, after_track, set_as_current):
        self._facet(FACET_TRACKLIST).AddTrack(uri, after_track, set_as_current)

    @dbus.service.method(TRACKLIST_INTERFACE, in_signature="o")
    def RemoveTrack(self, track_id):
        self._facet(FACET_TRACKLIST).RemoveTrack(track_id)

    @dbus.service.method(TRACKLIST_INTERFACE, in_signature="o")
    def GoTo(self, track_id):
        self._facet(FACET_TRACKLIST).GoTo(track_id)

    @dbus.service.signal(TRACKLIST_INTERFACE, signature="aoo")
    def TrackListReplaced(self, tracks, current_track):
        pass

    @dbus.service.signal(TRACKLIST_INTERFACE, signature="a{sv}o")
    def TrackAdded(self, metadata, after_track):
        pass

    @dbus.service.signal(TRACKLIST_INTERFACE, signature="o")
    def TrackRemoved(self, track_id):
        pass

    @dbus.service.signal(TRACKLIST_INTERFACE, signature="oa{sv}")
    def TrackMetadataChanged(self, track_id, metadata):
        pass


class PlaylistsObject(MprisObjectBase):

    @dbus.service.method(PLAYLISTS_INTERFACE, in_signature="o")
    def ActivatePlaylist(self, playlist_id):
        self._facet(FACET_PLAYLISTS).ActivatePlaylist(playlist_id)

    @dbus.service.method(PLAYLISTS_INTERFACE, in_signature="uusb", out_signature="a(oss)")
    def GetPlaylists(self, index, max_count, order, reverse_order):
        return self._facet(FACET_PLAYLISTS).GetPlaylists(index, max_count, str(order), bool(reverse_order))

    @dbus.service.signal(PLAYLISTS_INTERFACE, signature="(oss)")
    def PlaylistChanged(self, playlist):
        pass


_FACET_OBJECTS = {
    FACET_ROOT: RootObject,
    FACET_PLAYER: PlayerObject,
    FACET_TRACKLIST: TrackListObject,
    FACET_PLAYLISTS: PlaylistsObject,
}

_class_cache: Dict[Tuple[str, ...], type] = {}


def build_object_class(facets: Iterable[str]) -> type:
    """Return the exported-object class for a combination of facet keys.

    Classes are cached so that dbus-python's per-class method table is built
    once for every combination.
    """
    key = tuple(f for f in FACET_ORDER if f in set(facets))
    if key not in _class_cache:
        bases = tuple(_FACET_OBJECTS[f] for f in key) or (MprisObjectBase,)
        name = "MprisObject_" + "_".join(key)
        _class_cache[key] = types.new_class(
            name, bases, {}, lambda ns: ns.update({"__module__": __name__})
        )
    return _class_cache[key]


class MprisService:
    """Puts a :class:`Player` on a bus under its well-known MPRIS name.

    Failures are not raised: they reach the application once, as a
    :attr:`PlayerEvent.ERROR` event carrying an :class:`MPRISError`.
    """

    def __init__(self, player, bus=None):
        self.player = player
        self.bus = bus
        self.object = None
        self.bus_name: Optional[str] = None
        self._error_reported = False

    @property
    def published(self) -> bool:
        return self.bus_name is not None

    def publish(self) -> bool:
        """Export the player object and acquire its name; return True on success."""
        try:
            if self.bus is None:
                config.init_mainloop()
                self.bus = dbus.SessionBus()
            self.bus.set_exit_on_disconnect(False)
            self.bus.call_on_disconnection(self._on_disconnected)

            cls = build_object_class(self.player.facets)
            self.object = cls(self.player)
            self.object.add_to_connection(self.bus, MPRIS_PATH)
            self.player.attach(self.object)
            self.bus_name = self._request_name()
        except dbus.exceptions.DBusException as e:
            self._withdraw()
            self._report(map_dbus_error(e, self.player.service_name))
            return False
        except MPRISError as e:
            self._withdraw()
            self._report(e)
            return False

        print_and_log(f"[+] Published {self.bus_name} at {MPRIS_PATH}", LOG__GENERAL)
        return True

    def _request_name(self) -> str:
        name = self.player.service_name
        reply = self.bus.request_name(name, dbus.bus.NAME_FLAG_DO_NOT_QUEUE)
        if reply in _NAME_OK:
            return name

        if reply == dbus.bus.REQUEST_NAME_REPLY_EXISTS:
            fallback = f"{name}.{MPRIS_INSTANCE_SUFFIX}{os.getpid()}"
            print_and_log(f"[*] {name} is taken, trying {fallback}", LOG__DEBUG)
            reply = self.bus.request_name(fallback, dbus.bus.NAME_FLAG_DO_NOT_QUEUE)
            if reply in _NAME_OK:
                return fallback
            name = fallback

        raise BusRegistrationError(name, f"request_name replied {int(reply)}")

    def unpublish(self) -> None:
        """Release the bus name and withdraw the exported object."""
        if self.bus is not None and self.bus_name is not None:
            try:
                self.bus.release_name(self.bus_name)
            except dbus.exceptions.DBusException as e:
                print_and_log(f"[-] Failed to release {self.bus_name}: {e}", LOG__DEBUG)
        self.bus_name = None
        self._withdraw()

    def _withdraw(self) -> None:
        if self.object is not None:
            try:
                self.object.remove_from_connection()
            except LookupError as e:
                print_and_log(f"[-] Object was not exported: {e}", LOG__DEBUG)
        self.player.detach()
        self.object = None

    def _on_disconnected(self, connection) -> None:
        self.bus_name = None
        self.player.detach()
        self._report(MPRISError(f"Bus connection lost for {self.player.service_name}",
                                RESULT_ERR_NOT_CONNECTED))

    def _report(self, error: MPRISError) -> None:
        print_and_log(f"[-] {error}", LOG__DEBUG)
        if self._error_reported:
            return
        self._error_reported = True
        self.player.emit(PlayerEvent.ERROR, error)


def create_player(publish: bool = True, bus=None, **options: Any):
    """Build a :class:`Player` from keyword options and optionally publish it.

    Returns ``(player, service)``.
    """
    from mprisbridge.core.player import Player

    player = Player(**options)
    service = MprisService(player, bus=bus)
    if publish:
        service.publish()
    return player, service
