"""
D-Bus layer for mprisbridge.
Provides the four MPRIS facets and the adapter that exports them with dbus-python.
"""

from .interface import Attribute, MprisInterface, NullEmitter
from .root import RootInterface
from .player import PlayerInterface
from .tracklist import TrackListInterface
from .playlists import PlaylistsInterface

__all__ = [
    "Attribute",
    "MprisInterface",
    "NullEmitter",
    "RootInterface",
    "PlayerInterface",
    "TrackListInterface",
    "PlaylistsInterface",
    "MprisService",
    "build_object_class",
    "create_player",
]


# The adapter pulls in dbus.service and the GLib main loop helpers, load it on demand
def __getattr__(name):
    if name in ("MprisService", "build_object_class", "create_player"):
        from . import service
        return getattr(service, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
