"""Root facet: the ``org.mpris.MediaPlayer2`` interface."""

from __future__ import annotations

from typing import Iterable, Optional

from mprisbridge.core.events import PlayerEvent
from mprisbridge.mpris_ref.constants import ACCESS_READWRITE, ROOT_INTERFACE

from .interface import MprisInterface

__all__ = ["RootInterface"]


class RootInterface(MprisInterface):
    """Identity and capabilities of the media player application itself."""

    INTERFACE = ROOT_INTERFACE

    def __init__(self, player, identity: str = "", desktop_entry: str = "",
                 supported_uri_schemes: Optional[Iterable[str]] = None,
                 supported_mime_types: Optional[Iterable[str]] = None,
                 has_track_list: bool = False):
        super().__init__(player)
        self.declare("CanQuit", "b", True)
        self.declare("Fullscreen", "b", False, access=ACCESS_READWRITE, event=PlayerEvent.FULLSCREEN)
        self.declare("CanSetFullscreen", "b", False)
        self.declare("CanRaise", "b", True)
        self.declare("HasTrackList", "b", has_track_list)
        self.declare("Identity", "s", identity)
        self.declare("DesktopEntry", "s", desktop_entry)
        self.declare("SupportedUriSchemes", "as", list(supported_uri_schemes or []))
        self.declare("SupportedMimeTypes", "as", list(supported_mime_types or []))

    def Raise(self) -> None:
        self.player.emit(PlayerEvent.RAISE)

    def Quit(self) -> None:
        self.player.emit(PlayerEvent.QUIT)
