"""Player facet: the ``org.mpris.MediaPlayer2.Player`` interface.

The facet does not drive playback.  Method calls become observer events and
the application answers them by updating ``PlaybackStatus``, ``Metadata`` and
friends.  What the facet does enforce is that the two status properties only
ever hold values from their closed sets, and that positions are integers.
"""

from __future__ import annotations

import math
import numbers
from typing import Any

import dbus

from mprisbridge.core.errors import (
    InvalidLoopStatusError,
    InvalidPlaybackStatusError,
    InvalidPositionError,
)
from mprisbridge.core.events import OpenRequest, PlayerEvent, PositionRequest
from mprisbridge.mpris_ref.constants import (
    ACCESS_READWRITE,
    LOOP_STATUSES,
    LOOP_STATUS_NONE,
    PLAYBACK_STATUSES,
    PLAYBACK_STATUS_STOPPED,
    PLAYER_INTERFACE,
)
from mprisbridge.mpris_ref.utils import metadata_to_dbus, metadata_to_python

from .interface import MprisInterface

__all__ = ["PlayerInterface", "floor_position"]

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1

_CAPABILITIES = ("CanGoNext", "CanGoPrevious", "CanPlay", "CanPause", "CanSeek", "CanControl")


def _check_loop_status(value: Any) -> None:
    if value not in LOOP_STATUSES:
        raise InvalidLoopStatusError(value)


def _check_playback_status(value: Any) -> None:
    if value not in PLAYBACK_STATUSES:
        raise InvalidPlaybackStatusError(value)


def floor_position(value: Any) -> int:
    """Floor a microsecond position to an int64.

    None counts as 0.  Anything that is not a finite real number in the int64
    range raises InvalidPositionError.
    """
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidPositionError(value)
    try:
        position = int(math.floor(value))
    except (ValueError, OverflowError):
        raise InvalidPositionError(value)
    if not _INT64_MIN <= position <= _INT64_MAX:
        raise InvalidPositionError(value)
    return position


class PlayerInterface(MprisInterface):
    """Playback state, capabilities and transport controls."""

    INTERFACE = PLAYER_INTERFACE

    def __init__(self, player):
        super().__init__(player)
        self.declare("PlaybackStatus", "s", PLAYBACK_STATUS_STOPPED, validate=_check_playback_status)
        self.declare("LoopStatus", "s", LOOP_STATUS_NONE, access=ACCESS_READWRITE,
                     validate=_check_loop_status, event=PlayerEvent.LOOP_STATUS)
        self.declare("Rate", "d", 1.0, access=ACCESS_READWRITE, event=PlayerEvent.RATE)
        self.declare("Shuffle", "b", False, access=ACCESS_READWRITE, event=PlayerEvent.SHUFFLE)
        self.declare("Metadata", "a{sv}", {}, encode=metadata_to_dbus, decode=metadata_to_python)
        self.declare("Volume", "d", 0.0, access=ACCESS_READWRITE, event=PlayerEvent.VOLUME)
        self.declare("Position", "x", compute=self._compute_position)
        self.declare("MinimumRate", "d", 1.0)
        self.declare("MaximumRate", "d", 1.0)
        for name in _CAPABILITIES:
            self.declare(name, "b", True)

    def _compute_position(self) -> dbus.Int64:
        return dbus.Int64(floor_position(self.player.get_position()))

    # Transport methods

    def Next(self) -> None:
        self.player.emit(PlayerEvent.NEXT)

    def Previous(self) -> None:
        self.player.emit(PlayerEvent.PREVIOUS)

    def Pause(self) -> None:
        self.player.emit(PlayerEvent.PAUSE)

    def PlayPause(self) -> None:
        self.player.emit(PlayerEvent.PLAY_PAUSE)

    def Stop(self) -> None:
        self.player.emit(PlayerEvent.STOP)

    def Play(self) -> None:
        self.player.emit(PlayerEvent.PLAY)

    def Seek(self, offset: int) -> None:
        # offset may be negative
        self.player.emit(PlayerEvent.SEEK, int(offset))

    def SetPosition(self, track_id: str, position: int) -> None:
        self.player.emit(PlayerEvent.POSITION, PositionRequest(str(track_id), int(position)))

    def OpenUri(self, uri: str) -> None:
        self.player.emit(PlayerEvent.OPEN, OpenRequest(str(uri)))

    # Signals

    def Seeked(self, position: Any) -> int:
        """Announce a position jump; returns the floored position that was sent."""
        position = floor_position(position)
        self.emit_signal("Seeked", dbus.Int64(position))
        return position
