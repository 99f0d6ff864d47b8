"""Native observer channel for mprisbridge.

Calls arriving from the bus are not applied to player state directly.  They
are turned into :class:`PlayerEvent` notifications; the application decides
what to do and reflects the outcome back through the player's setters.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Union

from mprisbridge.core.errors import InvalidArgumentError
from mprisbridge.core.log import print_and_log, LOG__EVENT, LOG__GENERAL

__all__ = [
    "PlayerEvent",
    "PositionRequest",
    "OpenRequest",
    "AddTrackRequest",
    "EventHub",
]


class PlayerEvent(enum.Enum):
    """Every notification the player raises towards the application."""
    RAISE = "raise"
    QUIT = "quit"
    NEXT = "next"
    PREVIOUS = "previous"
    PAUSE = "pause"
    PLAY_PAUSE = "playpause"
    STOP = "stop"
    PLAY = "play"
    SEEK = "seek"
    POSITION = "position"
    OPEN = "open"
    VOLUME = "volume"
    SHUFFLE = "shuffle"
    RATE = "rate"
    LOOP_STATUS = "loopStatus"
    FULLSCREEN = "fullscreen"
    ACTIVATE_PLAYLIST = "activatePlaylist"
    ADD_TRACK = "addTrack"
    REMOVE_TRACK = "removeTrack"
    GO_TO = "goTo"
    ERROR = "error"


@dataclass(frozen=True)
class PositionRequest:
    """Payload of :attr:`PlayerEvent.POSITION` (``SetPosition`` on the bus)."""
    track_id: str
    position: int


@dataclass(frozen=True)
class OpenRequest:
    """Payload of :attr:`PlayerEvent.OPEN` (``OpenUri`` on the bus)."""
    uri: str


@dataclass(frozen=True)
class AddTrackRequest:
    """Payload of :attr:`PlayerEvent.ADD_TRACK` (``AddTrack`` on the bus)."""
    uri: str
    after_track: str
    set_as_current: bool


EventLike = Union[PlayerEvent, str]


class EventHub:
    """Callback registry keyed by :class:`PlayerEvent`.

    Callbacks run synchronously in registration order.  Exceptions raised by a
    callback propagate to whoever emitted the event, so a failing handler for a
    bus method call turns into an error reply for that call.
    """

    def __init__(self):
        self._callbacks: Dict[PlayerEvent, List[Callable[..., Any]]] = {}

    @staticmethod
    def coerce(event: EventLike) -> PlayerEvent:
        if isinstance(event, PlayerEvent):
            return event
        try:
            return PlayerEvent(event)
        except ValueError:
            raise InvalidArgumentError("event", f"unknown player event {event!r}")

    def register(self, event: EventLike, callback: Callable[..., Any]) -> Callable[..., Any]:
        """Register *callback* for *event* and return it (usable as a decorator)."""
        self._callbacks.setdefault(self.coerce(event), []).append(callback)
        return callback

    def unregister(self, event: EventLike, callback: Callable[..., Any]) -> None:
        callbacks = self._callbacks.get(self.coerce(event), [])
        if callback in callbacks:
            callbacks.remove(callback)

    def listeners(self, event: EventLike) -> List[Callable[..., Any]]:
        return list(self._callbacks.get(self.coerce(event), []))

    def emit(self, event: EventLike, *args: Any) -> bool:
        """Invoke the callbacks for *event*; return True if at least one ran."""
        event = self.coerce(event)
        callbacks = self.listeners(event)
        print_and_log(f"[*] Event {event.value} {args if args else ''}".rstrip(), LOG__EVENT)

        if event is PlayerEvent.ERROR and not callbacks:
            print_and_log(f"[-] Unhandled player error: {args[0] if args else 'unknown'}", LOG__GENERAL)
            return False

        for callback in callbacks:
            callback(*args)
        return bool(callbacks)
