"""
Typed attribute store shared by the four MPRIS facets.

Each facet declares its properties as :class:`Attribute` slots with a fixed
D-Bus signature.  The native side writes plain Python values through
:meth:`MprisInterface.set`, which converts them to dbus-python typed values,
stores the result as the authoritative wire value and emits
``PropertiesChanged``.  Writes arriving from the bus never touch the store;
they are handed to the application as :class:`PlayerEvent` notifications.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import dbus

from mprisbridge.core.errors import InvalidArgumentError, PropertyReadOnlyError, UnknownPropertyError
from mprisbridge.core.events import PlayerEvent
from mprisbridge.core.log import print_and_log, LOG__DEBUG
from mprisbridge.mpris_ref.constants import ACCESS_READ, ACCESS_READWRITE
from mprisbridge.mpris_ref.utils import dbus_to_python, matches_signature, to_wire

__all__ = ["Attribute", "MprisInterface", "NullEmitter"]


@dataclass
class Attribute:
    """One typed property slot.

    ``value`` always holds the wire (dbus-python typed) representation.
    Attributes with a ``compute`` callable are derived: they are evaluated on
    every read, never stored and never announced through PropertiesChanged.
    """
    name: str
    signature: str
    access: str = ACCESS_READ
    value: Any = None
    encode: Optional[Callable[[Any], Any]] = None
    decode: Callable[[Any], Any] = dbus_to_python
    validate: Optional[Callable[[Any], None]] = None
    compute: Optional[Callable[[], Any]] = None
    event: Optional[PlayerEvent] = None

    @property
    def writable(self) -> bool:
        return self.access == ACCESS_READWRITE

    @property
    def computed(self) -> bool:
        return self.compute is not None

    def to_wire(self, native: Any) -> Any:
        if self.encode is not None:
            return self.encode(native)
        return to_wire(self.signature, native)

    def read(self) -> Any:
        if self.compute is not None:
            return self.compute()
        if self.validate is not None:
            self.validate(self.value)
        return self.value


class NullEmitter:
    """Signal sink used while the player is not exported on a bus."""

    def emit_properties_changed(self, interface: str, changed: Mapping[str, Any],
                                invalidated: Iterable[str] = ()) -> None:
        print_and_log(f"[*] Not exported, dropping PropertiesChanged {interface} {list(changed)}", LOG__DEBUG)

    def emit_signal(self, interface: str, name: str, *args: Any) -> None:
        print_and_log(f"[*] Not exported, dropping signal {interface}.{name}", LOG__DEBUG)


class MprisInterface:
    """Base class for the Root, Player, TrackList and Playlists facets.

    *player* is the owning :class:`mprisbridge.core.player.Player`; facets
    use it to raise observer events and to reach the current signal emitter.
    """

    INTERFACE = ""

    def __init__(self, player):
        self.player = player
        self._attributes: Dict[str, Attribute] = {}

    # ------------------------------------------------------------------
    # Declaration -------------------------------------------------------
    # ------------------------------------------------------------------

    def declare(self, name: str, signature: str, default: Any = None, **kwargs: Any) -> Attribute:
        attribute = Attribute(name, signature, **kwargs)
        if not attribute.computed:
            attribute.value = attribute.to_wire(default)
        self._attributes[name] = attribute
        return attribute

    @property
    def attributes(self) -> List[Attribute]:
        return list(self._attributes.values())

    def has_property(self, name: str) -> bool:
        return name in self._attributes

    def attribute(self, name: str) -> Attribute:
        try:
            return self._attributes[name]
        except KeyError:
            raise UnknownPropertyError(self.INTERFACE, name)

    # ------------------------------------------------------------------
    # Wire side ---------------------------------------------------------
    # ------------------------------------------------------------------

    def get_wire(self, name: str) -> Any:
        """Return the typed value a Properties.Get call answers with."""
        return self.attribute(name).read()

    def get_all_wire(self) -> dbus.Dictionary:
        return dbus.Dictionary(
            {a.name: a.read() for a in self._attributes.values()}, signature="sv"
        )

    def set_from_bus(self, name: str, value: Any) -> None:
        """Handle a Properties.Set call.

        The stored value is left alone; the application receives the decoded
        value as an event and is expected to call :meth:`set` if it accepts it.
        """
        attribute = self.attribute(name)
        if not attribute.writable or attribute.event is None:
            raise PropertyReadOnlyError(self.INTERFACE, name)
        if not matches_signature(attribute.signature, value):
            raise InvalidArgumentError(
                f"{self.INTERFACE}.{name}", f"expected signature {attribute.signature!r}, got {type(value).__name__}")
        native = attribute.decode(value)
        if attribute.validate is not None:
            attribute.validate(native)
        print_and_log(f"[*] {self.INTERFACE}.{name} write requested: {native!r}", LOG__DEBUG)
        self.player.emit(attribute.event, native)

    # ------------------------------------------------------------------
    # Native side -------------------------------------------------------
    # ------------------------------------------------------------------

    def get(self, name: str) -> Any:
        """Return the current value of *name* as a plain Python value."""
        attribute = self.attribute(name)
        return attribute.decode(attribute.read())

    def set(self, name: str, value: Any) -> None:
        """Validate, encode and store *value*, then emit PropertiesChanged.

        Every call emits, even when the value did not change.
        """
        attribute = self.attribute(name)
        if attribute.computed:
            raise PropertyReadOnlyError(self.INTERFACE, name)
        wire = attribute.to_wire(value)
        if attribute.validate is not None:
            attribute.validate(wire)
        attribute.value = wire
        self.emit_properties_changed({name: wire})

    # ------------------------------------------------------------------
    # Signals -----------------------------------------------------------
    # ------------------------------------------------------------------

    def emit_properties_changed(self, changed: Mapping[str, Any]) -> None:
        try:
            self.player.emitter.emit_properties_changed(self.INTERFACE, changed, [])
        except Exception as e:
            # State is already committed at this point
            print_and_log(f"[-] PropertiesChanged {list(changed)} on {self.INTERFACE} failed: {e}", LOG__DEBUG)

    def emit_signal(self, name: str, *args: Any) -> None:
        try:
            self.player.emitter.emit_signal(self.INTERFACE, name, *args)
        except Exception as e:
            print_and_log(f"[-] Signal {self.INTERFACE}.{name} failed: {e}", LOG__DEBUG)
