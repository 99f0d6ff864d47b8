"""
MPRIS value conversion utilities.

Native values are plain Python objects (str, bool, int/float, lists, dicts).
The wire side uses dbus-python's typed wrappers so every value carries the
exact signature the MPRIS interface declares for it.  Free-form metadata maps
have no declared per-entry type, so the signature of each entry is guessed
from the key and the shape of the value.
"""

import math
import numbers
import re
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple

import dbus

from . import constants
from mprisbridge.core.errors import InvalidArgumentError, InvalidObjectPathError
from mprisbridge.core.log import logging__debug_log

__all__ = [
    "Playlist",
    "active_playlist_to_dbus",
    "active_playlist_to_python",
    "assert_bus_name_valid",
    "assert_object_path_valid",
    "dbus_to_python",
    "encode_metadata_entry",
    "escape_path_element",
    "guess_metadata_signature",
    "is_object_path_valid",
    "matches_signature",
    "metadata_to_dbus",
    "metadata_to_python",
    "object_path",
    "playlist_to_dbus",
    "playlist_to_python",
    "to_wire",
    "tracks_to_dbus",
]

_OBJECT_PATH_RX = re.compile(r"^/(?:[A-Za-z0-9_]+(?:/[A-Za-z0-9_]+)*)?$")
_BUS_NAME_ELEMENT_RX = re.compile(r"^[A-Za-z_-][A-Za-z0-9_-]*$")
_BUS_NAME_MAX_LEN = 255


class Playlist(NamedTuple):
    """A playlist entry as advertised on the Playlists interface."""

    id: str
    name: str
    icon: str = ""

    @classmethod
    def coerce(cls, value: Any) -> "Playlist":
        """Build a Playlist from a Playlist, an ``Id``/``Name``/``Icon`` mapping or a triple."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            playlist_id = value.get("Id", value.get("id"))
            if playlist_id is None:
                raise InvalidArgumentError("playlist", f"missing Id in {value!r}")
            return cls(
                str(playlist_id),
                str(value.get("Name", value.get("name", ""))),
                str(value.get("Icon", value.get("icon", "")) or ""),
            )
        if isinstance(value, (list, tuple)) and len(value) == 3:
            return cls(str(value[0]), str(value[1]), str(value[2]))
        raise InvalidArgumentError("playlist", f"expected Id/Name/Icon, got {value!r}")


# ---------------------------------------------------------------------------
# Validation & identifiers
# ---------------------------------------------------------------------------

def is_object_path_valid(path: Any) -> bool:
    return isinstance(path, str) and bool(_OBJECT_PATH_RX.match(path))


def assert_object_path_valid(path: Any) -> str:
    """Return *path* unchanged or raise InvalidObjectPathError."""
    if not is_object_path_valid(path):
        raise InvalidObjectPathError(path)
    return str(path)


def assert_bus_name_valid(name: Any) -> str:
    """Validate a well-known bus name (e.g. ``org.mpris.MediaPlayer2.vlc``)."""
    if not isinstance(name, str) or not name:
        raise InvalidArgumentError("bus name", f"{name!r} is not a string")
    if len(name) > _BUS_NAME_MAX_LEN:
        raise InvalidArgumentError(name, "bus name longer than 255 characters")
    elements = name.split(".")
    if len(elements) < 2:
        raise InvalidArgumentError(name, "bus name needs at least two elements")
    for element in elements:
        if not _BUS_NAME_ELEMENT_RX.match(element):
            raise InvalidArgumentError(name, f"invalid bus name element {element!r}")
    return name


def escape_path_element(text: str) -> str:
    """Escape *text* into a single object-path element.

    ASCII letters and digits are kept, every other byte of the UTF-8 encoding
    becomes ``_xx``.  Distinct inputs give distinct elements.
    """
    escaped = []
    for byte in str(text).encode("utf-8"):
        char = chr(byte)
        if char.isascii() and char.isalnum():
            escaped.append(char)
        else:
            escaped.append("_%02x" % byte)
    return "".join(escaped)


def object_path(name: str, subpath: Optional[str] = None) -> str:
    """Return a valid object path under the mprisbridge root, suitable for use as an id.

    *subpath* may contain ``/`` separators; each element is escaped on its own
    and empty elements are dropped.
    """
    elements = [escape_path_element(name)] if name else []
    if subpath:
        elements.extend(escape_path_element(e) for e in str(subpath).split("/") if e)
    return constants.OBJECT_PATH_ROOT + "".join("/" + e for e in elements)


# ---------------------------------------------------------------------------
# Generic conversion
# ---------------------------------------------------------------------------

def dbus_to_python(data: Any) -> Any:
    """Strip dbus-python type wrappers, recursively."""
    if isinstance(data, dbus.Boolean):
        return bool(data)
    if isinstance(data, (dbus.String, dbus.ObjectPath, dbus.Signature)):
        return str(data)
    if isinstance(data, (dbus.Byte, dbus.Int16, dbus.UInt16, dbus.Int32,
                         dbus.UInt32, dbus.Int64, dbus.UInt64)):
        return int(data)
    if isinstance(data, dbus.Double):
        return float(data)
    if isinstance(data, dbus.Struct):
        return tuple(dbus_to_python(value) for value in data)
    if isinstance(data, dbus.Array):
        return [dbus_to_python(value) for value in data]
    if isinstance(data, dbus.Dictionary):
        return {dbus_to_python(k): dbus_to_python(v) for k, v in data.items()}
    return data


def _strings(value: Any, what: str) -> List[str]:
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise InvalidArgumentError(what, f"expected a list of strings, got {value!r}")
    items = list(value)
    if not all(isinstance(v, str) for v in items):
        raise InvalidArgumentError(what, f"expected a list of strings, got {value!r}")
    return items


_SIMPLE_WIRE_TYPES = {
    "b": dbus.Boolean,
    "s": dbus.String,
    "d": dbus.Double,
    "x": dbus.Int64,
    "u": dbus.UInt32,
}


def matches_signature(signature: str, value: Any) -> bool:
    """True if *value* already carries the dbus-python type for a scalar *signature*.

    Container signatures are not checked here.
    """
    if signature == "o":
        return isinstance(value, dbus.ObjectPath)
    wire_type = _SIMPLE_WIRE_TYPES.get(signature)
    if wire_type is None:
        return True
    return isinstance(value, wire_type)


def to_wire(signature: str, value: Any) -> Any:
    """Wrap a native scalar or string list into the dbus-python type for *signature*."""
    if signature == "o":
        return dbus.ObjectPath(assert_object_path_valid(value))
    if signature == "as":
        return dbus.Array([dbus.String(v) for v in _strings(value, "as")], signature="s")
    if signature == "ao":
        paths = [dbus.ObjectPath(assert_object_path_valid(v)) for v in _strings(value, "ao")]
        return dbus.Array(paths, signature="o")
    factory = _SIMPLE_WIRE_TYPES.get(signature)
    if factory is None:
        raise InvalidArgumentError(signature, "no default conversion for this signature")
    try:
        return factory(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidArgumentError(signature, f"cannot convert {value!r}: {e}")


# ---------------------------------------------------------------------------
# Metadata maps (a{sv})
# ---------------------------------------------------------------------------

def guess_metadata_signature(key: str, value: Any) -> Optional[str]:
    """Pick the variant signature for one metadata entry, or None if it cannot be encoded."""
    if key == constants.METADATA_TRACKID:
        return "o"
    if key == constants.METADATA_LENGTH:
        return "x"
    if isinstance(value, str):
        return "s"
    # dbus.Boolean subclasses int, so test it before the numeric check
    if isinstance(value, (bool, dbus.Boolean)):
        return "b"
    if isinstance(value, numbers.Real):
        return "d"
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return "as"
    return None


def _encode_length(value: Any) -> Optional[Any]:
    if isinstance(value, (bool, dbus.Boolean)) or not isinstance(value, numbers.Real):
        return None
    if not math.isfinite(value):
        return None
    return dbus.Int64(int(value))


def _encode_trackid(value: Any) -> Any:
    return dbus.ObjectPath(assert_object_path_valid(value))


_METADATA_ENCODERS = {
    "o": _encode_trackid,
    "x": _encode_length,
    "s": dbus.String,
    "b": dbus.Boolean,
    "d": lambda v: dbus.Double(float(v)),
    "as": lambda v: dbus.Array([dbus.String(s) for s in v], signature="s"),
}


def encode_metadata_entry(key: str, value: Any) -> Optional[Tuple[Any, str]]:
    """Encode one metadata entry as ``(wire_value, signature)``.

    Returns None for entries that have no MPRIS representation (absent values,
    nested structures, mixed lists, non-numeric lengths); callers drop those.
    A track id that is not a valid object path raises InvalidObjectPathError.
    """
    if value is None:
        return None
    signature = guess_metadata_signature(key, value)
    if signature is None:
        return None
    wire = _METADATA_ENCODERS[signature](value)
    if wire is None:
        return None
    return wire, signature


def metadata_to_dbus(metadata: Optional[Mapping[str, Any]]) -> dbus.Dictionary:
    """Encode a native metadata mapping into an ``a{sv}`` dictionary."""
    wire = dbus.Dictionary({}, signature="sv")
    for key, value in (metadata or {}).items():
        encoded = encode_metadata_entry(key, value)
        if encoded is None:
            logging__debug_log(f"[*] Dropping metadata entry {key!r}: no wire type for {value!r}")
            continue
        wire[dbus.String(key)] = encoded[0]
    return wire


def metadata_to_python(wire: Optional[Mapping[Any, Any]]) -> Dict[str, Any]:
    """Decode an ``a{sv}`` dictionary back to plain values, skipping absent entries."""
    plain: Dict[str, Any] = {}
    for key, value in (wire or {}).items():
        if value is None:
            continue
        plain[str(key)] = dbus_to_python(value)
    return plain


def tracks_to_dbus(tracks: Iterable[Mapping[str, Any]]) -> dbus.Array:
    """Return the ``ao`` list of track ids, skipping tracks without one."""
    ids = [t.get(constants.METADATA_TRACKID) for t in tracks]
    return to_wire("ao", [i for i in ids if i])


# ---------------------------------------------------------------------------
# Playlists ((oss) and (b(oss)))
# ---------------------------------------------------------------------------

def playlist_to_dbus(playlist: Any) -> dbus.Struct:
    """Encode a playlist as an ``(oss)`` struct; None gives the empty sentinel."""
    if not playlist:
        values = constants.EMPTY_PLAYLIST
    else:
        values = Playlist.coerce(playlist)
    return dbus.Struct(
        (
            dbus.ObjectPath(assert_object_path_valid(values[0])),
            dbus.String(values[1]),
            dbus.String(values[2]),
        ),
        signature="oss",
    )


def playlist_to_python(wire: Any) -> Playlist:
    playlist_id, name, icon = wire
    return Playlist(str(playlist_id), str(name), str(icon))


def active_playlist_to_dbus(playlist: Any) -> dbus.Struct:
    """Encode the ``(b(oss))`` ActivePlaylist value; a falsy playlist means no active playlist."""
    return dbus.Struct(
        (dbus.Boolean(bool(playlist)), playlist_to_dbus(playlist or None)),
        signature="b(oss)",
    )


def active_playlist_to_python(wire: Any) -> Optional[Playlist]:
    valid, playlist = wire
    if not valid:
        return None
    return playlist_to_python(playlist)
