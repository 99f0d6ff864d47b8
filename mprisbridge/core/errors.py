"""Core error classes for mprisbridge."""

from __future__ import annotations

from typing import Any, Optional

import dbus.exceptions

from mprisbridge.mpris_ref.constants import *
from mprisbridge.core import log as _core_log


class MPRISError(Exception):
    """Base exception for everything raised by mprisbridge.

    The `.code` attribute carries a RESULT_* value.  `_dbus_error_name` is the
    name dbus-python puts on the error reply when the exception escapes an
    exported method.
    """

    _dbus_error_name = ERROR_FAILED

    def __init__(self, message: str, code: int = RESULT_ERR):
        super().__init__(message)
        self.code = code


class InvalidLoopStatusError(MPRISError):
    """Raised when a loop status outside None/Track/Playlist is stored or requested."""

    _dbus_error_name = ERROR_INVALID_LOOP_STATUS

    def __init__(self, value: Any):
        super().__init__(f"Invalid loop status: {value!r}", RESULT_ERR_WRONG_STATE)
        self.value = value


class InvalidPlaybackStatusError(MPRISError):
    """Raised when a playback status outside Stopped/Paused/Playing is stored."""

    _dbus_error_name = ERROR_INVALID_PLAYBACK_STATUS

    def __init__(self, value: Any):
        super().__init__(f"Invalid playback status: {value!r}", RESULT_ERR_WRONG_STATE)
        self.value = value


class InvalidPositionError(MPRISError):
    """Raised when a position or seek value is not a usable number."""

    _dbus_error_name = ERROR_INVALID_POSITION

    def __init__(self, value: Any):
        super().__init__(f"Invalid position: {value!r}", RESULT_ERR_BAD_ARGS)
        self.value = value


class InvalidObjectPathError(MPRISError):
    """Raised when an identifier is not a valid D-Bus object path."""

    _dbus_error_name = ERROR_INVALID_OBJECT_PATH

    def __init__(self, path: Any):
        super().__init__(f"Invalid object path: {path!r}", RESULT_ERR_BAD_ARGS)
        self.path = path


class InvalidArgumentError(MPRISError):
    """Raised when invalid arguments are provided."""

    _dbus_error_name = DBUS_ERROR_INVALID_ARGS

    def __init__(self, argument: str, reason: Optional[str] = None):
        message = f"Invalid argument: {argument}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, RESULT_ERR_BAD_ARGS)
        self.argument = argument
        self.reason = reason


class UnknownInterfaceError(MPRISError):
    """Raised when a Properties call names an interface the object does not export."""

    _dbus_error_name = DBUS_ERROR_UNKNOWN_INTERFACE

    def __init__(self, interface: str):
        super().__init__(f"Unknown interface: {interface}", RESULT_ERR_NOT_FOUND)
        self.interface = interface


class UnknownPropertyError(MPRISError):
    """Raised when a property is not declared on the interface."""

    _dbus_error_name = DBUS_ERROR_UNKNOWN_PROPERTY

    def __init__(self, interface: str, name: str):
        super().__init__(f"Unknown property {name} on {interface}", RESULT_ERR_NOT_FOUND)
        self.interface = interface
        self.name = name


class PropertyReadOnlyError(MPRISError):
    """Raised when a read-only or computed property is written."""

    _dbus_error_name = DBUS_ERROR_PROPERTY_READ_ONLY

    def __init__(self, interface: str, name: str):
        super().__init__(f"Property {name} on {interface} is read-only", RESULT_ERR_ACCESS_DENIED)
        self.interface = interface
        self.name = name


class NotSupportedError(MPRISError):
    """Raised when an operation needs a facet the player was not built with."""

    _dbus_error_name = ERROR_NOT_SUPPORTED

    def __init__(self, operation: str):
        super().__init__(f"Operation not supported: {operation}", RESULT_ERR_NOT_SUPPORTED)
        self.operation = operation


class BusRegistrationError(MPRISError):
    """Raised (and reported to observers) when the service cannot be put on the bus."""

    _dbus_error_name = ERROR_BUS_REGISTRATION

    def __init__(self, name: str, reason: Optional[str] = None):
        message = f"Failed to register {name} on the bus"
        if reason:
            message += f": {reason}"
        super().__init__(message, RESULT_ERR_NOT_CONNECTED)
        self.name = name
        self.reason = reason


def map_dbus_error(exc: dbus.exceptions.DBusException, name: str = "") -> MPRISError:
    """Return an MPRISError instance for the given D-Bus exception.

    Parameters
    ----------
    exc : dbus.exceptions.DBusException
        The D-Bus exception to map
    name : str, optional
        Bus name or object the failed operation was about

    Returns
    -------
    MPRISError
        An MPRISError instance with the appropriate error code and message
    """
    dbus_name = exc.get_dbus_name() or ""
    msg = exc.get_dbus_message() or str(exc)
    _core_log.logging__debug_log(f"[MPRISError] name={dbus_name} msg={msg}")

    if dbus_name == DBUS_ERROR_INVALID_ARGS:
        return InvalidArgumentError(name or "D-Bus operation", msg)
    if dbus_name.startswith("org.freedesktop.DBus.Error."):
        return BusRegistrationError(name or "D-Bus operation", f"{dbus_name}: {msg}")

    # Default fall-back
    return MPRISError(f"D-Bus operation: {dbus_name} {msg}".strip())


__all__ = [
    "MPRISError",
    "InvalidLoopStatusError",
    "InvalidPlaybackStatusError",
    "InvalidPositionError",
    "InvalidObjectPathError",
    "InvalidArgumentError",
    "UnknownInterfaceError",
    "UnknownPropertyError",
    "PropertyReadOnlyError",
    "NotSupportedError",
    "BusRegistrationError",
    "map_dbus_error",
]
