"""
Core configuration settings for mprisbridge.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

# Base paths
PACKAGE_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local/share")) / "mprisbridge"
CONFIG_DIR = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config")) / "mprisbridge"

# Logging configuration
LOG_DIR = Path(os.getenv("MPRISBRIDGE_LOG_DIR", DATA_DIR / "logs"))
LOG_LEVEL_ENV = "MPRISBRIDGE_LOG_LEVEL"

# Log types
LOG__GENERAL = "GENERAL"
LOG__DEBUG = "DEBUG"
LOG__EVENT = "EVENT"

# Player configuration
DEFAULT_PLAYER_CONFIG = CONFIG_DIR / "player.yaml"

DEFAULT_PLAYER_OPTIONS: Dict[str, Any] = {
    "name": "mprisbridge",
    "identity": "mprisbridge media player",
    "desktop_entry": "",
    "supported_interfaces": ["player"],
    "supported_uri_schemes": [],
    "supported_mime_types": [],
}

_LIST_OPTIONS = ("supported_interfaces", "supported_uri_schemes", "supported_mime_types")
_STRING_OPTIONS = ("name", "identity", "desktop_entry")


def init_mainloop() -> None:
    """Install the GLib main loop as dbus-python's default.

    Must run before the first bus connection is opened so exported objects
    receive method calls and signals are dispatched.
    """
    import dbus.mainloop.glib

    dbus.mainloop.glib.DBusGMainLoop(set_as_default=True)


def load_player_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Read a YAML player description and merge it over the defaults.

    Parameters
    ----------
    path : str or Path, optional
        File to read, defaults to ``$XDG_CONFIG_HOME/mprisbridge/player.yaml``.

    Returns
    -------
    Dict[str, Any]
        Keyword arguments suitable for :class:`mprisbridge.core.player.Player`.
    """
    # Import here to avoid circular imports
    from mprisbridge.core.errors import InvalidArgumentError

    path = Path(path) if path else DEFAULT_PLAYER_CONFIG
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidArgumentError(str(path), "player configuration must be a mapping")

    unknown = sorted(set(data) - set(DEFAULT_PLAYER_OPTIONS))
    if unknown:
        raise InvalidArgumentError(str(path), f"unknown keys: {', '.join(unknown)}")

    for key in _STRING_OPTIONS:
        if key in data and not isinstance(data[key], str):
            raise InvalidArgumentError(key, "expected a string")
    for key in _LIST_OPTIONS:
        if key in data and not (
            isinstance(data[key], list) and all(isinstance(v, str) for v in data[key])
        ):
            raise InvalidArgumentError(key, "expected a list of strings")

    options = {k: (list(v) if isinstance(v, list) else v) for k, v in DEFAULT_PLAYER_OPTIONS.items()}
    options.update(data)
    return options
