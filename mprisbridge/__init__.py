"""
mprisbridge - MPRIS D-Bus interface for Python media players
"""

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Initialise logging on *package import* so every code path (even when the
# CLI is not used) writes to the log directory.
# ---------------------------------------------------------------------------
import importlib as _importlib

_importlib.import_module("mprisbridge.core.log")  # noqa: F401 – side-effect import

__all__ = ["Player", "PlayerEvent", "MprisService", "create_player", "__version__"]

_lazy_map = {
    "Player": "mprisbridge.core.player",
    "PlayerEvent": "mprisbridge.core.events",
    "MprisService": "mprisbridge.dbuslayer.service",
    "create_player": "mprisbridge.dbuslayer.service",
}


def __getattr__(name):
    if name in _lazy_map:
        value = getattr(_importlib.import_module(_lazy_map[name]), name)
        globals()[name] = value
        return value
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
