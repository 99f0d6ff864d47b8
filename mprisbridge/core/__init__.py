"""
Core package initialisation for mprisbridge.

Deliberately kept lightweight to avoid circular-import problems.  The player
aggregate pulls in the whole D-Bus layer, so it is loaded lazily on first
attribute access via __getattr__.
"""

from importlib import import_module as _imp
from types import ModuleType as _ModuleType
from typing import Any as _Any

from mprisbridge.core.errors import (
    MPRISError,
    InvalidArgumentError,
    NotSupportedError,
)

__all__ = [
    "Player",
    "PlayerEvent",
    "MPRISError",
    "InvalidArgumentError",
    "NotSupportedError",
]

# Lazy attribute loader -------------------------------------------------------

_lazy_map = {
    "Player": "mprisbridge.core.player",
    "PlayerEvent": "mprisbridge.core.events",
}


def __getattr__(name: str) -> _Any:  # noqa: D401
    """Load heavy sub-modules on demand to break circular dependencies."""
    if name in _lazy_map:
        module: _ModuleType = _imp(_lazy_map[name])
        value = getattr(module, name)
        globals()[name] = value
        return value
    raise AttributeError(name)
