"""
MPRIS reference data and value conversion helpers.

Kept import-free: ``constants`` is needed by ``mprisbridge.core.errors`` while
``utils`` depends on it, so sub-modules are imported explicitly by callers.
"""

__all__ = ["constants", "utils"]
