"""
Core logging functionality for mprisbridge.

Every log type is written to its own file under ``config.LOG_DIR``; messages
that are not debug traffic are also echoed to stdout by :func:`print_and_log`.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from . import config

# Re-export log type constants for external modules
LOG__GENERAL = config.LOG__GENERAL
LOG__DEBUG = config.LOG__DEBUG
LOG__EVENT = config.LOG__EVENT

_LOG_PATHS: Dict[str, Path] = {
    LOG__GENERAL: config.LOG_DIR / "general.log",
    LOG__DEBUG: config.LOG_DIR / "debug.log",
    LOG__EVENT: config.LOG_DIR / "event.log",
}

# Formatter: raw message only
_formatter = logging.Formatter("%(message)s")

# Create and configure handlers
_handlers: Dict[str, logging.Handler] = {}
for log_type, path in _LOG_PATHS.items():
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    except OSError:
        # Log directory not writable
        handler = logging.NullHandler()
    handler.setFormatter(_formatter)
    _handlers[log_type] = handler

# Root logger for mprisbridge
_logger = logging.getLogger("mprisbridge")
_logger.setLevel(logging.INFO)
for handler in _handlers.values():
    _logger.addHandler(handler)

# Clean up temporary variables
del log_type, path, handler


def _emit(line: str, log_type: str) -> None:
    """Internal helper to emit log records without altering the original message."""
    if not _logger.isEnabledFor(logging.INFO):
        return
    record = logging.LogRecord(
        name=f"mprisbridge.{log_type.lower()}",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg=line.rstrip("\n"),
        args=(),
        exc_info=None,
    )
    _handlers.get(log_type, _handlers[LOG__GENERAL]).handle(record)


def logging__debug_log(msg: str) -> None:
    """Write to debug log."""
    _emit(msg, LOG__DEBUG)


def logging__general_log(msg: str) -> None:
    """Write to general log."""
    _emit(msg, LOG__GENERAL)


def logging__event_log(msg: str) -> None:
    """Write to event log."""
    _emit(msg, LOG__EVENT)


# Map log type to function for convenience
_log_func_map = {
    LOG__GENERAL: logging__general_log,
    LOG__DEBUG: logging__debug_log,
    LOG__EVENT: logging__event_log,
}


def logging__log_event(log_type: str, string_to_log: str) -> None:
    """Log an event to the specified log type."""
    _log_func_map.get(log_type, logging__general_log)(string_to_log)


def print_and_log(output_string: str, log_type: str = LOG__GENERAL) -> None:
    """Print to stdout and log to the specified log type."""
    if log_type not in (LOG__DEBUG, LOG__EVENT):
        print(output_string)
    logging__log_event(log_type, output_string)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger with the specified name.

    The logger will automatically handle writing to the appropriate log files.
    """
    if name:
        return _logger.getChild(name)
    return _logger
