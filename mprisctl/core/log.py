"""
Core logging functionality for mprisctl.

This module provides a centralized logging system: one file per log category
under the per-user data directory, a ``print_and_log`` helper for user-facing
output, and ``LogSink`` objects that are handed to each protocol component so
tests can swap in a silent or recording logger.
"""

import logging
import sys
import threading
from typing import Dict, Optional

from . import config

# Re-export log type constants for external modules
LOG__GENERAL = config.LOG__GENERAL
LOG__DEBUG = config.LOG__DEBUG
LOG__USER = config.LOG__USER

_LOG_FILES: Dict[str, str] = {
    LOG__GENERAL: "general.log",
    LOG__DEBUG: "debug.log",
    LOG__USER: "usermode.log",
}

# Formatter identical to the player log: raw message only
_formatter = logging.Formatter("%(message)s")

# Root logger for mprisctl
_logger = logging.getLogger("mprisctl")
_logger.setLevel(logging.INFO)

_handlers: Dict[str, logging.Handler] = {}
_handlers_lock = threading.Lock()


_to_file = True
_on_stderr = False


def _use_stderr() -> None:
    global _on_stderr
    _on_stderr = True
    fallback = logging.StreamHandler(sys.stderr)
    fallback.setFormatter(_formatter)
    for log_type in _LOG_FILES:
        _handlers[log_type] = fallback


def _init_handlers() -> Dict[str, logging.Handler]:
    """Create the per-category handlers on first use.

    When the log directory cannot be created every category falls back to a
    single stderr handler.
    """
    with _handlers_lock:
        if _handlers:
            return _handlers
        if not _to_file:
            _use_stderr()
        else:
            try:
                config.LOG_DIR.mkdir(parents=True, exist_ok=True)
                for log_type, filename in _LOG_FILES.items():
                    handler = logging.FileHandler(config.LOG_DIR / filename, mode="a", encoding="utf-8")
                    handler.setFormatter(_formatter)
                    _handlers[log_type] = handler
            except OSError:
                for handler in _handlers.values():
                    handler.close()
                _handlers.clear()
                _use_stderr()
        for handler in set(_handlers.values()):
            _logger.addHandler(handler)
        return _handlers


def set_level(level: str) -> None:
    """Set the level of the package root logger (e.g. ``"DEBUG"``)."""
    _logger.setLevel(level.upper())


def configure(level: str = config.DEFAULT_LOG_LEVEL, to_file: bool = True) -> None:
    """Apply logging settings; handlers already created are replaced."""
    global _to_file, _on_stderr
    with _handlers_lock:
        _to_file = to_file
        _on_stderr = False
        for handler in set(_handlers.values()):
            _logger.removeHandler(handler)
            handler.close()
        _handlers.clear()
    set_level(level)
    _init_handlers()


def _emit(line: str, log_type: str) -> None:
    """Internal helper to emit log records without altering the original message."""
    handlers = _init_handlers()
    record = logging.LogRecord(
        name=f"mprisctl.{log_type.lower()}",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg=line.rstrip("\n"),
        args=(),
        exc_info=None,
    )
    handlers.get(log_type, handlers[LOG__GENERAL]).handle(record)


def logging__debug_log(msg: str) -> None:
    """Write to debug log."""
    _emit(msg, LOG__DEBUG)


def logging__general_log(msg: str) -> None:
    """Write to general log."""
    _emit(msg, LOG__GENERAL)


def logging__usermode_log(msg: str) -> None:
    """Write to usermode log."""
    _emit(msg, LOG__USER)


_log_func_map = {
    LOG__GENERAL: logging__general_log,
    LOG__DEBUG: logging__debug_log,
    LOG__USER: logging__usermode_log,
}


def logging__log_event(log_type: str, string_to_log: str) -> None:
    """Log an event to the specified log type."""
    _log_func_map.get(log_type, logging__general_log)(string_to_log)


def print_and_log(output_string: str, log_type: str = LOG__GENERAL) -> None:
    """Print to stdout and log to the specified log type.

    When logging has fallen back to stderr, printed lines are not logged a
    second time.
    """
    if log_type != LOG__DEBUG:
        print(output_string)
        _init_handlers()
        if _on_stderr:
            return
    logging__log_event(log_type, output_string)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger with the specified name.

    This is the preferred way to get a logger in new code.
    The logger will automatically handle writing to the appropriate log files.
    """
    _init_handlers()
    if name:
        return _logger.getChild(name)
    return _logger


class LogSink:
    """Logging capability handed to each protocol component.

    Only ``debug`` and ``error`` are offered; neither returns a value and
    neither raises.
    """

    def __init__(self, name: str = "player", logger: Optional[logging.Logger] = None):
        self._logger = logger if logger is not None else get_logger(name)

    def debug(self, text: str) -> None:
        self._logger.debug(text)

    def error(self, text: str) -> None:
        self._logger.error(text)


class NullLog(LogSink):
    """LogSink that discards everything."""

    def __init__(self):
        self._logger = None

    def debug(self, text: str) -> None:
        pass

    def error(self, text: str) -> None:
        pass
