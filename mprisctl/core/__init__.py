"""
Core package initialisation for mprisctl.

Deliberately kept lightweight: only the error classes are re-exported so
``from mprisctl.core import MPRISError`` works without pulling in logging.
"""

from mprisctl.core.errors import (
    MPRISError,
    BusConnectionError,
    MessageConstructionError,
    DispatchError,
    DecodeError,
)

__all__ = [
    "MPRISError",
    "BusConnectionError",
    "MessageConstructionError",
    "DispatchError",
    "DecodeError",
]
