"""Name registry for the MPRIS2 player interface.

A single static table maps each method and property identifier to its wire
name, its argument signature or value kind, and whether it may be read or
written.  The message builder and the facade consult the same table, so the
two cannot drift apart.

Lookups never raise: an identifier missing from the table yields ``UNKNOWN``,
which callers must check before building a message.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, NamedTuple, Union

from mprisctl.core.constants import (
    LOOP_STATUS_NONE,
    LOOP_STATUS_PLAYLIST,
    LOOP_STATUS_TRACK,
    PLAYBACK_STATUS_PAUSED,
    PLAYBACK_STATUS_PLAYING,
    PLAYBACK_STATUS_STOPPED,
    TYPE_ARRAY,
    TYPE_BOOLEAN,
    TYPE_DOUBLE,
    TYPE_INT32,
    TYPE_INT64,
    TYPE_OBJECT_PATH,
    TYPE_STRING,
    TYPE_UINT32,
    TYPE_UINT64,
)

__all__ = [
    "UNKNOWN",
    "MethodId",
    "PropertyId",
    "ValueKind",
    "LoopStatus",
    "PlaybackStatus",
    "MethodSpec",
    "PropertySpec",
    "method_name",
    "property_name",
    "method_from_name",
    "property_from_name",
    "method_spec",
    "property_spec",
    "loop_status_name",
    "loop_status_from_name",
]


class _Unknown:
    """Sentinel returned for identifiers outside the registry."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNKNOWN"


UNKNOWN = _Unknown()


class MethodId(Enum):
    """Methods of org.mpris.MediaPlayer2.Player."""
    NEXT = 1
    OPEN_URI = 2
    PAUSE = 3
    PLAY = 4
    PLAY_PAUSE = 5
    PREVIOUS = 6
    SEEK = 7
    SET_POSITION = 8
    STOP = 9


class PropertyId(Enum):
    """Properties of org.mpris.MediaPlayer2.Player."""
    CAN_CONTROL = 0
    CAN_GO_NEXT = 1
    CAN_GO_PREVIOUS = 2
    CAN_PAUSE = 3
    CAN_PLAY = 4
    CAN_SEEK = 5
    LOOP_STATUS = 6
    MAXIMUM_RATE = 7
    METADATA = 8
    MINIMUM_RATE = 9
    PLAYBACK_STATUS = 10
    POSITION = 11
    RATE = 12
    SHUFFLE = 13
    VOLUME = 14


class ValueKind(Enum):
    """Kinds a decoded value can take; values are the D-Bus type codes."""
    BOOLEAN = TYPE_BOOLEAN
    INT32 = TYPE_INT32
    INT64 = TYPE_INT64
    UINT32 = TYPE_UINT32
    UINT64 = TYPE_UINT64
    DOUBLE = TYPE_DOUBLE
    TEXT = TYPE_STRING
    OBJECT_PATH = TYPE_OBJECT_PATH
    ARRAY = TYPE_ARRAY
    DICTIONARY = "a{sv}"


class LoopStatus(Enum):
    NONE = LOOP_STATUS_NONE
    TRACK = LOOP_STATUS_TRACK
    PLAYLIST = LOOP_STATUS_PLAYLIST


class PlaybackStatus(Enum):
    PLAYING = PLAYBACK_STATUS_PLAYING
    PAUSED = PLAYBACK_STATUS_PAUSED
    STOPPED = PLAYBACK_STATUS_STOPPED


class MethodSpec(NamedTuple):
    name: str
    signature: str
    implemented: bool


class PropertySpec(NamedTuple):
    name: str
    kind: ValueKind
    readable: bool
    settable: bool


_METHODS: Dict[MethodId, MethodSpec] = {
    MethodId.NEXT: MethodSpec("Next", "", True),
    MethodId.OPEN_URI: MethodSpec("OpenUri", TYPE_STRING, False),
    MethodId.PAUSE: MethodSpec("Pause", "", True),
    MethodId.PLAY: MethodSpec("Play", "", True),
    MethodId.PLAY_PAUSE: MethodSpec("PlayPause", "", True),
    MethodId.PREVIOUS: MethodSpec("Previous", "", True),
    MethodId.SEEK: MethodSpec("Seek", TYPE_INT64, True),
    MethodId.SET_POSITION: MethodSpec("SetPosition", TYPE_OBJECT_PATH + TYPE_INT64, False),
    MethodId.STOP: MethodSpec("Stop", "", True),
}

# Only LoopStatus, Shuffle and Volume are writable through this client
_PROPERTIES: Dict[PropertyId, PropertySpec] = {
    PropertyId.CAN_CONTROL: PropertySpec("CanControl", ValueKind.BOOLEAN, True, False),
    PropertyId.CAN_GO_NEXT: PropertySpec("CanGoNext", ValueKind.BOOLEAN, True, False),
    PropertyId.CAN_GO_PREVIOUS: PropertySpec("CanGoPrevious", ValueKind.BOOLEAN, True, False),
    PropertyId.CAN_PAUSE: PropertySpec("CanPause", ValueKind.BOOLEAN, True, False),
    PropertyId.CAN_PLAY: PropertySpec("CanPlay", ValueKind.BOOLEAN, True, False),
    PropertyId.CAN_SEEK: PropertySpec("CanSeek", ValueKind.BOOLEAN, True, False),
    PropertyId.LOOP_STATUS: PropertySpec("LoopStatus", ValueKind.TEXT, True, True),
    PropertyId.MAXIMUM_RATE: PropertySpec("MaximumRate", ValueKind.DOUBLE, True, False),
    PropertyId.METADATA: PropertySpec("Metadata", ValueKind.DICTIONARY, True, False),
    PropertyId.MINIMUM_RATE: PropertySpec("MinimumRate", ValueKind.DOUBLE, True, False),
    PropertyId.PLAYBACK_STATUS: PropertySpec("PlaybackStatus", ValueKind.TEXT, True, False),
    PropertyId.POSITION: PropertySpec("Position", ValueKind.INT64, True, False),
    PropertyId.RATE: PropertySpec("Rate", ValueKind.DOUBLE, True, False),
    PropertyId.SHUFFLE: PropertySpec("Shuffle", ValueKind.BOOLEAN, True, True),
    PropertyId.VOLUME: PropertySpec("Volume", ValueKind.DOUBLE, True, True),
}

_METHODS_BY_NAME = {spec.name: ident for ident, spec in _METHODS.items()}
_PROPERTIES_BY_NAME = {spec.name: ident for ident, spec in _PROPERTIES.items()}
_LOOP_STATUS_BY_NAME = {status.value: status for status in LoopStatus}


def method_spec(method) -> Union[MethodSpec, _Unknown]:
    return _METHODS.get(method, UNKNOWN) if isinstance(method, MethodId) else UNKNOWN


def property_spec(prop) -> Union[PropertySpec, _Unknown]:
    return _PROPERTIES.get(prop, UNKNOWN) if isinstance(prop, PropertyId) else UNKNOWN


def method_name(method) -> Union[str, _Unknown]:
    """Return the wire name of *method*, or ``UNKNOWN``."""
    spec = method_spec(method)
    return spec.name if spec is not UNKNOWN else UNKNOWN


def property_name(prop) -> Union[str, _Unknown]:
    """Return the wire name of *prop*, or ``UNKNOWN``."""
    spec = property_spec(prop)
    return spec.name if spec is not UNKNOWN else UNKNOWN


def method_from_name(name: str) -> Union[MethodId, _Unknown]:
    return _METHODS_BY_NAME.get(name, UNKNOWN)


def property_from_name(name: str) -> Union[PropertyId, _Unknown]:
    return _PROPERTIES_BY_NAME.get(name, UNKNOWN)


def loop_status_name(status) -> Union[str, _Unknown]:
    return status.value if isinstance(status, LoopStatus) else UNKNOWN


def loop_status_from_name(name: str) -> Union[LoopStatus, _Unknown]:
    return _LOOP_STATUS_BY_NAME.get(name, UNKNOWN)
