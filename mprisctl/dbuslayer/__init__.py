"""D-Bus layer: MPRIS2 message construction, dispatch and reply decoding."""

from mprisctl.dbuslayer.names import LoopStatus, MethodId, PlaybackStatus, PropertyId, ValueKind
from mprisctl.dbuslayer.metadata import TrackMetadata
from mprisctl.dbuslayer.player import MprisMediaPlayer, PlayerState
from mprisctl.dbuslayer.variant import DecodedValue

__all__ = [
    "LoopStatus",
    "MethodId",
    "PlaybackStatus",
    "PropertyId",
    "ValueKind",
    "TrackMetadata",
    "MprisMediaPlayer",
    "PlayerState",
    "DecodedValue",
]
