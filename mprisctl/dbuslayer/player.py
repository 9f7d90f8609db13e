"""MPRIS2 player control over the session bus.

:class:`MprisMediaPlayer` is the public surface: capability queries, property
get/set and transport commands against one named player.  Every call runs a
full cycle (connect, build, dispatch, decode, disconnect), so no connection
survives between calls and a failed call cannot leave a stale one behind.

Instances are not thread-safe; use one per thread or serialize access.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, List, Optional

from mprisctl.core.constants import MPRIS_BUS_PREFIX
from mprisctl.core.errors import (
    PropertyTypeMismatchError,
    UnsupportedOperationError,
)
from mprisctl.core.log import LogSink
from mprisctl.dbuslayer.connection import ConnectionManager
from mprisctl.dbuslayer.dispatch import Dispatcher
from mprisctl.dbuslayer.message import MessageBuilder
from mprisctl.dbuslayer.metadata import TrackMetadata, assemble
from mprisctl.dbuslayer.names import (
    UNKNOWN,
    LoopStatus,
    MethodId,
    PlaybackStatus,
    PropertyId,
    ValueKind,
    loop_status_from_name,
    method_name,
    property_name,
)
from mprisctl.dbuslayer.variant import DecodedValue, decode_top_level

__all__ = ["PlayerState", "MprisMediaPlayer"]


class PlayerState(Enum):
    IDLE = 1
    CONNECTING = 2
    CONNECTED = 3
    REQUEST_IN_FLIGHT = 4


class MprisMediaPlayer:
    """Control one MPRIS2 player identified by its bus name.

    Parameters
    ----------
    session_name : str
        Bus name of the player, e.g. ``org.mpris.MediaPlayer2.firefox.instance_1_20``
    runtime : optional
        Bus runtime passed to the :class:`ConnectionManager`; defaults to a
        private dbus-python session bus
    log : LogSink, optional
        Logging capability shared by every component of this player
    """

    def __init__(self, session_name: str, runtime: Optional[Any] = None, log: Optional[LogSink] = None):
        self._log = log if log is not None else LogSink("player")
        self._connection = ConnectionManager(runtime, self._log)
        self._dispatcher = Dispatcher(self._connection, self._log)
        self._builder = MessageBuilder(session_name, self._log)
        self._state = PlayerState.IDLE

    @property
    def session_name(self) -> str:
        return self._builder.session_name

    def set_session_name(self, session_name: str) -> None:
        """Point this player at another bus name."""
        self._log.debug(f"[*] Session target changed: {self.session_name} -> {session_name}")
        self._builder.session_name = session_name

    @property
    def state(self) -> PlayerState:
        return self._state

    # ------------------------------------------------------------------
    # Request cycle ------------------------------------------------------
    # ------------------------------------------------------------------

    def _request(self, build: Callable[[], Any], expect_reply: bool) -> Optional[DecodedValue]:
        self._state = PlayerState.CONNECTING
        try:
            self._connection.connect()
            self._state = PlayerState.CONNECTED
            message = build()
            self._state = PlayerState.REQUEST_IN_FLIGHT
            if not expect_reply:
                self._dispatcher.send_no_reply(message)
                return None
            reply = self._dispatcher.send_with_reply(message)
            return decode_top_level(reply)
        finally:
            self._connection.disconnect()
            self._state = PlayerState.IDLE

    def _call_method(self, method: MethodId, argument: Any = None) -> None:
        self._request(lambda: self._builder.build_method_call(method, argument), expect_reply=False)
        self._log.debug(f"[+] {method_name(method)} sent to {self.session_name}")

    def get_property(self, prop: PropertyId) -> DecodedValue:
        """Read *prop* and return its decoded value."""
        value = self._request(lambda: self._builder.build_property_get(prop), expect_reply=True)
        self._log.debug(f"[+] {property_name(prop)} = {value.to_python()!r}")
        return value

    def set_property(self, prop: PropertyId, value: Any) -> None:
        """Write *prop*; only LoopStatus, Shuffle and Volume are accepted."""
        self._request(lambda: self._builder.build_property_set(prop, value), expect_reply=False)
        self._log.debug(f"[+] {property_name(prop)} set to {value!r}")

    def _get_typed(self, prop: PropertyId, *kinds: ValueKind) -> Any:
        value = self.get_property(prop)
        if value.kind not in kinds:
            raise PropertyTypeMismatchError(property_name(prop), value.kind)
        return value.value

    def _get_bool(self, prop: PropertyId) -> bool:
        return self._get_typed(prop, ValueKind.BOOLEAN)

    def _get_double(self, prop: PropertyId) -> float:
        return self._get_typed(prop, ValueKind.DOUBLE)

    # ------------------------------------------------------------------
    # Capabilities -------------------------------------------------------
    # ------------------------------------------------------------------

    def can_control(self) -> bool:
        return self._get_bool(PropertyId.CAN_CONTROL)

    def can_go_next(self) -> bool:
        return self._get_bool(PropertyId.CAN_GO_NEXT)

    def can_go_previous(self) -> bool:
        return self._get_bool(PropertyId.CAN_GO_PREVIOUS)

    def can_pause(self) -> bool:
        return self._get_bool(PropertyId.CAN_PAUSE)

    def can_play(self) -> bool:
        return self._get_bool(PropertyId.CAN_PLAY)

    def can_seek(self) -> bool:
        return self._get_bool(PropertyId.CAN_SEEK)

    # ------------------------------------------------------------------
    # Properties ---------------------------------------------------------
    # ------------------------------------------------------------------

    def get_loop_status(self) -> LoopStatus:
        text = self._get_typed(PropertyId.LOOP_STATUS, ValueKind.TEXT)
        status = loop_status_from_name(text)
        if status is UNKNOWN:
            raise PropertyTypeMismatchError(property_name(PropertyId.LOOP_STATUS), text)
        return status

    def set_loop_status(self, loop_status: LoopStatus) -> None:
        self.set_property(PropertyId.LOOP_STATUS, loop_status)

    def get_maximum_rate(self) -> float:
        return self._get_double(PropertyId.MAXIMUM_RATE)

    def get_minimum_rate(self) -> float:
        return self._get_double(PropertyId.MINIMUM_RATE)

    def get_rate(self) -> float:
        return self._get_double(PropertyId.RATE)

    def get_metadata(self) -> TrackMetadata:
        """Read the current track's metadata."""
        entries = self._get_typed(PropertyId.METADATA, ValueKind.DICTIONARY)
        return assemble(entries)

    def get_playback_status(self) -> PlaybackStatus:
        text = self._get_typed(PropertyId.PLAYBACK_STATUS, ValueKind.TEXT)
        try:
            return PlaybackStatus(text)
        except ValueError:
            raise PropertyTypeMismatchError(property_name(PropertyId.PLAYBACK_STATUS), text) from None

    def get_position(self) -> int:
        """Playback position in microseconds."""
        return self._get_typed(PropertyId.POSITION, ValueKind.INT64, ValueKind.INT32,
                               ValueKind.UINT32, ValueKind.UINT64)

    def get_shuffle(self) -> bool:
        return self._get_bool(PropertyId.SHUFFLE)

    def set_shuffle(self, shuffle_on: bool) -> None:
        self.set_property(PropertyId.SHUFFLE, shuffle_on)

    def get_volume(self) -> float:
        return self._get_double(PropertyId.VOLUME)

    def set_volume(self, volume: float) -> None:
        self.set_property(PropertyId.VOLUME, volume)

    # ------------------------------------------------------------------
    # Transport commands -------------------------------------------------
    # ------------------------------------------------------------------

    def next(self) -> None:
        self._call_method(MethodId.NEXT)

    def pause(self) -> None:
        self._call_method(MethodId.PAUSE)

    def play(self) -> None:
        self._call_method(MethodId.PLAY)

    def play_pause(self) -> None:
        self._call_method(MethodId.PLAY_PAUSE)

    def previous(self) -> None:
        self._call_method(MethodId.PREVIOUS)

    def seek(self, offset: int) -> None:
        """Seek by *offset* microseconds; negative values seek backwards."""
        self._call_method(MethodId.SEEK, offset)

    def stop(self) -> None:
        self._call_method(MethodId.STOP)

    def open_uri(self, uri: str) -> None:
        raise UnsupportedOperationError(method_name(MethodId.OPEN_URI))

    def set_position(self, track_id: str, position: int) -> None:
        raise UnsupportedOperationError(method_name(MethodId.SET_POSITION))

    # ------------------------------------------------------------------
    # Bus names ----------------------------------------------------------
    # ------------------------------------------------------------------

    def list_names(self) -> List[str]:
        """Return every name currently owned on the session bus."""
        value = self._request(self._builder.build_list_names, expect_reply=True)
        if value.kind is not ValueKind.ARRAY:
            raise PropertyTypeMismatchError("ListNames", value.kind)
        return value.to_python()

    def list_players(self) -> List[str]:
        """Return the bus names of running MPRIS2 players."""
        return sorted(name for name in self.list_names() if name.startswith(MPRIS_BUS_PREFIX))
