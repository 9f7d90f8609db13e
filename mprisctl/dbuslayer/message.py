"""Outbound message construction for MPRIS2 calls.

Two shapes are built here: method invocations on
``org.mpris.MediaPlayer2.Player`` and ``Get``/``Set`` calls on
``org.freedesktop.DBus.Properties``.  Messages are plain
:class:`dbus.lowlevel.MethodCallMessage` objects; nothing in this module
touches the bus.
"""

from __future__ import annotations

from numbers import Real
from typing import Any, Callable, Optional

import dbus
import dbus.lowlevel

from mprisctl.core.constants import (
    DBUS_INTERFACE,
    DBUS_LIST_NAMES,
    DBUS_OBJECT_PATH,
    DBUS_PROPERTIES,
    DBUS_PROPERTY_GET,
    DBUS_PROPERTY_SET,
    DBUS_SERVICE_NAME,
    MPRIS_OBJECT_PATH,
    MPRIS_PLAYER_INTERFACE,
    TYPE_INT64,
    TYPE_STRING,
    TYPE_VARIANT,
)
from mprisctl.core.errors import (
    InvalidValueError,
    MessageConstructionFailedError,
    UnknownIdentifierError,
    UnsupportedOperationError,
    UnsupportedPropertyError,
)
from mprisctl.core.log import LogSink
from mprisctl.dbuslayer.names import (
    UNKNOWN,
    LoopStatus,
    PropertyId,
    ValueKind,
    loop_status_from_name,
    method_spec,
    property_spec,
)

__all__ = ["MessageBuilder", "MessageFactory"]

MessageFactory = Callable[[str, str, str, str], Any]

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


class MessageBuilder:
    """Build request messages addressed to one session target.

    Parameters
    ----------
    session_name : str
        Bus name of the player, e.g. ``org.mpris.MediaPlayer2.vlc``
    log : LogSink, optional
        Logging capability; defaults to the ``mprisctl.message`` logger
    message_factory : callable, optional
        ``(destination, path, interface, member) -> message``; defaults to
        :class:`dbus.lowlevel.MethodCallMessage`
    """

    def __init__(
        self,
        session_name: str,
        log: Optional[LogSink] = None,
        message_factory: Optional[MessageFactory] = None,
    ):
        self.session_name = session_name
        self._log = log if log is not None else LogSink("message")
        self._factory = message_factory or dbus.lowlevel.MethodCallMessage

    # ------------------------------------------------------------------
    # Internal helpers ---------------------------------------------------
    # ------------------------------------------------------------------

    def _new_message(self, destination: str, path: str, interface: str, member: str):
        try:
            msg = self._factory(destination, path, interface, member)
        except (TypeError, ValueError) as exc:
            self._log.error(f"[-] Message for {interface}.{member} rejected: {exc}")
            raise MessageConstructionFailedError(member, str(exc)) from exc
        if msg is None:
            self._log.error(f"[-] Message primitive returned nothing for {interface}.{member}")
            raise MessageConstructionFailedError(member)
        return msg

    def _append(self, msg, member: str, *args, signature: str) -> None:
        try:
            msg.append(*args, signature=signature)
        except (TypeError, ValueError, OverflowError) as exc:
            self._log.error(f"[-] Could not append arguments to {member}: {exc}")
            raise MessageConstructionFailedError(member, str(exc)) from exc

    # ------------------------------------------------------------------
    # Method invocations -------------------------------------------------
    # ------------------------------------------------------------------

    def build_method_call(self, method, argument: Any = None):
        """Return a message invoking *method* on the player interface.

        Raises
        ------
        UnknownIdentifierError
            If *method* is not in the registry
        UnsupportedOperationError
            For reserved methods (OpenUri, SetPosition)
        InvalidValueError
            If Seek's offset is missing or not a signed 64-bit integer, or an
            argument is given to a method that takes none
        """
        spec = method_spec(method)
        if spec is UNKNOWN:
            raise UnknownIdentifierError(method)
        if not spec.implemented:
            raise UnsupportedOperationError(spec.name)
        if not spec.signature and argument is not None:
            raise InvalidValueError(spec.name, argument, "takes no argument")

        msg = self._new_message(self.session_name, MPRIS_OBJECT_PATH, MPRIS_PLAYER_INTERFACE, spec.name)

        if spec.signature == TYPE_INT64:
            if isinstance(argument, bool) or not isinstance(argument, int):
                raise InvalidValueError(spec.name, argument, "expected a 64-bit integer")
            if not _INT64_MIN <= argument <= _INT64_MAX:
                raise InvalidValueError(spec.name, argument, "out of 64-bit range")
            self._append(msg, spec.name, dbus.Int64(argument), signature=TYPE_INT64)

        self._log.debug(f"[*] Built {MPRIS_PLAYER_INTERFACE}.{spec.name} for {self.session_name}")
        return msg

    # ------------------------------------------------------------------
    # Property access ----------------------------------------------------
    # ------------------------------------------------------------------

    def build_property_get(self, prop: PropertyId):
        """Return a ``Properties.Get(player-interface, name)`` message."""
        spec = property_spec(prop)
        if spec is UNKNOWN:
            raise UnknownIdentifierError(prop)

        msg = self._new_message(self.session_name, MPRIS_OBJECT_PATH, DBUS_PROPERTIES, DBUS_PROPERTY_GET)
        self._append(msg, DBUS_PROPERTY_GET, MPRIS_PLAYER_INTERFACE, spec.name,
                     signature=TYPE_STRING * 2)
        self._log.debug(f"[*] Built Get({spec.name}) for {self.session_name}")
        return msg

    def build_property_set(self, prop: PropertyId, value: Any):
        """Return a ``Properties.Set(player-interface, name, variant)`` message.

        The variant's inner signature follows the property's declared kind:
        ``s`` for LoopStatus, ``b`` for Shuffle, ``d`` for Volume.

        Raises
        ------
        UnknownIdentifierError
            If *prop* is not in the registry
        UnsupportedPropertyError
            If *prop* is not writable through this client
        InvalidValueError
            If *value* does not fit the property's kind
        """
        spec = property_spec(prop)
        if spec is UNKNOWN:
            raise UnknownIdentifierError(prop)
        if not spec.settable:
            raise UnsupportedPropertyError(spec.name)

        variant = self._wrap_value(prop, spec.name, spec.kind, value)

        msg = self._new_message(self.session_name, MPRIS_OBJECT_PATH, DBUS_PROPERTIES, DBUS_PROPERTY_SET)
        self._append(msg, DBUS_PROPERTY_SET, MPRIS_PLAYER_INTERFACE, spec.name, variant,
                     signature=TYPE_STRING * 2 + TYPE_VARIANT)
        self._log.debug(f"[*] Built Set({spec.name}={value!r}) for {self.session_name}")
        return msg

    @staticmethod
    def _wrap_value(prop: PropertyId, name: str, kind: ValueKind, value: Any):
        if kind is ValueKind.TEXT:
            if prop is PropertyId.LOOP_STATUS:
                if isinstance(value, str):
                    status = loop_status_from_name(value)
                    if status is UNKNOWN:
                        raise InvalidValueError(name, value, "expected None, Track or Playlist")
                    value = status
                if not isinstance(value, LoopStatus):
                    raise InvalidValueError(name, value, "expected a LoopStatus")
                return dbus.String(value.value, variant_level=1)
            if not isinstance(value, str):
                raise InvalidValueError(name, value, "expected a string")
            return dbus.String(value, variant_level=1)

        if kind is ValueKind.BOOLEAN:
            if not isinstance(value, bool):
                raise InvalidValueError(name, value, "expected a boolean")
            return dbus.Boolean(value, variant_level=1)

        if kind is ValueKind.DOUBLE:
            if isinstance(value, bool) or not isinstance(value, Real):
                raise InvalidValueError(name, value, "expected a number")
            return dbus.Double(float(value), variant_level=1)

        raise UnsupportedPropertyError(name)

    # ------------------------------------------------------------------
    # Bus administration -------------------------------------------------
    # ------------------------------------------------------------------

    def build_list_names(self):
        """Return an ``org.freedesktop.DBus.ListNames`` message."""
        msg = self._new_message(DBUS_SERVICE_NAME, DBUS_OBJECT_PATH, DBUS_INTERFACE, DBUS_LIST_NAMES)
        self._log.debug("[*] Built ListNames")
        return msg
