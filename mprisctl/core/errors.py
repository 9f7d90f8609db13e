"""Core error classes for mprisctl.

Every layer of the protocol stack raises one of the classes below; nothing is
fatal to the process and nothing is silently replaced with a default value.
"""

from __future__ import annotations

from typing import Any, Optional

import dbus.exceptions

from mprisctl.core.constants import (
    RESULT_ERR,
    RESULT_ERR_BAD_ARGS,
    RESULT_ERR_BUS_UNAVAILABLE,
    RESULT_ERR_CONFIG,
    RESULT_ERR_EMPTY_REPLY,
    RESULT_ERR_MESSAGE_CONSTRUCTION,
    RESULT_ERR_NO_REPLY,
    RESULT_ERR_NOT_CONNECTED,
    RESULT_ERR_NOT_SUPPORTED,
    RESULT_ERR_NOT_VARIANT,
    RESULT_ERR_NULL_HANDLE,
    RESULT_ERR_OUT_OF_RESOURCES,
    RESULT_ERR_REMOTE,
    RESULT_ERR_TYPE_MISMATCH,
    RESULT_ERR_UNKNOWN_IDENTIFIER,
    RESULT_ERR_UNKNOWN_TYPE,
)


class MPRISError(Exception):
    """Base exception for everything mprisctl raises.

    The `.code` attribute maps to the RESULT_* values in
    :mod:`mprisctl.core.constants` so callers such as the CLI can turn a
    failure into an exit status without inspecting the class.
    """

    def __init__(self, message: str, code: int = RESULT_ERR):
        super().__init__(message)
        self.code = code


class ConfigError(MPRISError):
    """Raised when the configuration file cannot be used."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid configuration {path}: {reason}", RESULT_ERR_CONFIG)
        self.path = path
        self.reason = reason


# ---------------------------------------------------------------------------
# Connection errors
# ---------------------------------------------------------------------------


class BusConnectionError(MPRISError):
    """Base class for session bus connection failures."""


class BusUnavailableError(BusConnectionError):
    """Raised when the bus library reports an error while connecting."""

    def __init__(self, name: Optional[str] = None, reason: Optional[str] = None):
        msg = "Session bus unavailable"
        if name:
            msg += f" ({name})"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, RESULT_ERR_BUS_UNAVAILABLE)
        self.name = name
        self.reason = reason


class NullHandleError(BusConnectionError):
    """Raised when the bus library returns no handle but reports no error."""

    def __init__(self):
        super().__init__("Session bus returned no connection handle", RESULT_ERR_NULL_HANDLE)


class NotConnectedError(BusConnectionError):
    """Raised when a message is sent while the connection is down."""

    def __init__(self, operation: str):
        super().__init__(f"Not connected to the session bus: {operation}", RESULT_ERR_NOT_CONNECTED)
        self.operation = operation


# ---------------------------------------------------------------------------
# Message construction errors
# ---------------------------------------------------------------------------


class MessageConstructionError(MPRISError):
    """Base class for failures while building an outbound message."""


class UnknownIdentifierError(MessageConstructionError):
    """Raised when a method or property identifier has no wire name."""

    def __init__(self, identifier: Any):
        super().__init__(f"Unknown identifier: {identifier!r}", RESULT_ERR_UNKNOWN_IDENTIFIER)
        self.identifier = identifier


class UnsupportedPropertyError(MessageConstructionError):
    """Raised when a property cannot be written by this client."""

    def __init__(self, property_name: str):
        super().__init__(f"Property cannot be set: {property_name}", RESULT_ERR_NOT_SUPPORTED)
        self.property_name = property_name


class UnsupportedOperationError(MessageConstructionError):
    """Raised for player methods that are reserved but not implemented."""

    def __init__(self, operation: str):
        super().__init__(f"Operation not supported: {operation}", RESULT_ERR_NOT_SUPPORTED)
        self.operation = operation


class InvalidValueError(MessageConstructionError):
    """Raised when a Set value does not fit the property's value kind."""

    def __init__(self, property_name: str, value: Any, reason: Optional[str] = None):
        message = f"Invalid value for {property_name}: {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, RESULT_ERR_BAD_ARGS)
        self.property_name = property_name
        self.value = value
        self.reason = reason


class MessageConstructionFailedError(MessageConstructionError):
    """Raised when the message primitive rejects its arguments or returns nothing."""

    def __init__(self, member: str, reason: Optional[str] = None):
        message = f"Failed to construct message for {member}"
        if reason:
            message += f": {reason}"
        super().__init__(message, RESULT_ERR_MESSAGE_CONSTRUCTION)
        self.member = member
        self.reason = reason


# ---------------------------------------------------------------------------
# Dispatch errors
# ---------------------------------------------------------------------------


class DispatchError(MPRISError):
    """Base class for failures while sending a message."""


class OutOfResourcesError(DispatchError):
    """Raised when the message could not be queued for transmission."""

    def __init__(self, member: str):
        super().__init__(f"Could not queue message for {member}", RESULT_ERR_OUT_OF_RESOURCES)
        self.member = member


class RemoteError(DispatchError):
    """Raised when the bus or the peer answers with an error message."""

    def __init__(self, name: Optional[str], description: Optional[str]):
        super().__init__(f"{name}: {description}", RESULT_ERR_REMOTE)
        self.name = name
        self.description = description


class NoReplyError(DispatchError):
    """Raised when a blocking send produced no reply object."""

    def __init__(self, member: str):
        super().__init__(f"No reply received for {member}", RESULT_ERR_NO_REPLY)
        self.member = member


# ---------------------------------------------------------------------------
# Decode errors
# ---------------------------------------------------------------------------


class DecodeError(MPRISError):
    """Base class for failures while interpreting a reply."""


class EmptyReplyError(DecodeError):
    def __init__(self):
        super().__init__("Reply carries no arguments", RESULT_ERR_EMPTY_REPLY)


class NotVariantError(DecodeError):
    def __init__(self, tag: str):
        super().__init__(f"Reply argument is not a variant (type '{tag}')", RESULT_ERR_NOT_VARIANT)
        self.tag = tag


class UnsupportedTypeError(DecodeError):
    def __init__(self, tag: str):
        super().__init__(f"Unsupported D-Bus type '{tag}'", RESULT_ERR_UNKNOWN_TYPE)
        self.tag = tag


class MetadataTypeMismatchError(DecodeError):
    """Raised when a well-known metadata key holds a value of the wrong kind."""

    def __init__(self, key: str, kind: Any = None):
        message = f"Metadata key {key} has unexpected type"
        if kind is not None:
            message += f" {kind}"
        super().__init__(message, RESULT_ERR_TYPE_MISMATCH)
        self.key = key
        self.kind = kind


class PropertyTypeMismatchError(DecodeError):
    """Raised when a property reply decodes to a kind the getter does not expect."""

    def __init__(self, property_name: str, kind: Any):
        super().__init__(
            f"Property {property_name} decoded as unexpected type {kind}",
            RESULT_ERR_TYPE_MISMATCH,
        )
        self.property_name = property_name
        self.kind = kind


def map_dbus_error(exc: dbus.exceptions.DBusException, connecting: bool = False) -> MPRISError:
    """Return an MPRISError instance for the given D-Bus exception.

    Parameters
    ----------
    exc : dbus.exceptions.DBusException
        The D-Bus exception to map
    connecting : bool
        True when the exception was raised while acquiring the bus handle

    Returns
    -------
    MPRISError
        ``BusUnavailableError`` for connection-phase failures, otherwise a
        ``RemoteError`` carrying the error name and description
    """
    name = exc.get_dbus_name()
    msg = exc.get_dbus_message() or str(exc)
    if connecting:
        return BusUnavailableError(name, msg)
    return RemoteError(name, msg)


__all__ = [
    "MPRISError",
    "ConfigError",
    "BusConnectionError",
    "BusUnavailableError",
    "NullHandleError",
    "NotConnectedError",
    "MessageConstructionError",
    "UnknownIdentifierError",
    "UnsupportedPropertyError",
    "UnsupportedOperationError",
    "InvalidValueError",
    "MessageConstructionFailedError",
    "DispatchError",
    "OutOfResourcesError",
    "RemoteError",
    "NoReplyError",
    "DecodeError",
    "EmptyReplyError",
    "NotVariantError",
    "UnsupportedTypeError",
    "MetadataTypeMismatchError",
    "PropertyTypeMismatchError",
    "map_dbus_error",
]
