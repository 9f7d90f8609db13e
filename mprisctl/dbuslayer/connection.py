"""
Session bus connection management.

The :class:`ConnectionManager` owns the one bus handle used for a
request/response cycle.  The handle itself comes from a bus runtime; the
default :class:`SessionBusRuntime` opens a private dbus-python session bus
connection so that closing it never disturbs other users of the shared bus.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

import dbus
import dbus.exceptions

from mprisctl.core.errors import NotConnectedError, NullHandleError, map_dbus_error
from mprisctl.core.log import LogSink

__all__ = ["ConnectionState", "SessionBusRuntime", "ConnectionManager"]


class ConnectionState(Enum):
    """Enum representing possible states of the bus connection."""
    DISCONNECTED = 1
    CONNECTED = 2


class SessionBusRuntime:
    """
    Bus runtime backed by dbus-python.

    Offers the four primitives the protocol layer relies on: acquire and
    release a session bus handle, queue a message, and send a message while
    blocking for its reply.
    """

    # -1 lets libdbus apply its default reply timeout
    DEFAULT_TIMEOUT = -1.0

    def acquire_session_handle(self) -> dbus.bus.BusConnection:
        """
        Open a private session bus connection.

        Raises
        ------
        dbus.exceptions.DBusException
            If the session bus cannot be reached
        """
        return dbus.SessionBus(private=True)

    def release_handle(self, handle: dbus.bus.BusConnection) -> None:
        handle.close()

    def transmit(self, handle: dbus.bus.BusConnection, message) -> bool:
        """
        Queue *message* and flush it to the bus.

        Returns
        -------
        bool
            False if libdbus could not allocate room for the message
        """
        try:
            handle.send_message(message)
        except MemoryError:
            return False
        handle.flush()
        return True

    def transmit_blocking(self, handle: dbus.bus.BusConnection, message):
        """Send *message* and block until the reply or an error arrives."""
        return handle.send_message_with_reply_and_block(message, self.DEFAULT_TIMEOUT)


class ConnectionManager:
    """
    Owns the session bus handle and its connected/disconnected state.

    Parameters
    ----------
    runtime : SessionBusRuntime, optional
        Bus runtime providing ``acquire_session_handle`` and
        ``release_handle``
    log : LogSink, optional
        Logging capability; defaults to the ``mprisctl.connection`` logger
    """

    def __init__(self, runtime: Optional[Any] = None, log: Optional[LogSink] = None):
        self.runtime = runtime if runtime is not None else SessionBusRuntime()
        self._log = log if log is not None else LogSink("connection")
        self._handle = None

    @property
    def state(self) -> ConnectionState:
        return ConnectionState.CONNECTED if self._handle is not None else ConnectionState.DISCONNECTED

    def is_connected(self) -> bool:
        return self._handle is not None

    def require_handle(self, operation: str):
        """Return the live handle, or raise ``NotConnectedError``."""
        if self._handle is None:
            raise NotConnectedError(operation)
        return self._handle

    def connect(self, force_reconnect: bool = False) -> None:
        """
        Ensure a session bus handle is held.

        Idempotent: when already connected and *force_reconnect* is False this
        returns immediately without acquiring a second handle.

        Raises
        ------
        BusUnavailableError
            If the bus library reports an error
        NullHandleError
            If the bus library returns no handle without reporting an error
        """
        if self._handle is not None:
            if not force_reconnect:
                self._log.debug("[*] Session bus already connected")
                return
            self._log.debug("[*] Forcing session bus reconnect")
            self.disconnect()

        try:
            handle = self.runtime.acquire_session_handle()
        except dbus.exceptions.DBusException as exc:
            self._log.error(f"[-] Connection Error: {exc}")
            raise map_dbus_error(exc, connecting=True) from exc

        if handle is None:
            self._log.error("[-] Connection Error: no handle returned")
            raise NullHandleError()

        self._handle = handle
        self._log.debug("[+] Session bus connected")

    def disconnect(self) -> None:
        """Release the handle; a no-op when already disconnected."""
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        try:
            self.runtime.release_handle(handle)
        except dbus.exceptions.DBusException as exc:
            self._log.error(f"[-] Error closing session bus connection: {exc}")
            return
        self._log.debug("[+] Session bus disconnected")
