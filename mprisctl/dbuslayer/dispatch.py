"""Synchronous message dispatch over the connection manager's handle."""

from __future__ import annotations

import time
from typing import Optional

import dbus.exceptions

from mprisctl.core.errors import NoReplyError, OutOfResourcesError, map_dbus_error
from mprisctl.core.log import LogSink
from mprisctl.core.metrics import DBusMetricsCollector, get_metrics_collector
from mprisctl.dbuslayer.connection import ConnectionManager

__all__ = ["Dispatcher"]


def _member(message) -> str:
    get_member = getattr(message, "get_member", None)
    member = get_member() if get_member is not None else None
    return member or "<unknown>"


class Dispatcher:
    """
    Send built messages fire-and-forget or wait for their reply.

    There is no timeout parameter: ``send_with_reply`` blocks until the bus
    library returns, bounded only by its default reply timeout.  Releasing
    the connection afterwards is the caller's job.
    """

    def __init__(
        self,
        connection: ConnectionManager,
        log: Optional[LogSink] = None,
        metrics: Optional[DBusMetricsCollector] = None,
    ):
        self._connection = connection
        self._log = log if log is not None else LogSink("dispatch")
        self._metrics = metrics if metrics is not None else get_metrics_collector()

    def send_no_reply(self, message) -> None:
        """
        Mark *message* as not expecting a reply and transmit it.

        Raises
        ------
        NotConnectedError
            If the connection manager holds no handle
        OutOfResourcesError
            If the message could not be queued
        RemoteError
            If the bus library rejects the message
        """
        member = _member(message)
        handle = self._connection.require_handle(member)
        message.set_no_reply(True)

        start = time.monotonic()
        try:
            queued = self._connection.runtime.transmit(handle, message)
        except dbus.exceptions.DBusException as exc:
            self._metrics.record_operation(f"send_no_reply:{member}", time.monotonic() - start, False)
            self._log.error(f"[-] Sending {member} failed: {exc}")
            raise map_dbus_error(exc) from exc

        self._metrics.record_operation(f"send_no_reply:{member}", time.monotonic() - start, queued)
        if not queued:
            self._log.error(f"[-] Out of memory queueing {member}")
            raise OutOfResourcesError(member)
        self._log.debug(f"[+] Sent {member} (no reply expected)")

    def send_with_reply(self, message):
        """
        Transmit *message* and block until its reply arrives.

        Returns
        -------
        dbus.lowlevel.MethodReturnMessage
            The reply message

        Raises
        ------
        NotConnectedError
            If the connection manager holds no handle
        RemoteError
            If the bus reports an error (name and description preserved)
        NoReplyError
            If the send succeeded but produced no reply object
        """
        member = _member(message)
        handle = self._connection.require_handle(member)

        start = time.monotonic()
        try:
            reply = self._connection.runtime.transmit_blocking(handle, message)
        except dbus.exceptions.DBusException as exc:
            self._metrics.record_operation(f"send_with_reply:{member}", time.monotonic() - start, False)
            self._log.error(f"[-] {member} failed: {exc.get_dbus_name()} - {exc.get_dbus_message()}")
            raise map_dbus_error(exc) from exc

        self._metrics.record_operation(f"send_with_reply:{member}", time.monotonic() - start, reply is not None)
        if reply is None:
            self._log.error(f"[-] No reply received for {member}")
            raise NoReplyError(member)
        self._log.debug(f"[+] Reply received for {member}")
        return reply
