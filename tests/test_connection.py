import pytest

from mprisctl.core.errors import (
    BusUnavailableError,
    NotConnectedError,
    NullHandleError,
)
from mprisctl.dbuslayer.connection import ConnectionManager, ConnectionState

from conftest import StubBusRuntime, remote_error


def test_connect_acquires_one_handle(runtime, log):
    manager = ConnectionManager(runtime, log)
    assert manager.state is ConnectionState.DISCONNECTED

    manager.connect()

    assert manager.state is ConnectionState.CONNECTED
    assert manager.is_connected()
    assert runtime.acquisitions == 1


def test_connect_is_idempotent(runtime, log):
    manager = ConnectionManager(runtime, log)
    manager.connect()
    handle = manager.require_handle("Play")

    manager.connect()

    assert runtime.acquisitions == 1
    assert manager.require_handle("Play") is handle


def test_forced_reconnect_replaces_the_handle(runtime, log):
    manager = ConnectionManager(runtime, log)
    manager.connect()
    first = manager.require_handle("Play")

    manager.connect(force_reconnect=True)

    assert runtime.acquisitions == 2
    assert runtime.releases == 1
    assert manager.require_handle("Play") is not first


def test_bus_error_while_connecting(log):
    runtime = StubBusRuntime(
        acquire_error=remote_error("org.freedesktop.DBus.Error.NoServer", "no session bus")
    )
    manager = ConnectionManager(runtime, log)

    with pytest.raises(BusUnavailableError) as excinfo:
        manager.connect()

    assert excinfo.value.name == "org.freedesktop.DBus.Error.NoServer"
    assert manager.state is ConnectionState.DISCONNECTED
    assert log.error_lines


def test_missing_handle_while_connecting(log):
    manager = ConnectionManager(StubBusRuntime(return_none=True), log)

    with pytest.raises(NullHandleError):
        manager.connect()

    assert not manager.is_connected()


def test_disconnect_releases_the_handle(runtime, log):
    manager = ConnectionManager(runtime, log)
    manager.connect()

    manager.disconnect()

    assert runtime.releases == 1
    assert manager.state is ConnectionState.DISCONNECTED


def test_disconnect_when_disconnected_is_a_no_op(runtime, log):
    manager = ConnectionManager(runtime, log)

    manager.disconnect()
    manager.disconnect()

    assert runtime.releases == 0
    assert manager.state is ConnectionState.DISCONNECTED


def test_release_failure_is_logged_not_raised(log):
    class FailingRelease(StubBusRuntime):
        def release_handle(self, handle):
            super().release_handle(handle)
            raise remote_error("org.freedesktop.DBus.Error.Disconnected")

    runtime = FailingRelease()
    manager = ConnectionManager(runtime, log)
    manager.connect()

    manager.disconnect()

    assert not manager.is_connected()
    assert any("closing" in line for line in log.error_lines)


def test_require_handle_without_connection(runtime, log):
    manager = ConnectionManager(runtime, log)

    with pytest.raises(NotConnectedError) as excinfo:
        manager.require_handle("PlayPause")

    assert excinfo.value.operation == "PlayPause"
