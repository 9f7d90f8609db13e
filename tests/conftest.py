import os
import tempfile

# Keep log files out of the real home directory; must run before mprisctl is imported
os.environ.setdefault("XDG_DATA_HOME", tempfile.mkdtemp(prefix="mprisctl-data-"))
os.environ.setdefault("XDG_CONFIG_HOME", tempfile.mkdtemp(prefix="mprisctl-config-"))

import dbus
import dbus.exceptions
import pytest

from mprisctl.core.log import LogSink
from mprisctl.core.metrics import DBusMetricsCollector

EXAMPLE_PLAYER = "org.mpris.MediaPlayer2.example"


class RecordingLog(LogSink):
    """LogSink that keeps every line for assertions."""

    def __init__(self):
        self.debug_lines = []
        self.error_lines = []

    def debug(self, text):
        self.debug_lines.append(text)

    def error(self, text):
        self.error_lines.append(text)


class StubReply:
    def __init__(self, args):
        self._args = list(args)

    def get_args_list(self):
        return list(self._args)


class StubBusRuntime:
    """Bus runtime double.

    ``replies`` is consumed in order by ``transmit_blocking``; each entry is
    a list of reply arguments, an exception to raise, or None for "no reply
    object".
    """

    def __init__(self, replies=None, acquire_error=None, return_none=False, transmit_ok=True):
        self.replies = list(replies or [])
        self.acquire_error = acquire_error
        self.return_none = return_none
        self.transmit_ok = transmit_ok
        self.acquisitions = 0
        self.releases = 0
        self.sent = []
        self.blocking_sent = []
        self.handles = []

    def acquire_session_handle(self):
        self.acquisitions += 1
        if self.acquire_error is not None:
            raise self.acquire_error
        if self.return_none:
            return None
        handle = object()
        self.handles.append(handle)
        return handle

    def release_handle(self, handle):
        self.releases += 1

    def transmit(self, handle, message):
        self.sent.append(message)
        return self.transmit_ok

    def transmit_blocking(self, handle, message):
        self.blocking_sent.append(message)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if reply is None:
            return None
        return StubReply(reply)


def variant_reply(value):
    """Arguments of a ``Properties.Get`` reply carrying *value* in a variant."""
    return [value]


def remote_error(name, message="error"):
    return dbus.exceptions.DBusException(message, name=name)


@pytest.fixture
def log():
    return RecordingLog()


@pytest.fixture
def metrics():
    return DBusMetricsCollector()


@pytest.fixture
def runtime():
    return StubBusRuntime()
