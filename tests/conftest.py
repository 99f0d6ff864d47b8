"""Shared fixtures for the mprisbridge test-suite."""

import os
import tempfile

# Keep log files out of the user's data directory; must happen before the
# first mprisbridge import because the log directory is read at import time.
os.environ.setdefault("MPRISBRIDGE_LOG_DIR", tempfile.mkdtemp(prefix="mprisbridge-logs-"))

import dbus
import dbus.bus
import pytest

from mprisbridge.core.events import PlayerEvent
from mprisbridge.core.player import Player
from mprisbridge.mpris_ref.constants import FACET_PLAYER, FACET_PLAYLISTS, FACET_TRACKLIST

ALL_FACETS = [FACET_PLAYER, FACET_TRACKLIST, FACET_PLAYLISTS]


class RecordingEmitter:
    """Stands in for the exported bus object and records what would be sent."""

    def __init__(self):
        self.changes = []
        self.signals = []

    def emit_properties_changed(self, interface, changed, invalidated=()):
        self.changes.append((interface, dict(changed), list(invalidated)))

    def emit_signal(self, interface, name, *args):
        self.signals.append((interface, name, args))

    def changed(self, interface=None):
        """Names of every property announced so far, in order."""
        return [name for iface, changes, _ in self.changes
                if interface is None or iface == interface for name in changes]

    def signal_names(self):
        return [name for _, name, _ in self.signals]


class FailingEmitter:
    def emit_properties_changed(self, interface, changed, invalidated=()):
        raise RuntimeError("transport closed")

    def emit_signal(self, interface, name, *args):
        raise RuntimeError("transport closed")


class EventRecorder:
    """Registers for every PlayerEvent and keeps ``(event, args)`` pairs."""

    def __init__(self, player, events=None):
        self.calls = []
        for event in events or list(PlayerEvent):
            player.on(event, self._callback(event))

    def _callback(self, event):
        def _cb(*args):
            self.calls.append((event, args))
        return _cb

    def of(self, event):
        return [args for e, args in self.calls if e is event]


class FakeBus:
    """Enough of ``dbus.Bus`` for exporting an object and acquiring a name."""

    def __init__(self, replies=None, request_error=None):
        self.replies = list(replies or [dbus.bus.REQUEST_NAME_REPLY_PRIMARY_OWNER])
        self.request_error = request_error
        self.requested = []
        self.released = []
        self.registered = {}
        self.messages = []
        self.exit_on_disconnect = True
        self.disconnect_callbacks = []

    def set_exit_on_disconnect(self, exit_on_disconnect):
        self.exit_on_disconnect = exit_on_disconnect

    def call_on_disconnection(self, callable):
        self.disconnect_callbacks.append(callable)

    def disconnect(self):
        for callback in self.disconnect_callbacks:
            callback(self)

    def request_name(self, name, flags=0):
        self.requested.append((name, flags))
        if self.request_error is not None:
            raise self.request_error
        return self.replies.pop(0)

    def release_name(self, name):
        self.released.append(name)

    def _register_object_path(self, path, on_message, on_unregister=None, fallback=False):
        self.registered[path] = on_message

    def _unregister_object_path(self, path):
        del self.registered[path]

    def send_message(self, message):
        self.messages.append(message)

    def list_exported_child_objects(self, path):
        return []

    def sent(self, member):
        return [m.get_args_list() for m in self.messages if m.get_member() == member]


@pytest.fixture
def emitter():
    return RecordingEmitter()


@pytest.fixture
def player(emitter):
    """Player with every facet enabled, attached to a recording emitter."""
    p = Player(
        name="test",
        identity="Test player",
        desktop_entry="test-player",
        supported_uri_schemes=["file"],
        supported_mime_types=["audio/mpeg"],
        supported_interfaces=ALL_FACETS,
    )
    p.attach(emitter)
    return p


@pytest.fixture
def events(player):
    return EventRecorder(player)


@pytest.fixture
def track_factory(player):
    def _make(i, **extra):
        track = {
            "mpris:trackid": player.object_path(f"track/{i}"),
            "mpris:length": 60 * 1000 * 1000,
            "xesam:title": f"Track {i}",
        }
        track.update(extra)
        return track
    return _make


@pytest.fixture
def fake_bus():
    return FakeBus()


@pytest.fixture
def bus_factory():
    return FakeBus


@pytest.fixture
def failing_emitter():
    return FailingEmitter()
