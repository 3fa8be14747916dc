import threading
from collections import deque

import pytest

from ideastack.core.events import OVERLAY_STATE, EventBus
from ideastack.core.overlay import OverlayController
from ideastack.core.state import RuntimeState
from ideastack.utils.hotkey_parser import parse_binding


class ManualDispatcher:
    """Stands in for the UI event loop: posts queue up until drained."""

    def __init__(self):
        self._queue = deque()
        self._lock = threading.Lock()

    def post(self, fn):
        with self._lock:
            self._queue.append(fn)

    @property
    def pending(self):
        with self._lock:
            return len(self._queue)

    def drain(self):
        ran = 0
        while True:
            with self._lock:
                if not self._queue:
                    return ran
                fn = self._queue.popleft()
            fn()
            ran += 1


class FakeArbiter:
    """Records window operations; focus claims complete immediately unless deferred."""

    def __init__(self, grant=True, defer=False):
        self.grant = grant
        self.defer = defer
        self.calls = []
        self.pending = []

    def present_above_all(self, surface):
        self.calls.append(("present", surface))

    def claim_keyboard_focus(self, surface, field, on_done):
        self.calls.append(("claim", field))
        if self.defer:
            self.pending.append(on_done)
        else:
            on_done(self.grant)

    def dismiss(self, surface):
        self.calls.append(("dismiss", surface))

    def complete(self, granted=True):
        callbacks, self.pending = self.pending, []
        for on_done in callbacks:
            on_done(granted)

    @property
    def names(self):
        return [name for name, _ in self.calls]


class RecordingSink:
    def __init__(self):
        self.commits = []

    def commit(self, raw_text):
        self.commits.append(raw_text)


class FakeView:
    def __init__(self):
        self.surface = object()
        self.field = object()
        self.clears = 0

    def clear_input(self):
        self.clears += 1


class FakeBackend:
    name = "fake"

    def __init__(self, permission=True):
        self.permission = permission
        self.installed = {}
        self.uninstalled = []
        self._next = 0

    def has_permission(self):
        return self.permission

    def install(self, binding, on_match):
        self._next += 1
        self.installed[self._next] = on_match
        return self._next

    def uninstall(self, token):
        self.uninstalled.append(token)
        self.installed.pop(token, None)

    def press(self):
        """Simulate the OS reporting the combination on its own thread."""
        for on_match in list(self.installed.values()):
            worker = threading.Thread(target=on_match)
            worker.start()
            worker.join()


@pytest.fixture
def dispatcher():
    return ManualDispatcher()


@pytest.fixture
def arbiter():
    return FakeArbiter()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def view():
    return FakeView()


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def transitions(events):
    recorded = []
    events.subscribe(OVERLAY_STATE, recorded.append)
    return recorded


@pytest.fixture
def controller(view, arbiter, sink, events):
    return OverlayController(view, arbiter, sink, events, RuntimeState())


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def binding():
    return parse_binding("alt+s")
