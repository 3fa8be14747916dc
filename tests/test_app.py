import pytest

from ideastack.config import IdeastackSettings
from ideastack.core.app import build_context
from ideastack.core.events import HOTKEY_ACTIVE, HOTKEY_INACTIVE
from ideastack.services.hotkeys import AlreadyRegisteredError, HotkeyConflictError


@pytest.fixture
def settings(tmp_path, monkeypatch):
    monkeypatch.setenv("IDEASTACK_HOME", str(tmp_path))
    settings = IdeastackSettings()
    settings.paths.ensure()
    return settings


def test_activate_hotkey_registers_binding(settings, backend, dispatcher):
    ctx = build_context(settings, dispatcher.post, backend)
    seen = []
    ctx.events.subscribe(HOTKEY_ACTIVE, seen.append)

    assert ctx.activate_hotkey(lambda: None) is True
    assert ctx.state.flags.hotkey_active is True
    assert ctx.handle is not None
    assert seen == [ctx.binding]


def test_activation_is_noop_when_already_active(settings, backend, dispatcher):
    ctx = build_context(settings, dispatcher.post, backend)
    ctx.activate_hotkey(lambda: None)
    assert ctx.activate_hotkey(lambda: None) is True
    assert len(backend.installed) == 1


def test_missing_permission_leaves_hotkey_inactive_and_retryable(settings, backend, dispatcher):
    backend.permission = False
    ctx = build_context(settings, dispatcher.post, backend)
    reasons = []
    ctx.events.subscribe(HOTKEY_INACTIVE, reasons.append)

    assert ctx.activate_hotkey(lambda: None) is False
    assert ctx.state.flags.hotkey_active is False
    assert "permission" in ctx.state.flags.hotkey_error
    assert len(reasons) == 1

    backend.permission = True
    assert ctx.activate_hotkey(lambda: None) is True
    assert ctx.state.flags.hotkey_error is None


def test_conflict_leaves_hotkey_inactive(settings, backend, dispatcher):
    def conflict(binding, on_match):
        raise HotkeyConflictError("Alt+S is already claimed by another application")

    backend.install = conflict
    ctx = build_context(settings, dispatcher.post, backend)
    assert ctx.activate_hotkey(lambda: None) is False
    assert "already claimed" in ctx.state.flags.hotkey_error


def test_disabled_hotkey_is_reported_inactive(settings, backend, dispatcher):
    settings.hotkeys.enabled = False
    ctx = build_context(settings, dispatcher.post, backend)
    assert ctx.activate_hotkey(lambda: None) is False
    assert backend.installed == {}


def test_stop_unregisters(settings, backend, dispatcher):
    ctx = build_context(settings, dispatcher.post, backend)
    ctx.activate_hotkey(lambda: None)
    ctx.stop()
    ctx.stop()
    assert backend.uninstalled == [1]
    assert ctx.state.flags.hotkey_active is False


def test_direct_double_register_is_a_contract_violation(settings, backend, dispatcher):
    ctx = build_context(settings, dispatcher.post, backend)
    ctx.activate_hotkey(lambda: None)
    with pytest.raises(AlreadyRegisteredError):
        ctx.hotkeys.register(ctx.binding, lambda: None)


def test_seed_samples_on_build(settings, backend, dispatcher):
    settings.notes.seed_samples = True
    ctx = build_context(settings, dispatcher.post, backend)
    assert len(ctx.store.notes) == 5


def test_end_to_end_capture(settings, backend, dispatcher, view, arbiter):
    from ideastack.core.overlay import OverlayController
    from ideastack.core.state import OverlayState

    ctx = build_context(settings, dispatcher.post, backend)
    controller = OverlayController(view, arbiter, ctx.sink, ctx.events, ctx.state)
    ctx.activate_hotkey(controller.on_hotkey_pressed)

    backend.press()
    dispatcher.drain()
    assert controller.state is OverlayState.VISIBLE

    controller.set_text("buy milk: errands")
    controller.submit()

    assert controller.state is OverlayState.HIDDEN
    assert [(n.text, n.category) for n in ctx.store.notes] == [("buy milk", "errands")]
