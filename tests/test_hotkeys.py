import threading

import pytest

from ideastack.config import HotkeySettings
from ideastack.services.hotkeys import (
    AlreadyRegisteredError,
    HotkeyPermissionError,
    HotkeyRegistry,
    create_backend,
)


def test_check_permission_reflects_backend(backend, dispatcher):
    registry = HotkeyRegistry(backend, dispatcher.post)
    assert registry.check_permission() is True
    backend.permission = False
    assert registry.check_permission() is False


def test_register_without_permission_fails(backend, dispatcher, binding):
    backend.permission = False
    registry = HotkeyRegistry(backend, dispatcher.post)
    calls = []

    with pytest.raises(HotkeyPermissionError):
        registry.register(binding, lambda: calls.append(1))

    backend.press()
    dispatcher.drain()
    assert calls == []
    assert backend.installed == {}
    assert not registry.active


def test_permission_error_is_builtin_permission_error(backend, dispatcher, binding):
    backend.permission = False
    registry = HotkeyRegistry(backend, dispatcher.post)
    with pytest.raises(PermissionError):
        registry.register(binding, lambda: None)


def test_backend_privilege_failure_maps_to_permission_error(backend, dispatcher, binding):
    def refuse(binding, on_match):
        raise ImportError("You must be root to use this library on linux.")

    backend.install = refuse
    registry = HotkeyRegistry(backend, dispatcher.post)
    with pytest.raises(HotkeyPermissionError):
        registry.register(binding, lambda: None)
    assert not registry.active


def test_double_register_raises(backend, dispatcher, binding):
    registry = HotkeyRegistry(backend, dispatcher.post)
    registry.register(binding, lambda: None)
    with pytest.raises(AlreadyRegisteredError):
        registry.register(binding, lambda: None)
    assert len(backend.installed) == 1


def test_register_again_after_unregister(backend, dispatcher, binding):
    registry = HotkeyRegistry(backend, dispatcher.post)
    first = registry.register(binding, lambda: None)
    registry.unregister(first)
    second = registry.register(binding, lambda: None)
    assert second.id != first.id
    assert registry.active


def test_retry_after_permission_granted(backend, dispatcher, binding):
    backend.permission = False
    registry = HotkeyRegistry(backend, dispatcher.post)
    with pytest.raises(HotkeyPermissionError):
        registry.register(binding, lambda: None)

    backend.permission = True
    handle = registry.register(binding, lambda: None)
    assert registry.handle == handle


def test_unregister_is_idempotent(backend, dispatcher, binding):
    registry = HotkeyRegistry(backend, dispatcher.post)
    handle = registry.register(binding, lambda: None)

    registry.unregister(handle)
    registry.unregister(handle)
    registry.unregister(None)

    assert backend.uninstalled == [1]
    assert not registry.active


def test_stale_handle_does_not_remove_new_registration(backend, dispatcher, binding):
    registry = HotkeyRegistry(backend, dispatcher.post)
    old = registry.register(binding, lambda: None)
    registry.unregister(old)
    registry.register(binding, lambda: None)

    registry.unregister(old)
    assert registry.active


def test_match_is_posted_not_called_on_os_thread(backend, dispatcher, binding):
    registry = HotkeyRegistry(backend, dispatcher.post)
    seen = []
    registry.register(binding, lambda: seen.append(threading.get_ident()))

    backend.press()
    assert seen == []
    assert dispatcher.pending == 1

    dispatcher.drain()
    assert seen == [threading.get_ident()]


def test_matches_delivered_in_order(backend, dispatcher, binding):
    registry = HotkeyRegistry(backend, dispatcher.post)
    counter = []
    registry.register(binding, lambda: counter.append(len(counter)))

    for _ in range(5):
        backend.press()
    dispatcher.drain()
    assert counter == [0, 1, 2, 3, 4]


def test_no_delivery_after_unregister(backend, dispatcher, binding):
    registry = HotkeyRegistry(backend, dispatcher.post)
    calls = []
    handle = registry.register(binding, lambda: calls.append(1))
    on_match = backend.installed[1]
    registry.unregister(handle)

    on_match()
    dispatcher.drain()
    assert calls == []


def test_registry_drives_controller_toggle(backend, dispatcher, binding, controller, transitions):
    from ideastack.core.state import OverlayState

    registry = HotkeyRegistry(backend, dispatcher.post)
    registry.register(binding, controller.on_hotkey_pressed)

    backend.press()
    backend.press()
    backend.press()
    assert controller.state is OverlayState.HIDDEN

    dispatcher.drain()
    assert transitions == [OverlayState.VISIBLE, OverlayState.HIDDEN, OverlayState.VISIBLE]


def test_create_backend_defaults_to_keyboard_off_windows():
    backend = create_backend(HotkeySettings(), platform="linux")
    assert backend.name == "keyboard"
