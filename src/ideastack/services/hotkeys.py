"""Global hotkey layer."""

from __future__ import annotations

import itertools
import sys
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from ideastack.config import HotkeySettings
from ideastack.logging import get_logger
from ideastack.utils.hotkey_parser import HotkeyBinding

HotkeyCallback = Callable[[], None]
Dispatcher = Callable[[Callable[[], None]], None]


class HotkeyError(Exception):
    """Base class for hotkey registration failures."""


class HotkeyPermissionError(HotkeyError, PermissionError):
    """The process may not intercept keyboard input system-wide."""


class AlreadyRegisteredError(HotkeyError, RuntimeError):
    """``register`` was called again without an intervening ``unregister``."""


class HotkeyConflictError(HotkeyError):
    """Another process already owns the requested combination."""


class HotkeyBackend(Protocol):
    """OS input layer able to watch for one key combination."""

    name: str

    def has_permission(self) -> bool: ...

    def install(self, binding: HotkeyBinding, on_match: HotkeyCallback) -> Any: ...

    def uninstall(self, token: Any) -> None: ...


@dataclass(frozen=True, slots=True)
class HotkeyHandle:
    id: int
    binding: HotkeyBinding


class HotkeyRegistry:
    """Owns the single global binding and marshals matches onto the UI context.

    The backend invokes :meth:`_deliver` on whatever thread the OS hook runs
    on. Delivery never touches UI state; it only posts the registered
    callback through ``dispatch``, which queues it on the UI-owning context
    in arrival order.
    """

    def __init__(self, backend: HotkeyBackend, dispatch: Dispatcher) -> None:
        self.backend = backend
        self.logger = get_logger("hotkeys")
        self._dispatch = dispatch
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self._handle: HotkeyHandle | None = None
        self._token: Any = None
        self._callback: HotkeyCallback | None = None

    @property
    def active(self) -> bool:
        with self._lock:
            return self._handle is not None

    @property
    def handle(self) -> HotkeyHandle | None:
        return self._handle

    def check_permission(self) -> bool:
        try:
            granted = bool(self.backend.has_permission())
        except OSError as exc:
            self.logger.warning(f"Permission query failed on {self.backend.name}: {exc}")
            granted = False
        self.logger.debug(f"Input capture permission ({self.backend.name}): {granted}")
        return granted

    def register(self, binding: HotkeyBinding, on_match: HotkeyCallback) -> HotkeyHandle:
        with self._lock:
            if self._handle is not None:
                raise AlreadyRegisteredError(
                    f"{self._handle.binding} is already registered; unregister it first"
                )
            if not self.check_permission():
                raise HotkeyPermissionError(
                    f"{self.backend.name} backend lacks permission to capture {binding.label}"
                )
            try:
                token = self.backend.install(binding, self._deliver)
            except HotkeyError:
                raise
            except (ImportError, PermissionError, OSError) as exc:
                # The keyboard library signals missing privileges with ImportError/OSError.
                raise HotkeyPermissionError(str(exc)) from exc

            self._token = token
            self._callback = on_match
            self._handle = HotkeyHandle(id=next(self._ids), binding=binding)
            self.logger.info(f"Registered global hotkey {binding.label} via {self.backend.name}")
            return self._handle

    def unregister(self, handle: HotkeyHandle | None) -> None:
        with self._lock:
            if handle is None or self._handle is None or handle.id != self._handle.id:
                return
            token, self._token = self._token, None
            self._handle = None
            self._callback = None
        try:
            self.backend.uninstall(token)
        except (KeyError, ValueError, OSError) as exc:
            self.logger.warning(f"Backend refused to uninstall {handle.binding}: {exc}")
        self.logger.info(f"Unregistered global hotkey {handle.binding.label}")

    def _deliver(self) -> None:
        """Entry point for the OS hook thread."""
        with self._lock:
            callback = self._callback
        if callback is None:
            return
        self._dispatch(callback)


def create_backend(settings: HotkeySettings, platform: str | None = None) -> HotkeyBackend:
    """Pick the OS input backend for the configured platform."""
    platform = platform or sys.platform
    choice = settings.backend
    if choice == "auto":
        choice = "win32" if platform == "win32" else "keyboard"

    if choice == "win32":
        from ideastack.services.win32_hotkeys import Win32HotkeyBackend

        return Win32HotkeyBackend()

    from ideastack.services.keyboard_hooks import KeyboardHookBackend

    return KeyboardHookBackend()
