"""Native Win32 hotkey backend using ``RegisterHotKey``."""

from __future__ import annotations

import ctypes
import threading
import time
from collections.abc import Callable

import win32con
import win32gui
from PySide6 import QtCore

from ideastack.logging import get_logger
from ideastack.services.hotkeys import HotkeyConflictError
from ideastack.utils.hotkey_parser import HotkeyBinding

user32 = ctypes.WinDLL("user32", use_last_error=True)

WM_HOTKEY = 0x0312
ERROR_HOTKEY_ALREADY_REGISTERED = 1409
HOTKEY_ID = 0xB001

logger = get_logger("win32_hotkeys")


class MessagePump(QtCore.QObject):
    """Drains the hotkey window's message queue from the Qt main thread."""

    def __init__(self, backend: Win32HotkeyBackend, interval_ms: int = 10) -> None:
        super().__init__()
        self._backend = backend
        self._timer = QtCore.QTimer(self)
        self._timer.timeout.connect(self._backend.process_messages)
        self._timer.start(interval_ms)

    def stop(self) -> None:
        self._timer.stop()


class Win32HotkeyBackend:
    """``RegisterHotKey`` against a hidden message-only window.

    No elevated rights are needed. ``WM_HOTKEY`` is posted to the thread
    that created the window, so the pump runs on the Qt main thread and the
    match callback still goes through the registry's dispatcher.
    """

    name = "win32"

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._hwnd: int | None = None
        self._callback: Callable[[], None] | None = None
        self._pump: MessagePump | None = None

    def has_permission(self) -> bool:
        return True

    def install(self, binding: HotkeyBinding, on_match: Callable[[], None]) -> int:
        with self._lock:
            self._ensure_window()
            if not user32.RegisterHotKey(self._hwnd, HOTKEY_ID, binding.win32_modifiers, binding.vk_code):
                error = ctypes.get_last_error()
                self._destroy_window()
                if error == ERROR_HOTKEY_ALREADY_REGISTERED:
                    raise HotkeyConflictError(f"{binding.label} is already claimed by another application")
                raise OSError(error, f"RegisterHotKey failed for {binding.label}")
            self._callback = on_match
            self._pump = MessagePump(self)
            logger.debug(
                f"Registered hotkey ID={HOTKEY_ID}, modifiers=0x{binding.win32_modifiers:02X}, vk=0x{binding.vk_code:02X}"
            )
            return HOTKEY_ID

    def uninstall(self, token: int) -> None:
        with self._lock:
            if self._hwnd is None:
                return
            if not user32.UnregisterHotKey(self._hwnd, token):
                logger.warning(f"Failed to unregister hotkey ID={token}")
            self._callback = None
            if self._pump:
                self._pump.stop()
                self._pump = None
            self._destroy_window()

    def _ensure_window(self) -> None:
        if self._hwnd:
            return
        class_name = f"IdeastackHotkeyWindow_{int(time.time() * 1000)}"
        wc = win32gui.WNDCLASS()
        wc.lpfnWndProc = self._window_proc
        wc.lpszClassName = class_name
        wc.hInstance = win32gui.GetModuleHandle(None)
        class_atom = win32gui.RegisterClass(wc)
        self._hwnd = win32gui.CreateWindowEx(
            0,
            class_atom,
            "ideastack hotkey window",
            0,
            0,
            0,
            0,
            0,
            win32con.HWND_MESSAGE,
            0,
            wc.hInstance,
            None,
        )
        if not self._hwnd:
            raise OSError("Failed to create hotkey message window")

    def _destroy_window(self) -> None:
        if self._hwnd:
            win32gui.DestroyWindow(self._hwnd)
            self._hwnd = None

    def _window_proc(self, hwnd: int, msg: int, wparam: int, lparam: int) -> int:
        if msg == WM_HOTKEY and wparam == HOTKEY_ID:
            callback = self._callback
            if callback:
                callback()
            return 0
        return win32gui.DefWindowProc(hwnd, msg, wparam, lparam)

    def process_messages(self) -> None:
        """Process pending messages for the hotkey window."""
        if not self._hwnd:
            return
        try:
            peek_result = win32gui.PeekMessage(self._hwnd, 0, 0, win32con.PM_REMOVE)
            while peek_result[0]:
                msg = peek_result[1]
                if msg[1] == WM_HOTKEY:
                    self._window_proc(msg[0], msg[1], msg[2], msg[3])
                else:
                    win32gui.TranslateMessage(msg)
                    win32gui.DispatchMessage(msg)
                peek_result = win32gui.PeekMessage(self._hwnd, 0, 0, win32con.PM_REMOVE)
        except win32gui.error as exc:
            logger.debug(f"Error processing messages: {exc}")
