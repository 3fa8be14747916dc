"""Global hotkey backend built on the ``keyboard`` library."""

from __future__ import annotations

import os
import sys
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import keyboard

from ideastack.logging import get_logger
from ideastack.utils.hotkey_parser import HotkeyBinding

logger = get_logger("keyboard_hooks")


def _is_admin() -> bool:
    if sys.platform == "win32":
        return True
    return os.geteuid() == 0


class RepeatGate:
    """Lets one press through until the letter key is released.

    Key auto-repeat delivers a KEY_DOWN for every repeat; only the first
    one per physical press reaches ``on_match``.
    """

    def __init__(self, on_match: Callable[[], None]) -> None:
        self._on_match = on_match
        self._armed = threading.Event()
        self._armed.set()

    def press(self) -> None:
        if not self._armed.is_set():
            return
        self._armed.clear()
        self._on_match()

    def release(self, _event: Any = None) -> None:
        self._armed.set()


@dataclass(slots=True)
class KeyboardHooks:
    hotkey: Any
    release: Any


class KeyboardHookBackend:
    """Low-level keyboard hook; callbacks fire on the library's listener thread.

    On Linux and macOS the library reads raw input devices and therefore
    needs root. The combination is suppressed so the foreground app never
    sees it; the library honours suppression on Windows only.
    """

    name = "keyboard"

    def has_permission(self) -> bool:
        return _is_admin()

    def install(self, binding: HotkeyBinding, on_match: Callable[[], None]) -> KeyboardHooks:
        gate = RepeatGate(on_match)
        hotkey = keyboard.add_hotkey(binding.keyboard_combo, gate.press, suppress=True)
        try:
            release = keyboard.on_release_key(binding.key, gate.release, suppress=False)
        except Exception:
            keyboard.remove_hotkey(hotkey)
            raise
        logger.debug(f"Hooked {binding.keyboard_combo}")
        return KeyboardHooks(hotkey=hotkey, release=release)

    def uninstall(self, token: KeyboardHooks) -> None:
        try:
            keyboard.remove_hotkey(token.hotkey)
        finally:
            keyboard.unhook(token.release)
