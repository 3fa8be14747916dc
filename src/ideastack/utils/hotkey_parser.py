"""Parse ``modifier+letter`` shortcut strings into a global hotkey binding."""

from __future__ import annotations

import string
from dataclasses import dataclass

# Win32 Modifier Flags
MOD_ALT = 0x0001
MOD_CONTROL = 0x0002
MOD_SHIFT = 0x0004
MOD_WIN = 0x0008
MOD_NOREPEAT = 0x4000

MODIFIER_ALIASES: dict[str, str] = {
    "ctrl": "ctrl",
    "control": "ctrl",
    "alt": "alt",
    "option": "alt",
    "opt": "alt",
    "shift": "shift",
    "shft": "shift",
    "win": "win",
    "windows": "win",
    "cmd": "win",
    "command": "win",
    "super": "win",
    "meta": "win",
}

WIN32_MODIFIERS: dict[str, int] = {
    "ctrl": MOD_CONTROL,
    "alt": MOD_ALT,
    "shift": MOD_SHIFT,
    "win": MOD_WIN,
}

# Names understood by the ``keyboard`` library.
KEYBOARD_MODIFIERS: dict[str, str] = {
    "ctrl": "ctrl",
    "alt": "alt",
    "shift": "shift",
    "win": "windows",
}

# Win32 virtual key codes for letters are their uppercase ASCII values.
VK_CODES: dict[str, int] = {letter: ord(letter.upper()) for letter in string.ascii_lowercase}


@dataclass(frozen=True, slots=True)
class HotkeyBinding:
    """One global key combination: a single modifier plus a single letter."""

    modifier: str
    key: str

    @property
    def keyboard_combo(self) -> str:
        return f"{KEYBOARD_MODIFIERS[self.modifier]}+{self.key}"

    @property
    def win32_modifiers(self) -> int:
        return WIN32_MODIFIERS[self.modifier] | MOD_NOREPEAT

    @property
    def vk_code(self) -> int:
        return VK_CODES[self.key]

    @property
    def label(self) -> str:
        return f"{self.modifier.capitalize()}+{self.key.upper()}"

    def __str__(self) -> str:
        return f"{self.modifier}+{self.key}"


def parse_binding(shortcut: str) -> HotkeyBinding:
    """
    Parse a shortcut string into a :class:`HotkeyBinding`.

    Examples:
        "alt+s" -> HotkeyBinding("alt", "s")
        "Option+S" -> HotkeyBinding("alt", "s")
        "cmd+k" -> HotkeyBinding("win", "k")

    Raises:
        ValueError: If the shortcut is not exactly one modifier plus one letter
    """
    parts = [p.strip().lower() for p in shortcut.split("+")]
    if not shortcut.strip() or any(not part for part in parts):
        raise ValueError(f"Malformed shortcut: {shortcut!r}")

    modifier: str | None = None
    key: str | None = None

    for part in parts:
        if part in MODIFIER_ALIASES:
            if modifier is not None:
                raise ValueError(f"Only one modifier is supported: {shortcut!r}")
            modifier = MODIFIER_ALIASES[part]
        elif part in VK_CODES:
            if key is not None:
                raise ValueError(f"Multiple keys found in shortcut: {shortcut!r}")
            key = part
        else:
            raise ValueError(f"Unknown key in shortcut: {part} (from {shortcut!r})")

    if modifier is None:
        raise ValueError(f"No modifier found in shortcut: {shortcut!r}")
    if key is None:
        raise ValueError(f"No letter key found in shortcut: {shortcut!r}")

    return HotkeyBinding(modifier, key)
