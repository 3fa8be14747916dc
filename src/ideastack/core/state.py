"""Runtime state containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OverlayState(str, Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"


@dataclass(slots=True)
class RuntimeFlags:
    overlay_state: OverlayState = OverlayState.HIDDEN
    hotkey_active: bool = False
    hotkey_error: str | None = None


@dataclass(slots=True)
class RuntimeState:
    flags: RuntimeFlags = field(default_factory=RuntimeFlags)
