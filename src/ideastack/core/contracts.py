"""Interfaces the overlay state machine depends on."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

FocusCallback = Callable[[bool], None]


class FocusArbiter(Protocol):
    """Window-level operations that show the overlay without stealing focus.

    ``surface`` and ``field`` are opaque handles; implementations never read
    the text being composed.
    """

    def present_above_all(self, surface: Any) -> None:
        """Raise ``surface`` above every window on every desktop, non-activating."""

    def claim_keyboard_focus(self, surface: Any, field: Any, on_done: FocusCallback) -> None:
        """Make ``field`` the keyboard target, re-asserting within a short bounded window.

        ``on_done(granted)`` is called exactly once, unless ``dismiss`` runs first.
        """

    def dismiss(self, surface: Any) -> None:
        """Remove ``surface`` from the window stack without re-focusing anything."""


class CaptureSink(Protocol):
    def commit(self, raw_text: str) -> None: ...


class OverlayView(Protocol):
    """The overlay widget as seen by the controller."""

    @property
    def surface(self) -> Any: ...

    @property
    def field(self) -> Any: ...

    def clear_input(self) -> None: ...
