"""Qt implementation of the overlay focus hand-offs."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from PySide6 import QtCore, QtGui, QtWidgets

from ideastack.core.contracts import FocusCallback
from ideastack.logging import get_logger

OVERLAY_FLAGS = (
    QtCore.Qt.WindowType.FramelessWindowHint
    | QtCore.Qt.WindowType.Tool
    | QtCore.Qt.WindowType.WindowStaysOnTopHint
    | QtCore.Qt.WindowType.NoDropShadowWindowHint
)


class QtFocusArbiter:
    """Shows the overlay as a non-activating tool window.

    Focus is requested immediately, then re-asserted after each delay in
    ``retry_ms``; tool windows are often refused focus on the first try.
    Dismissing only hides the surface and leaves focus return to the
    window manager.
    """

    def __init__(self, retry_ms: Sequence[int] = (0, 16, 150), vertical_anchor: float = 0.75) -> None:
        self.retry_ms = list(retry_ms) or [0]
        self.vertical_anchor = vertical_anchor
        self.logger = get_logger("focus")
        self._claim = 0

    def present_above_all(self, surface: QtWidgets.QWidget) -> None:
        if surface.windowFlags() & OVERLAY_FLAGS != OVERLAY_FLAGS:
            surface.setWindowFlags(surface.windowFlags() | OVERLAY_FLAGS)
        surface.setAttribute(QtCore.Qt.WidgetAttribute.WA_ShowWithoutActivating, True)
        surface.setAttribute(QtCore.Qt.WidgetAttribute.WA_MacAlwaysShowToolWindow, True)
        self._place(surface)
        surface.show()
        surface.raise_()
        if sys.platform == "win32":
            from ideastack.utils import win32

            win32.hide_from_task_switcher(surface)

    def claim_keyboard_focus(
        self,
        surface: QtWidgets.QWidget,
        field: QtWidgets.QWidget,
        on_done: FocusCallback,
    ) -> None:
        self._claim += 1
        claim = self._claim
        remaining = list(self.retry_ms)

        def attempt() -> None:
            if claim != self._claim:
                return
            if not surface.isVisible():
                # Closed behind our back (window manager, Alt+F4); the claim still ends.
                self._claim += 1
                on_done(False)
                return
            # Qt only routes keys to an active window, so this makes ideastack the
            # foreground process on Windows while the overlay is up.
            surface.activateWindow()
            field.setFocus(QtCore.Qt.FocusReason.ActiveWindowFocusReason)
            if field.hasFocus():
                self._claim += 1
                on_done(True)
            elif remaining:
                QtCore.QTimer.singleShot(remaining.pop(0), attempt)
            else:
                self._claim += 1
                self.logger.debug(f"Focus claim gave up after {len(self.retry_ms)} attempts")
                on_done(False)

        # First attempt runs synchronously; the configured delays are re-assertions.
        if remaining and remaining[0] == 0:
            remaining.pop(0)
        attempt()

    def dismiss(self, surface: QtWidgets.QWidget) -> None:
        self._claim += 1
        surface.hide()

    def _place(self, surface: QtWidgets.QWidget) -> None:
        screen = QtGui.QGuiApplication.screenAt(QtGui.QCursor.pos()) or QtGui.QGuiApplication.primaryScreen()
        if screen is None:
            return
        area = screen.geometry()
        x = area.x() + (area.width() - surface.width()) // 2
        # vertical_anchor is measured from the bottom edge.
        y = area.y() + int(area.height() * (1.0 - self.vertical_anchor)) - surface.height() // 2
        surface.move(x, max(area.y(), y))
