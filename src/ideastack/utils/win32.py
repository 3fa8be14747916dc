"""Lightweight Win32 helpers for the overlay surface."""

from __future__ import annotations

import ctypes

from PySide6 import QtWidgets

user32 = ctypes.windll.user32
SetWindowLong = user32.SetWindowLongW
GetWindowLong = user32.GetWindowLongW

GWL_EXSTYLE = -20
WS_EX_TOOLWINDOW = 0x00000080
WS_EX_APPWINDOW = 0x00040000


def _hwnd(widget: QtWidgets.QWidget) -> int:
    return int(widget.winId())


def hide_from_task_switcher(widget: QtWidgets.QWidget) -> None:
    """Keep the overlay out of the taskbar and Alt+Tab."""
    hwnd = _hwnd(widget)
    style = GetWindowLong(hwnd, GWL_EXSTYLE)
    style = (style | WS_EX_TOOLWINDOW) & ~WS_EX_APPWINDOW
    SetWindowLong(hwnd, GWL_EXSTYLE, style)
