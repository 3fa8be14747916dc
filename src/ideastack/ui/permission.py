"""Guides the user through granting global input permission."""

from __future__ import annotations

import sys

from PySide6 import QtCore, QtGui, QtWidgets

MACOS_ACCESSIBILITY_URL = "x-apple.systempreferences:com.apple.preference.security?Privacy_Accessibility"


def permission_instructions(hotkey_label: str, platform: str | None = None) -> str:
    platform = platform or sys.platform
    if platform == "darwin":
        return (
            f"ideastack needs permission to capture ideas globally with {hotkey_label}. "
            "Grant it in System Settings > Privacy & Security > Accessibility "
            "and Input Monitoring, and run ideastack with administrator rights."
        )
    if platform == "win32":
        return (
            f"{hotkey_label} could not be registered. Close the application that "
            "uses it or choose another shortcut with IDEASTACK_HOTKEY."
        )
    return (
        f"Capturing {hotkey_label} system-wide needs access to the input devices. "
        "Run ideastack as root (for example with sudo -E) and retry."
    )


class PermissionPrompt:
    """Modal explanation; ``ask`` returns True when the user wants to retry now."""

    def __init__(self, hotkey_label: str, parent: QtWidgets.QWidget | None = None) -> None:
        self.hotkey_label = hotkey_label
        self.parent = parent

    def ask(self, detail: str | None = None) -> bool:
        box = QtWidgets.QMessageBox(self.parent)
        box.setIcon(QtWidgets.QMessageBox.Icon.Information)
        box.setWindowTitle("Permission required")
        box.setText("Global hotkey unavailable")
        box.setInformativeText(permission_instructions(self.hotkey_label))
        if detail:
            box.setDetailedText(detail)

        open_settings = None
        if sys.platform == "darwin":
            open_settings = box.addButton("Open System Settings", QtWidgets.QMessageBox.ButtonRole.ActionRole)
        retry = box.addButton("Retry", QtWidgets.QMessageBox.ButtonRole.AcceptRole)
        box.addButton("Later", QtWidgets.QMessageBox.ButtonRole.RejectRole)
        box.exec()

        clicked = box.clickedButton()
        if open_settings is not None and clicked is open_settings:
            QtGui.QDesktopServices.openUrl(QtCore.QUrl(MACOS_ACCESSIBILITY_URL))
            return False
        return clicked is retry
