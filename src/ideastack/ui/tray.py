"""System tray entry point for the background process."""

from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets


class TrayIcon(QtWidgets.QSystemTrayIcon):
    capture_requested = QtCore.Signal()
    show_requested = QtCore.Signal()
    retry_requested = QtCore.Signal()
    quit_requested = QtCore.Signal()

    def __init__(self, hotkey_label: str, parent: QtCore.QObject | None = None) -> None:
        icon = QtWidgets.QApplication.style().standardIcon(
            QtWidgets.QStyle.StandardPixmap.SP_FileDialogDetailedView
        )
        super().__init__(icon, parent)
        self.setToolTip(f"ideastack ({hotkey_label} to capture)")

        menu = QtWidgets.QMenu()
        menu.addAction(f"capture ({hotkey_label})", self.capture_requested.emit)
        menu.addAction("show notes", self.show_requested.emit)
        self.retry_action = menu.addAction("retry hotkey", self.retry_requested.emit)
        menu.addSeparator()
        menu.addAction("quit", self.quit_requested.emit)
        self._menu = menu
        self.setContextMenu(menu)

        self.activated.connect(self._on_activated)

    def set_hotkey_active(self, active: bool) -> None:
        self.retry_action.setVisible(not active)

    def _on_activated(self, reason: QtWidgets.QSystemTrayIcon.ActivationReason) -> None:
        if reason == QtWidgets.QSystemTrayIcon.ActivationReason.Trigger:
            self.show_requested.emit()
