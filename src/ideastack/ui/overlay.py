"""Quick-capture overlay surface."""

from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets

from ideastack.config import OverlaySettings
from ideastack.ui.focus import OVERLAY_FLAGS

OVERLAY_STYLE = """
QFrame#OverlayPanel {
    background-color: rgba(0, 0, 0, 245);
    border-radius: 6px;
}
QLineEdit#OverlayField {
    color: #ffffff;
    font-size: 16px;
    padding: 10px 14px;
    border: 1px solid rgba(255, 255, 255, 100);
    border-radius: 2px;
    background-color: rgba(255, 255, 255, 40);
}
QLineEdit#OverlayField:focus {
    border: 1px solid rgba(255, 255, 255, 160);
}
QLabel#OverlayHint {
    color: rgba(255, 255, 255, 100);
    font-size: 11px;
}
"""


class OverlayWindow(QtWidgets.QWidget):
    """Borderless single-field panel; visibility is driven by the controller."""

    text_changed = QtCore.Signal(str)
    submitted = QtCore.Signal()
    escaped = QtCore.Signal()
    hidden = QtCore.Signal()

    def __init__(self, settings: OverlaySettings, hotkey_label: str) -> None:
        super().__init__(None, OVERLAY_FLAGS)
        self.setObjectName("Overlay")
        self.setAttribute(QtCore.Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setAttribute(QtCore.Qt.WidgetAttribute.WA_ShowWithoutActivating)
        self.setFixedSize(settings.width, settings.height)

        outer = QtWidgets.QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)

        panel = QtWidgets.QFrame()
        panel.setObjectName("OverlayPanel")
        layout = QtWidgets.QVBoxLayout(panel)
        layout.setContentsMargins(30, 24, 30, 14)
        layout.setSpacing(10)

        self._field = QtWidgets.QLineEdit()
        self._field.setObjectName("OverlayField")
        self._field.setPlaceholderText(settings.placeholder)
        self._field.setFrame(False)
        self._field.setAttribute(QtCore.Qt.WidgetAttribute.WA_MacShowFocusRect, False)
        self._field.installEventFilter(self)
        layout.addWidget(self._field)

        hint = QtWidgets.QLabel(f"enter to save • esc to cancel • {hotkey_label.lower()} to toggle")
        hint.setObjectName("OverlayHint")
        hint.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(hint)

        outer.addWidget(panel)
        self.setStyleSheet(OVERLAY_STYLE)

        self._field.textChanged.connect(self.text_changed.emit)
        self._field.returnPressed.connect(self.submitted.emit)

    @property
    def surface(self) -> QtWidgets.QWidget:
        return self

    @property
    def field(self) -> QtWidgets.QLineEdit:
        return self._field

    def clear_input(self) -> None:
        self._field.clear()

    def eventFilter(self, obj, event) -> bool:  # noqa: N802
        # Escape is consumed here so the line edit never sees it.
        if (
            obj is self._field
            and event.type() in (QtCore.QEvent.Type.KeyPress, QtCore.QEvent.Type.ShortcutOverride)
            and event.key() == QtCore.Qt.Key.Key_Escape
        ):
            if event.type() == QtCore.QEvent.Type.KeyPress:
                self.escaped.emit()
            event.accept()
            return True
        return super().eventFilter(obj, event)

    def hideEvent(self, event: QtGui.QHideEvent) -> None:  # noqa: N802
        # Also fires for closes the controller did not ask for (Alt+F4, window manager).
        super().hideEvent(event)
        self.hidden.emit()

    def keyPressEvent(self, event: QtGui.QKeyEvent) -> None:  # noqa: N802
        if event.key() == QtCore.Qt.Key.Key_Escape:
            self.escaped.emit()
            event.accept()
            return
        super().keyPressEvent(event)
