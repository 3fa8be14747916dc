"""Reusable UI components."""

from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets

from ideastack.notes.models import Note


class DayHeader(QtWidgets.QLabel):
    def __init__(self, label: str, count: int, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(f"{label}  ·  {count}", parent)
        self.setObjectName("DayHeader")
        font = QtGui.QFont()
        font.setPointSize(10)
        font.setBold(True)
        self.setFont(font)


class NoteRow(QtWidgets.QFrame):
    """One captured note with its time and category."""

    delete_requested = QtCore.Signal(object)

    def __init__(self, note: Note, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.note = note
        self.setObjectName("NoteRow")
        self.setContextMenuPolicy(QtCore.Qt.ContextMenuPolicy.CustomContextMenu)
        self.customContextMenuRequested.connect(self._show_menu)

        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(8, 4, 8, 4)
        layout.setSpacing(10)

        text = QtWidgets.QLabel(note.text)
        text.setObjectName("NoteText")
        text.setWordWrap(True)
        text.setTextInteractionFlags(QtCore.Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(text, 1)

        category = QtWidgets.QLabel(f":{note.category}")
        category.setObjectName("NoteCategory")
        layout.addWidget(category)

        stamp = QtWidgets.QLabel(note.timestamp.astimezone().strftime("%H:%M"))
        stamp.setObjectName("NoteTime")
        layout.addWidget(stamp)

    def _show_menu(self, pos: QtCore.QPoint) -> None:
        menu = QtWidgets.QMenu(self)
        delete = menu.addAction("delete")
        if menu.exec(self.mapToGlobal(pos)) is delete:
            self.delete_requested.emit(self.note)


class HotkeyBanner(QtWidgets.QFrame):
    """Shown while the global hotkey is not registered."""

    retry_requested = QtCore.Signal()

    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("HotkeyBanner")
        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(10, 6, 10, 6)

        self.label = QtWidgets.QLabel()
        self.label.setWordWrap(True)
        layout.addWidget(self.label, 1)

        self.btn_retry = QtWidgets.QPushButton("retry")
        self.btn_retry.setObjectName("BannerButton")
        self.btn_retry.clicked.connect(self.retry_requested.emit)
        layout.addWidget(self.btn_retry)
        self.hide()

    def show_message(self, message: str) -> None:
        self.label.setText(f"hotkey inactive: {message}")
        self.show()
