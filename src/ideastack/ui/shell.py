"""Main notes window."""

from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets

from ideastack.config import IdeastackSettings
from ideastack.core.events import (
    HOTKEY_ACTIVE,
    HOTKEY_INACTIVE,
    NOTE_ADDED,
    NOTE_DELETED,
    OVERLAY_FOCUS_CLAIM_FAILED,
    EventBus,
)
from ideastack.core.state import RuntimeState
from ideastack.logging import get_logger
from ideastack.notes.models import Note, category_suggestions
from ideastack.notes.sink import StoreCaptureSink
from ideastack.notes.store import NoteStore
from ideastack.ui.widgets import DayHeader, HotkeyBanner, NoteRow

ALL_CATEGORIES = "all"

PLACEHOLDERS = (
    "capture an idea...",
    "what's on your mind?",
    "jot something down...",
    "quick thought?",
    "brain dump here...",
)


class MainWindow(QtWidgets.QWidget):
    retry_hotkey_requested = QtCore.Signal()

    def __init__(
        self,
        settings: IdeastackSettings,
        events: EventBus,
        state: RuntimeState,
        store: NoteStore,
        sink: StoreCaptureSink,
    ) -> None:
        super().__init__()
        self.settings = settings
        self.events = events
        self.state = state
        self.store = store
        self.sink = sink
        self.logger = get_logger("ui.shell")
        self._placeholder_index = 0

        self._setup_window()
        self._build_layout()
        self._wire_events()
        self._apply_styles()
        self.refresh()

    def _setup_window(self) -> None:
        self.setWindowTitle("ideastack")
        self.setMinimumSize(250, 350)
        self.resize(500, 700)

    def _build_layout(self) -> None:
        outer = QtWidgets.QVBoxLayout(self)
        outer.setContentsMargins(24, 24, 24, 8)
        outer.setSpacing(8)

        self.banner = HotkeyBanner(self)
        outer.addWidget(self.banner)

        self.entry = QtWidgets.QLineEdit()
        self.entry.setObjectName("Entry")
        self.entry.setPlaceholderText(PLACEHOLDERS[0])
        outer.addWidget(self.entry)

        self.suggestions = QtWidgets.QListWidget()
        self.suggestions.setObjectName("Suggestions")
        self.suggestions.setMaximumHeight(110)
        self.suggestions.hide()
        outer.addWidget(self.suggestions)

        outer.addLayout(self._build_filter())

        self.scroll = QtWidgets.QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.scroll.setFrameShape(QtWidgets.QFrame.Shape.NoFrame)
        self.list_host = QtWidgets.QWidget()
        self.list_layout = QtWidgets.QVBoxLayout(self.list_host)
        self.list_layout.setContentsMargins(0, 0, 0, 0)
        self.list_layout.setSpacing(4)
        self.scroll.setWidget(self.list_host)
        outer.addWidget(self.scroll, 1)

        outer.addWidget(self._build_status_strip())

    def _build_filter(self) -> QtWidgets.QLayout:
        layout = QtWidgets.QHBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(QtWidgets.QLabel("category"))
        self.category_filter = QtWidgets.QComboBox()
        self.category_filter.setObjectName("CategoryFilter")
        layout.addWidget(self.category_filter)
        layout.addStretch(1)
        return layout

    def _build_status_strip(self) -> QtWidgets.QWidget:
        widget = QtWidgets.QFrame()
        widget.setObjectName("StatusStrip")
        layout = QtWidgets.QHBoxLayout(widget)
        layout.setContentsMargins(4, 4, 4, 4)

        self.count_label = QtWidgets.QLabel()
        layout.addWidget(self.count_label)
        layout.addStretch(1)
        self.status_label = QtWidgets.QLabel("ready")
        layout.addWidget(self.status_label)
        return widget

    def _wire_events(self) -> None:
        self.entry.returnPressed.connect(self._add_from_entry)
        self.entry.textChanged.connect(self._update_suggestions)
        self.suggestions.itemActivated.connect(self._apply_suggestion)
        self.category_filter.currentTextChanged.connect(lambda _: self._render_notes())
        self.banner.retry_requested.connect(self.retry_hotkey_requested.emit)

        self.events.subscribe(NOTE_ADDED, self._on_notes_changed)
        self.events.subscribe(NOTE_DELETED, self._on_notes_changed)
        self.events.subscribe(HOTKEY_ACTIVE, self._on_hotkey_active)
        self.events.subscribe(HOTKEY_INACTIVE, self._on_hotkey_inactive)
        self.events.subscribe(OVERLAY_FOCUS_CLAIM_FAILED, self._on_focus_claim_failed)

        self._placeholder_timer = QtCore.QTimer(self)
        self._placeholder_timer.timeout.connect(self._cycle_placeholder)
        self._placeholder_timer.start(3000)

    def _apply_styles(self) -> None:
        if self.settings.ui.theme == "dark":
            text = "#f5f5f5"
            muted = "#8a8a8a"
            bg_color = "#000000"
            surface = "#111111"
            border = "rgba(255, 255, 255, 0.15)"
        else:
            text = "#111111"
            muted = "#7a7a7a"
            bg_color = "#ffffff"
            surface = "#f4f4f4"
            border = "rgba(0, 0, 0, 0.12)"

        self.setStyleSheet(
            f"""
            QWidget {{ background-color: {bg_color}; color: {text}; }}
            QLineEdit#Entry {{
                font-size: 18px; padding: 8px 4px; border: none;
                border-bottom: 1px solid {border};
            }}
            QListWidget#Suggestions {{ background-color: {surface}; border: 1px solid {border}; }}
            QLabel#DayHeader {{ color: {muted}; padding-top: 14px; }}
            QFrame#NoteRow {{ border-radius: 4px; }}
            QFrame#NoteRow:hover {{ background-color: {surface}; }}
            QLabel#NoteCategory, QLabel#NoteTime {{ color: {muted}; }}
            QFrame#HotkeyBanner {{ background-color: #5a3b00; border-radius: 4px; }}
            QFrame#HotkeyBanner QLabel {{ background-color: transparent; color: #ffe2a8; }}
            QFrame#StatusStrip QLabel {{ color: {muted}; font-size: 11px; }}
            """
        )

    def refresh(self) -> None:
        current = self.category_filter.currentText() or ALL_CATEGORIES
        self.category_filter.blockSignals(True)
        self.category_filter.clear()
        self.category_filter.addItems([ALL_CATEGORIES, *self.store.categories()])
        index = self.category_filter.findText(current)
        self.category_filter.setCurrentIndex(max(index, 0))
        self.category_filter.blockSignals(False)
        self._render_notes()

    def _render_notes(self) -> None:
        while self.list_layout.count():
            item = self.list_layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()

        selected = self.category_filter.currentText()
        category = None if selected in ("", ALL_CATEGORIES) else selected
        groups = self.store.grouped_by_day(category=category)

        if not groups:
            empty = QtWidgets.QLabel("nothing captured yet")
            empty.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
            self.list_layout.addWidget(empty)
        for label, notes in groups:
            self.list_layout.addWidget(DayHeader(label, len(notes)))
            for note in notes:
                row = NoteRow(note)
                row.delete_requested.connect(self._delete_note)
                self.list_layout.addWidget(row)
        self.list_layout.addStretch(1)

        total = len(self.store.notes)
        self.count_label.setText(f"{total} idea{'s' if total != 1 else ''}")

    def _add_from_entry(self) -> None:
        text = self.entry.text()
        if not text.strip():
            self.status_label.setText("type something first")
            return
        if self.suggestions.isVisible() and self.suggestions.currentItem():
            self._apply_suggestion(self.suggestions.currentItem())
            text = self.entry.text()
        self.sink.commit(text)
        self.entry.clear()
        self._cycle_placeholder()

    def _update_suggestions(self, text: str) -> None:
        matches = category_suggestions(text, self.store.categories())
        self.suggestions.clear()
        if not matches:
            self.suggestions.hide()
            return
        self.suggestions.addItems(matches)
        self.suggestions.setCurrentRow(0)
        self.suggestions.show()

    def _apply_suggestion(self, item: QtWidgets.QListWidgetItem) -> None:
        head = self.entry.text().rsplit(":", 1)[0]
        self.entry.setText(f"{head}:{item.text()}")
        self.suggestions.hide()
        self.entry.setFocus()

    def _delete_note(self, note: Note) -> None:
        if self.store.delete(note.id):
            self.status_label.setText("deleted")

    def _cycle_placeholder(self) -> None:
        self._placeholder_index += 1
        self.entry.setPlaceholderText(PLACEHOLDERS[self._placeholder_index % len(PLACEHOLDERS)])

    def _on_notes_changed(self, _payload) -> None:
        self.refresh()

    def _on_hotkey_active(self, binding) -> None:
        self.banner.hide()
        self.status_label.setText(f"{binding.label} to capture")

    def _on_hotkey_inactive(self, reason: str) -> None:
        self.banner.show_message(reason)
        self.status_label.setText("hotkey inactive")

    def _on_focus_claim_failed(self, _cycle) -> None:
        self.status_label.setText("click the overlay to type")

    @QtCore.Slot()
    def show_notes(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # noqa: N802
        # The capture overlay keeps working with the window closed.
        event.ignore()
        self.hide()
