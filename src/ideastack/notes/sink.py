"""CaptureSink that turns overlay text into stored notes."""

from __future__ import annotations

from ideastack.logging import get_logger
from ideastack.notes.models import DEFAULT_CATEGORY, Note, parse_category
from ideastack.notes.store import NoteStore


class StoreCaptureSink:
    def __init__(self, store: NoteStore, default_category: str = DEFAULT_CATEGORY) -> None:
        self.store = store
        self.default_category = default_category
        self.logger = get_logger("capture")

    def commit(self, raw_text: str) -> None:
        text = raw_text.strip()
        if not text:
            return
        clean, category = parse_category(text, self.default_category)
        try:
            note = self.store.add(Note(text=clean, category=category))
        except OSError as exc:
            self.logger.error(f"Could not persist note: {exc}")
            return
        self.logger.info(f"Captured note [{note.category}] ({len(note.text)} chars)")
