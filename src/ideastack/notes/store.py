"""JSON-backed note store."""

from __future__ import annotations

import os
import threading
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from itertools import groupby
from pathlib import Path
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from ideastack.core.events import NOTE_ADDED, NOTE_DELETED, EventBus
from ideastack.logging import get_logger
from ideastack.notes.models import Note

_NOTES = TypeAdapter(list[Note])


def day_label(day: date, today: date) -> str:
    if day == today:
        return "today"
    if day == today - timedelta(days=1):
        return "yesterday"
    return f"{day:%A}, {day:%b} {day.day}".lower()


def group_by_day(notes: Iterable[Note], now: datetime | None = None) -> list[tuple[str, list[Note]]]:
    """Newest first, one group per local calendar day."""
    now = now or datetime.now().astimezone()
    today = now.date()
    ordered = sorted(notes, key=lambda note: note.timestamp, reverse=True)
    return [
        (day_label(day, today), list(items))
        for day, items in groupby(ordered, key=lambda note: note.timestamp.astimezone(now.tzinfo).date())
    ]


class NoteStore:
    def __init__(
        self,
        path: Path,
        default_categories: Iterable[str] = (),
        events: EventBus | None = None,
    ) -> None:
        self.path = path
        self.events = events
        self.logger = get_logger("notes")
        self._default_categories = [name.lower() for name in default_categories]
        self._notes: list[Note] = []
        self._lock = threading.RLock()
        self.load()

    @property
    def notes(self) -> list[Note]:
        with self._lock:
            return list(self._notes)

    def load(self) -> None:
        with self._lock:
            if not self.path.exists():
                self._notes = []
                return
            try:
                self._notes = _NOTES.validate_json(self.path.read_bytes())
            except ValidationError as exc:
                backup = self.path.with_name(self.path.name + ".corrupt")
                self.logger.error(f"Unreadable note file {self.path}, moved to {backup}: {exc}")
                os.replace(self.path, backup)
                self._notes = []
            self.logger.debug(f"Loaded {len(self._notes)} notes from {self.path}")

    def add(self, note: Note) -> Note:
        with self._lock:
            notes = [*self._notes, note]
            self._save(notes)
            self._notes = notes
        if self.events:
            self.events.emit(NOTE_ADDED, note)
        return note

    def delete(self, note_id: UUID) -> bool:
        with self._lock:
            remaining = [note for note in self._notes if note.id != note_id]
            if len(remaining) == len(self._notes):
                return False
            self._save(remaining)
            self._notes = remaining
        if self.events:
            self.events.emit(NOTE_DELETED, note_id)
        return True

    def filter(self, category: str | None = None) -> list[Note]:
        if not category:
            return self.notes
        wanted = category.lower()
        return [note for note in self.notes if note.category == wanted]

    def grouped_by_day(
        self, now: datetime | None = None, category: str | None = None
    ) -> list[tuple[str, list[Note]]]:
        return group_by_day(self.filter(category), now)

    def categories(self) -> list[str]:
        used = {note.category for note in self.notes}
        return sorted(used.union(self._default_categories))

    def seed_samples(self) -> None:
        """Populate an empty store with a few example notes."""
        if self.notes:
            return
        now = datetime.now().astimezone()
        yesterday = now - timedelta(days=1)
        for text, category, stamp in (
            ("make button bigger", "work", now),
            ("call mom about dinner", "personal", now),
            ("try react query", "work", now),
            ("dark mode research", "work", yesterday),
            ("book dentist", "personal", yesterday),
        ):
            self.add(Note(text=text, category=category, timestamp=stamp))

    def _save(self, notes: list[Note]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_bytes(_NOTES.dump_json(notes, indent=2))
        os.replace(tmp, self.path)
