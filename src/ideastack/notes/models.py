"""Note model and category parsing."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

DEFAULT_CATEGORY = "random"


def _now() -> datetime:
    return datetime.now().astimezone()


class Note(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    text: str
    timestamp: datetime = Field(default_factory=_now)
    category: str = DEFAULT_CATEGORY
    context: str | None = None


def parse_category(text: str, default: str = DEFAULT_CATEGORY) -> tuple[str, str]:
    """Split ``"buy milk: personal"`` into ``("buy milk", "personal")``.

    The category is whatever follows the last colon. When either side is
    empty the text is returned untouched with ``default``.
    """
    parts = text.split(":")
    if len(parts) >= 2:
        category = parts[-1].strip().lower()
        clean = ":".join(parts[:-1]).strip()
        if clean and category:
            return clean, category
    return text, default


def category_suggestions(text: str, categories: Iterable[str]) -> list[str]:
    if ":" not in text:
        return []
    fragment = text.rsplit(":", 1)[1].strip().lower()
    return [name for name in categories if name.lower().startswith(fragment)]
