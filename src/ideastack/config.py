"""Application configuration models and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from ideastack.utils.hotkey_parser import parse_binding


class AppPaths(BaseModel):
    """Resolved directories for ideastack runtime files."""

    base_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("IDEASTACK_HOME", Path.home() / ".ideastack"))
    )

    @property
    def config_dir(self) -> Path:
        return self.base_dir / "config"

    @property
    def logs_dir(self) -> Path:
        return self.base_dir / "logs"

    @property
    def data_dir(self) -> Path:
        return self.base_dir / "data"

    @property
    def notes_file(self) -> Path:
        return self.data_dir / "notes.json"

    @property
    def lock_file(self) -> Path:
        return self.base_dir / "ideastack.lock"

    def ensure(self) -> None:
        for path in (self.base_dir, self.config_dir, self.logs_dir, self.data_dir):
            path.mkdir(parents=True, exist_ok=True)


class HotkeySettings(BaseModel):
    enabled: bool = True
    shortcut: str = "alt+s"
    backend: Literal["auto", "keyboard", "win32"] = "auto"

    @field_validator("shortcut")
    @classmethod
    def _check_shortcut(cls, value: str) -> str:
        parse_binding(value)
        return value.strip().lower()


class OverlaySettings(BaseModel):
    width: int = Field(default=550, ge=200, le=1600)
    height: int = Field(default=120, ge=60, le=400)
    vertical_anchor: float = Field(default=0.75, ge=0.0, le=1.0)
    focus_retry_ms: list[int] = Field(default_factory=lambda: [0, 16, 150])
    placeholder: str = "what's the idea?"

    @field_validator("focus_retry_ms")
    @classmethod
    def _check_retries(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("at least one focus attempt is required")
        if any(delay < 0 or delay > 1000 for delay in value):
            raise ValueError("focus retry delays must be within 0..1000 ms")
        return sorted(value)


class NotesSettings(BaseModel):
    default_category: str = "random"
    default_categories: list[str] = Field(
        default_factory=lambda: ["work", "personal", "random"]
    )
    seed_samples: bool = False


class UISettings(BaseModel):
    theme: Literal["light", "dark"] = "dark"
    permission_prompt_delay_ms: int = Field(default=2000, ge=0, le=60000)


class IdeastackSettings(BaseModel):
    app_name: str = "ideastack"
    paths: AppPaths = Field(default_factory=AppPaths)
    hotkeys: HotkeySettings = Field(default_factory=HotkeySettings)
    overlay: OverlaySettings = Field(default_factory=OverlaySettings)
    notes: NotesSettings = Field(default_factory=NotesSettings)
    ui: UISettings = Field(default_factory=UISettings)


def _maybe_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    lowered = value.lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return None


def load_settings(env_path: Path | None = None) -> IdeastackSettings:
    """Load user settings from environment variables and defaults."""

    env_file = env_path or Path(".env")
    if env_file.exists():
        load_dotenv(env_file)

    overrides: dict[str, Any] = {}

    if shortcut := os.getenv("IDEASTACK_HOTKEY"):
        overrides.setdefault("hotkeys", {})["shortcut"] = shortcut

    if backend := os.getenv("IDEASTACK_HOTKEY_BACKEND"):
        overrides.setdefault("hotkeys", {})["backend"] = backend.lower()

    if theme := os.getenv("IDEASTACK_THEME"):
        overrides.setdefault("ui", {})["theme"] = theme.lower()

    if (seed := _maybe_bool(os.getenv("IDEASTACK_SEED_SAMPLES"))) is not None:
        overrides.setdefault("notes", {})["seed_samples"] = seed

    settings = IdeastackSettings(**overrides)
    settings.paths.ensure()
    return settings
