"""ideastack application composition root."""

from __future__ import annotations

from dataclasses import dataclass

from ideastack.config import IdeastackSettings
from ideastack.core.events import HOTKEY_ACTIVE, HOTKEY_INACTIVE, EventBus
from ideastack.core.state import RuntimeState
from ideastack.logging import get_logger
from ideastack.notes.sink import StoreCaptureSink
from ideastack.notes.store import NoteStore
from ideastack.services.hotkeys import (
    Dispatcher,
    HotkeyBackend,
    HotkeyCallback,
    HotkeyConflictError,
    HotkeyHandle,
    HotkeyPermissionError,
    HotkeyRegistry,
    create_backend,
)
from ideastack.utils.hotkey_parser import HotkeyBinding, parse_binding


@dataclass(slots=True)
class IdeastackContext:
    settings: IdeastackSettings
    events: EventBus
    state: RuntimeState
    store: NoteStore
    sink: StoreCaptureSink
    binding: HotkeyBinding
    hotkeys: HotkeyRegistry
    handle: HotkeyHandle | None = None

    def activate_hotkey(self, on_match: HotkeyCallback) -> bool:
        """Register the global binding, or record why the hotkey is inactive.

        Safe to call repeatedly; used again after the user grants permission.
        """
        logger = get_logger("bootstrap")
        if not self.settings.hotkeys.enabled:
            self._mark_inactive("hotkey disabled in settings")
            return False
        if self.hotkeys.active:
            return True

        try:
            self.handle = self.hotkeys.register(self.binding, on_match)
        except HotkeyPermissionError as exc:
            logger.warning(f"Global hotkey unavailable, permission missing: {exc}")
            self._mark_inactive(
                f"{self.binding.label} needs permission to capture keystrokes system-wide"
            )
            return False
        except HotkeyConflictError as exc:
            logger.warning(f"Global hotkey unavailable: {exc}")
            self._mark_inactive(str(exc))
            return False

        self.state.flags.hotkey_active = True
        self.state.flags.hotkey_error = None
        self.events.emit(HOTKEY_ACTIVE, self.binding)
        return True

    def deactivate_hotkey(self) -> None:
        self.hotkeys.unregister(self.handle)
        self.handle = None
        self.state.flags.hotkey_active = False

    def stop(self) -> None:
        self.deactivate_hotkey()

    def _mark_inactive(self, reason: str) -> None:
        self.state.flags.hotkey_active = False
        self.state.flags.hotkey_error = reason
        self.events.emit(HOTKEY_INACTIVE, reason)


def build_context(
    settings: IdeastackSettings,
    dispatch: Dispatcher,
    backend: HotkeyBackend | None = None,
) -> IdeastackContext:
    events = EventBus()
    state = RuntimeState()
    store = NoteStore(settings.paths.notes_file, settings.notes.default_categories, events)
    if settings.notes.seed_samples:
        store.seed_samples()
    sink = StoreCaptureSink(store, settings.notes.default_category)
    hotkeys = HotkeyRegistry(backend or create_backend(settings.hotkeys), dispatch)

    logger = get_logger("bootstrap")
    logger.info(f"ideastack context ready ({len(store.notes)} notes, backend={hotkeys.backend.name})")

    return IdeastackContext(
        settings=settings,
        events=events,
        state=state,
        store=store,
        sink=sink,
        binding=parse_binding(settings.hotkeys.shortcut),
        hotkeys=hotkeys,
    )
