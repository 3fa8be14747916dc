"""Overlay lifecycle state machine."""

from __future__ import annotations

from dataclasses import dataclass

from ideastack.core.contracts import CaptureSink, FocusArbiter, OverlayView
from ideastack.core.events import OVERLAY_FOCUS_CLAIM_FAILED, OVERLAY_STATE, EventBus
from ideastack.core.state import OverlayState, RuntimeState
from ideastack.logging import get_logger


@dataclass(slots=True)
class InputBuffer:
    text: str = ""

    def is_blank(self) -> bool:
        return not self.text.strip()


class OverlayController:
    """Single writer of overlay visibility and the input buffer.

    Every public method must be called on the UI-owning context. Hotkey
    presses arrive here already marshaled by the hotkey registry.

    A show is "in flight" from ``present_above_all`` until the arbiter
    reports the focus claim. Hotkey presses in that window are dropped so
    the surface can never be presented twice without a dismiss. Cancel,
    escape and submit are still honoured and abort the pending claim.
    """

    def __init__(
        self,
        view: OverlayView,
        arbiter: FocusArbiter,
        sink: CaptureSink,
        events: EventBus,
        state: RuntimeState | None = None,
    ) -> None:
        self.view = view
        self.arbiter = arbiter
        self.sink = sink
        self.events = events
        self.runtime = state or RuntimeState()
        self.logger = get_logger("overlay")
        self._state = OverlayState.HIDDEN
        self._buffer: InputBuffer | None = None
        self._pending_claim: int | None = None
        self._cycle = 0

    @property
    def state(self) -> OverlayState:
        return self._state

    @property
    def transitioning(self) -> bool:
        return self._pending_claim is not None

    @property
    def buffer_text(self) -> str | None:
        return None if self._buffer is None else self._buffer.text

    def on_hotkey_pressed(self) -> None:
        if self.transitioning:
            self.logger.debug("Hotkey press coalesced: overlay transition in flight")
            return
        if self._state is OverlayState.HIDDEN:
            self._show()
        else:
            self._hide("toggle")

    def set_text(self, text: str) -> None:
        if self._buffer is not None:
            self._buffer.text = text

    def submit(self) -> None:
        if self._state is not OverlayState.VISIBLE or self._buffer is None:
            return
        if self._buffer.is_blank():
            self._hide("empty submit")
            return

        text = self._buffer.text
        try:
            self.sink.commit(text)
        except Exception:
            self.logger.exception("Capture sink failed; note not saved")
        self._hide("submit")

    def cancel(self) -> None:
        if self._state is OverlayState.VISIBLE:
            self._hide("cancel")

    def escape(self) -> None:
        if self._state is OverlayState.VISIBLE:
            self._hide("escape")

    def _show(self) -> None:
        self._cycle += 1
        cycle = self._cycle
        self._pending_claim = cycle
        self._buffer = InputBuffer()
        self.view.clear_input()

        self.arbiter.present_above_all(self.view.surface)
        self._set_state(OverlayState.VISIBLE)
        self.arbiter.claim_keyboard_focus(
            self.view.surface,
            self.view.field,
            lambda granted: self._on_focus_claimed(cycle, granted),
        )

    def _on_focus_claimed(self, cycle: int, granted: bool) -> None:
        if self._pending_claim != cycle:
            return
        self._pending_claim = None
        if not granted:
            # The surface stays up; the user can still click into it.
            self.logger.warning("Keyboard focus not granted to overlay field")
            self.events.emit(OVERLAY_FOCUS_CLAIM_FAILED, cycle)

    def _hide(self, reason: str) -> None:
        self._pending_claim = None
        self._buffer = None
        self.view.clear_input()
        # State flips first: dismissing may re-enter through the view's hide notification.
        self._set_state(OverlayState.HIDDEN)
        self.arbiter.dismiss(self.view.surface)
        self.logger.debug(f"Overlay hidden ({reason})")

    def _set_state(self, new_state: OverlayState) -> None:
        self._state = new_state
        self.runtime.flags.overlay_state = new_state
        self.events.emit(OVERLAY_STATE, new_state)
