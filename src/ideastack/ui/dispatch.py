"""Marshal callables onto the Qt main thread."""

from __future__ import annotations

from collections.abc import Callable

from PySide6 import QtCore

from ideastack.logging import get_logger

logger = get_logger("dispatch")


class QtDispatcher(QtCore.QObject):
    """Queue callables on the thread this object lives on.

    ``post`` may be called from any thread. The queued connection delivers
    each callable through the Qt event loop in the order it was posted.
    """

    _posted = QtCore.Signal(object)

    def __init__(self, parent: QtCore.QObject | None = None) -> None:
        super().__init__(parent)
        self._posted.connect(self._run, QtCore.Qt.ConnectionType.QueuedConnection)

    def post(self, fn: Callable[[], None]) -> None:
        self._posted.emit(fn)

    @QtCore.Slot(object)
    def _run(self, fn: Callable[[], None]) -> None:
        try:
            fn()
        except Exception:
            logger.exception("Posted UI callback failed")
