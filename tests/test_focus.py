import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6 import QtWidgets
from PySide6.QtTest import QTest

from ideastack.config import OverlaySettings
from ideastack.core.overlay import OverlayController
from ideastack.core.state import OverlayState
from ideastack.ui.focus import QtFocusArbiter
from ideastack.ui.overlay import OverlayWindow

RETRIES = (0, 5, 20)


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    app.setQuitOnLastWindowClosed(False)
    yield app


@pytest.fixture
def panel(qapp):
    surface = QtWidgets.QWidget()
    surface.resize(400, 80)
    field = QtWidgets.QLineEdit(surface)
    yield surface, field
    surface.hide()
    surface.deleteLater()


def test_refused_claim_reports_once_after_last_retry(panel):
    surface, field = panel
    field.setEnabled(False)
    arbiter = QtFocusArbiter(RETRIES)
    results = []

    arbiter.present_above_all(surface)
    arbiter.claim_keyboard_focus(surface, field, results.append)
    assert results == []

    QTest.qWait(150)
    assert results == [False]
    assert surface.isVisible()


def test_claim_completes_exactly_once(panel):
    surface, field = panel
    arbiter = QtFocusArbiter(RETRIES)
    results = []

    arbiter.present_above_all(surface)
    arbiter.claim_keyboard_focus(surface, field, results.append)
    QTest.qWait(150)

    assert len(results) == 1


def test_dismiss_during_claim_cancels_callback(panel):
    surface, field = panel
    field.setEnabled(False)
    arbiter = QtFocusArbiter(RETRIES)
    results = []

    arbiter.present_above_all(surface)
    arbiter.claim_keyboard_focus(surface, field, results.append)
    arbiter.dismiss(surface)
    QTest.qWait(150)

    assert results == []
    assert not surface.isVisible()


def test_surface_closed_during_claim_ends_claim(panel):
    surface, field = panel
    field.setEnabled(False)
    arbiter = QtFocusArbiter(RETRIES)
    results = []

    arbiter.present_above_all(surface)
    arbiter.claim_keyboard_focus(surface, field, results.append)
    surface.close()
    QTest.qWait(150)

    assert results == [False]


@pytest.fixture
def overlay_setup(qapp, sink, events):
    overlay = OverlayWindow(OverlaySettings(focus_retry_ms=list(RETRIES)), "Alt+S")
    arbiter = QtFocusArbiter(RETRIES)
    controller = OverlayController(overlay, arbiter, sink, events)
    overlay.text_changed.connect(controller.set_text)
    overlay.submitted.connect(controller.submit)
    overlay.escaped.connect(controller.escape)
    overlay.hidden.connect(controller.cancel)
    yield overlay, controller
    overlay.hide()
    overlay.deleteLater()


def test_closing_overlay_returns_controller_to_hidden(overlay_setup):
    overlay, controller = overlay_setup

    controller.on_hotkey_pressed()
    assert controller.state is OverlayState.VISIBLE
    overlay.close()

    assert controller.state is OverlayState.HIDDEN
    assert not controller.transitioning
    QTest.qWait(100)

    controller.on_hotkey_pressed()
    assert controller.state is OverlayState.VISIBLE
    assert overlay.isVisible()


def test_closing_after_claim_does_not_eat_next_press(overlay_setup):
    overlay, controller = overlay_setup

    controller.on_hotkey_pressed()
    QTest.qWait(100)
    assert not controller.transitioning
    overlay.close()

    controller.on_hotkey_pressed()
    assert controller.state is OverlayState.VISIBLE


def test_overlay_submit_and_escape_alternate_cleanly(overlay_setup, sink, transitions):
    overlay, controller = overlay_setup

    controller.on_hotkey_pressed()
    QTest.qWait(100)
    overlay.field.setText("buy milk")
    overlay.field.returnPressed.emit()

    controller.on_hotkey_pressed()
    QTest.qWait(100)
    controller.escape()

    assert sink.commits == ["buy milk"]
    assert not overlay.isVisible()
    assert transitions == [
        OverlayState.VISIBLE,
        OverlayState.HIDDEN,
        OverlayState.VISIBLE,
        OverlayState.HIDDEN,
    ]
