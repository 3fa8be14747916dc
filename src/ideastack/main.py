"""ideastack GUI entrypoint."""

from __future__ import annotations

import sys

from PySide6 import QtCore, QtWidgets

from ideastack.config import IdeastackSettings, load_settings
from ideastack.core.app import build_context
from ideastack.core.overlay import OverlayController
from ideastack.logging import configure_logging, get_logger
from ideastack.ui.dispatch import QtDispatcher
from ideastack.ui.focus import QtFocusArbiter
from ideastack.ui.overlay import OverlayWindow
from ideastack.ui.permission import PermissionPrompt
from ideastack.ui.shell import MainWindow
from ideastack.ui.tray import TrayIcon
from ideastack.utils.process import SingleInstance


def main() -> None:
    settings: IdeastackSettings = load_settings()
    configure_logging(settings)
    logger = get_logger("main")

    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName(settings.app_name)
    app.setQuitOnLastWindowClosed(False)

    with SingleInstance(settings.paths.lock_file):
        dispatcher = QtDispatcher(app)
        ctx = build_context(settings, dispatcher.post)

        overlay = OverlayWindow(settings.overlay, ctx.binding.label)
        arbiter = QtFocusArbiter(settings.overlay.focus_retry_ms, settings.overlay.vertical_anchor)
        controller = OverlayController(overlay, arbiter, ctx.sink, ctx.events, ctx.state)
        overlay.text_changed.connect(controller.set_text)
        overlay.submitted.connect(controller.submit)
        overlay.escaped.connect(controller.escape)
        overlay.hidden.connect(controller.cancel)

        window = MainWindow(settings, ctx.events, ctx.state, ctx.store, ctx.sink)
        prompt = PermissionPrompt(ctx.binding.label, window)
        tray = TrayIcon(ctx.binding.label, app)

        def activate_hotkey() -> bool:
            active = ctx.activate_hotkey(controller.on_hotkey_pressed)
            tray.set_hotkey_active(active)
            return active

        def retry_with_prompt() -> None:
            if not settings.hotkeys.enabled:
                return
            while not activate_hotkey():
                if not prompt.ask(ctx.state.flags.hotkey_error):
                    break

        window.retry_hotkey_requested.connect(retry_with_prompt)
        tray.capture_requested.connect(controller.on_hotkey_pressed)
        tray.show_requested.connect(window.show_notes)
        tray.retry_requested.connect(retry_with_prompt)
        tray.quit_requested.connect(app.quit)
        app.aboutToQuit.connect(ctx.stop)

        window.show()
        tray.show()
        if settings.hotkeys.enabled and not activate_hotkey():
            QtCore.QTimer.singleShot(settings.ui.permission_prompt_delay_ms, retry_with_prompt)

        logger.info(f"ideastack ready ({ctx.binding.label})")
        sys.exit(app.exec())


if __name__ == "__main__":
    main()
