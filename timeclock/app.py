"""
Tray application coordinating the engine, the session monitor and the views.
"""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QApplication, QMenu, QMessageBox, QStyle, QSystemTrayIcon

from timeclock import logger as app_logger
from timeclock.adapter import APP_NAME, PresentationAdapter
from timeclock.detail_window import DetailWindow
from timeclock.engine import InvalidArgumentError, TimekeepingEngine
from timeclock.notification_popup import ReminderPopup
from timeclock.session_monitor import SessionMonitor
from timeclock.settings import ClockSettings

STARTUP_MESSAGE_MS = 5000
SHUTDOWN_JOIN_SECONDS = 2.0


class ClockCoordinator(QObject):
    """Owns the tray surface and routes events between the engine and the UI."""

    def __init__(
        self,
        engine: TimekeepingEngine,
        settings: Optional[ClockSettings] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._logger = app_logger.get_logger()
        self._engine = engine
        self._settings = settings or ClockSettings()
        self._manual_shutdown_requested = False

        self._adapter = PresentationAdapter(engine, self)
        self._session_monitor = SessionMonitor(self._settings.session_check_interval_ms, self)
        self._detail = DetailWindow(APP_NAME, self._adapter.current_interval_minutes())
        self._popup = ReminderPopup(self._settings.reminder_display_ms)

        self._tray = QSystemTrayIcon(self)
        self._tray.setIcon(QApplication.style().standardIcon(QStyle.StandardPixmap.SP_ComputerIcon))
        self._tray.setToolTip(f"{APP_NAME} - {self._adapter.current_simple_text()}")

        self._menu = QMenu()
        self._elapsed_action = QAction(self._adapter.current_simple_text(), self._menu)
        self._elapsed_action.setEnabled(False)
        open_action = QAction("Open", self._menu)
        exit_action = QAction("Exit", self._menu)
        self._menu.addAction(self._elapsed_action)
        self._menu.addSeparator()
        self._menu.addAction(open_action)
        self._menu.addAction(exit_action)
        self._tray.setContextMenu(self._menu)

        self._menu.aboutToShow.connect(self._refresh_menu)
        open_action.triggered.connect(self.open_details)
        exit_action.triggered.connect(self.shutdown)
        self._tray.activated.connect(self._on_tray_activated)

        self._adapter.elapsedTextChanged.connect(self._on_elapsed_text)
        self._adapter.detailTextChanged.connect(self._detail.set_details)
        self._adapter.reminderReady.connect(self._show_reminder)
        self._session_monitor.lockChanged.connect(self._engine.on_session_lock_changed)
        self._detail.intervalSubmitted.connect(self._on_interval_submitted)
        self._popup.openRequested.connect(self.open_details)

    @property
    def manual_shutdown_requested(self) -> bool:
        return self._manual_shutdown_requested

    def start(self) -> None:
        self._logger.info("Starting {} coordinator.", APP_NAME)
        self._adapter.attach()
        self._detail.set_details(self._adapter.detail_text())
        self._tray.show()
        if self._settings.show_startup_message:
            title, message = self._adapter.startup_message()
            self._tray.showMessage(title, message, QSystemTrayIcon.MessageIcon.Information, STARTUP_MESSAGE_MS)
        self._session_monitor.start()
        self._engine.start()

    def shutdown(self) -> None:
        if self._manual_shutdown_requested:
            return
        self._logger.info("Shutting down on user request.")
        self._manual_shutdown_requested = True
        self._session_monitor.stop()
        self._engine.shutdown()
        if not self._engine.join(SHUTDOWN_JOIN_SECONDS):
            self._logger.warning("Engine worker did not stop within {}s.", SHUTDOWN_JOIN_SECONDS)
        self._adapter.detach()
        self._popup.hide()
        self._detail.hide()
        self._tray.hide()
        app = QApplication.instance()
        if app is not None:
            app.quit()

    def open_details(self) -> None:
        self._detail.set_details(self._adapter.detail_text())
        self._detail.open()

    def _refresh_menu(self) -> None:
        self._elapsed_action.setText(self._adapter.current_simple_text())

    def _on_tray_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.DoubleClick:
            self.open_details()

    def _on_elapsed_text(self, text: str) -> None:
        self._tray.setToolTip(f"{APP_NAME} - {text}")

    def _show_reminder(self, title: str, message: str) -> None:
        if self._settings.popup_reminders or not QSystemTrayIcon.supportsMessages():
            self._popup.show_reminder(title, message)
            return
        self._tray.showMessage(
            title, message, QSystemTrayIcon.MessageIcon.Information, self._settings.reminder_display_ms
        )

    def _on_interval_submitted(self, minutes: int) -> None:
        try:
            self._engine.set_interval(minutes)
        except InvalidArgumentError as exc:
            self._logger.warning("Rejected reminder interval {!r}: {}", minutes, exc)
            self._detail.set_interval(self._adapter.current_interval_minutes())
            QMessageBox.warning(self._detail, "Invalid Input", str(exc))
