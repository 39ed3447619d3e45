"""
Detail view showing clock-in time and elapsed time, with the reminder interval editor.
"""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

INVALID_INTERVAL_MESSAGE = "Notification Interval must be an integer greater than 0."


def parse_interval_text(text: str) -> Optional[int]:
    """Return the interval in minutes, or None unless the text is a whole number above zero."""
    try:
        value = int(text.strip())
    except ValueError:
        return None
    return value if value > 0 else None


class DetailWindow(QWidget):
    """Small fixed-size window; closing it only hides it."""

    intervalSubmitted = Signal(int)

    def __init__(self, title: str, interval_minutes: int, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setWindowFlag(Qt.WindowType.MSWindowsFixedSizeDialogHint, True)
        self._interval_minutes = interval_minutes
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setSpacing(10)

        self._output_label = QLabel()
        self._output_label.setObjectName("output")
        layout.addWidget(self._output_label)

        interval_row = QHBoxLayout()
        interval_row.addWidget(QLabel("Notification interval (minutes):"))
        self._interval_edit = QLineEdit(str(self._interval_minutes))
        self._interval_edit.setMaximumWidth(80)
        self._interval_edit.returnPressed.connect(self._on_ok)  # type: ignore[arg-type]
        interval_row.addWidget(self._interval_edit)
        self._ok_button = QPushButton("OK")
        self._ok_button.clicked.connect(self._on_ok)  # type: ignore[arg-type]
        interval_row.addWidget(self._ok_button)
        layout.addLayout(interval_row)

    @property
    def details(self) -> str:
        return self._output_label.text()

    @property
    def interval_text(self) -> str:
        return self._interval_edit.text()

    def set_details(self, text: str) -> None:
        self._output_label.setText(text)

    def set_interval_text(self, text: str) -> None:
        self._interval_edit.setText(text)

    def set_interval(self, minutes: int) -> None:
        self._interval_minutes = minutes
        self._interval_edit.setText(str(minutes))

    def open(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    def _on_ok(self) -> None:
        minutes = parse_interval_text(self._interval_edit.text())
        if minutes is None:
            self._warn_invalid()
            return
        if minutes != self._interval_minutes:
            self._interval_minutes = minutes
            self.intervalSubmitted.emit(minutes)
        self._interval_edit.setText(str(minutes))
        self.hide()

    def _warn_invalid(self) -> None:
        QMessageBox.warning(self, "Invalid Input", INVALID_INTERVAL_MESSAGE)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        event.ignore()
        self.hide()
