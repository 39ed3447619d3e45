"""
Reminder popup shown in the bottom-right corner when tray balloons are not used.
"""

from __future__ import annotations

from PySide6.QtCore import QPoint, QSize, Qt, QTimer, Signal
from PySide6.QtGui import QColor, QMouseEvent
from PySide6.QtWidgets import (
    QApplication,
    QGraphicsDropShadowEffect,
    QHBoxLayout,
    QLabel,
    QStyle,
    QToolButton,
    QVBoxLayout,
    QWidget,
)


class ReminderPopup(QWidget):
    openRequested = Signal()
    dismissed = Signal()

    def __init__(self, display_ms: int = 3000, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowFlags(
            Qt.WindowType.Tool | Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint
        )
        self.setObjectName("ReminderPopup")
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self.setWindowOpacity(0.92)

        self._hide_timer = QTimer(self)
        self._hide_timer.setSingleShot(True)
        self._hide_timer.setInterval(display_ms)
        self._hide_timer.timeout.connect(self.hide)  # type: ignore[arg-type]

        card = QWidget(self)
        card.setObjectName("ReminderCard")
        shadow = QGraphicsDropShadowEffect(card)
        shadow.setBlurRadius(20)
        shadow.setColor(QColor(0, 0, 0, 120))
        shadow.setOffset(0, 8)
        card.setGraphicsEffect(shadow)

        icon_label = QLabel()
        icon_label.setFixedSize(40, 40)
        icon = self.style().standardIcon(QStyle.StandardPixmap.SP_MessageBoxInformation)
        icon_label.setPixmap(icon.pixmap(40, 40))

        self._title_label = QLabel()
        self._title_label.setObjectName("ReminderTitle")
        self._message_label = QLabel()
        self._message_label.setObjectName("ReminderMessage")
        self._message_label.setWordWrap(True)
        self._message_label.setMaximumWidth(320)

        open_button = self._create_action_button(QStyle.StandardPixmap.SP_FileDialogDetailedView, "Open details")
        dismiss_button = self._create_action_button(QStyle.StandardPixmap.SP_DialogCloseButton, "Dismiss")
        open_button.clicked.connect(self._on_open)  # type: ignore[arg-type]
        dismiss_button.clicked.connect(self._on_dismiss)  # type: ignore[arg-type]

        actions = QHBoxLayout()
        actions.setContentsMargins(0, 4, 0, 0)
        actions.addStretch()
        actions.addWidget(open_button)
        actions.addWidget(dismiss_button)

        text_layout = QVBoxLayout()
        text_layout.setSpacing(4)
        text_layout.addWidget(self._title_label)
        text_layout.addWidget(self._message_label)
        text_layout.addLayout(actions)

        card_layout = QHBoxLayout(card)
        card_layout.setContentsMargins(12, 10, 12, 12)
        card_layout.setSpacing(10)
        card_layout.addWidget(icon_label, 0, Qt.AlignmentFlag.AlignTop)
        card_layout.addLayout(text_layout)

        outer = QHBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.addWidget(card)
        self.setMinimumWidth(300)

        self.setStyleSheet(
            """
            QWidget#ReminderCard {
                background-color: rgba(30, 32, 38, 0.85);
                border-radius: 10px;
                border: 1px solid rgba(255, 255, 255, 0.12);
            }
            QLabel#ReminderTitle {
                color: white;
                font-weight: bold;
                font-size: 14px;
            }
            QLabel#ReminderMessage {
                color: rgba(255, 255, 255, 0.85);
            }
            QToolButton {
                background-color: rgba(255, 255, 255, 0.12);
                border-radius: 16px;
            }
            QToolButton:hover {
                background-color: rgba(255, 255, 255, 0.24);
            }
            """
        )

    def _create_action_button(self, standard_icon: QStyle.StandardPixmap, tooltip: str) -> QToolButton:
        button = QToolButton()
        button.setCursor(Qt.CursorShape.PointingHandCursor)
        button.setToolTip(tooltip)
        button.setIconSize(QSize(20, 20))
        button.setFixedSize(32, 32)
        button.setIcon(self.style().standardIcon(standard_icon))
        return button

    @property
    def title(self) -> str:
        return self._title_label.text()

    @property
    def message(self) -> str:
        return self._message_label.text()

    def show_reminder(self, title: str, message: str) -> None:
        """Fill in the text, show the popup and restart the auto-hide countdown."""
        self._title_label.setText(title)
        self._message_label.setText(message)
        self.adjustSize()
        self._position_bottom_right()
        self.show()
        self._hide_timer.start()

    def _position_bottom_right(self) -> None:
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        geometry = screen.availableGeometry()
        self.move(QPoint(geometry.right() - self.width() - 20, geometry.bottom() - self.height() - 20))

    def _on_open(self) -> None:
        self.hide()
        self.openRequested.emit()

    def _on_dismiss(self) -> None:
        self.hide()
        self.dismissed.emit()

    def hideEvent(self, event) -> None:  # noqa: N802
        self._hide_timer.stop()
        super().hideEvent(event)

    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        super().mousePressEvent(event)
        if event.button() == Qt.MouseButton.LeftButton:
            self._on_open()
