"""
Всплывающие уведомления (Toast)
"""
import html
from typing import Optional

from PySide6.QtCore import QEasingCurve, QPropertyAnimation, Qt, QTimer
from PySide6.QtWidgets import QGraphicsOpacityEffect, QLabel

# Цвет фона: успех (фиолетовый) / ошибка (красный)
_COLORS = {True: "#7c3aed", False: "#dc2626"}

_STYLE = """
    QLabel {{
        background-color: {color};
        color: white;
        padding: 10px 20px;
        border-radius: 8px;
        font-size: 13px;
    }}
"""

FADE_MS = 200
MARGIN = 24


class Toast(QLabel):
    """Уведомление в правом нижнем углу родителя, исчезает само"""

    def __init__(
        self,
        parent,
        message: str,
        duration: int = 3000,
        success: bool = True,
        title: Optional[str] = None,
    ):
        if title:
            # Текст бэкенда показывается как есть, без разметки
            super().__init__(f"<b>{html.escape(title)}</b><br>{html.escape(message)}", parent)
            self.setTextFormat(Qt.RichText)
        else:
            super().__init__(message, parent)
            self.setTextFormat(Qt.PlainText)
        self.setWordWrap(True)
        self.setMaximumWidth(380)
        self.setStyleSheet(_STYLE.format(color=_COLORS[bool(success)]))
        self.adjustSize()

        area = parent.rect()
        self.move(
            max(0, area.width() - self.width() - MARGIN),
            max(0, area.height() - self.height() - MARGIN),
        )

        self._effect = QGraphicsOpacityEffect(self)
        self.setGraphicsEffect(self._effect)
        self._effect.setOpacity(0.0)
        self._animation: Optional[QPropertyAnimation] = None

        self.show()
        self.raise_()
        self._fade(0.0, 1.0)
        QTimer.singleShot(duration, self.dismiss)

    def _fade(self, start: float, end: float):
        self._animation = QPropertyAnimation(self._effect, b"opacity", self)
        self._animation.setDuration(FADE_MS)
        self._animation.setStartValue(start)
        self._animation.setEndValue(end)
        self._animation.setEasingCurve(QEasingCurve.InOutQuad)
        self._animation.start()
        return self._animation

    def dismiss(self):
        """Плавно скрыть и удалить"""
        self._fade(self._effect.opacity(), 0.0).finished.connect(self.deleteLater)


def show_toast(
    parent,
    message: str,
    duration: int = 3000,
    success: bool = True,
    title: Optional[str] = None,
) -> Toast:
    """Показать всплывающее уведомление"""
    return Toast(parent, message, duration, success, title)
