from __future__ import annotations

from datetime import datetime

from PySide6.QtCore import QRectF, Qt, QTimer
from PySide6.QtGui import QColor, QPainter, QPainterPath, QPen
from PySide6.QtWidgets import QLabel, QSizePolicy, QVBoxLayout, QWidget

from modtime.domain.entities import TaskEntity
from modtime.domain.progress import fraction_complete

FILL_COLOR = QColor(37, 99, 235, 128)
BORDER_COLOR = QColor("#2563EB")


def format_end_time(value: datetime) -> str:
    return value.strftime("%d.%m.%y %H:%M")


def top_rounded_path(rect: QRectF, radius: float) -> QPainterPath:
    radius = max(0.0, min(radius, rect.width() / 2, rect.height()))
    path = QPainterPath()
    path.moveTo(rect.left(), rect.bottom())
    path.lineTo(rect.right(), rect.bottom())
    path.lineTo(rect.right(), rect.top() + radius)
    path.arcTo(rect.right() - 2 * radius, rect.top(), 2 * radius, 2 * radius, 0, 90)
    path.lineTo(rect.left() + radius, rect.top())
    path.arcTo(rect.left(), rect.top(), 2 * radius, 2 * radius, 90, 90)
    path.closeSubpath()
    return path


class TaskItemWidget(QWidget):
    def __init__(self, task: TaskEntity, is_current: bool = False, parent=None):
        super().__init__(parent)
        self.task = task

        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.setProperty("current", is_current)
        if is_current:
            self.setStyleSheet("#TaskCard { border-left: 3px solid #2563EB; }")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(2)

        title = QLabel(task.title)
        title.setProperty("class", "task-title")
        title.setStyleSheet("font-weight: 600;")

        subtitle = QLabel(task.subtitle)
        subtitle.setProperty("class", "task-subtitle")
        subtitle.setWordWrap(True)

        meta = QLabel(f"Ends at: {format_end_time(task.end_time)}")
        meta.setProperty("class", "task-meta")
        meta.setStyleSheet("color: #9CA3AF;")

        layout.addWidget(title)
        if task.subtitle:
            layout.addWidget(subtitle)
        layout.addWidget(meta)


class WaterFillWidget(QWidget):
    """Fills from the bottom in proportion to the current task's elapsed time.

    The tick only repaints; completing the task is left to the queue's timer.
    """

    def __init__(self, clock, tick_interval_ms: int = 1000, parent=None):
        super().__init__(parent)
        self._clock = clock
        self._task: TaskEntity | None = None
        self.fraction = 0.0

        self.setMinimumHeight(240)

        self.title_label = QLabel()
        self.title_label.setAlignment(Qt.AlignCenter)
        self.title_label.setStyleSheet("font-size: 26px; font-weight: 600;")
        self.subtitle_label = QLabel()
        self.subtitle_label.setAlignment(Qt.AlignCenter)
        self.subtitle_label.setStyleSheet("font-size: 16px; color: #9CA3AF;")
        self.end_label = QLabel()
        self.end_label.setAlignment(Qt.AlignCenter)
        self.end_label.setStyleSheet("color: #6B7280;")

        layout = QVBoxLayout(self)
        layout.addStretch()
        layout.addWidget(self.title_label)
        layout.addWidget(self.subtitle_label)
        layout.addWidget(self.end_label)
        layout.addStretch()

        self.timer = QTimer(self)
        self.timer.setInterval(tick_interval_ms)
        self.timer.timeout.connect(self.update_fraction)

    def set_task(self, task: TaskEntity | None) -> None:
        self._task = task
        if task is None:
            self.timer.stop()
            self.fraction = 0.0
            self.update()
            return
        self.title_label.setText(task.title)
        self.subtitle_label.setText(task.subtitle)
        self.end_label.setText(f"Ends at: {format_end_time(task.end_time)}")
        self.update_fraction()
        if not self.timer.isActive():
            self.timer.start()

    def update_fraction(self) -> None:
        if self._task is None:
            return
        self.fraction = fraction_complete(self._task.start_time, self._task.end_time, self._clock())
        self.update()

    def paintEvent(self, event) -> None:  # type: ignore[override]
        super().paintEvent(event)
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        frame = QRectF(self.rect()).adjusted(1, 1, -1, -1)
        painter.setPen(QPen(BORDER_COLOR, 2))
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(frame)

        fill_height = frame.height() * self.fraction
        if fill_height > 0:
            fill = QRectF(frame.left(), frame.bottom() - fill_height, frame.width(), fill_height)
            painter.setPen(Qt.NoPen)
            painter.setBrush(FILL_COLOR)
            painter.drawPath(top_rounded_path(fill, 15))
        painter.end()
