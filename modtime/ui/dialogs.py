from __future__ import annotations

from PySide6.QtCore import QDateTime
from PySide6.QtWidgets import (
    QDateTimeEdit,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QVBoxLayout,
)

from modtime.services.task_queue import TaskQueue


class AddTaskDialog(QDialog):
    def __init__(self, queue: TaskQueue, parent=None):
        super().__init__(parent)
        self.queue = queue
        self.setWindowTitle("Add Task")
        self.setMinimumWidth(360)

        self.title_input = QLineEdit()
        self.title_input.setPlaceholderText("Title")
        self.title_input.textChanged.connect(self._sync_save_button)

        self.subtitle_input = QLineEdit()
        self.subtitle_input.setPlaceholderText("Subtitle")

        self.end_input = QDateTimeEdit(QDateTime.currentDateTime())
        self.end_input.setCalendarPopup(True)
        self.end_input.setDisplayFormat("dd.MM.yyyy HH:mm")

        section = QLabel("Task Details")
        section.setProperty("class", "section-title")

        form = QFormLayout()
        form.addRow("Title", self.title_input)
        form.addRow("Subtitle", self.subtitle_input)
        form.addRow("End Time", self.end_input)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.save_task)
        self.buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addWidget(section)
        layout.addLayout(form)
        layout.addWidget(self.buttons)

        self._sync_save_button()

    def _sync_save_button(self) -> None:
        has_title = bool(self.title_input.text().strip())
        self.buttons.button(QDialogButtonBox.Save).setEnabled(has_title)

    def save_task(self) -> None:
        title = self.title_input.text().strip()
        if not title:
            return
        subtitle = self.subtitle_input.text().strip()
        end_time = self.end_input.dateTime().toPython()
        self.queue.add_task(title, subtitle, end_time)
        self.accept()
