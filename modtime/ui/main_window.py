from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QAbstractItemView,
    QFormLayout,
    QFrame,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QStackedLayout,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from modtime.config import SETTINGS
from modtime.infra.repository import TaskRepository
from modtime.infra.timers import QtTimerScheduler
from modtime.services.task_queue import TaskQueue

from .dialogs import AddTaskDialog
from .widgets import TaskItemWidget, WaterFillWidget

TAB_TASKS = 1


class MainWindow(QWidget):
    def __init__(self, queue: TaskQueue | None = None):
        super().__init__()
        self.setWindowTitle("ModTime")
        self.resize(420, 720)

        self.queue = queue or TaskQueue(TaskRepository(), QtTimerScheduler(self))

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.tabs = QTabWidget()
        self.tabs.setTabPosition(QTabWidget.South)
        self.tabs.addTab(self._build_home(), "Home")
        self.tabs.addTab(self._build_tasks(), "Tasks")
        self.tabs.addTab(self._build_settings(), "Settings")
        self.tabs.currentChanged.connect(self.on_tab_changed)
        layout.addWidget(self.tabs)

        self._unsubscribe = self.queue.subscribe(lambda _queue: self.refresh())
        self.refresh()

        QShortcut(QKeySequence("Ctrl+N"), self, self.open_add_task)
        QShortcut(QKeySequence(QKeySequence.Delete), self.task_list, self.delete_selected)

    def _build_home(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("HomePanel")
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        header = QHBoxLayout()
        title = QLabel("Home")
        title.setProperty("class", "panel-title")
        title.setStyleSheet("font-size: 20px; font-weight: 600;")
        add_button = QPushButton("+")
        add_button.setFixedWidth(36)
        add_button.clicked.connect(self.open_add_task)
        header.addWidget(title)
        header.addStretch()
        header.addWidget(add_button)

        self.empty_label = QLabel("No tasks available. Tap + to add a new task.")
        self.empty_label.setStyleSheet("color: #9CA3AF;")

        self.task_list = QListWidget()
        self.task_list.setObjectName("TaskList")
        self.task_list.setSpacing(4)
        self.task_list.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self.task_list.itemActivated.connect(self.on_task_activated)

        delete_button = QPushButton("Delete")
        delete_button.setProperty("variant", "danger")
        delete_button.clicked.connect(self.delete_selected)

        layout.addLayout(header)
        layout.addWidget(self.empty_label)
        layout.addWidget(self.task_list, 1)
        layout.addWidget(delete_button)
        return frame

    def _build_tasks(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("TasksPanel")
        self.tasks_stack = QStackedLayout(frame)

        self.fill_view = WaterFillWidget(self.queue.now, SETTINGS.tick_interval_ms)

        idle = QWidget()
        idle_layout = QVBoxLayout(idle)
        idle_label = QLabel("No active task.")
        idle_label.setStyleSheet("font-size: 18px; color: #9CA3AF;")
        idle_layout.addWidget(idle_label, alignment=Qt.AlignHCenter | Qt.AlignTop)
        idle_layout.addStretch()

        self.tasks_stack.addWidget(self.fill_view)
        self.tasks_stack.addWidget(idle)
        self._idle_view = idle
        return frame

    def _build_settings(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("SettingsPanel")
        layout = QVBoxLayout(frame)
        layout.setContentsMargins(12, 12, 12, 12)

        profile = QGroupBox("Profile")
        profile_layout = QFormLayout(profile)
        profile_layout.addRow(QLabel("Profile"))

        options = QGroupBox("Options")
        options_layout = QVBoxLayout(options)
        clear_button = QPushButton("Clear All Tasks")
        clear_button.setProperty("variant", "danger")
        clear_button.setStyleSheet("color: #E24A4A;")
        clear_button.clicked.connect(self.clear_all_tasks)
        options_layout.addWidget(clear_button)

        layout.addWidget(profile)
        layout.addWidget(options)
        layout.addStretch()
        return frame

    def refresh(self) -> None:
        tasks = self.queue.tasks
        current_index = self.queue.current_index
        self.task_list.clear()
        for index, task in enumerate(tasks):
            item = QListWidgetItem()
            item.setData(Qt.UserRole, index)
            widget = TaskItemWidget(task, is_current=index == current_index)
            item.setSizeHint(widget.sizeHint())
            self.task_list.addItem(item)
            self.task_list.setItemWidget(item, widget)

        self.empty_label.setVisible(not tasks)
        self.task_list.setVisible(bool(tasks))

        current = self.queue.current_task
        self.fill_view.set_task(current)
        self.tasks_stack.setCurrentWidget(self.fill_view if current else self._idle_view)

    def on_tab_changed(self, index: int) -> None:
        if index == TAB_TASKS:
            self.fill_view.update_fraction()

    def on_task_activated(self, item: QListWidgetItem) -> None:
        index = item.data(Qt.UserRole)
        self.queue.start_task(index)
        self.queue.arm_completion_timer()
        self.tabs.setCurrentIndex(TAB_TASKS)

    def open_add_task(self) -> None:
        dialog = AddTaskDialog(self.queue, self)
        dialog.exec()

    def delete_selected(self) -> None:
        indices = {item.data(Qt.UserRole) for item in self.task_list.selectedItems()}
        if not indices:
            return
        self.queue.remove_tasks(indices)

    def clear_all_tasks(self) -> None:
        confirm = QMessageBox.question(
            self,
            "Clear All Tasks",
            "Remove every task?",
        )
        if confirm != QMessageBox.Yes:
            return
        self.queue.clear_all_tasks()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._unsubscribe()
        super().closeEvent(event)
