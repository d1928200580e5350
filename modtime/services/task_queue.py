from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Protocol

from modtime.domain.entities import TaskEntity
from modtime.domain.enums import QueueState
from modtime.domain.progress import remaining_seconds

logger = logging.getLogger(__name__)

Listener = Callable[["TaskQueue"], None]


class TaskStore(Protocol):
    def load(self) -> list[TaskEntity]: ...

    def save(self, tasks: Iterable[TaskEntity]) -> None: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle: ...


class TaskQueue:
    """Ordered tasks with at most one current task.

    The deadline timer armed here is the only thing that completes a task on
    its own; progress rendering reads ``current_task`` and never mutates.
    """

    def __init__(
        self,
        repo: TaskStore,
        scheduler: Scheduler,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._repo = repo
        self._scheduler = scheduler
        self._clock = clock
        self._tasks: list[TaskEntity] = list(repo.load())
        self._current_index: int | None = None
        self._timer: TimerHandle | None = None
        self._timer_task_id: str | None = None
        self._listeners: list[Listener] = []

    @property
    def tasks(self) -> tuple[TaskEntity, ...]:
        return tuple(self._tasks)

    @property
    def current_index(self) -> int | None:
        return self._current_index

    @property
    def current_task(self) -> TaskEntity | None:
        if self._current_index is None:
            return None
        return self._tasks[self._current_index]

    @property
    def state(self) -> QueueState:
        return QueueState.IDLE if self._current_index is None else QueueState.ACTIVE

    def now(self) -> datetime:
        return self._clock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add_task(self, title: str, subtitle: str, end_time: datetime) -> TaskEntity:
        task = TaskEntity(title=title, subtitle=subtitle, start_time=self._clock(), end_time=end_time)
        self._tasks.append(task)
        logger.info("Task added id=%s title=%r ends=%s", task.id, task.title, task.end_time.isoformat())
        if self._current_index is None:
            self.start_task(len(self._tasks) - 1)
            self.arm_completion_timer()
        self._commit()
        return task

    def remove_tasks(self, indices: Iterable[int]) -> None:
        """Remove tasks by their positions before removal.

        Removing the current task completes it: the first surviving task that
        followed it becomes current, rather than ``current + 1`` counted on
        the shortened list, which would skip that survivor. Out-of-range
        indices are ignored.
        """
        doomed = {index for index in indices if 0 <= index < len(self._tasks)}
        if not doomed:
            return

        current = self._current_index
        self._tasks = [task for index, task in enumerate(self._tasks) if index not in doomed]
        logger.info("Removed %d tasks", len(doomed))

        if current is not None:
            # Post-removal slot of the current task, or of its first survivor.
            shifted = current - sum(1 for index in doomed if index < current)
            if current not in doomed:
                self._current_index = shifted
            elif shifted < len(self._tasks):
                self._current_index = shifted
                self.arm_completion_timer()
            else:
                self._go_idle()

        self._commit()

    def start_task(self, index: int) -> None:
        if not 0 <= index < len(self._tasks):
            logger.debug("Ignoring start of missing task index=%s", index)
            return
        self._current_index = index
        self._notify()

    def arm_completion_timer(self) -> None:
        self._cancel_timer()
        task = self.current_task
        if task is None:
            return
        delay = remaining_seconds(task.end_time, self._clock())
        self._timer_task_id = task.id
        self._timer = self._scheduler.schedule(delay, lambda: self._on_timer_fired(task.id))
        logger.debug("Armed completion timer id=%s delay=%.1fs", task.id, delay)

    def complete_current_task(self) -> None:
        if self._current_index is not None and self._current_index + 1 < len(self._tasks):
            finished = self._tasks[self._current_index]
            self._current_index += 1
            logger.info("Task completed id=%s, advancing to index=%s", finished.id, self._current_index)
            self.arm_completion_timer()
        else:
            if self._current_index is not None:
                logger.info("Task completed id=%s, queue drained", self._tasks[self._current_index].id)
            self._go_idle()
        self._commit()

    def clear_all_tasks(self) -> None:
        self._tasks.clear()
        self._go_idle()
        logger.info("All tasks cleared")
        self._commit()

    def _on_timer_fired(self, task_id: str) -> None:
        task = self.current_task
        if task is None or task.id != task_id or self._timer_task_id != task_id:
            logger.debug("Stale completion timer id=%s ignored", task_id)
            return
        self._timer = None
        self._timer_task_id = None
        if remaining_seconds(task.end_time, self._clock()) > 0:
            self.arm_completion_timer()
            return
        self.complete_current_task()

    def _go_idle(self) -> None:
        self._current_index = None
        self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._timer_task_id = None

    def _commit(self) -> None:
        self._repo.save(self._tasks)
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
