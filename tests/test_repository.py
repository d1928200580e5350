from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from modtime.domain.entities import TaskEntity
from modtime.infra.db import Base
from modtime.infra.models import KeyValueModel
from modtime.infra.repository import TaskRepository, decode_tasks, encode_tasks
from modtime.services.task_queue import TaskQueue

T0 = datetime(2026, 1, 1, 9, 0, 0, 123456)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()


def _put_raw(session_factory, value: str, key: str = "tasks") -> None:
    with session_factory() as session:
        session.add(KeyValueModel(key=key, value=value))
        session.commit()


def test_load_without_saved_data_is_empty(session_factory) -> None:
    assert TaskRepository(session_factory, key="tasks").load() == []


def test_save_then_load_round_trip(session_factory) -> None:
    repo = TaskRepository(session_factory, key="tasks")
    tasks = [
        TaskEntity(title="Read", subtitle="ch. 3", start_time=T0, end_time=T0 + timedelta(minutes=30)),
        TaskEntity(title="Walk", subtitle="", start_time=T0, end_time=T0 + timedelta(hours=1)),
    ]

    repo.save(tasks)
    repo.save(tasks[:1] + tasks)

    loaded = repo.load()
    assert [t.id for t in loaded] == [tasks[0].id, tasks[0].id, tasks[1].id]
    assert loaded[1] == tasks[0]


def test_records_use_stable_field_names() -> None:
    task = TaskEntity(id="abc", title="A", subtitle="B", start_time=T0, end_time=T0)

    payload = encode_tasks([task])

    assert '"startTime": "2026-01-01T09:00:00.123456"' in payload
    assert decode_tasks(payload) == [task]


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        '{"id": "x"}',
        '[{"id": "x", "title": "t"}]',
        '[{"id": "x", "title": "t", "subtitle": "", "startTime": "yesterday", "endTime": "now"}]',
        "[1, 2, 3]",
    ],
)
def test_unreadable_data_loads_as_empty(session_factory, raw: str) -> None:
    _put_raw(session_factory, raw)

    assert TaskRepository(session_factory, key="tasks").load() == []


def test_keys_are_isolated(session_factory) -> None:
    task = TaskEntity(title="Only here", subtitle="", start_time=T0, end_time=T0)
    TaskRepository(session_factory, key="a").save([task])

    assert TaskRepository(session_factory, key="b").load() == []
    assert TaskRepository(session_factory, key="a").load() == [task]


class RecordingScheduler:
    def __init__(self) -> None:
        self.delays: list[float] = []

    def schedule(self, delay_seconds: float, callback):
        self.delays.append(delay_seconds)
        return self

    def cancel(self) -> None:
        pass


@pytest.mark.parametrize("suffix", ["Z", "+00:00", "+05:30"])
def test_zoned_timestamps_load_as_naive_local_time(session_factory, suffix: str) -> None:
    raw = (
        '[{"id": "z", "title": "Zoned", "subtitle": "",'
        f' "startTime": "2026-01-01T09:00:00{suffix}", "endTime": "2026-01-01T10:00:00{suffix}"}}]'
    )
    _put_raw(session_factory, raw)

    (task,) = TaskRepository(session_factory, key="tasks").load()

    assert task.start_time.tzinfo is None
    assert task.end_time.tzinfo is None
    assert task.end_time - task.start_time == timedelta(hours=1)
    expected = datetime.fromisoformat(f"2026-01-01T09:00:00{suffix}").astimezone().replace(tzinfo=None)
    assert task.start_time == expected

    scheduler = RecordingScheduler()
    queue = TaskQueue(TaskRepository(session_factory, key="tasks"), scheduler, lambda: task.start_time)
    queue.start_task(0)
    queue.arm_completion_timer()

    assert scheduler.delays == [3600]
