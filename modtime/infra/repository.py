from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Iterable

from modtime.config import SETTINGS
from modtime.domain.entities import TaskEntity

from .db import SessionLocal
from .models import KeyValueModel

logger = logging.getLogger(__name__)


def _to_record(task: TaskEntity) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "subtitle": task.subtitle,
        "startTime": task.start_time.isoformat(),
        "endTime": task.end_time.isoformat(),
    }


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    # The clock and the projector work in naive local time.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _to_entity(record: dict) -> TaskEntity:
    return TaskEntity(
        id=str(record["id"]),
        title=str(record["title"]),
        subtitle=str(record["subtitle"]),
        start_time=_parse_timestamp(record["startTime"]),
        end_time=_parse_timestamp(record["endTime"]),
    )


def encode_tasks(tasks: Iterable[TaskEntity]) -> str:
    return json.dumps([_to_record(task) for task in tasks])


def decode_tasks(payload: str) -> list[TaskEntity]:
    records = json.loads(payload)
    if not isinstance(records, list):
        raise ValueError(f"expected a JSON array, got {type(records).__name__}")
    return [_to_entity(record) for record in records]


class TaskRepository:
    """Stores the whole queue as one JSON blob under a single key."""

    def __init__(self, session_factory=SessionLocal, key: str | None = None) -> None:
        self._session_factory = session_factory
        self._key = key or SETTINGS.storage_key

    def load(self) -> list[TaskEntity]:
        with self._session_factory() as session:
            row = session.get(KeyValueModel, self._key)
            payload = row.value if row else None
        if not payload:
            return []
        try:
            tasks = decode_tasks(payload)
        except (ValueError, TypeError, KeyError) as exc:
            logger.warning("Discarding unreadable task data key=%s: %s", self._key, exc)
            return []
        logger.debug("Loaded %d tasks key=%s", len(tasks), self._key)
        return tasks

    def save(self, tasks: Iterable[TaskEntity]) -> None:
        payload = encode_tasks(tasks)
        with self._session_factory() as session:
            row = session.get(KeyValueModel, self._key)
            if row is None:
                session.add(KeyValueModel(key=self._key, value=payload))
            else:
                row.value = payload
            session.commit()
