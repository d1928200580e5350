from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class TaskEntity:
    title: str
    subtitle: str
    end_time: datetime
    start_time: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_new_id)
