from __future__ import annotations

from enum import StrEnum


class QueueState(StrEnum):
    IDLE = "idle"
    ACTIVE = "active"
