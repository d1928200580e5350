"""Elapsed-time projection for a task's start/end window."""
from __future__ import annotations

from datetime import datetime


def fraction_complete(start_time: datetime, end_time: datetime, now: datetime) -> float:
    """Share of the ``start_time``..``end_time`` window that has elapsed at ``now``.

    The result is always in ``[0, 1]``. A window with ``end_time <= start_time``
    counts as already complete.
    """
    if now < start_time:
        return 0.0
    if now >= end_time:
        return 1.0
    total = (end_time - start_time).total_seconds()
    if total <= 0:
        return 1.0
    elapsed = (now - start_time).total_seconds()
    return max(0.0, min(1.0, elapsed / total))


def remaining_seconds(end_time: datetime, now: datetime) -> float:
    return max(0.0, (end_time - now).total_seconds())
