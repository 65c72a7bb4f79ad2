"""Expected elapsed time for a sequence of timed items."""

from __future__ import annotations

from typing import Iterable

from sesh.workout.model import TimedItem


def item_duration_sec(item: TimedItem) -> int:
    return item.duration_sec


def estimate_total_sec(items: Iterable[TimedItem], prep_sec: int) -> int:
    """Total seconds a session over ``items`` takes when run to completion.

    Prep time is charged before the first item and again before every
    following item. Invalid items are skipped and do not add prep time.
    """
    valid = [item for item in items if item.is_valid]
    if not valid:
        return 0

    prep = max(0, prep_sec)
    total = prep
    for index, item in enumerate(valid):
        total += item.duration_sec
        if index < len(valid) - 1:
            total += prep
    return total


def format_clock(total_seconds: int) -> str:
    minutes, seconds = divmod(max(0, total_seconds), 60)
    return f"{minutes:02d}:{seconds:02d}"
