from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from dashboard.constants import DEFAULT_WEEK_START, Frequency
from dashboard.errors import InvalidFrequency
from dashboard.models import Habit, LogEntry


def _calendar_day(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_frequency(value) -> Frequency:
    if isinstance(value, Frequency):
        return value
    try:
        return Frequency(value)
    except ValueError as exc:
        raise InvalidFrequency(value) from exc


def is_due(frequency, day, week_start: int = DEFAULT_WEEK_START) -> bool:
    """Return whether a habit with ``frequency`` has an occurrence on ``day``.

    ``week_start`` uses ``date.weekday()`` numbering (Monday is 0); weekly
    habits fall on that day only. Monthly habits fall on the 1st.
    """
    parsed = parse_frequency(frequency)
    current = _calendar_day(day)
    if parsed is Frequency.DAILY:
        return True
    if parsed is Frequency.WEEKLY:
        return current.weekday() == week_start
    return current.day == 1


def is_completed_on(log_entries: Iterable[LogEntry], day) -> bool:
    # Only the entries handed in are considered; older logs are never looked up.
    target = _calendar_day(day)
    return any(
        entry.is_completed and _calendar_day(entry.date) == target
        for entry in log_entries
    )


def due_habits(habits: Iterable[Habit], day, week_start: int = DEFAULT_WEEK_START) -> list[Habit]:
    return [habit for habit in habits if is_due(habit.frequency, day, week_start)]
