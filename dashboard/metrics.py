from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from dashboard.constants import DAYS_PER_WEEK, DEFAULT_WEEK_START, Frequency
from dashboard.models import (
    Category,
    DashboardSnapshot,
    DashboardStats,
    Habit,
    HabitStatus,
    Todo,
)
from dashboard.scheduling import due_habits, is_completed_on


def frequency_label(frequency):
    value = frequency.value if isinstance(frequency, Frequency) else str(frequency or "")
    return value[:1].upper() + value[1:].lower()


def count_completed_logs(habit: Habit) -> int:
    return sum(1 for entry in habit.logs if entry.is_completed)


def compute_stats(
    habits: Sequence[Habit],
    todos: Sequence[Todo],
    completed_todo_count: int,
    reference_date: date,
    week_start: int = DEFAULT_WEEK_START,
) -> DashboardStats:
    """Roll habit and todo state up into the dashboard counters.

    Two of the weekly figures are intentionally coarse: the total assumes
    seven occurrences per habit regardless of frequency, and the completed
    count sums every completed entry in each habit's fetched log window (the
    last seven entries) rather than the current calendar week. Percentages
    shown on the dashboard are derived from these exact values.
    """
    due = due_habits(habits, reference_date, week_start)
    today_completed = sum(1 for habit in due if is_completed_on(habit.logs, reference_date))
    return DashboardStats(
        today_habits_completed=today_completed,
        today_habits_total=len(due),
        weekly_habits_completed=sum(count_completed_logs(habit) for habit in habits),
        weekly_habits_total=len(habits) * DAYS_PER_WEEK,
        pending_todos=len(todos),
        completed_todos=int(completed_todo_count or 0),
    )


def build_snapshot(
    habits: Sequence[Habit],
    todos: Sequence[Todo],
    categories: Sequence[Category],
    completed_todo_count: int,
    reference_date: date,
    week_start: int = DEFAULT_WEEK_START,
    generated_at: datetime | None = None,
) -> DashboardSnapshot:
    stats = compute_stats(habits, todos, completed_todo_count, reference_date, week_start)
    today_habits = tuple(
        HabitStatus(habit=habit, completed=is_completed_on(habit.logs, reference_date))
        for habit in due_habits(habits, reference_date, week_start)
    )
    return DashboardSnapshot(
        today=reference_date,
        habits=tuple(habits),
        todos=tuple(todos),
        categories=tuple(categories),
        stats=stats,
        today_habits=today_habits,
        generated_at=generated_at,
    )
