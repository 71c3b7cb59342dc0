"""Data-access contract consumed by the dashboard engine."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from dashboard.constants import HABIT_LOG_WINDOW, PENDING_TODO_LIMIT
from dashboard.models import Category, Habit, LogEntry, Todo


class DashboardRepository(Protocol):
    """Read and write operations the engine needs from the data store.

    Implementations raise whatever their driver raises; the engine turns
    read failures into ``FetchError`` and write failures into
    ``MutationError``.
    """

    async def list_habits(self, user_id: str, log_limit: int = HABIT_LOG_WINDOW) -> list[Habit]:
        """Habits with their newest ``log_limit`` log entries and category."""
        ...

    async def list_pending_todos(
        self,
        user_id: str,
        due_after: datetime,
        limit: int = PENDING_TODO_LIMIT,
    ) -> list[Todo]:
        """Incomplete todos due at or after ``due_after``, soonest first."""
        ...

    async def list_categories(self, user_id: str) -> list[Category]:
        ...

    async def count_completed_todos(self, user_id: str) -> int:
        ...

    async def create_habit_log_entry(self, habit_id: str, date: datetime, is_completed: bool) -> LogEntry:
        ...

    async def update_todo_completion(self, todo_id: str, is_completed: bool) -> Todo:
        ...

    async def create_todo_log_entry(self, todo_id: str, date: datetime, is_completed: bool) -> LogEntry:
        ...

    async def count_todo_log_entries(self, todo_id: str) -> int:
        ...
