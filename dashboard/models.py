from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple


def completion_percent(completed, total):
    return round((completed / total) * 100, 1) if total > 0 else 0


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color_code: Optional[str] = None
    type: str = "BOTH"


@dataclass(frozen=True)
class LogEntry:
    id: str
    owner_id: str
    date: datetime
    is_completed: bool = True


@dataclass(frozen=True)
class Habit:
    id: str
    name: str
    frequency: str
    category: Optional[Category] = None
    logs: Tuple[LogEntry, ...] = ()
    category_id: Optional[str] = None


@dataclass(frozen=True)
class Todo:
    id: str
    name: str
    due_date: Optional[datetime] = None
    is_completed: bool = False
    category: Optional[Category] = None
    category_id: Optional[str] = None


@dataclass(frozen=True)
class HabitStatus:
    habit: Habit
    completed: bool


@dataclass(frozen=True)
class DashboardStats:
    today_habits_completed: int = 0
    today_habits_total: int = 0
    weekly_habits_completed: int = 0
    weekly_habits_total: int = 0
    pending_todos: int = 0
    completed_todos: int = 0

    @property
    def today_percent(self) -> float:
        return completion_percent(self.today_habits_completed, self.today_habits_total)

    @property
    def weekly_percent(self) -> float:
        return completion_percent(self.weekly_habits_completed, self.weekly_habits_total)

    @property
    def todo_percent(self) -> float:
        return completion_percent(self.completed_todos, self.pending_todos + self.completed_todos)


@dataclass(frozen=True)
class DashboardSnapshot:
    today: date
    habits: Tuple[Habit, ...] = ()
    todos: Tuple[Todo, ...] = ()
    categories: Tuple[Category, ...] = ()
    stats: DashboardStats = field(default_factory=DashboardStats)
    today_habits: Tuple[HabitStatus, ...] = ()
    generated_at: Optional[datetime] = None

    @classmethod
    def empty(cls, today: date) -> "DashboardSnapshot":
        return cls(today=today)
