from datetime import datetime
from itertools import count

import pytest

from dashboard.models import Category, Habit, LogEntry, Todo

# Sunday 2026-10-18 is the default week start; Monday 2026-10-19 is not.
SUNDAY = datetime(2026, 10, 18, 9, 30)
MONDAY = datetime(2026, 10, 19, 9, 30)


class FixedClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


class InMemoryRepository:
    """Test double for ``DashboardRepository`` with per-method failure injection."""

    def __init__(self):
        self.categories = {}
        self.habits = {}
        self.habit_logs = []
        self.todos = {}
        self.todo_logs = []
        self.failures = {}
        self.delays = {}
        self.calls = []
        self._ids = count(1)

    def fail(self, method, exc=None):
        self.failures[method] = exc or RuntimeError(f"{method} failed")

    async def _enter(self, method):
        self.calls.append(method)
        delay = self.delays.get(method)
        if delay:
            await delay.wait()
        if method in self.failures:
            raise self.failures[method]

    def add_category(self, category_id, name="Health", color_code="#2ecc71", type="HABIT"):
        category = Category(id=category_id, name=name, color_code=color_code, type=type)
        self.categories[category_id] = category
        return category

    def add_habit(self, habit_id, frequency="DAILY", name=None, category_id=None):
        self.habits[habit_id] = {
            "id": habit_id,
            "name": name or habit_id.title(),
            "frequency": frequency,
            "category_id": category_id,
        }

    def add_habit_log(self, habit_id, when, is_completed=True):
        entry = LogEntry(id=f"hl{next(self._ids)}", owner_id=habit_id, date=when, is_completed=is_completed)
        self.habit_logs.append(entry)
        return entry

    def add_todo(self, todo_id, due_date=None, is_completed=False, name=None, category_id=None):
        self.todos[todo_id] = Todo(
            id=todo_id,
            name=name or todo_id.title(),
            due_date=due_date,
            is_completed=is_completed,
            category=self.categories.get(category_id),
            category_id=category_id,
        )

    async def list_habits(self, user_id, log_limit=7):
        await self._enter("list_habits")
        habits = []
        for payload in self.habits.values():
            logs = sorted(
                (entry for entry in self.habit_logs if entry.owner_id == payload["id"]),
                key=lambda entry: entry.date,
                reverse=True,
            )[:log_limit]
            habits.append(
                Habit(
                    id=payload["id"],
                    name=payload["name"],
                    frequency=payload["frequency"],
                    category=self.categories.get(payload["category_id"]),
                    logs=tuple(logs),
                    category_id=payload["category_id"],
                )
            )
        return habits

    async def list_pending_todos(self, user_id, due_after, limit=5):
        await self._enter("list_pending_todos")
        pending = [
            todo
            for todo in self.todos.values()
            if not todo.is_completed and todo.due_date is not None and todo.due_date >= due_after
        ]
        return sorted(pending, key=lambda todo: todo.due_date)[:limit]

    async def list_categories(self, user_id):
        await self._enter("list_categories")
        return list(self.categories.values())

    async def count_completed_todos(self, user_id):
        await self._enter("count_completed_todos")
        return sum(1 for todo in self.todos.values() if todo.is_completed)

    async def create_habit_log_entry(self, habit_id, date, is_completed):
        await self._enter("create_habit_log_entry")
        return self.add_habit_log(habit_id, date, is_completed)

    async def update_todo_completion(self, todo_id, is_completed):
        await self._enter("update_todo_completion")
        todo = self.todos[todo_id]
        updated = Todo(
            id=todo.id,
            name=todo.name,
            due_date=todo.due_date,
            is_completed=is_completed,
            category=todo.category,
            category_id=todo.category_id,
        )
        self.todos[todo_id] = updated
        return updated

    async def create_todo_log_entry(self, todo_id, date, is_completed):
        await self._enter("create_todo_log_entry")
        entry = LogEntry(id=f"tl{next(self._ids)}", owner_id=todo_id, date=date, is_completed=is_completed)
        self.todo_logs.append(entry)
        return entry

    async def count_todo_log_entries(self, todo_id):
        return sum(1 for entry in self.todo_logs if entry.owner_id == todo_id)


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def monday_clock():
    return FixedClock(MONDAY)


@pytest.fixture
def sunday_clock():
    return FixedClock(SUNDAY)
