from __future__ import annotations

from datetime import date, datetime
from uuid import uuid4

from sqlalchemy import text as sql_text
from sqlalchemy.ext.asyncio import async_sessionmaker

from backend.db import get_sessionmaker
from backend.db_init import (
    CATEGORIES_TABLE,
    HABIT_LOGS_TABLE,
    HABITS_TABLE,
    TODO_LOGS_TABLE,
    TODOS_TABLE,
)
from dashboard.constants import HABIT_LOG_WINDOW, PENDING_TODO_LIMIT
from dashboard.models import Category, Habit, LogEntry, Todo


def _new_id() -> str:
    return uuid4().hex


def _to_iso(value) -> str | None:
    # Stored as wall-clock time of the caller's timezone; offsets are dropped.
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None).isoformat(timespec="microseconds")
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time()).isoformat(timespec="microseconds")
    return str(value)


def _parse_datetime(value) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    return datetime.fromisoformat(str(value))


def _category_from_row(row: dict) -> Category | None:
    if not row.get("category_id") or row.get("category_name") is None:
        return None
    return Category(
        id=row["category_id"],
        name=row["category_name"],
        color_code=row.get("category_color"),
        type=row.get("category_type") or "BOTH",
    )


def _log_from_row(row: dict, owner_key: str) -> LogEntry:
    return LogEntry(
        id=row["id"],
        owner_id=row[owner_key],
        date=_parse_datetime(row["date"]),
        is_completed=bool(int(row.get("is_completed") or 0)),
    )


def _todo_from_row(row: dict) -> Todo:
    return Todo(
        id=row["id"],
        name=row["name"],
        due_date=_parse_datetime(row.get("due_date")),
        is_completed=bool(int(row.get("is_completed") or 0)),
        category=_category_from_row(row),
        category_id=row.get("category_id"),
    )


class SqlDashboardRepository:
    """``DashboardRepository`` backed by the service database."""

    def __init__(self, session_factory: async_sessionmaker | None = None):
        self._session_factory = session_factory

    def _sessions(self) -> async_sessionmaker:
        return self._session_factory or get_sessionmaker()

    async def list_habits(self, user_id: str, log_limit: int = HABIT_LOG_WINDOW) -> list[Habit]:
        session_factory = self._sessions()
        async with session_factory() as session:
            habit_rows = (await session.execute(
                sql_text(
                    f"""
                    SELECT h.id, h.name, h.frequency, h.category_id,
                           c.name AS category_name, c.color_code AS category_color, c.type AS category_type
                    FROM {HABITS_TABLE} h
                    LEFT JOIN {CATEGORIES_TABLE} c ON c.id = h.category_id
                    WHERE h.user_id = :user_id
                    ORDER BY h.created_at, h.id
                    """
                ),
                {"user_id": user_id},
            )).mappings().all()
            log_rows = (await session.execute(
                sql_text(
                    f"""
                    SELECT id, habit_id, date, is_completed
                    FROM (
                        SELECT l.id, l.habit_id, l.date, l.is_completed,
                               ROW_NUMBER() OVER (
                                   PARTITION BY l.habit_id ORDER BY l.date DESC, l.id DESC
                               ) AS rn
                        FROM {HABIT_LOGS_TABLE} l
                        JOIN {HABITS_TABLE} h ON h.id = l.habit_id
                        WHERE h.user_id = :user_id
                    ) ranked
                    WHERE rn <= :log_limit
                    ORDER BY habit_id, rn
                    """
                ),
                {"user_id": user_id, "log_limit": int(log_limit)},
            )).mappings().all()
        logs_by_habit: dict[str, list[LogEntry]] = {}
        for row in log_rows:
            logs_by_habit.setdefault(row["habit_id"], []).append(_log_from_row(dict(row), "habit_id"))
        habits = []
        for row in habit_rows:
            payload = dict(row)
            habits.append(
                Habit(
                    id=payload["id"],
                    name=payload["name"],
                    frequency=payload["frequency"],
                    category=_category_from_row(payload),
                    logs=tuple(logs_by_habit.get(payload["id"], [])),
                    category_id=payload.get("category_id"),
                )
            )
        return habits

    async def list_pending_todos(
        self,
        user_id: str,
        due_after: datetime,
        limit: int = PENDING_TODO_LIMIT,
    ) -> list[Todo]:
        session_factory = self._sessions()
        async with session_factory() as session:
            rows = (await session.execute(
                sql_text(
                    f"""
                    SELECT t.id, t.name, t.due_date, t.is_completed, t.category_id,
                           c.name AS category_name, c.color_code AS category_color, c.type AS category_type
                    FROM {TODOS_TABLE} t
                    LEFT JOIN {CATEGORIES_TABLE} c ON c.id = t.category_id
                    WHERE t.user_id = :user_id
                      AND COALESCE(t.is_completed, 0) = 0
                      AND t.due_date IS NOT NULL
                      AND t.due_date >= :due_after
                    ORDER BY t.due_date ASC
                    LIMIT :limit
                    """
                ),
                {"user_id": user_id, "due_after": _to_iso(due_after), "limit": int(limit)},
            )).mappings().all()
        return [_todo_from_row(dict(row)) for row in rows]

    async def list_categories(self, user_id: str) -> list[Category]:
        session_factory = self._sessions()
        async with session_factory() as session:
            rows = (await session.execute(
                sql_text(
                    f"""
                    SELECT id, name, color_code, type
                    FROM {CATEGORIES_TABLE}
                    WHERE user_id = :user_id
                    ORDER BY name
                    """
                ),
                {"user_id": user_id},
            )).mappings().all()
        return [
            Category(id=row["id"], name=row["name"], color_code=row["color_code"], type=row["type"] or "BOTH")
            for row in rows
        ]

    async def count_completed_todos(self, user_id: str) -> int:
        session_factory = self._sessions()
        async with session_factory() as session:
            count = (await session.execute(
                sql_text(
                    f"""
                    SELECT COUNT(*) FROM {TODOS_TABLE}
                    WHERE user_id = :user_id
                      AND COALESCE(is_completed, 0) = 1
                    """
                ),
                {"user_id": user_id},
            )).scalar_one()
        return int(count or 0)

    async def create_habit_log_entry(self, habit_id: str, date: datetime, is_completed: bool) -> LogEntry:
        return await self._create_log_entry(HABITS_TABLE, HABIT_LOGS_TABLE, "habit_id", habit_id, date, is_completed)

    async def create_todo_log_entry(self, todo_id: str, date: datetime, is_completed: bool) -> LogEntry:
        return await self._create_log_entry(TODOS_TABLE, TODO_LOGS_TABLE, "todo_id", todo_id, date, is_completed)

    async def update_todo_completion(self, todo_id: str, is_completed: bool) -> Todo:
        session_factory = self._sessions()
        async with session_factory() as session:
            await session.execute(
                sql_text(f"UPDATE {TODOS_TABLE} SET is_completed = :is_completed WHERE id = :todo_id"),
                {"todo_id": todo_id, "is_completed": int(bool(is_completed))},
            )
            await session.commit()
            row = (await session.execute(
                sql_text(
                    f"""
                    SELECT t.id, t.name, t.due_date, t.is_completed, t.category_id,
                           c.name AS category_name, c.color_code AS category_color, c.type AS category_type
                    FROM {TODOS_TABLE} t
                    LEFT JOIN {CATEGORIES_TABLE} c ON c.id = t.category_id
                    WHERE t.id = :todo_id
                    """
                ),
                {"todo_id": todo_id},
            )).mappings().fetchone()
        if not row:
            raise ValueError("Todo not found")
        return _todo_from_row(dict(row))

    async def count_todo_log_entries(self, todo_id: str) -> int:
        session_factory = self._sessions()
        async with session_factory() as session:
            count = (await session.execute(
                sql_text(f"SELECT COUNT(*) FROM {TODO_LOGS_TABLE} WHERE todo_id = :todo_id"),
                {"todo_id": todo_id},
            )).scalar_one()
        return int(count or 0)

    async def _create_log_entry(self, owner_table, logs_table, owner_key, owner_id, day, is_completed) -> LogEntry:
        entry_id = _new_id()
        stored_date = _to_iso(day)
        session_factory = self._sessions()
        async with session_factory() as session:
            exists = (await session.execute(
                sql_text(f"SELECT 1 FROM {owner_table} WHERE id = :owner_id"),
                {"owner_id": owner_id},
            )).fetchone()
            if not exists:
                raise ValueError(f"{owner_table[:-1].title()} not found")
            await session.execute(
                sql_text(
                    f"""
                    INSERT INTO {logs_table} (id, {owner_key}, date, is_completed)
                    VALUES (:id, :owner_id, :date, :is_completed)
                    """
                ),
                {
                    "id": entry_id,
                    "owner_id": owner_id,
                    "date": stored_date,
                    "is_completed": int(bool(is_completed)),
                },
            )
            await session.commit()
        return LogEntry(
            id=entry_id,
            owner_id=owner_id,
            date=_parse_datetime(stored_date),
            is_completed=bool(is_completed),
        )
