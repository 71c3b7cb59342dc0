from __future__ import annotations

from sqlalchemy import text as sql_text
from sqlalchemy.ext.asyncio import AsyncEngine

from backend.db import get_engine


CATEGORIES_TABLE = "categories"
HABITS_TABLE = "habits"
HABIT_LOGS_TABLE = "habit_logs"
TODOS_TABLE = "todos"
TODO_LOGS_TABLE = "todo_logs"


async def init_db(engine: AsyncEngine | None = None):
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {CATEGORIES_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    type TEXT DEFAULT 'BOTH',
                    color_code TEXT,
                    is_default INTEGER DEFAULT 0,
                    created_at TEXT
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {HABITS_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    frequency TEXT NOT NULL DEFAULT 'DAILY',
                    category_id TEXT,
                    created_at TEXT
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {HABIT_LOGS_TABLE} (
                    id TEXT PRIMARY KEY,
                    habit_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    is_completed INTEGER DEFAULT 1
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {TODOS_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    due_date TEXT,
                    is_completed INTEGER DEFAULT 0,
                    category_id TEXT,
                    created_at TEXT
                )
                """
            )
        )
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {TODO_LOGS_TABLE} (
                    id TEXT PRIMARY KEY,
                    todo_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    is_completed INTEGER DEFAULT 1
                )
                """
            )
        )
        await conn.execute(
            sql_text(f"CREATE INDEX IF NOT EXISTS idx_habit_logs_habit_date ON {HABIT_LOGS_TABLE} (habit_id, date)")
        )
        await conn.execute(
            sql_text(f"CREATE INDEX IF NOT EXISTS idx_todos_user_due ON {TODOS_TABLE} (user_id, is_completed, due_date)")
        )
        await conn.execute(
            sql_text(f"CREATE INDEX IF NOT EXISTS idx_todo_logs_todo ON {TODO_LOGS_TABLE} (todo_id)")
        )
