from __future__ import annotations

from datetime import date, datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color_code: Optional[str] = None
    type: str = "BOTH"


class LogEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    date: datetime
    is_completed: bool


class HabitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    frequency: str
    category_id: Optional[str] = None
    category: Optional[CategoryResponse] = None
    logs: List[LogEntryResponse] = []


class HabitStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    habit: HabitResponse
    completed: bool


class TodoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    due_date: Optional[datetime] = None
    is_completed: bool
    category_id: Optional[str] = None
    category: Optional[CategoryResponse] = None


class StatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    today_habits_completed: int
    today_habits_total: int
    weekly_habits_completed: int
    weekly_habits_total: int
    pending_todos: int
    completed_todos: int
    today_percent: float
    weekly_percent: float
    todo_percent: float


class SnapshotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    today: date
    generated_at: Optional[datetime] = None
    habits: List[HabitResponse]
    todos: List[TodoResponse]
    categories: List[CategoryResponse]
    stats: StatsResponse
    today_habits: List[HabitStatusResponse]


class ErrorResponse(BaseModel):
    kind: str
    message: str
    operation: Optional[str] = None
    target_id: Optional[str] = None
    partial: Optional[bool] = None


class DashboardResponse(BaseModel):
    user_id: str
    snapshot: SnapshotResponse
    is_loading: bool
    last_error: Optional[ErrorResponse] = None


class MutationResponse(BaseModel):
    ok: bool
    message: str
    entry: Optional[LogEntryResponse] = None
    dashboard: DashboardResponse
