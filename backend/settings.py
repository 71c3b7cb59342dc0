from __future__ import annotations

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dashboard.constants import DAY_TO_INDEX, DEFAULT_WEEK_START, HABIT_LOG_WINDOW, PENDING_TODO_LIMIT


class Settings(BaseSettings):
    database_url: str = Field(..., alias="DATABASE_URL")

    dashboard_timezone: str = Field("America/Sao_Paulo", alias="DASHBOARD_TIMEZONE")
    week_start_day: str = Field("sunday", alias="WEEK_START_DAY")

    habit_log_window: int = Field(HABIT_LOG_WINDOW, alias="HABIT_LOG_WINDOW")
    pending_todo_limit: int = Field(PENDING_TODO_LIMIT, alias="PENDING_TODO_LIMIT")
    engine_cache_size: int = Field(256, alias="ENGINE_CACHE_SIZE")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def week_start(self) -> int:
        return DAY_TO_INDEX.get(self.week_start_day.strip().lower(), DEFAULT_WEEK_START)


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


# For local dev convenience only.
if os.getenv("BACKEND_DEBUG_SETTINGS"):
    print(get_settings())
