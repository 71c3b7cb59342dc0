from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import datetime
from zoneinfo import ZoneInfo

from backend.repositories import SqlDashboardRepository
from backend.settings import get_settings
from dashboard.data.repositories import DashboardRepository
from dashboard.engine import DashboardEngine

logger = logging.getLogger(__name__)


def local_now() -> datetime:
    settings = get_settings()
    try:
        return datetime.now(ZoneInfo(settings.dashboard_timezone))
    except Exception:
        logger.debug("Unknown timezone %s, using host clock.", settings.dashboard_timezone)
        return datetime.now()


class EngineRegistry:
    """Started ``DashboardEngine`` instances keyed by user id.

    The map is bounded; the least recently used engine is closed and dropped
    once ``max_engines`` is exceeded.
    """

    def __init__(self, repository: DashboardRepository | None = None, clock=None, max_engines: int | None = None):
        self._repository = repository
        self._clock = clock
        self._max_engines = max_engines
        self._engines: OrderedDict[str, DashboardEngine] = OrderedDict()

    def __len__(self) -> int:
        return len(self._engines)

    def __contains__(self, user_id) -> bool:
        return user_id in self._engines

    def _build(self, user_id: str) -> DashboardEngine:
        settings = get_settings()
        return DashboardEngine(
            self._repository or SqlDashboardRepository(),
            user_id=user_id,
            clock=self._clock or local_now,
            week_start=settings.week_start,
            log_window=settings.habit_log_window,
            todo_limit=settings.pending_todo_limit,
        )

    async def _checkout(self, user_id: str) -> tuple[DashboardEngine, bool]:
        engine = self._engines.get(user_id)
        if engine is not None:
            self._engines.move_to_end(user_id)
            return engine, False
        engine = self._build(user_id)
        self._engines[user_id] = engine
        self._evict()
        await engine.start()
        return engine, True

    def _evict(self) -> None:
        limit = self._max_engines or get_settings().engine_cache_size
        while len(self._engines) > max(limit, 1):
            user_id, engine = self._engines.popitem(last=False)
            logger.info("Closing idle dashboard engine for user %s", user_id)
            engine.close()

    async def get(self, user_id: str) -> DashboardEngine:
        engine, _ = await self._checkout(user_id)
        return engine

    async def load(self, user_id: str) -> DashboardEngine:
        """Return the user's engine with a snapshot rebuilt for this request."""
        engine, started = await self._checkout(user_id)
        if not started:
            await engine.refresh()
        return engine

    def close(self) -> None:
        for engine in self._engines.values():
            engine.close()
        self._engines.clear()


_registry: EngineRegistry | None = None


def get_registry() -> EngineRegistry:
    global _registry
    if _registry is None:
        _registry = EngineRegistry()
    return _registry


def reset_registry() -> None:
    global _registry
    if _registry is not None:
        _registry.close()
    _registry = None
