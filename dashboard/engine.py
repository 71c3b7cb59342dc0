from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from dashboard.constants import (
    DEFAULT_WEEK_START,
    HABIT_LOG_WINDOW,
    MSG_HABIT_DONE,
    MSG_HABIT_FAILED,
    MSG_LOAD_FAILED,
    MSG_TODO_DONE,
    MSG_TODO_FAILED,
    MSG_TODO_PARTIAL,
    PENDING_TODO_LIMIT,
    USER_STORAGE_NAME,
)
from dashboard.data.repositories import DashboardRepository
from dashboard.errors import DashboardError, FetchError, MutationError
from dashboard.metrics import build_snapshot
from dashboard.models import DashboardSnapshot, LogEntry, Todo
from dashboard.state.store import MemoryStorage, StateStore

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]


@dataclass(frozen=True)
class MutationResult:
    ok: bool
    message: str
    error: Optional[MutationError] = None
    entry: Optional[LogEntry] = None
    todo: Optional[Todo] = None


def _with_cause(error: MutationError, exc: Exception) -> MutationError:
    error.__cause__ = exc
    return error


class DashboardEngine:
    """Fetch-and-aggregate pipeline plus the completion actions.

    Every refresh takes a new generation number; only the most recently
    issued refresh may publish its snapshot or error, so a slow response
    that resolves after a newer one is dropped. Mutations never patch the
    snapshot, they re-run the whole pipeline once the writes succeed.
    """

    def __init__(
        self,
        repository: DashboardRepository,
        user_id: Optional[str] = None,
        store: Optional[StateStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
        week_start: int = DEFAULT_WEEK_START,
        log_window: int = HABIT_LOG_WINDOW,
        todo_limit: int = PENDING_TODO_LIMIT,
        notifier: Optional[Notifier] = None,
    ):
        self._repository = repository
        self._initial_user_id = user_id
        self._clock = clock or datetime.now
        self._week_start = week_start
        self._log_window = log_window
        self._todo_limit = todo_limit
        self._notifier = notifier
        self._store = store or StateStore(
            {},
            storage=MemoryStorage(),
            name=USER_STORAGE_NAME,
            persist_keys=("user_id",),
        )
        self._generation = 0

    @property
    def snapshot(self) -> DashboardSnapshot:
        snapshot = self._store.get("snapshot")
        if snapshot is None:
            return DashboardSnapshot.empty(self._clock().date())
        return snapshot

    @property
    def is_loading(self) -> bool:
        return bool(self._store.get("is_loading", False))

    @property
    def last_error(self) -> Optional[DashboardError]:
        return self._store.get("last_error")

    @property
    def user_id(self) -> Optional[str]:
        return self._store.get("user_id")

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def store(self) -> StateStore:
        return self._store

    async def start(self) -> None:
        self._store.open()
        user_id = self._initial_user_id or self._store.get("user_id")
        self._store.set(
            user_id=user_id,
            snapshot=DashboardSnapshot.empty(self._clock().date()),
            is_loading=False,
            last_error=None,
        )
        await self.refresh()

    def close(self) -> None:
        self._store.close()

    def subscribe(self, listener):
        return self._store.subscribe(listener)

    async def switch_user(self, user_id: str) -> None:
        if user_id == self.user_id:
            return
        self._store.set(
            user_id=user_id,
            snapshot=DashboardSnapshot.empty(self._clock().date()),
            last_error=None,
        )
        await self.refresh()

    async def refresh(self) -> None:
        user_id = self.user_id
        if not user_id:
            logger.debug("Skipping dashboard refresh without a user")
            return
        self._generation += 1
        generation = self._generation
        self._store.set(is_loading=True)
        try:
            snapshot = await self._load_snapshot(user_id)
        except DashboardError as exc:
            self._publish(generation, error=exc)
            return
        self._publish(generation, snapshot=snapshot)

    async def complete_habit(self, habit_id: str) -> MutationResult:
        # No same-day check: completing twice appends two entries.
        try:
            entry = await self._repository.create_habit_log_entry(habit_id, self._clock(), True)
        except Exception as exc:
            logger.exception("Error updating habit %s", habit_id)
            error = MutationError(MSG_HABIT_FAILED, "complete_habit", habit_id)
            return self._mutation_failed(_with_cause(error, exc))
        self._notify("success", MSG_HABIT_DONE)
        await self.refresh()
        return MutationResult(ok=True, message=MSG_HABIT_DONE, entry=entry)

    async def complete_todo(self, todo_id: str) -> MutationResult:
        try:
            todo = await self._repository.update_todo_completion(todo_id, True)
        except Exception as exc:
            logger.exception("Error updating todo %s", todo_id)
            error = MutationError(MSG_TODO_FAILED, "complete_todo", todo_id)
            return self._mutation_failed(_with_cause(error, exc))
        # The todo is already stored as completed; a failure below is not rolled back.
        try:
            entry = await self._repository.create_todo_log_entry(todo_id, self._clock(), True)
        except Exception as exc:
            logger.exception("Todo %s completed but its log entry was not written", todo_id)
            error = MutationError(MSG_TODO_PARTIAL, "complete_todo", todo_id, partial=True)
            return self._mutation_failed(_with_cause(error, exc))
        self._notify("success", MSG_TODO_DONE)
        await self.refresh()
        return MutationResult(ok=True, message=MSG_TODO_DONE, entry=entry, todo=todo)

    async def _load_snapshot(self, user_id: str) -> DashboardSnapshot:
        now = self._clock()
        try:
            habits = await self._repository.list_habits(user_id, log_limit=self._log_window)
            todos = await self._repository.list_pending_todos(user_id, due_after=now, limit=self._todo_limit)
            categories = await self._repository.list_categories(user_id)
            completed_todos = await self._repository.count_completed_todos(user_id)
        except Exception as exc:
            logger.exception("Error fetching dashboard data for user %s", user_id)
            raise FetchError(MSG_LOAD_FAILED) from exc
        return build_snapshot(
            habits,
            todos,
            categories,
            completed_todos,
            now.date(),
            week_start=self._week_start,
            generated_at=now,
        )

    def _publish(self, generation, snapshot=None, error=None):
        if generation != self._generation:
            logger.debug("Discarding stale refresh %s (latest is %s)", generation, self._generation)
            return
        if error is not None:
            logger.warning("Dashboard refresh failed: %s", error.message)
            self._store.set(is_loading=False, last_error=error)
            self._notify("error", error.message)
            return
        self._store.set(snapshot=snapshot, is_loading=False, last_error=None)

    def _mutation_failed(self, error: MutationError) -> MutationResult:
        self._store.set(last_error=error)
        self._notify("error", error.message)
        return MutationResult(ok=False, message=error.message, error=error)

    def _notify(self, level, message):
        if self._notifier is None:
            return
        self._notifier(level, message)
