import asyncio
from datetime import timedelta

import pytest

from dashboard.constants import MSG_HABIT_DONE, MSG_LOAD_FAILED, MSG_TODO_DONE
from dashboard.engine import DashboardEngine
from dashboard.errors import FetchError, InvalidFrequency, MutationError
from dashboard.state.store import MemoryStorage, StateStore
from tests.conftest import MONDAY


async def _started(repository, clock, user_id="u1", **kwargs):
    engine = DashboardEngine(repository, user_id=user_id, clock=clock, **kwargs)
    await engine.start()
    return engine


@pytest.mark.asyncio
async def test_start_loads_snapshot(repository, monday_clock):
    repository.add_habit("read")
    engine = await _started(repository, monday_clock)

    stats = engine.snapshot.stats
    assert (stats.today_habits_total, stats.today_habits_completed) == (1, 0)
    assert (stats.weekly_habits_total, stats.weekly_habits_completed) == (7, 0)
    assert (stats.pending_todos, stats.completed_todos) == (0, 0)
    assert engine.is_loading is False
    assert engine.last_error is None
    assert engine.snapshot.today == MONDAY.date()


@pytest.mark.asyncio
async def test_weekly_habit_not_due_on_monday(repository, monday_clock):
    repository.add_habit("review", frequency="WEEKLY")
    engine = await _started(repository, monday_clock)
    assert engine.snapshot.stats.today_habits_total == 0


@pytest.mark.asyncio
async def test_pending_todos_come_from_repository_filter(repository, monday_clock):
    for idx in range(7):
        repository.add_todo(f"t{idx}", due_date=MONDAY + timedelta(days=idx))
    repository.add_todo("overdue", due_date=MONDAY - timedelta(days=1))
    repository.add_todo("done", due_date=MONDAY + timedelta(days=1), is_completed=True)
    engine = await _started(repository, monday_clock)

    snapshot = engine.snapshot
    assert [todo.id for todo in snapshot.todos] == ["t0", "t1", "t2", "t3", "t4"]
    assert snapshot.stats.pending_todos == len(snapshot.todos)
    assert snapshot.stats.completed_todos == 1


@pytest.mark.asyncio
async def test_complete_habit_twice_appends_two_entries(repository, monday_clock):
    repository.add_habit("read")
    engine = await _started(repository, monday_clock)

    first = await engine.complete_habit("read")
    second = await engine.complete_habit("read")

    assert first.ok and second.ok
    assert first.message == MSG_HABIT_DONE
    assert len([entry for entry in repository.habit_logs if entry.owner_id == "read"]) == 2
    stats = engine.snapshot.stats
    assert stats.today_habits_completed == 1
    assert stats.weekly_habits_completed == 2


@pytest.mark.asyncio
async def test_complete_habit_failure_keeps_snapshot(repository, monday_clock):
    repository.add_habit("read")
    engine = await _started(repository, monday_clock)
    before = engine.snapshot
    calls_before = len(repository.calls)
    repository.fail("create_habit_log_entry")

    result = await engine.complete_habit("read")

    assert not result.ok
    assert isinstance(result.error, MutationError)
    assert result.error.partial is False
    assert result.error.applied == "none"
    assert isinstance(result.error.__cause__, RuntimeError)
    assert engine.snapshot is before
    assert engine.last_error is result.error
    # no refresh after a failed write
    assert repository.calls[calls_before:] == ["create_habit_log_entry"]


@pytest.mark.asyncio
async def test_complete_todo_success(repository, monday_clock):
    repository.add_todo("pay", due_date=MONDAY + timedelta(days=1))
    engine = await _started(repository, monday_clock)

    result = await engine.complete_todo("pay")

    assert result.ok
    assert result.message == MSG_TODO_DONE
    assert result.todo.is_completed
    assert await repository.count_todo_log_entries("pay") == 1
    assert engine.snapshot.stats.pending_todos == 0
    assert engine.snapshot.stats.completed_todos == 1


@pytest.mark.asyncio
async def test_complete_todo_first_write_fails_is_not_applied(repository, monday_clock):
    repository.add_todo("pay", due_date=MONDAY + timedelta(days=1))
    engine = await _started(repository, monday_clock)
    repository.fail("update_todo_completion")

    result = await engine.complete_todo("pay")

    assert not result.ok
    assert result.error.partial is False
    assert repository.todos["pay"].is_completed is False
    assert "create_todo_log_entry" not in repository.calls


@pytest.mark.asyncio
async def test_complete_todo_partial_failure_is_reported_and_not_reconciled(repository, monday_clock):
    repository.add_todo("pay", due_date=MONDAY + timedelta(days=1))
    engine = await _started(repository, monday_clock)
    before = engine.snapshot
    repository.fail("create_todo_log_entry")

    result = await engine.complete_todo("pay")

    assert not result.ok
    assert result.error.partial is True
    assert result.error.applied == "partial"
    assert result.error.to_dict()["partial"] is True
    assert engine.snapshot is before

    await engine.refresh()

    assert engine.snapshot.stats.completed_todos == 1
    assert engine.snapshot.stats.pending_todos == 0
    assert await repository.count_todo_log_entries("pay") == 0


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_snapshot(repository, monday_clock):
    repository.add_habit("read")
    engine = await _started(repository, monday_clock)
    before = engine.snapshot
    repository.fail("list_categories")

    await engine.refresh()

    assert engine.snapshot is before
    assert isinstance(engine.last_error, FetchError)
    assert engine.last_error.message == MSG_LOAD_FAILED
    assert engine.is_loading is False


@pytest.mark.asyncio
async def test_invalid_frequency_is_reported(repository, monday_clock):
    repository.add_habit("odd", frequency="HOURLY")
    engine = await _started(repository, monday_clock)

    assert isinstance(engine.last_error, InvalidFrequency)
    assert engine.is_loading is False
    assert engine.snapshot.stats.today_habits_total == 0


@pytest.mark.asyncio
async def test_successful_refresh_clears_last_error(repository, monday_clock):
    repository.add_habit("read")
    engine = await _started(repository, monday_clock)
    repository.fail("list_habits")
    await engine.refresh()
    assert engine.last_error is not None

    repository.failures.clear()
    await engine.refresh()
    assert engine.last_error is None


@pytest.mark.asyncio
async def test_stale_refresh_is_discarded(repository, monday_clock):
    repository.add_habit("read")
    engine = await _started(repository, monday_clock)

    gate = asyncio.Event()
    repository.delays["list_habits"] = gate
    slow = asyncio.create_task(engine.refresh())
    await asyncio.sleep(0)
    assert engine.is_loading is True

    repository.delays.clear()
    repository.add_habit("run")
    await engine.refresh()
    latest = engine.snapshot
    assert len(latest.habits) == 2

    repository.habits.pop("run")
    gate.set()
    await slow

    assert engine.snapshot is latest
    assert engine.is_loading is False
    assert engine.generation == 3


@pytest.mark.asyncio
async def test_stale_failure_does_not_override_newer_result(repository, monday_clock):
    engine = await _started(repository, monday_clock)

    gate = asyncio.Event()
    repository.delays["list_habits"] = gate
    slow = asyncio.create_task(engine.refresh())
    await asyncio.sleep(0)

    repository.delays.clear()
    await engine.refresh()
    repository.fail("list_pending_todos")
    gate.set()
    await slow

    assert engine.last_error is None


@pytest.mark.asyncio
async def test_notifier_receives_messages(repository, monday_clock):
    repository.add_habit("read")
    received = []
    engine = await _started(repository, monday_clock, notifier=lambda level, message: received.append((level, message)))
    await engine.complete_habit("read")
    repository.fail("create_habit_log_entry")
    await engine.complete_habit("read")
    assert received == [("success", MSG_HABIT_DONE), ("error", "Error updating habit")]


@pytest.mark.asyncio
async def test_refresh_without_user_is_a_no_op(repository, monday_clock):
    engine = await _started(repository, monday_clock, user_id=None)
    assert repository.calls == []
    assert engine.generation == 0


@pytest.mark.asyncio
async def test_switch_user_persists_and_reloads(repository, monday_clock):
    storage = MemoryStorage()
    store = StateStore({}, storage=storage, name="user-storage", persist_keys=("user_id",))
    engine = DashboardEngine(repository, clock=monday_clock, store=store)
    await engine.start()
    assert repository.calls == []

    await engine.switch_user("u2")

    assert engine.user_id == "u2"
    assert "list_habits" in repository.calls
    assert storage.get("user-storage") == '{"user_id": "u2"}'

    restored = DashboardEngine(
        repository,
        clock=monday_clock,
        store=StateStore({}, storage=storage, name="user-storage", persist_keys=("user_id",)),
    )
    await restored.start()
    assert restored.user_id == "u2"


@pytest.mark.asyncio
async def test_subscribers_see_loading_transitions(repository, monday_clock):
    engine = await _started(repository, monday_clock)
    seen = []
    engine.subscribe(lambda state, previous: seen.append(state["is_loading"]))
    await engine.refresh()
    assert seen == [True, False]


@pytest.mark.asyncio
async def test_write_success_is_announced_before_a_failed_reload(repository, monday_clock):
    repository.add_todo("pay", due_date=MONDAY + timedelta(days=1))
    received = []
    engine = await _started(repository, monday_clock, notifier=lambda level, message: received.append((level, message)))
    repository.fail("list_habits")

    result = await engine.complete_todo("pay")

    assert result.ok
    assert received == [("success", MSG_TODO_DONE), ("error", MSG_LOAD_FAILED)]
    assert isinstance(engine.last_error, FetchError)
