from __future__ import annotations

from datetime import datetime, timedelta, timezone

from taskboard.domain.filters import TaskFilters
from taskboard.domain.timeutil import as_naive_utc
from taskboard.services.store import EntityStore

from .conftest import FakeClock

UTC_NOON = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
PLUS_FIVE = timezone(timedelta(hours=5))


def test_as_naive_utc() -> None:
    assert as_naive_utc(None) is None
    assert as_naive_utc(datetime(2026, 3, 10, 9)) == datetime(2026, 3, 10, 9)
    assert as_naive_utc(datetime(2026, 3, 10, 10, tzinfo=PLUS_FIVE)) == datetime(2026, 3, 10, 5)


def test_aware_clock_supports_every_mutation_and_stats() -> None:
    clock = FakeClock(UTC_NOON)
    with EntityStore(clock=clock) as store:
        done = store.tasks.create_task({"title": "finish", "deadline": UTC_NOON - timedelta(hours=1)})
        late = store.tasks.create_task({"title": "late", "deadline": UTC_NOON - timedelta(hours=2)})
        assert done.created_at == datetime(2026, 3, 10, 12)

        updated = store.tasks.update_task(done.id, {})
        assert updated.updated_at > done.updated_at

        toggled = store.tasks.toggle_complete(done.id)
        assert toggled.completed_at is not None
        with_note = store.tasks.add_note(done.id, "shipped")
        store.tasks.delete_note(done.id, with_note.notes[0].id)
        with_subtask = store.tasks.add_subtask(done.id, "announce")
        store.tasks.toggle_subtask(done.id, with_subtask.subtasks[0].id)
        store.tasks.delete_subtask(done.id, with_subtask.subtasks[0].id)

        clock.advance(minutes=1)
        stats = store.stats()

        assert stats.overdue_tasks == 1
        assert stats.completed_today == 1
        assert stats.due_today == 2
        assert [t.id for t in store.tasks.list_overdue(clock.now)] == [late.id]


def test_aware_deadlines_compare_by_instant() -> None:
    with EntityStore(clock=FakeClock(UTC_NOON)) as store:
        store.tasks.create_task({"title": "later", "deadline": datetime(2026, 3, 10, 6, tzinfo=timezone.utc)})
        earlier = store.tasks.create_task(
            {"title": "earlier", "deadline": datetime(2026, 3, 10, 10, tzinfo=PLUS_FIVE)}
        )

        assert earlier.deadline == datetime(2026, 3, 10, 5)
        assert [t.title for t in store.query(TaskFilters(sort="deadline"))] == ["earlier", "later"]

        half_past_five = datetime(2026, 3, 10, 5, 30, tzinfo=timezone.utc)
        assert [t.title for t in store.tasks.list_overdue(half_past_five)] == ["earlier"]

        moved = store.tasks.update_task(
            earlier.id, {"deadline": datetime(2026, 3, 10, 12, tzinfo=PLUS_FIVE)}
        )
        assert moved.deadline == datetime(2026, 3, 10, 7)
        assert [t.title for t in store.query(TaskFilters(sort="deadline"))] == ["later", "earlier"]
