from __future__ import annotations

import threading
from datetime import datetime, timedelta

from taskboard.demo_data import demo_projects, demo_tasks
from taskboard.services.store import EntityStore

from .conftest import NOW, FakeClock, make_task


def test_stores_are_independent(clock) -> None:
    with EntityStore(clock=clock) as first, EntityStore(clock=clock) as second:
        make_task(first, "only here")

        assert len(first.tasks.list_tasks()) == 1
        assert second.tasks.list_tasks() == []


def test_latency_hook_runs_once_per_operation(clock) -> None:
    calls = []
    with EntityStore(clock=clock, latency=lambda: calls.append(1)) as store:
        task = make_task(store, "slow")
        store.tasks.toggle_complete(task.id)
        store.tasks.get_task(task.id)

    assert len(calls) == 3


def test_seed_keeps_ids_and_references() -> None:
    now = datetime(2026, 3, 10, 9, 30)
    with EntityStore(projects=demo_projects(), tasks=demo_tasks(now), clock=FakeClock(now)) as store:
        tasks, projects = store.snapshot()

        assert [p.id for p in projects] == [1, 2, 3]
        assert [t.id for t in tasks] == [1, 2, 3, 4]
        assert tasks[3].completed_at == now - timedelta(hours=1)

        created = store.tasks.create_task({"title": "fresh", "project_id": 1, "deadline": now})
        assert created.id == 5

        stats = store.stats(now)
        assert stats.by_project == {"Work": 3, "Personal": 1, "Meetups": 1}
        assert stats.completed_today == 1


def test_release_scenario() -> None:
    clock = FakeClock(NOW)
    with EntityStore(clock=clock) as store:
        project = store.projects.create_project({"name": "Work", "color": "#000", "icon": "Briefcase"})
        task = store.tasks.create_task({
            "title": "Ship release",
            "project_id": project.id,
            "priority": "high",
            "deadline": NOW + timedelta(days=1),
        })
        assert task.completed is False

        clock.advance(minutes=5)
        task = store.tasks.toggle_complete(task.id)
        assert task.completed is True
        assert task.completed_at == clock.now

        store.projects.delete_project(project.id)

        assert store.tasks.get_task(task.id).project_id == project.id
        assert "Work" not in store.stats(clock.now).by_project


def test_due_today_reads_through_the_dashboard(store) -> None:
    make_task(store, "today", deadline=NOW + timedelta(hours=2))
    make_task(store, "tomorrow", deadline=NOW + timedelta(days=1))

    assert [t.title for t in store.due_today(NOW)] == ["today"]


def test_snapshot_and_stats_fire_latency_once(clock) -> None:
    calls = []
    with EntityStore(clock=clock, latency=lambda: calls.append(1)) as store:
        store.snapshot()
        assert len(calls) == 1
        store.stats(NOW)
        assert len(calls) == 2


def test_snapshot_is_taken_under_the_store_lock(clock) -> None:
    seen = {}

    def hook() -> None:
        if "writer" in seen:
            return
        writer = threading.Thread(target=lambda: make_task(seen["store"], "concurrent"))
        seen["writer"] = writer
        writer.start()
        writer.join(timeout=0.2)
        seen["blocked"] = writer.is_alive()

    with EntityStore(clock=clock, latency=hook) as store:
        seen["store"] = store
        tasks, projects = store.snapshot()
        seen["writer"].join(timeout=5)

        assert seen["blocked"] is True
        assert tasks == []
        assert projects == []
        assert [t.title for t in store.tasks.list_tasks()] == ["concurrent"]
