from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from taskboard.services.store import EntityStore

NOW = datetime(2026, 3, 10, 12, 0, 0)


class FakeClock:
    def __init__(self, start: datetime = NOW) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock: FakeClock):
    with EntityStore(clock=clock) as instance:
        yield instance


@pytest.fixture()
def work_project(store: EntityStore):
    return store.projects.create_project({"name": "Work", "color": "#5B21B6", "icon": "Briefcase"})


def make_task(store: EntityStore, title: str, **fields):
    data = {
        "title": title,
        "description": "",
        "priority": "medium",
        "project_id": None,
        "deadline": NOW + timedelta(days=1),
    }
    data.update(fields)
    return store.tasks.create_task(data)
