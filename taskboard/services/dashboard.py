from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from taskboard.domain.entities import ProjectEntity, TaskEntity
from taskboard.domain.enums import PriorityLevel
from taskboard.domain.timeutil import as_naive_utc

Snapshot = Callable[[], tuple[list[TaskEntity], list[ProjectEntity]]]

logger = logging.getLogger(__name__)

PRIORITY_ORDER = (PriorityLevel.HIGH, PriorityLevel.MEDIUM, PriorityLevel.LOW)


@dataclass(frozen=True)
class DashboardStats:
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    overdue_tasks: int
    completed_today: int
    due_today: int
    by_priority: dict[str, int]
    by_project: dict[str, int]


@dataclass(frozen=True)
class ChartSeries:
    series: tuple[int, ...]
    labels: tuple[str, ...]


def day_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Midnight of ``now`` and the following midnight.

    Naive values are taken as local time; aware ones are reduced to UTC first.
    """
    start = datetime.combine(as_naive_utc(now).date(), time.min)
    return start, start + timedelta(days=1)


def is_overdue(task: TaskEntity, now: datetime) -> bool:
    return not task.completed and task.deadline is not None and task.deadline < as_naive_utc(now)


def overdue_tasks(tasks: Sequence[TaskEntity], now: datetime) -> list[TaskEntity]:
    return [task for task in tasks if is_overdue(task, now)]


def due_today_tasks(tasks: Sequence[TaskEntity], now: datetime) -> list[TaskEntity]:
    start, end = day_bounds(now)
    return [task for task in tasks if task.deadline is not None and start <= task.deadline < end]


def compute_stats(
    tasks: Sequence[TaskEntity],
    projects: Sequence[ProjectEntity],
    now: datetime,
) -> DashboardStats:
    now = as_naive_utc(now)
    start, end = day_bounds(now)
    completed = [task for task in tasks if task.completed]

    by_priority = {level.label: 0 for level in PRIORITY_ORDER}
    for task in tasks:
        by_priority[task.priority.label] += 1

    # Tasks pointing at a deleted project are left out of the project breakdown.
    by_project: dict[str, int] = {}
    for project in projects:
        count = sum(1 for task in tasks if task.project_id == project.id)
        by_project[project.name] = by_project.get(project.name, 0) + count

    stats = DashboardStats(
        total_tasks=len(tasks),
        completed_tasks=len(completed),
        pending_tasks=len(tasks) - len(completed),
        overdue_tasks=len(overdue_tasks(tasks, now)),
        completed_today=sum(
            1
            for task in completed
            if task.completed_at is not None and start <= task.completed_at < end
        ),
        due_today=len(due_today_tasks(tasks, now)),
        by_priority=by_priority,
        by_project=by_project,
    )
    logger.debug("Dashboard stats computed total=%s overdue=%s", stats.total_tasks, stats.overdue_tasks)
    return stats


def chart_data(stats: DashboardStats) -> dict[str, ChartSeries]:
    return {
        "completion": ChartSeries(
            series=(stats.completed_tasks, stats.pending_tasks),
            labels=("Completed", "Pending"),
        ),
        "priority": ChartSeries(
            series=tuple(stats.by_priority[level.label] for level in PRIORITY_ORDER),
            labels=tuple(level.label.capitalize() for level in PRIORITY_ORDER),
        ),
    }


class DashboardService:
    """Recomputes dashboard figures from the current store contents on every call."""

    def __init__(self, snapshot: Snapshot, clock: Callable[[], datetime] = datetime.now) -> None:
        self._snapshot = snapshot
        self._clock = clock

    def get_stats(self, now: Optional[datetime] = None) -> DashboardStats:
        tasks, projects = self._snapshot()
        return compute_stats(tasks, projects, now or self._clock())

    def get_chart_data(self, now: Optional[datetime] = None) -> dict[str, ChartSeries]:
        return chart_data(self.get_stats(now))

    def get_due_today(self, now: Optional[datetime] = None) -> list[TaskEntity]:
        tasks, _ = self._snapshot()
        return due_today_tasks(tasks, now or self._clock())
