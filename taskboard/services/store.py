from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any, Optional

from taskboard.domain.entities import ProjectEntity, TaskEntity
from taskboard.domain.filters import TaskFilters
from taskboard.infra.db import create_memory_engine, create_session_factory, init_db
from taskboard.infra.repository import ProjectRepository, TaskRepository, seed_records

from .base import LatencyHook, no_latency
from .dashboard import ChartSeries, DashboardService, DashboardStats
from .project_service import ProjectService
from .projects_overview import ProjectProgress, project_progress
from .query import query_tasks
from .suggestions import MAX_SUGGESTIONS, MIN_QUERY_LENGTH, Suggestion, suggest
from .task_service import TaskService

logger = logging.getLogger(__name__)


class EntityStore:
    """Owns the task and project collections for one process-lifetime session.

    Each instance has its own in-memory database, so tests can build as many
    independent stores as they like. Reads hand out frozen snapshots; the
    only way to change state is through ``tasks`` and ``projects``.
    """

    def __init__(
        self,
        *,
        projects: Iterable[Mapping[str, Any]] = (),
        tasks: Iterable[Mapping[str, Any]] = (),
        clock: Callable[[], datetime] = datetime.now,
        latency: Optional[LatencyHook] = None,
        suggestion_limit: int = MAX_SUGGESTIONS,
        suggestion_min_length: int = MIN_QUERY_LENGTH,
    ) -> None:
        self._engine = create_memory_engine()
        init_db(self._engine)
        session_factory = create_session_factory(self._engine)
        self._lock = threading.RLock()
        self._latency = latency or no_latency
        self._clock = clock
        self._suggestion_limit = suggestion_limit
        self._suggestion_min_length = suggestion_min_length

        self._project_repo = ProjectRepository(session_factory, clock)
        self._task_repo = TaskRepository(session_factory, clock)
        seed_records(self._project_repo, self._task_repo, projects, tasks)

        self.projects = ProjectService(self._project_repo, lock=self._lock, latency=latency)
        self.tasks = TaskService(self._task_repo, lock=self._lock, latency=latency)
        self.dashboard = DashboardService(self.snapshot, clock=clock)

    def close(self) -> None:
        self._engine.dispose()

    def __enter__(self) -> "EntityStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def snapshot(self) -> tuple[list[TaskEntity], list[ProjectEntity]]:
        """Tasks and projects read together under the store lock."""
        with self._lock:
            tasks = self._task_repo.list_tasks()
            projects = self._project_repo.list_projects()
            self._latency()
        return tasks, projects

    def query(self, filters: TaskFilters | None = None) -> list[TaskEntity]:
        tasks, projects = self.snapshot()
        return query_tasks(tasks, projects, filters or TaskFilters())

    def suggestions(self, query: str) -> list[Suggestion]:
        tasks, projects = self.snapshot()
        return suggest(
            query,
            tasks,
            projects,
            limit=self._suggestion_limit,
            min_length=self._suggestion_min_length,
        )

    def stats(self, now: Optional[datetime] = None) -> DashboardStats:
        return self.dashboard.get_stats(now)

    def chart_data(self, now: Optional[datetime] = None) -> dict[str, ChartSeries]:
        return self.dashboard.get_chart_data(now)

    def due_today(self, now: Optional[datetime] = None) -> list[TaskEntity]:
        return self.dashboard.get_due_today(now)

    def project_progress(self) -> list[ProjectProgress]:
        tasks, projects = self.snapshot()
        return project_progress(projects, tasks)
