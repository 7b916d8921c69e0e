from __future__ import annotations

import logging
import threading

from taskboard.domain.entities import ProjectEntity
from taskboard.domain.errors import NotFound
from taskboard.infra.repository import ProjectRepository

from .base import LatencyHook, StoreService, store_operation
from .task_service import TaskService

logger = logging.getLogger(__name__)


class ProjectService(StoreService):
    def __init__(
        self,
        repo: ProjectRepository,
        lock: threading.RLock | None = None,
        latency: LatencyHook | None = None,
    ) -> None:
        super().__init__(lock, latency)
        self._repo = repo

    @store_operation
    def list_projects(self) -> list[ProjectEntity]:
        return self._repo.list_projects()

    @store_operation
    def get_project(self, project_id: int) -> ProjectEntity | None:
        return self._repo.get_project(project_id)

    @store_operation
    def create_project(self, data: dict) -> ProjectEntity:
        project = self._repo.create_project(data)
        logger.info("Project created id=%s name=%r", project.id, project.name)
        return project

    @store_operation
    def update_project(self, project_id: int, data: dict) -> ProjectEntity:
        project = self._repo.update_project(project_id, data)
        if project is None:
            self._raise_not_found(project_id)
        logger.debug("Project updated id=%s fields=%s", project_id, sorted(data))
        return project

    @store_operation
    def delete_project(self, project_id: int) -> None:
        """Delete unconditionally; callers check ``ensure_project_unused`` first."""
        if not self._repo.delete_project(project_id):
            self._raise_not_found(project_id)
        logger.info("Project deleted id=%s", project_id)

    @staticmethod
    def _raise_not_found(project_id: int) -> None:
        logger.warning("Project not found id=%s", project_id)
        raise NotFound("project", project_id)


def ensure_project_unused(tasks: TaskService, project_id: int) -> bool:
    """Return True when no task references ``project_id``.

    Projects that still own tasks must not be deleted; this is the check the
    caller runs before ``ProjectService.delete_project``.
    """
    return tasks.count_for_project(project_id) == 0
