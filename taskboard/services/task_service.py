from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any

from taskboard.domain.entities import TaskEntity
from taskboard.domain.enums import PriorityLevel
from taskboard.domain.errors import NotFound
from taskboard.infra.repository import TaskRepository

from .base import LatencyHook, StoreService, store_operation
from .dashboard import due_today_tasks, overdue_tasks

logger = logging.getLogger(__name__)


class TaskService(StoreService):
    def __init__(
        self,
        repo: TaskRepository,
        lock: threading.RLock | None = None,
        latency: LatencyHook | None = None,
    ) -> None:
        super().__init__(lock, latency)
        self._repo = repo

    @store_operation
    def list_tasks(self) -> list[TaskEntity]:
        return self._repo.list_tasks()

    @store_operation
    def get_task(self, task_id: int) -> TaskEntity | None:
        return self._repo.get_task(task_id)

    @store_operation
    def create_task(self, data: dict) -> TaskEntity:
        task = self._repo.create_task(data)
        logger.info("Task created id=%s project=%s", task.id, task.project_id)
        return task

    @store_operation
    def update_task(self, task_id: int, data: dict) -> TaskEntity:
        normalized = self._normalize_data(data)
        if "completed" in normalized:
            current = self._require(self._repo.get_task(task_id), task_id)
            completed = bool(normalized["completed"])
            normalized["completed"] = completed
            if not completed:
                normalized["completed_at"] = None
            elif normalized.get("completed_at") is None:
                normalized["completed_at"] = (
                    current.completed_at if current.completed else self._repo.stamp(current.updated_at)
                )
        elif "completed_at" in normalized:
            # completed_at only follows the completion flag.
            normalized.pop("completed_at")
        task = self._require(self._repo.update_task(task_id, normalized), task_id)
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(normalized))
        return task

    @store_operation
    def delete_task(self, task_id: int) -> None:
        if not self._repo.delete_task(task_id):
            self._raise_not_found(task_id)
        logger.info("Task deleted id=%s", task_id)

    @store_operation
    def toggle_complete(self, task_id: int) -> TaskEntity:
        task = self._require(self._repo.toggle_complete(task_id), task_id)
        logger.debug("Task id=%s completed=%s", task_id, task.completed)
        return task

    @store_operation
    def add_note(self, task_id: int, text: str) -> TaskEntity:
        return self._require(self._repo.add_note(task_id, text), task_id)

    @store_operation
    def delete_note(self, task_id: int, note_id: int) -> TaskEntity:
        return self._require(self._repo.delete_note(task_id, note_id), task_id)

    @store_operation
    def add_subtask(self, task_id: int, title: str) -> TaskEntity:
        return self._require(self._repo.add_subtask(task_id, title), task_id)

    @store_operation
    def toggle_subtask(self, task_id: int, subtask_id: int) -> TaskEntity:
        return self._require(self._repo.toggle_subtask(task_id, subtask_id), task_id)

    @store_operation
    def delete_subtask(self, task_id: int, subtask_id: int) -> TaskEntity:
        return self._require(self._repo.delete_subtask(task_id, subtask_id), task_id)

    @store_operation
    def list_by_project(self, project_id: int) -> list[TaskEntity]:
        return [task for task in self._repo.list_tasks() if task.project_id == project_id]

    @store_operation
    def list_by_priority(self, priority: PriorityLevel | str) -> list[TaskEntity]:
        level = PriorityLevel.parse(priority)
        return [task for task in self._repo.list_tasks() if task.priority == level]

    @store_operation
    def list_completed(self) -> list[TaskEntity]:
        return [task for task in self._repo.list_tasks() if task.completed]

    @store_operation
    def list_pending(self) -> list[TaskEntity]:
        return [task for task in self._repo.list_tasks() if not task.completed]

    @store_operation
    def list_overdue(self, now: datetime) -> list[TaskEntity]:
        return overdue_tasks(self._repo.list_tasks(), now)

    @store_operation
    def list_due_today(self, now: datetime) -> list[TaskEntity]:
        return due_today_tasks(self._repo.list_tasks(), now)

    @store_operation
    def search(self, query: str) -> list[TaskEntity]:
        tasks = self._repo.list_tasks()
        term = (query or "").strip().lower()
        if not term:
            return tasks
        return [
            task
            for task in tasks
            if term in task.title.lower() or term in task.description.lower()
        ]

    @store_operation
    def count_for_project(self, project_id: int) -> int:
        return self._repo.count_for_project(project_id)

    def _normalize_data(self, data: dict[str, Any]) -> dict[str, Any]:
        normalized = dict(data)
        if "priority" in normalized:
            normalized["priority"] = PriorityLevel.parse(normalized["priority"])
        return normalized

    def _require(self, task: TaskEntity | None, task_id: int) -> TaskEntity:
        if task is None:
            self._raise_not_found(task_id)
        return task

    @staticmethod
    def _raise_not_found(task_id: int) -> None:
        logger.warning("Task not found id=%s", task_id)
        raise NotFound("task", task_id)
