from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from taskboard.domain.entities import NoteEntity, ProjectEntity, SubtaskEntity, TaskEntity
from taskboard.domain.enums import PriorityLevel
from taskboard.domain.timeutil import as_naive_utc

from .models import NoteModel, ProjectModel, SubtaskModel, TaskModel

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

TASK_FIELDS = frozenset({
    "title",
    "description",
    "priority",
    "project_id",
    "deadline",
    "completed",
    "completed_at",
})
PROJECT_FIELDS = frozenset({"name", "color", "icon"})
# Identity and bookkeeping fields are never taken from an update payload.
IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at", "sort_order"})
DATETIME_FIELDS = frozenset({"deadline", "completed_at"})


def _note_to_entity(model: NoteModel) -> NoteEntity:
    return NoteEntity(id=model.id, text=model.text, created_at=model.created_at)


def _subtask_to_entity(model: SubtaskModel) -> SubtaskEntity:
    return SubtaskEntity(
        id=model.id,
        title=model.title,
        completed=bool(model.completed),
        created_at=model.created_at,
    )


def _to_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        description=model.description,
        priority=PriorityLevel(model.priority),
        project_id=model.project_id,
        deadline=model.deadline,
        completed=bool(model.completed),
        completed_at=model.completed_at,
        created_at=model.created_at,
        updated_at=model.updated_at,
        notes=tuple(_note_to_entity(note) for note in model.notes),
        subtasks=tuple(_subtask_to_entity(subtask) for subtask in model.subtasks),
    )


def _project_to_entity(model: ProjectModel) -> ProjectEntity:
    return ProjectEntity(
        id=model.id,
        name=model.name,
        color=model.color,
        icon=model.icon,
        created_at=model.created_at,
    )


def _split_payload(data: Mapping[str, Any], allowed: frozenset[str]) -> dict[str, Any]:
    accepted = {}
    for key, value in data.items():
        if key in allowed:
            accepted[key] = as_naive_utc(value) if key in DATETIME_FIELDS else value
        elif key not in IMMUTABLE_FIELDS:
            logger.warning("Ignoring unsupported field %r", key)
    return accepted


class _Repository:
    def __init__(self, session_factory: sessionmaker, clock: Clock) -> None:
        self._session_factory = session_factory
        self._clock = clock

    def stamp(self, previous: Optional[datetime] = None) -> datetime:
        now = as_naive_utc(self._clock())
        if previous is not None and now <= previous:
            # Keep updated_at strictly increasing even under a frozen or coarse clock.
            now = previous + timedelta(microseconds=1)
        return now

    @staticmethod
    def _next_sort_order(session: Session, model: type) -> int:
        max_order = session.scalar(select(func.max(model.sort_order)))
        return (max_order or 0) + 1


class ProjectRepository(_Repository):
    def list_projects(self) -> list[ProjectEntity]:
        with self._session_factory() as session:
            stmt = select(ProjectModel).order_by(ProjectModel.sort_order.asc(), ProjectModel.id.asc())
            return [_project_to_entity(project) for project in session.scalars(stmt)]

    def get_project(self, project_id: int) -> Optional[ProjectEntity]:
        with self._session_factory() as session:
            project = session.get(ProjectModel, project_id)
            return _project_to_entity(project) if project else None

    def create_project(self, data: Mapping[str, Any], *, keep_identity: bool = False) -> ProjectEntity:
        fields = _split_payload(data, PROJECT_FIELDS)
        with self._session_factory() as session:
            project = ProjectModel(
                name=fields.get("name", ""),
                color=fields.get("color", ""),
                icon=fields.get("icon", ""),
                created_at=self.stamp(),
                sort_order=self._next_sort_order(session, ProjectModel),
            )
            if keep_identity:
                project.id = data.get("id")
                project.created_at = as_naive_utc(data.get("created_at")) or project.created_at
            session.add(project)
            session.commit()
            return _project_to_entity(project)

    def update_project(self, project_id: int, data: Mapping[str, Any]) -> Optional[ProjectEntity]:
        fields = _split_payload(data, PROJECT_FIELDS)
        with self._session_factory() as session:
            project = session.get(ProjectModel, project_id)
            if not project:
                return None
            for key, value in fields.items():
                setattr(project, key, value)
            session.commit()
            return _project_to_entity(project)

    def delete_project(self, project_id: int) -> bool:
        with self._session_factory() as session:
            project = session.get(ProjectModel, project_id)
            if not project:
                return False
            session.delete(project)
            session.commit()
            return True


class TaskRepository(_Repository):
    def list_tasks(self) -> list[TaskEntity]:
        with self._session_factory() as session:
            stmt = select(TaskModel).order_by(TaskModel.sort_order.asc(), TaskModel.id.asc())
            return [_to_entity(task) for task in session.scalars(stmt)]

    def get_task(self, task_id: int) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            return _to_entity(task) if task else None

    def count_for_project(self, project_id: int) -> int:
        with self._session_factory() as session:
            return session.scalar(
                select(func.count()).select_from(TaskModel).where(TaskModel.project_id == project_id)
            ) or 0

    def create_task(self, data: Mapping[str, Any], *, keep_identity: bool = False) -> TaskEntity:
        fields = _split_payload(
            {key: value for key, value in data.items() if key not in ("notes", "subtasks")},
            TASK_FIELDS,
        )
        now = self.stamp()
        completed = bool(fields.get("completed", False))
        completed_at = fields.get("completed_at") if completed else None
        if completed and completed_at is None:
            completed_at = now

        with self._session_factory() as session:
            task = TaskModel(
                title=fields.get("title", ""),
                description=fields.get("description") or "",
                priority=int(PriorityLevel.parse(fields.get("priority", PriorityLevel.MEDIUM))),
                project_id=fields.get("project_id"),
                deadline=fields.get("deadline"),
                completed=completed,
                completed_at=completed_at,
                created_at=now,
                updated_at=now,
                sort_order=self._next_sort_order(session, TaskModel),
            )
            if keep_identity:
                task.id = data.get("id")
                task.created_at = as_naive_utc(data.get("created_at")) or now
                task.updated_at = as_naive_utc(data.get("updated_at")) or task.created_at

            for position, note in enumerate(data.get("notes") or (), start=1):
                task.notes.append(self._build_note(note, position, now))
            for position, subtask in enumerate(data.get("subtasks") or (), start=1):
                task.subtasks.append(self._build_subtask(subtask, position, now))

            session.add(task)
            session.commit()
            return _to_entity(task)

    def update_task(self, task_id: int, data: Mapping[str, Any]) -> Optional[TaskEntity]:
        fields = _split_payload(data, TASK_FIELDS)
        if "priority" in fields:
            fields["priority"] = int(PriorityLevel.parse(fields["priority"]))
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return None
            for key, value in fields.items():
                setattr(task, key, value)
            task.updated_at = self.stamp(task.updated_at)
            session.commit()
            return _to_entity(task)

    def toggle_complete(self, task_id: int) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return None
            stamp = self.stamp(task.updated_at)
            task.completed = not task.completed
            task.completed_at = stamp if task.completed else None
            task.updated_at = stamp
            session.commit()
            return _to_entity(task)

    def delete_task(self, task_id: int) -> bool:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return False
            session.delete(task)
            session.commit()
            return True

    def add_note(self, task_id: int, text: str) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return None
            stamp = self.stamp(task.updated_at)
            position = max((note.position for note in task.notes), default=0) + 1
            task.notes.append(NoteModel(text=text, created_at=stamp, position=position))
            task.updated_at = stamp
            session.commit()
            return _to_entity(task)

    def delete_note(self, task_id: int, note_id: int) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return None
            note = next((n for n in task.notes if n.id == note_id), None)
            if note is not None:
                task.notes.remove(note)
                task.updated_at = self.stamp(task.updated_at)
                session.commit()
            else:
                logger.debug("Note %s not found on task %s; nothing to delete", note_id, task_id)
            return _to_entity(task)

    def add_subtask(self, task_id: int, title: str) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return None
            stamp = self.stamp(task.updated_at)
            position = max((subtask.position for subtask in task.subtasks), default=0) + 1
            task.subtasks.append(
                SubtaskModel(title=title, completed=False, created_at=stamp, position=position)
            )
            task.updated_at = stamp
            session.commit()
            return _to_entity(task)

    def toggle_subtask(self, task_id: int, subtask_id: int) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return None
            subtask = next((s for s in task.subtasks if s.id == subtask_id), None)
            if subtask is not None:
                subtask.completed = not subtask.completed
                task.updated_at = self.stamp(task.updated_at)
                session.commit()
            else:
                logger.debug("Subtask %s not found on task %s; nothing to toggle", subtask_id, task_id)
            return _to_entity(task)

    def delete_subtask(self, task_id: int, subtask_id: int) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return None
            subtask = next((s for s in task.subtasks if s.id == subtask_id), None)
            if subtask is not None:
                task.subtasks.remove(subtask)
                task.updated_at = self.stamp(task.updated_at)
                session.commit()
            else:
                logger.debug("Subtask %s not found on task %s; nothing to delete", subtask_id, task_id)
            return _to_entity(task)

    @staticmethod
    def _build_note(note: Mapping[str, Any] | str, position: int, now: datetime) -> NoteModel:
        if isinstance(note, str):
            return NoteModel(text=note, created_at=now, position=position)
        return NoteModel(
            text=note.get("text", ""),
            created_at=as_naive_utc(note.get("created_at")) or now,
            position=position,
        )

    @staticmethod
    def _build_subtask(subtask: Mapping[str, Any] | str, position: int, now: datetime) -> SubtaskModel:
        if isinstance(subtask, str):
            return SubtaskModel(title=subtask, completed=False, created_at=now, position=position)
        return SubtaskModel(
            title=subtask.get("title", ""),
            completed=bool(subtask.get("completed", False)),
            created_at=as_naive_utc(subtask.get("created_at")) or now,
            position=position,
        )


def seed_records(
    projects: ProjectRepository,
    tasks: TaskRepository,
    project_rows: Iterable[Mapping[str, Any]],
    task_rows: Iterable[Mapping[str, Any]],
) -> None:
    """Load initial records, keeping any ids and timestamps they carry."""
    project_count = 0
    for row in project_rows:
        projects.create_project(row, keep_identity="id" in row)
        project_count += 1
    task_count = 0
    for row in task_rows:
        tasks.create_task(row, keep_identity="id" in row)
        task_count += 1
    if project_count or task_count:
        logger.info("Seeded %s projects and %s tasks", project_count, task_count)
