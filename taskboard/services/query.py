from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime

from taskboard.domain.entities import ProjectEntity, TaskEntity
from taskboard.domain.enums import PriorityLevel, SortKey, StatusFilter
from taskboard.domain.filters import ALL, TaskFilters

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT = "Unknown"


def project_names(projects: Iterable[ProjectEntity]) -> dict[int, str]:
    return {project.id: project.name for project in projects}


def resolve_project_name(task: TaskEntity, names: Mapping[int, str]) -> str:
    return names.get(task.project_id, UNKNOWN_PROJECT)


def matches_search(task: TaskEntity, term: str, names: Mapping[int, str]) -> bool:
    needle = term.lower()
    return (
        needle in task.title.lower()
        or needle in task.description.lower()
        or needle in resolve_project_name(task, names).lower()
    )


def filter_tasks(
    tasks: Iterable[TaskEntity],
    projects: Iterable[ProjectEntity],
    filters: TaskFilters,
) -> list[TaskEntity]:
    names = project_names(projects)
    priority = None if filters.priority == ALL else PriorityLevel.parse(filters.priority)
    status = StatusFilter(filters.status)
    project = None if filters.project == ALL else str(filters.project)

    result = []
    for task in tasks:
        if filters.search and not matches_search(task, filters.search, names):
            continue
        if project is not None and str(task.project_id) != project:
            continue
        if priority is not None and task.priority != priority:
            continue
        if status is StatusFilter.COMPLETED and not task.completed:
            continue
        if status is StatusFilter.PENDING and task.completed:
            continue
        result.append(task)
    return result


def _deadline_key(task: TaskEntity) -> tuple[bool, datetime]:
    # Tasks without a deadline sort after every dated task.
    return (task.deadline is None, task.deadline or datetime.min)


def _text_key(value: str) -> tuple[str, str]:
    return (value.casefold(), value)


def sort_tasks(
    tasks: Iterable[TaskEntity],
    projects: Iterable[ProjectEntity],
    sort: SortKey | str,
) -> list[TaskEntity]:
    """Return a new list ordered by ``sort``. Ties keep their input order."""
    key = SortKey(sort)
    ordered = list(tasks)
    if key is SortKey.DEADLINE:
        ordered.sort(key=_deadline_key)
    elif key is SortKey.PRIORITY:
        ordered.sort(key=lambda task: -int(task.priority))
    elif key is SortKey.CREATED:
        ordered.sort(key=lambda task: task.created_at, reverse=True)
    elif key is SortKey.TITLE:
        ordered.sort(key=lambda task: _text_key(task.title))
    elif key is SortKey.PROJECT:
        names = project_names(projects)
        ordered.sort(key=lambda task: _text_key(resolve_project_name(task, names)))
    return ordered


def query_tasks(
    tasks: Sequence[TaskEntity],
    projects: Sequence[ProjectEntity],
    filters: TaskFilters,
) -> list[TaskEntity]:
    visible = filter_tasks(tasks, projects, filters)
    ordered = sort_tasks(visible, projects, filters.sort)
    logger.debug("Query matched %s of %s tasks sort=%s", len(ordered), len(tasks), filters.sort)
    return ordered
