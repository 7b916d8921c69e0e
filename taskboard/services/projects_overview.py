from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from taskboard.domain.entities import ProjectEntity, TaskEntity


@dataclass(frozen=True)
class ProjectProgress:
    project: ProjectEntity
    task_count: int
    completed_count: int
    percentage: int


def completion_percentage(completed: int, total: int) -> int:
    if total == 0:
        return 0
    # Integer round-half-up of completed / total * 100.
    return (completed * 200 + total) // (2 * total)


def project_progress(
    projects: Sequence[ProjectEntity],
    tasks: Sequence[TaskEntity],
) -> list[ProjectProgress]:
    progress = []
    for project in projects:
        owned = [task for task in tasks if task.project_id == project.id]
        done = sum(1 for task in owned if task.completed)
        progress.append(
            ProjectProgress(
                project=project,
                task_count=len(owned),
                completed_count=done,
                percentage=completion_percentage(done, len(owned)),
            )
        )
    return progress
