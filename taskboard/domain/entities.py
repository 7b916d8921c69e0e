from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .enums import PriorityLevel


@dataclass(frozen=True)
class NoteEntity:
    id: int
    text: str
    created_at: datetime


@dataclass(frozen=True)
class SubtaskEntity:
    id: int
    title: str
    completed: bool
    created_at: datetime


@dataclass(frozen=True)
class TaskEntity:
    id: int
    title: str
    description: str
    priority: PriorityLevel
    project_id: int | None
    deadline: Optional[datetime]
    completed: bool
    completed_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    notes: tuple[NoteEntity, ...] = field(default_factory=tuple)
    subtasks: tuple[SubtaskEntity, ...] = field(default_factory=tuple)

    @property
    def completed_subtasks(self) -> int:
        return sum(1 for subtask in self.subtasks if subtask.completed)


@dataclass(frozen=True)
class ProjectEntity:
    id: int
    name: str
    color: str
    icon: str
    created_at: datetime
