from __future__ import annotations

from enum import IntEnum, StrEnum


class PriorityLevel(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: "PriorityLevel | str | int") -> "PriorityLevel":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown priority: {value!r}") from None
        return cls(value)


class StatusFilter(StrEnum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


class SortKey(StrEnum):
    DEADLINE = "deadline"
    PRIORITY = "priority"
    CREATED = "created"
    TITLE = "title"
    PROJECT = "project"


class SuggestionKind(StrEnum):
    TASK = "task"
    DESCRIPTION = "description"
    PROJECT = "project"
