from __future__ import annotations


class TaskboardError(Exception):
    """Base class for errors raised by the task/project core."""


class NotFound(TaskboardError, LookupError):
    def __init__(self, kind: str, entity_id: object) -> None:
        super().__init__(f"{kind.capitalize()} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id
