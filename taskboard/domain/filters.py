from __future__ import annotations

from dataclasses import dataclass

from .enums import PriorityLevel, SortKey, StatusFilter

ALL = "all"


@dataclass(frozen=True)
class TaskFilters:
    """Criteria for the task list view.

    ``project`` and ``priority`` accept the literal ``"all"`` to disable the
    predicate. ``search`` is matched case-insensitively against the title,
    the description and the resolved project name.
    """

    project: int | str = ALL
    priority: PriorityLevel | str = ALL
    status: StatusFilter | str = StatusFilter.ALL
    search: str = ""
    sort: SortKey | str = SortKey.DEADLINE
