from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from taskboard.domain.entities import ProjectEntity, TaskEntity
from taskboard.domain.enums import SuggestionKind

from .query import project_names

MAX_SUGGESTIONS = 8
MIN_QUERY_LENGTH = 2
DESCRIPTION_PREVIEW = 50
UNKNOWN_PROJECT = "Unknown Project"


@dataclass(frozen=True)
class Suggestion:
    id: int
    kind: SuggestionKind
    text: str
    subtitle: str


def _preview(text: str) -> str:
    if len(text) > DESCRIPTION_PREVIEW:
        return text[:DESCRIPTION_PREVIEW] + "..."
    return text


def suggest(
    query: str,
    tasks: Sequence[TaskEntity],
    projects: Sequence[ProjectEntity],
    *,
    limit: int = MAX_SUGGESTIONS,
    min_length: int = MIN_QUERY_LENGTH,
) -> list[Suggestion]:
    """Autocomplete candidates for ``query``.

    Sources are scanned in order: task titles, then task descriptions, then
    project names. A text already offered (compared case-insensitively) is
    not offered again. Descriptions and project names stop being collected
    once ``limit`` suggestions exist.
    """
    term = (query or "").strip().lower()
    if len(term) < min_length:
        return []

    names = project_names(projects)
    suggestions: list[Suggestion] = []
    seen: set[str] = set()

    for task in tasks:
        if term not in task.title.lower():
            continue
        key = task.title.lower()
        if key in seen:
            continue
        project_name = names.get(task.project_id) or UNKNOWN_PROJECT
        suggestions.append(Suggestion(task.id, SuggestionKind.TASK, task.title, f"in {project_name}"))
        seen.add(key)

    for task in tasks:
        if term not in task.description.lower():
            continue
        key = task.description.lower()
        if key in seen or len(suggestions) >= limit:
            continue
        suggestions.append(
            Suggestion(
                task.id,
                SuggestionKind.DESCRIPTION,
                _preview(task.description),
                f'from "{task.title}"',
            )
        )
        seen.add(key)

    for project in projects:
        if term not in project.name.lower():
            continue
        key = project.name.lower()
        if key in seen or len(suggestions) >= limit:
            continue
        suggestions.append(Suggestion(project.id, SuggestionKind.PROJECT, project.name, "Project"))
        seen.add(key)

    return suggestions[:limit]
