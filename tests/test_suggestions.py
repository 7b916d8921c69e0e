from __future__ import annotations

from taskboard.domain.enums import SuggestionKind
from taskboard.services.suggestions import suggest

from .conftest import make_task


def test_single_character_query_is_empty(store, work_project) -> None:
    make_task(store, "a", description="a", project_id=work_project.id)

    assert store.suggestions("a") == []
    assert store.suggestions(" w ") == []


def test_task_titles_come_before_projects(store) -> None:
    work = store.projects.create_project({"name": "Work", "color": "", "icon": ""})
    store.projects.create_project({"name": "Meetups", "color": "", "icon": ""})
    make_task(store, "Team meeting", project_id=work.id)
    make_task(store, "Meeting notes", project_id=404)

    result = store.suggestions("mee")

    assert [(s.kind, s.text) for s in result] == [
        (SuggestionKind.TASK, "Team meeting"),
        (SuggestionKind.TASK, "Meeting notes"),
        (SuggestionKind.PROJECT, "Meetups"),
    ]
    assert result[0].subtitle == "in Work"
    assert result[1].subtitle == "in Unknown Project"
    assert result[2].subtitle == "Project"


def test_descriptions_are_truncated_and_deduplicated(store) -> None:
    long_text = "Plan the quarterly review and collect numbers from every single team"
    make_task(store, "Review", description=long_text)
    make_task(store, "Plan quarterly review", description="plan quarterly review")
    make_task(store, "Other", description=long_text.upper())

    result = store.suggestions("quarterly")

    assert [s.kind for s in result] == [SuggestionKind.TASK, SuggestionKind.DESCRIPTION]
    description = result[1]
    assert description.text == long_text[:50] + "..."
    assert description.subtitle == 'from "Review"'


def test_distinct_texts_containing_the_query_stay_separate(store) -> None:
    make_task(store, "Budget draft")
    make_task(store, "budget DRAFT")
    make_task(store, "Budget final")

    result = store.suggestions("budget")

    assert [s.text for s in result] == ["Budget draft", "Budget final"]


def test_result_is_capped_at_eight(store) -> None:
    for index in range(10):
        make_task(store, f"Call supplier {index}", description=f"call notes {index}")
    store.projects.create_project({"name": "Call center", "color": "", "icon": ""})
    tasks, projects = store.snapshot()

    result = suggest("call", tasks, projects)

    assert len(result) == 8
    assert all(s.kind is SuggestionKind.TASK for s in result)
    assert len(suggest("call", tasks, projects, limit=3)) == 3
