from __future__ import annotations

import logging
import sys
import time
from datetime import datetime

from taskboard.config import get_settings
from taskboard.demo_data import demo_projects, demo_tasks
from taskboard.domain.errors import NotFound
from taskboard.domain.filters import TaskFilters
from taskboard.infra.logging import setup_logging
from taskboard.services.project_service import ensure_project_unused
from taskboard.services.store import EntityStore

logger = logging.getLogger("taskboard.main")


def _latency_hook(delay_ms: int):
    if delay_ms <= 0:
        return None
    return lambda: time.sleep(delay_ms / 1000)


def _print_tasks(store: EntityStore, filters: TaskFilters) -> None:
    names = {project.id: project.name for project in store.projects.list_projects()}
    print(f"Tasks (sort={filters.sort}, status={filters.status}):")
    for task in store.query(filters):
        mark = "x" if task.completed else " "
        deadline = task.deadline.strftime("%Y-%m-%d %H:%M") if task.deadline else "-"
        project = names.get(task.project_id, "Unknown")
        print(f"  [{mark}] {task.title:<20} {task.priority.label:<6} {deadline}  {project}")


def main() -> None:
    settings = get_settings()
    setup_logging(settings)
    now = datetime.now()

    store = EntityStore(
        projects=demo_projects(),
        tasks=demo_tasks(now),
        latency=_latency_hook(settings.simulated_latency_ms),
        suggestion_limit=settings.suggestion_limit,
        suggestion_min_length=settings.suggestion_min_length,
    )
    with store:
        _print_tasks(store, TaskFilters(sort="priority"))

        query = sys.argv[1] if len(sys.argv) > 1 else "mee"
        print(f"\nSuggestions for {query!r}:")
        for suggestion in store.suggestions(query):
            print(f"  {suggestion.kind:<12} {suggestion.text}  ({suggestion.subtitle})")

        stats = store.stats(now)
        print("\nDashboard:")
        print(f"  total={stats.total_tasks} completed={stats.completed_tasks} "
              f"pending={stats.pending_tasks} overdue={stats.overdue_tasks} "
              f"completed_today={stats.completed_today} due_today={stats.due_today}")
        for name, chart in store.chart_data(now).items():
            print(f"  {name}: {dict(zip(chart.labels, chart.series))}")

        due_today = ", ".join(task.title for task in store.due_today(now)) or "-"
        print(f"  due today: {due_today}")

        for progress in store.project_progress():
            print(f"  {progress.project.name}: {progress.completed_count}/{progress.task_count} "
                  f"({progress.percentage}%)")

        project_id = demo_projects()[0]["id"]
        if not ensure_project_unused(store.tasks, project_id):
            logger.info("Project %s still has tasks; not deleting", project_id)

        try:
            store.tasks.toggle_complete(9999)
        except NotFound as exc:
            logger.info("Expected failure: %s", exc)


if __name__ == "__main__":
    main()
