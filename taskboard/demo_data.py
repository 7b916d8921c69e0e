from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Any


def demo_projects() -> list[dict[str, Any]]:
    return [
        {"id": 1, "name": "Work", "color": "#5B21B6", "icon": "Briefcase"},
        {"id": 2, "name": "Personal", "color": "#059669", "icon": "Home"},
        {"id": 3, "name": "Meetups", "color": "#D97706", "icon": "Users"},
    ]


def demo_tasks(now: datetime) -> list[dict[str, Any]]:
    today = datetime.combine(now.date(), time(17, 0))
    return [
        {
            "id": 1,
            "title": "Ship release",
            "description": "Tag the build and publish the release notes for the team",
            "priority": "high",
            "project_id": 1,
            "deadline": today + timedelta(days=1),
            "subtasks": ["Tag build", "Publish notes"],
        },
        {
            "id": 2,
            "title": "Team meeting",
            "description": "Weekly sync with the platform group",
            "priority": "medium",
            "project_id": 1,
            "deadline": today,
            "notes": ["Bring the roadmap slides"],
        },
        {
            "id": 3,
            "title": "Renew passport",
            "description": "",
            "priority": "low",
            "project_id": 2,
            "deadline": today - timedelta(days=2),
        },
        {
            "id": 4,
            "title": "Meeting notes",
            "description": "Write up the decisions from the meetup planning call",
            "priority": "medium",
            "project_id": 3,
            "deadline": today - timedelta(days=1),
            "completed": True,
            "completed_at": now - timedelta(hours=1),
        },
    ]
