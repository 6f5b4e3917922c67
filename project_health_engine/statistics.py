"""Descriptive project statistics for dashboards."""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date, timedelta
from typing import Any, Optional

from project_health_engine.config import get_settings
from project_health_engine.progress import (
    compute_expected_progress,
    compute_progress,
    days_between,
    round_half_up,
)
from project_health_engine.schema import (
    MilestoneSnapshot,
    ProjectBundle,
    ProjectSnapshot,
    TaskSnapshot,
    active_members,
    is_milestone_completed,
    is_milestone_overdue,
    is_task_overdue,
)
from project_health_engine.team import analyze_team, time_efficiency

BURNDOWN_FALLBACK_DAYS = 30


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def _completion_rate(tasks: list[TaskSnapshot]) -> int:
    if not tasks:
        return 0
    completed = sum(1 for task in tasks if task.status == "completed")
    return int(round_half_up(completed / len(tasks) * 100))


def project_overview(project: ProjectSnapshot, tasks: list[TaskSnapshot], now: date) -> dict[str, Any]:
    """Timeline position and completion of a project."""

    start = project.start_date or project.created_at
    due = project.due_date

    total_days = days_between(start, due) if start and due else 0
    elapsed_days = max(0, days_between(start, now)) if start else 0
    remaining_days = days_between(now, due) if due and due > now else 0

    actual = compute_progress(tasks)
    expected = compute_expected_progress(project.start_date, project.due_date, now)

    return {
        "id": project.id,
        "name": project.name,
        "status": project.status,
        "dates": {
            "start": _iso(start),
            "due": _iso(due),
            "completed": _iso(project.completed_at),
            "created": _iso(project.created_at),
        },
        "duration": {
            "total_days": total_days,
            "elapsed_days": elapsed_days,
            "remaining_days": remaining_days,
            "progress_percentage": int(round_half_up(elapsed_days / total_days * 100)) if total_days > 0 else 0,
        },
        "completion": {
            "percentage": actual,
            "expected": expected,
            "variance": round_half_up(actual - expected, 2),
        },
    }


def project_statistics(bundle: ProjectBundle, now: date) -> dict[str, Any]:
    """Task, milestone, team and time counts for one project."""

    tasks = bundle.tasks
    milestones = bundle.milestones
    members = active_members(bundle.members)

    return {
        "tasks": {
            "total": len(tasks),
            "completed": sum(1 for task in tasks if task.status == "completed"),
            "in_progress": sum(1 for task in tasks if task.status == "in_progress"),
            "todo": sum(1 for task in tasks if task.status == "todo"),
            "overdue": sum(1 for task in tasks if is_task_overdue(task, now)),
            "completion_rate": _completion_rate(tasks),
        },
        "milestones": {
            "total": len(milestones),
            "completed": sum(1 for m in milestones if is_milestone_completed(m)),
            "upcoming": sum(1 for m in milestones if not is_milestone_completed(m) and m.due_date and m.due_date > now),
            "overdue": sum(1 for m in milestones if is_milestone_overdue(m, now)),
            "critical": sum(1 for m in milestones if m.is_critical),
        },
        "team": {
            "total_members": len(bundle.members),
            "active_members": len(members),
            "average_utilization": analyze_team(bundle.members, tasks).utilization,
        },
        "time": {
            "estimated_hours": sum(task.estimated_hours for task in tasks),
            "actual_hours": sum(task.actual_hours for task in tasks),
            "remaining_hours": sum(task.estimated_hours for task in tasks if task.status != "completed"),
            "efficiency": time_efficiency(tasks),
        },
    }


def velocity(tasks: list[TaskSnapshot]) -> float:
    """Mean number of tasks completed per ISO week that saw a completion."""

    weeks: Counter = Counter()
    for task in tasks:
        if task.status == "completed" and task.completed_date is not None:
            year, week, _ = task.completed_date.isocalendar()
            weeks[(year, week)] += 1

    if not weeks:
        return 0.0
    return round_half_up(sum(weeks.values()) / len(weeks), 1)


def burndown(project: ProjectSnapshot, tasks: list[TaskSnapshot], now: date) -> list[dict[str, Any]]:
    """Daily remaining vs. ideal task counts from project start to due date."""

    start = project.start_date or project.created_at
    if start is None:
        return []
    end = project.due_date or now + timedelta(days=BURNDOWN_FALLBACK_DAYS)

    total = len(tasks)
    span = days_between(start, end)
    completion_dates = sorted(
        task.completed_date for task in tasks if task.status == "completed" and task.completed_date is not None
    )

    series = []
    for offset in range(max(0, span) + 1):
        current = start + timedelta(days=offset)
        done = sum(1 for completed in completion_dates if completed <= current)
        ideal = total * (1 - offset / span) if span > 0 else 0.0
        series.append(
            {
                "date": current.isoformat(),
                "remaining": total - done,
                "ideal": round_half_up(ideal, 2),
            }
        )
    return series


def task_metrics(project: ProjectSnapshot, tasks: list[TaskSnapshot], now: date) -> dict[str, Any]:
    """Task breakdowns, velocity, burndown and upcoming workload."""

    by_assignee: dict[Optional[str], list[TaskSnapshot]] = defaultdict(list)
    for task in tasks:
        by_assignee[task.assignee_id or None].append(task)

    window = get_settings().upcoming_window_days
    upcoming = sum(1 for task in tasks if task.due_date and task.due_date > now and days_between(now, task.due_date) <= window)

    return {
        "by_status": dict(Counter(task.status for task in tasks)),
        "by_priority": dict(Counter(task.priority for task in tasks)),
        "by_assignee": [
            {
                "assignee_id": assignee_id,
                "count": len(group),
                "completed": sum(1 for task in group if task.status == "completed"),
            }
            for assignee_id, group in by_assignee.items()
        ],
        "velocity": velocity(tasks),
        "burndown": burndown(project, tasks, now),
        "upcoming": upcoming,
    }


def milestone_progress(milestones: list[MilestoneSnapshot], now: date) -> list[dict[str, Any]]:
    rows = []
    for milestone in sorted(milestones, key=lambda m: (m.due_date is None, m.due_date or date.min)):
        completed = is_milestone_completed(milestone)
        if milestone.due_date is None or completed:
            days_remaining = None
        elif milestone.due_date > now:
            days_remaining = days_between(now, milestone.due_date)
        else:
            days_remaining = 0

        rows.append(
            {
                "id": milestone.id,
                "due_date": _iso(milestone.due_date),
                "is_critical": milestone.is_critical,
                "status": milestone.status,
                "percentage": milestone.completion_percentage,
                "is_completed": completed,
                "is_overdue": is_milestone_overdue(milestone, now),
                "days_remaining": days_remaining,
            }
        )
    return rows
