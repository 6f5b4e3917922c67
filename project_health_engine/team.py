"""Team workload and time efficiency."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Optional

from project_health_engine.progress import round_half_up
from project_health_engine.schema import (
    MemberSnapshot,
    MemberUtilization,
    TaskSnapshot,
    TeamReport,
    active_members,
    is_task_open,
    is_task_overdue,
)

logger = logging.getLogger(__name__)

# Each open task counts as this many utilization points; not a capacity model.
UTILIZATION_PER_OPEN_TASK = 20
MAX_UTILIZATION = 100


def time_efficiency(tasks: list[TaskSnapshot]) -> int:
    """Estimated over actual hours for completed tasks, as a percentage."""

    completed = [task for task in tasks if task.status == "completed"]
    estimated = sum(task.estimated_hours for task in completed)
    actual = sum(task.actual_hours for task in completed)
    if estimated == 0 or actual == 0:
        return 100
    return int(round_half_up(estimated / actual * 100))


def member_utilization(open_tasks: int) -> int:
    return min(MAX_UTILIZATION, open_tasks * UTILIZATION_PER_OPEN_TASK)


def _member_figures(user_id: str, tasks: list[TaskSnapshot], now: Optional[date]) -> MemberUtilization:
    open_count = sum(1 for task in tasks if is_task_open(task))
    completed = sum(1 for task in tasks if task.status == "completed")
    return MemberUtilization(
        user_id=user_id,
        open_tasks=open_count,
        utilization=member_utilization(open_count),
        total_tasks=len(tasks),
        completed_tasks=completed,
        in_progress_tasks=sum(1 for task in tasks if task.status == "in_progress"),
        overdue_tasks=sum(1 for task in tasks if is_task_overdue(task, now)) if now else 0,
        estimated_hours=sum(task.estimated_hours for task in tasks),
        remaining_hours=sum(task.estimated_hours for task in tasks if task.status != "completed"),
        completion_rate=int(round_half_up(completed / len(tasks) * 100)) if tasks else 0,
        efficiency=time_efficiency(tasks),
    )


def analyze_team(
    members: list[MemberSnapshot],
    tasks: list[TaskSnapshot],
    now: Optional[date] = None,
) -> TeamReport:
    """Compute per-member and aggregate utilization for active members.

    Overdue counts are only filled in when ``now`` is given.
    """

    by_assignee: dict[str, list[TaskSnapshot]] = defaultdict(list)
    for task in tasks:
        if task.assignee_id is not None:
            by_assignee[task.assignee_id].append(task)

    figures = [_member_figures(member.user_id, by_assignee.get(member.user_id, []), now) for member in active_members(members)]

    if figures:
        utilization = int(round_half_up(sum(f.utilization for f in figures) / len(figures)))
        average_completion = round_half_up(sum(f.completion_rate for f in figures) / len(figures), 2)
    else:
        utilization = 0
        average_completion = 0.0

    report = TeamReport(
        members=figures,
        active_members=len(figures),
        utilization=utilization,
        efficiency=time_efficiency(tasks),
        average_completion_rate=average_completion,
    )
    logger.debug("Team utilization %s%% across %d active members", utilization, len(figures))
    return report
