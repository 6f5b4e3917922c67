"""Composite project health score, indicators, risks and recommendations."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from project_health_engine.budget import analyze_budget
from project_health_engine.progress import compute_expected_progress, compute_progress, round_half_up
from project_health_engine.schema import (
    STATUS_CRITICAL,
    STATUS_GOOD,
    STATUS_WARNING,
    BudgetReport,
    HealthReport,
    Indicator,
    MemberSnapshot,
    MilestoneSnapshot,
    ProjectSnapshot,
    Risk,
    TaskSnapshot,
    TeamReport,
    active_members,
    is_milestone_overdue,
    is_project_overdue,
    is_task_overdue,
)
from project_health_engine.team import analyze_team

logger = logging.getLogger(__name__)

OVERDUE_PROJECT_PENALTY = 30
BUDGET_OVERRUN_PENALTY = 25
BUDGET_WARNING_PENALTY = 15
OVERDUE_TASK_PENALTY = 2
OVERDUE_TASK_PENALTY_CAP = 20
OVERDUE_MILESTONE_PENALTY = 5
OVERDUE_MILESTONE_PENALTY_CAP = 15

REVIEW_MEETING_RECOMMENDATION = "Schedule a project review meeting with stakeholders"


def compute_health_score(
    project: ProjectSnapshot,
    budget_utilization: float,
    overdue_tasks: int,
    overdue_milestones: int,
    now: date,
) -> tuple[int, dict[str, int]]:
    """Deduct penalties from 100 and return ``(score, deductions)``."""

    deductions: dict[str, int] = {}

    if is_project_overdue(project, now):
        deductions["overdue_project"] = OVERDUE_PROJECT_PENALTY

    if budget_utilization > 100:
        deductions["budget"] = BUDGET_OVERRUN_PENALTY
    elif budget_utilization > 90:
        deductions["budget"] = BUDGET_WARNING_PENALTY

    if overdue_tasks > 0:
        deductions["overdue_tasks"] = min(OVERDUE_TASK_PENALTY_CAP, overdue_tasks * OVERDUE_TASK_PENALTY)

    if overdue_milestones > 0:
        deductions["overdue_milestones"] = min(
            OVERDUE_MILESTONE_PENALTY_CAP, overdue_milestones * OVERDUE_MILESTONE_PENALTY
        )

    return max(0, 100 - sum(deductions.values())), deductions


def _tier_at_least(value: float, good: float, warning: float) -> str:
    if value >= good:
        return STATUS_GOOD
    if value >= warning:
        return STATUS_WARNING
    return STATUS_CRITICAL


def _tier_at_most(value: float, good: float, warning: float) -> str:
    if value <= good:
        return STATUS_GOOD
    if value <= warning:
        return STATUS_WARNING
    return STATUS_CRITICAL


def _fmt(value: float) -> str:
    return f"{value:g}"


def schedule_indicator(actual_progress: float, expected_progress: float) -> Indicator:
    variance = round_half_up(actual_progress - expected_progress, 2)
    message = "On schedule" if variance >= 0 else f"{_fmt(variance)}% behind schedule"
    return Indicator(_tier_at_least(variance, -5, -15), "variance", variance, message)


def budget_indicator(utilization: float) -> Indicator:
    if utilization <= 100:
        message = f"{_fmt(utilization)}% of budget used"
    else:
        message = f"{_fmt(utilization - 100)}% over budget"
    return Indicator(_tier_at_most(utilization, 80, 95), "utilization", utilization, message)


def scope_indicator(completion_rate: float) -> Indicator:
    return Indicator(
        _tier_at_least(completion_rate, 70, 50),
        "completion_rate",
        completion_rate,
        f"{_fmt(completion_rate)}% of tasks completed",
    )


def team_indicator(utilization: float) -> Indicator:
    message = "Team capacity healthy" if utilization <= 80 else "Team may be overloaded"
    return Indicator(_tier_at_most(utilization, 80, 95), "utilization", utilization, message)


def quality_indicator(efficiency: float) -> Indicator:
    return Indicator(
        _tier_at_least(efficiency, 80, 60),
        "efficiency",
        efficiency,
        f"{_fmt(efficiency)}% efficiency rating",
    )


def identify_risks(
    project: ProjectSnapshot,
    budget: BudgetReport,
    active_member_count: int,
    overdue_tasks: int,
    now: date,
) -> list[Risk]:
    """List schedule, budget, resource and execution risks."""

    risks = []

    if is_project_overdue(project, now):
        days_overdue = (now - project.due_date).days
        risks.append(
            Risk(
                type="schedule",
                severity="high",
                title="Project Overdue",
                description=f"Project is {days_overdue} days overdue",
                mitigation="Review timeline and reallocate resources or adjust deadline",
            )
        )

    if budget.budget_utilization > 90:
        risks.append(
            Risk(
                type="budget",
                severity="critical" if budget.budget_utilization > 100 else "high",
                title="Budget Risk",
                description=f"Budget utilization at {budget.budget_utilization}%",
                mitigation="Review expenses and consider budget reallocation",
            )
        )

    if active_member_count < 2:
        risks.append(
            Risk(
                type="resource",
                severity="medium",
                title="Limited Resources",
                description="Project has minimal team members",
                mitigation="Consider adding team members for critical tasks",
            )
        )

    if overdue_tasks > 5:
        risks.append(
            Risk(
                type="execution",
                severity="high",
                title="Multiple Overdue Tasks",
                description=f"{overdue_tasks} tasks are overdue",
                mitigation="Prioritize overdue tasks and reassign if needed",
            )
        )

    return risks


def overall_status(score: int, deductions: dict[str, int], budget_utilization: float) -> str:
    """Derive the status tier from the score and the deductions that fired.

    An overdue project or a budget overrun is critical on its own; any other
    deduction makes the project at least a warning.
    """

    if "overdue_project" in deductions or budget_utilization > 100 or score < 50:
        return STATUS_CRITICAL
    if deductions or score < 80:
        return STATUS_WARNING
    return STATUS_GOOD


def generate_recommendations(status: str, risks: list[Risk]) -> list[str]:
    recommendations: list[str] = []
    for risk in risks:
        if risk.severity in ("high", "critical") and risk.mitigation not in recommendations:
            recommendations.append(risk.mitigation)

    if status in (STATUS_WARNING, STATUS_CRITICAL) and REVIEW_MEETING_RECOMMENDATION not in recommendations:
        recommendations.append(REVIEW_MEETING_RECOMMENDATION)
    return recommendations


def score_project(
    project: ProjectSnapshot,
    tasks: list[TaskSnapshot],
    milestones: list[MilestoneSnapshot],
    members: list[MemberSnapshot],
    now: date,
    budget: Optional[BudgetReport] = None,
    team: Optional[TeamReport] = None,
) -> HealthReport:
    """Score a project snapshot at ``now``.

    ``budget`` and ``team`` may be passed in when the caller already computed
    them for the same snapshot.
    """

    progress = compute_progress(tasks)
    if budget is None:
        budget = analyze_budget(project, progress, now)
    if team is None:
        team = analyze_team(members, tasks, now)

    overdue_tasks = sum(1 for task in tasks if is_task_overdue(task, now))
    overdue_milestones = sum(1 for milestone in milestones if is_milestone_overdue(milestone, now))

    score, deductions = compute_health_score(
        project, budget.budget_utilization, overdue_tasks, overdue_milestones, now
    )

    completed = sum(1 for task in tasks if task.status == "completed")
    completion_rate = int(round_half_up(completed / len(tasks) * 100)) if tasks else 0
    expected = compute_expected_progress(project.start_date, project.due_date, now)

    indicators = {
        "schedule": schedule_indicator(progress, expected),
        "budget": budget_indicator(budget.budget_utilization),
        "scope": scope_indicator(completion_rate),
        "team": team_indicator(team.utilization),
        "quality": quality_indicator(team.efficiency),
    }

    risks = identify_risks(project, budget, len(active_members(members)), overdue_tasks, now)
    status = overall_status(score, deductions, budget.budget_utilization)

    logger.debug("Project %s health score %d (%s), deductions=%s", project.id, score, status, deductions)

    return HealthReport(
        overall_status=status,
        score=score,
        indicators=indicators,
        risks=risks,
        recommendations=generate_recommendations(status, risks),
        deductions=deductions,
    )
