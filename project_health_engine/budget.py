"""Budget burn, variance and cost performance."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from project_health_engine.config import get_settings
from project_health_engine.progress import days_between, round_half_up
from project_health_engine.schema import BudgetReport, ProjectSnapshot

logger = logging.getLogger(__name__)

# Stand-in for time tracking: a fixed share of the budget is treated as labor spend.
LABOR_COST_RATIO = 0.60
DEFAULT_PLANNED_DAYS = 30


def labor_cost(project: ProjectSnapshot) -> float:
    return project.budget * LABOR_COST_RATIO if project.budget else 0.0


def expenses_cost(project: ProjectSnapshot) -> float:
    # No expense data source exists yet.
    return 0.0


def _elapsed_days(project: ProjectSnapshot, now: date) -> int:
    anchor = project.start_date or project.created_at
    if anchor is None:
        return 0
    return max(0, days_between(anchor, now))


def _planned_days(project: ProjectSnapshot) -> int:
    if project.start_date and project.due_date:
        return days_between(project.start_date, project.due_date)
    return DEFAULT_PLANNED_DAYS


def burn_rate(project: ProjectSnapshot, now: date) -> float:
    """Cost incurred per elapsed day since the project started."""

    elapsed = _elapsed_days(project, now)
    if elapsed == 0:
        return 0.0
    spent = labor_cost(project) + expenses_cost(project)
    return round_half_up(spent / elapsed, 2)


def cost_performance_index(project: ProjectSnapshot, progress: float) -> float:
    """Earned value over actual cost; 1.0 when nothing has been spent."""

    actual = labor_cost(project) + expenses_cost(project)
    if actual == 0:
        return 1.0
    earned_value = (progress / 100) * (project.budget or 0.0)
    return round_half_up(earned_value / actual, 2)


def analyze_budget(project: ProjectSnapshot, progress: float, now: date, currency: Optional[str] = None) -> BudgetReport:
    """Build the budget report for a project at ``now``."""

    budget = project.budget or 0.0
    labor = labor_cost(project)
    expenses = expenses_cost(project)
    total = labor + expenses
    variance = budget - total

    rate = burn_rate(project, now)
    report = BudgetReport(
        budget=budget,
        actual_cost=project.actual_cost or 0.0,
        labor_cost=labor,
        expenses_cost=expenses,
        total_cost=total,
        remaining_budget=budget - total,
        budget_utilization=int(round_half_up(total / budget * 100)) if budget > 0 else 0,
        variance=variance,
        variance_percentage=int(round_half_up(variance / budget * 100)) if budget > 0 else 0,
        burn_rate=rate,
        projected_cost=round_half_up(rate * _planned_days(project), 2),
        cost_performance_index=cost_performance_index(project, progress),
        currency=project.budget_currency or currency or get_settings().default_currency,
    )
    logger.debug(
        "Budget for project %s: utilization=%s%% burn_rate=%s cpi=%s",
        project.id,
        report.budget_utilization,
        report.burn_rate,
        report.cost_performance_index,
    )
    return report
