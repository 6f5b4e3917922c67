"""Actual and expected completion percentages."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from project_health_engine.schema import TaskSnapshot, is_task_done


def round_half_up(value: float, digits: int = 0) -> float:
    """Round away from zero on ties, unlike the built-in banker's ``round``."""

    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def days_between(start: date, end: date) -> int:
    return (end - start).days


def compute_progress(tasks: list[TaskSnapshot]) -> int:
    """Return the share of done tasks as an integer percentage."""

    if not tasks:
        return 0
    done = sum(1 for task in tasks if is_task_done(task))
    return int(round_half_up(done / len(tasks) * 100))


def compute_expected_progress(start: Optional[date], due: Optional[date], now: date) -> float:
    """Return how far through its planned timeline a project should be."""

    if start is None or due is None or due <= start:
        return 0.0

    total_days = days_between(start, due)
    elapsed_days = max(0, days_between(start, now))
    expected = max(0.0, min(100.0, elapsed_days / total_days * 100))
    return round_half_up(expected, 2)
