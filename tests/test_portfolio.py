from datetime import date, timedelta

import pytest

from project_health_engine.portfolio import score_portfolio, summarize_portfolio
from project_health_engine.schema import MemberSnapshot, ProjectBundle, ProjectSnapshot, TaskSnapshot

NOW = date(2026, 5, 1)


def bundle(project_id, overdue=False, overdue_tasks=0, members=2):
    due = NOW - timedelta(days=2) if overdue else NOW + timedelta(days=30)
    project = ProjectSnapshot(id=project_id, status="active", start_date=date(2026, 1, 1), due_date=due, budget=1000.0)
    tasks = [
        TaskSnapshot(f"{project_id}-t{i}", project_id, "todo", due_date=NOW - timedelta(days=1))
        for i in range(overdue_tasks)
    ]
    return ProjectBundle(project, tasks, [], [MemberSnapshot(f"u{i}", project_id) for i in range(members)])


def test_score_portfolio_rows():
    rows = score_portfolio([bundle("a"), bundle("b", overdue=True)], NOW)

    assert [row["project_id"] for row in rows] == ["a", "b"]
    assert [row["score"] for row in rows] == [100, 70]
    assert rows[1]["overall_status"] == "critical"
    assert rows[1]["risk_count"] == 1


def test_summarize_portfolio():
    bundles = [
        bundle("a"),
        bundle("b", overdue=True),
        bundle("c", overdue=True, overdue_tasks=10),
        bundle("d", overdue_tasks=1),
    ]
    summary = summarize_portfolio(score_portfolio(bundles, NOW))

    assert summary["n_projects"] == 4
    assert summary["score"]["mean"] == pytest.approx((100 + 70 + 50 + 98) / 4)
    assert summary["score"]["median"] == pytest.approx(84.0)
    assert summary["score"]["min"] == 50
    assert summary["score"]["max"] == 100
    assert summary["status_counts"] == {"good": 1, "warning": 1, "critical": 2}
    assert [row["project_id"] for row in summary["at_risk"]] == ["c", "b"]


def test_summarize_empty_portfolio():
    summary = summarize_portfolio([])

    assert summary["n_projects"] == 0
    assert summary["at_risk"] == []
    assert summary["status_counts"] == {"good": 0, "warning": 0, "critical": 0}
