from datetime import date

from project_health_engine.budget import analyze_budget, burn_rate, cost_performance_index
from project_health_engine.schema import ProjectSnapshot


def make_project(**overrides):
    fields = {
        "id": "p1",
        "status": "active",
        "start_date": date(2026, 1, 1),
        "due_date": date(2026, 1, 31),
        "budget": 1000.0,
    }
    fields.update(overrides)
    return ProjectSnapshot(**fields)


def test_analyze_budget_uses_labor_proxy():
    report = analyze_budget(make_project(), progress=50, now=date(2026, 1, 11))

    assert report.labor_cost == 600.0
    assert report.expenses_cost == 0.0
    assert report.total_cost == 600.0
    assert report.remaining_budget == 400.0
    assert report.budget_utilization == 60
    assert report.variance == 400.0
    assert report.variance_percentage == 40
    assert report.burn_rate == 60.0
    assert report.projected_cost == 1800.0
    assert report.cost_performance_index == 0.83
    assert report.currency == "USD"


def test_zero_budget_is_guarded():
    report = analyze_budget(make_project(budget=0.0), progress=75, now=date(2026, 1, 11))

    assert report.budget_utilization == 0
    assert report.variance_percentage == 0
    assert report.labor_cost == 0.0
    assert report.cost_performance_index == 1.0
    assert report.burn_rate == 0.0


def test_missing_budget_behaves_like_zero():
    report = analyze_budget(make_project(budget=None), progress=10, now=date(2026, 1, 11))

    assert report.budget == 0.0
    assert report.budget_utilization == 0
    assert report.cost_performance_index == 1.0


def test_cpi_sentinel_for_any_progress():
    project = make_project(budget=None)
    for progress in (0, 37, 100):
        assert cost_performance_index(project, progress) == 1.0


def test_burn_rate_falls_back_to_created_at_and_default_duration():
    project = make_project(start_date=None, created_at=date(2026, 1, 1))
    report = analyze_budget(project, progress=0, now=date(2026, 1, 21))

    assert report.burn_rate == 30.0
    assert report.projected_cost == 900.0


def test_burn_rate_zero_without_elapsed_days():
    assert burn_rate(make_project(), date(2026, 1, 1)) == 0.0
    assert burn_rate(make_project(start_date=None), date(2026, 1, 1)) == 0.0


def test_currency_prefers_project_then_argument():
    assert analyze_budget(make_project(budget_currency="EUR"), 0, date(2026, 1, 2)).currency == "EUR"
    assert analyze_budget(make_project(), 0, date(2026, 1, 2), currency="GBP").currency == "GBP"


def test_report_serializes_with_snake_case_fields():
    payload = analyze_budget(make_project(), 0, date(2026, 1, 2)).to_dict()
    assert payload["cost_performance_index"] == 0.0
    assert set(payload) >= {"budget_utilization", "variance_percentage", "burn_rate", "projected_cost", "currency"}


def test_future_start_has_no_burn():
    project = make_project(status="planning", start_date=date(2026, 3, 1), due_date=date(2026, 3, 31))
    report = analyze_budget(project, progress=0, now=date(2026, 2, 1))

    assert report.burn_rate == 0.0
    assert report.projected_cost == 0.0
