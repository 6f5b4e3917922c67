import json
from datetime import date, timedelta

from project_health_engine import dashboard as dashboard_module
from project_health_engine.cache import InMemoryTTLCache, cache_key
from project_health_engine.dashboard import DashboardService, build_dashboard
from project_health_engine.schema import MemberSnapshot, ProjectBundle, ProjectSnapshot, TaskSnapshot

NOW = date(2026, 3, 1)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def sample_bundle(budget=1000.0):
    project = ProjectSnapshot(
        id="p1",
        status="active",
        start_date=date(2026, 2, 1),
        due_date=date(2026, 4, 1),
        budget=budget,
    )
    tasks = [
        TaskSnapshot("a", "p1", "completed", completed_date=date(2026, 2, 10), estimated_hours=5, actual_hours=5, assignee_id="u1"),
        TaskSnapshot("b", "p1", "todo", due_date=date(2026, 3, 20), assignee_id="u2"),
    ]
    members = [MemberSnapshot("u1", "p1"), MemberSnapshot("u2", "p1")]
    return ProjectBundle(project, tasks, [], members)


def test_build_dashboard_sections_are_json_serializable():
    dashboard = build_dashboard(sample_bundle(), NOW)

    assert set(dashboard) == {"overview", "statistics", "team", "budget", "health", "risks", "milestones", "tasks"}
    assert dashboard["health"]["score"] == 100
    assert dashboard["budget"]["budget_utilization"] == 60
    assert dashboard["team"]["utilization"] == 10
    json.dumps(dashboard)


def test_service_without_cache_recomputes():
    service = DashboardService()
    first = service.get_dashboard(sample_bundle(), NOW)
    second = service.get_dashboard(sample_bundle(), NOW)

    assert first == second
    assert first is not second


def counting_build(monkeypatch):
    calls = []

    def build(bundle, now):
        calls.append(now)
        return build_dashboard(bundle, now)

    monkeypatch.setattr(dashboard_module, "build_dashboard", build)
    return calls


def test_service_memoizes_until_ttl_expires(monkeypatch):
    calls = counting_build(monkeypatch)
    clock = FakeClock()
    cache = InMemoryTTLCache(clock=clock)
    service = DashboardService(cache=cache, ttl_seconds=300)
    bundle = sample_bundle()

    first = service.get_dashboard(bundle, NOW)
    assert service.get_dashboard(bundle, NOW) == first
    assert len(calls) == 1
    assert len(cache) == 1

    clock.now += 301
    service.get_dashboard(bundle, NOW)
    assert len(calls) == 2


def test_cached_dashboard_is_not_shared_with_callers():
    cache = InMemoryTTLCache(clock=FakeClock())
    service = DashboardService(cache=cache, ttl_seconds=300)
    bundle = sample_bundle()

    first = service.get_dashboard(bundle, NOW)
    first["status_label"] = "edited"
    first["health"]["score"] = -1

    second = service.get_dashboard(bundle, NOW)
    assert "status_label" not in second
    assert second["health"]["score"] == 100


def test_expired_entries_are_dropped_on_write():
    clock = FakeClock()
    cache = InMemoryTTLCache(clock=clock)
    service = DashboardService(cache=cache, ttl_seconds=300)
    bundle = sample_bundle()

    for day in range(28):
        service.get_dashboard(bundle, NOW + timedelta(days=day))
        clock.now += 86400

    assert len(cache) == 1


def test_purge_expired_keeps_live_entries():
    clock = FakeClock()
    cache = InMemoryTTLCache(clock=clock)
    cache.set("old", 1, 10)
    cache.set("new", 2, 100)

    clock.now += 50
    assert cache.purge_expired() == 1
    assert cache.get("old") is None
    assert cache.get("new") == 2


def test_cache_key_changes_with_inputs():
    assert cache_key(sample_bundle(), NOW) == cache_key(sample_bundle(), NOW)
    assert cache_key(sample_bundle(), NOW) != cache_key(sample_bundle(budget=2000.0), NOW)
    assert cache_key(sample_bundle(), NOW) != cache_key(sample_bundle(), date(2026, 3, 2))
    assert cache_key(sample_bundle(), NOW).startswith("project_dashboard:p1:")


def test_cache_invalidate_by_prefix():
    cache = InMemoryTTLCache(clock=FakeClock())
    cache.set("project_dashboard:p1:x", {"a": 1}, 60)
    cache.set("project_dashboard:p2:y", {"b": 2}, 60)

    assert cache.invalidate("project_dashboard:p1:") == 1
    assert cache.get("project_dashboard:p1:x") is None
    assert cache.get("project_dashboard:p2:y") == {"b": 2}


def test_default_ttl_comes_from_settings():
    assert DashboardService().ttl_seconds == 300
