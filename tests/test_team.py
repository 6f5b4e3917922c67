from datetime import date

from project_health_engine.schema import MemberSnapshot, TaskSnapshot
from project_health_engine.team import analyze_team, member_utilization, time_efficiency


def member(user_id, active=True):
    return MemberSnapshot(user_id=user_id, project_id="p1", is_active=active)


def task(task_id, status="todo", assignee=None, **fields):
    return TaskSnapshot(id=task_id, project_id="p1", status=status, assignee_id=assignee, **fields)


def test_member_utilization_is_capped():
    assert member_utilization(0) == 0
    assert member_utilization(3) == 60
    assert member_utilization(5) == 100
    assert member_utilization(12) == 100


def test_all_members_fully_loaded():
    members = [member(f"u{i}") for i in range(4)]
    tasks = [task(f"t{i}-{j}", assignee=f"u{i}") for i in range(4) for j in range(5)]

    report = analyze_team(members, tasks)

    assert [m.utilization for m in report.members] == [100, 100, 100, 100]
    assert report.utilization == 100


def test_only_open_tasks_count():
    tasks = [
        task("a", "todo", "u1"),
        task("b", "blocked", "u1"),
        task("c", "completed", "u1"),
        task("d", "cancelled", "u1"),
        task("e", "in_review", "u2"),
    ]
    report = analyze_team([member("u1"), member("u2")], tasks)

    by_user = {m.user_id: m for m in report.members}
    assert by_user["u1"].open_tasks == 2
    assert by_user["u1"].utilization == 40
    assert by_user["u2"].utilization == 20
    assert report.utilization == 30


def test_inactive_members_are_ignored():
    report = analyze_team([member("u1", active=False)], [task("a", assignee="u1")])

    assert report.active_members == 0
    assert report.members == []
    assert report.utilization == 0


def test_time_efficiency_over_completed_tasks():
    tasks = [
        task("a", "completed", estimated_hours=8, actual_hours=10),
        task("b", "completed", estimated_hours=12, actual_hours=15),
        task("c", "in_progress", estimated_hours=100, actual_hours=1),
    ]
    assert time_efficiency(tasks) == 80


def test_time_efficiency_defaults_to_hundred():
    assert time_efficiency([]) == 100
    assert time_efficiency([task("a", "completed", estimated_hours=5, actual_hours=0)]) == 100


def test_member_detail_figures():
    tasks = [
        task("a", "completed", "u1", estimated_hours=4, actual_hours=4),
        task("b", "in_progress", "u1", estimated_hours=6, due_date=date(2026, 1, 1)),
        task("c", "todo", "u1", estimated_hours=2, due_date=date(2026, 3, 1)),
    ]
    report = analyze_team([member("u1")], tasks, now=date(2026, 2, 1))
    figures = report.members[0]

    assert figures.total_tasks == 3
    assert figures.completed_tasks == 1
    assert figures.in_progress_tasks == 1
    assert figures.overdue_tasks == 1
    assert figures.estimated_hours == 12
    assert figures.remaining_hours == 8
    assert figures.completion_rate == 33
    assert figures.efficiency == 100
