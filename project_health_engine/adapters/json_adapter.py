"""JSON adapter for project bundles."""

from __future__ import annotations

import json

from project_health_engine.adapters.fields import (
    parse_bool,
    parse_choice,
    parse_date,
    parse_float,
    parse_id,
    require,
)
from project_health_engine.exceptions import SnapshotParseError
from project_health_engine.schema import (
    MILESTONE_STATUSES,
    PROJECT_STATUSES,
    TASK_PRIORITIES,
    TASK_STATUSES,
    MemberSnapshot,
    MilestoneSnapshot,
    ProjectBundle,
    ProjectSnapshot,
    TaskSnapshot,
)


def _parse_project(item: dict, where: str) -> ProjectSnapshot:
    require(item, ("id", "status"), where)
    return ProjectSnapshot(
        id=str(item["id"]).strip(),
        status=parse_choice(item["status"], "status", PROJECT_STATUSES, where),
        start_date=parse_date(item.get("start_date"), "start_date", where),
        due_date=parse_date(item.get("due_date"), "due_date", where),
        completed_at=parse_date(item.get("completed_at"), "completed_at", where),
        budget=parse_float(item.get("budget"), "budget", where),
        budget_currency=parse_id(item.get("budget_currency")),
        actual_cost=parse_float(item.get("actual_cost"), "actual_cost", where),
        created_at=parse_date(item.get("created_at"), "created_at", where),
        name=str(item.get("name") or ""),
    )


def _parse_task(item: dict, project_id: str, where: str) -> TaskSnapshot:
    require(item, ("id", "status"), where)
    return TaskSnapshot(
        id=str(item["id"]).strip(),
        project_id=parse_id(item.get("project_id")) or project_id,
        status=parse_choice(item["status"], "status", TASK_STATUSES, where),
        priority=parse_choice(item.get("priority"), "priority", TASK_PRIORITIES, where, default="normal"),
        start_date=parse_date(item.get("start_date"), "start_date", where),
        due_date=parse_date(item.get("due_date"), "due_date", where),
        completed_date=parse_date(item.get("completed_date"), "completed_date", where),
        estimated_hours=parse_float(item.get("estimated_hours"), "estimated_hours", where, default=0.0),
        actual_hours=parse_float(item.get("actual_hours"), "actual_hours", where, default=0.0),
        assignee_id=parse_id(item.get("assignee_id")),
    )


def _parse_milestone(item: dict, project_id: str, where: str) -> MilestoneSnapshot:
    require(item, ("id",), where)
    return MilestoneSnapshot(
        id=str(item["id"]).strip(),
        project_id=parse_id(item.get("project_id")) or project_id,
        due_date=parse_date(item.get("due_date"), "due_date", where),
        is_critical=parse_bool(item.get("is_critical"), "is_critical", where),
        completion_percentage=parse_float(item.get("completion_percentage"), "completion_percentage", where, default=0.0),
        status=parse_choice(item.get("status"), "status", MILESTONE_STATUSES, where, default="pending"),
    )


def _parse_member(item: dict, project_id: str, where: str) -> MemberSnapshot:
    require(item, ("user_id",), where)
    return MemberSnapshot(
        user_id=str(item["user_id"]).strip(),
        project_id=parse_id(item.get("project_id")) or project_id,
        is_active=parse_bool(item.get("is_active"), "is_active", where, default=True),
    )


def _records(item: dict, key: str, where: str) -> list:
    records = item.get(key) or []
    if not isinstance(records, list):
        raise SnapshotParseError(f"{where}: '{key}' must be a list")
    for index, record in enumerate(records, start=1):
        if not isinstance(record, dict):
            raise SnapshotParseError(f"{where}: {key} {index} must be an object")
    return records


def parse_bundle(item: dict, index: int = 1) -> ProjectBundle:
    """Turn one decoded bundle object into engine input."""

    where = f"Item {index}"
    if not isinstance(item, dict) or not isinstance(item.get("project"), dict):
        raise SnapshotParseError(f"{where}: expected an object with a 'project' object")

    project = _parse_project(item["project"], f"{where} project")
    return ProjectBundle(
        project=project,
        tasks=[
            _parse_task(record, project.id, f"{where} task {i}")
            for i, record in enumerate(_records(item, "tasks", where), start=1)
        ],
        milestones=[
            _parse_milestone(record, project.id, f"{where} milestone {i}")
            for i, record in enumerate(_records(item, "milestones", where), start=1)
        ],
        members=[
            _parse_member(record, project.id, f"{where} member {i}")
            for i, record in enumerate(_records(item, "members", where), start=1)
        ],
    )


def parse(file_path: str) -> list[ProjectBundle]:
    """Parse a JSON file holding one bundle object or a list of them."""

    with open(file_path, encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise SnapshotParseError(f"{file_path}: invalid JSON") from exc

    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list):
        raise SnapshotParseError("JSON payload must be a bundle object or a list of bundles")

    return [parse_bundle(item, i) for i, item in enumerate(payload, start=1)]
