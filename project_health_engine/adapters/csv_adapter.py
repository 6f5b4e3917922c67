"""CSV adapter for task snapshots."""

from __future__ import annotations

import csv
from typing import Optional

from project_health_engine.adapters.fields import (
    parse_choice,
    parse_date,
    parse_float,
    parse_id,
    require,
)
from project_health_engine.exceptions import SnapshotParseError
from project_health_engine.schema import TASK_PRIORITIES, TASK_STATUSES, TaskSnapshot

_REQUIRED_FIELDS = ("id", "status")


def _parse_row(row: dict, row_number: int, project_id: Optional[str]) -> TaskSnapshot:
    where = f"Row {row_number}"
    require(row, _REQUIRED_FIELDS, where)

    row_project = parse_id(row.get("project_id")) or project_id
    if row_project is None:
        raise SnapshotParseError(f"{where}: missing required fields ['project_id']")

    return TaskSnapshot(
        id=str(row["id"]).strip(),
        project_id=row_project,
        status=parse_choice(row["status"], "status", TASK_STATUSES, where),
        priority=parse_choice(row.get("priority"), "priority", TASK_PRIORITIES, where, default="normal"),
        start_date=parse_date(row.get("start_date"), "start_date", where),
        due_date=parse_date(row.get("due_date"), "due_date", where),
        completed_date=parse_date(row.get("completed_date"), "completed_date", where),
        estimated_hours=parse_float(row.get("estimated_hours"), "estimated_hours", where, default=0.0),
        actual_hours=parse_float(row.get("actual_hours"), "actual_hours", where, default=0.0),
        assignee_id=parse_id(row.get("assignee_id")),
    )


def parse(file_path: str, project_id: Optional[str] = None) -> list[TaskSnapshot]:
    """Parse a task CSV; ``project_id`` fills rows that leave the column empty."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        tasks: list[TaskSnapshot] = []
        for row_number, row in enumerate(reader, start=2):
            tasks.append(_parse_row(row, row_number, project_id))
        return tasks
