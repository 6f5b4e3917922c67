"""Health scoring across a portfolio of projects."""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Any

import numpy as np

from project_health_engine.health import score_project
from project_health_engine.schema import STATUS_CRITICAL, STATUS_GOOD, STATUS_WARNING, ProjectBundle

AT_RISK_SCORE = 50


def score_portfolio(bundles: list[ProjectBundle], now: date) -> list[dict[str, Any]]:
    """Score each project independently; one result row per bundle."""

    rows = []
    for bundle in bundles:
        report = score_project(bundle.project, bundle.tasks, bundle.milestones, bundle.members, now)
        rows.append(
            {
                "project_id": bundle.project.id,
                "name": bundle.project.name,
                "score": report.score,
                "overall_status": report.overall_status,
                "risk_count": len(report.risks),
                "health": report.to_dict(),
            }
        )
    return rows


def summarize_portfolio(rows: list[dict[str, Any]]) -> dict[str, Any]:
    """Aggregate score distribution and status counts."""

    statuses = Counter(row["overall_status"] for row in rows)
    status_counts = {status: statuses.get(status, 0) for status in (STATUS_GOOD, STATUS_WARNING, STATUS_CRITICAL)}

    if not rows:
        return {
            "n_projects": 0,
            "score": {"mean": 0.0, "median": 0.0, "min": 0, "max": 0, "p10": 0.0, "p90": 0.0, "std": 0.0},
            "status_counts": status_counts,
            "at_risk": [],
        }

    scores = np.asarray([row["score"] for row in rows], dtype=float)
    at_risk = sorted(
        (row for row in rows if row["score"] < AT_RISK_SCORE or row["overall_status"] == STATUS_CRITICAL),
        key=lambda row: (row["score"], str(row["project_id"])),
    )

    return {
        "n_projects": int(len(scores)),
        "score": {
            "mean": float(np.mean(scores)),
            "median": float(np.median(scores)),
            "min": int(np.min(scores)),
            "max": int(np.max(scores)),
            "p10": float(np.percentile(scores, 10)),
            "p90": float(np.percentile(scores, 90)),
            "std": float(np.std(scores)),
        },
        "status_counts": status_counts,
        "at_risk": [{"project_id": row["project_id"], "score": row["score"]} for row in at_risk],
    }
