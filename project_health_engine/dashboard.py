"""Full project dashboard assembly with optional caching."""

from __future__ import annotations

import copy
import logging
from datetime import date
from typing import Any, Optional

from project_health_engine.budget import analyze_budget
from project_health_engine.cache import ReportCache, cache_key
from project_health_engine.config import get_settings
from project_health_engine.health import score_project
from project_health_engine.progress import compute_progress
from project_health_engine.schema import ProjectBundle
from project_health_engine.statistics import (
    milestone_progress,
    project_overview,
    project_statistics,
    task_metrics,
)
from project_health_engine.team import analyze_team

logger = logging.getLogger(__name__)


def build_dashboard(bundle: ProjectBundle, now: date) -> dict[str, Any]:
    """Compute every dashboard section for one project snapshot."""

    project = bundle.project
    progress = compute_progress(bundle.tasks)
    budget = analyze_budget(project, progress, now)
    team = analyze_team(bundle.members, bundle.tasks, now)
    health = score_project(
        project,
        bundle.tasks,
        bundle.milestones,
        bundle.members,
        now,
        budget=budget,
        team=team,
    )

    return {
        "overview": project_overview(project, bundle.tasks, now),
        "statistics": project_statistics(bundle, now),
        "team": team.to_dict(),
        "budget": budget.to_dict(),
        "health": health.to_dict(),
        "risks": [risk.to_dict() for risk in health.risks],
        "milestones": milestone_progress(bundle.milestones, now),
        "tasks": task_metrics(project, bundle.tasks, now),
    }


class DashboardService:
    """Serves dashboards, memoizing them when a cache is supplied."""

    def __init__(self, cache: Optional[ReportCache] = None, ttl_seconds: Optional[int] = None):
        self.cache = cache
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else get_settings().dashboard_cache_ttl_seconds

    def get_dashboard(self, bundle: ProjectBundle, now: date) -> dict[str, Any]:
        """Return the dashboard; cached entries are handed out as copies."""

        if self.cache is None:
            return build_dashboard(bundle, now)

        key = cache_key(bundle, now)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Dashboard cache hit for project %s", bundle.project.id)
            return copy.deepcopy(cached)

        dashboard = build_dashboard(bundle, now)
        self.cache.set(key, dashboard, self.ttl_seconds)
        logger.debug("Cached dashboard for project %s for %ss", bundle.project.id, self.ttl_seconds)
        return copy.deepcopy(dashboard)
