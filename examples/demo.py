"""Demo script for project-health-engine."""

import json
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from project_health_engine.adapters import csv_adapter, json_adapter
from project_health_engine.dashboard import build_dashboard
from project_health_engine.logging_config import configure_logging
from project_health_engine.portfolio import score_portfolio, summarize_portfolio


def main() -> None:
    configure_logging()
    bundles = json_adapter.parse("examples/sample_portfolio.json")
    today = date.today()

    bundle = bundles[0]
    bundle.tasks = csv_adapter.parse("examples/sample_tasks.csv", project_id=bundle.project.id)

    dashboard = build_dashboard(bundle, today)
    print("Health:", json.dumps(dashboard["health"], indent=2))
    print("Budget:", json.dumps(dashboard["budget"], indent=2))
    print("Portfolio:", json.dumps(summarize_portfolio(score_portfolio(bundles, today)), indent=2))


if __name__ == "__main__":
    main()
