"""Score a portfolio of project snapshots from a JSON file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from project_health_engine.adapters import json_adapter
from project_health_engine.logging_config import configure_logging
from project_health_engine.portfolio import score_portfolio, summarize_portfolio

logger = logging.getLogger(__name__)


def _load_bundles(path: Path):
    if path.suffix.lower() != ".json":
        raise ValueError("Unsupported input format, expected .json")
    return json_adapter.parse(str(path))


def main() -> None:
    parser = argparse.ArgumentParser(description="Score project health across a portfolio")
    parser.add_argument("--data", required=True, help="Path to a JSON file of project bundles")
    parser.add_argument("--as-of", default=None, help="Evaluation date (YYYY-MM-DD), defaults to today")
    parser.add_argument("--log-level", default=None, help="Logging level, defaults to PROJECT_HEALTH_LOG_LEVEL")
    args = parser.parse_args()

    configure_logging(args.log_level)
    as_of = date.fromisoformat(args.as_of) if args.as_of else date.today()

    bundles = _load_bundles(Path(args.data))
    logger.info("Scoring %d projects as of %s", len(bundles), as_of.isoformat())

    rows = score_portfolio(bundles, as_of)
    report = {
        "as_of": as_of.isoformat(),
        "summary": summarize_portfolio(rows),
        "projects": rows,
    }

    print(json.dumps(report, indent=2))

    outputs_dir = Path("outputs")
    outputs_dir.mkdir(parents=True, exist_ok=True)
    out_path = outputs_dir / "portfolio_report.json"
    out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    print(f"Saved portfolio report to {out_path}")


if __name__ == "__main__":
    main()
