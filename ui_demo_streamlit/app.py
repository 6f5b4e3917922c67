"""Streamlit demo UI for project-health-engine."""

from __future__ import annotations

import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Any, Callable, MutableMapping

from project_health_engine.adapters import csv_adapter, json_adapter
from project_health_engine.dashboard import build_dashboard
from project_health_engine.logging_config import configure_logging
from project_health_engine.schema import ProjectBundle

STATUS_ICONS = {"good": "🟢", "warning": "🟠", "critical": "🔴"}
RAN_KEY = "engine_ran"


def _parse_upload(uploaded_file, suffix: str, parse: Callable[[str], Any]) -> Any:
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    try:
        return parse(temp_path)
    finally:
        os.unlink(temp_path)


def _parse_uploaded_bundles(uploaded_file) -> list[ProjectBundle]:
    suffix = Path(uploaded_file.name).suffix.lower()
    if suffix != ".json":
        raise ValueError("Unsupported file type. Please use .json for project bundles")
    return _parse_upload(uploaded_file, suffix, json_adapter.parse)


def _parse_uploaded_tasks(uploaded_file, project_id: str) -> list:
    return _parse_upload(uploaded_file, ".csv", lambda path: csv_adapter.parse(path, project_id=project_id))


def engine_active(run_clicked: bool, state: MutableMapping) -> bool:
    """Keep showing results on reruns triggered by widgets after the first run."""

    if run_clicked:
        state[RAN_KEY] = True
    return bool(state.get(RAN_KEY, False))


def _fmt_money(amount: float, currency: str) -> str:
    return f"{amount:,.2f} {currency}"


def run_engine(bundle: ProjectBundle, as_of: date) -> dict[str, Any]:
    """Build the dashboard and add the labels the UI shows."""

    dashboard = build_dashboard(bundle, as_of)
    health = dashboard["health"]
    dashboard["status_label"] = f"{STATUS_ICONS.get(health['overall_status'], '')} {health['overall_status'].upper()}"
    return dashboard


def main() -> None:
    import streamlit as st

    configure_logging()
    st.set_page_config(page_title="Project Health Demo", layout="wide")
    st.title("Project Health Engine — Streamlit Demo")

    with st.sidebar:
        st.header("Controls")
        uploaded = st.file_uploader("Upload project bundles", type=["json"])
        task_override = st.file_uploader("Replace tasks from CSV (optional)", type=["csv"])
        use_demo = st.checkbox("Load demo portfolio", value=True)
        as_of = st.date_input("Evaluate as of", value=date.today())
        run = st.button("Run engine", type="primary")

    try:
        if use_demo:
            bundles = json_adapter.parse("examples/sample_portfolio.json")
            data_source = "demo portfolio (examples/sample_portfolio.json)"
        elif uploaded is not None:
            bundles = _parse_uploaded_bundles(uploaded)
            data_source = f"uploaded file ({uploaded.name})"
        else:
            st.error("Please upload a JSON file or enable 'Load demo portfolio'.")
            return

        if not bundles:
            st.error("No projects were found in the selected input.")
            return

        st.success(f"Loaded {len(bundles)} projects from {data_source}.")
        names = [bundle.project.name or bundle.project.id for bundle in bundles]
        selected = st.selectbox("Project", options=list(range(len(bundles))), format_func=lambda i: names[i])
        bundle = bundles[selected]

        if not engine_active(run, st.session_state):
            st.info("Configure inputs in the sidebar and click **Run engine**.")
            return

        if task_override is not None:
            bundle.tasks = _parse_uploaded_tasks(task_override, bundle.project.id)

        result = run_engine(bundle, as_of)
        health = result["health"]
        budget = result["budget"]

        st.subheader("A) Health")
        h1, h2, h3 = st.columns(3)
        h1.metric("Health score", health["score"])
        h2.metric("Status", result["status_label"])
        h3.metric("Risks", len(health["risks"]))
        st.table([{"indicator": name, **values} for name, values in health["indicators"].items()])

        st.subheader("B) Budget")
        b1, b2, b3, b4 = st.columns(4)
        b1.metric("Budget", _fmt_money(budget["budget"], budget["currency"]))
        b2.metric("Utilization", f"{budget['budget_utilization']}%")
        b3.metric("Burn rate / day", _fmt_money(budget["burn_rate"], budget["currency"]))
        b4.metric("CPI", f"{budget['cost_performance_index']:.2f}")

        st.subheader("C) Team")
        team = result["team"]
        st.write(f"{team['active_members']} active members, {team['utilization']}% utilization")
        if team["members"]:
            st.table(team["members"])

        st.subheader("D) Risks & Recommendations")
        if health["risks"]:
            st.table(health["risks"])
        else:
            st.write("No risks identified.")
        for recommendation in health["recommendations"]:
            st.write(f"- {recommendation}")

        st.subheader("E) Burndown")
        burndown = result["tasks"]["burndown"]
        if burndown:
            st.line_chart({"remaining": [p["remaining"] for p in burndown], "ideal": [p["ideal"] for p in burndown]})
        else:
            st.write("No timeline available for this project.")

    except ValueError as exc:
        st.error(f"Input error: {exc}")
    except Exception:
        st.error("Something went wrong while running the demo. Please verify the input format.")


if __name__ == "__main__":
    main()
