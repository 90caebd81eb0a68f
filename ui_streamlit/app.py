"""Streamlit dashboard over the devguard metrics service."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from devguard.burnout import SCORING_WINDOW, burnout_components
from devguard.config import load_settings
from devguard.errors import DevGuardError
from devguard.schema import ActivityRecord, RiskLevel
from devguard.service import FALLBACK_SOURCE, MetricsService, build_service
from devguard.trends import export_csv

PAGES = ["Dashboard", "Team", "Trends", "Activity Log", "Developers", "Insights"]
LEVEL_COLORS = {RiskLevel.LOW: "green", RiskLevel.MEDIUM: "orange", RiskLevel.HIGH: "red"}


def _fmt_percent(score: float) -> str:
    return f"{score * 100:.0f}%"


def dashboard_payload(service: MetricsService, developer_id: int) -> dict[str, Any]:
    """Collect one developer's bundle plus the factor breakdown for display."""

    bundle = service.developer_metrics(developer_id)
    components = burnout_components(bundle.activities[:SCORING_WINDOW])
    activities = bundle.activities
    return {
        "bundle": bundle,
        "factors": {
            "Overwork": components["hour_factor"],
            "Meetings": components["meeting_factor"],
            "Backlog": components["backlog_factor"],
            "Low output": components["productivity_factor"],
        },
        "totals": {
            "work_hours": sum(r.work_hours for r in activities),
            "commits": sum(r.commits for r in activities),
            "pull_requests": sum(r.pull_requests for r in activities),
            "tasks_completed": sum(r.tasks_completed for r in activities),
        },
        "chart": {
            "date": [r.activity_date.isoformat() for r in reversed(activities)],
            "work_hours": [r.work_hours for r in reversed(activities)],
            "commits": [r.commits for r in reversed(activities)],
            "meetings": [r.meetings for r in reversed(activities)],
        },
    }


def _pick_developer(st, service: MetricsService, key: str, allow_all: bool = False) -> Optional[int]:
    developers = service.list_developers()
    options: list[Optional[int]] = [None] if allow_all else []
    options.extend(d.id for d in developers)
    names = {d.id: f"{d.name} ({d.role})" for d in developers}
    if not options:
        st.info("No developers yet. Add one on the Developers page.")
        return None
    return st.selectbox(
        "Developer",
        options=options,
        format_func=lambda value: "All developers" if value is None else names[value],
        key=key,
    )


def _render_dashboard(st, service: MetricsService) -> None:
    developer_id = _pick_developer(st, service, key="dashboard_dev")
    if developer_id is None:
        return
    payload = dashboard_payload(service, developer_id)
    metric = payload["bundle"].latest_metric

    c1, c2 = st.columns(2)
    c1.metric("Burnout score", _fmt_percent(metric.score))
    c2.markdown(f"**Risk level:** :{LEVEL_COLORS[metric.risk_level]}[{metric.risk_level.value}]")

    t = payload["totals"]
    s1, s2, s3, s4 = st.columns(4)
    s1.metric("Engagement", f"{t['work_hours']:.0f} HR")
    s2.metric("Git velocity", f"{t['commits']} PUSH")
    s3.metric("Peer review", f"{t['pull_requests']} PR")
    s4.metric("Efficiency", f"{t['tasks_completed']} TASK")

    st.subheader("Factor breakdown")
    st.bar_chart(
        {"factor": list(payload["factors"]), "weight": list(payload["factors"].values())},
        x="factor",
        y="weight",
    )

    st.subheader("Recent activity")
    if payload["chart"]["date"]:
        st.line_chart(payload["chart"], x="date")
    else:
        st.write("No activity logged yet.")

    st.subheader("Insight history")
    for insight in payload["bundle"].insights:
        st.markdown(f"**{insight.severity.value}**: {insight.insight_text}")


def _render_team(st, service: MetricsService) -> None:
    overview = service.team_overview()
    if overview["source"] == FALLBACK_SOURCE:
        st.warning("Activity store unavailable, showing demo data.")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Developers", overview["total_developers"])
    c2.metric("Commits", overview["total_commits"])
    c3.metric("Tasks", overview["total_tasks"])
    c4.metric("Hours", f"{overview['total_hours']:.0f}")
    if overview["daily_output"]:
        st.subheader("Daily output (last 14 days)")
        st.bar_chart(
            {
                "date": [item["date"] for item in overview["daily_output"]],
                "output": [item["output"] for item in overview["daily_output"]],
            },
            x="date",
        )
    st.subheader("Role distribution")
    st.table(overview["role_distribution"])


def _render_trends(st, service: MetricsService) -> None:
    developer_id = _pick_developer(st, service, key="trend_dev", allow_all=True)
    range_name = st.radio("Range", options=["week", "month"], horizontal=True)
    summary = service.trend_summary(developer_id, range_name)
    if summary["source"] == FALLBACK_SOURCE:
        st.warning("Activity store unavailable, showing demo data.")
    series = summary["series"]
    if not series:
        st.write("No activity in range.")
        return
    st.line_chart(
        {name: [item[name] for item in series] for name in ("commits", "pull_requests", "tasks_completed", "meetings")}
        | {"date": [item["date"] for item in series]},
        x="date",
    )
    hours = summary["trajectory"]["work_hours"]
    st.caption(f"Work hours trend: {hours['label']} (slope {hours['slope']})")
    st.download_button(
        "Export CSV",
        data=export_csv(series),
        file_name=f"DevGuard_Intelligence_{date.today().isoformat()}.csv",
        mime="text/csv",
    )


def _render_activity_log(st, service: MetricsService) -> None:
    developer_id = _pick_developer(st, service, key="log_dev")
    if developer_id is None:
        return
    with st.form("log_activity"):
        activity_date = st.date_input("Date", value=date.today())
        work_hours = st.number_input("Work hours", min_value=0.0, max_value=24.0, value=8.0, step=0.5)
        commits = st.number_input("Commits", min_value=0, value=0, step=1)
        pull_requests = st.number_input("Pull requests", min_value=0, value=0, step=1)
        tasks_completed = st.number_input("Tasks completed", min_value=0, value=0, step=1)
        pending_tasks = st.number_input("Pending tasks", min_value=0, value=0, step=1)
        meetings = st.number_input("Meetings", min_value=0, value=0, step=1)
        submitted = st.form_submit_button("Log activity", type="primary")
    if submitted:
        service.log_activity(
            ActivityRecord(
                developer_id=developer_id,
                activity_date=activity_date,
                work_hours=float(work_hours),
                commits=int(commits),
                pull_requests=int(pull_requests),
                tasks_completed=int(tasks_completed),
                pending_tasks=int(pending_tasks),
                meetings=int(meetings),
            )
        )
        st.success("Activity logged.")

    for record in service.list_activity(developer_id):
        row = st.columns([4, 1])
        row[0].write(
            f"{record.activity_date.isoformat()}: {record.work_hours}h, {record.commits} commits, "
            f"{record.tasks_completed} tasks, {record.pending_tasks} pending, {record.meetings} meetings"
        )
        if row[1].button("Delete", key=f"del_activity_{record.id}"):
            service.delete_activity(record.id)
            st.rerun()


def _render_developers(st, service: MetricsService) -> None:
    with st.form("add_developer"):
        name = st.text_input("Name")
        email = st.text_input("Email")
        role = st.text_input("Role")
        submitted = st.form_submit_button("Add developer", type="primary")
    if submitted:
        service.add_developer(name, email, role)
        st.success(f"Added {name}.")

    query = st.text_input("Search").lower()
    for developer in service.list_developers():
        if query and query not in developer.name.lower() and query not in developer.role.lower():
            continue
        row = st.columns([4, 1])
        row[0].write(f"**{developer.name}** ({developer.role}), {developer.email}")
        if row[1].button("Delete", key=f"del_dev_{developer.id}"):
            service.delete_developer(developer.id)
            st.rerun()


def _render_insights(st, service: MetricsService) -> None:
    severity = st.radio("Severity", options=["all"] + [level.value for level in RiskLevel], horizontal=True)
    insights = service.list_insights()
    st.metric("Critical alerts", sum(1 for i in insights if i.severity is RiskLevel.HIGH))
    for insight in insights:
        if severity != "all" and insight.severity.value != severity:
            continue
        row = st.columns([4, 1])
        row[0].markdown(f"**{insight.severity.value}** (developer {insight.developer_id}): {insight.insight_text}")
        if row[1].button("Delete", key=f"del_insight_{insight.id}"):
            service.delete_insight(insight.id)
            st.rerun()


RENDERERS = {
    "Dashboard": _render_dashboard,
    "Team": _render_team,
    "Trends": _render_trends,
    "Activity Log": _render_activity_log,
    "Developers": _render_developers,
    "Insights": _render_insights,
}


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="DevGuard", layout="wide")
    st.title("DevGuard: Developer Burnout Dashboard")

    @st.cache_resource
    def _service() -> MetricsService:
        return build_service(load_settings())

    with st.sidebar:
        page = st.radio("Page", options=PAGES)

    try:
        RENDERERS[page](st, _service())
    except ValueError as exc:
        st.error(f"Input error: {exc}")
    except DevGuardError as exc:
        st.error(str(exc))


if __name__ == "__main__":
    main()
