"""Daily and team-wide activity aggregation for charts and export."""

from __future__ import annotations

import csv
import io
from collections import Counter, defaultdict
from typing import Optional

import numpy as np

from devguard.burnout import coerce_amount
from devguard.schema import ActivityRecord, Developer

TREND_RANGES = {"week": 7, "month": 30}
OVERVIEW_DAYS = 14
SERIES_FIELDS = ("commits", "pull_requests", "tasks_completed", "meetings", "work_hours")
CSV_HEADER = ("Date", "Commits", "PRs", "Tasks", "Meetings", "WorkHours")


def daily_totals(activities: list[ActivityRecord], developer_id: Optional[int] = None) -> list[dict]:
    """Sum each series field per activity date, oldest date first."""

    grouped: dict[str, dict] = {}
    for record in activities:
        if developer_id is not None and record.developer_id != developer_id:
            continue
        key = record.activity_date.isoformat()
        bucket = grouped.setdefault(key, {"date": key, **{name: 0 for name in SERIES_FIELDS}})
        for name in SERIES_FIELDS:
            bucket[name] += coerce_amount(getattr(record, name))

    series = sorted(grouped.values(), key=lambda item: item["date"])
    for item in series:
        for name in SERIES_FIELDS:
            if name != "work_hours":
                item[name] = int(item[name])
    return series


def trend_window(series: list[dict], range_name: str = "week") -> list[dict]:
    """Keep the last 7 (``week``) or 30 (``month``) dated entries."""

    if range_name not in TREND_RANGES:
        raise ValueError(f"invalid trend range '{range_name}', expected one of {sorted(TREND_RANGES)}")
    return series[-TREND_RANGES[range_name]:]


def team_overview(developers: list[Developer], activities: list[ActivityRecord]) -> dict:
    """Totals, recent daily output and role distribution across the team."""

    daily_output: dict[str, float] = defaultdict(float)
    for record in activities:
        daily_output[record.activity_date.isoformat()] += coerce_amount(record.commits) + coerce_amount(
            record.tasks_completed
        )
    recent = sorted(daily_output.items())[-OVERVIEW_DAYS:]

    roles = Counter(developer.role for developer in developers)

    return {
        "total_developers": len(developers),
        "total_commits": int(sum(coerce_amount(r.commits) for r in activities)),
        "total_tasks": int(sum(coerce_amount(r.tasks_completed) for r in activities)),
        "total_hours": sum(coerce_amount(r.work_hours) for r in activities),
        "daily_output": [{"date": day, "output": int(output)} for day, output in recent],
        "role_distribution": [{"name": role, "value": count} for role, count in sorted(roles.items())],
    }


def trajectory(series: list[dict], field: str = "work_hours") -> dict:
    """
    Fit a linear trend on one daily series field.
    Returns {'slope': float, 'label': str, 'delta': float}.
    """
    if len(series) < 2:
        return {"slope": 0.0, "label": "Stable", "delta": 0.0}

    x = np.arange(len(series), dtype=float)
    y = np.asarray([float(item.get(field, 0.0)) for item in series])
    slope, _ = np.polyfit(x, y, 1)
    delta = float(y[-1] - y[0])

    if slope > 0.5:
        label = "Rising"
    elif slope < -0.5:
        label = "Falling"
    else:
        label = "Stable"

    return {"slope": round(float(slope), 3), "label": label, "delta": round(delta, 2)}


def _fmt_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def export_csv(series: list[dict]) -> str:
    """Render a daily series as CSV text."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for item in series:
        writer.writerow(
            [
                item["date"],
                item["commits"],
                item["pull_requests"],
                item["tasks_completed"],
                item["meetings"],
                _fmt_number(item["work_hours"]),
            ]
        )
    return buffer.getvalue()
