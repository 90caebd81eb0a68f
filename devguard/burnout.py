"""Heuristic burnout scorer over a rolling activity window."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from devguard.schema import ActivityRecord, BurnoutAssessment, RiskLevel

HISTORY_LIMIT = 14
SCORING_WINDOW = 7

HOUR_CAP = 50.0
MEETING_CAP = 20.0
BACKLOG_CAP = 30.0
OUTPUT_CAP = 40.0

HOUR_WEIGHT = 0.35
MEETING_WEIGHT = 0.25
BACKLOG_WEIGHT = 0.25
PRODUCTIVITY_WEIGHT = 0.15

HIGH_THRESHOLD = 0.75
MEDIUM_THRESHOLD = 0.45


def coerce_amount(value: Any) -> float:
    """Coerce a telemetry value to a finite, non-negative number (else 0)."""

    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _read(record: ActivityRecord | Mapping, name: str) -> float:
    if isinstance(record, Mapping):
        return coerce_amount(record.get(name))
    return coerce_amount(getattr(record, name, None))


def _activity_date(record: ActivityRecord | Mapping) -> date:
    value = record.get("activity_date") if isinstance(record, Mapping) else record.activity_date
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    return value


def select_window(records: Sequence, limit: int = SCORING_WINDOW) -> list:
    """Return at most ``limit`` records ordered newest-first by activity date."""

    ordered = sorted(records, key=_activity_date, reverse=True)
    return ordered[:limit]


def classify(score: float) -> RiskLevel:
    """Map a score to its level; thresholds are strict."""

    if score > HIGH_THRESHOLD:
        return RiskLevel.HIGH
    if score > MEDIUM_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def burnout_components(window: Sequence) -> dict:
    """Compute window totals, the four weighted factors and the bounded score."""

    if len(window) > SCORING_WINDOW:
        raise ValueError(f"burnout window holds at most {SCORING_WINDOW} records, got {len(window)}")

    total_hours = sum(_read(record, "work_hours") for record in window)
    total_meetings = sum(_read(record, "meetings") for record in window)
    total_pending = sum(_read(record, "pending_tasks") for record in window)
    total_commits = sum(_read(record, "commits") for record in window)
    total_tasks = sum(_read(record, "tasks_completed") for record in window)

    hour_factor = min(total_hours / HOUR_CAP, 1.0) * HOUR_WEIGHT
    meeting_factor = min(total_meetings / MEETING_CAP, 1.0) * MEETING_WEIGHT
    backlog_factor = min(total_pending / BACKLOG_CAP, 1.0) * BACKLOG_WEIGHT
    productivity_factor = max(0.0, 1.0 - (total_commits + total_tasks) / OUTPUT_CAP) * PRODUCTIVITY_WEIGHT

    score = min(hour_factor + meeting_factor + backlog_factor + productivity_factor, 1.0)

    return {
        "score": score,
        "risk_level": classify(score),
        "total_hours": total_hours,
        "total_meetings": total_meetings,
        "total_pending": total_pending,
        "total_commits": total_commits,
        "total_tasks": total_tasks,
        "hour_factor": hour_factor,
        "meeting_factor": meeting_factor,
        "backlog_factor": backlog_factor,
        "productivity_factor": productivity_factor,
    }


def score_window(window: Sequence) -> BurnoutAssessment:
    """Score up to seven most-recent activity records for one developer."""

    components = burnout_components(window)
    return BurnoutAssessment(score=components["score"], risk_level=components["risk_level"])


__all__ = [
    "HISTORY_LIMIT",
    "SCORING_WINDOW",
    "burnout_components",
    "classify",
    "coerce_amount",
    "score_window",
    "select_window",
]
