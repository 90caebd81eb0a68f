"""JSON adapter for daily activity logs."""

from __future__ import annotations

import json
from datetime import date

from devguard.burnout import coerce_amount
from devguard.schema import ActivityRecord

_REQUIRED_FIELDS = {"developer_id", "activity_date"}
_COUNT_FIELDS = ("commits", "pull_requests", "tasks_completed", "pending_tasks", "meetings")


def _parse_item(item: dict, index: int) -> ActivityRecord:
    if not isinstance(item, dict):
        raise ValueError(f"Item {index}: expected an object")

    missing = sorted(field for field in _REQUIRED_FIELDS if item.get(field) in (None, ""))
    if missing:
        raise ValueError(f"Item {index}: missing required fields {missing}")

    try:
        developer_id = int(item["developer_id"])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Item {index}: invalid developer_id") from exc

    try:
        activity_date = date.fromisoformat(str(item["activity_date"]).strip()[:10])
    except ValueError as exc:
        raise ValueError(f"Item {index}: malformed activity_date") from exc

    counts = {name: int(coerce_amount(item.get(name))) for name in _COUNT_FIELDS}

    return ActivityRecord(
        developer_id=developer_id,
        activity_date=activity_date,
        work_hours=coerce_amount(item.get("work_hours")),
        **counts,
    )


def parse(file_path: str) -> list[ActivityRecord]:
    """Parse JSON file into activity records."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")

    return [_parse_item(item, i) for i, item in enumerate(payload, start=1)]
