"""CSV adapter for daily activity logs."""

from __future__ import annotations

import csv
from datetime import date

from devguard.burnout import coerce_amount
from devguard.schema import ActivityRecord

_REQUIRED_FIELDS = {"developer_id", "activity_date"}
_COUNT_FIELDS = ("commits", "pull_requests", "tasks_completed", "pending_tasks", "meetings")


def _parse_row(row: dict, row_number: int) -> ActivityRecord:
    missing = sorted(field for field in _REQUIRED_FIELDS if not (row.get(field) or "").strip())
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    try:
        developer_id = int(row["developer_id"].strip())
    except ValueError as exc:
        raise ValueError(f"Row {row_number}: invalid developer_id") from exc

    try:
        activity_date = date.fromisoformat(row["activity_date"].strip()[:10])
    except ValueError as exc:
        raise ValueError(f"Row {row_number}: malformed activity_date") from exc

    counts = {name: int(coerce_amount(row.get(name))) for name in _COUNT_FIELDS}

    return ActivityRecord(
        developer_id=developer_id,
        activity_date=activity_date,
        work_hours=coerce_amount(row.get("work_hours")),
        **counts,
    )


def parse(file_path: str) -> list[ActivityRecord]:
    """Parse CSV file into a list of activity records."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        records: list[ActivityRecord] = []
        for row_number, row in enumerate(reader, start=2):
            records.append(_parse_row(row, row_number))
        return records
