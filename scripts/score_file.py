"""Score every developer in a CSV/JSON activity log offline."""

from __future__ import annotations

import argparse
import json
import sys
from collections import defaultdict
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from devguard.adapters import csv_adapter, json_adapter
from devguard.burnout import burnout_components, select_window


def _load_records(path: Path):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(str(path))
    if suffix == ".json":
        return json_adapter.parse(str(path))
    raise ValueError("Unsupported input format, expected .csv or .json")


def score_records(records) -> dict:
    """Group records per developer and score each developer's latest window."""

    by_developer = defaultdict(list)
    for record in records:
        by_developer[record.developer_id].append(record)

    report = {}
    for developer_id in sorted(by_developer):
        components = burnout_components(select_window(by_developer[developer_id]))
        components["risk_level"] = components["risk_level"].value
        report[str(developer_id)] = components
    return report


def main() -> None:
    parser = argparse.ArgumentParser(description="Score burnout risk from an activity log file")
    parser.add_argument("--data", required=True, help="Path to CSV/JSON activity file")
    parser.add_argument("--out", help="Optional path to write the JSON report")
    args = parser.parse_args()

    report = score_records(_load_records(Path(args.data)))
    print(json.dumps(report, indent=2))

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
        print(f"Saved burnout report to {out_path}")


if __name__ == "__main__":
    main()
