"""Demo script for devguard: score the bundled sample activity log."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from devguard.adapters.csv_adapter import parse
from devguard.burnout import score_window, select_window


def main() -> None:
    records = parse("examples/sample_activity.csv")
    for developer_id in sorted({record.developer_id for record in records}):
        window = select_window([r for r in records if r.developer_id == developer_id])
        assessment = score_window(window)
        print(f"Developer {developer_id}: {assessment.score:.3f} ({assessment.risk_level.value})")


if __name__ == "__main__":
    main()
