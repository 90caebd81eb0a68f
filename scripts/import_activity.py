"""Bulk load a CSV/JSON activity log into the configured store."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from devguard.adapters import csv_adapter, json_adapter
from devguard.config import load_settings
from devguard.log import LOGGER, configure_logging
from devguard.service import build_service


def main() -> None:
    parser = argparse.ArgumentParser(description="Import daily activity records")
    parser.add_argument("--data", required=True, help="Path to CSV/JSON activity file")
    args = parser.parse_args()

    configure_logging()
    path = Path(args.data)
    if path.suffix.lower() == ".csv":
        records = csv_adapter.parse(str(path))
    elif path.suffix.lower() == ".json":
        records = json_adapter.parse(str(path))
    else:
        raise SystemExit("Unsupported input format, expected .csv or .json")

    service = build_service(load_settings())
    for record in records:
        service.log_activity(record)
    LOGGER.info("Imported %d activity records from %s", len(records), path)


if __name__ == "__main__":
    main()
