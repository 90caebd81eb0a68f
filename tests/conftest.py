from datetime import date, timedelta

import pytest

from devguard.schema import ActivityRecord
from devguard.service import MetricsService
from devguard.store import ActivityStore


@pytest.fixture
def store(tmp_path):
    store = ActivityStore.from_url(f"sqlite:///{tmp_path / 'devguard.db'}")
    store.create_schema()
    return store


@pytest.fixture
def service(store):
    return MetricsService(store)


def daily_history(developer_id, days, start=date(2025, 3, 1), **fields):
    """Consecutive daily records, oldest first, all sharing ``fields``."""

    return [
        ActivityRecord(developer_id=developer_id, activity_date=start + timedelta(days=offset), **fields)
        for offset in range(days)
    ]
