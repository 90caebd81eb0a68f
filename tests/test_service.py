from datetime import date

import pytest

from conftest import daily_history
from devguard.burnout import score_window
from devguard.errors import DeveloperNotFound, StoreUnavailable
from devguard.fallback import InMemoryActivitySource
from devguard.schema import ActivityRecord, RiskLevel
from devguard.service import MetricsService


class _BrokenActivityStore:
    """Store double whose activity reads fail after identity lookups succeed."""

    def __init__(self, store):
        self._store = store

    def __getattr__(self, name):
        return getattr(self._store, name)

    def list_activity(self, developer_id, limit=None):
        raise StoreUnavailable("activity store unavailable")

    def list_all_activities(self):
        raise StoreUnavailable("activity store unavailable")


def test_metrics_bundle_windows(service, store):
    dev = store.add_developer("Kim", "kim@devguard.ai", "Backend")
    history = daily_history(dev.id, 20, work_hours=8, meetings=3, pending_tasks=5, commits=1)
    for record in history:
        store.log_activity(record)
    store.save_insight(dev.id, "Hours creeping up", "Medium")

    bundle = service.developer_metrics(dev.id)

    assert bundle.developer.id == dev.id
    assert len(bundle.activities) == 14
    assert bundle.activities[0].activity_date == date(2025, 3, 20)
    expected = score_window(bundle.activities[:7])
    assert bundle.latest_metric == expected
    assert bundle.latest_metric.score == pytest.approx(0.35 + 0.25 + 0.25 + (1 - 7 / 40) * 0.15)
    assert bundle.latest_metric.risk_level is RiskLevel.HIGH
    assert [i.insight_text for i in bundle.insights] == ["Hours creeping up"]


def test_metrics_scores_only_newest_seven(service, store):
    dev = store.add_developer("Lee", "lee@devguard.ai", "Frontend")
    for record in daily_history(dev.id, 7, start=date(2025, 3, 1), work_hours=12, meetings=4, pending_tasks=6):
        store.log_activity(record)
    for record in daily_history(dev.id, 7, start=date(2025, 3, 8), work_hours=2, commits=6):
        store.log_activity(record)

    bundle = service.developer_metrics(dev.id)
    assert len(bundle.activities) == 14
    assert bundle.latest_metric.risk_level is RiskLevel.LOW
    assert bundle.latest_metric.score == pytest.approx(14 / 50 * 0.35)


def test_metrics_without_activity_is_floor(service, store):
    dev = store.add_developer("Max", "max@devguard.ai", "QA")
    bundle = service.developer_metrics(dev.id)
    assert bundle.activities == []
    assert bundle.latest_metric.score == 0.15
    assert bundle.latest_metric.risk_level is RiskLevel.LOW


def test_unknown_developer_is_not_found(service):
    with pytest.raises(DeveloperNotFound):
        service.developer_metrics(12345)


def test_fetch_failure_propagates_without_scoring(store):
    dev = store.add_developer("Ned", "ned@devguard.ai", "Infra")
    service = MetricsService(_BrokenActivityStore(store), fallback=InMemoryActivitySource(days=3))
    with pytest.raises(StoreUnavailable):
        service.developer_metrics(dev.id)


def test_fallback_serves_activity_list_only_when_injected(store):
    broken = _BrokenActivityStore(store)
    with pytest.raises(StoreUnavailable):
        MetricsService(broken).activity_feed()

    fallback = InMemoryActivitySource(days=3, today=date(2025, 3, 10))
    records, source = MetricsService(broken, fallback=fallback).activity_feed()
    assert source == "fallback"
    assert len(records) == 12
    assert records[0].activity_date == date(2025, 3, 10)


def test_activity_feed_reports_store_source(service, store):
    dev = store.add_developer("Uma", "uma@devguard.ai", "Data")
    store.log_activity(ActivityRecord(developer_id=dev.id, activity_date=date(2025, 3, 4), commits=2))
    records, source = service.activity_feed()
    assert source == "store"
    assert [r.commits for r in records] == [2]


def test_fallback_overview_uses_demo_developers(store):
    store.add_developer("Vic", "vic@devguard.ai", "Backend")
    fallback = InMemoryActivitySource(days=3, today=date(2025, 3, 10))
    overview = MetricsService(_BrokenActivityStore(store), fallback=fallback).team_overview()
    assert overview["source"] == "fallback"
    assert overview["total_developers"] == 4
    assert {item["name"] for item in overview["role_distribution"]} == {
        "AI Researcher",
        "Backend Architect",
        "DevOps Lead",
        "Sr. Frontend Engineer",
    }


def test_fallback_never_answers_for_one_developer(store):
    dev = store.add_developer("Wes", "wes@devguard.ai", "QA")
    fallback = InMemoryActivitySource(days=3, today=date(2025, 3, 10))
    service = MetricsService(_BrokenActivityStore(store), fallback=fallback)
    with pytest.raises(StoreUnavailable):
        service.trend_series(dev.id, "week")
    with pytest.raises(StoreUnavailable):
        service.trend_summary(1, "month")

    series, source = service.trend_series(None, "week")
    assert source == "fallback"
    assert series[-1]["date"] == "2025-03-10"


def test_log_activity_for_unknown_developer(service):
    with pytest.raises(DeveloperNotFound):
        service.log_activity(ActivityRecord(developer_id=77, activity_date=date(2025, 3, 1)))


def test_trend_summary_and_overview(service, store):
    a = store.add_developer("Oli", "oli@devguard.ai", "Backend")
    b = store.add_developer("Pia", "pia@devguard.ai", "Backend")
    for record in daily_history(a.id, 10, work_hours=8, commits=2, tasks_completed=1):
        store.log_activity(record)
    for record in daily_history(b.id, 3, work_hours=6, commits=1):
        store.log_activity(record)

    summary = service.trend_summary(range_name="week")
    assert len(summary["series"]) == 7
    assert summary["series"][-1]["date"] == "2025-03-10"
    assert summary["source"] == "store"

    mine, source = service.trend_series(b.id, "month")
    assert source == "store"
    assert [item["commits"] for item in mine] == [1, 1, 1]
    assert [r.developer_id for r in service.list_activity(b.id, limit=2)] == [b.id, b.id]

    overview = service.team_overview()
    assert overview["total_developers"] == 2
    assert overview["total_commits"] == 23
    assert overview["role_distribution"] == [{"name": "Backend", "value": 2}]
    assert overview["source"] == "store"
