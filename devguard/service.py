"""Metrics endpoint adapter: store reads, scoring and response assembly."""

from __future__ import annotations

from typing import Optional

from devguard.burnout import HISTORY_LIMIT, SCORING_WINDOW, score_window
from devguard.config import Settings
from devguard.errors import DeveloperNotFound, StoreUnavailable
from devguard.fallback import InMemoryActivitySource
from devguard.log import LOGGER
from devguard.schema import ActivityRecord, Developer, Insight, MetricsBundle
from devguard.store import ActivityStore
from devguard.trends import daily_totals, team_overview, trajectory, trend_window

STORE_SOURCE = "store"
FALLBACK_SOURCE = "fallback"


class MetricsService:
    """Orchestrates the activity store, the burnout scorer and trend views."""

    def __init__(self, store: ActivityStore, fallback: Optional[InMemoryActivitySource] = None) -> None:
        self.store = store
        self.fallback = fallback

    def developer_metrics(self, developer_id: int) -> MetricsBundle:
        """Build the dashboard bundle; store failures propagate unscored."""

        developer = self.store.get_developer(developer_id)
        if developer is None:
            raise DeveloperNotFound(developer_id)

        activities = self.store.list_activity(developer_id, limit=HISTORY_LIMIT)
        assessment = score_window(activities[:SCORING_WINDOW])
        insights = self.store.list_insights(developer_id)

        LOGGER.debug(
            "Scored developer %s over %d records: %.4f (%s)",
            developer_id,
            min(len(activities), SCORING_WINDOW),
            assessment.score,
            assessment.risk_level.value,
        )
        return MetricsBundle(developer=developer, activities=activities, latest_metric=assessment, insights=insights)

    # CRUD pass-throughs

    def list_developers(self) -> list[Developer]:
        return self.store.list_developers()

    def add_developer(self, name: str, email: str, role: str) -> Developer:
        return self.store.add_developer(name, email, role)

    def delete_developer(self, developer_id: int) -> Developer:
        return self.store.delete_developer(developer_id)

    def log_activity(self, record: ActivityRecord) -> ActivityRecord:
        if self.store.get_developer(record.developer_id) is None:
            raise DeveloperNotFound(record.developer_id)
        return self.store.log_activity(record)

    def delete_activity(self, activity_id: int) -> ActivityRecord:
        return self.store.delete_activity(activity_id)

    def list_activity(self, developer_id: int, limit: Optional[int] = None) -> list[ActivityRecord]:
        return self.store.list_activity(developer_id, limit=limit)

    def activity_feed(self) -> tuple[list[ActivityRecord], str]:
        """All activity newest first, with its source (``store`` or ``fallback``).

        The injected fallback answers only when the store is down.
        """

        try:
            return self.store.list_all_activities(), STORE_SOURCE
        except StoreUnavailable:
            if self.fallback is None:
                raise
            LOGGER.warning("Activity store unavailable, serving in-memory fallback activity")
            return self.fallback.list_all_activities(), FALLBACK_SOURCE

    def list_insights(self, developer_id: Optional[int] = None) -> list[Insight]:
        return self.store.list_insights(developer_id)

    def save_insight(self, developer_id: int, insight_text: str, severity) -> Insight:
        if self.store.get_developer(developer_id) is None:
            raise DeveloperNotFound(developer_id)
        return self.store.save_insight(developer_id, insight_text, severity)

    def delete_insight(self, insight_id: int) -> Insight:
        return self.store.delete_insight(insight_id)

    # trends

    def trend_series(self, developer_id: Optional[int] = None, range_name: str = "week") -> tuple[list[dict], str]:
        records, source = self.activity_feed()
        if source == FALLBACK_SOURCE and developer_id is not None:
            # demo rows never stand in for a real developer's history
            raise StoreUnavailable("activity store unavailable")
        return trend_window(daily_totals(records, developer_id), range_name), source

    def trend_summary(self, developer_id: Optional[int] = None, range_name: str = "week") -> dict:
        series, source = self.trend_series(developer_id, range_name)
        return {
            "range": range_name,
            "source": source,
            "series": series,
            "trajectory": {
                "work_hours": trajectory(series, "work_hours"),
                "commits": trajectory(series, "commits"),
            },
        }

    def team_overview(self) -> dict:
        records, source = self.activity_feed()
        if source == FALLBACK_SOURCE:
            developers = self.fallback.list_developers()
        else:
            developers = self.store.list_developers()
        return {**team_overview(developers, records), "source": source}


def build_service(settings: Settings) -> MetricsService:
    """Wire a service from settings, creating tables if they are missing."""

    store = ActivityStore.from_url(settings.database_url, settings.connect_timeout)
    store.create_schema()
    fallback = InMemoryActivitySource() if settings.use_fallback else None
    return MetricsService(store, fallback=fallback)
