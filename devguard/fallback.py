"""Deterministic in-memory demo data, injected where a fallback is wanted."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

import numpy as np

from devguard.schema import ActivityRecord, Developer

DEMO_DEVELOPERS = (
    ("Alex Rivera", "alex@devguard.ai", "Sr. Frontend Engineer", "2024-01-12"),
    ("Jordan Smith", "jordan@devguard.ai", "DevOps Lead", "2023-11-05"),
    ("Sarah Chen", "sarah@devguard.ai", "AI Researcher", "2024-03-20"),
    ("Marcus Thorne", "marcus@devguard.ai", "Backend Architect", "2023-05-15"),
)


class InMemoryActivitySource:
    """Seeded demo history; build one per process or test and pass it in."""

    def __init__(self, days: int = 30, seed: int = 42, today: Optional[date] = None) -> None:
        self.today = today or date.today()
        self.developers = [
            Developer(id=index, name=name, email=email, role=role, created_at=datetime.fromisoformat(created))
            for index, (name, email, role, created) in enumerate(DEMO_DEVELOPERS, start=1)
        ]
        self.activities = self._generate(days, np.random.default_rng(seed))

    def _generate(self, days: int, rng: np.random.Generator) -> list[ActivityRecord]:
        records: list[ActivityRecord] = []
        next_id = 1
        for developer in self.developers:
            for offset in range(days):
                records.append(
                    ActivityRecord(
                        id=next_id,
                        developer_id=developer.id,
                        activity_date=self.today - timedelta(days=offset),
                        work_hours=round(float(6 + rng.random() * 6), 1),
                        commits=int(rng.integers(0, 15)),
                        pull_requests=int(rng.integers(0, 5)),
                        meetings=int(rng.integers(0, 6)),
                        tasks_completed=int(rng.integers(0, 10)),
                        pending_tasks=int(rng.integers(0, 15)),
                    )
                )
                next_id += 1
        return records

    def list_developers(self) -> list[Developer]:
        return sorted(self.developers, key=lambda d: (d.name, d.id))

    def list_all_activities(self) -> list[ActivityRecord]:
        return sorted(self.activities, key=lambda r: (r.activity_date, r.id), reverse=True)
