"""Core data schema for developers, activity telemetry and burnout results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


class RiskLevel(str, Enum):
    """Categorical burnout bucket."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: Any) -> "RiskLevel":
        """Normalize a boundary value (case and whitespace) into a level."""

        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for level in cls:
            if level.value.lower() == text:
                return level
        raise ValueError(f"invalid risk level '{value}'")


@dataclass
class Developer:
    id: int
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class ActivityRecord:
    """One developer's telemetry for one calendar day."""

    developer_id: int
    activity_date: date
    work_hours: float = 0.0
    commits: int = 0
    pull_requests: int = 0
    tasks_completed: int = 0
    pending_tasks: int = 0
    meetings: int = 0
    id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "developer_id": self.developer_id,
            "activity_date": self.activity_date.isoformat(),
            "work_hours": self.work_hours,
            "commits": self.commits,
            "pull_requests": self.pull_requests,
            "tasks_completed": self.tasks_completed,
            "pending_tasks": self.pending_tasks,
            "meetings": self.meetings,
        }


@dataclass
class Insight:
    id: int
    developer_id: int
    insight_text: str
    severity: RiskLevel
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "developer_id": self.developer_id,
            "insight_text": self.insight_text,
            "severity": self.severity.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class BurnoutAssessment:
    """Derived burnout result; recomputed on every request, never stored."""

    score: float
    risk_level: RiskLevel

    def to_dict(self) -> dict:
        return {"score": self.score, "riskLevel": self.risk_level.value}


@dataclass
class MetricsBundle:
    """Response bundle assembled for one developer's dashboard."""

    developer: Developer
    activities: list[ActivityRecord]
    latest_metric: BurnoutAssessment
    insights: list[Insight] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "developer": self.developer.to_dict(),
            "activities": [record.to_dict() for record in self.activities],
            "latestMetric": self.latest_metric.to_dict(),
            "insights": [insight.to_dict() for insight in self.insights],
        }
