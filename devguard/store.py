"""Relational activity store (SQLAlchemy Core, parameterized queries only)."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    delete,
    event,
    select,
)
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from devguard.burnout import coerce_amount
from devguard.errors import InvalidRecord, RecordNotFound, StoreUnavailable
from devguard.log import LOGGER
from devguard.schema import ActivityRecord, Developer, Insight, RiskLevel


def _now() -> datetime:
    return datetime.now(timezone.utc)


metadata = MetaData()

developers = Table(
    "developers",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(200), nullable=False),
    Column("email", String(320), nullable=False),
    Column("role", String(200), nullable=False, default=""),
    Column("created_at", DateTime(timezone=True), nullable=False, default=_now),
)

developer_activity = Table(
    "developer_activity",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("developer_id", Integer, ForeignKey("developers.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("activity_date", Date, nullable=False),
    Column("work_hours", Float, nullable=False, default=0.0),
    Column("commits", Integer, nullable=False, default=0),
    Column("pull_requests", Integer, nullable=False, default=0),
    Column("tasks_completed", Integer, nullable=False, default=0),
    Column("pending_tasks", Integer, nullable=False, default=0),
    Column("meetings", Integer, nullable=False, default=0),
)

ai_insights = Table(
    "ai_insights",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("developer_id", Integer, ForeignKey("developers.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("insight_text", Text, nullable=False),
    Column("severity", String(10), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, default=_now),
)


def build_engine(database_url: str, connect_timeout: int = 5) -> Engine:
    """Create a pooled engine with a connect timeout suited to the backend."""

    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        engine = create_engine(url, connect_args={"timeout": connect_timeout})

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):  # noqa: ANN001
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(url, pool_pre_ping=True, connect_args={"connect_timeout": connect_timeout})


def _developer(row) -> Developer:
    return Developer(id=row.id, name=row.name, email=row.email, role=row.role, created_at=row.created_at)


def _activity(row) -> ActivityRecord:
    return ActivityRecord(
        id=row.id,
        developer_id=row.developer_id,
        activity_date=row.activity_date,
        work_hours=float(row.work_hours or 0.0),
        commits=row.commits or 0,
        pull_requests=row.pull_requests or 0,
        tasks_completed=row.tasks_completed or 0,
        pending_tasks=row.pending_tasks or 0,
        meetings=row.meetings or 0,
    )


def _insight(row) -> Insight:
    return Insight(
        id=row.id,
        developer_id=row.developer_id,
        insight_text=row.insight_text,
        severity=RiskLevel.parse(row.severity),
        created_at=row.created_at,
    )


def _count(value) -> int:
    return int(coerce_amount(value))


class ActivityStore:
    """Durable developers, daily activity and stored insights."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str, connect_timeout: int = 5) -> "ActivityStore":
        return cls(build_engine(database_url, connect_timeout))

    def create_schema(self) -> None:
        with self._transaction() as conn:
            metadata.create_all(conn)

    @contextmanager
    def _transaction(self) -> Iterator[Connection]:
        try:
            with self.engine.begin() as conn:
                yield conn
        except IntegrityError as exc:
            raise InvalidRecord(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            LOGGER.exception("Activity store operation failed")
            raise StoreUnavailable("activity store unavailable") from exc

    # developers

    def list_developers(self) -> list[Developer]:
        with self._transaction() as conn:
            rows = conn.execute(select(developers).order_by(developers.c.name.asc(), developers.c.id.asc()))
            return [_developer(row) for row in rows]

    def get_developer(self, developer_id: int) -> Optional[Developer]:
        with self._transaction() as conn:
            row = conn.execute(select(developers).where(developers.c.id == developer_id)).first()
            return _developer(row) if row else None

    def add_developer(self, name: str, email: str, role: str) -> Developer:
        if not name or not email:
            raise InvalidRecord("name and email are required")
        created_at = _now()
        with self._transaction() as conn:
            result = conn.execute(
                developers.insert().values(name=name, email=email, role=role or "", created_at=created_at)
            )
            developer_id = result.inserted_primary_key[0]
        LOGGER.info("Created developer %s (%s)", developer_id, email)
        return Developer(id=developer_id, name=name, email=email, role=role or "", created_at=created_at)

    def delete_developer(self, developer_id: int) -> Developer:
        with self._transaction() as conn:
            row = conn.execute(select(developers).where(developers.c.id == developer_id)).first()
            if row is None:
                raise RecordNotFound("Developer", developer_id)
            conn.execute(delete(developer_activity).where(developer_activity.c.developer_id == developer_id))
            conn.execute(delete(ai_insights).where(ai_insights.c.developer_id == developer_id))
            conn.execute(delete(developers).where(developers.c.id == developer_id))
        LOGGER.info("Deleted developer %s", developer_id)
        return _developer(row)

    # activity

    def log_activity(self, record: ActivityRecord) -> ActivityRecord:
        values = {
            "developer_id": int(record.developer_id),
            "activity_date": record.activity_date,
            "work_hours": coerce_amount(record.work_hours),
            "commits": _count(record.commits),
            "pull_requests": _count(record.pull_requests),
            "tasks_completed": _count(record.tasks_completed),
            "pending_tasks": _count(record.pending_tasks),
            "meetings": _count(record.meetings),
        }
        with self._transaction() as conn:
            result = conn.execute(developer_activity.insert().values(**values))
            record_id = result.inserted_primary_key[0]
        return ActivityRecord(id=record_id, **values)

    def delete_activity(self, activity_id: int) -> ActivityRecord:
        with self._transaction() as conn:
            row = conn.execute(select(developer_activity).where(developer_activity.c.id == activity_id)).first()
            if row is None:
                raise RecordNotFound("Activity record", activity_id)
            conn.execute(delete(developer_activity).where(developer_activity.c.id == activity_id))
        return _activity(row)

    def list_activity(self, developer_id: int, limit: Optional[int] = None) -> list[ActivityRecord]:
        """Return one developer's records, newest first."""

        query = (
            select(developer_activity)
            .where(developer_activity.c.developer_id == developer_id)
            .order_by(developer_activity.c.activity_date.desc(), developer_activity.c.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        with self._transaction() as conn:
            return [_activity(row) for row in conn.execute(query)]

    def list_all_activities(self) -> list[ActivityRecord]:
        query = select(developer_activity).order_by(
            developer_activity.c.activity_date.desc(), developer_activity.c.id.desc()
        )
        with self._transaction() as conn:
            return [_activity(row) for row in conn.execute(query)]

    # insights

    def list_insights(self, developer_id: Optional[int] = None) -> list[Insight]:
        query = select(ai_insights).order_by(ai_insights.c.created_at.desc(), ai_insights.c.id.desc())
        if developer_id is not None:
            query = query.where(ai_insights.c.developer_id == developer_id)
        with self._transaction() as conn:
            return [_insight(row) for row in conn.execute(query)]

    def save_insight(self, developer_id: int, insight_text: str, severity) -> Insight:
        level = RiskLevel.parse(severity)
        if not insight_text:
            raise InvalidRecord("insight_text is required")
        created_at = _now()
        with self._transaction() as conn:
            result = conn.execute(
                ai_insights.insert().values(
                    developer_id=int(developer_id),
                    insight_text=insight_text,
                    severity=level.value,
                    created_at=created_at,
                )
            )
            insight_id = result.inserted_primary_key[0]
        return Insight(
            id=insight_id,
            developer_id=int(developer_id),
            insight_text=insight_text,
            severity=level,
            created_at=created_at,
        )

    def delete_insight(self, insight_id: int) -> Insight:
        with self._transaction() as conn:
            row = conn.execute(select(ai_insights).where(ai_insights.c.id == insight_id)).first()
            if row is None:
                raise RecordNotFound("Insight", insight_id)
            conn.execute(delete(ai_insights).where(ai_insights.c.id == insight_id))
        return _insight(row)
