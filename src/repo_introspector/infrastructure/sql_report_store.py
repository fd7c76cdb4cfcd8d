"""SQL-backed report cache — implements the ReportStore port.

One row per repository keyed by ``full_name``.  Scalar repository fields
are columns; nested structures are stored as JSON.  Writes replace any
existing row for the key; concurrent writers race and the last one wins.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, Text, create_engine, delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from repo_introspector.domain.entities import (
    AnalyticsReport,
    ContributorStat,
    RepositoryMetadata,
)

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class ReportRow(Base):
    """Row of the ``analytics_reports`` table."""

    __tablename__ = "analytics_reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(String(500), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    html_url: Mapped[str] = mapped_column(String(1000), default="")
    language: Mapped[str] = mapped_column(String(100), default="")
    languages: Mapped[dict[str, int]] = mapped_column(JSON, default=dict)
    stargazers_count: Mapped[int] = mapped_column(Integer, default=0)
    forks_count: Mapped[int] = mapped_column(Integer, default=0)
    open_issues_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    contributors: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    file_types: Mapped[dict[str, int]] = mapped_column(JSON, default=dict)
    commit_timeline: Mapped[list[str]] = mapped_column(JSON, default=list)
    generated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<ReportRow {self.full_name} generated_at={self.generated_at}>"


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on the way back.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_row(report: AnalyticsReport) -> ReportRow:
    info = report.repo_info
    return ReportRow(
        full_name=info.full_name,
        name=info.name,
        description=info.description,
        html_url=info.html_url,
        language=info.language,
        languages=dict(info.languages),
        stargazers_count=info.stargazers_count,
        forks_count=info.forks_count,
        open_issues_count=info.open_issues_count,
        created_at=info.created_at,
        contributors=[
            {"login": c.login, "avatar_url": c.avatar_url, "total": c.total}
            for c in report.contributors
        ],
        file_types=dict(report.file_types),
        commit_timeline=[ts.isoformat() for ts in report.commit_timeline],
        generated_at=report.generated_at,
    )


def _from_row(row: ReportRow) -> AnalyticsReport:
    return AnalyticsReport(
        repo_info=RepositoryMetadata(
            name=row.name,
            full_name=row.full_name,
            description=row.description or "",
            html_url=row.html_url or "",
            language=row.language or "",
            languages=dict(row.languages or {}),
            stargazers_count=row.stargazers_count,
            forks_count=row.forks_count,
            open_issues_count=row.open_issues_count,
            created_at=_as_utc(row.created_at),
        ),
        contributors=[
            ContributorStat(
                login=c["login"],
                total=int(c.get("total", 0)),
                avatar_url=c.get("avatar_url", ""),
            )
            for c in row.contributors or []
        ],
        file_types=dict(row.file_types or {}),
        commit_timeline=[datetime.fromisoformat(ts) for ts in row.commit_timeline or []],
        generated_at=_as_utc(row.generated_at),
    )


class SqlReportStore:
    """``ReportStore`` on a SQLAlchemy engine (SQLite by default)."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> SqlReportStore:
        connect_args: dict[str, Any] = {}
        if database_url.startswith("sqlite"):
            connect_args = {"check_same_thread": False, "timeout": 30}
        engine = create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)
        store = cls(engine)
        store.create_schema()
        return store

    def create_schema(self) -> None:
        Base.metadata.create_all(bind=self._engine)

    def get(self, full_name: str) -> AnalyticsReport | None:
        with Session(self._engine) as session:
            row = session.scalars(
                select(ReportRow)
                .where(ReportRow.full_name == full_name)
                .order_by(ReportRow.id.desc())
                .limit(1)
            ).first()
            return _from_row(row) if row is not None else None

    def save(self, report: AnalyticsReport) -> None:
        with Session(self._engine) as session:
            session.execute(delete(ReportRow).where(ReportRow.full_name == report.full_name))
            session.add(_to_row(report))
            session.commit()
        logger.info("Stored report for %s", report.full_name)

    def close(self) -> None:
        self._engine.dispose()
