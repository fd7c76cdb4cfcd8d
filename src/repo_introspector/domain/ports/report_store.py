"""Port: report store — key-value persistence of one report per repository."""

from __future__ import annotations

from typing import Protocol

from repo_introspector.domain.entities import AnalyticsReport


class ReportStore(Protocol):
    """Overwrite-on-key storage of :class:`AnalyticsReport` by ``full_name``."""

    def get(self, full_name: str) -> AnalyticsReport | None:
        """Return the stored report, or ``None`` when there is none."""
        ...

    def save(self, report: AnalyticsReport) -> None:
        """Store *report*, replacing any previous report for the same key."""
        ...
