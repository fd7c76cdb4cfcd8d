"""Repository analytics aggregator — concurrent fan-out / fan-in.

Runs three independent retrievals for one repository and joins all of
them before deciding the outcome:

1. metadata: required; a failure fails the aggregation.
2. languages: cosmetic; a failure degrades to an empty mapping.
3. commits + reconciliation: required; a failure fails the aggregation.

When both required branches fail the metadata error is the one raised.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from datetime import datetime, timezone
from typing import cast

from repo_introspector.domain.entities import AnalyticsReport, RepositoryMetadata
from repo_introspector.domain.ports.repo_fetcher import RepoFetcher
from repo_introspector.domain.value_objects import DateWindow
from repo_introspector.services.commit_reconciler import ReconciledCommits, reconcile

logger = logging.getLogger(__name__)


class ReportAggregator:
    """Builds one :class:`AnalyticsReport` snapshot per call."""

    def __init__(self, repo_fetcher: RepoFetcher) -> None:
        self._fetcher = repo_fetcher

    async def aggregate(
        self, owner: str, name: str, window: DateWindow | None = None
    ) -> AnalyticsReport:
        full_name = f"{owner}/{name}"
        logger.info("Aggregating analytics for %s", full_name)

        metadata, languages, commits = await asyncio.gather(
            self._fetcher.fetch_metadata(owner, name),
            self._fetcher.fetch_languages(owner, name),
            self._commit_stats(owner, name, window),
            return_exceptions=True,
        )

        if isinstance(metadata, BaseException):
            logger.warning("Metadata fetch failed for %s: %s", full_name, metadata)
            raise metadata
        if isinstance(commits, BaseException):
            logger.warning("Commit fetch failed for %s: %s", full_name, commits)
            raise commits
        if isinstance(languages, BaseException):
            logger.warning(
                "Language fetch failed for %s, continuing without it: %s",
                full_name,
                languages,
            )
            languages = {}

        stats = cast(ReconciledCommits, commits)
        language_map = dict(languages or {})

        repo_info = dataclasses.replace(
            cast(RepositoryMetadata, metadata), full_name=full_name, languages=language_map
        )
        report = AnalyticsReport(
            repo_info=repo_info,
            contributors=stats.contributors(),
            file_types=dict(language_map),
            commit_timeline=stats.timeline,
            generated_at=datetime.now(timezone.utc),
        )
        logger.info(
            "Aggregated %s: %d contributors, %d timeline entries",
            full_name,
            len(report.contributors),
            len(report.commit_timeline),
        )
        return report

    async def _commit_stats(
        self, owner: str, name: str, window: DateWindow | None
    ) -> ReconciledCommits:
        records = await self._fetcher.fetch_commits(owner, name, window)
        return reconcile(records)
