"""Introspect-repository use case — cache-aware analytics and file tree.

The cache holds full-history reports only.  The store is synchronous, so
every call to it runs in a worker thread.  A request with a date window
always aggregates fresh and is never written to the cache.
"""

from __future__ import annotations

import asyncio
import logging

from repo_introspector.domain.entities import AnalyticsReport, FileNode
from repo_introspector.domain.exceptions import ReportNotFoundError
from repo_introspector.domain.ports.repo_fetcher import RepoFetcher
from repo_introspector.domain.ports.report_store import ReportStore
from repo_introspector.domain.value_objects import DateWindow, GitHubUrl
from repo_introspector.services.aggregator import ReportAggregator
from repo_introspector.services.tree_builder import build_tree

logger = logging.getLogger(__name__)


class IntrospectRepoUseCase:
    """Orchestrates cache lookup, aggregation and storage of reports."""

    def __init__(self, repo_fetcher: RepoFetcher, report_store: ReportStore) -> None:
        self._fetcher = repo_fetcher
        self._store = report_store
        self._aggregator = ReportAggregator(repo_fetcher)

    async def analyze(
        self,
        repo_url: str,
        since: str | None = None,
        until: str | None = None,
    ) -> AnalyticsReport:
        url = GitHubUrl.from_string(repo_url)
        window = DateWindow.from_strings(since, until)

        if not window.is_empty:
            logger.info(
                "Date-scoped analysis of %s (%s .. %s), bypassing cache",
                url.full_name,
                window.since,
                window.until,
            )
            return await self._aggregator.aggregate(url.owner, url.repo, window)

        cached = await asyncio.to_thread(self._store.get, url.full_name)
        if cached is not None:
            logger.info("Returning cached report for %s", url.full_name)
            return cached

        logger.info("Fetching fresh data for %s", url.full_name)
        report = await self._aggregator.aggregate(url.owner, url.repo)
        try:
            await asyncio.to_thread(self._store.save, report)
        except Exception:
            logger.warning("Could not cache report for %s", url.full_name, exc_info=True)
        return report

    async def get_report(self, owner: str, repo: str) -> AnalyticsReport:
        full_name = f"{owner}/{repo}"
        report = await asyncio.to_thread(self._store.get, full_name)
        if report is None:
            raise ReportNotFoundError(f"No report found for {full_name}.")
        return report

    async def file_tree(self, owner: str, repo: str) -> list[FileNode]:
        logger.info("Fetching file tree for %s/%s", owner, repo)
        entries = await self._fetcher.fetch_tree(owner, repo)
        return build_tree(entries)
