"""Tests for the concurrent analytics aggregation."""

import pytest

from repo_introspector.domain.exceptions import (
    GitHubApiError,
    RepositoryNotFoundError,
    UpstreamTransportError,
)
from repo_introspector.services.aggregator import ReportAggregator


class TestReportAggregator:
    @pytest.mark.asyncio
    async def test_full_report(self, fake_fetcher):
        report = await ReportAggregator(fake_fetcher).aggregate("acme", "widget")

        assert report.repo_info.full_name == "acme/widget"
        assert report.repo_info.name == "widget-renamed"
        assert report.repo_info.languages == {"Python": 1000, "Shell": 20}
        assert report.file_types == report.repo_info.languages
        assert [(c.login, c.total) for c in report.contributors] == [("ada", 2), ("bob", 1)]
        assert len(report.commit_timeline) == 3
        assert report.generated_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_full_name_comes_from_caller(self, fake_fetcher):
        report = await ReportAggregator(fake_fetcher).aggregate("Acme", "Widget")
        assert report.full_name == "Acme/Widget"

    @pytest.mark.asyncio
    async def test_language_failure_degrades_to_empty(self, fake_fetcher):
        fake_fetcher.languages = UpstreamTransportError("languages down")
        report = await ReportAggregator(fake_fetcher).aggregate("acme", "widget")
        assert report.file_types == {}
        assert report.repo_info.languages == {}
        assert len(report.contributors) == 2

    @pytest.mark.asyncio
    async def test_metadata_failure_fails(self, fake_fetcher):
        fake_fetcher.metadata = RepositoryNotFoundError("gone")
        with pytest.raises(RepositoryNotFoundError):
            await ReportAggregator(fake_fetcher).aggregate("acme", "widget")

    @pytest.mark.asyncio
    async def test_commit_failure_fails(self, fake_fetcher):
        fake_fetcher.commits = GitHubApiError("page 3 broke", status_code=500)
        with pytest.raises(GitHubApiError):
            await ReportAggregator(fake_fetcher).aggregate("acme", "widget")

    @pytest.mark.asyncio
    async def test_metadata_error_wins_when_both_fail(self, fake_fetcher):
        fake_fetcher.metadata = RepositoryNotFoundError("gone")
        fake_fetcher.commits = GitHubApiError("broken", status_code=500)
        with pytest.raises(RepositoryNotFoundError):
            await ReportAggregator(fake_fetcher).aggregate("acme", "widget")

    @pytest.mark.asyncio
    async def test_window_is_forwarded(self, fake_fetcher):
        from repo_introspector.domain.value_objects import DateWindow

        window = DateWindow.from_strings("2024-01-01", None)
        await ReportAggregator(fake_fetcher).aggregate("acme", "widget", window)
        assert fake_fetcher.commit_windows == [window]
