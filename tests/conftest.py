"""
pytest configuration for repo introspector tests.

This file provides:
1. In-memory fakes for the repository fetcher, LLM, speech and report store
2. Sample domain objects shared across test modules
3. A helper to build GitHub adapters on top of ``httpx.MockTransport``
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import httpx
import pytest

from repo_introspector.domain.entities import (
    AnalyticsReport,
    CommitRecord,
    ContributorStat,
    NodeKind,
    RepositoryMetadata,
    TreeEntry,
)
from repo_introspector.domain.exceptions import ContentExtractionError
from repo_introspector.infrastructure.github_rest_adapter import GitHubRestAdapter

API = "https://api.github.com"


class FakeRepoFetcher:
    """Scriptable ``RepoFetcher``; set an attribute to an exception to make it fail."""

    def __init__(self) -> None:
        self.metadata: RepositoryMetadata | Exception = RepositoryMetadata(
            name="widget-renamed",
            full_name="someone-else/widget-renamed",
            description="Widgets",
            html_url="https://github.com/acme/widget",
            language="Python",
            stargazers_count=42,
        )
        self.languages: dict[str, int] | Exception = {"Python": 1000, "Shell": 20}
        self.commits: list[CommitRecord] | Exception = [
            CommitRecord(login="ada", avatar_url="https://a/ada.png", author_name="Ada", authored_at="2024-01-01T10:00:00Z"),
            CommitRecord(login="ada", avatar_url="https://a/ada.png", author_name="Ada", authored_at="2024-01-02T11:00:00Z"),
            CommitRecord(author_name="bob", authored_at="2024-01-03T12:00:00Z"),
        ]
        self.tree: list[TreeEntry] | Exception = [
            TreeEntry(path="README.md", kind=NodeKind.FILE),
            TreeEntry(path="src", kind=NodeKind.DIRECTORY),
            TreeEntry(path="src/app.py", kind=NodeKind.FILE),
        ]
        self.files: dict[str, str] = {"src/app.py": "print('hi')\n", "README.md": "# Widget\n"}
        self.commit_windows: list[object] = []
        self.fetched_paths: list[list[str]] = []

    async def fetch_metadata(self, owner: str, repo: str) -> RepositoryMetadata:
        return _value(self.metadata)

    async def fetch_languages(self, owner: str, repo: str) -> dict[str, int]:
        return _value(self.languages)

    async def fetch_commits(self, owner, repo, window=None) -> list[CommitRecord]:  # type: ignore[no-untyped-def]
        self.commit_windows.append(window)
        return _value(self.commits)

    async def fetch_tree(self, owner: str, repo: str) -> list[TreeEntry]:
        return _value(self.tree)

    async def fetch_file_content(self, owner: str, repo: str, path: str) -> str:
        return self.files[path]

    async def fetch_files(self, owner: str, repo: str, paths: list[str]) -> dict[str, str]:
        self.fetched_paths.append(list(paths))
        found = {p: self.files[p] for p in paths if p in self.files}
        if not found:
            raise ContentExtractionError(f"No files could be fetched from {owner}/{repo}.")
        return found


class FakeLlm:
    """``LlmGateway`` returning queued answers and recording prompts."""

    def __init__(self, *answers: str) -> None:
        self.answers = list(answers)
        self.completions: list[tuple[str, str, bool]] = []
        self.conversations: list[list] = []

    async def complete(self, system_prompt: str, user_prompt: str, *, json_mode: bool = True) -> str:
        self.completions.append((system_prompt, user_prompt, json_mode))
        return self.answers.pop(0)

    async def converse(self, messages) -> str:  # type: ignore[no-untyped-def]
        self.conversations.append(list(messages))
        return self.answers.pop(0)


class MemoryReportStore:
    """Dict-backed ``ReportStore``."""

    def __init__(self) -> None:
        self.reports: dict[str, AnalyticsReport] = {}
        self.saves = 0

    def get(self, full_name: str) -> AnalyticsReport | None:
        return self.reports.get(full_name)

    def save(self, report: AnalyticsReport) -> None:
        self.saves += 1
        self.reports[report.full_name] = report


def _value(v):  # type: ignore[no-untyped-def]
    if isinstance(v, Exception):
        raise v
    return v


@pytest.fixture
def fake_fetcher() -> FakeRepoFetcher:
    return FakeRepoFetcher()


@pytest.fixture
def memory_store() -> MemoryReportStore:
    return MemoryReportStore()


@pytest.fixture
def sample_report() -> AnalyticsReport:
    """A fully populated report for acme/widget."""
    return AnalyticsReport(
        repo_info=RepositoryMetadata(
            name="widget",
            full_name="acme/widget",
            description="Widgets for everyone",
            html_url="https://github.com/acme/widget",
            language="Python",
            languages={"Python": 1000},
            stargazers_count=10,
            forks_count=2,
            open_issues_count=1,
            created_at=datetime(2020, 5, 1, tzinfo=timezone.utc),
        ),
        contributors=[
            ContributorStat(login="ada", total=2, avatar_url="https://a/ada.png"),
            ContributorStat(login="bob", total=1),
        ],
        file_types={"Python": 1000},
        commit_timeline=[
            datetime(2024, 1, 1, 10, tzinfo=timezone.utc),
            datetime(2024, 1, 2, 11, tzinfo=timezone.utc),
        ],
        generated_at=datetime(2024, 2, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def github_adapter() -> Callable[[Callable[[httpx.Request], httpx.Response]], GitHubRestAdapter]:
    """Factory: build a ``GitHubRestAdapter`` whose HTTP calls hit *handler*."""

    def _build(handler: Callable[[httpx.Request], httpx.Response]) -> GitHubRestAdapter:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return GitHubRestAdapter(client=client, token="test-token")

    return _build
