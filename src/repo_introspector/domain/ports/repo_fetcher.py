"""Port: repository fetcher — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_introspector.domain.entities import CommitRecord, RepositoryMetadata, TreeEntry
from repo_introspector.domain.value_objects import DateWindow


class RepoFetcher(Protocol):
    """Abstract contract for fetching GitHub repository data."""

    async def fetch_metadata(self, owner: str, repo: str) -> RepositoryMetadata:
        """Return high-level repository metadata."""
        ...

    async def fetch_languages(self, owner: str, repo: str) -> dict[str, int]:
        """Return language → byte-count mapping from the GitHub Languages API."""
        ...

    async def fetch_commits(
        self, owner: str, repo: str, window: DateWindow | None = None
    ) -> list[CommitRecord]:
        """Return the paged commit history, optionally scoped to *window*."""
        ...

    async def fetch_tree(self, owner: str, repo: str) -> list[TreeEntry]:
        """Return the flat recursive tree of the default branch."""
        ...

    async def fetch_file_content(self, owner: str, repo: str, path: str) -> str:
        """Return the decoded text content of a single file."""
        ...

    async def fetch_files(
        self, owner: str, repo: str, paths: list[str]
    ) -> dict[str, str]:
        """Return ``{path: content}`` for every file that could be fetched."""
        ...
