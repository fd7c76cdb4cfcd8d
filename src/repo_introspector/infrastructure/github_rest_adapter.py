"""GitHub REST API adapter — implements the RepoFetcher port."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from datetime import datetime, timezone
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from repo_introspector.domain.entities import (
    CommitRecord,
    NodeKind,
    RepositoryMetadata,
    TreeEntry,
)
from repo_introspector.domain.exceptions import (
    ContentExtractionError,
    GitHubApiError,
    GitHubRateLimitError,
    IntrospectorError,
    RepositoryAccessDeniedError,
    RepositoryNotFoundError,
    ResponseDecodeError,
    UpstreamTransportError,
)
from repo_introspector.domain.value_objects import DateWindow
from repo_introspector.infrastructure.github_schemas import (
    CommitPayload,
    ContentPayload,
    RepoPayload,
    TreePayload,
)

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"

# Hard ceiling on commit pages (100 commits each); the server may report more.
MAX_COMMIT_PAGES = 50
COMMITS_PER_PAGE = 100
TREE_BRANCHES: tuple[str, ...] = ("main", "master")

_T = TypeVar("_T")

_LANGUAGES = TypeAdapter(dict[str, int])
_COMMIT_PAGE = TypeAdapter(list[CommitPayload])


def next_page_url(response: httpx.Response) -> str | None:
    """Return the ``rel="next"`` target of the ``Link`` header, if any."""
    return response.links.get("next", {}).get("url") or None


class GitHubRestAdapter:
    """Concrete RepoFetcher backed by the GitHub v3 REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str | None = None,
        api_base: str = _GITHUB_API,
    ) -> None:
        self._client = client
        self._api_base = api_base.rstrip("/")
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "repo-introspector/1.0",
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    async def fetch_metadata(self, owner: str, repo: str) -> RepositoryMetadata:
        """GET /repos/{owner}/{repo} → RepositoryMetadata."""
        resp = await self._api_get(self._repo_url(owner, repo))
        payload = _decode(resp, TypeAdapter(RepoPayload))
        return RepositoryMetadata(
            name=payload.name,
            full_name=payload.full_name or f"{owner}/{repo}",
            description=payload.description or "",
            html_url=payload.html_url or "",
            language=payload.language or "",
            stargazers_count=payload.stargazers_count,
            forks_count=payload.forks_count,
            open_issues_count=payload.open_issues_count,
            created_at=payload.created_at,
        )

    async def fetch_languages(self, owner: str, repo: str) -> dict[str, int]:
        """GET /repos/{owner}/{repo}/languages → {lang: bytes}."""
        resp = await self._api_get(f"{self._repo_url(owner, repo)}/languages")
        return _decode(resp, _LANGUAGES)

    # ── Pagination ──────────────────────────────────────────────────────

    async def fetch_page(
        self, url: str, params: dict[str, str] | None = None
    ) -> tuple[list[Any], str | None]:
        """Fetch one page of a list endpoint.

        Returns the decoded JSON array and the URL of the next page, or
        ``None`` when the ``Link`` header announces no further page.
        """
        resp = await self._api_get(url, params=params)
        records = _json(resp)
        if not isinstance(records, list):
            raise ResponseDecodeError(
                f"Expected a JSON array from {url}, got {type(records).__name__}."
            )
        return records, next_page_url(resp)

    async def fetch_commits(
        self, owner: str, repo: str, window: DateWindow | None = None
    ) -> list[CommitRecord]:
        """Follow the commits listing page by page, up to ``MAX_COMMIT_PAGES``.

        Any failing page aborts the whole listing.
        """
        url: str | None = f"{self._repo_url(owner, repo)}/commits"
        params: dict[str, str] | None = {"per_page": str(COMMITS_PER_PAGE)}
        if window is not None:
            params.update(window.query_params())

        raw: list[Any] = []
        pages = 0
        while url:
            records, url = await self.fetch_page(url, params)
            params = None  # next links already carry the query
            pages += 1
            raw.extend(records)
            logger.debug("Fetched commit page %d for %s/%s", pages, owner, repo)

            if url and pages >= MAX_COMMIT_PAGES:
                logger.warning(
                    "Reached the %d page limit for %s/%s, stopping pagination",
                    MAX_COMMIT_PAGES,
                    owner,
                    repo,
                )
                break

        try:
            commits = _COMMIT_PAGE.validate_python(raw)
        except ValidationError as exc:
            raise ResponseDecodeError(
                f"Unexpected commit payload for {owner}/{repo}: {exc}"
            ) from exc

        logger.info(
            "Fetched %d commits across %d page(s) for %s/%s",
            len(commits),
            pages,
            owner,
            repo,
        )
        return [_to_commit_record(c) for c in commits]

    # ── Tree & contents ─────────────────────────────────────────────────

    async def fetch_tree(self, owner: str, repo: str) -> list[TreeEntry]:
        """GET /git/trees/{branch}?recursive=1, trying ``main`` then ``master``."""
        last_error: IntrospectorError | None = None
        for branch in TREE_BRANCHES:
            try:
                resp = await self._api_get(
                    f"{self._repo_url(owner, repo)}/git/trees/{branch}",
                    params={"recursive": "1"},
                )
            except (RepositoryNotFoundError, GitHubApiError) as exc:
                logger.debug("No tree on branch %s of %s/%s", branch, owner, repo)
                last_error = exc
                continue

            payload = _decode(resp, TypeAdapter(TreePayload))
            if payload.truncated:
                logger.warning("Tree for %s/%s was truncated by GitHub", owner, repo)
            return [
                TreeEntry(
                    path=item.path,
                    kind=NodeKind.DIRECTORY if item.type == "tree" else NodeKind.FILE,
                    size=item.size,
                )
                for item in payload.tree
            ]

        raise RepositoryNotFoundError(
            f"Could not fetch the tree of {owner}/{repo} from "
            f"{' or '.join(TREE_BRANCHES)}: {last_error}"
        )

    async def fetch_file_content(self, owner: str, repo: str, path: str) -> str:
        """GET /contents/{path} and decode the base64 body."""
        resp = await self._api_get(
            f"{self._repo_url(owner, repo)}/contents/{quote(path.lstrip('/'))}"
        )
        payload = _decode(resp, TypeAdapter(ContentPayload))
        if payload.encoding != "base64":
            return payload.content
        try:
            return base64.b64decode(payload.content).decode("utf-8", errors="replace")
        except (binascii.Error, ValueError) as exc:
            raise ResponseDecodeError(
                f"Failed to decode base64 content of {path}: {exc}"
            ) from exc

    async def fetch_files(
        self, owner: str, repo: str, paths: list[str]
    ) -> dict[str, str]:
        """Fetch several files concurrently; skip the ones that fail."""
        results = await asyncio.gather(
            *(self.fetch_file_content(owner, repo, p) for p in paths),
            return_exceptions=True,
        )

        contents: dict[str, str] = {}
        for path, result in zip(paths, results):
            if isinstance(result, BaseException):
                logger.warning("Failed to fetch %s from %s/%s: %s", path, owner, repo, result)
                continue
            contents[path] = result

        if not contents:
            raise ContentExtractionError(
                f"No files could be fetched from {owner}/{repo}."
            )
        return contents

    # ── HTTP plumbing ───────────────────────────────────────────────────

    def _repo_url(self, owner: str, repo: str) -> str:
        return f"{self._api_base}/repos/{owner}/{repo}"

    async def _api_get(
        self,
        url: str,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        try:
            resp = await self._client.get(
                url, headers=self._api_headers, params=params
            )
        except httpx.TimeoutException as exc:
            raise UpstreamTransportError(f"Timed out fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamTransportError(
                f"Network error fetching {url}: {exc}"
            ) from exc

        if resp.status_code == 200:
            return resp

        if resp.status_code == 404:
            raise RepositoryNotFoundError(
                f"GitHub returned 404 for {url}. "
                "Make sure the repository exists and is public."
            )

        if resp.status_code == 403:
            remaining = resp.headers.get("x-ratelimit-remaining", "")
            if remaining == "0":
                reset_raw = resp.headers.get("x-ratelimit-reset", "")
                try:
                    reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                        "%Y-%m-%d %H:%M:%S UTC"
                    )
                except (ValueError, OSError):
                    reset_str = reset_raw or "unknown"
                raise GitHubRateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {reset_str}. "
                    "Set the GITHUB_TOKEN environment variable to increase the limit."
                )
            raise RepositoryAccessDeniedError(
                "Access denied. The repository may be private."
            )

        if resp.status_code == 429:
            raise GitHubRateLimitError("GitHub API rate limit exceeded (HTTP 429).")

        raise GitHubApiError(
            f"GitHub API returned HTTP {resp.status_code} for {url}: {resp.text}",
            status_code=resp.status_code,
            body=resp.text,
        )


# ── Decoding helpers ────────────────────────────────────────────────────────


def _json(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError as exc:
        raise ResponseDecodeError(
            f"Invalid JSON from {resp.request.url}: {exc}"
        ) from exc


def _decode(resp: httpx.Response, adapter: TypeAdapter[_T]) -> _T:
    data = _json(resp)
    try:
        return adapter.validate_python(data)
    except ValidationError as exc:
        raise ResponseDecodeError(
            f"Unexpected response shape from {resp.request.url}: {exc}"
        ) from exc


def _to_commit_record(payload: CommitPayload) -> CommitRecord:
    git_author = payload.commit.author if payload.commit else None
    return CommitRecord(
        login=payload.author.login if payload.author else None,
        avatar_url=payload.author.avatar_url if payload.author else None,
        author_name=git_author.name if git_author else None,
        authored_at=git_author.date if git_author else None,
    )
