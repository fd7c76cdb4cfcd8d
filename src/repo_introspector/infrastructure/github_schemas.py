"""Typed response schemas for the GitHub REST endpoints we consume.

Every field we do not strictly need is optional so that GitHub adding or
nulling fields never breaks decoding, while a body of the wrong shape
(an object where a list is expected, a string count) fails validation.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class _Schema(BaseModel):
    model_config = ConfigDict(extra="ignore")


class RepoPayload(_Schema):
    """``GET /repos/{owner}/{repo}``."""

    name: str
    full_name: str | None = None
    description: str | None = None
    html_url: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    created_at: datetime | None = None


class LinkedUser(_Schema):
    login: str | None = None
    avatar_url: str | None = None


class GitAuthor(_Schema):
    name: str | None = None
    email: str | None = None
    date: str | None = None


class GitCommit(_Schema):
    author: GitAuthor | None = None


class CommitPayload(_Schema):
    """One element of ``GET /repos/{owner}/{repo}/commits``."""

    sha: str | None = None
    author: LinkedUser | None = None
    commit: GitCommit | None = None


class TreeItem(_Schema):
    path: str
    type: str
    size: int = 0


class TreePayload(_Schema):
    """``GET /repos/{owner}/{repo}/git/trees/{branch}?recursive=1``."""

    sha: str | None = None
    tree: list[TreeItem] = []
    truncated: bool = False


class ContentPayload(_Schema):
    """``GET /repos/{owner}/{repo}/contents/{path}`` for a single file."""

    path: str | None = None
    content: str = ""
    encoding: str | None = None
