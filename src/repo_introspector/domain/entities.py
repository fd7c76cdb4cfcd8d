"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class NodeKind(str, Enum):
    """Kind of an entry in a repository tree."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class RepositoryMetadata:
    """High-level metadata about a GitHub repository."""

    name: str
    full_name: str
    description: str = ""
    html_url: str = ""
    language: str = ""
    languages: dict[str, int] = field(default_factory=dict)
    stargazers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class ContributorStat:
    """Commits attributed to one author identity within the fetch window.

    ``avatar_url`` is empty when the identity comes from raw git metadata
    rather than a linked GitHub account.
    """

    login: str
    total: int
    avatar_url: str = ""


@dataclass(frozen=True, slots=True)
class AnalyticsReport:
    """The aggregate root returned to callers and stored in the cache."""

    repo_info: RepositoryMetadata
    contributors: list[ContributorStat] = field(default_factory=list)
    file_types: dict[str, int] = field(default_factory=dict)
    commit_timeline: list[datetime] = field(default_factory=list)
    generated_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return self.repo_info.full_name


@dataclass(frozen=True, slots=True)
class TreeEntry:
    """A single flat entry from the recursive git tree."""

    path: str
    kind: NodeKind
    size: int = 0


@dataclass(slots=True)
class FileNode:
    """A node of the hierarchical file tree. Only directories have children."""

    name: str
    path: str
    kind: NodeKind
    children: list[FileNode] | None = None


@dataclass(frozen=True, slots=True)
class SmartSummary:
    """Structured output of the two-stage LLM analysis."""

    archetype: str
    one_liner: str
    key_tech: list[str]
    code_quality_score: int
    complexity: str
    latex_code: str = ""


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """One prior turn of a conversation about repository files."""

    role: str  # "user" or "assistant"
    content: str


@dataclass(frozen=True, slots=True)
class ChatRequest:
    owner: str
    repo: str
    files: list[str]
    message: str
    history: list[ChatMessage] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ChatReply:
    response: str


@dataclass(frozen=True, slots=True)
class VoiceReply:
    """Text reply plus base64 audio, or the reason audio is missing."""

    response: str
    audio: str | None = None
    audio_error: str | None = None


@dataclass(frozen=True, slots=True)
class CommitRecord:
    """The attribution-relevant fields of one commit from the commits API.

    ``login`` / ``avatar_url`` come from the linked GitHub account and are
    ``None`` when the commit is not linked to one.  ``author_name`` and
    ``authored_at`` come from the git metadata and are kept as sent.
    """

    login: str | None = None
    avatar_url: str | None = None
    author_name: str | None = None
    authored_at: str | None = None
