"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from repo_introspector.domain.entities import (
    AnalyticsReport,
    ChatMessage,
    ChatRequest,
    FileNode,
    NodeKind,
    SmartSummary,
    VoiceReply,
)

# ── Requests ────────────────────────────────────────────────────────────────


class AnalyzeRequest(BaseModel):
    """Request body for ``POST /api/analyze``.

    ``start_date`` / ``end_date`` (``YYYY-MM-DD``) scope the commit history;
    a scoped request is never served from or written to the cache.
    """

    repo_url: str
    start_date: str | None = None
    end_date: str | None = None

    @field_validator("repo_url")
    @classmethod
    def _must_be_github(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "repo_url must not be empty."
            raise ValueError(msg)
        if "github.com" not in stripped.lower():
            msg = (
                f"Invalid URL: '{stripped}'. "
                "Only GitHub repository URLs are supported."
            )
            raise ValueError(msg)
        return stripped


class RepoRef(BaseModel):
    """Request body naming a repository by owner and name."""

    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)


class ChatTurn(BaseModel):
    role: str
    content: str


class ChatBody(RepoRef):
    """Request body for ``POST /api/chat`` and ``POST /api/voice-chat``."""

    files: list[str]
    message: str = Field(min_length=1)
    history: list[ChatTurn] = []

    def to_domain(self) -> ChatRequest:
        return ChatRequest(
            owner=self.owner,
            repo=self.repo,
            files=list(self.files),
            message=self.message,
            history=[ChatMessage(role=t.role, content=t.content) for t in self.history],
        )


# ── Responses ───────────────────────────────────────────────────────────────


class RepoInfoResponse(BaseModel):
    name: str
    full_name: str
    description: str
    html_url: str
    language: str
    languages: dict[str, int]
    stargazers_count: int
    forks_count: int
    open_issues_count: int
    created_at: datetime | None


class ContributorAuthor(BaseModel):
    login: str
    avatar_url: str


class ContributorResponse(BaseModel):
    author: ContributorAuthor
    total: int


class AnalyticsReportResponse(BaseModel):
    """Serialised :class:`AnalyticsReport`."""

    repo_info: RepoInfoResponse
    contributors: list[ContributorResponse]
    file_types: dict[str, int]
    commit_timeline: list[datetime]
    generated_at: datetime | None

    @classmethod
    def from_domain(cls, report: AnalyticsReport) -> AnalyticsReportResponse:
        info = report.repo_info
        return cls(
            repo_info=RepoInfoResponse(
                name=info.name,
                full_name=info.full_name,
                description=info.description,
                html_url=info.html_url,
                language=info.language,
                languages=dict(info.languages),
                stargazers_count=info.stargazers_count,
                forks_count=info.forks_count,
                open_issues_count=info.open_issues_count,
                created_at=info.created_at,
            ),
            contributors=[
                ContributorResponse(
                    author=ContributorAuthor(login=c.login, avatar_url=c.avatar_url),
                    total=c.total,
                )
                for c in report.contributors
            ],
            file_types=dict(report.file_types),
            commit_timeline=list(report.commit_timeline),
            generated_at=report.generated_at,
        )


# The web client expects "folder" for directories.
_WIRE_TYPES = {NodeKind.FILE: "file", NodeKind.DIRECTORY: "folder"}


class FileNodeResponse(BaseModel):
    name: str
    path: str
    type: str
    children: list[FileNodeResponse] | None = None

    @classmethod
    def from_domain(cls, node: FileNode) -> FileNodeResponse:
        return cls(
            name=node.name,
            path=node.path,
            type=_WIRE_TYPES[node.kind],
            children=(
                [cls.from_domain(c) for c in node.children]
                if node.children is not None
                else None
            ),
        )


class FileTreeResponse(BaseModel):
    tree: list[FileNodeResponse]


class SmartSummaryResponse(BaseModel):
    archetype: str
    one_liner: str
    key_tech: list[str]
    code_quality_score: int
    complexity: str
    latex_code: str

    @classmethod
    def from_domain(cls, summary: SmartSummary) -> SmartSummaryResponse:
        return cls(
            archetype=summary.archetype,
            one_liner=summary.one_liner,
            key_tech=list(summary.key_tech),
            code_quality_score=summary.code_quality_score,
            complexity=summary.complexity,
            latex_code=summary.latex_code,
        )


class ChatResponse(BaseModel):
    response: str


class VoiceChatResponse(BaseModel):
    response: str
    audio: str | None = None
    audio_error: str | None = None

    @classmethod
    def from_domain(cls, reply: VoiceReply) -> VoiceChatResponse:
        return cls(response=reply.response, audio=reply.audio, audio_error=reply.audio_error)


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    error: str
    stage: str | None = None
