"""API routes — thin controllers that delegate to the use cases."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from repo_introspector.interface.dependencies import (
    get_chat_use_case,
    get_introspect_use_case,
    get_smart_summary_use_case,
)
from repo_introspector.interface.schemas import (
    AnalyticsReportResponse,
    AnalyzeRequest,
    ChatBody,
    ChatResponse,
    ErrorResponse,
    FileNodeResponse,
    FileTreeResponse,
    RepoRef,
    SmartSummaryResponse,
    VoiceChatResponse,
)
from repo_introspector.services.introspect_repo import IntrospectRepoUseCase
from repo_introspector.services.repo_chat import RepoChatUseCase
from repo_introspector.services.smart_summary import SmartSummaryUseCase

router = APIRouter(prefix="/api")

_UPSTREAM_ERRORS = {
    403: {"model": ErrorResponse, "description": "Repository is private"},
    429: {"model": ErrorResponse, "description": "GitHub API rate limit exceeded"},
    502: {"model": ErrorResponse, "description": "Upstream API error"},
    504: {"model": ErrorResponse, "description": "Upstream API timed out"},
}


@router.post(
    "/analyze",
    response_model=AnalyticsReportResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid GitHub URL or date range"},
        404: {"model": ErrorResponse, "description": "Repository not found"},
        **_UPSTREAM_ERRORS,
    },
)
async def analyze(
    body: AnalyzeRequest,
    use_case: IntrospectRepoUseCase = Depends(get_introspect_use_case),
) -> AnalyticsReportResponse:
    """Analyse a GitHub repository, serving the cached report when possible."""
    report = await use_case.analyze(body.repo_url, body.start_date, body.end_date)
    return AnalyticsReportResponse.from_domain(report)


@router.get(
    "/report/{owner}/{repo}",
    response_model=AnalyticsReportResponse,
    responses={404: {"model": ErrorResponse, "description": "No cached report"}},
)
async def get_report(
    owner: str,
    repo: str,
    use_case: IntrospectRepoUseCase = Depends(get_introspect_use_case),
) -> AnalyticsReportResponse:
    """Return the cached report for ``owner/repo``."""
    report = await use_case.get_report(owner, repo)
    return AnalyticsReportResponse.from_domain(report)


@router.post(
    "/smart-summary",
    response_model=SmartSummaryResponse,
    responses={502: {"model": ErrorResponse, "description": "A stage of the analysis failed"}},
)
async def smart_summary(
    body: RepoRef,
    use_case: SmartSummaryUseCase = Depends(get_smart_summary_use_case),
) -> SmartSummaryResponse:
    """Two-stage LLM summary of the repository's critical files."""
    summary = await use_case.execute(body.owner, body.repo)
    return SmartSummaryResponse.from_domain(summary)


@router.post(
    "/file-tree",
    response_model=FileTreeResponse,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse, "description": "Tree not found"}, **_UPSTREAM_ERRORS},
)
async def file_tree(
    body: RepoRef,
    use_case: IntrospectRepoUseCase = Depends(get_introspect_use_case),
) -> FileTreeResponse:
    """Hierarchical file tree of the repository (``main`` or ``master``)."""
    nodes = await use_case.file_tree(body.owner, body.repo)
    return FileTreeResponse(tree=[FileNodeResponse.from_domain(n) for n in nodes])


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid file selection"}},
)
async def chat(
    body: ChatBody,
    use_case: RepoChatUseCase = Depends(get_chat_use_case),
) -> ChatResponse:
    """Answer a question about up to three selected files."""
    reply = await use_case.chat(body.to_domain())
    return ChatResponse(response=reply.response)


@router.post(
    "/voice-chat",
    response_model=VoiceChatResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid file selection"}},
)
async def voice_chat(
    body: ChatBody,
    use_case: RepoChatUseCase = Depends(get_chat_use_case),
) -> VoiceChatResponse:
    """Spoken-style answer with base64 MPEG audio when synthesis succeeds."""
    reply = await use_case.voice_chat(body.to_domain())
    return VoiceChatResponse.from_domain(reply)
