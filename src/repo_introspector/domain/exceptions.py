"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class IntrospectorError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidGitHubUrlError(IntrospectorError):
    """The supplied URL does not point to a GitHub repository."""


class InvalidDateRangeError(IntrospectorError):
    """A date filter is malformed or the range is inverted."""


class FileSelectionError(IntrospectorError):
    """Too few or too many files were selected for a chat turn."""


# ── Cache ───────────────────────────────────────────────────────────────────


class ReportNotFoundError(IntrospectorError):
    """No cached report exists for the requested repository."""


# ── GitHub API errors ───────────────────────────────────────────────────────


class RepositoryNotFoundError(IntrospectorError):
    """The repository or resource does not exist (404)."""


class RepositoryAccessDeniedError(IntrospectorError):
    """Access to the repository was denied (403)."""


class GitHubRateLimitError(IntrospectorError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


class GitHubApiError(IntrospectorError):
    """GitHub answered with an unexpected non-success status."""

    def __init__(self, message: str, status_code: int, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UpstreamTransportError(IntrospectorError):
    """Network failure or timeout talking to an external API."""


class ResponseDecodeError(IntrospectorError):
    """An external API returned a body that does not match its schema."""


class ContentExtractionError(IntrospectorError):
    """None of the requested files could be fetched."""


# ── AI / speech errors ──────────────────────────────────────────────────────


class LlmError(IntrospectorError):
    """Any error originating from the LLM provider.

    ``raw_response`` holds the unparsed completion when the failure is a
    shape problem, for diagnosis.
    """

    def __init__(self, message: str, raw_response: str | None = None) -> None:
        super().__init__(message)
        self.raw_response = raw_response


class SpeechSynthesisError(IntrospectorError):
    """The text-to-speech provider failed or is not configured."""


class SmartSummaryError(IntrospectorError):
    """A stage of the two-stage analysis failed."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(message)
        self.stage = stage
