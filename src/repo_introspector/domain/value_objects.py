"""Value objects — self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from repo_introspector.domain.exceptions import (
    InvalidDateRangeError,
    InvalidGitHubUrlError,
)

_GITHUB_URL_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/"
    r"(?P<owner>[A-Za-z0-9\-_.]+)/(?P<repo>[A-Za-z0-9\-_.]+?)(?:\.git)?(?:[/?#].*)?$"
)


@dataclass(frozen=True, slots=True)
class GitHubUrl:
    """Validated GitHub repository URL.

    Extracts *owner* and *repo* from a URL like
    ``https://github.com/psf/requests``.  Anything after the repository
    segment (``/tree/main/src``, a query string) is ignored.
    """

    owner: str
    repo: str
    raw: str

    @classmethod
    def from_string(cls, url: str) -> GitHubUrl:
        """Parse and validate a raw URL string."""
        url = url.strip()
        match = _GITHUB_URL_RE.match(url)
        if not match:
            raise InvalidGitHubUrlError(
                f"Invalid GitHub URL: '{url}'. "
                "Expected format: https://github.com/<owner>/<repo>"
            )
        return cls(owner=match["owner"], repo=match["repo"], raw=url)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True, slots=True)
class DateWindow:
    """Inclusive UTC day range used to scope the commit history.

    Either bound may be missing.  A window with no bounds is "empty" and
    means the whole history.
    """

    since: date | None = None
    until: date | None = None

    @classmethod
    def from_strings(cls, since: str | None, until: str | None) -> DateWindow:
        window = cls(since=_parse_day(since, "start_date"), until=_parse_day(until, "end_date"))
        if window.since and window.until and window.since > window.until:
            raise InvalidDateRangeError(
                f"start_date {window.since} is after end_date {window.until}."
            )
        return window

    @property
    def is_empty(self) -> bool:
        return self.since is None and self.until is None

    def query_params(self) -> dict[str, str]:
        """Return the ``since`` / ``until`` params for the commits endpoint."""
        params: dict[str, str] = {}
        if self.since:
            params["since"] = f"{self.since.isoformat()}T00:00:00Z"
        if self.until:
            params["until"] = f"{self.until.isoformat()}T23:59:59Z"
        return params


def _parse_day(value: str | None, field_name: str) -> date | None:
    if value is None or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidDateRangeError(
            f"Invalid {field_name}: '{value}'. Expected YYYY-MM-DD."
        ) from exc
