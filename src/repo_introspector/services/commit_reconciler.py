"""Commit reconciliation — attribute commits to authors and build a timeline.

Identity resolution is two-tier: a commit linked to a GitHub account is
attributed to its login; otherwise the free-text git author name is used.
Two different people sharing a display name end up in one bucket.
Timestamp parsing is independent of attribution.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from repo_introspector.domain.entities import CommitRecord, ContributorStat

logger = logging.getLogger(__name__)


@dataclass
class ReconciledCommits:
    """Per-author totals, avatars and the unordered commit timeline."""

    totals: dict[str, int] = field(default_factory=dict)
    avatars: dict[str, str] = field(default_factory=dict)
    timeline: list[datetime] = field(default_factory=list)

    def contributors(self) -> list[ContributorStat]:
        """Return one :class:`ContributorStat` per identity, busiest first."""
        stats = [
            ContributorStat(login=login, total=total, avatar_url=self.avatars.get(login, ""))
            for login, total in self.totals.items()
        ]
        stats.sort(key=lambda s: (-s.total, s.login))
        return stats


def resolve_identity(record: CommitRecord) -> tuple[str, str] | None:
    """Return ``(identity, avatar_url)`` for *record*, or ``None``."""
    if record.login:
        return record.login, record.avatar_url or ""
    if record.author_name:
        return record.author_name, ""
    return None


def parse_commit_date(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp into an aware UTC datetime."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def reconcile(records: Iterable[CommitRecord]) -> ReconciledCommits:
    """Fold raw commit records into per-author totals and a timeline."""
    result = ReconciledCommits()
    unattributed = 0

    for record in records:
        identity = resolve_identity(record)
        if identity is None:
            unattributed += 1
        else:
            key, avatar = identity
            result.totals[key] = result.totals.get(key, 0) + 1
            result.avatars[key] = avatar

        authored_at = parse_commit_date(record.authored_at)
        if authored_at is not None:
            result.timeline.append(authored_at)

    if unattributed:
        logger.debug("%d commit(s) had no resolvable author", unattributed)
    return result
