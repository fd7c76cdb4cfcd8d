"""File filtering — decide which tree entries are worth showing to the LLM."""

from __future__ import annotations

from typing import Sequence

from repo_introspector.domain.entities import NodeKind, TreeEntry

SKIP_DIRS: frozenset[str] = frozenset(
    {
        "node_modules", ".git", "dist", "build", "out",
        "venv", ".venv", "__pycache__", ".tox", ".mypy_cache",
        ".pytest_cache", "vendor", ".idea", ".vscode",
        ".next", ".nuxt", "coverage", "htmlcov", "target",
        "Pods", ".gradle", ".terraform",
    }
)

SKIP_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".pyc", ".so", ".o", ".a", ".dylib", ".dll", ".exe",
        ".class", ".jar", ".png", ".jpg", ".jpeg", ".gif", ".svg",
        ".ico", ".webp", ".mp3", ".mp4", ".wav", ".woff", ".woff2",
        ".ttf", ".zip", ".tar", ".gz", ".pdf", ".lock",
        ".min.js", ".min.css", ".map",
    }
)

LOCK_FILES: frozenset[str] = frozenset(
    {
        "package-lock.json", "yarn.lock", "pnpm-lock.yaml", "go.sum",
        "poetry.lock", "Pipfile.lock", "Cargo.lock", "Gemfile.lock",
        "composer.lock", ".DS_Store",
    }
)

# Above this many lines the listing is cut to keep the prompt small.
MAX_LISTING_LINES = 1_500

# Files above this size (generated code, data dumps) are left out of the listing.
MAX_FILE_KB = 200


def should_skip(entry: TreeEntry) -> bool:
    """Return *True* for directories, vendored, binary, lock and oversized files."""
    if entry.kind is not NodeKind.FILE:
        return True
    if entry.size > MAX_FILE_KB * 1024:
        return True
    parts = entry.path.split("/")
    if parts[-1] in LOCK_FILES:
        return True
    if any(part in SKIP_DIRS or part.endswith(".egg-info") for part in parts[:-1]):
        return True
    lower = entry.path.lower()
    return any(lower.endswith(ext) for ext in SKIP_EXTENSIONS)


def render_listing(entries: Sequence[TreeEntry]) -> str:
    """One file path per line, skipping noise, capped at ``MAX_LISTING_LINES``."""
    paths = [e.path for e in entries if not should_skip(e)]
    if len(paths) > MAX_LISTING_LINES:
        hidden = len(paths) - MAX_LISTING_LINES
        paths = paths[:MAX_LISTING_LINES] + [f"... and {hidden} more files"]
    return "\n".join(paths)
