"""Token-budgeted truncation for file contents sent to the LLM.

Uses ``tiktoken`` so that per-file limits are expressed in tokens rather
than characters.
"""

from __future__ import annotations

import tiktoken

_ENCODING_NAME = "cl100k_base"  # GPT-4o family

# Per-file limits for each kind of prompt.
SUMMARY_FILE_TOKENS = 2_500
CHAT_FILE_TOKENS = 4_000
VOICE_FILE_TOKENS = 2_000

_encoder: tiktoken.Encoding | None = None


def _get_encoder() -> tiktoken.Encoding:
    global _encoder  # noqa: PLW0603
    if _encoder is None:
        _encoder = tiktoken.get_encoding(_ENCODING_NAME)
    return _encoder


def truncate_to_budget(text: str, max_tokens: int) -> str:
    """Truncate *text* to at most *max_tokens*, preferring a line boundary."""
    # Byte-level BPE: never more tokens than UTF-8 bytes.
    if len(text.encode("utf-8")) <= max_tokens:
        return text

    tokens = _get_encoder().encode(text)
    if len(tokens) <= max_tokens:
        return text

    truncated = _get_encoder().decode(tokens[:max_tokens])
    last_nl = truncated.rfind("\n")
    if last_nl > len(truncated) // 2:
        truncated = truncated[: last_nl + 1]

    return truncated + "\n... [truncated]"


def render_files(files: dict[str, str], max_tokens_per_file: int, header: str) -> str:
    """Render ``{path: content}`` as delimited blocks for a prompt.

    *header* is a format string with a ``{path}`` placeholder.
    """
    blocks = []
    for path, content in files.items():
        blocks.append(
            header.format(path=path) + "\n" + truncate_to_budget(content, max_tokens_per_file)
        )
    return "\n\n".join(blocks)
