"""Port: text-to-speech."""

from __future__ import annotations

from typing import Protocol


class SpeechSynthesizer(Protocol):
    async def synthesize(self, text: str) -> bytes:
        """Return encoded audio for *text*."""
        ...
