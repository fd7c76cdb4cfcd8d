"""ElevenLabs adapter — implements the SpeechSynthesizer port."""

from __future__ import annotations

import logging

import httpx

from repo_introspector.domain.exceptions import SpeechSynthesisError

logger = logging.getLogger(__name__)

_ELEVENLABS_API = "https://api.elevenlabs.io/v1"
_MODEL_ID = "eleven_multilingual_v2"


class ElevenLabsAdapter:
    """Text-to-speech over the ElevenLabs REST API, returning MPEG audio."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str | None,
        voice_id: str = "JBFqnCBsd6RMkjVDRZzb",
        api_base: str = _ELEVENLABS_API,
        timeout: float = 60.0,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._voice_id = voice_id
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout

    async def synthesize(self, text: str) -> bytes:
        if not self._api_key:
            raise SpeechSynthesisError("ELEVENLABS_API_KEY is not set.")

        url = f"{self._api_base}/text-to-speech/{self._voice_id}"
        body = {
            "text": text,
            "model_id": _MODEL_ID,
            "voice_settings": {
                "stability": 0.5,
                "similarity_boost": 0.75,
                "style": 0.0,
                "use_speaker_boost": True,
            },
        }
        try:
            resp = await self._client.post(
                url,
                json=body,
                headers={"xi-api-key": self._api_key, "Accept": "audio/mpeg"},
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise SpeechSynthesisError(
                f"Failed to call ElevenLabs API: {exc}"
            ) from exc

        if resp.status_code != 200:
            raise SpeechSynthesisError(
                f"ElevenLabs API error (status {resp.status_code}): {resp.text}"
            )

        logger.debug("Synthesised %d bytes of audio", len(resp.content))
        return resp.content
