"""Tests for the ElevenLabs text-to-speech adapter."""

import json

import httpx
import pytest

from repo_introspector.domain.exceptions import SpeechSynthesisError
from repo_introspector.infrastructure.elevenlabs_adapter import ElevenLabsAdapter


def _adapter(handler, api_key="el-key"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ElevenLabsAdapter(client, api_key=api_key, voice_id="voice-1")


class TestElevenLabsAdapter:
    @pytest.mark.asyncio
    async def test_returns_audio_bytes(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"mp3-bytes")

        audio = await _adapter(handler).synthesize("Hello there")
        assert audio == b"mp3-bytes"
        (request,) = seen
        assert request.url.path == "/v1/text-to-speech/voice-1"
        assert request.headers["xi-api-key"] == "el-key"
        body = json.loads(request.content)
        assert body["text"] == "Hello there"
        assert body["model_id"] == "eleven_multilingual_v2"

    @pytest.mark.asyncio
    async def test_error_status(self):
        adapter = _adapter(lambda r: httpx.Response(401, text="invalid key"))
        with pytest.raises(SpeechSynthesisError, match="status 401"):
            await adapter.synthesize("Hello")

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(SpeechSynthesisError):
            await _adapter(handler).synthesize("Hello")

    @pytest.mark.asyncio
    async def test_missing_key(self):
        adapter = _adapter(lambda r: httpx.Response(200), api_key=None)
        with pytest.raises(SpeechSynthesisError, match="not set"):
            await adapter.synthesize("Hello")
