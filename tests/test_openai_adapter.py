"""Tests for the OpenAI chat-completions adapter."""

from types import SimpleNamespace

import pytest

from repo_introspector.domain.entities import ChatMessage
from repo_introspector.domain.exceptions import LlmError
from repo_introspector.infrastructure.openai_adapter import OpenAIAdapter


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        choices = [] if self.content is None else [
            SimpleNamespace(message=SimpleNamespace(content=self.content))
        ]
        return SimpleNamespace(choices=choices)


def _adapter(content="{}"):
    adapter = OpenAIAdapter(api_key="sk-test", model="gpt-test")
    completions = FakeCompletions(content)
    adapter._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return adapter, completions


class TestOpenAIAdapter:
    @pytest.mark.asyncio
    async def test_complete_requests_json(self):
        adapter, completions = _adapter('{"files": []}')
        assert await adapter.complete("sys", "user") == '{"files": []}'
        (call,) = completions.calls
        assert call["model"] == "gpt-test"
        assert call["response_format"] == {"type": "json_object"}
        assert [m["role"] for m in call["messages"]] == ["system", "user"]

    @pytest.mark.asyncio
    async def test_complete_plain_text(self):
        adapter, completions = _adapter("hello")
        await adapter.complete("sys", "user", json_mode=False)
        assert "response_format" not in completions.calls[0]

    @pytest.mark.asyncio
    async def test_converse_maps_roles(self):
        adapter, completions = _adapter("answer")
        messages = [
            ChatMessage(role="user", content="q"),
            ChatMessage(role="model", content="a"),
            ChatMessage(role="user", content="q2"),
        ]
        assert await adapter.converse(messages) == "answer"
        sent = completions.calls[0]["messages"]
        assert [m["role"] for m in sent] == ["user", "assistant", "user"]

    @pytest.mark.asyncio
    async def test_empty_response(self):
        adapter, _ = _adapter("")
        with pytest.raises(LlmError, match="empty"):
            await adapter.complete("sys", "user")

    @pytest.mark.asyncio
    async def test_no_choices(self):
        adapter, _ = _adapter(None)
        with pytest.raises(LlmError, match="no choices"):
            await adapter.complete("sys", "user")

    @pytest.mark.asyncio
    async def test_missing_key(self):
        adapter = OpenAIAdapter(api_key=None)
        with pytest.raises(LlmError, match="OPENAI_API_KEY"):
            await adapter.converse([ChatMessage(role="user", content="hi")])
