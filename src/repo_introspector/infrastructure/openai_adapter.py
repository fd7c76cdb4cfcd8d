"""OpenAI adapter — implements the LlmGateway port."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from openai import (
    APIConnectionError,
    APIStatusError,
    AsyncOpenAI,
    AuthenticationError,
    RateLimitError,
)

from repo_introspector.domain.entities import ChatMessage
from repo_introspector.domain.exceptions import LlmError

logger = logging.getLogger(__name__)

_ROLES = {"user": "user", "assistant": "assistant", "model": "assistant"}


class OpenAIAdapter:
    """Concrete ``LlmGateway`` backed by the OpenAI chat-completions API."""

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o-mini",
        timeout: float = 60.0,
    ) -> None:
        # The SDK rejects a missing key at construction; fail on first call instead.
        self._client = AsyncOpenAI(
            api_key=api_key or "missing", max_retries=3, timeout=timeout
        )
        self._configured = bool(api_key)
        self._model = model

    async def complete(
        self, system_prompt: str, user_prompt: str, *, json_mode: bool = True
    ) -> str:
        """Send a system + user prompt and return the completion text."""
        kwargs: dict[str, Any] = {
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": 0.2,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        return await self._create(**kwargs)

    async def converse(self, messages: Sequence[ChatMessage]) -> str:
        """Send a multi-turn conversation and return the next assistant turn."""
        return await self._create(
            messages=[
                {"role": _ROLES.get(m.role, "user"), "content": m.content}
                for m in messages
            ],
            temperature=0.7,
            max_tokens=1024,
        )

    async def _create(self, **kwargs: Any) -> str:
        if not self._configured:
            raise LlmError("OPENAI_API_KEY is not set.")

        try:
            response = await self._client.chat.completions.create(
                model=self._model, **kwargs
            )
        except AuthenticationError as exc:
            raise LlmError(
                "Invalid OpenAI API key. "
                "Set a valid key in the OPENAI_API_KEY environment variable."
            ) from exc
        except RateLimitError as exc:
            logger.error("OpenAI RateLimitError: %s", exc)
            raise LlmError(f"OpenAI rate limit / quota error: {exc}") from exc
        except APIStatusError as exc:
            # Error envelope returned by the API itself.
            raise LlmError(
                f"OpenAI API error (status {exc.status_code}): {exc.message}"
            ) from exc
        except APIConnectionError as exc:
            raise LlmError(f"Could not reach the OpenAI API: {exc}") from exc

        if not response.choices:
            raise LlmError("LLM returned no choices.")
        content = response.choices[0].message.content
        if not content:
            raise LlmError("LLM returned an empty response.")
        return content

    async def close(self) -> None:
        """Release underlying HTTP resources."""
        await self._client.close()
