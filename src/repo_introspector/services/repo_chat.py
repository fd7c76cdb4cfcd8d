"""Chat and voice-chat use cases over a handful of selected repository files."""

from __future__ import annotations

import base64
import logging

from repo_introspector.domain.entities import ChatMessage, ChatReply, ChatRequest, VoiceReply
from repo_introspector.domain.exceptions import FileSelectionError, SpeechSynthesisError
from repo_introspector.domain.ports.llm_gateway import LlmGateway
from repo_introspector.domain.ports.repo_fetcher import RepoFetcher
from repo_introspector.domain.ports.speech_synthesizer import SpeechSynthesizer
from repo_introspector.services.token_budget import (
    CHAT_FILE_TOKENS,
    VOICE_FILE_TOKENS,
    render_files,
)

logger = logging.getLogger(__name__)

CHAT_RULES = """\
You are a friendly coding mentor chatting with a student who is learning to code.

Rules:
- Explain in simple, easy-to-understand language and avoid jargon.
- Do not include code blocks; describe what the code does, not how it is written.
- Use analogies and real-world comparisons.
- Be encouraging, concise and conversational.
"""

VOICE_RULES = """\
You are an expert code assistant in a voice conversation.  Answer as if \
you were talking to someone on a phone call.

Rules:
- Keep every answer under 3-4 sentences.
- Use natural spoken language: no code blocks, no bullet points.
- Avoid technical jargon unless necessary.
- When explaining code, summarise the key idea briefly.
"""

CHAT_ACK = "I've analysed the files. I'm ready to help you understand the code. What would you like to know?"
VOICE_ACK = "Got it, I've looked at the files. What would you like to know?"


class RepoChatUseCase:
    """Answers questions about selected files, as text or as speech."""

    def __init__(
        self,
        repo_fetcher: RepoFetcher,
        llm_gateway: LlmGateway,
        speech: SpeechSynthesizer | None = None,
        max_files: int = 3,
    ) -> None:
        self._fetcher = repo_fetcher
        self._llm = llm_gateway
        self._speech = speech
        self._max_files = max_files

    async def chat(self, request: ChatRequest) -> ChatReply:
        self._check_selection(request)
        logger.info(
            "Chat about %s/%s with %d file(s)", request.owner, request.repo, len(request.files)
        )
        files = await self._fetcher.fetch_files(request.owner, request.repo, request.files)
        context = _context(CHAT_RULES, files, CHAT_FILE_TOKENS)
        messages = build_conversation(context, request, CHAT_ACK, "User question: ")
        return ChatReply(response=await self._llm.converse(messages))

    async def voice_chat(self, request: ChatRequest) -> VoiceReply:
        """Text answer plus synthesised audio; audio failure keeps the text."""
        self._check_selection(request)
        logger.info("Voice chat about %s/%s", request.owner, request.repo)
        files = await self._fetcher.fetch_files(request.owner, request.repo, request.files)
        context = _context(VOICE_RULES, files, VOICE_FILE_TOKENS)
        messages = build_conversation(context, request, VOICE_ACK, "User says: ")
        text = await self._llm.converse(messages)

        if self._speech is None:
            return VoiceReply(response=text, audio_error="Speech synthesis is not configured.")
        try:
            audio = await self._speech.synthesize(text)
        except SpeechSynthesisError as exc:
            logger.warning("TTS failed, returning text only: %s", exc)
            return VoiceReply(response=text, audio_error=str(exc))

        return VoiceReply(response=text, audio=base64.b64encode(audio).decode("ascii"))

    def _check_selection(self, request: ChatRequest) -> None:
        if not request.files:
            raise FileSelectionError("At least one file must be selected.")
        if len(request.files) > self._max_files:
            raise FileSelectionError(f"Maximum {self._max_files} files allowed.")


def _context(rules: str, files: dict[str, str], max_tokens: int) -> str:
    rendered = render_files(files, max_tokens, header="=== FILE: {path} ===")
    return f"{rules}\nHere are the files from the repository:\n\n{rendered}"


def build_conversation(
    context: str, request: ChatRequest, ack: str, prefix: str
) -> list[ChatMessage]:
    """Lay out the turns sent to the model.

    Without history the context and the question travel in one user turn.
    With history the context comes first, followed by a canned
    acknowledgement, the prior turns and finally the new message.
    """
    if not request.history:
        return [ChatMessage(role="user", content=f"{context}\n\n{prefix}{request.message}")]

    messages = [
        ChatMessage(role="user", content=context),
        ChatMessage(role="assistant", content=ack),
    ]
    for turn in request.history:
        role = "assistant" if turn.role in ("assistant", "model") else "user"
        messages.append(ChatMessage(role=role, content=turn.content))
    messages.append(ChatMessage(role="user", content=request.message))
    return messages
