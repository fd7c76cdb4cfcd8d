"""FastAPI dependency injection wiring.

Shared resources live in a :class:`ServiceContainer` stored on
``app.state``; use cases are built per request from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from fastapi import FastAPI, Request
from pydantic import SecretStr

from repo_introspector.infrastructure.config import Settings, get_settings
from repo_introspector.infrastructure.elevenlabs_adapter import ElevenLabsAdapter
from repo_introspector.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_introspector.infrastructure.openai_adapter import OpenAIAdapter
from repo_introspector.infrastructure.sql_report_store import SqlReportStore
from repo_introspector.services.introspect_repo import IntrospectRepoUseCase
from repo_introspector.services.repo_chat import RepoChatUseCase
from repo_introspector.services.smart_summary import SmartSummaryUseCase

logger = logging.getLogger(__name__)


def _secret(value: SecretStr | None) -> str | None:
    return value.get_secret_value() if value else None


@dataclass
class ServiceContainer:
    """Long-lived adapters shared by all requests."""

    settings: Settings
    http_client: httpx.AsyncClient
    github: GitHubRestAdapter
    llm: OpenAIAdapter
    speech: ElevenLabsAdapter
    store: SqlReportStore

    @classmethod
    def build(cls, settings: Settings) -> ServiceContainer:
        http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.github_timeout_seconds))
        return cls(
            settings=settings,
            http_client=http_client,
            github=GitHubRestAdapter(client=http_client, token=_secret(settings.github_token)),
            llm=OpenAIAdapter(
                api_key=_secret(settings.openai_api_key),
                model=settings.openai_model,
                timeout=settings.llm_timeout_seconds,
            ),
            speech=ElevenLabsAdapter(
                client=http_client,
                api_key=_secret(settings.elevenlabs_api_key),
                voice_id=settings.elevenlabs_voice_id,
                timeout=settings.llm_timeout_seconds,
            ),
            store=SqlReportStore.from_url(settings.database_url),
        )

    async def aclose(self) -> None:
        await self.http_client.aclose()
        await self.llm.close()
        self.store.close()


async def startup(app: FastAPI) -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    settings = get_settings()
    app.state.container = ServiceContainer.build(settings)
    logger.info("Report store ready at %s", settings.database_url)


async def shutdown(app: FastAPI) -> None:
    """Release shared resources."""
    container: ServiceContainer | None = getattr(app.state, "container", None)
    if container is not None:
        await container.aclose()
        app.state.container = None


def _container(request: Request) -> ServiceContainer:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError("Service container is not initialised; startup() was not called.")
    return container


def get_introspect_use_case(request: Request) -> IntrospectRepoUseCase:
    c = _container(request)
    return IntrospectRepoUseCase(repo_fetcher=c.github, report_store=c.store)


def get_smart_summary_use_case(request: Request) -> SmartSummaryUseCase:
    c = _container(request)
    return SmartSummaryUseCase(repo_fetcher=c.github, llm_gateway=c.llm)


def get_chat_use_case(request: Request) -> RepoChatUseCase:
    c = _container(request)
    return RepoChatUseCase(
        repo_fetcher=c.github,
        llm_gateway=c.llm,
        speech=c.speech,
        max_files=c.settings.max_chat_files,
    )
