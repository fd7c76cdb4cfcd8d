"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from repo_introspector.interface.dependencies import shutdown, startup
from repo_introspector.interface.error_handlers import register_error_handlers
from repo_introspector.interface.routes import router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup / shutdown of shared resources."""
    await startup(app)
    yield
    await shutdown(app)


def create_app() -> FastAPI:
    """Build and wire the FastAPI application."""
    app = FastAPI(
        title="Repo Introspector",
        version="1.0.0",
        description=(
            "Takes a GitHub repository URL and returns commit, contributor "
            "and language analytics, a file tree, an AI summary of the "
            "project, and chat over selected files."
        ),
        lifespan=_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"],
        allow_headers=["Origin", "Content-Length", "Content-Type"],
        expose_headers=["Content-Length"],
        max_age=12 * 60 * 60,
    )

    register_error_handlers(app)
    app.include_router(router)

    # ── Liveness probes ─────────────────────────────────────────────────

    @app.get("/ping", include_in_schema=False)
    async def ping() -> dict[str, str]:
        return {"message": "Repo Introspector is online!"}

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
