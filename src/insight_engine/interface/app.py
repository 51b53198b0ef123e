"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI

from insight_engine.infrastructure.config import Settings
from insight_engine.interface.dependencies import get_app_settings, shutdown, startup
from insight_engine.interface.error_handlers import register_error_handlers
from insight_engine.interface.routes import router

_DESCRIPTION = (
    "Structured insights (summary, key features, technologies, use cases, "
    "sections, complexity, recommendation) for a GitHub repository, an uploaded "
    "document or raw text.  An LLM backend answers when a credential is "
    "available; a deterministic heuristic analyzer answers otherwise."
)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    await startup()
    try:
        yield
    finally:
        await shutdown()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Insight Synthesis Engine",
        version="1.0.0",
        description=_DESCRIPTION,
        lifespan=_lifespan,
    )
    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def health(settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
        """Liveness probe; also says which path answers requests by default."""
        provider = settings.default_provider
        return {
            "status": "ok",
            "defaultBackend": provider.value if provider else "heuristic",
        }

    return app
