"""FastAPI dependency injection wiring."""

from __future__ import annotations

import httpx

from insight_engine.domain.entities import Provider
from insight_engine.domain.ports.backend_adapter import BackendAdapter
from insight_engine.domain.ports.repo_fetcher import RepoFetcher
from insight_engine.infrastructure.backend_registry import build_adapters
from insight_engine.infrastructure.config import Settings, get_settings
from insight_engine.infrastructure.github_rest_adapter import GitHubRestAdapter
from insight_engine.services.prompt_builder import SYSTEM_PROMPT
from insight_engine.services.synthesize_insights import SynthesizeInsightsUseCase

_http_client: httpx.AsyncClient | None = None
_adapters: dict[Provider, BackendAdapter] | None = None


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client, _adapters  # noqa: PLW0603

    settings = get_settings()
    _http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.backend_timeout_seconds))
    _adapters = build_adapters(
        _http_client,
        system_prompt=SYSTEM_PROMPT,
        timeout=settings.backend_timeout_seconds,
    )


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _adapters  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None
    _adapters = None


def get_app_settings() -> Settings:
    return get_settings()


def get_use_case() -> SynthesizeInsightsUseCase:
    """Build the use case over the shared adapters."""
    assert _adapters is not None, "startup() was not called"

    return SynthesizeInsightsUseCase(
        adapters=_adapters,
        timeout=get_settings().backend_timeout_seconds,
    )


def get_repo_fetcher() -> RepoFetcher:
    """Build a GitHub fetcher over the shared HTTP client."""
    assert _http_client is not None, "startup() was not called"

    settings = get_settings()
    token = settings.github_token.get_secret_value() if settings.github_token else None
    return GitHubRestAdapter(client=_http_client, token=token)
