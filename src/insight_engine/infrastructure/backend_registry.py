"""Backend registry — one adapter per supported provider."""

from __future__ import annotations

import httpx

from insight_engine.domain.entities import Provider
from insight_engine.domain.ports.backend_adapter import BackendAdapter
from insight_engine.infrastructure.anthropic_adapter import AnthropicAdapter
from insight_engine.infrastructure.gemini_adapter import GeminiAdapter
from insight_engine.infrastructure.http_backend import DEFAULT_TIMEOUT_SECONDS
from insight_engine.infrastructure.huggingface_adapter import HuggingFaceAdapter
from insight_engine.infrastructure.openai_adapter import (
    OPENAI_COMPATIBLE_BASE_URLS,
    OpenAIAdapter,
)


def build_adapters(
    client: httpx.AsyncClient,
    *,
    system_prompt: str,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> dict[Provider, BackendAdapter]:
    """Create every adapter over one shared HTTP client."""
    adapters: dict[Provider, BackendAdapter] = {
        provider: OpenAIAdapter(
            provider,
            system_prompt=system_prompt,
            http_client=client,
            timeout=timeout,
        )
        for provider in OPENAI_COMPATIBLE_BASE_URLS
    }
    for adapter_cls in (AnthropicAdapter, GeminiAdapter, HuggingFaceAdapter):
        adapter = adapter_cls(client, system_prompt=system_prompt, timeout=timeout)
        adapters[adapter.provider] = adapter
    return adapters
