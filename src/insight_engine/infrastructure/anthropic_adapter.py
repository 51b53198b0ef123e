"""Anthropic adapter — Messages API over ``httpx``."""

from __future__ import annotations

from typing import Any

from insight_engine.domain.entities import Provider
from insight_engine.infrastructure.http_backend import (
    MAX_OUTPUT_TOKENS,
    TEMPERATURE,
    BackendRequest,
    HttpBackendAdapter,
    dig,
)

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicAdapter(HttpBackendAdapter):
    """``x-api-key`` header auth; answer at ``content[0].text``."""

    provider = Provider.ANTHROPIC
    default_base_url = "https://api.anthropic.com"

    def build_request(self, prompt: str, model: str, api_key: str) -> BackendRequest:
        return BackendRequest(
            url=f"{self._base_url}/v1/messages",
            headers={
                "x-api-key": api_key,
                "anthropic-version": ANTHROPIC_VERSION,
                "content-type": "application/json",
            },
            payload={
                "model": model,
                "max_tokens": MAX_OUTPUT_TOKENS,
                "temperature": TEMPERATURE,
                "system": self._system_prompt,
                "messages": [{"role": "user", "content": prompt}],
            },
        )

    def extract_text(self, data: Any) -> Any:
        return dig(data, "content", 0, "text")
