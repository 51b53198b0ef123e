"""Google Gemini adapter — ``generateContent`` REST endpoint over ``httpx``."""

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


class GeminiAdapter(HttpBackendAdapter):
    """API key travels as the ``key`` query parameter; answer at
    ``candidates[0].content.parts[0].text``."""

    provider = Provider.GEMINI
    default_base_url = "https://generativelanguage.googleapis.com/v1beta"

    def build_request(self, prompt: str, model: str, api_key: str) -> BackendRequest:
        return BackendRequest(
            url=f"{self._base_url}/models/{model}:generateContent",
            params={"key": api_key},
            headers={"content-type": "application/json"},
            payload={
                "systemInstruction": {"parts": [{"text": self._system_prompt}]},
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": TEMPERATURE,
                    "maxOutputTokens": MAX_OUTPUT_TOKENS,
                },
            },
        )

    def extract_text(self, data: Any) -> Any:
        return dig(data, "candidates", 0, "content", "parts", 0, "text")
