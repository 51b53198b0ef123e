"""Hugging Face adapter — serverless Inference API text generation."""

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


class HuggingFaceAdapter(HttpBackendAdapter):
    """Bearer auth; answer in ``generated_text`` (list-wrapped or bare object)."""

    provider = Provider.HUGGINGFACE
    default_base_url = "https://api-inference.huggingface.co"

    def build_request(self, prompt: str, model: str, api_key: str) -> BackendRequest:
        return BackendRequest(
            url=f"{self._base_url}/models/{model}",
            headers={
                "Authorization": f"Bearer {api_key}",
                "content-type": "application/json",
            },
            payload={
                # Text-generation models have no system role.
                "inputs": f"{self._system_prompt}\n\n{prompt}",
                "parameters": {
                    "temperature": TEMPERATURE,
                    "max_new_tokens": MAX_OUTPUT_TOKENS,
                    "return_full_text": False,
                },
                "options": {"wait_for_model": True},
            },
        )

    def extract_text(self, data: Any) -> Any:
        if isinstance(data, list):
            return dig(data, 0, "generated_text")
        return dig(data, "generated_text")
