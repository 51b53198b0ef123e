"""Shared plumbing for backend adapters that speak plain HTTP via ``httpx``.

Subclasses only describe how to build the provider's request and where the
answer text sits in its response envelope; transport errors, status handling
and envelope validation are uniform.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from insight_engine.domain.entities import Provider
from insight_engine.domain.exceptions import BackendError

logger = logging.getLogger(__name__)

# Uniform generation settings for every provider.
TEMPERATURE = 0.3
MAX_OUTPUT_TOKENS = 1500
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class BackendRequest:
    """One outbound provider call."""

    url: str
    payload: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)


def dig(data: Any, *path: str | int) -> Any:
    """Walk *path* through nested dicts/lists, returning ``None`` on any miss."""
    current = data
    for step in path:
        try:
            current = current[step]
        except (KeyError, IndexError, TypeError):
            return None
    return current


class HttpBackendAdapter:
    """Base class for ``BackendAdapter`` implementations over raw HTTP."""

    provider: Provider
    default_base_url: str

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        system_prompt: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        base_url: str | None = None,
    ) -> None:
        self._client = client
        self._system_prompt = system_prompt
        self._timeout = timeout
        self._base_url = (base_url or self.default_base_url).rstrip("/")

    async def send(self, prompt: str, model: str, api_key: str) -> str:
        """Issue one request and return the unwrapped answer text."""
        request = self.build_request(prompt, model, api_key)
        data = await self._post(request)
        text = self.extract_text(data)
        if not isinstance(text, str) or not text.strip():
            raise BackendError(
                self.provider.value, "response envelope contains no answer text"
            )
        return text

    # ── Provider-specific hooks ─────────────────────────────────────────

    def build_request(self, prompt: str, model: str, api_key: str) -> BackendRequest:
        raise NotImplementedError

    def extract_text(self, data: Any) -> Any:
        raise NotImplementedError

    # ── Transport ───────────────────────────────────────────────────────

    async def _post(self, request: BackendRequest) -> Any:
        name = self.provider.value
        try:
            resp = await self._client.post(
                request.url,
                json=request.payload,
                headers=request.headers,
                params=request.params or None,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            raise BackendError(name, f"request timed out after {self._timeout:g}s") from exc
        except httpx.HTTPError as exc:
            # Keep the URL out of the message: Gemini carries the key in the query.
            raise BackendError(name, f"network error: {type(exc).__name__}") from exc

        if not resp.is_success:
            logger.debug("%s returned HTTP %d: %s", name, resp.status_code, resp.text[:200])
            raise BackendError(name, "non-success response", status=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise BackendError(
                name, "response body is not valid JSON", status=resp.status_code
            ) from exc
