"""Port: LLM backend adapter — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from insight_engine.domain.entities import Provider


class BackendAdapter(Protocol):
    """Uniform contract over every supported large-language-model provider.

    Implementations issue exactly one outbound call per :meth:`send` and raise
    :class:`~insight_engine.domain.exceptions.BackendError` on any failure.
    """

    provider: Provider

    async def send(self, prompt: str, model: str, api_key: str) -> str:
        """Send *prompt* to *model* and return the raw answer text."""
        ...
