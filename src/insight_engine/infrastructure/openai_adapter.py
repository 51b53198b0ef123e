"""OpenAI adapter — implements the BackendAdapter port.

Also serves OpenAI-compatible providers (Groq, OpenRouter) by pointing the
SDK at their base URL.
"""

from __future__ import annotations

import logging

import httpx
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    RateLimitError,
)

from insight_engine.domain.entities import Provider
from insight_engine.domain.exceptions import BackendError
from insight_engine.infrastructure.http_backend import (
    DEFAULT_TIMEOUT_SECONDS,
    MAX_OUTPUT_TOKENS,
    TEMPERATURE,
)

logger = logging.getLogger(__name__)

OPENAI_COMPATIBLE_BASE_URLS: dict[Provider, str | None] = {
    Provider.OPENAI: None,  # SDK default
    Provider.GROQ: "https://api.groq.com/openai/v1",
    Provider.OPENROUTER: "https://openrouter.ai/api/v1",
}


class OpenAIAdapter:
    """Concrete ``BackendAdapter`` backed by the chat-completions API."""

    def __init__(
        self,
        provider: Provider = Provider.OPENAI,
        *,
        system_prompt: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        base_url: str | None = None,
    ) -> None:
        if provider not in OPENAI_COMPATIBLE_BASE_URLS:
            raise ValueError(f"{provider.value} does not speak the OpenAI protocol")
        self.provider = provider
        self._system_prompt = system_prompt
        self._http_client = http_client
        self._timeout = timeout
        self._base_url = base_url or OPENAI_COMPATIBLE_BASE_URLS[provider]

    async def send(self, prompt: str, model: str, api_key: str) -> str:
        """Send the prompt and return ``choices[0].message.content``."""
        name = self.provider.value
        # The key is per request, so the SDK client is too; retries are off so
        # that one send() is exactly one HTTP call.
        client = AsyncOpenAI(
            api_key=api_key,
            base_url=self._base_url,
            max_retries=0,
            timeout=self._timeout,
            http_client=self._http_client,
        )
        try:
            response = await client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": self._system_prompt},
                    {"role": "user", "content": prompt},
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_OUTPUT_TOKENS,
            )

            if not response.choices:
                raise BackendError(name, "response contains no choices")
            content = response.choices[0].message.content
            if not content:
                raise BackendError(name, "response envelope contains no answer text")

            return content

        except AuthenticationError as exc:
            raise BackendError(
                name, "invalid API key", status=exc.status_code
            ) from exc

        except RateLimitError as exc:
            logger.error("%s RateLimitError: %s", name, exc)
            raise BackendError(
                name, "rate limit / quota exceeded", status=exc.status_code
            ) from exc

        except APIStatusError as exc:
            raise BackendError(
                name, "non-success response", status=exc.status_code
            ) from exc

        except APITimeoutError as exc:
            raise BackendError(
                name, f"request timed out after {self._timeout:g}s"
            ) from exc

        except APIConnectionError as exc:
            raise BackendError(name, f"network error: {exc}") from exc

        except BackendError:
            raise

        except Exception as exc:
            raise BackendError(name, f"LLM call failed: {exc}") from exc

        finally:
            # A shared http_client belongs to the caller and must stay open.
            if self._http_client is None:
                await client.close()
