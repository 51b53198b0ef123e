"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from insight_engine.domain.entities import Provider, ProviderConfig


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file).

    Every API key is optional: without one the engine answers with its
    heuristic analysis.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_provider: Provider | None = None
    default_model: str | None = None

    openai_api_key: SecretStr | None = None
    anthropic_api_key: SecretStr | None = None
    gemini_api_key: SecretStr | None = None
    huggingface_api_key: SecretStr | None = None
    groq_api_key: SecretStr | None = None
    openrouter_api_key: SecretStr | None = None

    github_token: SecretStr | None = None
    backend_timeout_seconds: float = 30.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def api_key_for(self, provider: Provider) -> str | None:
        """Return the configured key for *provider*, if any."""
        secret: SecretStr | None = getattr(self, f"{provider.value}_api_key", None)
        return secret.get_secret_value() if secret else None

    def provider_config(
        self,
        provider: Provider | None = None,
        api_key: str | None = None,
        model: str | None = None,
    ) -> ProviderConfig | None:
        """Merge per-request choices over configured defaults.

        Returns ``None`` when neither the request nor the settings name a
        provider.
        """
        chosen = provider or self.default_provider
        if chosen is None:
            return None
        if model is None and chosen == self.default_provider:
            model = self.default_model
        return ProviderConfig(
            provider=chosen,
            api_key=api_key or self.api_key_for(chosen),
            model=model,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
