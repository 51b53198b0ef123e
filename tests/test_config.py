"""Tests for settings and provider-config resolution."""

import pytest

from insight_engine.domain.entities import Provider
from insight_engine.infrastructure.config import Settings

_ENV_VARS = (
    "DEFAULT_PROVIDER",
    "DEFAULT_MODEL",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GEMINI_API_KEY",
    "HUGGINGFACE_API_KEY",
    "GROQ_API_KEY",
    "OPENROUTER_API_KEY",
    "GITHUB_TOKEN",
    "BACKEND_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


def test_defaults():
    settings = _settings()
    assert settings.default_provider is None
    assert settings.backend_timeout_seconds == 30.0
    assert settings.provider_config() is None


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("DEFAULT_PROVIDER", "anthropic")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env")
    monkeypatch.setenv("BACKEND_TIMEOUT_SECONDS", "12.5")
    settings = _settings()

    config = settings.provider_config()
    assert config is not None
    assert config.provider is Provider.ANTHROPIC
    assert config.api_key == "sk-ant-env"
    assert settings.backend_timeout_seconds == 12.5


def test_api_key_for():
    settings = _settings(groq_api_key="gsk_abc")
    assert settings.api_key_for(Provider.GROQ) == "gsk_abc"
    assert settings.api_key_for(Provider.OPENAI) is None


def test_request_choice_overrides_defaults():
    settings = _settings(
        default_provider=Provider.OPENAI,
        default_model="gpt-4o",
        openai_api_key="sk-configured",
        gemini_api_key="AIza-configured",
    )
    config = settings.provider_config(Provider.GEMINI)
    assert config.provider is Provider.GEMINI
    assert config.api_key == "AIza-configured"
    assert config.model is None

    config = settings.provider_config(api_key="sk-request", model="gpt-4.1")
    assert config.provider is Provider.OPENAI
    assert config.api_key == "sk-request"
    assert config.model == "gpt-4.1"


def test_default_model_applies_to_default_provider():
    settings = _settings(default_provider=Provider.OPENAI, default_model="gpt-4o")
    assert settings.provider_config().model == "gpt-4o"


def test_secrets_hidden_in_repr():
    settings = _settings(openai_api_key="sk-do-not-print")
    assert "sk-do-not-print" not in repr(settings)
