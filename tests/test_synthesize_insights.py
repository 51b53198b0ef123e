"""Tests for the synthesize-insights use case (backend dispatch + fallback)."""

import logging
from unittest.mock import AsyncMock

import pytest

from conftest import SAMPLE_README, VALID_ANSWER, StubAdapter

from insight_engine.domain.entities import (
    AnalysisMetadata,
    Complexity,
    ContentClassification,
    Provider,
    ProviderConfig,
)
from insight_engine.domain.exceptions import BackendError
from insight_engine.services.synthesize_insights import (
    REASON_BACKEND_ERROR,
    REASON_NO_CREDENTIAL,
    REASON_NORMALIZATION_ERROR,
    REASON_UNEXPECTED_ERROR,
    SOURCE_BACKEND,
    SOURCE_HEURISTIC,
    SynthesizeInsightsUseCase,
)

REPO = ContentClassification.GITHUB_REPOSITORY
_LOGGER = "insight_engine.services.synthesize_insights"


def _config(provider=Provider.OPENAI, api_key="sk-live-123456", model=None):
    return ProviderConfig(provider=provider, api_key=api_key, model=model)


def _use_case(adapter, analyzer, timeout=30.0):
    return SynthesizeInsightsUseCase({adapter.provider: adapter}, analyzer, timeout=timeout)


class TestNoCredential:
    async def test_no_provider_config(self, analyzer, repo_metadata):
        adapter = StubAdapter()
        result = await _use_case(adapter, analyzer).synthesize_with_provenance(
            SAMPLE_README, REPO, repo_metadata
        )
        assert result.source == SOURCE_HEURISTIC
        assert result.fallback_reason == REASON_NO_CREDENTIAL
        assert result.insight == analyzer.analyze(SAMPLE_README, REPO, repo_metadata)
        assert adapter.calls == []

    @pytest.mark.parametrize("key", [None, "", "   ", "your-api-key-here", "sk-xxxx", "<KEY>"])
    async def test_placeholder_keys_never_reach_backend(self, analyzer, key):
        adapter = StubAdapter()
        result = await _use_case(adapter, analyzer).synthesize_with_provenance(
            "some text", provider_config=_config(api_key=key)
        )
        assert result.source == SOURCE_HEURISTIC
        assert result.fallback_reason == REASON_NO_CREDENTIAL
        assert result.provider is Provider.OPENAI
        assert adapter.calls == []

    async def test_missing_adapter(self, analyzer):
        adapter = StubAdapter(provider=Provider.OPENAI)
        result = await _use_case(adapter, analyzer).synthesize_with_provenance(
            "some text", provider_config=_config(provider=Provider.GEMINI)
        )
        assert result.fallback_reason == REASON_NO_CREDENTIAL
        assert adapter.calls == []


class TestBackendPath:
    async def test_success_uses_backend_answer(self, analyzer, repo_metadata):
        adapter = StubAdapter()
        result = await _use_case(adapter, analyzer).synthesize_with_provenance(
            SAMPLE_README, REPO, repo_metadata, _config()
        )
        assert result.source == SOURCE_BACKEND
        assert result.fallback_reason is None
        assert result.insight.summary == "fastgrid schedules distributed jobs."
        assert result.insight.complexity is Complexity.HIGH
        assert len(adapter.calls) == 1

    async def test_prompt_model_and_key_forwarded(self, analyzer, repo_metadata):
        adapter = StubAdapter()
        await _use_case(adapter, analyzer).synthesize(
            SAMPLE_README, REPO, repo_metadata, _config(model="gpt-4o")
        )
        prompt, model, key = adapter.calls[0]
        assert "- Name: fastgrid" in prompt
        assert model == "gpt-4o"
        assert key == "sk-live-123456"

    async def test_default_model_when_unset(self, analyzer):
        adapter = StubAdapter(provider=Provider.GROQ)
        await _use_case(adapter, analyzer).synthesize(
            "text", provider_config=_config(provider=Provider.GROQ)
        )
        assert adapter.calls[0][1] == Provider.GROQ.default_model

    async def test_classification_derived_when_omitted(self, analyzer, repo_metadata):
        adapter = StubAdapter()
        await _use_case(adapter, analyzer).synthesize(
            SAMPLE_README, metadata=repo_metadata, provider_config=_config()
        )
        assert "Analyze this GitHub repository" in adapter.calls[0][0]

    async def test_partial_answer_is_completed_with_defaults(self, analyzer):
        adapter = StubAdapter(answer='{"summary": "Short."}')
        insight = await _use_case(adapter, analyzer).synthesize("text", provider_config=_config())
        assert insight.summary == "Short."
        assert insight.key_features == []
        assert insight.complexity is Complexity.MEDIUM


class TestFallback:
    async def test_backend_error_equals_heuristic(self, analyzer, repo_metadata, caplog):
        adapter = StubAdapter(error=BackendError("openai", "non-success response", status=503))
        with caplog.at_level(logging.INFO, logger=_LOGGER):
            result = await _use_case(adapter, analyzer).synthesize_with_provenance(
                SAMPLE_README, REPO, repo_metadata, _config()
            )
        assert result.source == SOURCE_HEURISTIC
        assert result.fallback_reason == REASON_BACKEND_ERROR
        assert result.insight == analyzer.analyze(SAMPLE_README, REPO, repo_metadata)
        assert "HTTP 503" in caplog.text
        assert "sk-live-123456" not in caplog.text

    async def test_refusal_text(self, analyzer, caplog):
        adapter = StubAdapter(answer="Sorry, I cannot help with that.")
        with caplog.at_level(logging.INFO, logger=_LOGGER):
            result = await _use_case(adapter, analyzer).synthesize_with_provenance(
                "some text", provider_config=_config()
            )
        assert result.fallback_reason == REASON_NORMALIZATION_ERROR
        assert result.insight == analyzer.analyze("some text")
        assert "answer unusable" in caplog.text

    async def test_timeout(self, analyzer):
        adapter = StubAdapter(delay=1.0)
        result = await _use_case(adapter, analyzer, timeout=0.01).synthesize_with_provenance(
            "some text", provider_config=_config()
        )
        assert result.fallback_reason == REASON_BACKEND_ERROR
        assert result.source == SOURCE_HEURISTIC

    async def test_unexpected_exception(self, analyzer, caplog):
        adapter = StubAdapter(error=RuntimeError("kaboom"))
        with caplog.at_level(logging.INFO, logger=_LOGGER):
            result = await _use_case(adapter, analyzer).synthesize_with_provenance(
                "some text", provider_config=_config()
            )
        assert result.fallback_reason == REASON_UNEXPECTED_ERROR
        assert "Unexpected failure" in caplog.text

    async def test_fallback_reasons_are_logged_distinctly(self, analyzer, caplog):
        with caplog.at_level(logging.INFO, logger=_LOGGER):
            await _use_case(StubAdapter(), analyzer).synthesize("text")
            no_key = caplog.text
            caplog.clear()
            await _use_case(StubAdapter(error=BackendError("openai", "x")), analyzer).synthesize(
                "text", provider_config=_config()
            )
            failed = caplog.text
        assert "no credential" in no_key
        assert "failed" in failed
        assert "no credential" not in failed

    async def test_synthesize_never_raises_on_empty_content(self, analyzer):
        adapter = StubAdapter(error=RuntimeError("kaboom"))
        insight = await _use_case(adapter, analyzer).synthesize("", provider_config=_config())
        assert insight.summary
        assert insight.key_features


async def test_readme_scenario_without_key(analyzer):
    use_case = SynthesizeInsightsUseCase({}, analyzer)
    metadata = AnalysisMetadata(name="widget", language="Go", stars=1500)
    insight = await use_case.synthesize("# Widget\nA tool for X.", REPO, metadata)
    assert "Go" in insight.technologies
    assert insight.complexity is Complexity.HIGH


async def test_any_object_with_send_is_an_adapter(analyzer):
    adapter = AsyncMock()
    adapter.send.return_value = VALID_ANSWER
    use_case = SynthesizeInsightsUseCase({Provider.ANTHROPIC: adapter}, analyzer)
    result = await use_case.synthesize_with_provenance(
        "text", provider_config=_config(provider=Provider.ANTHROPIC, api_key="sk-ant-live")
    )
    assert result.source == SOURCE_BACKEND
    adapter.send.assert_awaited_once()
    assert adapter.send.await_args.args[1] == Provider.ANTHROPIC.default_model
