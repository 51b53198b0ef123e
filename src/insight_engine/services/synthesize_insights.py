"""Synthesize-insights use case — the engine's single entry point.

Try the configured LLM backend once; if there is no usable credential, or the
call or its parsing fails for any reason, the heuristic analyzer decides the
whole result instead.  There is never a partial merge of the two, and the
caller never sees an error.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping

from insight_engine.domain.entities import (
    AnalysisMetadata,
    ContentClassification,
    DocumentMetadata,
    Insight,
    Provider,
    ProviderConfig,
    SynthesisResult,
)
from insight_engine.domain.exceptions import (
    BackendError,
    ConfigurationError,
    NormalizationError,
)
from insight_engine.domain.ports.backend_adapter import BackendAdapter
from insight_engine.services.classifier import classify_content
from insight_engine.services.heuristic_analyzer import HeuristicAnalyzer
from insight_engine.services.prompt_builder import build_prompt
from insight_engine.services.response_normalizer import normalize_response

logger = logging.getLogger(__name__)

SOURCE_BACKEND = "backend"
SOURCE_HEURISTIC = "heuristic"

REASON_NO_CREDENTIAL = "no-credential"
REASON_BACKEND_ERROR = "backend-error"
REASON_NORMALIZATION_ERROR = "normalization-error"
REASON_UNEXPECTED_ERROR = "unexpected-error"


class SynthesizeInsightsUseCase:
    """Orchestrates backend dispatch with heuristic fallback.

    Parameters
    ----------
    adapters:
        Backend adapters keyed by provider.  Which one runs is the caller's
        choice via :class:`ProviderConfig`; there is no cross-provider retry.
    analyzer:
        Heuristic fallback; a default :class:`HeuristicAnalyzer` when omitted.
    timeout:
        Deadline in seconds for the single backend call (``None`` disables it).
    """

    def __init__(
        self,
        adapters: Mapping[Provider, BackendAdapter],
        analyzer: HeuristicAnalyzer | None = None,
        timeout: float | None = 30.0,
    ) -> None:
        self._adapters = adapters
        self._analyzer = analyzer or HeuristicAnalyzer()
        self._timeout = timeout

    # ── Public entry points ─────────────────────────────────────────────

    async def synthesize(
        self,
        content: str,
        classification: ContentClassification | None = None,
        metadata: AnalysisMetadata | DocumentMetadata | None = None,
        provider_config: ProviderConfig | None = None,
    ) -> Insight:
        """Return a complete Insight for *content*.  Never raises."""
        result = await self.synthesize_with_provenance(
            content, classification, metadata, provider_config
        )
        return result.insight

    async def synthesize_with_provenance(
        self,
        content: str,
        classification: ContentClassification | None = None,
        metadata: AnalysisMetadata | DocumentMetadata | None = None,
        provider_config: ProviderConfig | None = None,
    ) -> SynthesisResult:
        """Like :meth:`synthesize`, but also report which path produced the Insight."""
        content = content or ""
        if classification is None:
            classification = classify_content(content, metadata)

        if provider_config is None:
            logger.info("Using heuristic analysis (no credential): no provider configured")
            return self._fallback(content, classification, metadata, None, REASON_NO_CREDENTIAL)
        try:
            adapter = self._resolve_adapter(provider_config)
        except ConfigurationError as exc:
            logger.info("Using heuristic analysis (no credential): %s", exc)
            return self._fallback(
                content, classification, metadata, provider_config, REASON_NO_CREDENTIAL
            )

        provider = provider_config.provider
        try:
            insight = await self._call_backend(
                adapter, provider_config, content, classification, metadata
            )
        except BackendError as exc:
            logger.warning("Backend %s failed, using heuristic analysis: %s", provider.value, exc)
            reason = REASON_BACKEND_ERROR
        except NormalizationError as exc:
            logger.warning(
                "Backend %s answer unusable, using heuristic analysis: %s", provider.value, exc
            )
            reason = REASON_NORMALIZATION_ERROR
        except Exception:
            logger.exception("Unexpected failure calling %s, using heuristic analysis", provider.value)
            reason = REASON_UNEXPECTED_ERROR
        else:
            logger.info(
                "Insight produced by %s (%s)", provider.value, provider_config.resolved_model
            )
            return SynthesisResult(insight=insight, source=SOURCE_BACKEND, provider=provider)

        return self._fallback(content, classification, metadata, provider_config, reason)

    # ── Steps ───────────────────────────────────────────────────────────

    def _resolve_adapter(self, config: ProviderConfig) -> BackendAdapter:
        if not config.has_usable_key:
            raise ConfigurationError(f"no usable API key for {config.provider.value}")
        adapter = self._adapters.get(config.provider)
        if adapter is None:
            raise ConfigurationError(f"no adapter registered for {config.provider.value}")
        return adapter

    async def _call_backend(
        self,
        adapter: BackendAdapter,
        config: ProviderConfig,
        content: str,
        classification: ContentClassification,
        metadata: AnalysisMetadata | DocumentMetadata | None,
    ) -> Insight:
        prompt = build_prompt(content, classification, metadata)
        logger.debug(
            "Dispatching %d-character %s prompt to %s",
            len(prompt),
            classification.value,
            config.provider.value,
        )
        try:
            raw = await asyncio.wait_for(
                adapter.send(prompt, config.resolved_model, config.api_key or ""),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            raise BackendError(
                config.provider.value, f"no answer within {self._timeout:g}s"
            ) from exc
        return normalize_response(raw)

    def _fallback(
        self,
        content: str,
        classification: ContentClassification,
        metadata: AnalysisMetadata | DocumentMetadata | None,
        config: ProviderConfig | None,
        reason: str,
    ) -> SynthesisResult:
        insight = self._analyzer.analyze(content, classification, metadata)
        return SynthesisResult(
            insight=insight,
            source=SOURCE_HEURISTIC,
            provider=config.provider if config else None,
            fallback_reason=reason,
        )
