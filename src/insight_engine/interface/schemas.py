"""Pydantic request / response DTOs for the API boundary (camelCase on the wire)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, SecretStr, field_validator
from pydantic.alias_generators import to_camel

from insight_engine.domain.entities import (
    Complexity,
    ContentClassification,
    Provider,
    SynthesisResult,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BackendChoice(_CamelModel):
    """Optional per-request backend selection; settings fill the gaps."""

    provider: Provider | None = None
    api_key: SecretStr | None = None
    model: str | None = None

    @property
    def api_key_value(self) -> str | None:
        return self.api_key.get_secret_value() if self.api_key else None


class AnalyzeTextRequest(BackendChoice):
    """Request body for ``POST /insights``."""

    content: str
    classification: ContentClassification | None = None


class AnalyzeRepositoryRequest(BackendChoice):
    """Request body for ``POST /insights/repository``."""

    github_url: str

    @field_validator("github_url")
    @classmethod
    def _must_be_github(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "githubUrl must not be empty."
            raise ValueError(msg)
        if "github.com" not in stripped.lower():
            msg = (
                f"Invalid URL: '{stripped}'. "
                "Only public GitHub repository URLs are supported."
            )
            raise ValueError(msg)
        return stripped


class AnalyzeDocumentRequest(BackendChoice):
    """Request body for ``POST /insights/document``."""

    file_name: str
    content_base64: str


class InsightResponse(_CamelModel):
    """Successful analysis: the Insight plus how it was produced."""

    summary: str
    key_features: list[str]
    technologies: list[str]
    use_cases: list[str]
    main_sections: list[str]
    complexity: Complexity
    recommendation: str
    source: str
    provider: Provider | None = None
    fallback_reason: str | None = None

    @classmethod
    def from_result(cls, result: SynthesisResult) -> InsightResponse:
        insight = result.insight
        return cls(
            summary=insight.summary,
            key_features=insight.key_features,
            technologies=insight.technologies,
            use_cases=insight.use_cases,
            main_sections=insight.main_sections,
            complexity=insight.complexity,
            recommendation=insight.recommendation,
            source=result.source,
            provider=result.provider,
            fallback_reason=result.fallback_reason,
        )


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
