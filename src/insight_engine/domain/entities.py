"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping

# Prefix written by the document extractor when text was really read from the
# file (as opposed to inferred from its name and size).
EXTRACTED_CONTENT_MARKER = "[Extracted document content]"


class Complexity(str, Enum):
    """Closed rating scale for how involved the analysed material is."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def coerce(cls, value: object) -> Complexity:
        """Match *value* case-insensitively, defaulting to ``Medium``."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return cls.MEDIUM


class ContentClassification(str, Enum):
    """What kind of source text is being analysed."""

    GITHUB_REPOSITORY = "github-repository"
    EXTRACTED_DOCUMENT = "document-with-extracted-text"
    GENERIC_DOCUMENT = "document-generic"


class DocumentType(str, Enum):
    """Finer-grained type shared by the prompt builder and heuristic analyzer."""

    REPOSITORY = "repository"
    RESUME = "resume"
    REPORT = "report"
    PROPOSAL = "proposal"
    TECHNICAL = "technical"
    GENERAL = "general"


class Provider(str, Enum):
    """Supported large-language-model backends."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    HUGGINGFACE = "huggingface"
    GROQ = "groq"
    OPENROUTER = "openrouter"

    @property
    def default_model(self) -> str:
        return _DEFAULT_MODELS[self]


_DEFAULT_MODELS: dict[Provider, str] = {
    Provider.OPENAI: "gpt-4o-mini",
    Provider.ANTHROPIC: "claude-3-5-haiku-latest",
    Provider.GEMINI: "gemini-1.5-flash",
    Provider.HUGGINGFACE: "mistralai/Mistral-7B-Instruct-v0.3",
    Provider.GROQ: "llama-3.1-8b-instant",
    Provider.OPENROUTER: "openai/gpt-4o-mini",
}

_PLACEHOLDER_KEY_RE = re.compile(
    r"^(?:your[-_ ].*|.*[-_ ]here|<.*>|sk-x+|x+|changeme|placeholder|dummy|none|null|\.\.\.+)$",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Which backend to call for one analysis request, and with what credential."""

    provider: Provider
    api_key: str | None = None
    model: str | None = None

    @property
    def resolved_model(self) -> str:
        return self.model or self.provider.default_model

    @property
    def has_usable_key(self) -> bool:
        """False for missing, blank or obviously unfilled template keys."""
        if not self.api_key:
            return False
        key = self.api_key.strip()
        return bool(key) and not _PLACEHOLDER_KEY_RE.match(key)

    def __repr__(self) -> str:
        # Never echo the secret into logs or tracebacks.
        return (
            f"ProviderConfig(provider={self.provider.value!r}, "
            f"api_key={'***' if self.api_key else None}, model={self.model!r})"
        )


@dataclass(frozen=True, slots=True)
class AnalysisMetadata:
    """Repository metadata supplied by the repository fetcher."""

    name: str
    language: str | None = None
    stars: int = 0
    description: str | None = None
    size: int = 0  # KB, as reported by GitHub
    full_name: str | None = None
    forks: int = 0
    topics: tuple[str, ...] = ()
    license: str | None = None


@dataclass(frozen=True, slots=True)
class DocumentMetadata:
    """Facts about an uploaded document supplied by the document extractor."""

    file_name: str
    size_bytes: int = 0
    page_count: int | None = None
    extracted: bool = False


@dataclass(frozen=True, slots=True)
class Insight:
    """The structured output returned for every analysis."""

    summary: str
    key_features: list[str]
    technologies: list[str]
    use_cases: list[str]
    main_sections: list[str] = field(default_factory=list)
    complexity: Complexity = Complexity.MEDIUM
    recommendation: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Render the camelCase wire shape."""
        return {
            "summary": self.summary,
            "keyFeatures": list(self.key_features),
            "technologies": list(self.technologies),
            "useCases": list(self.use_cases),
            "mainSections": list(self.main_sections),
            "complexity": self.complexity.value,
            "recommendation": self.recommendation,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Insight:
        """Coerce a loosely-typed mapping (e.g. parsed LLM output) into an Insight.

        Missing or mistyped fields fall back to empty values so the result is
        always complete.
        """
        return cls(
            summary=_as_text(data.get("summary")),
            key_features=_as_phrases(data.get("keyFeatures")),
            technologies=_as_phrases(data.get("technologies"), casefold=True),
            use_cases=_as_phrases(data.get("useCases")),
            main_sections=_as_phrases(data.get("mainSections")),
            complexity=Complexity.coerce(data.get("complexity")),
            recommendation=_as_text(data.get("recommendation")),
        )


@dataclass(frozen=True, slots=True)
class SynthesisResult:
    """An Insight together with how it was produced."""

    insight: Insight
    source: str  # "backend" or "heuristic"
    provider: Provider | None = None
    fallback_reason: str | None = None


# ── Helpers ─────────────────────────────────────────────────────────────────


def _as_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _as_phrases(value: object, *, casefold: bool = False) -> list[str]:
    if isinstance(value, str):
        items: Iterable[object] = [value]
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        return []
    return unique_phrases((_as_text(item) for item in items), casefold=casefold)


def unique_phrases(items: Iterable[str], *, casefold: bool = False) -> list[str]:
    """Drop blanks and duplicates, keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        text = item.strip()
        if not text:
            continue
        key = text.casefold() if casefold else text
        if key in seen:
            continue
        seen.add(key)
        result.append(text)
    return result
