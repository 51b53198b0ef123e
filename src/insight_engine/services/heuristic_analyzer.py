"""Heuristic analyzer — derives a complete Insight without any backend.

Pure pattern matching and scoring over the raw text plus optional metadata.
No network, no randomness, no clock: identical input always yields an
identical :class:`Insight`, which makes this the engine's safety net.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Iterable

from insight_engine.domain.entities import (
    EXTRACTED_CONTENT_MARKER,
    AnalysisMetadata,
    ContentClassification,
    DocumentMetadata,
    DocumentType,
    Insight,
    unique_phrases,
)
from insight_engine.services.classifier import (
    classify_content,
    detect_document_type,
    keyword_hits,
)
from insight_engine.services.complexity import ComplexitySignals, rate_complexity
from insight_engine.services.pattern_library import DEFAULT_PATTERNS, PatternLibrary

# ── Limits ──────────────────────────────────────────────────────────────────

MAX_FEATURES = 6
MAX_USE_CASES = 5
MAX_SECTIONS = 8
MAX_TECHNOLOGIES = 10
MIN_LIST_ITEMS = 3
EXCERPT_CHARS = 180
WORDS_PER_PAGE = 500
_MAX_PHRASE_CHARS = 80

_TYPE_LABELS: dict[DocumentType, str] = {
    DocumentType.REPOSITORY: "repository",
    DocumentType.RESUME: "resume",
    DocumentType.REPORT: "report",
    DocumentType.PROPOSAL: "proposal",
    DocumentType.TECHNICAL: "technical document",
    DocumentType.GENERAL: "document",
}

# ── Inline markdown cleanup ─────────────────────────────────────────────────

_IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]*\)")
_LINK_RE = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_HTML_TAG_RE = re.compile(r"<[^>]+>")
_FENCE_RE = re.compile(r"```.*?```", re.DOTALL)
_EMPHASIS_RE = re.compile(r"\*{1,3}|`+|~~|(?<!\w)__|__(?!\w)")
_HEADER_MARK_RE = re.compile(r"^[ \t]*#{1,6}[ \t]*", re.MULTILINE)
_BULLET_MARK_RE = re.compile(r"^[ \t]*[-*+•][ \t]+", re.MULTILINE)
_LEADING_SYMBOLS_RE = re.compile(r"^[^\w]+")
_WHITESPACE_RE = re.compile(r"\s+")


def _clean_inline(text: str) -> str:
    text = _IMAGE_RE.sub("", text)
    text = _LINK_RE.sub(r"\1", text)
    text = _HTML_TAG_RE.sub("", text)
    text = _EMPHASIS_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def _shorten(text: str, limit: int) -> str:
    """Cut *text* at a word boundary so it fits in *limit* characters."""
    if len(text) <= limit:
        return text
    cut = text[:limit].rsplit(" ", 1)[0].rstrip(",;:-")
    return f"{cut}…"


def _phrase(raw: str) -> str:
    """Turn a bullet item or regex capture into a short display phrase."""
    text = _LEADING_SYMBOLS_RE.sub("", _clean_inline(raw)).rstrip(" .;:,")
    text = _shorten(text, _MAX_PHRASE_CHARS)
    return text[:1].upper() + text[1:]


def _strip_marker(content: str) -> str:
    return content.replace(EXTRACTED_CONTENT_MARKER, "").strip()


def excerpt(content: str, limit: int = EXCERPT_CHARS) -> str:
    """Return a short, markdown-free literal excerpt of *content*."""
    text = _FENCE_RE.sub(" ", content)
    text = _HEADER_MARK_RE.sub("", text)
    text = _BULLET_MARK_RE.sub("", text)
    return _shorten(_clean_inline(text), limit)


def _with_top_up(items: list[str], fallback: Iterable[str], minimum: int, cap: int) -> list[str]:
    result = unique_phrases(items, casefold=True)
    if len(result) < minimum:
        result = unique_phrases([*result, *fallback], casefold=True)
    return result[:cap]


@dataclass(frozen=True, slots=True)
class ContentMetrics:
    """Measured properties of the analysed text."""

    word_count: int
    size_bytes: int
    page_count: int
    complexity_terms: int


class HeuristicAnalyzer:
    """Deterministic, backend-free Insight producer.

    Parameters
    ----------
    patterns:
        The :class:`PatternLibrary` providing every recognizer and fallback.
    """

    def __init__(self, patterns: PatternLibrary = DEFAULT_PATTERNS) -> None:
        self._patterns = patterns

    # ── Public entry point ──────────────────────────────────────────────

    def analyze(
        self,
        content: str,
        classification: ContentClassification | None = None,
        metadata: AnalysisMetadata | DocumentMetadata | None = None,
    ) -> Insight:
        """Produce a complete Insight for *content*.  Never raises."""
        if classification is None:
            classification = classify_content(content, metadata)
        text = _strip_marker(content or "")
        repo = metadata if isinstance(metadata, AnalysisMetadata) else None
        document = metadata if isinstance(metadata, DocumentMetadata) else None

        doc_type = detect_document_type(text, classification, self._patterns)
        metrics = self.measure(text, document)

        harvested_sections = self.extract_sections(text, doc_type, repo)
        sections = harvested_sections or list(self._patterns.section_skeletons[doc_type])
        technologies = self.extract_technologies(text, doc_type, repo)
        features = self.extract_features(
            text, doc_type, repo, technologies, harvested_sections
        )
        use_cases = self.extract_use_cases(text, doc_type)
        complexity = rate_complexity(self._signals(metrics, doc_type, repo, document))

        return Insight(
            summary=self._summarize(text, doc_type, metrics, sections, repo, document),
            key_features=features,
            technologies=technologies,
            use_cases=use_cases,
            main_sections=sections[:MAX_SECTIONS],
            complexity=complexity,
            recommendation=self._recommend(
                text, doc_type, metrics, sections, technologies, complexity.value, repo, document
            ),
        )

    # ── Metrics ─────────────────────────────────────────────────────────

    def measure(self, text: str, document: DocumentMetadata | None = None) -> ContentMetrics:
        words = len(text.split())
        size_bytes = document.size_bytes if document and document.size_bytes else len(
            text.encode("utf-8")
        )
        if document and document.page_count:
            pages = document.page_count
        else:
            pages = math.ceil(words / WORDS_PER_PAGE) if words else 0
        terms = sum(1 for pattern in self._patterns.complexity_terms if pattern.search(text))
        return ContentMetrics(
            word_count=words, size_bytes=size_bytes, page_count=pages, complexity_terms=terms
        )

    @staticmethod
    def _signals(
        metrics: ContentMetrics,
        doc_type: DocumentType,
        repo: AnalysisMetadata | None,
        document: DocumentMetadata | None,
    ) -> ComplexitySignals:
        if doc_type is DocumentType.REPOSITORY:
            return ComplexitySignals(
                word_count=metrics.word_count,
                complexity_terms=metrics.complexity_terms,
                stars=repo.stars if repo else None,
                repo_size_kb=repo.size if repo else None,
            )
        return ComplexitySignals(
            word_count=metrics.word_count,
            complexity_terms=metrics.complexity_terms,
            document_size_bytes=metrics.size_bytes,
            page_count=metrics.page_count,
        )

    # ── Extraction ──────────────────────────────────────────────────────

    def extract_technologies(
        self,
        text: str,
        doc_type: DocumentType,
        repo: AnalysisMetadata | None = None,
    ) -> list[str]:
        """Scan every technology family; the repo's primary language leads."""
        found: list[str] = []
        if repo and repo.language:
            found.append(repo.language)
        for family in self._patterns.technology_families:
            for label, pattern in family.recognizers:
                if pattern.search(text):
                    found.append(label)
        technologies = unique_phrases(found, casefold=True)
        if not technologies:
            technologies = list(self._patterns.fallback_technologies[doc_type])
        return technologies[:MAX_TECHNOLOGIES]

    def extract_sections(
        self,
        text: str,
        doc_type: DocumentType,
        repo: AnalysisMetadata | None = None,
    ) -> list[str]:
        """Harvest header lines in document order; empty when none are found."""
        found: list[tuple[int, str]] = [
            (match.start(), _phrase(match["title"]))
            for match in self._patterns.markdown_header.finditer(text)
        ]
        if doc_type is not DocumentType.REPOSITORY:
            for pattern in self._patterns.document_headers:
                for match in pattern.finditer(text):
                    title = match["title"]
                    if title.isupper():
                        title = title.title()
                    found.append((match.start(), _phrase(title)))
        found.sort(key=lambda item: item[0])

        skip = {repo.name.casefold()} if repo else set()
        titles = [title for _, title in found if title and title.casefold() not in skip]
        return unique_phrases(titles, casefold=True)[:MAX_SECTIONS]

    def extract_features(
        self,
        text: str,
        doc_type: DocumentType,
        repo: AnalysisMetadata | None,
        technologies: list[str],
        sections: list[str],
    ) -> list[str]:
        """Listed features first, then metadata- or content-derived ones."""
        features = self._items_under(text, self._patterns.feature_header)
        if doc_type is DocumentType.REPOSITORY:
            features.extend(self._repository_features(repo, technologies, sections))
        else:
            features.extend(self._document_features(text, doc_type, sections))
        return _with_top_up(
            features, self._patterns.fallback_features[doc_type], MIN_LIST_ITEMS, MAX_FEATURES
        )

    def extract_use_cases(self, text: str, doc_type: DocumentType) -> list[str]:
        """Listed use cases, then phrase-template matches, then fallbacks."""
        use_cases = self._items_under(text, self._patterns.use_case_header)
        matches: list[tuple[int, str]] = []
        for pattern in self._patterns.use_case_phrases:
            matches.extend((m.start(), _phrase(m["phrase"])) for m in pattern.finditer(text))
        matches.sort(key=lambda item: item[0])
        use_cases.extend(phrase for _, phrase in matches)
        return _with_top_up(
            use_cases, self._patterns.fallback_use_cases[doc_type], MIN_LIST_ITEMS, MAX_USE_CASES
        )

    def _items_under(self, text: str, header_re: re.Pattern[str]) -> list[str]:
        """Collect bullet items listed beneath headers matching *header_re*."""
        items: list[str] = []
        capturing = False
        for line in text.splitlines():
            header = self._patterns.markdown_header.match(line)
            if header:
                title = _LEADING_SYMBOLS_RE.sub("", _clean_inline(header["title"]))
                capturing = bool(header_re.match(title))
                continue
            if not capturing:
                continue
            bullet = self._patterns.bullet_item.match(line)
            if bullet:
                phrase = _phrase(bullet["item"])
                if phrase:
                    items.append(phrase)
        return items

    @staticmethod
    def _repository_features(
        repo: AnalysisMetadata | None, technologies: list[str], sections: list[str]
    ) -> list[str]:
        derived: list[str] = []
        if repo is None:
            return derived
        if repo.description:
            derived.append(_phrase(repo.description))
        if repo.language:
            derived.append(f"{repo.language} implementation")
        primary = (repo.language or "").casefold()
        others = [t for t in technologies if t.casefold() != primary]
        if others:
            derived.append(f"Built with {' and '.join(others[:2])}")
        if repo.topics:
            derived.append(f"Topics: {', '.join(repo.topics[:4])}")
        lowered = {s.casefold() for s in sections}
        if lowered & {"installation", "install", "getting started", "quick start", "quickstart"}:
            derived.append("Documented installation steps")
        if repo.stars >= 100:
            derived.append(f"Community-backed project ({repo.stars:,} stars)")
        return derived

    def _document_features(
        self, text: str, doc_type: DocumentType, sections: list[str]
    ) -> list[str]:
        derived: list[str] = []
        years = sorted(set(self._patterns.year.findall(text)))
        if len(years) > 1:
            derived.append(f"Timeline references spanning {years[0]}–{years[-1]}")
        elif years:
            derived.append(f"References to {years[0]}")
        percentages = self._patterns.percentage.findall(text)
        if percentages:
            noun = "figure" if len(percentages) == 1 else "figures"
            derived.append(f"{len(percentages)} quantitative percentage {noun}")
        if sections:
            derived.append(f"Organised into {len(sections)} headed sections")

        fallbacks = self._patterns.fallback_features
        derived.extend(fallbacks[doc_type])
        # Secondary keyword families contribute their headline feature.
        for family_type, _ in self._patterns.document_keywords:
            if family_type is not doc_type and keyword_hits(text, family_type, self._patterns):
                derived.append(fallbacks[family_type][0])
        return derived

    # ── Summary & recommendation ────────────────────────────────────────

    def _summarize(
        self,
        text: str,
        doc_type: DocumentType,
        metrics: ContentMetrics,
        sections: list[str],
        repo: AnalysisMetadata | None,
        document: DocumentMetadata | None,
    ) -> str:
        opening = excerpt(text)
        quote = f' It opens with: "{opening}"' if opening else ""

        if doc_type is DocumentType.REPOSITORY:
            name = repo.name if repo else "This repository"
            language = repo.language if repo and repo.language else "multi-language"
            stars = repo.stars if repo else 0
            parts = [f"{name} is a {language} project with {stars:,} stars"]
            if repo and repo.forks:
                parts.append(f" and {repo.forks:,} forks")
            parts.append(".")
            if repo and repo.description:
                parts.append(f" {repo.description.strip().rstrip('.')}.")
            parts.append(f" Its README runs to {metrics.word_count:,} words.{quote}")
            return "".join(parts)

        label = _TYPE_LABELS[doc_type]
        prefix = f"{document.file_name}: " if document else ""
        if metrics.word_count == 0:
            return f"{prefix}This {label} is empty, so no content could be analysed."
        section_part = ", ".join(sections[:3])
        return (
            f"{prefix}This {label} contains {metrics.word_count:,} words "
            f"({_format_size(metrics.size_bytes)}, about {metrics.page_count} "
            f"{'page' if metrics.page_count == 1 else 'pages'}) covering {section_part}.{quote}"
        )

    def _recommend(
        self,
        text: str,
        doc_type: DocumentType,
        metrics: ContentMetrics,
        sections: list[str],
        technologies: list[str],
        complexity: str,
        repo: AnalysisMetadata | None,
        document: DocumentMetadata | None,
    ) -> str:
        words = f"{metrics.word_count:,}"
        lowered = text.lower()

        if doc_type is DocumentType.REPOSITORY:
            name = repo.name if repo else "This project"
            language = repo.language if repo and repo.language else "software"
            stars = repo.stars if repo else 0
            if complexity == "High":
                return (
                    f"{name} is a mature {language} project ({stars:,} stars); review its "
                    "architecture and contribution guidelines before adopting it in "
                    "production, and pin a released version."
                )
            if complexity == "Medium":
                return (
                    f"{name} has an established {language} footprint; try the examples "
                    "in its README and check recent activity before depending on it."
                )
            return (
                f"{name} is an early-stage {language} project; evaluate its documentation "
                "and test coverage, and consider contributing if it fits your needs."
            )

        if doc_type is DocumentType.RESUME:
            focus = next((s for s in sections if "experience" in s.lower()), sections[0])
            advice = (
                f"Tailor this {words}-word resume to the target role, quantify achievements "
                f"under {focus}, and surface key skills ({', '.join(technologies[:3])}) "
                "near the top."
            )
        elif doc_type is DocumentType.REPORT:
            advice = (
                f"Lead this {metrics.page_count}-page report with its key findings; an "
                f"executive summary and charts would help readers navigate its "
                f"{len(sections)} sections."
            )
        elif doc_type is DocumentType.PROPOSAL:
            missing = [term for term in ("timeline", "budget", "deliverables") if term not in lowered]
            if missing:
                advice = (
                    f"Strengthen the proposal by stating its {', '.join(missing)} explicitly; "
                    "reviewers look for quantified commitments."
                )
            else:
                advice = (
                    "The proposal already covers timeline, budget and deliverables; add risks "
                    "and measurable success criteria before submitting it."
                )
        elif doc_type is DocumentType.TECHNICAL:
            advice = (
                f"Verify the setup steps in this {words}-word guide against the current "
                f"release of {', '.join(technologies[:3])} and add a troubleshooting section."
            )
        elif metrics.word_count == 0:
            advice = "Provide a document with readable text to get a content-level analysis."
        else:
            advice = (
                f"Split this {words}-word document into clearly headed sections and open "
                "with a short summary for faster review."
            )

        if document and not document.extracted:
            advice += (
                " This analysis was inferred from the file name and size; upload a text "
                "or Markdown version for a content-level review."
            )
        return advice


def _format_size(size_bytes: int) -> str:
    if size_bytes >= 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    if size_bytes >= 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes} bytes"
