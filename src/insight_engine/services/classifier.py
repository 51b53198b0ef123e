"""Content classification shared by the prompt builder and heuristic analyzer."""

from __future__ import annotations

from insight_engine.domain.entities import (
    EXTRACTED_CONTENT_MARKER,
    AnalysisMetadata,
    ContentClassification,
    DocumentMetadata,
    DocumentType,
)
from insight_engine.services.pattern_library import DEFAULT_PATTERNS, PatternLibrary

# A family needs at least this many distinct keyword hits to name the type.
_MIN_KEYWORD_HITS = 2


def classify_content(
    content: str,
    metadata: AnalysisMetadata | DocumentMetadata | None = None,
) -> ContentClassification:
    """Derive the classification from caller metadata or content markers."""
    if isinstance(metadata, AnalysisMetadata):
        return ContentClassification.GITHUB_REPOSITORY
    if isinstance(metadata, DocumentMetadata) and metadata.extracted:
        return ContentClassification.EXTRACTED_DOCUMENT
    if EXTRACTED_CONTENT_MARKER in content:
        return ContentClassification.EXTRACTED_DOCUMENT
    return ContentClassification.GENERIC_DOCUMENT


def keyword_hits(
    content: str, doc_type: DocumentType, patterns: PatternLibrary = DEFAULT_PATTERNS
) -> int:
    """Count distinct keywords of *doc_type*'s family present in *content*."""
    return sum(1 for pattern in patterns.keywords_for(doc_type) if pattern.search(content))


def detect_document_type(
    content: str,
    classification: ContentClassification,
    patterns: PatternLibrary = DEFAULT_PATTERNS,
) -> DocumentType:
    """Pick the document type whose keyword family matches best."""
    if classification is ContentClassification.GITHUB_REPOSITORY:
        return DocumentType.REPOSITORY

    best_type = DocumentType.GENERAL
    best_hits = _MIN_KEYWORD_HITS - 1
    for doc_type, _ in patterns.document_keywords:
        hits = keyword_hits(content, doc_type, patterns)
        if hits > best_hits:
            best_type, best_hits = doc_type, hits
    return best_type
