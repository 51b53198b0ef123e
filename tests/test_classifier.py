"""Tests for content classification and document-type detection."""

from insight_engine.domain.entities import (
    EXTRACTED_CONTENT_MARKER,
    AnalysisMetadata,
    ContentClassification,
    DocumentMetadata,
    DocumentType,
)
from insight_engine.services.classifier import (
    classify_content,
    detect_document_type,
    keyword_hits,
)


class TestClassifyContent:
    def test_repository_metadata_wins(self):
        metadata = AnalysisMetadata(name="x")
        assert classify_content("anything", metadata) is ContentClassification.GITHUB_REPOSITORY

    def test_marker_means_extracted(self):
        content = f"{EXTRACTED_CONTENT_MARKER}\nhello"
        assert classify_content(content) is ContentClassification.EXTRACTED_DOCUMENT

    def test_extracted_document_metadata(self):
        metadata = DocumentMetadata(file_name="a.txt", extracted=True)
        assert classify_content("hello", metadata) is ContentClassification.EXTRACTED_DOCUMENT

    def test_inferred_document_is_generic(self):
        metadata = DocumentMetadata(file_name="a.pdf", extracted=False)
        assert classify_content("hello", metadata) is ContentClassification.GENERIC_DOCUMENT

    def test_plain_text_is_generic(self):
        assert classify_content("hello") is ContentClassification.GENERIC_DOCUMENT


class TestDetectDocumentType:
    def test_repository_classification(self):
        doc_type = detect_document_type(
            "resume education skills", ContentClassification.GITHUB_REPOSITORY
        )
        assert doc_type is DocumentType.REPOSITORY

    def test_resume(self):
        text = "Curriculum vitae. Work experience at Acme. Education: BSc. Skills: SQL."
        assert (
            detect_document_type(text, ContentClassification.GENERIC_DOCUMENT)
            is DocumentType.RESUME
        )

    def test_report(self):
        text = "Quarterly report. Methodology and findings, followed by our conclusion."
        assert (
            detect_document_type(text, ContentClassification.EXTRACTED_DOCUMENT)
            is DocumentType.REPORT
        )

    def test_technical(self):
        text = "Installation: run the SDK. Configuration lives in a file; each API endpoint..."
        assert (
            detect_document_type(text, ContentClassification.GENERIC_DOCUMENT)
            is DocumentType.TECHNICAL
        )

    def test_single_hit_is_general(self):
        assert (
            detect_document_type("a short report", ContentClassification.GENERIC_DOCUMENT)
            is DocumentType.GENERAL
        )

    def test_tie_goes_to_earlier_family(self):
        text = "education skills budget timeline"
        assert keyword_hits(text, DocumentType.RESUME) == 2
        assert keyword_hits(text, DocumentType.PROPOSAL) == 2
        assert (
            detect_document_type(text, ContentClassification.GENERIC_DOCUMENT)
            is DocumentType.RESUME
        )

    def test_keywords_match_whole_words(self):
        assert keyword_hits("reported scoped", DocumentType.REPORT) == 0
