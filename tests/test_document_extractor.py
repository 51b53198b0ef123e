"""Tests for document text extraction."""

import pytest

from insight_engine.domain.entities import EXTRACTED_CONTENT_MARKER
from insight_engine.domain.exceptions import UnsupportedDocumentError
from insight_engine.services.document_extractor import MAX_DOCUMENT_BYTES, extract_document


class TestTextDocuments:
    def test_markdown_is_decoded_and_marked(self):
        doc = extract_document("notes.md", b"# Notes\nHello world")
        assert doc.text == f"{EXTRACTED_CONTENT_MARKER}\n# Notes\nHello world"
        assert doc.metadata.file_name == "notes.md"
        assert doc.metadata.extracted is True
        assert doc.metadata.size_bytes == len(b"# Notes\nHello world")

    def test_bom_is_dropped(self):
        doc = extract_document("a.txt", "\ufeffcafé".encode("utf-8"))
        assert doc.text.endswith("\ncafé")

    def test_path_components_are_stripped(self):
        doc = extract_document("C:\\Users\\me\\report.txt", b"text")
        assert doc.metadata.file_name == "report.txt"

    def test_no_suffix_is_treated_as_text(self):
        assert extract_document("README", b"hello").metadata.extracted is True

    def test_binary_disguised_as_text(self):
        with pytest.raises(UnsupportedDocumentError, match="does not look like a text file"):
            extract_document("data.txt", b"\x00\x01\x02\xff" * 50)


class TestInferredDocuments:
    def test_pdf_pages_counted(self):
        data = b"%PDF-1.4\n" + b"<< /Type /Page >>\n" * 3 + b"<< /Type /Pages >>\n"
        doc = extract_document("Annual_Report-2023.pdf", data)
        assert doc.metadata.extracted is False
        assert doc.metadata.page_count == 3
        assert EXTRACTED_CONTENT_MARKER not in doc.text
        assert doc.text.startswith("PDF document: Annual_Report-2023.pdf")
        assert "Title terms: Annual Report 2023" in doc.text
        assert "roughly 3 pages" in doc.text

    def test_word_document(self):
        doc = extract_document("cv.docx", b"PK\x03\x04" + b"\x00" * 100)
        assert doc.text.startswith("Word document: cv.docx")
        assert doc.metadata.page_count is None


class TestRejected:
    @pytest.mark.parametrize("name", ["", "   "])
    def test_missing_name(self, name):
        with pytest.raises(UnsupportedDocumentError):
            extract_document(name, b"text")

    def test_unknown_binary_type(self):
        with pytest.raises(UnsupportedDocumentError, match="Unsupported file type '.exe'"):
            extract_document("setup.exe", b"MZ")

    def test_oversized(self):
        with pytest.raises(UnsupportedDocumentError, match="limit is 10 MB"):
            extract_document("big.txt", b"a" * (MAX_DOCUMENT_BYTES + 1))
