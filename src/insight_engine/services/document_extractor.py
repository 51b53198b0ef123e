"""Document text extraction — turns uploaded bytes into analysable text.

Text-like files are decoded for real and tagged with
:data:`EXTRACTED_CONTENT_MARKER`.  Binary office formats (PDF, Word) are not
parsed: their text is *inferred* from the file name and size, and carries no
marker, so the engine treats them as generic documents.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import PurePosixPath

from insight_engine.domain.entities import EXTRACTED_CONTENT_MARKER, DocumentMetadata
from insight_engine.domain.exceptions import UnsupportedDocumentError

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".txt", ".md", ".markdown", ".rst", ".text", ".log",
        ".csv", ".tsv", ".json", ".yaml", ".yml", ".toml", ".xml",
        ".html", ".htm", ".tex",
        ".py", ".js", ".ts", ".tsx", ".jsx", ".go", ".rs", ".java",
        ".rb", ".php", ".c", ".cpp", ".h", ".cs", ".swift", ".kt", ".sh",
    }
)

INFERRED_EXTENSIONS: dict[str, str] = {
    ".pdf": "PDF",
    ".doc": "Word",
    ".docx": "Word",
    ".odt": "OpenDocument",
    ".rtf": "Rich Text",
}

MAX_DOCUMENT_BYTES = 10 * 1024 * 1024

# Share of NUL / replacement characters above which "text" is really binary.
_BINARY_RATIO = 0.05
_PDF_PAGE_RE = re.compile(rb"/Type\s*/Page\b")
_NAME_SPLIT_RE = re.compile(r"[\s_\-.]+")


@dataclass(frozen=True, slots=True)
class ExtractedDocument:
    """Raw text handed to the engine plus what is known about its source."""

    text: str
    metadata: DocumentMetadata


def extract_document(file_name: str, data: bytes) -> ExtractedDocument:
    """Turn an uploaded file into text for analysis.

    Raises :class:`UnsupportedDocumentError` for nameless, oversized or
    unrecognised binary uploads.
    """
    file_name = PurePosixPath(file_name.strip().replace("\\", "/")).name if file_name else ""
    if not file_name:
        raise UnsupportedDocumentError("A file name is required to analyse a document.")
    if len(data) > MAX_DOCUMENT_BYTES:
        raise UnsupportedDocumentError(
            f"{file_name} is {len(data) // 1024} KB; the limit is "
            f"{MAX_DOCUMENT_BYTES // (1024 * 1024)} MB."
        )

    suffix = PurePosixPath(file_name).suffix.lower()
    if suffix in INFERRED_EXTENSIONS:
        return _infer(file_name, suffix, data)
    if suffix in TEXT_EXTENSIONS or not suffix:
        return _decode(file_name, data)
    raise UnsupportedDocumentError(
        f"Unsupported file type '{suffix}'. Upload a text, Markdown or PDF document."
    )


def _decode(file_name: str, data: bytes) -> ExtractedDocument:
    text = data.decode("utf-8-sig", errors="replace")
    if text:
        suspicious = text.count("\x00") + text.count("\ufffd")
        if suspicious / len(text) > _BINARY_RATIO:
            raise UnsupportedDocumentError(f"{file_name} does not look like a text file.")
    logger.info("Extracted %d characters from %s", len(text), file_name)
    return ExtractedDocument(
        text=f"{EXTRACTED_CONTENT_MARKER}\n{text}",
        metadata=DocumentMetadata(file_name=file_name, size_bytes=len(data), extracted=True),
    )


def _infer(file_name: str, suffix: str, data: bytes) -> ExtractedDocument:
    kind = INFERRED_EXTENSIONS[suffix]
    pages = len(_PDF_PAGE_RE.findall(data)) if suffix == ".pdf" else 0
    size_kb = len(data) // 1024
    title = " ".join(
        part for part in _NAME_SPLIT_RE.split(PurePosixPath(file_name).stem) if part
    )
    page_note = f" across roughly {pages} page{'s' if pages != 1 else ''}" if pages else ""
    text = (
        f"{kind} document: {file_name}\n\n"
        f"Title terms: {title or 'none'}\n\n"
        f"This {kind} file is {size_kb} KB in size{page_note} and was uploaded for "
        "analysis. Its text was not extracted, so this description is inferred "
        "from the file name and size only."
    )
    logger.info("Inferred description for %s (%d KB, %d pages)", file_name, size_kb, pages)
    return ExtractedDocument(
        text=text,
        metadata=DocumentMetadata(
            file_name=file_name,
            size_bytes=len(data),
            page_count=pages or None,
            extracted=False,
        ),
    )
