"""Prompt builder — turns content + classification into a backend instruction.

Three template families (repository, extracted document, generic document)
all request the same single JSON object.  Each family embeds a bounded prefix
of the source text; the caps below are a token-cost control and define exactly
how much of the input a backend can see.
"""

from __future__ import annotations

from insight_engine.domain.entities import (
    EXTRACTED_CONTENT_MARKER,
    AnalysisMetadata,
    ContentClassification,
    DocumentMetadata,
    DocumentType,
)
from insight_engine.services.classifier import detect_document_type
from insight_engine.services.pattern_library import DEFAULT_PATTERNS, PatternLibrary
from insight_engine.services.security_sentinel import redact_for_prompt

# ── Content caps (characters) ───────────────────────────────────────────────

REPOSITORY_CONTENT_CAP = 4000
EXTRACTED_CONTENT_CAP = 8000
GENERIC_CONTENT_CAP = 3000

# ── Prompt templates ────────────────────────────────────────────────────────

SYSTEM_PROMPT = """\
You are an expert technical analyst.  Analyze the provided content and return \
insights in the exact JSON format requested.  Reply with the JSON object only: \
no prose, no markdown fences.\
"""

_JSON_SHAPE = """\
{
  "summary": "<2-3 sentence summary>",
  "keyFeatures": ["<feature>", "..."],
  "technologies": ["<technology>", "..."],
  "useCases": ["<use case>", "..."],
  "mainSections": ["<section>", "..."],
  "complexity": "Low|Medium|High",
  "recommendation": "<specific, actionable recommendation>"
}"""

_OUTPUT_RULES = """\
Return exactly one JSON object with exactly these seven keys and nothing else \
before or after it.  "complexity" must be one of Low, Medium or High.\
"""

_REPOSITORY_TEMPLATE = """\
Analyze this GitHub repository and describe it in this exact JSON format:

{shape}

Repository metadata:
- Name: {name}
- Primary language: {language}
- Stars: {stars}
- Description: {description}{topics}

README (first {cap} characters):
<<<
{content}
>>>

Guidelines:
- Quote actual terms, commands and feature names from the README; do not use \
generic phrases such as "open source project" or "well documented".
- "technologies" must start with "{language}", followed by frameworks and \
tools the README actually mentions.
- "mainSections" should list the README's real headings.
- The recommendation must be specific to this project.

{rules}"""

_EXTRACTED_TEMPLATE = """\
The following text was extracted from the document "{file_name}" \
(it looks like a {doc_type}).  Analyze it and answer in this exact JSON format:

{shape}

Document text (first {cap} characters):
<<<
{content}
>>>

Guidelines:
- Use only facts explicitly present in the text: names, dates, numbers, \
organisations, tools.  Do not invent generic insights.
- "summary" must mention concrete details from the text.
- "mainSections" should list the document's actual headings.
- The recommendation must address this specific {doc_type}.

{rules}"""

_GENERIC_TEMPLATE = """\
Analyze the following {doc_type} content and provide insights in this exact \
JSON format:

{shape}

Content (first {cap} characters):
<<<
{content}
>>>

{rules}"""


# ── Public API ──────────────────────────────────────────────────────────────


def build_prompt(
    content: str,
    classification: ContentClassification,
    metadata: AnalysisMetadata | DocumentMetadata | None = None,
    patterns: PatternLibrary = DEFAULT_PATTERNS,
) -> str:
    """Return the user prompt for *content* under *classification*."""
    text = content.replace(EXTRACTED_CONTENT_MARKER, "").strip()
    doc_type = detect_document_type(text, classification, patterns)

    if classification is ContentClassification.GITHUB_REPOSITORY:
        repo = metadata if isinstance(metadata, AnalysisMetadata) else None
        return _repository_prompt(text, repo)

    document = metadata if isinstance(metadata, DocumentMetadata) else None
    if classification is ContentClassification.EXTRACTED_DOCUMENT:
        return _EXTRACTED_TEMPLATE.format(
            file_name=document.file_name if document else "uploaded document",
            doc_type=_describe(doc_type),
            shape=_JSON_SHAPE,
            cap=EXTRACTED_CONTENT_CAP,
            content=_bounded(text, EXTRACTED_CONTENT_CAP),
            rules=_OUTPUT_RULES,
        )
    return _GENERIC_TEMPLATE.format(
        doc_type=_describe(doc_type),
        shape=_JSON_SHAPE,
        cap=GENERIC_CONTENT_CAP,
        content=_bounded(text, GENERIC_CONTENT_CAP),
        rules=_OUTPUT_RULES,
    )


def _repository_prompt(text: str, repo: AnalysisMetadata | None) -> str:
    topics = f"\n- Topics: {', '.join(repo.topics)}" if repo and repo.topics else ""
    return _REPOSITORY_TEMPLATE.format(
        shape=_JSON_SHAPE,
        name=repo.name if repo else "unknown",
        language=(repo.language if repo and repo.language else "unknown"),
        stars=repo.stars if repo else 0,
        description=(repo.description if repo and repo.description else "none provided"),
        topics=topics,
        cap=REPOSITORY_CONTENT_CAP,
        content=_bounded(text, REPOSITORY_CONTENT_CAP),
        rules=_OUTPUT_RULES,
    )


def _bounded(text: str, cap: int) -> str:
    # Redact before cutting so a secret straddling the cap cannot leak in part.
    return redact_for_prompt(text)[:cap]


def _describe(doc_type: DocumentType) -> str:
    return {
        DocumentType.RESUME: "resume / CV",
        DocumentType.REPORT: "report",
        DocumentType.PROPOSAL: "proposal",
        DocumentType.TECHNICAL: "technical document",
    }.get(doc_type, "document")
