"""Security sentinel — strips credentials out of content before it is prompted.

READMEs and uploaded documents regularly contain pasted keys, and every prompt
leaves for a third-party provider.  Matches are replaced, never echoed: logs
only ever name the *kind* of secret removed.  Over-redaction is acceptable.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"

# Order matters where patterns overlap: "sk-ant-..." must be claimed before
# the broader OpenAI "sk-..." shape.
_SECRET_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (label, re.compile(pattern, flags))
    for label, pattern, flags in (
        ("ANTHROPIC_KEY", r"\bsk-ant-[\w\-]{20,}", 0),
        ("OPENAI_KEY", r"\bsk-(?:proj-)?[\w\-]{20,}", 0),
        ("GOOGLE_KEY", r"\bAIza[\w\-]{35}", 0),
        ("HF_TOKEN", r"\bhf_[A-Za-z0-9]{30,}", 0),
        ("GROQ_KEY", r"\bgsk_[A-Za-z0-9]{40,}", 0),
        ("GITHUB_TOKEN", r"\b(?:gh[pousr]_\w{36,}|github_pat_\w{40,})", 0),
        ("AWS_KEY", r"\b(?:AKIA|ASIA)[0-9A-Z]{16}\b", 0),
        ("SLACK_TOKEN", r"\bxox[abprs]-[\w\-]{10,}", 0),
        ("PRIVATE_KEY", r"-----BEGIN (?:RSA |EC |DSA |OPENSSH |PGP )?PRIVATE KEY(?: BLOCK)?-----", 0),
        ("JWT", r"eyJ[\w\-]{10,}\.[\w\-]{10,}\.[\w\-]{10,}", 0),
        (
            "CONN_STRING",
            r"\b(?:postgres(?:ql)?|mysql|mongodb(?:\+srv)?|redis|amqp)://[^\s:@/]+:[^\s@/]+@\S+",
            re.IGNORECASE,
        ),
        ("BEARER", r"\bBearer\s+[\w\-/.=]{20,}", re.IGNORECASE),
        (
            "GENERIC_KEY",
            r"\b(?:api[_\-]?key|secret[_\-]?key|access[_\-]?token|auth[_\-]?token|client[_\-]?secret)"
            r"""\s*[:=]\s*['"]?[\w\-/+]{16,}['"]?""",
            re.IGNORECASE,
        ),
        (
            "PASSWORD",
            r"""\b(?:password|passwd|pwd|secret)\s*[:=]\s*['"]?[^\s'"]{8,}['"]?""",
            re.IGNORECASE,
        ),
    )
)


@dataclass(frozen=True, slots=True)
class SanitizedResult:
    clean_text: str
    redaction_count: int
    labels: tuple[str, ...] = ()


def sanitize(text: str) -> SanitizedResult:
    """Replace every secret-looking span in *text* with :data:`REDACTED`."""
    total = 0
    labels: list[str] = []
    for label, pattern in _SECRET_PATTERNS:
        text, hits = pattern.subn(REDACTED, text)
        if hits:
            total += hits
            labels.append(label)
    return SanitizedResult(clean_text=text, redaction_count=total, labels=tuple(labels))


def redact_for_prompt(text: str) -> str:
    result = sanitize(text)
    if result.redaction_count:
        logger.warning(
            "Redacted %d potential secret(s) before prompting: %s",
            result.redaction_count,
            ", ".join(result.labels),
        )
    return result.clean_text
