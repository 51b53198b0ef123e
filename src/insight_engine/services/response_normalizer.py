"""Response normalizer — recovers an Insight from raw backend text.

Models wrap JSON in prose, markdown fences or both.  Strategies are tried in
order and the first one yielding a JSON *object* wins:

1. the whole text,
2. the greedy span from the first ``{`` to the last ``}``,
3. the body of a fenced code block.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable

from insight_engine.domain.entities import Insight
from insight_engine.domain.exceptions import NormalizationError

logger = logging.getLogger(__name__)

_BRACES_RE = re.compile(r"\{.*\}", re.DOTALL)
_FENCE_RE = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\n?(.*?)```", re.DOTALL)


def _whole_text(raw: str) -> str | None:
    return raw.strip()


def _brace_span(raw: str) -> str | None:
    match = _BRACES_RE.search(raw)
    return match.group(0) if match else None


def _fenced_block(raw: str) -> str | None:
    match = _FENCE_RE.search(raw)
    return match.group(1).strip() if match else None


_STRATEGIES: list[tuple[str, Callable[[str], str | None]]] = [
    ("whole-text", _whole_text),
    ("brace-span", _brace_span),
    ("fenced-block", _fenced_block),
]


def parse_json_object(raw: str) -> dict[str, Any]:
    """Return the first JSON object recoverable from *raw*.

    Raises :class:`NormalizationError` when every strategy fails.
    """
    for name, strategy in _STRATEGIES:
        candidate = strategy(raw)
        if not candidate:
            continue
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            logger.debug("Backend answer parsed via %s strategy", name)
            return data
    raise NormalizationError(
        f"Backend answer is not a JSON object: {raw[:200]!r}"
    )


def normalize_response(raw: str) -> Insight:
    """Parse *raw* backend text and fill any missing field with its default."""
    return Insight.from_mapping(parse_json_object(raw))
