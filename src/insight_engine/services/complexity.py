"""Complexity scoring — weighted thresholds over independent signals.

Each signal adds points independently; the total maps onto the closed
:class:`Complexity` scale.  Every weight is non-negative and every threshold is
a lower bound, so more signal never lowers the bucket.
"""

from __future__ import annotations

from dataclasses import dataclass

from insight_engine.domain.entities import Complexity

# ── Thresholds and weights ──────────────────────────────────────────────────

# (exclusive lower bound, points), checked from the highest band down.
_WORD_BANDS: tuple[tuple[int, int], ...] = ((2000, 2), (500, 1))
_TERM_BANDS: tuple[tuple[int, int], ...] = ((4, 2), (1, 1))  # 5+ terms, 2+ terms
_STAR_BANDS: tuple[tuple[int, int], ...] = ((1000, 5), (100, 3))
_REPO_SIZE_KB_BANDS: tuple[tuple[int, int], ...] = ((50_000, 2), (5_000, 1))
_DOC_SIZE_BYTES_BANDS: tuple[tuple[int, int], ...] = ((1024 * 1024, 2), (100 * 1024, 1))
_PAGE_BANDS: tuple[tuple[int, int], ...] = ((20, 2), (5, 1))

MEDIUM_THRESHOLD = 3
HIGH_THRESHOLD = 5


@dataclass(frozen=True, slots=True)
class ComplexitySignals:
    """Inputs to :func:`score_complexity`; unset signals contribute nothing."""

    word_count: int = 0
    complexity_terms: int = 0
    stars: int | None = None
    repo_size_kb: int | None = None
    document_size_bytes: int | None = None
    page_count: int | None = None


def _band_points(value: int | None, bands: tuple[tuple[int, int], ...]) -> int:
    if value is None:
        return 0
    for threshold, points in bands:
        if value > threshold:
            return points
    return 0


def score_complexity(signals: ComplexitySignals) -> int:
    """Return the integer complexity score for *signals*."""
    return (
        _band_points(signals.word_count, _WORD_BANDS)
        + _band_points(signals.complexity_terms, _TERM_BANDS)
        + _band_points(signals.stars, _STAR_BANDS)
        + _band_points(signals.repo_size_kb, _REPO_SIZE_KB_BANDS)
        + _band_points(signals.document_size_bytes, _DOC_SIZE_BYTES_BANDS)
        + _band_points(signals.page_count, _PAGE_BANDS)
    )


def bucket(score: int) -> Complexity:
    """Map a score onto Low (<3), Medium (3–4) or High (≥5)."""
    if score >= HIGH_THRESHOLD:
        return Complexity.HIGH
    if score >= MEDIUM_THRESHOLD:
        return Complexity.MEDIUM
    return Complexity.LOW


def rate_complexity(signals: ComplexitySignals) -> Complexity:
    return bucket(score_complexity(signals))
