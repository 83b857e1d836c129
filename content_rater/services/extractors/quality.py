"""Deterministic quality scoring for extraction results."""

from __future__ import annotations


def calculate_quality_score(
    has_structured_data: bool,
    content_length: int,
    has_metadata: bool,
    has_description: bool,
) -> float:
    """Score an extraction from its signals.

    Thresholds are strict (``>``): 100 characters scores nothing, 101 scores
    0.1. The result is capped at 1.0.

    Args:
        has_structured_data: Whether JSON-LD or meta-tag data was found
        content_length: Length of the sanitized content
        has_metadata: Whether an author or published date was found
        has_description: Whether a description was found

    Returns:
        Score in [0.0, 1.0]
    """
    score = 0.0

    if has_structured_data:
        score += 0.3

    if content_length > 500:
        score += 0.3
    elif content_length > 200:
        score += 0.2
    elif content_length > 100:
        score += 0.1

    if has_metadata:
        score += 0.2
    if has_description:
        score += 0.2

    return min(round(score, 2), 1.0)
