"""
Similarity scoring against the keyword centroid.

Turns cosine similarity into percentage scores, aggregates section scores
for chunked mode and writes the templated gap analysis sentence.
"""

from typing import Sequence

from .models import SegmentScore, TextSection
from .vector_math import Vector, clamp, cosine_similarity


def alignment_score(centroid: Vector, embedding: Vector) -> float:
    """
    Score an embedding against the centroid as a percentage.

    Cosine similarity is clamped to [-1, 1] (floating point can overshoot),
    scaled by 100, then clamped to [0, 100] so negative alignment reads as 0.
    Rounded to one decimal place.
    """
    similarity = clamp(cosine_similarity(centroid, embedding), -1.0, 1.0)
    return round(clamp(similarity * 100, 0.0, 100.0), 1)


def score_sections(
    centroid: Vector,
    sections: Sequence[TextSection],
    embeddings: Sequence[Vector],
) -> list[SegmentScore]:
    """Score each section; ``embeddings`` must be aligned with ``sections``."""
    if len(sections) != len(embeddings):
        raise ValueError(
            f"Got {len(embeddings)} embeddings for {len(sections)} sections"
        )
    return [
        SegmentScore(
            title=section.title,
            score=alignment_score(centroid, embedding),
            start_offset=section.start_offset,
            end_offset=section.end_offset,
            text=section.content,
        )
        for section, embedding in zip(sections, embeddings)
    ]


def aggregate_score(section_scores: Sequence[SegmentScore]) -> float:
    """Unweighted mean of section scores, rounded to one decimal (0 if empty)."""
    if not section_scores:
        return 0.0
    return round(sum(s.score for s in section_scores) / len(section_scores), 1)


def generate_gap_analysis(main_score: float, competitor_score: float) -> str:
    """
    Describe how the user's copy compares to the competitor's.

    A gap of exactly zero falls into the "less aligned" branch.
    """
    gap = main_score - competitor_score
    if gap > 0:
        return (
            f"Your copy is {abs(gap):.1f}% more aligned with target keywords than "
            f"competitor content. This indicates strong keyword optimization and "
            f"semantic relevance."
        )
    return (
        f"Your copy is {abs(gap):.1f}% less aligned with target keywords than "
        f"competitor content. Consider improving keyword density and semantic relevance."
    )
