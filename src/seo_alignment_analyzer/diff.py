"""
Word-level contextual diff between original and enhanced text.

Shows users which words the enhancement added, with a few words of the
original text on either side, and attributes each insertion to a
recommended keyword where one appears in it.
"""

import logging
from difflib import SequenceMatcher
from typing import Optional, Sequence

from .models import DiffSegment, DiffType, SectionImprovement

logger = logging.getLogger(__name__)

CONTEXT_WORDS = 5


def _tokenize(text: str) -> list[str]:
    return text.split()


def _find_added_keyword(
    added_text: str,
    improvements: Sequence[SectionImprovement],
) -> Optional[str]:
    """Return the first recommended keyword contained in the added text."""
    lowered = added_text.lower()
    for improvement in improvements:
        for keyword in improvement.missing_keywords:
            if keyword.lower() in lowered:
                return keyword
    return None


def compute_contextual_diff(
    original: str,
    enhanced: str,
    improvements: Sequence[SectionImprovement] = (),
    context_words: int = CONTEXT_WORDS,
) -> list[DiffSegment]:
    """
    Diff two texts word by word.

    Args:
        original: Text before enhancement.
        enhanced: Text after enhancement.
        improvements: Recommendations used to attribute insertions.
        context_words: Words of original text kept around each insertion.

    Returns:
        Segments in document order. Replacements appear as a removed
        segment followed by an added one.
    """
    original_words = _tokenize(original)
    enhanced_words = _tokenize(enhanced)
    matcher = SequenceMatcher(None, original_words, enhanced_words, autojunk=False)

    segments: list[DiffSegment] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            segments.append(DiffSegment(DiffType.UNCHANGED, " ".join(original_words[i1:i2])))
            continue

        if tag in ("delete", "replace"):
            segments.append(DiffSegment(DiffType.REMOVED, " ".join(original_words[i1:i2])))

        if tag in ("insert", "replace"):
            added_text = " ".join(enhanced_words[j1:j2])
            keyword = _find_added_keyword(added_text, improvements)
            segments.append(DiffSegment(
                diff_type=DiffType.ADDED,
                text=added_text,
                context_before=" ".join(original_words[max(0, i1 - context_words):i1]),
                context_after=" ".join(original_words[i2:i2 + context_words]),
                keyword_added=keyword,
                reason=(
                    f'Added "{keyword}" to improve section score'
                    if keyword else "Content enhancement"
                ),
            ))

    logger.debug(f"Computed diff with {len(segments)} segments")
    return segments


def get_changes_summary(segments: Sequence[DiffSegment]) -> dict:
    """
    Summarize a contextual diff.

    Returns:
        Dict with insertion/removal counts, word totals and the keywords
        attributed to insertions (first occurrence order).
    """
    added = [s for s in segments if s.diff_type == DiffType.ADDED]
    removed = [s for s in segments if s.diff_type == DiffType.REMOVED]

    keywords: list[str] = []
    for segment in added:
        if segment.keyword_added and segment.keyword_added not in keywords:
            keywords.append(segment.keyword_added)

    return {
        "insertions": len(added),
        "removals": len(removed),
        "words_added": sum(len(s.text.split()) for s in added),
        "words_removed": sum(len(s.text.split()) for s in removed),
        "keywords_added": keywords,
    }
