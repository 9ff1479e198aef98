"""
Text segmentation for section-level scoring.

Splits a document into titled sections using a tiered strategy, first
successful tier wins:

1. Structural markup: HTML <h1>-<h6> headings, then Markdown # headings.
2. Paragraphs separated by blank lines.
3. A single "Full Content" section.

For chunked analysis of unstructured text a fixed word-window splitter
(default 500 words, 100 words overlap) replaces the single fallback section.

All offsets are character offsets into the source text.
"""

import logging
import math
import re
from typing import Callable, Optional

from .models import SectionKind, TextSection

logger = logging.getLogger(__name__)

HTML_HEADING_PATTERN = re.compile(r"<h([1-6])\b[^>]*>(.*?)</h\1\s*>", re.IGNORECASE | re.DOTALL)
MARKDOWN_HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.+)$", re.MULTILINE)
PARAGRAPH_BREAK_PATTERN = re.compile(r"\n\s*\n")
WORD_PATTERN = re.compile(r"\S+")

TAG_PATTERN = re.compile(r"<[^>]*>")
MARKDOWN_CLOSING_HASHES = re.compile(r"\s+#+\s*$")
MARKDOWN_LINK_PATTERN = re.compile(r"\[([^\]]*)\]\([^)]*\)")
MARKDOWN_EMPHASIS_PATTERN = re.compile(r"[*_`]+")

FULL_CONTENT_TITLE = "Full Content"
DEFAULT_CHUNK_SIZE = 500
DEFAULT_CHUNK_OVERLAP = 100


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    if not text or not text.strip():
        return 0
    return len(text.split())


def estimate_token_count(text: str) -> int:
    """Rough token estimate (1 token per 4 characters of English text)."""
    return math.ceil(len(text) / 4)


def _clean_html_title(raw: str) -> str:
    return " ".join(TAG_PATTERN.sub("", raw).split())


def _clean_markdown_title(raw: str) -> str:
    title = MARKDOWN_CLOSING_HASHES.sub("", raw)
    title = MARKDOWN_LINK_PATTERN.sub(r"\1", title)
    title = MARKDOWN_EMPHASIS_PATTERN.sub("", title)
    return " ".join(TAG_PATTERN.sub("", title).split())


def _sections_from_headings(
    text: str,
    matches: list[re.Match],
    clean_title: Callable[[str], str],
) -> list[TextSection]:
    """
    Build sections from heading matches.

    Each section spans from its heading to the next heading. The first
    section also absorbs any text before the first heading, so every
    character of the document belongs to exactly one span. Section content
    is the span with the heading markup removed.
    """
    sections: list[TextSection] = []

    for index, match in enumerate(matches):
        span_start = 0 if index == 0 else match.start()
        span_end = matches[index + 1].start() if index + 1 < len(matches) else len(text)

        content = (text[span_start:match.start()] + text[match.end():span_end]).strip()
        if not content:
            continue

        title = clean_title(match.group(2)) or f"Section {index + 1}"
        sections.append(TextSection(
            title=title,
            content=content,
            start_offset=span_start,
            end_offset=span_end,
            level=len(match.group(1)) if match.group(1).startswith("#") else int(match.group(1)),
            kind=SectionKind.HEADING,
        ))

    return sections


def detect_html_sections(text: str) -> list[TextSection]:
    """Split on HTML heading elements."""
    matches = list(HTML_HEADING_PATTERN.finditer(text))
    if not matches:
        return []
    return _sections_from_headings(text, matches, _clean_html_title)


def detect_markdown_sections(text: str) -> list[TextSection]:
    """Split on Markdown ATX headings (# through ######)."""
    matches = list(MARKDOWN_HEADING_PATTERN.finditer(text))
    if not matches:
        return []
    return _sections_from_headings(text, matches, _clean_markdown_title)


def detect_paragraph_sections(text: str) -> list[TextSection]:
    """Split on blank lines; returns [] unless at least two paragraphs exist."""
    spans: list[tuple[int, int]] = []
    position = 0
    for match in PARAGRAPH_BREAK_PATTERN.finditer(text):
        spans.append((position, match.start()))
        position = match.end()
    spans.append((position, len(text)))

    paragraphs = [(start, end) for start, end in spans if text[start:end].strip()]
    if len(paragraphs) < 2:
        return []

    return [
        TextSection(
            title=f"Paragraph {index + 1}",
            content=text[start:end].strip(),
            start_offset=start,
            end_offset=end,
            level=1,
            kind=SectionKind.PARAGRAPH,
        )
        for index, (start, end) in enumerate(paragraphs)
    ]


def detect_sections(text: str) -> list[TextSection]:
    """
    Segment a document with the tiered strategy.

    Args:
        text: Raw document text (may contain HTML or Markdown headings).

    Returns:
        Sections in document order. Always at least one section.
    """
    for detector in (detect_html_sections, detect_markdown_sections, detect_paragraph_sections):
        sections = detector(text)
        if len(sections) > 1:
            logger.debug(f"{detector.__name__} produced {len(sections)} sections")
            return sections

    return [TextSection(
        title=FULL_CONTENT_TITLE,
        content=text.strip(),
        start_offset=0,
        end_offset=len(text),
        level=1,
        kind=SectionKind.FALLBACK_CHUNK,
    )]


def chunk_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[TextSection]:
    """
    Split text into fixed word-count windows with overlap.

    Consecutive windows share exactly ``overlap`` words; the last window may
    be shorter. Window content is the words joined by single spaces.

    Args:
        text: Text to split.
        chunk_size: Words per window.
        overlap: Words shared by consecutive windows (must be < chunk_size).

    Returns:
        Windows titled "Chunk N"; empty list for text with no words.
    """
    if overlap >= chunk_size:
        raise ValueError(f"overlap ({overlap}) must be < chunk_size ({chunk_size})")

    words = list(WORD_PATTERN.finditer(text))
    windows: list[TextSection] = []
    start = 0

    while start < len(words):
        end = min(start + chunk_size, len(words))
        window_words = words[start:end]
        windows.append(TextSection(
            title=f"Chunk {len(windows) + 1}",
            content=" ".join(w.group() for w in window_words),
            start_offset=window_words[0].start(),
            end_offset=window_words[-1].end(),
            level=1,
            kind=SectionKind.FALLBACK_CHUNK,
        ))
        if end >= len(words):
            break
        start = end - overlap

    return windows


def segment_for_analysis(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
    sections: Optional[list[TextSection]] = None,
) -> list[TextSection]:
    """
    Produce the analysis units for chunked mode.

    Structured text keeps its heading/paragraph sections. When the tiered
    strategy only yields the single fallback section, the text is split
    into fixed word windows instead.
    """
    sections = sections if sections is not None else detect_sections(text)
    if len(sections) == 1 and sections[0].kind == SectionKind.FALLBACK_CHUNK:
        windows = chunk_text(text, chunk_size, overlap)
        if windows:
            logger.debug(f"Unstructured text split into {len(windows)} fixed windows")
            return windows
    return sections
