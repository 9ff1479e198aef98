"""Tests for document segmentation."""

import pytest

from seo_alignment_analyzer.models import SectionKind
from seo_alignment_analyzer.segmenter import (
    FULL_CONTENT_TITLE,
    chunk_text,
    count_words,
    detect_sections,
    estimate_token_count,
    segment_for_analysis,
)


def _numbered_words(count: int) -> str:
    return " ".join(f"w{i}" for i in range(count))


class TestDetectSections:
    """Tests for the tiered section detection."""

    def test_html_headings(self):
        text = (
            "<h2>Intro</h2><p>Alpha beta.</p>"
            "<h2>Details</h2><p>Gamma delta.</p>"
            "<h2>Wrap <em>Up</em></h2><p>Epsilon.</p>"
        )
        sections = detect_sections(text)

        assert [s.title for s in sections] == ["Intro", "Details", "Wrap Up"]
        assert all(s.kind == SectionKind.HEADING for s in sections)
        assert all(s.level == 2 for s in sections)
        assert "Alpha beta." in sections[0].content
        assert "<h2>" not in sections[0].content

    def test_sections_tile_the_document(self):
        """Spans are contiguous from offset 0 to the end of the text."""
        text = "<h1>One</h1><p>a</p><h2>Two</h2><p>b</p><h2>Three</h2><p>c</p>"
        sections = detect_sections(text)

        assert sections[0].start_offset == 0
        for current, following in zip(sections, sections[1:]):
            assert current.end_offset == following.start_offset
        assert sections[-1].end_offset == len(text)

    def test_markdown_headings(self):
        text = "# Title\n\nIntro text.\n\n## Part A\n\nText A.\n\n## Part B\n\nText B."
        sections = detect_sections(text)

        assert [s.title for s in sections] == ["Title", "Part A", "Part B"]
        assert [s.level for s in sections] == [1, 2, 2]
        assert sections[1].content == "Text A."

    def test_preamble_joins_first_section(self):
        text = "Lead paragraph.\n\n# First\n\nBody one.\n\n# Second\n\nBody two."
        sections = detect_sections(text)

        assert sections[0].title == "First"
        assert sections[0].start_offset == 0
        assert "Lead paragraph." in sections[0].content
        assert "Body one." in sections[0].content

    def test_paragraphs(self):
        text = "First para.\n\nSecond para.\n\n\nThird para.\n  \nFourth para."
        sections = detect_sections(text)

        assert [s.title for s in sections] == [
            "Paragraph 1", "Paragraph 2", "Paragraph 3", "Paragraph 4",
        ]
        assert all(s.kind == SectionKind.PARAGRAPH for s in sections)
        for section in sections:
            assert text[section.start_offset:section.end_offset].strip() == section.content

    def test_fallback_full_content(self):
        text = "Just one paragraph with a handful of words."
        sections = detect_sections(text)

        assert len(sections) == 1
        assert sections[0].title == FULL_CONTENT_TITLE
        assert sections[0].kind == SectionKind.FALLBACK_CHUNK
        assert sections[0].start_offset == 0
        assert sections[0].end_offset == len(text)


class TestChunkText:
    """Tests for fixed word windows."""

    def test_window_count_and_overlap(self):
        windows = chunk_text(_numbered_words(1200), chunk_size=500, overlap=100)

        assert [w.title for w in windows] == ["Chunk 1", "Chunk 2", "Chunk 3"]
        assert [w.word_count for w in windows] == [500, 500, 400]
        for current, following in zip(windows, windows[1:]):
            assert current.content.split()[-100:] == following.content.split()[:100]

    def test_offsets_are_character_offsets(self):
        text = _numbered_words(30)
        windows = chunk_text(text, chunk_size=10, overlap=2)

        for window in windows:
            assert text[window.start_offset:window.end_offset] == window.content

    def test_short_text_single_window(self):
        windows = chunk_text("only a few words", chunk_size=500, overlap=100)
        assert len(windows) == 1
        assert windows[0].content == "only a few words"

    def test_empty_text(self):
        assert chunk_text("   ") == []

    def test_overlap_must_be_smaller_than_size(self):
        with pytest.raises(ValueError):
            chunk_text("a b c", chunk_size=10, overlap=10)


class TestSegmentForAnalysis:
    """Tests for chunked-mode analysis units."""

    def test_unstructured_text_is_windowed(self):
        units = segment_for_analysis(_numbered_words(1200), chunk_size=500, overlap=100)
        assert len(units) == 3
        assert units[0].title == "Chunk 1"

    def test_structured_text_keeps_sections(self, main_text: str):
        units = segment_for_analysis(main_text)
        assert [u.title for u in units] == ["SEO Basics", "Writing Content", "Measuring Results"]


class TestCounting:
    """Tests for word and token estimates."""

    def test_count_words(self):
        assert count_words("  a b\n c ") == 3
        assert count_words("") == 0

    def test_estimate_token_count(self):
        assert estimate_token_count("abcde") == 2
        assert estimate_token_count("") == 0
