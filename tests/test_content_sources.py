"""Tests for content extraction."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from seo_alignment_analyzer.content_sources import (
    ContentExtractionError,
    fetch_url_text,
    html_to_text,
    load_docx_text,
    load_text,
)
from seo_alignment_analyzer.segmenter import detect_sections


def _response(body: str, content_type: str = "text/html; charset=utf-8") -> MagicMock:
    response = MagicMock()
    response.content = body.encode("utf-8")
    response.headers = {"Content-Type": content_type}
    response.raise_for_status.return_value = None
    return response


class TestHtmlToText:
    """Tests for html_to_text."""

    def test_keeps_headings_and_drops_chrome(self, sample_html_content: str):
        text = html_to_text(sample_html_content)

        assert text == (
            "<h1>SEO Guide</h1>\n\n"
            "Search engine optimization brings organic traffic.\n\n"
            "<h2>Link Building</h2>\n\n"
            "Earn backlinks from relevant sites"
        )

    def test_output_segments_on_headings(self, sample_html_content: str):
        sections = detect_sections(html_to_text(sample_html_content))
        assert [s.title for s in sections] == ["SEO Guide", "Link Building"]


class TestFetchUrlText:
    """Tests for fetch_url_text."""

    def test_fetches_and_extracts(self, sample_html_content: str):
        with patch("seo_alignment_analyzer.content_sources.requests.get") as mock_get:
            mock_get.return_value = _response(sample_html_content)
            text = fetch_url_text("https://example.com/guide")

        assert "<h2>Link Building</h2>" in text
        assert mock_get.call_args.args[0] == "https://example.com/guide"

    def test_meta_charset_used_without_header(self):
        html = '<html><head><meta charset="utf-8"></head><body><p>Café culture</p></body></html>'
        with patch("seo_alignment_analyzer.content_sources.requests.get") as mock_get:
            mock_get.return_value = _response(html, content_type="text/html")
            assert fetch_url_text("https://example.com") == "Café culture"

    def test_request_failure(self):
        with patch("seo_alignment_analyzer.content_sources.requests.get") as mock_get:
            mock_get.side_effect = requests.ConnectionError("down")
            with pytest.raises(ContentExtractionError, match="Failed to fetch URL"):
                fetch_url_text("https://example.com")

    def test_empty_page(self):
        with patch("seo_alignment_analyzer.content_sources.requests.get") as mock_get:
            mock_get.return_value = _response("<html><body></body></html>")
            with pytest.raises(ContentExtractionError, match="No readable content"):
                fetch_url_text("https://example.com")

    def test_invalid_url(self):
        with pytest.raises(ContentExtractionError, match="Invalid URL"):
            fetch_url_text("example.com/no-scheme")


class TestLoadDocxText:
    """Tests for Word document loading."""

    def test_headings_become_markdown(self, sample_docx: Path):
        text = load_docx_text(sample_docx)

        assert text == (
            "# SEO Guide\n\n"
            "Search engine optimization brings organic traffic.\n\n"
            "## Keyword Research\n\n"
            "Start with search intent and search volume."
        )

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ContentExtractionError, match="File not found"):
            load_docx_text(tmp_path / "missing.docx")


class TestLoadText:
    """Tests for source dispatch."""

    def test_text_file(self, tmp_path: Path):
        path = tmp_path / "copy.md"
        path.write_text("# Title\n\nBody", encoding="utf-8")
        assert load_text(str(path)) == "# Title\n\nBody"

    def test_docx_file(self, sample_docx: Path):
        assert load_text(str(sample_docx)).startswith("# SEO Guide")

    def test_missing_text_file(self, tmp_path: Path):
        with pytest.raises(ContentExtractionError, match="File not found"):
            load_text(str(tmp_path / "missing.txt"))

    def test_unsupported_source(self):
        with pytest.raises(ContentExtractionError, match="Invalid source"):
            load_text("ftp://example.com/file")
