"""
Pytest fixtures and configuration for SEO Alignment Analyzer tests.
"""

from pathlib import Path

import pytest
from docx import Document

from fakes import FakeCompletionProvider, FakeEmbeddingProvider
from seo_alignment_analyzer.models import Keyword


MAIN_TEXT = """# SEO Basics

SEO helps pages rank. Good SEO starts with research.

## Writing Content

Content should answer questions clearly. SEO and content work together.

## Measuring Results

Track rankings and traffic every month. Adjust your SEO plan."""

COMPETITOR_TEXT = (
    "Our agency offers SEO services. We write content and more content for "
    "clients. Content matters. Content wins."
)


@pytest.fixture
def fake_provider() -> FakeEmbeddingProvider:
    """Deterministic embedding provider."""
    return FakeEmbeddingProvider()


@pytest.fixture
def fake_completion() -> FakeCompletionProvider:
    """Completion provider returning a fixed rewrite."""
    return FakeCompletionProvider(response="Enhanced text about SEO.")


@pytest.fixture
def keywords() -> list[Keyword]:
    """Weighted keywords used across analysis tests."""
    return [Keyword("seo", 3.0), Keyword("content", 1.0)]


@pytest.fixture
def main_text() -> str:
    """Markdown copy with three headed sections."""
    return MAIN_TEXT


@pytest.fixture
def competitor_text() -> str:
    """Unstructured competitor copy."""
    return COMPETITOR_TEXT


@pytest.fixture
def sample_keywords_csv(tmp_path: Path) -> Path:
    """Create a sample keywords CSV file."""
    csv_path = tmp_path / "keywords.csv"
    csv_path.write_text(
        "keyword,weight\n"
        "seo,3\n"
        "content marketing,1.5\n"
        "link building,\n"
    )
    return csv_path


@pytest.fixture
def sample_keywords_excel(tmp_path: Path) -> Path:
    """Create a sample keywords Excel file with a role column."""
    import pandas as pd

    xlsx_path = tmp_path / "keywords.xlsx"
    df = pd.DataFrame({
        "Keyword": ["seo", "backlinks", "serp"],
        "Role": ["main", "supporting", "secondary"],
    })
    df.to_excel(xlsx_path, index=False)
    return xlsx_path


@pytest.fixture
def sample_docx(tmp_path: Path) -> Path:
    """Create a sample Word document."""
    docx_path = tmp_path / "sample.docx"
    doc = Document()

    doc.add_heading("SEO Guide", level=1)
    doc.add_paragraph("Search engine optimization brings organic traffic.")
    doc.add_heading("Keyword Research", level=2)
    doc.add_paragraph("Start with search intent and search volume.")

    doc.save(str(docx_path))
    return docx_path


@pytest.fixture
def sample_html_content() -> str:
    """Sample HTML page for extraction tests."""
    return """<!DOCTYPE html>
<html>
<head><title>SEO Guide</title><style>body { color: red; }</style></head>
<body>
<nav><a href="/">Home</a></nav>
<main>
  <h1>SEO Guide</h1>
  <p>Search engine optimization brings organic traffic.</p>
  <h2>Link Building</h2>
  <ul><li>Earn backlinks from relevant sites</li></ul>
  <script>var tracking = true;</script>
</main>
<footer>Copyright</footer>
</body>
</html>"""
