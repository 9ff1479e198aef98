"""
Content extraction from various sources (URLs, Word documents and text files).

This module turns a source into plain analysis text while keeping heading
structure visible to the segmenter:
- Web URLs: headings are emitted as <hN> tags, body blocks as paragraphs
- Word documents (.docx): heading styles become markdown "#" headings
- Text files (.txt, .md, .html): read as-is
"""

import logging
import re
from pathlib import Path
from typing import Union
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from docx import Document

from .errors import InvalidInputError

logger = logging.getLogger(__name__)


# Default headers for web requests
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

TEXT_SUFFIXES = (".txt", ".md", ".markdown", ".html", ".htm")
HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
BLOCK_TAGS = HEADING_TAGS + ["p", "li", "blockquote", "td"]
META_CHARSET_PATTERN = re.compile(r'<meta[^>]+charset=["\']?([^"\'>\s;]+)', re.I)


class ContentExtractionError(InvalidInputError):
    """Raised when content extraction fails."""
    pass


def _decode_html_safely(response: requests.Response) -> str:
    """
    Decode an HTTP response body.

    Tries the Content-Type charset, then a <meta charset> in the first 8KB,
    then UTF-8 with replacement characters.
    """
    content_bytes = response.content

    content_type = response.headers.get("Content-Type", "")
    if "charset=" in content_type.lower():
        charset = content_type.lower().split("charset=")[-1].split(";")[0].strip().strip("\"'")
        try:
            return content_bytes.decode(charset)
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"Header charset {charset} failed: {e}")

    head_text = content_bytes[:8192].decode("ascii", errors="ignore")
    match = META_CHARSET_PATTERN.search(head_text)
    if match:
        charset = match.group(1)
        try:
            return content_bytes.decode(charset)
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"Meta charset {charset} failed: {e}")

    return content_bytes.decode("utf-8", errors="replace")


def html_to_text(html: str) -> str:
    """
    Reduce an HTML page to analysis text.

    Headings keep their <hN> markup so heading-based segmentation still
    works; every other block becomes a plain paragraph.
    """
    soup = BeautifulSoup(html, "lxml")

    for tag in soup.find_all(["script", "style", "noscript", "iframe", "nav", "footer"]):
        tag.decompose()

    source = soup.find("main") or soup.find("article") or soup.body or soup

    blocks: list[str] = []
    for element in source.find_all(BLOCK_TAGS):
        # Nested blocks (p inside li, etc.) are emitted by their innermost tag
        if element.find(BLOCK_TAGS):
            continue
        text = " ".join(element.get_text(separator=" ", strip=True).split())
        if not text:
            continue
        if element.name in HEADING_TAGS:
            blocks.append(f"<{element.name}>{text}</{element.name}>")
        else:
            blocks.append(text)

    return "\n\n".join(blocks)


def fetch_url_text(url: str, timeout: int = 30) -> str:
    """
    Fetch a web page and extract its text.

    Raises:
        ContentExtractionError: If fetching or parsing fails.
    """
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ContentExtractionError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, headers=DEFAULT_HEADERS, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise ContentExtractionError(f"Failed to fetch URL: {e}") from e

    text = html_to_text(_decode_html_safely(response))
    if not text.strip():
        raise ContentExtractionError(f"No readable content found at {url}")

    logger.info(f"Extracted {len(text.split())} words from {url}")
    return text


def _docx_heading_level(style_name: str) -> int:
    """Return 1-6 for heading styles, 0 for body text."""
    if style_name == "Title":
        return 1
    if style_name.startswith("Heading"):
        try:
            level = int(style_name.replace("Heading", "").strip())
        except ValueError:
            return 0
        if 1 <= level <= 6:
            return level
    return 0


def load_docx_text(file_path: Union[str, Path]) -> str:
    """
    Load a Word document as markdown-flavored text.

    Raises:
        ContentExtractionError: If the file cannot be read or parsed.
    """
    path = Path(file_path)

    if not path.exists():
        raise ContentExtractionError(f"File not found: {file_path}")

    try:
        doc = Document(str(path))
    except Exception as e:
        raise ContentExtractionError(f"Failed to open Word document: {e}") from e

    blocks: list[str] = []
    for para in doc.paragraphs:
        text = para.text.strip()
        if not text:
            continue
        level = _docx_heading_level(para.style.name if para.style is not None else "")
        blocks.append(f"{'#' * level} {text}" if level else text)

    return "\n\n".join(blocks)


def load_text(source: str) -> str:
    """
    Load analysis text from a URL, a .docx file or a plain text file.

    Args:
        source: URL or file path.

    Returns:
        Extracted text.

    Raises:
        ContentExtractionError: If the source is invalid or cannot be loaded.
    """
    parsed = urlparse(source)
    if parsed.scheme in ("http", "https"):
        return fetch_url_text(source)

    path = Path(source)
    suffix = path.suffix.lower()
    if suffix == ".docx":
        return load_docx_text(path)

    if suffix in TEXT_SUFFIXES:
        if not path.exists():
            raise ContentExtractionError(f"File not found: {source}")
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ContentExtractionError(f"Failed to read {source}: {e}") from e

    raise ContentExtractionError(
        f"Invalid source: {source}. Must be a URL (http/https), a .docx file "
        f"or a text file ({', '.join(TEXT_SUFFIXES)})."
    )
