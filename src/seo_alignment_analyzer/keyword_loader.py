"""
Keyword list loading and parsing.

This module handles ingestion of keyword data from:
- Inline text ("keyword" or "keyword:weight", comma or newline separated)
- CSV files
- Excel files (.xlsx, .xls)
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from .config import AnalysisConfig
from .errors import InvalidInputError
from .models import Keyword, KeywordRole

logger = logging.getLogger(__name__)


class KeywordLoadError(InvalidInputError):
    """Raised when keyword loading fails."""
    pass


WEIGHTED_KEYWORD_PATTERN = re.compile(r"^(.+?):(\d*\.?\d+)$")
KEYWORD_SEPARATOR_PATTERN = re.compile(r"[,\n]")

# Common column name variations for keyword data
KEYWORD_COLUMN_VARIANTS = ["keyword", "keywords", "term", "terms", "query", "queries", "phrase"]
WEIGHT_COLUMN_VARIANTS = ["weight", "weights", "importance", "priority_weight"]
ROLE_COLUMN_VARIANTS = ["role", "type", "keyword_type", "is_main"]


def parse_keywords(text: str, config: Optional[AnalysisConfig] = None) -> list[Keyword]:
    """
    Parse free-form keyword input.

    Entries are separated by commas or newlines. An entry may carry a weight
    as "keyword:weight"; weights outside the configured range fall back to 1.
    Only the first ``max_keywords`` entries are kept.

    Args:
        text: Raw keyword input.
        config: Supplies the weight range and keyword cap.

    Returns:
        Parsed keywords (possibly empty).
    """
    config = config or AnalysisConfig()
    if not text or not text.strip():
        return []

    keywords: list[Keyword] = []
    for entry in KEYWORD_SEPARATOR_PATTERN.split(text):
        entry = entry.strip()
        if not entry:
            continue

        match = WEIGHTED_KEYWORD_PATTERN.match(entry)
        if not match:
            keywords.append(Keyword(text=entry))
            continue

        phrase = match.group(1).strip()
        if not phrase:
            continue
        weight = float(match.group(2))
        if config.min_keyword_weight <= weight <= config.max_keyword_weight:
            keywords.append(Keyword(text=phrase, weight=weight))
        else:
            logger.debug(f"Weight {weight} for '{phrase}' out of range; using 1.0")
            keywords.append(Keyword(text=phrase))

    return keywords[:config.max_keywords]


def role_to_weight(value: str) -> Optional[float]:
    """
    Map a role cell ("main", "primary", "supporting", ...) onto a weight.

    Returns None when the value is not a recognized role.
    """
    normalized = str(value).strip().lower()
    if normalized in ("main", "primary", "true", "yes", "1", "y"):
        return KeywordRole.MAIN.weight
    if normalized in ("supporting", "secondary", "false", "no", "0", "n"):
        return KeywordRole.SUPPORTING.weight
    return None


def _normalize_column_name(name: str) -> str:
    """Normalize column name for matching."""
    return str(name).lower().strip().replace(" ", "_").replace("-", "_")


def _find_column(df: pd.DataFrame, variants: list[str]) -> Optional[str]:
    """
    Find a column in the DataFrame matching one of the variant names.

    Args:
        df: The DataFrame to search.
        variants: List of possible column name variants.

    Returns:
        The actual column name if found, None otherwise.
    """
    normalized_columns = {_normalize_column_name(col): col for col in df.columns}

    for variant in variants:
        normalized = _normalize_column_name(variant)
        if normalized in normalized_columns:
            return normalized_columns[normalized]

    return None


def load_keywords_from_csv(file_path: Union[str, Path]) -> list[Keyword]:
    """
    Load keywords from a CSV file.

    Raises:
        KeywordLoadError: If the file cannot be read or parsed.
    """
    path = Path(file_path)

    if not path.exists():
        raise KeywordLoadError(f"File not found: {file_path}")

    try:
        df = pd.read_csv(path, encoding="utf-8")
    except UnicodeDecodeError:
        # Try alternative encoding
        try:
            df = pd.read_csv(path, encoding="latin-1")
        except Exception as e:
            raise KeywordLoadError(f"Failed to read CSV file: {e}") from e
    except Exception as e:
        raise KeywordLoadError(f"Failed to read CSV file: {e}") from e

    return _parse_keyword_dataframe(df)


def load_keywords_from_excel(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> list[Keyword]:
    """
    Load keywords from an Excel file.

    Args:
        file_path: Path to the Excel file (.xlsx or .xls).
        sheet_name: Optional sheet name to read from. Defaults to first sheet.

    Raises:
        KeywordLoadError: If the file cannot be read or parsed.
    """
    path = Path(file_path)

    if not path.exists():
        raise KeywordLoadError(f"File not found: {file_path}")

    try:
        if sheet_name:
            df = pd.read_excel(path, sheet_name=sheet_name)
        else:
            df = pd.read_excel(path)
    except Exception as e:
        raise KeywordLoadError(f"Failed to read Excel file: {e}") from e

    return _parse_keyword_dataframe(df)


def _parse_keyword_dataframe(df: pd.DataFrame) -> list[Keyword]:
    """
    Parse a DataFrame into a list of Keyword objects.

    An explicit weight column wins over a role column; rows with neither
    get weight 1.0.

    Raises:
        KeywordLoadError: If required columns are missing.
    """
    if df.empty:
        raise KeywordLoadError("Keyword file is empty")

    keyword_col = _find_column(df, KEYWORD_COLUMN_VARIANTS)
    if keyword_col is None:
        raise KeywordLoadError(
            f"No keyword column found. Expected one of: {', '.join(KEYWORD_COLUMN_VARIANTS)}. "
            f"Found columns: {', '.join(str(c) for c in df.columns)}"
        )

    weight_col = _find_column(df, WEIGHT_COLUMN_VARIANTS)
    role_col = _find_column(df, ROLE_COLUMN_VARIANTS)

    keywords: list[Keyword] = []

    for _, row in df.iterrows():
        phrase = row[keyword_col]
        if pd.isna(phrase) or not str(phrase).strip():
            continue
        phrase = str(phrase).strip()

        weight: Optional[float] = None
        if weight_col and not pd.isna(row[weight_col]):
            try:
                weight = float(row[weight_col])
            except (ValueError, TypeError):
                logger.warning(f"Ignoring non-numeric weight for '{phrase}': {row[weight_col]}")

        if weight is None and role_col and not pd.isna(row[role_col]):
            weight = role_to_weight(row[role_col])

        keywords.append(Keyword(text=phrase, weight=weight if weight is not None else 1.0))

    if not keywords:
        raise KeywordLoadError("No valid keywords found in file")

    return keywords


def load_keywords(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> list[Keyword]:
    """
    Load keywords from a CSV or Excel file.

    Automatically detects file type based on extension.

    Raises:
        KeywordLoadError: If the file cannot be read or is invalid.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        return load_keywords_from_csv(path)
    elif suffix in (".xlsx", ".xls"):
        return load_keywords_from_excel(path, sheet_name)
    else:
        raise KeywordLoadError(
            f"Unsupported file format: {suffix}. Supported formats: .csv, .xlsx, .xls"
        )

