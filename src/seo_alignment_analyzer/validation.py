"""
Request validation.

Rejects malformed analysis requests before any embedding call is made.
"""

import math
from typing import Optional

from .config import AnalysisConfig
from .errors import InvalidInputError
from .models import AnalysisRequest
from .segmenter import count_words


def _validate_text(label: str, text: str, config: AnalysisConfig) -> None:
    if not isinstance(text, str) or not text.strip():
        raise InvalidInputError(f"{label} must not be empty")
    if len(text) > config.max_text_chars:
        raise InvalidInputError(
            f"{label} is too long: {len(text)} characters (max {config.max_text_chars})"
        )
    words = count_words(text)
    if words > config.max_text_words:
        raise InvalidInputError(
            f"{label} is too long: {words} words (max {config.max_text_words})"
        )


def validate_request(request: AnalysisRequest, config: Optional[AnalysisConfig] = None) -> None:
    """
    Check keyword list and texts against the configured limits.

    Raises:
        InvalidInputError: Describing the first problem found.
    """
    config = config or AnalysisConfig()
    keywords = request.keywords

    if not keywords:
        raise InvalidInputError("At least one keyword is required")
    if len(keywords) > config.max_keywords:
        raise InvalidInputError(
            f"Too many keywords: {len(keywords)} (max {config.max_keywords})"
        )

    for index, keyword in enumerate(keywords, start=1):
        if not keyword.text or not keyword.text.strip():
            raise InvalidInputError(f"Keyword {index} is empty")
        weight = keyword.weight
        if (
            not isinstance(weight, (int, float))
            or not math.isfinite(weight)
            or not config.min_keyword_weight <= weight <= config.max_keyword_weight
        ):
            raise InvalidInputError(
                f"Keyword '{keyword.text}' has weight {weight}; expected "
                f"{config.min_keyword_weight}-{config.max_keyword_weight}"
            )

    _validate_text("Main text", request.main_text, config)
    _validate_text("Competitor text", request.competitor_text, config)
