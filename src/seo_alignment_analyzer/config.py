# -*- coding: utf-8 -*-
"""
Centralized configuration for the SEO Alignment Analyzer.

This module provides a unified configuration dataclass that controls
segmentation, scoring thresholds, recommendation caps, concurrency and
the provider models used for an analysis run.
"""

from dataclasses import dataclass
from typing import Literal, Optional


# Type alias for analysis mode
# - "full": One embedding per whole document. Fast, coarse.
# - "chunked": One embedding per section. Per-section scores, mean aggregate.
AnalysisModeName = Literal["full", "chunked"]

# Type alias for suggested phrase template selection
# - "cycle": Deterministic, template chosen by keyword index.
# - "random": Random template per keyword (optionally seeded).
PhraseStrategy = Literal["cycle", "random"]

DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_LOCAL_EMBEDDING_MODEL = "all-MiniLM-L6-v2"
DEFAULT_COMPLETION_MODEL = "claude-sonnet-4-20250514"


@dataclass
class AnalysisConfig:
    """
    Central configuration for one analysis run.

    Attributes:
        analysis_mode: "full" or "chunked" (see AnalysisModeName).

        chunk_size_words: Words per fixed window when unstructured text is
            chunked (default 500).
        chunk_overlap_words: Words shared by consecutive windows (default 100).

        max_keywords: Maximum keywords accepted per request.
        min_keyword_weight / max_keyword_weight: Accepted weight range.
        max_text_words / max_text_chars: Size limits for each input text.

        max_concurrency: Upper bound on in-flight embedding requests.

        Section classification (normalized similarity units, not percent):
            strong_multiplier / strong_floor: strong if
                similarity > max(average * strong_multiplier, strong_floor)
            weak_multiplier / weak_floor: weak if
                similarity < max(average * weak_multiplier, weak_floor)
            undercovered_similarity: average below which a keyword counts as
                globally under-covered.

        Recommendations:
            missing_coverage_percent: semantic coverage under which a keyword
                is considered missing from a section.
            max_missing_keywords: cap on missing keywords per section.
            phrase_strategy / phrase_seed: suggested phrase template choice.

        Predictions:
            prediction_coverage_percent: keywords below this coverage (or with
                zero mentions) get a prediction.
            min_suggested_mentions / competitor_mention_factor: suggested
                mention count = max(min, ceil(competitor * factor)).
            max_impact_per_weight: impact ceiling per unit of keyword weight.
            max_predictions: number of predictions retained.
            diminishing_factor: decay applied per keyword in cumulative impact.

        competitor_advantage_ratio: competitor has the advantage when its
            mentions exceed user mentions times this ratio.
    """

    analysis_mode: AnalysisModeName = "full"

    # Segmentation
    chunk_size_words: int = 500
    chunk_overlap_words: int = 100

    # Input limits
    max_keywords: int = 50
    min_keyword_weight: float = 0.1
    max_keyword_weight: float = 10.0
    max_text_words: int = 4000
    max_text_chars: int = 50000

    # Embedding fan-out bound
    max_concurrency: int = 8

    # Section classification
    strong_multiplier: float = 1.2
    strong_floor: float = 0.3
    weak_multiplier: float = 0.8
    weak_floor: float = 0.2
    undercovered_similarity: float = 0.3

    # Recommendations
    missing_coverage_percent: float = 50.0
    max_missing_keywords: int = 3
    phrase_strategy: PhraseStrategy = "cycle"
    phrase_seed: Optional[int] = None

    # Predictions
    prediction_coverage_percent: float = 60.0
    min_suggested_mentions: int = 3
    competitor_mention_factor: float = 0.8
    max_impact_per_weight: float = 10.0
    max_predictions: int = 5
    diminishing_factor: float = 0.8

    competitor_advantage_ratio: float = 1.5

    # Providers (None selects the provider's default embedding model)
    embedding_model: Optional[str] = None
    completion_model: str = DEFAULT_COMPLETION_MODEL
    completion_temperature: float = 0.3
    completion_max_tokens: int = 2000

    @property
    def is_chunked_mode(self) -> bool:
        """Check if sections are embedded individually."""
        return self.analysis_mode == "chunked"

    @property
    def is_full_mode(self) -> bool:
        """Check if each document is embedded as a whole."""
        return self.analysis_mode == "full"

    def __post_init__(self):
        """Validate configuration values."""
        if self.analysis_mode not in ("full", "chunked"):
            raise ValueError(
                f"analysis_mode must be 'full' or 'chunked', got '{self.analysis_mode}'"
            )
        if self.phrase_strategy not in ("cycle", "random"):
            raise ValueError(
                f"phrase_strategy must be 'cycle' or 'random', got '{self.phrase_strategy}'"
            )
        if self.chunk_size_words < 1:
            raise ValueError(f"chunk_size_words must be >= 1, got {self.chunk_size_words}")
        if self.chunk_overlap_words < 0:
            raise ValueError(
                f"chunk_overlap_words must be >= 0, got {self.chunk_overlap_words}"
            )
        if self.chunk_overlap_words >= self.chunk_size_words:
            raise ValueError(
                f"chunk_overlap_words ({self.chunk_overlap_words}) must be < "
                f"chunk_size_words ({self.chunk_size_words})"
            )
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {self.max_concurrency}")
        if self.max_keywords < 1:
            raise ValueError(f"max_keywords must be >= 1, got {self.max_keywords}")
        if not 0 < self.min_keyword_weight <= self.max_keyword_weight:
            raise ValueError(
                f"keyword weight range is invalid: "
                f"[{self.min_keyword_weight}, {self.max_keyword_weight}]"
            )
        if self.max_missing_keywords < 1:
            raise ValueError(
                f"max_missing_keywords must be >= 1, got {self.max_missing_keywords}"
            )
        if self.max_predictions < 1:
            raise ValueError(f"max_predictions must be >= 1, got {self.max_predictions}")
        if not 0 < self.diminishing_factor <= 1:
            raise ValueError(
                f"diminishing_factor must be in (0, 1], got {self.diminishing_factor}"
            )

    @classmethod
    def full(cls, **overrides) -> "AnalysisConfig":
        """Create config for whole-document analysis.

        Args:
            **overrides: Override any config values.

        Returns:
            AnalysisConfig with analysis_mode="full".
        """
        defaults = {"analysis_mode": "full"}
        defaults.update(overrides)
        return cls(**defaults)

    @classmethod
    def chunked(cls, **overrides) -> "AnalysisConfig":
        """Create config for per-section analysis.

        Args:
            **overrides: Override any config values (e.g., chunk_size_words=300).

        Returns:
            AnalysisConfig with analysis_mode="chunked".
        """
        defaults = {"analysis_mode": "chunked"}
        defaults.update(overrides)
        return cls(**defaults)
