"""
SEO Alignment Analyzer

A semantic alignment scoring tool that:
- Embeds weighted target keywords into a single "topic" vector
- Scores your copy and a competitor's copy against it (whole or per section)
- Reports keyword coverage, section improvements and score predictions
- Optionally rewrites your copy with the recommended keywords
"""

__version__ = "1.0.0"
__author__ = "SEO Alignment Analyzer Team"

from .config import AnalysisConfig

from .models import (
    AnalysisMode,
    AnalysisRequest,
    AnalysisResult,
    DiffSegment,
    DiffType,
    Keyword,
    KeywordCoverage,
    KeywordRole,
    ScorePrediction,
    SectionImprovement,
    SectionKind,
    SegmentScore,
    TextSection,
)

from .errors import (
    AnalysisError,
    DegenerateMathError,
    InvalidInputError,
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitedError,
    ProviderUnavailableError,
)

from .analyzer import SemanticAlignmentAnalyzer, analyze_alignment

from .embeddings import (
    EmbeddingOrchestrator,
    EmbeddingProvider,
    OpenAIEmbeddingProvider,
    SentenceTransformerProvider,
    create_embedding_provider,
)

from .segmenter import chunk_text, count_words, detect_sections, estimate_token_count

from .keyword_loader import KeywordLoadError, load_keywords, parse_keywords

from .prompt_builder import build_enhancement_prompt, enhance_text

from .diff import compute_contextual_diff, get_changes_summary

__all__ = [
    "__version__",
    # Configuration
    "AnalysisConfig",
    # Models
    "AnalysisMode",
    "AnalysisRequest",
    "AnalysisResult",
    "DiffSegment",
    "DiffType",
    "Keyword",
    "KeywordCoverage",
    "KeywordRole",
    "ScorePrediction",
    "SectionImprovement",
    "SectionKind",
    "SegmentScore",
    "TextSection",
    # Errors
    "AnalysisError",
    "DegenerateMathError",
    "InvalidInputError",
    "ProviderAuthError",
    "ProviderError",
    "ProviderRateLimitedError",
    "ProviderUnavailableError",
    # Analysis
    "SemanticAlignmentAnalyzer",
    "analyze_alignment",
    # Embeddings
    "EmbeddingOrchestrator",
    "EmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "SentenceTransformerProvider",
    "create_embedding_provider",
    # Segmentation
    "chunk_text",
    "count_words",
    "detect_sections",
    "estimate_token_count",
    # Keywords
    "KeywordLoadError",
    "load_keywords",
    "parse_keywords",
    # Enhancement
    "build_enhancement_prompt",
    "enhance_text",
    "compute_contextual_diff",
    "get_changes_summary",
]
