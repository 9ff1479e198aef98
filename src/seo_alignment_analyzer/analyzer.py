"""
Semantic alignment analysis for SEO Alignment Analyzer.

This module runs one complete analysis:
- Embeds the keywords and builds their weighted centroid
- Scores the user's and the competitor's text (whole documents or sections)
- Computes keyword coverage, section improvements and score predictions

Every run is independent: the embedding orchestrator, its worker pool and
all intermediate vectors live only for the duration of analyze().
"""

import logging
import time
from typing import Optional, Sequence, Union

from .config import AnalysisConfig
from .coverage import analyze_keyword_coverage
from .embeddings import EmbeddingOrchestrator, EmbeddingProvider
from .models import (
    AnalysisMode,
    AnalysisRequest,
    AnalysisResult,
    Keyword,
    SectionKind,
    SegmentScore,
    TextSection,
)
from .recommender import (
    PhraseGenerator,
    build_section_improvements,
    calculate_cumulative_impact,
    calculate_score_predictions,
)
from .scorer import aggregate_score, alignment_score, generate_gap_analysis, score_sections
from .segmenter import FULL_CONTENT_TITLE, segment_for_analysis
from .validation import validate_request
from .vector_math import weighted_centroid

logger = logging.getLogger(__name__)


class SemanticAlignmentAnalyzer:
    """
    Scores how well texts align with a weighted keyword set.

    The embedding provider is owned by the caller and passed in explicitly;
    the analyzer keeps no state between runs.
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        config: Optional[AnalysisConfig] = None,
    ):
        """
        Initialize the analyzer.

        Args:
            provider: Embedding provider (text -> vector).
            config: Analysis configuration. Defaults to AnalysisConfig().
        """
        self.provider = provider
        self.config = config or AnalysisConfig()

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Run one analysis.

        Args:
            request: Keywords, both texts and the analysis mode.

        Returns:
            AnalysisResult with scores, coverage and recommendations.

        Raises:
            InvalidInputError: Before any provider call, for bad input.
            ProviderError subclass: When the embedding provider fails.
            DegenerateMathError: For zero-magnitude vectors.
        """
        started = time.perf_counter()
        config = self.config
        validate_request(request, config)

        logger.info(
            f"Starting {request.mode.value} analysis: {len(request.keywords)} keywords"
        )

        with EmbeddingOrchestrator(self.provider, config.max_concurrency) as orchestrator:
            keyword_vectors = orchestrator.embed_many([k.text for k in request.keywords])
            centroid = weighted_centroid(
                (vector, keyword.weight)
                for vector, keyword in zip(keyword_vectors, request.keywords)
            )

            main_sections: Optional[list[SegmentScore]] = None
            competitor_sections: Optional[list[SegmentScore]] = None

            if request.mode == AnalysisMode.CHUNKED:
                main_units = segment_for_analysis(
                    request.main_text, config.chunk_size_words, config.chunk_overlap_words
                )
                competitor_units = segment_for_analysis(
                    request.competitor_text, config.chunk_size_words, config.chunk_overlap_words
                )
                logger.info(
                    f"Created {len(main_units)} main sections and "
                    f"{len(competitor_units)} competitor sections"
                )

                vectors = orchestrator.embed_many(
                    [u.content for u in main_units] + [u.content for u in competitor_units]
                )
                main_vectors = vectors[:len(main_units)]
                competitor_vectors = vectors[len(main_units):]

                main_sections = score_sections(centroid, main_units, main_vectors)
                competitor_sections = score_sections(centroid, competitor_units, competitor_vectors)
                main_score = aggregate_score(main_sections)
                competitor_score = aggregate_score(competitor_sections)

                coverage_units = main_units
                coverage_vectors = main_vectors
                improvement_targets = main_sections
            else:
                main_vector, competitor_vector = orchestrator.embed_many(
                    [request.main_text, request.competitor_text]
                )
                main_score = alignment_score(centroid, main_vector)
                competitor_score = alignment_score(centroid, competitor_vector)

                # Whole document acts as a single section, reusing its embedding
                whole = TextSection(
                    title=FULL_CONTENT_TITLE,
                    content=request.main_text.strip(),
                    start_offset=0,
                    end_offset=len(request.main_text),
                    level=1,
                    kind=SectionKind.FALLBACK_CHUNK,
                )
                coverage_units = [whole]
                coverage_vectors = [main_vector]
                improvement_targets = [SegmentScore(
                    title=whole.title,
                    score=main_score,
                    start_offset=whole.start_offset,
                    end_offset=whole.end_offset,
                    text=whole.content,
                )]

            logger.info(
                f"Scores: main {main_score}%, competitor {competitor_score}% "
                f"({orchestrator.request_count} embedding requests)"
            )

        coverage = analyze_keyword_coverage(
            request.keywords,
            keyword_vectors,
            request.main_text,
            request.competitor_text,
            coverage_units,
            coverage_vectors,
            config,
        )
        improvements = build_section_improvements(
            improvement_targets,
            coverage,
            config,
            PhraseGenerator(config.phrase_strategy, config.phrase_seed),
        )
        predictions = calculate_score_predictions(coverage, main_score, config)

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info(f"Analysis finished in {elapsed_ms} ms")

        return AnalysisResult(
            main_score_percent=main_score,
            competitor_score_percent=competitor_score,
            gap_analysis_text=generate_gap_analysis(main_score, competitor_score),
            keyword_weights=list(request.keywords),
            keyword_coverage=coverage,
            section_improvements=improvements,
            main_sections=main_sections,
            competitor_sections=competitor_sections,
            score_predictions=predictions,
            predicted_score_percent=calculate_cumulative_impact(
                predictions, config.diminishing_factor
            ),
            processing_time_ms=elapsed_ms,
        )


def analyze_alignment(
    keywords: Sequence[Keyword],
    main_text: str,
    competitor_text: str,
    provider: EmbeddingProvider,
    mode: Optional[Union[AnalysisMode, str]] = None,
    config: Optional[AnalysisConfig] = None,
) -> AnalysisResult:
    """
    Convenience function that runs one analysis.

    Args:
        keywords: Weighted target keywords.
        main_text: The user's copy.
        competitor_text: The competitor's copy.
        provider: Embedding provider.
        mode: "full" or "chunked"; defaults to config.analysis_mode.
        config: Analysis configuration.

    Returns:
        AnalysisResult for the run.
    """
    config = config or AnalysisConfig()
    request = AnalysisRequest(
        keywords=list(keywords),
        main_text=main_text,
        competitor_text=competitor_text,
        mode=AnalysisMode(mode or config.analysis_mode),
    )
    return SemanticAlignmentAnalyzer(provider, config).analyze(request)
