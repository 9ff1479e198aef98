"""End-to-end tests for the alignment analyzer with a deterministic provider."""

import pytest

from fakes import FakeAPIError, FakeEmbeddingProvider
from seo_alignment_analyzer.analyzer import SemanticAlignmentAnalyzer, analyze_alignment
from seo_alignment_analyzer.config import AnalysisConfig
from seo_alignment_analyzer.errors import (
    InvalidInputError,
    ProviderRateLimitedError,
    ProviderUnavailableError,
)
from seo_alignment_analyzer.models import AnalysisMode, AnalysisRequest


class TestFullMode:
    """Whole-document analysis."""

    def test_scores_and_coverage(self, fake_provider, keywords, main_text, competitor_text):
        result = analyze_alignment(keywords, main_text, competitor_text, fake_provider)

        assert 0.0 <= result.main_score_percent <= 100.0
        assert 0.0 <= result.competitor_score_percent <= 100.0
        assert result.main_sections is None
        assert result.competitor_sections is None
        assert result.keyword_weights == keywords

        seo, content = result.keyword_coverage
        assert seo.keyword == "seo"
        assert seo.direct_mention_count == 5
        assert seo.competitor_mention_count == 1
        assert seo.competitor_has_advantage is False
        assert content.direct_mention_count == 3
        assert content.competitor_mention_count == 4
        assert content.competitor_has_advantage is False

    def test_each_text_embedded_once(self, fake_provider, keywords, main_text, competitor_text):
        analyze_alignment(keywords, main_text, competitor_text, fake_provider)
        assert len(fake_provider.calls) == 4
        assert set(fake_provider.calls) == {"seo", "content", main_text, competitor_text}

    def test_single_full_content_improvement(self, fake_provider, keywords, main_text, competitor_text):
        result = analyze_alignment(keywords, main_text, competitor_text, fake_provider)

        assert len(result.section_improvements) == 1
        improvement = result.section_improvements[0]
        assert improvement.section_title == "Full Content"
        assert improvement.current_score_percent == result.main_score_percent
        assert 1 <= len(improvement.missing_keywords) <= 3

    def test_gap_text_matches_scores(self, fake_provider, keywords, main_text, competitor_text):
        result = analyze_alignment(keywords, main_text, competitor_text, fake_provider)

        direction = "more" if result.gap_percent > 0 else "less"
        assert result.gap_analysis_text.startswith(
            f"Your copy is {abs(result.main_score_percent - result.competitor_score_percent):.1f}% "
            f"{direction} aligned"
        )

    def test_identical_texts_have_zero_gap(self, fake_provider, keywords, main_text):
        result = analyze_alignment(keywords, main_text, main_text, fake_provider)

        assert result.main_score_percent == result.competitor_score_percent
        assert result.gap_analysis_text.startswith("Your copy is 0.0% less aligned")
        assert len(fake_provider.calls) == 3

    def test_predictions_never_lower_the_score(self, fake_provider, keywords, main_text, competitor_text):
        result = analyze_alignment(keywords, main_text, competitor_text, fake_provider)

        assert len(result.score_predictions) <= 5
        for prediction in result.score_predictions:
            assert prediction.current_score_percent == result.main_score_percent
            assert prediction.predicted_score_percent >= prediction.current_score_percent
        if result.score_predictions:
            assert result.predicted_score_percent >= result.main_score_percent
        else:
            assert result.predicted_score_percent == 0.0


class TestChunkedMode:
    """Per-section analysis."""

    def test_section_scores(self, fake_provider, keywords, main_text, competitor_text):
        result = analyze_alignment(
            keywords, main_text, competitor_text, fake_provider, mode="chunked"
        )

        assert [s.title for s in result.main_sections] == [
            "SEO Basics", "Writing Content", "Measuring Results",
        ]
        assert [s.title for s in result.competitor_sections] == ["Chunk 1"]
        expected = round(sum(s.score for s in result.main_sections) / 3, 1)
        assert result.main_score_percent == expected
        assert result.competitor_score_percent == result.competitor_sections[0].score

    def test_improvement_per_section(self, fake_provider, keywords, main_text, competitor_text):
        result = analyze_alignment(
            keywords, main_text, competitor_text, fake_provider, mode="chunked"
        )

        assert [i.section_title for i in result.section_improvements] == [
            "SEO Basics", "Writing Content", "Measuring Results",
        ]
        for improvement, section in zip(result.section_improvements, result.main_sections):
            assert improvement.current_score_percent == section.score
            assert 1 <= len(improvement.missing_keywords) <= 3
            assert len(improvement.suggested_phrases) == len(improvement.missing_keywords)

    def test_embedding_requests(self, fake_provider, keywords, main_text, competitor_text):
        analyze_alignment(keywords, main_text, competitor_text, fake_provider, mode="chunked")
        # 2 keywords + 3 main sections + 1 competitor window
        assert len(fake_provider.calls) == 6

    def test_config_supplies_default_mode(self, fake_provider, keywords, main_text, competitor_text):
        result = analyze_alignment(
            keywords, main_text, competitor_text, fake_provider, config=AnalysisConfig.chunked()
        )
        assert result.main_sections is not None

    def test_result_independent_of_concurrency(self, keywords, main_text, competitor_text):
        serial = analyze_alignment(
            keywords, main_text, competitor_text, FakeEmbeddingProvider(),
            mode="chunked", config=AnalysisConfig(max_concurrency=1),
        ).to_dict()
        parallel = analyze_alignment(
            keywords, main_text, competitor_text, FakeEmbeddingProvider(),
            mode="chunked", config=AnalysisConfig(max_concurrency=8),
        ).to_dict()

        serial.pop("processingTime")
        parallel.pop("processingTime")
        assert serial == parallel


class TestFailures:
    """Validation and provider failures."""

    def test_invalid_input_makes_no_provider_calls(self, fake_provider, main_text):
        with pytest.raises(InvalidInputError):
            analyze_alignment([], main_text, "competitor", fake_provider)
        assert fake_provider.calls == []

    def test_non_finite_embedding_fails_the_run(self, keywords, main_text, competitor_text):
        class NaNForMainText(FakeEmbeddingProvider):
            def embed(self, text):
                vector = super().embed(text)
                if text == main_text:
                    vector[0] = float("nan")
                return vector

        with pytest.raises(ProviderUnavailableError):
            analyze_alignment(keywords, main_text, competitor_text, NaNForMainText())

    def test_provider_failure_propagates(self, keywords, main_text, competitor_text):
        provider = FakeEmbeddingProvider(fail_with=FakeAPIError("slow down", status_code=429))
        with pytest.raises(ProviderRateLimitedError):
            analyze_alignment(keywords, main_text, competitor_text, provider)

    def test_analyzer_class(self, fake_provider, keywords, main_text, competitor_text):
        request = AnalysisRequest(keywords, main_text, competitor_text, AnalysisMode.FULL)
        result = SemanticAlignmentAnalyzer(fake_provider).analyze(request)

        data = result.to_dict()
        assert set(data) == {
            "mainCopyScore", "competitorCopyScore", "gapAnalysis", "mainCopyChunks",
            "competitorCopyChunks", "keywordWeights", "keywordAnalysis", "sectionImprovements",
            "scorePredictions", "predictedScore", "processingTime",
        }
        assert data["keywordWeights"] == [{"text": "seo", "weight": 3.0}, {"text": "content", "weight": 1.0}]
        assert result.processing_time_ms >= 0

