"""
Improvement recommendations derived from keyword coverage.

Produces per-section suggestions (missing keywords plus template phrases)
and ranked "what-if" score predictions whose combined effect is modeled
with diminishing returns.
"""

import logging
import math
import random
from typing import Optional, Sequence

from .config import AnalysisConfig
from .models import KeywordCoverage, ScorePrediction, SectionImprovement, SegmentScore

logger = logging.getLogger(__name__)

# Placeholder phrase templates; not linguistically grounded
PHRASE_TEMPLATES = [
    "effective {keyword} strategies",
    "comprehensive {keyword} guide",
    "proven {keyword} techniques",
    "{keyword} best practices",
    "how {keyword} drives results",
]


class PhraseGenerator:
    """
    Instantiates keywords into short suggested phrases.

    The "cycle" strategy picks the template by keyword index so output is
    reproducible; "random" picks a template at random (seedable).
    """

    def __init__(
        self,
        strategy: str = "cycle",
        seed: Optional[int] = None,
        templates: Optional[Sequence[str]] = None,
    ):
        if strategy not in ("cycle", "random"):
            raise ValueError(f"strategy must be 'cycle' or 'random', got '{strategy}'")
        self.strategy = strategy
        self.templates = list(templates or PHRASE_TEMPLATES)
        self._rng = random.Random(seed)

    def phrase(self, keyword: str, index: int = 0) -> str:
        if self.strategy == "random":
            template = self._rng.choice(self.templates)
        else:
            template = self.templates[index % len(self.templates)]
        return template.format(keyword=keyword)


def _needs_work(
    coverage: KeywordCoverage,
    position: int,
    config: AnalysisConfig,
) -> bool:
    return (
        position in coverage.weak_section_indices
        or coverage.direct_mention_count == 0
        or coverage.semantic_coverage_percent < config.missing_coverage_percent
    )


def top_keywords(coverage: Sequence[KeywordCoverage], limit: int = 3) -> list[KeywordCoverage]:
    """Highest-weight keywords first, ties broken by lower semantic coverage."""
    ranked = sorted(
        coverage,
        key=lambda c: (-c.weight, c.semantic_coverage_percent),
    )
    return ranked[:limit]


def _competitor_strengths(missing: Sequence[KeywordCoverage]) -> list[str]:
    return [
        f'Competitor mentions "{c.keyword}" {c.competitor_mention_count} times '
        f"(you: {c.direct_mention_count})"
        for c in missing
        if c.competitor_has_advantage
    ]


def build_section_improvements(
    section_scores: Sequence[SegmentScore],
    coverage: Sequence[KeywordCoverage],
    config: Optional[AnalysisConfig] = None,
    generator: Optional[PhraseGenerator] = None,
) -> list[SectionImprovement]:
    """
    Suggest keyword additions for every section of the user's document.

    A keyword is missing from a section when the section is weak for it,
    when it is never mentioned, or when its semantic coverage is below 50%.
    Sections with no missing keyword fall back to the top keywords overall,
    so no section is left without suggestions while keyword data exists.

    Args:
        section_scores: Scored sections of the user's document, in the same
            order as the sections coverage was computed over.
        coverage: Keyword coverage records.
        config: Caps and thresholds.
        generator: Phrase generator (defaults from config).

    Returns:
        One SectionImprovement per section, in document order.
    """
    config = config or AnalysisConfig()
    generator = generator or PhraseGenerator(config.phrase_strategy, config.phrase_seed)
    index_of = {id(c): i for i, c in enumerate(coverage)}

    improvements: list[SectionImprovement] = []
    for position, section in enumerate(section_scores):
        missing = [c for c in coverage if _needs_work(c, position, config)]
        if not missing:
            missing = top_keywords(coverage, config.max_missing_keywords)
        missing = missing[:config.max_missing_keywords]

        improvements.append(SectionImprovement(
            section_title=section.title,
            current_score_percent=section.score,
            missing_keywords=[c.keyword for c in missing],
            suggested_phrases=[generator.phrase(c.keyword, index_of[id(c)]) for c in missing],
            competitor_strengths=_competitor_strengths(missing),
        ))

    return improvements


def calculate_score_predictions(
    coverage: Sequence[KeywordCoverage],
    current_score: float,
    config: Optional[AnalysisConfig] = None,
) -> list[ScorePrediction]:
    """
    Estimate the score gain from improving each under-covered keyword.

    Only keywords with zero mentions or semantic coverage under 60% are
    considered. Impact is capped at 10 points per unit of weight and scaled
    by how incomplete coverage currently is.

    Args:
        coverage: Keyword coverage records.
        current_score: The user's current overall score (percent).
        config: Prediction constants.

    Returns:
        At most five predictions, highest impact first.
    """
    config = config or AnalysisConfig()
    predictions: list[ScorePrediction] = []

    for c in coverage:
        if c.direct_mention_count > 0 and c.semantic_coverage_percent >= config.prediction_coverage_percent:
            continue

        suggested = max(
            config.min_suggested_mentions,
            math.ceil(c.competitor_mention_count * config.competitor_mention_factor),
        )
        impact = round(
            ((100 - c.semantic_coverage_percent) / 100) * config.max_impact_per_weight * c.weight,
            1,
        )
        predictions.append(ScorePrediction(
            keyword=c.keyword,
            current_mention_count=c.direct_mention_count,
            suggested_mention_count=suggested,
            current_score_percent=current_score,
            predicted_score_percent=min(100.0, round(current_score + impact, 1)),
            impact_percent=impact,
        ))

    predictions.sort(key=lambda p: p.impact_percent, reverse=True)
    return predictions[:config.max_predictions]


def calculate_cumulative_impact(
    predictions: Sequence[ScorePrediction],
    diminishing_factor: float = 0.8,
) -> float:
    """
    Combine several predictions into one estimated score.

    Starts from the first prediction's current score and adds each impact
    times a factor that begins at 1.0 and decays by ``diminishing_factor``
    after every keyword. Clamped to 100.

    Returns:
        Predicted score rounded to one decimal, or 0.0 for no predictions.
    """
    if not predictions:
        return 0.0

    total = predictions[0].current_score_percent
    factor = 1.0
    for prediction in predictions:
        total += prediction.impact_percent * factor
        factor *= diminishing_factor

    return round(min(100.0, total), 1)
