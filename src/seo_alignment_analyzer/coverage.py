"""
Keyword coverage analysis.

For each keyword this module combines:
- Literal mention counts (whole-word, falling back to substring matches)
- Semantic similarity between the keyword and every section of the user's
  document, classified into strong and weak sections
- Related terms from a small static table
- A comparison of mention counts against the competitor's copy
"""

import logging
import re
from typing import Optional, Sequence

from .config import AnalysisConfig
from .models import Keyword, KeywordCoverage, TextSection
from .vector_math import Vector, clamp, cosine_similarity

logger = logging.getLogger(__name__)


# Static related-term table keyed by lower-cased keyword. Best-effort only.
RELATED_TERMS: dict[str, list[str]] = {
    "seo": [
        "search engine optimization", "search rankings", "organic traffic",
        "serp", "keywords", "backlinks", "meta description",
    ],
    "content": ["copy", "articles", "blog posts", "copywriting", "editorial"],
    "content marketing": [
        "content strategy", "blog posts", "storytelling", "lead generation", "audience",
    ],
    "marketing": ["advertising", "promotion", "branding", "campaigns", "outreach"],
    "digital marketing": [
        "online marketing", "social media", "email marketing", "ppc", "seo",
    ],
    "keyword research": ["search volume", "keyword difficulty", "search intent", "long-tail"],
    "link building": ["backlinks", "outreach", "guest posts", "anchor text", "domain authority"],
    "social media": ["instagram", "facebook", "linkedin", "twitter", "engagement", "followers"],
    "email marketing": ["newsletter", "open rate", "subscribers", "drip campaign", "automation"],
    "ppc": ["pay per click", "google ads", "cost per click", "ad spend", "bidding"],
    "analytics": ["metrics", "tracking", "google analytics", "kpi", "reporting", "dashboards"],
    "conversion": ["conversion rate", "cta", "call to action", "landing page", "sign ups"],
    "conversion rate optimization": ["cro", "a/b testing", "landing page", "cta", "funnel"],
    "ux": ["user experience", "usability", "navigation", "page speed", "accessibility"],
    "ecommerce": ["online store", "checkout", "product pages", "shopping cart", "shopify"],
    "local seo": ["google business profile", "citations", "local pack", "reviews", "near me"],
    "roi": ["return on investment", "revenue", "profitability", "cost savings"],
    "branding": ["brand identity", "brand voice", "logo", "positioning", "awareness"],
}


def _whole_word_pattern(phrase: str) -> re.Pattern:
    return re.compile(r"\b" + re.escape(phrase) + r"\b", re.IGNORECASE)


def count_mentions(text: str, keyword: str) -> int:
    """
    Count case-insensitive mentions of a keyword.

    Whole-word matches are counted first; if there are none, substring
    matches are counted instead so partial or punctuated keywords still
    register coverage.

    Args:
        text: Raw document text.
        keyword: Literal keyword (regex-escaped before matching).

    Returns:
        Number of matches (0 for an empty keyword).
    """
    keyword = keyword.strip()
    if not keyword or not text:
        return 0

    whole_word = len(_whole_word_pattern(keyword).findall(text))
    if whole_word:
        return whole_word
    return len(re.findall(re.escape(keyword), text, re.IGNORECASE))


def find_related_terms(keyword: str, text: str) -> list[str]:
    """Return table terms for ``keyword`` that literally appear in ``text``."""
    terms = RELATED_TERMS.get(keyword.strip().lower(), [])
    return [term for term in terms if _whole_word_pattern(term).search(text)]


def is_globally_undercovered(
    mention_count: int,
    average_similarity: float,
    threshold: float = 0.3,
) -> bool:
    """
    Check whether a keyword is poorly covered across the whole document.

    True when the keyword is never mentioned literally or its average
    section similarity is below ``threshold``.
    """
    return mention_count == 0 or average_similarity < threshold


def classify_section_indices(
    similarities: Sequence[float],
    mention_count: int,
    config: Optional[AnalysisConfig] = None,
) -> tuple[list[int], list[int]]:
    """Positions of the strong and weak sections; see classify_sections."""
    config = config or AnalysisConfig()
    if not similarities:
        return [], []

    average = sum(similarities) / len(similarities)
    strong_threshold = max(average * config.strong_multiplier, config.strong_floor)
    weak_threshold = max(average * config.weak_multiplier, config.weak_floor)

    strong = [i for i, s in enumerate(similarities) if s > strong_threshold]
    weak = [i for i, s in enumerate(similarities) if s < weak_threshold]

    if not weak and is_globally_undercovered(mention_count, average, config.undercovered_similarity):
        weak = list(range(len(similarities)))

    return strong, weak


def classify_sections(
    titles: Sequence[str],
    similarities: Sequence[float],
    mention_count: int,
    config: Optional[AnalysisConfig] = None,
) -> tuple[list[str], list[str]]:
    """
    Split sections into strong and weak for one keyword.

    Thresholds are in normalized similarity units:
    strong if similarity > max(average * 1.2, 0.3),
    weak if similarity < max(average * 0.8, 0.2).
    If no section is weak but the keyword is globally under-covered, every
    section is reported as weak.

    Args:
        titles: Section titles.
        similarities: Keyword-to-section similarity per section.
        mention_count: Literal mentions of the keyword in the document.
        config: Threshold configuration.

    Returns:
        (strong_titles, weak_titles)
    """
    strong, weak = classify_section_indices(similarities, mention_count, config)
    return [titles[i] for i in strong], [titles[i] for i in weak]


def analyze_keyword_coverage(
    keywords: Sequence[Keyword],
    keyword_embeddings: Sequence[Vector],
    main_text: str,
    competitor_text: str,
    sections: Sequence[TextSection],
    section_embeddings: Sequence[Vector],
    config: Optional[AnalysisConfig] = None,
) -> list[KeywordCoverage]:
    """
    Build a coverage record per keyword for the user's document.

    Args:
        keywords: Keywords in request order.
        keyword_embeddings: One embedding per keyword.
        main_text: The user's raw text.
        competitor_text: The competitor's raw text.
        sections: Sections of the user's document.
        section_embeddings: One embedding per section.
        config: Threshold configuration.

    Returns:
        One KeywordCoverage per keyword, in keyword order.
    """
    config = config or AnalysisConfig()
    if len(keywords) != len(keyword_embeddings):
        raise ValueError(f"Got {len(keyword_embeddings)} embeddings for {len(keywords)} keywords")
    if len(sections) != len(section_embeddings):
        raise ValueError(f"Got {len(section_embeddings)} embeddings for {len(sections)} sections")

    titles = [section.title for section in sections]
    results: list[KeywordCoverage] = []

    for keyword, keyword_embedding in zip(keywords, keyword_embeddings):
        mentions = count_mentions(main_text, keyword.text)
        competitor_mentions = count_mentions(competitor_text, keyword.text)

        similarities = [
            clamp(cosine_similarity(keyword_embedding, section_embedding), -1.0, 1.0)
            for section_embedding in section_embeddings
        ]
        average = sum(similarities) / len(similarities) if similarities else 0.0
        strong, weak = classify_section_indices(similarities, mentions, config)

        coverage = KeywordCoverage(
            keyword=keyword.text,
            weight=keyword.weight,
            direct_mention_count=mentions,
            semantic_coverage_percent=round(clamp(average * 100, 0.0, 100.0), 1),
            strong_section_titles=[titles[i] for i in strong],
            weak_section_titles=[titles[i] for i in weak],
            weak_section_indices=weak,
            related_terms_found=find_related_terms(keyword.text, main_text),
            competitor_has_advantage=competitor_mentions > mentions * config.competitor_advantage_ratio,
            competitor_mention_count=competitor_mentions,
        )
        logger.debug(
            f"Coverage '{keyword.text}': {mentions} mentions "
            f"(competitor {competitor_mentions}), {coverage.semantic_coverage_percent}% semantic, "
            f"{len(strong)} strong / {len(weak)} weak sections"
        )
        results.append(coverage)

    return results
