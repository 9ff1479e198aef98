"""
Data models for the SEO Alignment Analyzer.

This module defines all the core data structures used throughout the application.
Every entity is created fresh per analysis run; nothing is persisted.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class AnalysisMode(str, Enum):
    """How documents are embedded for scoring."""
    FULL = "full"
    CHUNKED = "chunked"


class KeywordRole(Enum):
    """Presentation-layer role of a keyword; maps onto weight."""
    MAIN = "main"
    SUPPORTING = "supporting"

    @property
    def weight(self) -> float:
        return 3.0 if self is KeywordRole.MAIN else 1.0


class SectionKind(Enum):
    """Which segmentation tier produced a section."""
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    FALLBACK_CHUNK = "fallbackChunk"


@dataclass(frozen=True)
class Keyword:
    """A target keyword with its weight in the centroid."""
    text: str
    weight: float = 1.0

    @classmethod
    def from_role(cls, text: str, role: KeywordRole) -> "Keyword":
        """Create a keyword whose weight is derived from its role."""
        return cls(text=text, weight=role.weight)

    def to_dict(self) -> dict:
        return {"text": self.text, "weight": self.weight}


@dataclass
class TextSection:
    """
    A titled, contiguous span of a document.

    Offsets are character offsets into the source text for every tier:
    ``text[start_offset:end_offset]`` is the full span of the section
    (including any heading markup), while ``content`` is the body text
    used for embedding.
    """
    title: str
    content: str
    start_offset: int
    end_offset: int
    level: int = 1
    kind: SectionKind = SectionKind.HEADING

    @property
    def word_count(self) -> int:
        return len(self.content.split())


@dataclass
class SegmentScore:
    """Alignment score of one section against the keyword centroid."""
    title: str
    score: float
    start_offset: int
    end_offset: int
    text: str

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "score": self.score,
            "startIndex": self.start_offset,
            "endIndex": self.end_offset,
            "text": self.text,
        }


@dataclass
class KeywordCoverage:
    """Literal and semantic presence of one keyword in the user's document."""
    keyword: str
    weight: float
    direct_mention_count: int = 0
    semantic_coverage_percent: float = 0.0
    strong_section_titles: list[str] = field(default_factory=list)
    weak_section_titles: list[str] = field(default_factory=list)
    # Positions of the weak sections; headings may repeat, positions do not
    weak_section_indices: list[int] = field(default_factory=list)
    related_terms_found: list[str] = field(default_factory=list)
    competitor_has_advantage: bool = False
    competitor_mention_count: int = 0

    def to_dict(self) -> dict:
        return {
            "keyword": self.keyword,
            "weight": self.weight,
            "directMentions": self.direct_mention_count,
            "semanticCoverage": self.semantic_coverage_percent,
            "strongSections": list(self.strong_section_titles),
            "weakSections": list(self.weak_section_titles),
            "relatedTermsFound": list(self.related_terms_found),
            "competitorAdvantage": self.competitor_has_advantage,
            "competitorMentions": self.competitor_mention_count,
        }


@dataclass
class SectionImprovement:
    """Suggested additions for one section of the user's document."""
    section_title: str
    current_score_percent: float
    missing_keywords: list[str] = field(default_factory=list)
    suggested_phrases: list[str] = field(default_factory=list)
    competitor_strengths: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "section": self.section_title,
            "currentScore": self.current_score_percent,
            "missingKeywords": list(self.missing_keywords),
            "suggestedPhrases": list(self.suggested_phrases),
            "competitorStrengths": list(self.competitor_strengths),
        }


@dataclass
class ScorePrediction:
    """What-if estimate for improving a single keyword's coverage."""
    keyword: str
    current_mention_count: int
    suggested_mention_count: int
    current_score_percent: float
    predicted_score_percent: float
    impact_percent: float

    def to_dict(self) -> dict:
        return {
            "keyword": self.keyword,
            "currentMentions": self.current_mention_count,
            "suggestedMentions": self.suggested_mention_count,
            "currentScore": self.current_score_percent,
            "predictedScore": self.predicted_score_percent,
            "impact": self.impact_percent,
        }


@dataclass
class AnalysisRequest:
    """Input of one analysis run."""
    keywords: list[Keyword]
    main_text: str
    competitor_text: str
    mode: AnalysisMode = AnalysisMode.FULL

    def __post_init__(self) -> None:
        if not isinstance(self.mode, AnalysisMode):
            self.mode = AnalysisMode(self.mode)


@dataclass
class AnalysisResult:
    """Output of one analysis run."""
    main_score_percent: float
    competitor_score_percent: float
    gap_analysis_text: str
    keyword_weights: list[Keyword]
    keyword_coverage: list[KeywordCoverage] = field(default_factory=list)
    section_improvements: list[SectionImprovement] = field(default_factory=list)
    main_sections: Optional[list[SegmentScore]] = None
    competitor_sections: Optional[list[SegmentScore]] = None
    score_predictions: list[ScorePrediction] = field(default_factory=list)
    predicted_score_percent: float = 0.0
    processing_time_ms: int = 0

    @property
    def gap_percent(self) -> float:
        return round(self.main_score_percent - self.competitor_score_percent, 1)

    def to_dict(self) -> dict:
        """Serialize using the camelCase field names of the HTTP payload."""
        return {
            "mainCopyScore": self.main_score_percent,
            "competitorCopyScore": self.competitor_score_percent,
            "gapAnalysis": self.gap_analysis_text,
            "mainCopyChunks": (
                [s.to_dict() for s in self.main_sections]
                if self.main_sections is not None else None
            ),
            "competitorCopyChunks": (
                [s.to_dict() for s in self.competitor_sections]
                if self.competitor_sections is not None else None
            ),
            "keywordWeights": [k.to_dict() for k in self.keyword_weights],
            "keywordAnalysis": [c.to_dict() for c in self.keyword_coverage],
            "sectionImprovements": [i.to_dict() for i in self.section_improvements],
            "scorePredictions": [p.to_dict() for p in self.score_predictions],
            "predictedScore": self.predicted_score_percent,
            "processingTime": self.processing_time_ms,
        }


class DiffType(Enum):
    """Type of a diff segment."""
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


@dataclass
class DiffSegment:
    """A run of words in a contextual diff between original and enhanced text."""
    diff_type: DiffType
    text: str
    context_before: str = ""
    context_after: str = ""
    keyword_added: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict = {"type": self.diff_type.value, "text": self.text}
        if self.diff_type == DiffType.ADDED:
            data["context"] = {"before": self.context_before, "after": self.context_after}
            data["keywordAdded"] = self.keyword_added
            data["reason"] = self.reason
        return data
