"""
Pydantic schemas for the literature investigation engine.

This module contains all data validation and serialization models used
throughout the engine, following Pydantic V2 syntax. Inputs and results are
frozen: a run builds them once and never mutates them afterward.
"""

from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, model_validator


# Supporting Enums and Types
DatabaseId = Literal["arxiv", "pubmed", "ieee", "acm", "springer", "google_scholar"]
Perspective = Literal[
    "theoretical", "empirical", "methodological", "applied", "review", "interdisciplinary"
]
KeywordCategory = Literal[
    "core_concept",
    "methodology",
    "domain_specific",
    "temporal",
    "technical",
    "contextual",
    "theoretical",
    "applied",
]
ResearchCategory = Literal["theoretical", "empirical", "methodological", "applied", "review"]
SortKey = Literal["overall", "relevance", "citations", "date", "impact"]
TrendDirection = Literal["increasing", "decreasing", "stable"]
ActivityLevel = Literal["high", "medium", "low"]
GapKind = Literal["methodology", "temporal"]

ResearchType = Literal[
    "empirical",
    "theoretical",
    "methodological",
    "review",
    "meta_analysis",
    "case_study",
    "survey",
    "applied",
]
ClassifiedMethodology = Literal[
    "quantitative",
    "qualitative",
    "mixed_methods",
    "experimental",
    "observational",
    "computational",
    "simulation",
    "longitudinal",
    "cross_sectional",
]
EvidenceLevel = Literal[
    "systematic_review_meta_analysis",
    "randomized_controlled_trial",
    "controlled_trial",
    "case_control_cohort",
    "case_series_reports",
    "expert_opinion",
    "theoretical_framework",
]
ContributionType = Literal[
    "novel_theory",
    "novel_method",
    "novel_application",
    "empirical_validation",
    "comparative_analysis",
    "replication_study",
    "extension_study",
    "critique_analysis",
]
ImpactLevel = Literal["foundational", "high_impact", "moderate_impact", "emerging", "niche"]
TemporalCategory = Literal["cutting_edge", "recent", "established", "historical"]
ClassificationCategory = Literal[
    "research_type",
    "methodology",
    "evidence_level",
    "contribution_type",
    "impact_level",
    "temporal_category",
    "domain",
]
GapSeverity = Literal["high", "medium", "low"]

CLASSIFICATION_DIMENSIONS: tuple[str, ...] = (
    "research_type",
    "methodology",
    "evidence_level",
    "contribution_type",
    "impact_level",
    "temporal_category",
    "domain",
)


class TimeFrame(BaseModel):
    """Inclusive publication-year window; either bound may be open."""
    model_config = ConfigDict(frozen=True)

    start: int | None = Field(default=None, description="First year in the window")
    end: int | None = Field(default=None, description="Last year in the window")

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None


class ResearchTopic(BaseModel):
    """
    The research question being investigated.

    Created by the caller and consumed read-only for the whole run. Blank
    titles or domains are rejected by the investigator before any work starts.
    """
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Short statement of the research topic")
    description: str | None = Field(default=None, description="Free-text description")
    domain: str = Field(..., description="Taxonomy key, e.g. 'machine_learning'")
    subdomains: list[str] = Field(default_factory=list, description="Optional subdomain keys")
    timeframe: TimeFrame | None = Field(default=None, description="Publication-year window of interest")
    methodology: list[str] = Field(
        default_factory=list,
        description="Methodology hints, e.g. 'quantitative' or 'computational'"
    )
    context: list[str] = Field(default_factory=list, description="Free contextual tags")


class WeightedKeyword(BaseModel):
    """A search term with its weight, synonyms and category."""
    model_config = ConfigDict(frozen=True)

    term: str = Field(..., description="Lowercase search term")
    weight: float = Field(..., ge=0.0, description="Non-negative weight, roughly in [0, 1.5]")
    synonyms: list[str] = Field(default_factory=list, description="Synonyms used for fuzzy matching")
    category: KeywordCategory = Field(..., description="Where the keyword came from")


class KeywordSequence(BaseModel):
    """
    One perspective's weighted view of the topic.

    Created once per perspective per run and immutable after scoring.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Deterministic identifier: title slug plus perspective")
    name: str = Field(..., description="Display name")
    description: str = Field(..., description="What the perspective emphasises")
    keywords: list[WeightedKeyword] = Field(..., description="3-15 keywords in generation order")
    category: Perspective = Field(..., description="Research perspective")
    score: float = Field(..., description="Sequence quality score")


class KeywordSequenceReport(BaseModel):
    """Generated sequences for a topic together with a short diversity summary."""
    model_config = ConfigDict(frozen=True)

    topic: ResearchTopic
    sequences: list[KeywordSequence] = Field(default_factory=list)
    total_generated: int = Field(..., ge=0, description="Sequences produced before any limit")
    top_sequences: list[KeywordSequence] = Field(default_factory=list, description="Best five sequences")
    diversity_score: float = Field(..., ge=0.0, le=100.0, description="Share of perspectives represented")
    coverage_analysis: str = Field(..., description="Human-readable coverage summary")


class BibliographyEntry(BaseModel):
    """
    A paper as returned by the external bibliographic search capability.

    Treated as read-only raw input; only the title is required.
    """
    model_config = ConfigDict(frozen=True)

    id: str | None = Field(default=None, description="Source-specific identifier")
    title: str = Field(..., description="Paper title")
    authors: list[str] = Field(default_factory=list, description="Author names in byline order")
    year: int | None = Field(default=None, description="Publication year")
    abstract: str | None = Field(default=None, description="Abstract text")
    keywords: list[str] = Field(default_factory=list, description="Author or index keywords")
    citations: int | None = Field(default=None, ge=0, description="Citation count")
    journal: str | None = Field(default=None, description="Journal or venue")
    volume: str | None = Field(default=None, description="Volume")
    pages: str | None = Field(default=None, description="Page range")
    doi: str | None = Field(default=None, description="Digital Object Identifier")
    url: str | None = Field(default=None, description="Landing page URL")
    database: DatabaseId | None = Field(default=None, description="Database the entry came from")


class InvestigatedPaper(BibliographyEntry):
    """
    A bibliography entry scored and categorized against the keyword sequences.

    Created once per unique paper per run by the paper analyzer.
    """
    relevance_score: float = Field(..., ge=0.0, le=100.0, description="Keyword relevance (0-100)")
    temporal_score: float = Field(..., ge=0.0, le=100.0, description="Recency or timeframe fit (0-100)")
    citation_impact: float = Field(..., ge=0.0, le=100.0, description="Citations-per-year tier (0-100)")
    overall_score: float = Field(..., ge=0.0, le=100.0, description="Weighted blend of the three scores")
    matched_keywords: list[str] = Field(default_factory=list, description="Sequence terms found in the paper")
    research_category: ResearchCategory = Field(..., description="Primary research category")
    methodology: list[str] = Field(default_factory=list, description="Methodology tags")
    findings: str | None = Field(default=None, description="Extracted findings sentence(s)")
    limitations: str | None = Field(default=None, description="Extracted limitation sentence")
    future_work: str | None = Field(default=None, description="Extracted future-work sentence")


class InvestigationParams(BaseModel):
    """
    Run parameters for an investigation.

    Fields left as None fall back to the engine settings.
    """
    model_config = ConfigDict(frozen=True)

    databases: list[DatabaseId] | None = Field(default=None, description="Databases to query")
    max_papers_per_sequence: int | None = Field(default=None, ge=1, description="Results per sequence")
    total_max_papers: int | None = Field(default=None, ge=1, description="Cap on the final paper list")
    timeframe: TimeFrame | None = Field(default=None, description="Year window passed to the search")
    include_reviews: bool = Field(default=True, description="Keep review-category papers")
    min_citation_count: int = Field(default=0, ge=0, description="Drop papers cited fewer times")
    sort_by: SortKey = Field(default="overall", description="Order of the final paper list")
    selected_sequence_ids: list[str] | None = Field(
        default=None,
        description="Only search with these sequence ids (all sequences when None)"
    )
    max_sequences: int | None = Field(default=None, ge=1, le=10, description="Sequences kept after scoring")
    max_concurrent_searches: int | None = Field(default=None, ge=1, description="Concurrent search ceiling")
    search_timeout_seconds: float | None = Field(default=None, gt=0.0, description="Per-search timeout")


# Aggregate analysis

class TemporalDistribution(BaseModel):
    """Publication histogram with a recent-vs-older trend flag."""
    model_config = ConfigDict(frozen=True)

    yearly_counts: dict[int, int] = Field(default_factory=dict, description="Papers per year, ascending")
    trend: TrendDirection = Field(default="stable")
    recent_average: float = Field(default=0.0, description="Mean papers/year over the last three years present")
    older_average: float = Field(default=0.0, description="Mean papers/year over earlier years")
    peak_year: int | None = Field(default=None)
    recent_activity: ActivityLevel = Field(default="low")


class CitationAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_citations: int = 0
    average_citations: float = 0.0
    highly_cited_threshold: int = 50
    highly_cited: list[InvestigatedPaper] = Field(default_factory=list)
    distribution: dict[str, int] = Field(default_factory=dict, description="Five-bucket citation histogram")
    h_index: int = 0


class MethodologyGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    papers: list[InvestigatedPaper] = Field(default_factory=list)
    average_score: float = Field(..., description="Mean overall score of the group")


class AuthorProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    paper_count: int
    total_citations: int
    average_relevance: float
    top_papers: list[InvestigatedPaper] = Field(default_factory=list, description="Top three by overall score")


class ResearchTrend(BaseModel):
    model_config = ConfigDict(frozen=True)

    trend: str = Field(..., description="Keyword driving the trend")
    strength: float = Field(..., ge=0.0, le=1.0, description="Fraction of recent papers mentioning it")
    timeframe: str
    papers: list[InvestigatedPaper] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)


class ResearchGap(BaseModel):
    model_config = ConfigDict(frozen=True)

    gap: str
    evidence: str
    opportunity: str
    suggested_keywords: list[str] = Field(default_factory=list)
    kind: GapKind


class AggregateAnalysis(BaseModel):
    """Cross-paper analytics for one investigation."""
    model_config = ConfigDict(frozen=True)

    total_papers: int = 0
    average_relevance_score: float = 0.0
    temporal_distribution: TemporalDistribution = Field(default_factory=TemporalDistribution)
    citation_analysis: CitationAnalysis = Field(default_factory=CitationAnalysis)
    methodology_breakdown: dict[str, MethodologyGroup] = Field(default_factory=dict)
    top_authors: list[AuthorProfile] = Field(default_factory=list)
    research_trends: list[ResearchTrend] = Field(default_factory=list)
    gap_analysis: list[ResearchGap] = Field(default_factory=list)


# Classification

class PaperClassification(BaseModel):
    """
    Seven-dimension classification of a single paper.

    Every dimension is always populated; weak signal falls back to defaults
    rather than an unclassified state.
    """
    model_config = ConfigDict(frozen=True)

    paper_id: str = Field(..., description="DOI, else source id, else title")
    research_type: ResearchType
    methodology: list[ClassifiedMethodology] = Field(..., min_length=1)
    evidence_level: EvidenceLevel
    contribution_type: list[ContributionType] = Field(..., min_length=1)
    impact_level: ImpactLevel
    temporal_category: TemporalCategory
    domain: list[str] = Field(..., min_length=1)
    confidence: dict[ClassificationCategory, float] = Field(..., description="Confidence per dimension (0-1)")
    reasoning: dict[ClassificationCategory, str] = Field(..., description="Rationale per dimension")

    @model_validator(mode="after")
    def check_all_dimensions(self):
        """Reject classifications missing a confidence or rationale for any dimension."""
        for field_name in ("confidence", "reasoning"):
            missing = set(CLASSIFICATION_DIMENSIONS) - set(getattr(self, field_name))
            if missing:
                raise ValueError(f"{field_name} missing dimensions: {sorted(missing)}")
        return self


class ClassificationDistribution(BaseModel):
    model_config = ConfigDict(frozen=True)

    by_research_type: dict[str, int] = Field(default_factory=dict)
    by_methodology: dict[str, int] = Field(default_factory=dict)
    by_evidence_level: dict[str, int] = Field(default_factory=dict)
    by_contribution_type: dict[str, int] = Field(default_factory=dict)
    by_impact_level: dict[str, int] = Field(default_factory=dict)
    by_temporal_category: dict[str, int] = Field(default_factory=dict)
    by_domain: dict[str, int] = Field(default_factory=dict)


class DomainCluster(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    papers: list[InvestigatedPaper] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list, description="Most frequent matched keywords")
    average_relevance: float = 0.0
    representative_papers: list[InvestigatedPaper] = Field(default_factory=list)


class MethodologyTrend(BaseModel):
    model_config = ConfigDict(frozen=True)

    methodology: str
    trend: TrendDirection
    timeframe: str
    evidence: str
    papers: list[InvestigatedPaper] = Field(default_factory=list)


class ClassificationGap(BaseModel):
    model_config = ConfigDict(frozen=True)

    gap: str
    severity: GapSeverity
    suggestion: str
    related_terms: list[str] = Field(default_factory=list)


class ClassificationSummary(BaseModel):
    """Distributions, clusters, trends and gaps over a classified paper set."""
    model_config = ConfigDict(frozen=True)

    total_papers: int = 0
    distributions: ClassificationDistribution = Field(default_factory=ClassificationDistribution)
    domain_clusters: list[DomainCluster] = Field(default_factory=list)
    methodology_trends: list[MethodologyTrend] = Field(default_factory=list)
    gaps: list[ClassificationGap] = Field(default_factory=list)


# Result

class CategorizedPapers(BaseModel):
    """Partition of the paper list by primary research category."""
    model_config = ConfigDict(frozen=True)

    theoretical: list[InvestigatedPaper] = Field(default_factory=list)
    empirical: list[InvestigatedPaper] = Field(default_factory=list)
    methodological: list[InvestigatedPaper] = Field(default_factory=list)
    applied: list[InvestigatedPaper] = Field(default_factory=list)
    reviews: list[InvestigatedPaper] = Field(default_factory=list)


class Recommendations(BaseModel):
    model_config = ConfigDict(frozen=True)

    key_papers: list[InvestigatedPaper] = Field(default_factory=list, description="Top ten by overall score")
    emerging_trends: list[str] = Field(default_factory=list)
    research_opportunities: list[str] = Field(default_factory=list)
    methodological_gaps: list[str] = Field(default_factory=list)


class ExportBundle(BaseModel):
    """The four deterministic serializations of a result."""
    model_config = ConfigDict(frozen=True)

    markdown: str = ""
    bibtex: str = ""
    ris: str = ""
    csv: str = ""


class LiteratureInvestigationResult(BaseModel):
    """Root aggregate returned by a single investigation run."""
    model_config = ConfigDict(frozen=True)

    topic: ResearchTopic
    sequences: list[KeywordSequence] = Field(default_factory=list)
    papers: list[InvestigatedPaper] = Field(default_factory=list)
    analysis: AggregateAnalysis = Field(default_factory=AggregateAnalysis)
    categorized_papers: CategorizedPapers = Field(default_factory=CategorizedPapers)
    recommendations: Recommendations = Field(default_factory=Recommendations)
    classifications: list[PaperClassification] = Field(default_factory=list)
    classification_summary: ClassificationSummary = Field(default_factory=ClassificationSummary)
    exports: ExportBundle = Field(default_factory=ExportBundle)
