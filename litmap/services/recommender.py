"""Recommendations and category partitioning for an investigation result."""

from litmap.models.schemas import (
    AggregateAnalysis,
    CategorizedPapers,
    InvestigatedPaper,
    Recommendations,
)

_KEY_PAPER_COUNT = 10
_MIN_TREND_STRENGTH = 0.1

_CATEGORY_BUCKETS = {
    "theoretical": "theoretical",
    "empirical": "empirical",
    "methodological": "methodological",
    "applied": "applied",
    "review": "reviews",
}


class Recommender:
    """Derives key papers, trends and opportunities from an analysis."""

    def recommend(
        self, papers: list[InvestigatedPaper], analysis: AggregateAnalysis
    ) -> Recommendations:
        """
        Build recommendations.

        Key papers are the top ten by overall score regardless of the order
        the paper list was returned in. Only trends with strength above 0.1
        are surfaced.
        """
        key_papers = sorted(papers, key=lambda p: -p.overall_score)[:_KEY_PAPER_COUNT]
        return Recommendations(
            key_papers=key_papers,
            emerging_trends=[
                t.trend for t in analysis.research_trends if t.strength > _MIN_TREND_STRENGTH
            ],
            research_opportunities=[g.opportunity for g in analysis.gap_analysis],
            methodological_gaps=[g.gap for g in analysis.gap_analysis if g.kind == "methodology"],
        )

    def categorize(self, papers: list[InvestigatedPaper]) -> CategorizedPapers:
        """Partition papers by primary research category; each paper lands in exactly one bucket."""
        buckets: dict[str, list[InvestigatedPaper]] = {name: [] for name in _CATEGORY_BUCKETS.values()}
        for paper in papers:
            buckets[_CATEGORY_BUCKETS[paper.research_category]].append(paper)
        return CategorizedPapers(**buckets)
