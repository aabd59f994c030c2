"""Aggregate analytics over an investigated paper set.

Covers the publication timeline, citation statistics (including h-index),
methodology coverage, author influence, emerging keyword trends and research
gaps. Everything is computed from in-memory papers; an empty paper list
yields a valid, zeroed analysis.
"""

import logging
import math
from collections import Counter
from datetime import date
from typing import Iterable

from litmap.models.schemas import (
    AggregateAnalysis,
    AuthorProfile,
    CitationAnalysis,
    InvestigatedPaper,
    MethodologyGroup,
    ResearchGap,
    ResearchTopic,
    ResearchTrend,
    TemporalDistribution,
)

logger = logging.getLogger(__name__)

EXPECTED_METHODOLOGIES = ("quantitative", "qualitative", "experimental", "computational")

_RECENT_YEAR_SPAN = 3
_MIN_HIGHLY_CITED = 50
_TOP_AUTHORS = 10
_TREND_WINDOW_YEARS = 3
_TREND_MIN_PAPERS = 3
_MAX_TRENDS = 5
_STALE_AFTER_YEARS = 2
_MAX_GAPS = 5


def compute_h_index(citations: Iterable[int]) -> int:
    """Largest h such that h papers have at least h citations each."""
    h = 0
    for rank, cites in enumerate(sorted(citations, reverse=True), start=1):
        if cites < rank:
            break
        h = rank
    return h


def highly_cited_threshold(citations: list[int]) -> int:
    """max(50, the citation count at the 90th percentile of a descending sort)."""
    if not citations:
        return _MIN_HIGHLY_CITED
    ranked = sorted(citations, reverse=True)
    return max(_MIN_HIGHLY_CITED, ranked[math.floor(len(ranked) * 0.1)])


def _citation_bucket(cites: int) -> str:
    if cites == 0:
        return "0"
    if cites <= 10:
        return "1-10"
    if cites <= 50:
        return "11-50"
    if cites <= 100:
        return "51-100"
    return "100+"


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class AggregateAnalyzer:
    """Cross-paper analytics for a single investigation."""

    def __init__(self, current_year: int | None = None):
        self._current_year = current_year

    @property
    def current_year(self) -> int:
        return self._current_year or date.today().year

    def analyze(self, papers: list[InvestigatedPaper], topic: ResearchTopic) -> AggregateAnalysis:
        """Compute every aggregate over the paper list.

        Args:
            papers: Investigated papers (already ranked and capped).
            topic: The topic, used to phrase gap opportunities.

        Returns:
            The aggregate analysis block.
        """
        return AggregateAnalysis(
            total_papers=len(papers),
            average_relevance_score=round(_mean([p.relevance_score for p in papers]), 2),
            temporal_distribution=self.temporal_distribution(papers),
            citation_analysis=self.citation_analysis(papers),
            methodology_breakdown=self.methodology_breakdown(papers),
            top_authors=self.rank_authors(papers),
            research_trends=self.detect_trends(papers),
            gap_analysis=self.find_gaps(papers, topic),
        )

    def temporal_distribution(self, papers: list[InvestigatedPaper]) -> TemporalDistribution:
        counts = Counter(p.year for p in papers if p.year is not None)
        if not counts:
            return TemporalDistribution()

        years = sorted(counts)
        recent_avg = _mean([counts[y] for y in years[-_RECENT_YEAR_SPAN:]])
        older_years = years[:-_RECENT_YEAR_SPAN]
        older_avg = _mean([counts[y] for y in older_years])

        if not older_years or recent_avg == older_avg:
            trend = "stable"
        elif recent_avg > older_avg:
            trend = "increasing"
        else:
            trend = "decreasing"

        if recent_avg > 10:
            activity = "high"
        elif recent_avg > 5:
            activity = "medium"
        else:
            activity = "low"

        return TemporalDistribution(
            yearly_counts={y: counts[y] for y in years},
            trend=trend,
            recent_average=round(recent_avg, 2),
            older_average=round(older_avg, 2),
            peak_year=max(years, key=lambda y: (counts[y], -y)),
            recent_activity=activity,
        )

    def citation_analysis(self, papers: list[InvestigatedPaper]) -> CitationAnalysis:
        citations = [p.citations or 0 for p in papers]
        threshold = highly_cited_threshold(citations)

        distribution = {"0": 0, "1-10": 0, "11-50": 0, "51-100": 0, "100+": 0}
        for cites in citations:
            distribution[_citation_bucket(cites)] += 1

        return CitationAnalysis(
            total_citations=sum(citations),
            average_citations=round(_mean(citations), 2),
            highly_cited_threshold=threshold,
            highly_cited=[p for p in papers if (p.citations or 0) >= threshold],
            distribution=distribution,
            h_index=compute_h_index(citations),
        )

    def methodology_breakdown(self, papers: list[InvestigatedPaper]) -> dict[str, MethodologyGroup]:
        groups: dict[str, list[InvestigatedPaper]] = {}
        for paper in papers:
            for method in paper.methodology:
                groups.setdefault(method, []).append(paper)
        return {
            method: MethodologyGroup(
                count=len(members),
                papers=members,
                average_score=round(_mean([p.overall_score for p in members]), 2),
            )
            for method, members in groups.items()
        }

    def rank_authors(self, papers: list[InvestigatedPaper]) -> list[AuthorProfile]:
        by_author: dict[str, list[InvestigatedPaper]] = {}
        for paper in papers:
            for author in paper.authors:
                name = author.strip()
                if name:
                    by_author.setdefault(name, []).append(paper)

        profiles = [
            AuthorProfile(
                name=name,
                paper_count=len(members),
                total_citations=sum(p.citations or 0 for p in members),
                average_relevance=round(_mean([p.relevance_score for p in members]), 2),
                top_papers=sorted(members, key=lambda p: -p.overall_score)[:3],
            )
            for name, members in by_author.items()
        ]
        profiles.sort(key=lambda a: -a.paper_count)
        return profiles[:_TOP_AUTHORS]

    def detect_trends(self, papers: list[InvestigatedPaper]) -> list[ResearchTrend]:
        year = self.current_year
        since = year - _TREND_WINDOW_YEARS
        recent = [p for p in papers if p.year is not None and p.year >= since]
        if not recent:
            return []

        counts = Counter(k for p in recent for k in p.matched_keywords)
        frequent = [(k, c) for k, c in counts.items() if c >= _TREND_MIN_PAPERS]
        frequent.sort(key=lambda kc: -kc[1])

        return [
            ResearchTrend(
                trend=keyword,
                strength=round(count / len(recent), 2),
                timeframe=f"{since}-{year}",
                papers=[p for p in recent if keyword in p.matched_keywords][:3],
                keywords=[keyword],
            )
            for keyword, count in frequent[:_MAX_TRENDS]
        ]

    def find_gaps(self, papers: list[InvestigatedPaper], topic: ResearchTopic) -> list[ResearchGap]:
        observed: list[str] = []
        for paper in papers:
            for method in paper.methodology:
                if method not in observed:
                    observed.append(method)

        evidence = (
            f"Only {', '.join(observed)} methodologies found" if observed else "No methodologies found"
        )
        title_words = topic.title.split()
        lead_word = title_words[0] if title_words else topic.title

        gaps: list[ResearchGap] = [
            ResearchGap(
                gap=f"Limited {method} research",
                evidence=evidence,
                opportunity=f"Explore {method} approaches to {topic.title}",
                suggested_keywords=[method, lead_word],
                kind="methodology",
            )
            for method in EXPECTED_METHODOLOGIES
            if method not in observed
        ]

        years = [p.year for p in papers if p.year is not None]
        if years and self.current_year - max(years) > _STALE_AFTER_YEARS:
            gaps.append(ResearchGap(
                gap="Lack of recent research",
                evidence=f"Most recent paper from {max(years)}",
                opportunity=f"Investigate current state of {topic.title}",
                suggested_keywords=["recent", "current", topic.title],
                kind="temporal",
            ))

        return gaps[:_MAX_GAPS]
