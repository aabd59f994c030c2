"""Tests for aggregate analytics."""

import pytest

from litmap.models.schemas import ResearchTopic
from litmap.services.aggregate_analyzer import (
    AggregateAnalyzer,
    compute_h_index,
    highly_cited_threshold,
)


@pytest.fixture
def aggregate(current_year):
    return AggregateAnalyzer(current_year=current_year)


def _brute_force_h(citations):
    return max(
        (h for h in range(len(citations) + 1) if sum(1 for c in citations if c >= h) >= h),
        default=0,
    )


class TestHIndex:
    """h-index via descending threshold scan."""

    @pytest.mark.parametrize("citations,expected", [
        ([10, 8, 5, 4, 3], 4),
        ([25, 8, 5, 3, 3], 3),
        ([], 0),
        ([0, 0], 0),
        ([1], 1),
        ([100, 100, 100], 3),
        ([3, 0, 6, 1, 5], 3),
    ])
    def test_known_values(self, citations, expected):
        assert compute_h_index(citations) == expected

    @pytest.mark.parametrize("citations", [
        [0, 1, 2, 3, 4, 5, 6],
        [50, 40, 30, 3, 2, 2, 1, 1],
        [7] * 12,
        [1, 1, 1, 1],
    ])
    def test_matches_definition(self, citations):
        assert compute_h_index(citations) == _brute_force_h(citations)


class TestHighlyCitedThreshold:
    """max(50, citation count at the 90th percentile)."""

    def test_empty_uses_floor(self):
        assert highly_cited_threshold([]) == 50

    def test_large_set_uses_floor_when_percentile_is_low(self):
        assert highly_cited_threshold(list(range(1, 21))) == 50

    def test_small_set_threshold_is_the_top_paper(self):
        # With fewer than ten papers the percentile index is 0, so only the
        # most-cited paper can ever qualify as highly cited.
        assert highly_cited_threshold([200, 180, 5]) == 200


class TestTemporalDistribution:
    """Yearly histogram, trend, peak and activity."""

    def _papers(self, make_paper, year_counts):
        return [
            make_paper(title=f"{year}-{i}", year=year)
            for year, count in year_counts.items()
            for i in range(count)
        ]

    def test_increasing(self, aggregate, make_paper):
        papers = self._papers(make_paper, {2024: 3, 2018: 1, 2019: 1, 2023: 2, 2025: 2})
        dist = aggregate.temporal_distribution(papers)
        assert list(dist.yearly_counts) == [2018, 2019, 2023, 2024, 2025]
        assert dist.trend == "increasing"
        assert dist.peak_year == 2024
        assert dist.recent_activity == "low"

    def test_decreasing(self, aggregate, make_paper):
        papers = self._papers(make_paper, {2015: 4, 2016: 4, 2020: 1, 2021: 1, 2022: 1})
        assert aggregate.temporal_distribution(papers).trend == "decreasing"

    def test_stable_without_older_years(self, aggregate, make_paper):
        papers = self._papers(make_paper, {2023: 1, 2024: 5})
        assert aggregate.temporal_distribution(papers).trend == "stable"

    def test_peak_ties_go_to_earliest_year(self, aggregate, make_paper):
        papers = self._papers(make_paper, {2021: 2, 2020: 2})
        assert aggregate.temporal_distribution(papers).peak_year == 2020

    def test_high_activity(self, aggregate, make_paper):
        papers = self._papers(make_paper, {2023: 12, 2024: 12, 2025: 12})
        assert aggregate.temporal_distribution(papers).recent_activity == "high"

    def test_unknown_years_ignored(self, aggregate, make_paper):
        dist = aggregate.temporal_distribution([make_paper(year=None)])
        assert dist.yearly_counts == {}
        assert dist.peak_year is None


class TestCitationAnalysis:
    """Totals, buckets, highly-cited list and h-index."""

    def test_summary(self, aggregate, make_paper):
        papers = [
            make_paper(title=str(c), citations=c) for c in (0, 5, 30, 75, 150, None)
        ]
        analysis = aggregate.citation_analysis(papers)

        assert analysis.total_citations == 260
        assert analysis.average_citations == pytest.approx(43.33)
        assert analysis.distribution == {"0": 2, "1-10": 1, "11-50": 1, "51-100": 1, "100+": 1}
        assert analysis.highly_cited_threshold == 150
        assert [p.title for p in analysis.highly_cited] == ["150"]
        assert analysis.h_index == 4


class TestBreakdownAndAuthors:
    """Methodology groups and author ranking."""

    def test_methodology_breakdown(self, aggregate, make_paper):
        papers = [
            make_paper(title="a", methodology=["quantitative"], overall_score=80.0),
            make_paper(title="b", methodology=["quantitative", "computational"], overall_score=60.0),
        ]
        breakdown = aggregate.methodology_breakdown(papers)
        assert breakdown["quantitative"].count == 2
        assert breakdown["quantitative"].average_score == 70.0
        assert breakdown["computational"].count == 1

    def test_author_ranking(self, aggregate, make_paper):
        papers = [
            make_paper(title="p1", authors=["Ada", "Ben"], citations=10, relevance_score=90.0, overall_score=70.0),
            make_paper(title="p2", authors=["Ben"], citations=5, relevance_score=30.0, overall_score=90.0),
            make_paper(title="p3", authors=["Cy"], citations=1, overall_score=10.0),
        ]
        authors = aggregate.rank_authors(papers)

        assert [a.name for a in authors] == ["Ben", "Ada", "Cy"]
        ben = authors[0]
        assert ben.paper_count == 2
        assert ben.total_citations == 15
        assert ben.average_relevance == 60.0
        assert [p.title for p in ben.top_papers] == ["p2", "p1"]

    def test_author_list_capped_at_ten(self, aggregate, make_paper):
        papers = [make_paper(title=f"p{i}", authors=[f"Author {i}"]) for i in range(15)]
        assert len(aggregate.rank_authors(papers)) == 10


class TestTrendsAndGaps:
    """Emerging-keyword trends and research gaps."""

    def test_trend_detection(self, aggregate, make_paper):
        papers = [
            make_paper(title="r1", year=2025, matched_keywords=["transformer", "attention"]),
            make_paper(title="r2", year=2024, matched_keywords=["transformer", "attention"]),
            make_paper(title="r3", year=2023, matched_keywords=["transformer", "attention"]),
            make_paper(title="r4", year=2022, matched_keywords=["transformer"]),
            make_paper(title="old", year=2010, matched_keywords=["attention", "rnn"]),
        ]
        trends = aggregate.detect_trends(papers)

        assert [t.trend for t in trends] == ["transformer", "attention"]
        assert trends[0].strength == 1.0
        assert trends[1].strength == 0.75
        assert trends[0].timeframe == "2022-2025"
        assert [p.title for p in trends[0].papers] == ["r1", "r2", "r3"]

    def test_rare_keywords_are_not_trends(self, aggregate, make_paper):
        papers = [make_paper(title=f"r{i}", year=2025, matched_keywords=["niche"]) for i in range(2)]
        assert aggregate.detect_trends(papers) == []

    def test_gaps(self, aggregate, make_paper, sample_topic):
        papers = [make_paper(title="old", year=2020, methodology=["quantitative"])]
        gaps = aggregate.find_gaps(papers, sample_topic)

        assert [g.gap for g in gaps] == [
            "Limited qualitative research",
            "Limited experimental research",
            "Limited computational research",
            "Lack of recent research",
        ]
        assert gaps[0].evidence == "Only quantitative methodologies found"
        assert gaps[0].opportunity == "Explore qualitative approaches to transformer attention mechanisms"
        assert gaps[0].suggested_keywords == ["qualitative", "transformer"]
        assert gaps[-1].evidence == "Most recent paper from 2020"
        assert gaps[-1].kind == "temporal"

    def test_recent_papers_have_no_recency_gap(self, aggregate, make_paper, sample_topic):
        papers = [make_paper(title="new", year=2024, methodology=["quantitative"])]
        assert all(g.kind == "methodology" for g in aggregate.find_gaps(papers, sample_topic))


class TestEmptyAnalysis:
    """An empty paper set still yields a valid analysis."""

    def test_empty(self, aggregate):
        topic = ResearchTopic(title="graph coloring", domain="computer_science")
        analysis = aggregate.analyze([], topic)

        assert analysis.total_papers == 0
        assert analysis.average_relevance_score == 0.0
        assert analysis.temporal_distribution.peak_year is None
        assert analysis.temporal_distribution.trend == "stable"
        assert analysis.citation_analysis.h_index == 0
        assert analysis.citation_analysis.highly_cited_threshold == 50
        assert analysis.top_authors == []
        assert analysis.research_trends == []
        assert len(analysis.gap_analysis) == 4
        assert analysis.gap_analysis[0].evidence == "No methodologies found"
