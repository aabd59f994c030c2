"""Tests for the keyword sequence generator."""

import pytest

from litmap.models.schemas import ResearchTopic, TimeFrame
from litmap.services.domain_knowledge import (
    DEFAULT_KEYWORD_TABLES,
    STOPWORDS,
    DomainTerm,
    KeywordTables,
)
from litmap.services.keyword_generator import KeywordSequenceGenerator, extract_terms


def _by_category(sequences):
    return {s.category: s for s in sequences}


def _weights(sequence):
    return {k.term: k.weight for k in sequence.keywords}


class TestExtractTerms:
    """Topic-text term extraction."""

    def test_drops_punctuation_stopwords_and_short_words(self):
        assert extract_terms("The Role of Attention, in Transformers!", STOPWORDS) == [
            "role", "attention", "transformers",
        ]

    def test_deduplicates_preserving_order(self):
        assert extract_terms("graph graph networks graph", STOPWORDS) == ["graph", "networks"]

    def test_empty_text(self):
        assert extract_terms(None, STOPWORDS) == []
        assert extract_terms("", STOPWORDS) == []


class TestGenerateSequences:
    """Sequence assembly, limits and scoring."""

    def test_transformer_topic_includes_domain_terms_and_perspectives(self, sample_sequences):
        terms = {k.term for s in sample_sequences for k in s.keywords}
        assert "neural network" in terms or "deep learning" in terms

        categories = {s.category for s in sample_sequences}
        assert "methodological" in categories
        assert "theoretical" in categories

    def test_domain_lookup_ignores_case(self, generator):
        topic = ResearchTopic(title="transformer attention mechanisms", domain=" Machine_Learning ")
        terms = {k.term for s in generator.generate_sequences(topic) for k in s.keywords}
        assert "neural network" in terms

    def test_sequence_bounds_and_order(self, sample_sequences):
        assert 0 < len(sample_sequences) <= 10
        for seq in sample_sequences:
            assert 3 <= len(seq.keywords) <= 15
            assert all(k.weight >= 0 for k in seq.keywords)
        scores = [s.score for s in sample_sequences]
        assert scores == sorted(scores, reverse=True)

    def test_insufficient_keywords_skips_every_perspective(self, generator):
        topic = ResearchTopic(title="AI", domain="unknown_domain")
        assert generator.generate_sequences(topic) == []

    def test_keywords_capped_at_fifteen(self, generator):
        topic = ResearchTopic(
            title="graph neural networks",
            domain="machine_learning",
            context=[f"tag{i}" for i in range(10)],
        )
        for seq in generator.generate_sequences(topic):
            assert len(seq.keywords) == 15

    def test_max_sequences_limit(self, generator, sample_topic):
        assert len(generator.generate_sequences(sample_topic, max_sequences=2)) == 2

    def test_score_formula(self, generator):
        topic = ResearchTopic(title="graph coloring heuristics", domain="unknown")
        scores = {s.category: s.score for s in generator.generate_sequences(topic)}

        # theoretical: 0.4 * (3 * 1.5) + 2 * 1 category + 10 * full coverage + 5 bonus
        assert scores["theoretical"] == pytest.approx(18.8)
        # empirical: 0.4 * (3 * 1.35) + 2 + 10 + 3 bonus
        assert scores["empirical"] == pytest.approx(16.62)
        assert scores["review"] == pytest.approx(13.26)

    def test_title_terms_weighted_by_perspective(self, generator):
        topic = ResearchTopic(title="language model scaling", domain="unknown")
        by_cat = _by_category(generator.generate_sequences(topic))

        assert _weights(by_cat["theoretical"])["language"] == pytest.approx(1.5)
        assert _weights(by_cat["theoretical"])["model"] == pytest.approx(2.25)
        assert _weights(by_cat["applied"])["model"] == pytest.approx(0.9 * 0.85 * 1.5)

    def test_domain_terms_boosted_by_perspective_affinity(self, sample_sequences):
        by_cat = _by_category(sample_sequences)
        assert _weights(by_cat["methodological"])["supervised learning"] == pytest.approx(0.9 * 1.4 * 0.8)
        assert _weights(by_cat["empirical"])["supervised learning"] == pytest.approx(0.9 * 0.9)

    def test_temporal_terms_need_complete_timeframe(self, current_year):
        generator = KeywordSequenceGenerator(current_year=current_year)
        topic = ResearchTopic(
            title="transformer attention mechanisms",
            domain="machine_learning",
            timeframe=TimeFrame(start=2010, end=2024),
        )
        terms = {k.term: k.category for k in generator.generate_sequences(topic)[0].keywords}
        assert terms["recent developments"] == "temporal"
        assert terms["longitudinal study"] == "temporal"

        open_ended = topic.model_copy(update={"timeframe": TimeFrame(end=2024)})
        terms = {k.term for s in generator.generate_sequences(open_ended) for k in s.keywords}
        assert "recent developments" not in terms

    def test_old_window_gets_no_recent_term(self, generator):
        topic = ResearchTopic(
            title="transformer attention mechanisms",
            domain="machine_learning",
            timeframe=TimeFrame(start=2015, end=2018),
        )
        terms = {k.term for s in generator.generate_sequences(topic) for k in s.keywords}
        assert "recent developments" not in terms
        assert "longitudinal study" not in terms

    def test_methodology_hints_map_through_table(self, generator):
        topic = ResearchTopic(
            title="dark matter halos",
            domain="physics",
            methodology=["qualitative", "bayesian"],
        )
        keywords = {k.term: k for k in generator.generate_sequences(topic)[0].keywords}
        assert keywords["interview"].category == "methodology"
        assert keywords["bayesian"].category == "methodology"

    def test_synonyms_attached(self, generator):
        topic = ResearchTopic(title="analysis of performance", domain="biology")
        keywords = {k.term: k for k in generator.generate_sequences(topic)[0].keywords}
        assert "evaluation" in keywords["analysis"].synonyms
        assert "efficiency" in keywords["performance"].synonyms

    def test_sequence_identity_is_deterministic(self, generator, sample_topic):
        first = generator.generate_sequences(sample_topic)
        second = generator.generate_sequences(sample_topic)
        assert [s.id for s in first] == [s.id for s in second]

        theoretical = _by_category(first)["theoretical"]
        assert theoretical.id == "transformer_attention_mechanisms_theoretical"
        assert theoretical.name == "transformer attention mechanis... (Theoretical)"


class TestKeywordTables:
    """Injected table behaviour."""

    def test_custom_domain_terms(self, current_year):
        tables = KeywordTables(domain_terms={
            "astronomy": (DomainTerm("exoplanet", 1.0, "core_concept"),),
        })
        generator = KeywordSequenceGenerator(tables=tables, current_year=current_year)
        topic = ResearchTopic(title="transit photometry surveys", domain="astronomy")
        terms = {k.term for s in generator.generate_sequences(topic) for k in s.keywords}
        assert "exoplanet" in terms

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_KEYWORD_TABLES.synonyms["graph"] = ("network",)
        with pytest.raises(TypeError):
            DEFAULT_KEYWORD_TABLES.perspective_affinity["theoretical"]["theoretical"] = 9.0

    def test_unknown_method_maps_to_itself(self):
        assert DEFAULT_KEYWORD_TABLES.terms_for_method("Bayesian ") == ["bayesian"]


class TestKeywordSequenceReport:
    """Report built alongside the sequences."""

    def test_report_summary(self, generator, sample_topic):
        report = generator.build_report(sample_topic)

        assert report.total_generated == 6
        assert len(report.top_sequences) == 5
        assert report.diversity_score == 100.0
        assert report.coverage_analysis.startswith(
            "Generated 6 sequences with 66 total keywords (11 unique)."
        )
