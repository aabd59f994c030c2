"""Test configuration and fixtures for pytest."""

import pytest

from litmap.models.schemas import (
    BibliographyEntry,
    InvestigatedPaper,
    KeywordSequence,
    ResearchTopic,
    WeightedKeyword,
)
from litmap.services.keyword_generator import KeywordSequenceGenerator

# Pinned so age-dependent scores do not drift with the calendar.
CURRENT_YEAR = 2025


@pytest.fixture
def current_year():
    return CURRENT_YEAR


@pytest.fixture
def sample_topic():
    """The transformer-attention topic used across scenarios."""
    return ResearchTopic(
        title="transformer attention mechanisms",
        domain="machine_learning",
    )


@pytest.fixture
def generator():
    return KeywordSequenceGenerator(current_year=CURRENT_YEAR)


@pytest.fixture
def sample_sequences(generator, sample_topic):
    return generator.generate_sequences(sample_topic)


@pytest.fixture
def make_sequence():
    """Factory for hand-built keyword sequences.

    Keywords are given as (term, weight) or (term, weight, synonyms) tuples.
    """
    def _make(seq_id: str = "seq", keywords=(), category: str = "theoretical") -> KeywordSequence:
        built = []
        for item in keywords:
            term, weight, *rest = item
            built.append(WeightedKeyword(
                term=term,
                weight=weight,
                synonyms=list(rest[0]) if rest else [],
                category="core_concept",
            ))
        return KeywordSequence(
            id=seq_id,
            name=f"{seq_id} (Test)",
            description="Hand-built sequence",
            keywords=built,
            category=category,
            score=0.0,
        )
    return _make


@pytest.fixture
def sample_entries():
    """Raw search results with a near-duplicate title pair."""
    return [
        BibliographyEntry(
            id="arxiv:1706.03762",
            title="Attention Is All You Need",
            authors=["Ashish Vaswani", "Noam Shazeer"],
            year=2017,
            abstract=(
                "We propose the Transformer, a model architecture based solely on attention "
                "mechanisms. Experiments on two machine translation tasks show these models "
                "to be superior in quality. Results demonstrated a new state of the art."
            ),
            keywords=["transformer", "attention"],
            citations=90000,
            journal="NeurIPS",
            doi="10.5555/3295222.3295349",
        ),
        BibliographyEntry(
            title="A Survey of Efficient Transformers",
            authors=["Yi Tay"],
            year=2022,
            abstract="This survey reviews efficient transformer models and attention approximations.",
            citations=900,
        ),
        BibliographyEntry(
            title="attention is all you need!",
            authors=["Someone Else"],
            year=2018,
        ),
        BibliographyEntry(
            title="Sparse Attention for Long Documents",
            authors=["Ashish Vaswani"],
            year=2024,
            abstract="A new method for sparse attention using a neural network; however, memory use remains high.",
            citations=12,
        ),
    ]


@pytest.fixture
def make_paper():
    """Factory for investigated papers with neutral defaults."""
    def _make(**overrides) -> InvestigatedPaper:
        data = {
            "title": "Untitled",
            "relevance_score": 50.0,
            "temporal_score": 50.0,
            "citation_impact": 50.0,
            "overall_score": 50.0,
            "research_category": "empirical",
        }
        data.update(overrides)
        return InvestigatedPaper(**data)
    return _make
