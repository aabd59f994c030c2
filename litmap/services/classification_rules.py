"""Indicator-phrase tables for the reference classifier.

Each dimension is a literal table of phrases; the classifier walks them in a
fixed order. Domains live in a registry keyed by domain name, so adding a
domain is a table edit. ``ClassificationRules`` is immutable and injected.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

# Ordered: the first rule whose phrases match decides the research type.
RESEARCH_TYPE_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("review", (
        "systematic review", "meta-analysis", "literature review",
        "review of", "survey of", "overview of",
    )),
    ("theoretical", (
        "theoretical framework", "conceptual model", "theory of",
        "theoretical analysis", "mathematical model", "formal model",
    )),
    ("methodological", (
        "new method", "novel approach", "methodology for",
        "algorithm for", "technique for", "framework for",
    )),
    ("applied", (
        "application of", "implementation of", "case study",
        "real-world", "practical", "industrial application",
    )),
    ("survey", (
        "survey study", "questionnaire", "interview study",
        "survey of", "cross-sectional survey",
    )),
)

METHODOLOGY_INDICATORS: dict[str, tuple[str, ...]] = {
    "quantitative": (
        "statistical", "numerical", "quantitative", "measurement",
        "survey", "questionnaire", "regression", "correlation",
    ),
    "qualitative": (
        "qualitative", "interview", "ethnography", "case study",
        "content analysis", "thematic analysis", "grounded theory",
    ),
    "experimental": (
        "experiment", "controlled trial", "randomized", "control group",
        "treatment group", "intervention", "rct",
    ),
    "observational": (
        "observational", "cohort", "longitudinal", "cross-sectional",
        "prospective", "retrospective", "natural experiment",
    ),
    "computational": (
        "computational", "simulation", "modeling", "algorithm",
        "machine learning", "artificial intelligence", "data mining",
    ),
}

# Highest level of evidence first.
EVIDENCE_HIERARCHY: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("systematic_review_meta_analysis", ("systematic review", "meta-analysis", "cochrane review")),
    ("randomized_controlled_trial", (
        "randomized controlled trial", "rct", "randomized trial",
        "double-blind", "placebo-controlled",
    )),
    ("controlled_trial", ("controlled trial", "quasi-experimental", "controlled study", "intervention study")),
    ("case_control_cohort", (
        "case-control", "cohort study", "longitudinal study",
        "prospective study", "retrospective study",
    )),
    ("case_series_reports", (
        "case series", "case report", "case study",
        "descriptive study", "cross-sectional",
    )),
    ("expert_opinion", ("expert opinion", "consensus", "guideline", "recommendation", "position paper")),
    ("theoretical_framework", ("theoretical", "conceptual", "framework", "model", "theory")),
)

CONTRIBUTION_INDICATORS: dict[str, tuple[str, ...]] = {
    "novel_theory": ("new theory", "novel theory", "theoretical framework", "conceptual model", "new model"),
    "novel_method": (
        "new method", "novel method", "new approach",
        "novel approach", "new algorithm", "new technique",
    ),
    "novel_application": (
        "new application", "novel application", "first application",
        "applying", "implementation",
    ),
    "empirical_validation": (
        "validation", "verification", "empirical study",
        "experimental validation", "testing",
    ),
    "comparative_analysis": ("comparison", "comparative", "versus", "vs", "benchmark", "evaluation"),
    "replication_study": ("replication", "reproduction", "replicate", "reproduce", "replicating"),
    "extension_study": ("extension", "extending", "building on", "based on", "improvement"),
    "critique_analysis": ("critique", "criticism", "limitations", "problems with", "issues with"),
}

DOMAIN_REGISTRY: dict[str, tuple[str, ...]] = {
    "computer_science": (
        "computer science", "algorithm", "data structure", "programming",
        "software", "computing", "computational", "database", "network",
    ),
    "machine_learning": (
        "machine learning", "deep learning", "neural network", "supervised learning",
        "unsupervised learning", "reinforcement learning", "classification", "regression",
    ),
    "artificial_intelligence": (
        "artificial intelligence", "ai", "expert system", "natural language processing",
        "computer vision", "robotics", "cognitive computing",
    ),
    "biology": (
        "biology", "molecular biology", "cell biology", "genetics", "genomics",
        "proteomics", "bioinformatics", "ecology", "evolution",
    ),
    "medicine": (
        "medicine", "medical", "clinical", "patient", "treatment",
        "therapy", "diagnosis", "disease", "health", "pharmaceutical",
    ),
    "physics": (
        "physics", "quantum", "particle", "thermodynamics", "mechanics",
        "electromagnetism", "optics", "atomic", "nuclear",
    ),
    "chemistry": (
        "chemistry", "chemical", "organic chemistry", "inorganic chemistry",
        "biochemistry", "reaction", "synthesis", "catalyst", "molecule",
    ),
    "psychology": (
        "psychology", "psychological", "cognitive", "behavioral", "mental health",
        "psychotherapy", "personality", "emotion", "perception",
    ),
    "economics": (
        "economics", "economic", "market", "finance", "financial",
        "monetary", "fiscal", "trade", "investment", "econometrics",
    ),
    "sociology": (
        "sociology", "social theory", "social network", "ethnography",
        "social structure", "inequality", "community",
    ),
}

GENERAL_DOMAIN = "general"

# Phrases this short only count as whole words ("ai" must not match "said").
_WHOLE_WORD_MAX_LEN = 3


@lru_cache(maxsize=256)
def _whole_word(phrase: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(phrase)}\b")


def phrase_in(phrase: str, text: str) -> bool:
    """Containment test against lowercased text."""
    if len(phrase) <= _WHOLE_WORD_MAX_LEN:
        return _whole_word(phrase).search(text) is not None
    return phrase in text


def matching_phrases(phrases: tuple[str, ...], text: str) -> list[str]:
    return [p for p in phrases if phrase_in(p, text)]


@dataclass(frozen=True)
class ClassificationRules:
    """Read-only bundle of the classifier's indicator tables."""

    research_types: tuple[tuple[str, tuple[str, ...]], ...] = RESEARCH_TYPE_RULES
    evidence_hierarchy: tuple[tuple[str, tuple[str, ...]], ...] = EVIDENCE_HIERARCHY
    methodology: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: METHODOLOGY_INDICATORS)
    contributions: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: CONTRIBUTION_INDICATORS)
    domains: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: DOMAIN_REGISTRY)

    def __post_init__(self):
        for name in ("methodology", "contributions", "domains"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))


DEFAULT_CLASSIFICATION_RULES = ClassificationRules()
