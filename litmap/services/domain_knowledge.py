"""Static keyword tables used by the keyword sequence generator.

The tables are bundled into a read-only ``KeywordTables`` object that is built
once and injected into the generator. Callers who want different domain terms
or synonyms construct their own ``KeywordTables`` instead of mutating these.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from litmap.models.schemas import KeywordCategory, Perspective


@dataclass(frozen=True)
class DomainTerm:
    term: str
    weight: float
    category: KeywordCategory


@dataclass(frozen=True)
class PerspectiveSpec:
    key: Perspective
    label: str
    description: str
    weight: float


PERSPECTIVES: tuple[PerspectiveSpec, ...] = (
    PerspectiveSpec("theoretical", "Theoretical", "Theoretical foundations and conceptual frameworks", 1.0),
    PerspectiveSpec("empirical", "Empirical", "Empirical studies and experimental research", 0.9),
    PerspectiveSpec("methodological", "Methodological", "Research methods and analytical approaches", 0.8),
    PerspectiveSpec("applied", "Applied", "Practical applications and real-world implementations", 0.85),
    PerspectiveSpec("review", "Review", "Literature reviews and meta-analyses", 0.7),
    PerspectiveSpec("interdisciplinary", "Interdisciplinary", "Recent developments and emerging trends", 0.9),
)

STOPWORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "is", "are", "was", "were", "be", "been", "being", "have",
    "has", "had", "do", "does", "did", "will", "would", "could", "should",
})

_SYNONYMS: dict[str, tuple[str, ...]] = {
    "method": ("approach", "technique", "methodology", "procedure"),
    "study": ("research", "investigation", "analysis", "examination"),
    "model": ("framework", "paradigm", "theory", "structure"),
    "analysis": ("examination", "evaluation", "assessment", "investigation"),
    "development": ("advancement", "progress", "evolution", "improvement"),
    "application": ("implementation", "utilization", "deployment", "usage"),
    "performance": ("efficiency", "effectiveness", "capability", "output"),
    "optimization": ("improvement", "enhancement", "refinement", "maximization"),
}

_METHOD_TERMS: dict[str, tuple[str, ...]] = {
    "quantitative": ("statistical analysis", "numerical data", "measurement", "survey"),
    "qualitative": ("interview", "case study", "ethnography", "content analysis"),
    "experimental": ("controlled trial", "randomization", "hypothesis testing", "variable"),
    "observational": ("longitudinal study", "cross-sectional", "cohort study", "naturalistic"),
    "computational": ("simulation", "modeling", "algorithm", "numerical method"),
    "meta-analysis": ("systematic review", "effect size", "heterogeneity", "publication bias"),
}

_DOMAIN_TERMS: dict[str, tuple[DomainTerm, ...]] = {
    "computer_science": (
        DomainTerm("algorithm", 1.0, "core_concept"),
        DomainTerm("data structure", 0.9, "technical"),
        DomainTerm("computational complexity", 0.8, "theoretical"),
        DomainTerm("software engineering", 0.9, "applied"),
        DomainTerm("distributed systems", 0.8, "technical"),
        DomainTerm("database", 0.7, "technical"),
    ),
    "machine_learning": (
        DomainTerm("neural network", 1.0, "core_concept"),
        DomainTerm("deep learning", 1.0, "core_concept"),
        DomainTerm("supervised learning", 0.9, "methodology"),
        DomainTerm("unsupervised learning", 0.9, "methodology"),
        DomainTerm("reinforcement learning", 0.9, "methodology"),
        DomainTerm("feature extraction", 0.8, "technical"),
        DomainTerm("model evaluation", 0.8, "methodology"),
        DomainTerm("overfitting", 0.7, "technical"),
    ),
    "artificial_intelligence": (
        DomainTerm("artificial intelligence", 1.0, "core_concept"),
        DomainTerm("cognitive computing", 0.8, "theoretical"),
        DomainTerm("expert system", 0.7, "applied"),
    ),
    "biology": (
        DomainTerm("molecular biology", 1.0, "core_concept"),
        DomainTerm("genetics", 0.9, "core_concept"),
        DomainTerm("cell biology", 0.9, "core_concept"),
    ),
    "medicine": (
        DomainTerm("clinical trial", 1.0, "methodology"),
        DomainTerm("diagnosis", 0.9, "applied"),
        DomainTerm("treatment", 0.9, "applied"),
    ),
    "biomedical": (
        DomainTerm("biomedical engineering", 1.0, "core_concept"),
        DomainTerm("medical device", 0.8, "applied"),
        DomainTerm("biomarker", 0.9, "technical"),
    ),
    "physics": (
        DomainTerm("quantum mechanics", 1.0, "theoretical"),
        DomainTerm("thermodynamics", 0.9, "theoretical"),
        DomainTerm("particle physics", 0.9, "theoretical"),
    ),
    "chemistry": (
        DomainTerm("organic chemistry", 1.0, "core_concept"),
        DomainTerm("chemical reaction", 0.9, "core_concept"),
        DomainTerm("spectroscopy", 0.8, "methodology"),
    ),
    "psychology": (
        DomainTerm("cognitive psychology", 1.0, "core_concept"),
        DomainTerm("behavioral analysis", 0.9, "methodology"),
        DomainTerm("psychological assessment", 0.8, "methodology"),
    ),
    "sociology": (
        DomainTerm("social theory", 1.0, "theoretical"),
        DomainTerm("social network", 0.9, "core_concept"),
        DomainTerm("ethnography", 0.8, "methodology"),
    ),
    "economics": (
        DomainTerm("economic theory", 1.0, "theoretical"),
        DomainTerm("econometrics", 0.9, "methodology"),
        DomainTerm("market analysis", 0.8, "applied"),
    ),
}

# perspective -> domain-term category -> multiplier
_PERSPECTIVE_AFFINITY: dict[str, dict[str, float]] = {
    "theoretical": {"theoretical": 1.3},
    "applied": {"applied": 1.3},
    "methodological": {"methodology": 1.4},
}


def _freeze(mapping: Mapping) -> MappingProxyType:
    return MappingProxyType({
        key: _freeze(value) if isinstance(value, Mapping) else value
        for key, value in mapping.items()
    })


@dataclass(frozen=True)
class KeywordTables:
    """Read-only bundle of every table the keyword generator consults."""

    perspectives: tuple[PerspectiveSpec, ...] = PERSPECTIVES
    stopwords: frozenset[str] = STOPWORDS
    synonyms: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: _SYNONYMS)
    method_terms: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: _METHOD_TERMS)
    domain_terms: Mapping[str, tuple[DomainTerm, ...]] = field(default_factory=lambda: _DOMAIN_TERMS)
    perspective_affinity: Mapping[str, Mapping[str, float]] = field(
        default_factory=lambda: _PERSPECTIVE_AFFINITY
    )

    def __post_init__(self):
        for name in ("synonyms", "method_terms", "domain_terms", "perspective_affinity"):
            object.__setattr__(self, name, _freeze(getattr(self, name)))

    def synonyms_for(self, term: str) -> list[str]:
        """Synonyms for a term: exact table key first, then keys contained in the term."""
        term = term.lower()
        if term in self.synonyms:
            return list(self.synonyms[term])
        found: list[str] = []
        for key, values in self.synonyms.items():
            if key in term.split():
                for value in values:
                    if value not in found:
                        found.append(value)
        return found

    def terms_for_method(self, method: str) -> list[str]:
        """Search terms for a methodology hint; unknown hints map to themselves."""
        key = method.strip().lower()
        return list(self.method_terms.get(key, (key,)))

    def affinity(self, perspective: str, term_category: str) -> float:
        return self.perspective_affinity.get(perspective, {}).get(term_category, 1.0)


DEFAULT_KEYWORD_TABLES = KeywordTables()
