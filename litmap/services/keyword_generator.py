"""Keyword sequence generator.

Turns a research topic into one weighted keyword sequence per research
perspective (theoretical, empirical, methodological, applied, review,
interdisciplinary). Every sequence mixes title and description terms, domain
vocabulary, methodology hints, timeframe terms and context tags, and is scored
so the strongest search angles come first.
"""

import logging
import re
from datetime import date

from litmap.exceptions import InsufficientKeywordsError
from litmap.models.schemas import (
    KeywordSequence,
    KeywordSequenceReport,
    ResearchTopic,
    WeightedKeyword,
)
from litmap.services.domain_knowledge import (
    DEFAULT_KEYWORD_TABLES,
    KeywordTables,
    PerspectiveSpec,
)

logger = logging.getLogger(__name__)

MIN_KEYWORDS = 3
MAX_KEYWORDS = 15
DEFAULT_MAX_SEQUENCES = 10

_TITLE_BOOST = 1.5
_SUBDOMAIN_WEIGHT = 0.7
_METHOD_HINT_WEIGHT = 0.8
_RECENT_WEIGHT = 0.8
_LONGITUDINAL_WEIGHT = 0.7
_CONTEXT_WEIGHT = 0.6
_PERSPECTIVE_BONUS = {"theoretical": 5.0, "empirical": 3.0}

_NON_WORD = re.compile(r"[^\w\s]")
_SLUG = re.compile(r"\W+")


def extract_terms(text: str | None, stopwords: frozenset[str]) -> list[str]:
    """Lowercase, strip punctuation, drop short words and stopwords; keep first-seen order."""
    if not text:
        return []
    cleaned = _NON_WORD.sub(" ", text.lower())
    terms: list[str] = []
    for word in cleaned.split():
        if len(word) > 2 and word not in stopwords and word not in terms:
            terms.append(word)
    return terms


def _core_weight(term: str, perspective: PerspectiveSpec) -> float:
    """Weight for a topic term, nudged toward the perspective it signals."""
    weight = 1.0
    if "method" in term or "approach" in term:
        weight *= 1.5 if perspective.key == "methodological" else 0.8
    if "theory" in term or "model" in term:
        weight *= 1.5 if perspective.key == "theoretical" else 0.9
    if "study" in term or "experiment" in term:
        weight *= 1.5 if perspective.key == "empirical" else 0.9
    return weight * perspective.weight


def _sequence_name(title: str, perspective: PerspectiveSpec) -> str:
    short = title if len(title) <= 30 else f"{title[:30]}..."
    return f"{short} ({perspective.label})"


class KeywordSequenceGenerator:
    """Builds and scores keyword sequences for a research topic.

    Tables are injected once at construction and only ever read. The current
    year can be pinned so timeframe-dependent terms are reproducible.
    """

    def __init__(
        self,
        tables: KeywordTables | None = None,
        current_year: int | None = None,
    ):
        self._tables = tables or DEFAULT_KEYWORD_TABLES
        self._current_year = current_year

    @property
    def current_year(self) -> int:
        return self._current_year or date.today().year

    def generate_sequences(
        self,
        topic: ResearchTopic,
        max_sequences: int = DEFAULT_MAX_SEQUENCES,
    ) -> list[KeywordSequence]:
        """Generate keyword sequences for every perspective that has enough signal.

        Args:
            topic: The research topic.
            max_sequences: How many of the best-scoring sequences to keep.

        Returns:
            Sequences sorted by descending score (stable on ties).
        """
        return self._generate_all(topic)[:max_sequences]

    def build_report(
        self,
        topic: ResearchTopic,
        max_sequences: int = DEFAULT_MAX_SEQUENCES,
    ) -> KeywordSequenceReport:
        """Generate sequences and summarise how diverse and broad they are."""
        generated = self._generate_all(topic)
        sequences = generated[:max_sequences]

        categories = {s.category for s in sequences}
        diversity = round(len(categories) / len(self._tables.perspectives) * 100, 2)
        total_keywords = sum(len(s.keywords) for s in sequences)
        unique_keywords = len({k.term for s in sequences for k in s.keywords})
        coverage = (
            f"Generated {len(sequences)} sequences with {total_keywords} total keywords "
            f"({unique_keywords} unique). Coverage includes {len(categories)} research "
            f"perspectives for comprehensive literature investigation."
        )

        return KeywordSequenceReport(
            topic=topic,
            sequences=sequences,
            total_generated=len(generated),
            top_sequences=sequences[:5],
            diversity_score=diversity,
            coverage_analysis=coverage,
        )

    def _generate_all(self, topic: ResearchTopic) -> list[KeywordSequence]:
        sequences: list[KeywordSequence] = []
        for perspective in self._tables.perspectives:
            try:
                sequences.append(self._build_sequence(topic, perspective))
            except InsufficientKeywordsError as e:
                logger.debug(f"Skipping perspective: {e}")
        sequences.sort(key=lambda s: s.score, reverse=True)
        return sequences

    def _build_sequence(self, topic: ResearchTopic, perspective: PerspectiveSpec) -> KeywordSequence:
        keywords = self._collect_keywords(topic, perspective)
        if len(keywords) < MIN_KEYWORDS:
            raise InsufficientKeywordsError(perspective.key, len(keywords), MIN_KEYWORDS)
        keywords = keywords[:MAX_KEYWORDS]

        slug = _SLUG.sub("_", topic.title.lower()).strip("_")
        return KeywordSequence(
            id=f"{slug}_{perspective.key}",
            name=_sequence_name(topic.title, perspective),
            description=perspective.description,
            keywords=keywords,
            category=perspective.key,
            score=self._score(keywords, topic, perspective),
        )

    def _collect_keywords(
        self, topic: ResearchTopic, perspective: PerspectiveSpec
    ) -> list[WeightedKeyword]:
        """Gather keywords in priority order; the first occurrence of a term wins."""
        tables = self._tables
        pw = perspective.weight
        candidates: list[tuple[str, float, str]] = []

        for term in extract_terms(topic.title, tables.stopwords):
            candidates.append((term, _core_weight(term, perspective) * _TITLE_BOOST, "core_concept"))
        for term in extract_terms(topic.description, tables.stopwords):
            candidates.append((term, _core_weight(term, perspective), "core_concept"))

        for domain_term in tables.domain_terms.get(topic.domain.strip().lower(), ()):
            affinity = tables.affinity(perspective.key, domain_term.category)
            candidates.append((domain_term.term, domain_term.weight * affinity * pw, "domain_specific"))

        for subdomain in topic.subdomains:
            name = subdomain.replace("_", " ").strip().lower()
            if name:
                candidates.append((name, _SUBDOMAIN_WEIGHT * pw, "domain_specific"))

        for method in topic.methodology:
            for term in tables.terms_for_method(method):
                candidates.append((term, _METHOD_HINT_WEIGHT * pw, "methodology"))

        timeframe = topic.timeframe
        if timeframe is not None and timeframe.is_complete:
            if timeframe.end >= self.current_year - 2:
                candidates.append(("recent developments", _RECENT_WEIGHT * pw, "temporal"))
            if timeframe.end - timeframe.start >= 10:
                candidates.append(("longitudinal study", _LONGITUDINAL_WEIGHT * pw, "temporal"))

        for tag in topic.context:
            tag = tag.strip().lower()
            if tag:
                candidates.append((tag, _CONTEXT_WEIGHT * pw, "contextual"))

        keywords: list[WeightedKeyword] = []
        seen: set[str] = set()
        for term, weight, category in candidates:
            if term in seen:
                continue
            seen.add(term)
            keywords.append(WeightedKeyword(
                term=term,
                weight=weight,
                synonyms=tables.synonyms_for(term),
                category=category,
            ))
        return keywords

    def _score(
        self,
        keywords: list[WeightedKeyword],
        topic: ResearchTopic,
        perspective: PerspectiveSpec,
    ) -> float:
        """0.4 * total weight + 2 per distinct category + 10 * topic coverage, plus perspective bonus."""
        total_weight = sum(k.weight for k in keywords)
        diversity = len({k.category for k in keywords})

        topic_terms = extract_terms(
            f"{topic.title} {topic.description or ''}", self._tables.stopwords
        )
        vocabulary: set[str] = set()
        for k in keywords:
            vocabulary.add(k.term.lower())
            vocabulary.update(s.lower() for s in k.synonyms)
        coverage = (
            sum(1 for t in topic_terms if t in vocabulary) / len(topic_terms)
            if topic_terms else 0.0
        )

        score = 0.4 * total_weight + 2 * diversity + 10 * coverage
        score += _PERSPECTIVE_BONUS.get(perspective.key, 0.0)
        return round(score, 2)
