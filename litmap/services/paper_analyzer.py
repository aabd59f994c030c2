"""Paper Analyzer service.

Scores each deduplicated bibliography entry against the keyword sequences:
keyword relevance, temporal fit and citation impact, blended into an overall
score. Also assigns a primary research category and methodology tags, and
pulls short findings / limitations / future-work snippets out of the abstract.

Every scoring function here is total: missing years, citations or abstracts
fall back to neutral values instead of raising.
"""

import logging
import re
from datetime import date
from typing import Iterable

from litmap.models.schemas import (
    BibliographyEntry,
    InvestigatedPaper,
    KeywordSequence,
    ResearchCategory,
    SortKey,
    TimeFrame,
)

logger = logging.getLogger(__name__)

DEFAULT_TOTAL_MAX_PAPERS = 100

RELEVANCE_WEIGHT = 0.5
TEMPORAL_WEIGHT = 0.2
CITATION_WEIGHT = 0.3

_TITLE_MATCH = 2.0
_ABSTRACT_MATCH = 1.5
_KEYWORD_MATCH = 1.0
_SYNONYM_MATCH = 0.8
_COVERAGE_BONUS = 10.0

UNKNOWN_YEAR_TEMPORAL_SCORE = 50.0

# (max age in years, score); first row covering the age wins
_AGE_LADDER: tuple[tuple[int, float], ...] = ((2, 100.0), (5, 80.0), (10, 60.0), (15, 40.0))
_OLD_PAPER_SCORE = 20.0

_CITATION_LADDER: tuple[tuple[float, float], ...] = (
    (50, 100.0),
    (20, 90.0),
    (10, 80.0),
    (5, 70.0),
    (2, 60.0),
    (1, 50.0),
)

# category -> (points per matching pattern, patterns); order breaks ties
_CATEGORY_PATTERNS: dict[ResearchCategory, tuple[float, tuple[str, ...]]] = {
    "theoretical": (2.0, ("theory", "model", "framework")),
    "empirical": (2.0, ("experiment", "study", "analysis")),
    "methodological": (2.0, ("method", "approach", "algorithm")),
    "applied": (2.0, ("application", "implementation", "system")),
    "review": (3.0, ("review", "survey", "meta-analysis")),
}

_METHODOLOGY_PATTERNS: dict[str, re.Pattern] = {
    "quantitative": re.compile(r"quantitative|statistical|numerical|survey|questionnaire", re.I),
    "qualitative": re.compile(r"qualitative|interview|case study|ethnography|content analysis", re.I),
    "experimental": re.compile(r"experiment|controlled|randomized|trial|hypothesis", re.I),
    "computational": re.compile(r"simulation|modeling|algorithm|computational|numerical", re.I),
    "observational": re.compile(r"observational|longitudinal|cross-sectional|cohort", re.I),
    "meta-analysis": re.compile(r"meta-analysis|systematic review|literature review", re.I),
}

_FINDINGS = re.compile(
    r"\b(?:results?|findings?|conclusion|discovered|demonstrated|showed|found that)\b[^.]*\.",
    re.I,
)
_LIMITATIONS = re.compile(
    r"\b(?:limitations?|constraints?|drawbacks?|weakness(?:es)?|however|but|although)\b[^.]*\.",
    re.I,
)
_FUTURE_WORK = re.compile(
    r"\b(?:future work|future research|next steps?|further study|ongoing|continue)\b[^.]*\.",
    re.I,
)


def _entry_text(entry: BibliographyEntry) -> tuple[str, str, list[str]]:
    return (
        entry.title.lower(),
        (entry.abstract or "").lower(),
        [k.lower() for k in entry.keywords],
    )


def score_relevance(entry: BibliographyEntry, sequences: Iterable[KeywordSequence]) -> float:
    """Best per-sequence keyword relevance, clamped to [0, 100].

    Each keyword scores in the first place it is found: title, abstract,
    keyword list, then synonyms anywhere. A sequence's score is the mean
    keyword score plus a bonus for the share of its keywords that matched.
    """
    title, abstract, keywords = _entry_text(entry)
    everything = " ".join([title, abstract, *keywords])

    best = 0.0
    for sequence in sequences:
        if not sequence.keywords:
            continue
        total = 0.0
        matches = 0
        for kw in sequence.keywords:
            term = kw.term.lower()
            if term in title:
                total += kw.weight * _TITLE_MATCH
            elif term in abstract:
                total += kw.weight * _ABSTRACT_MATCH
            elif any(term in k for k in keywords):
                total += kw.weight * _KEYWORD_MATCH
            elif any(s.lower() in everything for s in kw.synonyms):
                total += kw.weight * _SYNONYM_MATCH
            else:
                continue
            matches += 1
        n = len(sequence.keywords)
        best = max(best, total / n + _COVERAGE_BONUS * matches / n)

    return round(min(100.0, max(0.0, best)), 2)


def score_temporal(year: int | None, timeframe: TimeFrame | None, current_year: int) -> float:
    """Timeframe fit when a window is given, otherwise an age-decay ladder."""
    if year is None:
        return UNKNOWN_YEAR_TEMPORAL_SCORE

    if timeframe is not None and (timeframe.start is not None or timeframe.end is not None):
        if timeframe.start is not None and year < timeframe.start:
            distance = timeframe.start - year
        elif timeframe.end is not None and year > timeframe.end:
            distance = year - timeframe.end
        else:
            return 100.0
        return max(0.0, 100.0 - 10.0 * distance)

    age = current_year - year
    for max_age, score in _AGE_LADDER:
        if age <= max_age:
            return score
    return _OLD_PAPER_SCORE


def score_citation_impact(citations: int | None, year: int | None, current_year: int) -> float:
    """Tiered score from citations per year since publication."""
    cites = citations or 0
    age = current_year - year if year is not None else 0
    per_year = cites / age if age > 0 else cites
    for floor, score in _CITATION_LADDER:
        if per_year >= floor:
            return score
    return 40.0 if cites > 0 else 30.0


def combine_scores(relevance: float, temporal: float, citation_impact: float) -> float:
    return round(
        RELEVANCE_WEIGHT * relevance + TEMPORAL_WEIGHT * temporal + CITATION_WEIGHT * citation_impact,
        2,
    )


def find_matched_keywords(entry: BibliographyEntry, sequences: Iterable[KeywordSequence]) -> list[str]:
    """Sequence terms (or their synonyms) that occur in the paper, first-seen order."""
    title, abstract, keywords = _entry_text(entry)
    text = " ".join([title, abstract, *keywords])
    matched: list[str] = []
    for sequence in sequences:
        for kw in sequence.keywords:
            if kw.term in matched:
                continue
            if kw.term.lower() in text or any(s.lower() in text for s in kw.synonyms):
                matched.append(kw.term)
    return matched


def determine_research_category(text: str) -> ResearchCategory:
    """Arg-max over weighted pattern hits; the later category wins ties."""
    lowered = text.lower()
    best: ResearchCategory = "theoretical"
    best_score = -1.0
    for category, (points, patterns) in _CATEGORY_PATTERNS.items():
        score = points * sum(1 for p in patterns if p in lowered)
        if score >= best_score:
            best, best_score = category, score
    return best


def detect_methodologies(text: str) -> list[str]:
    return [name for name, pattern in _METHODOLOGY_PATTERNS.items() if pattern.search(text)]


def _extract(pattern: re.Pattern, text: str | None, limit: int) -> str | None:
    if not text:
        return None
    matches = [m.group(0).strip() for m in pattern.finditer(text)][:limit]
    return " ".join(matches) if matches else None


def extract_findings(abstract: str | None) -> str | None:
    return _extract(_FINDINGS, abstract, 2)


def extract_limitations(abstract: str | None) -> str | None:
    return _extract(_LIMITATIONS, abstract, 1)


def extract_future_work(abstract: str | None) -> str | None:
    return _extract(_FUTURE_WORK, abstract, 1)


def _sort_key(sort_by: SortKey):
    if sort_by == "relevance":
        return lambda p: -p.relevance_score
    if sort_by == "citations":
        return lambda p: -(p.citations or 0)
    if sort_by == "date":
        return lambda p: -(p.year if p.year is not None else -10**6)
    if sort_by == "impact":
        return lambda p: -p.citation_impact
    return lambda p: -p.overall_score


class PaperAnalyzer:
    """Turns raw bibliography entries into scored, categorized papers."""

    def __init__(self, current_year: int | None = None):
        self._current_year = current_year

    @property
    def current_year(self) -> int:
        return self._current_year or date.today().year

    def analyze_paper(
        self,
        entry: BibliographyEntry,
        sequences: list[KeywordSequence],
        timeframe: TimeFrame | None = None,
    ) -> InvestigatedPaper:
        """Score and categorize a single entry."""
        year = self.current_year
        relevance = score_relevance(entry, sequences)
        temporal = score_temporal(entry.year, timeframe, year)
        impact = score_citation_impact(entry.citations, entry.year, year)
        text = f"{entry.title} {entry.abstract or ''}"

        return InvestigatedPaper(
            **entry.model_dump(include=set(BibliographyEntry.model_fields)),
            relevance_score=relevance,
            temporal_score=temporal,
            citation_impact=impact,
            overall_score=combine_scores(relevance, temporal, impact),
            matched_keywords=find_matched_keywords(entry, sequences),
            research_category=determine_research_category(text),
            methodology=detect_methodologies(text),
            findings=extract_findings(entry.abstract),
            limitations=extract_limitations(entry.abstract),
            future_work=extract_future_work(entry.abstract),
        )

    def analyze(
        self,
        entries: list[BibliographyEntry],
        sequences: list[KeywordSequence],
        timeframe: TimeFrame | None = None,
        total_max_papers: int = DEFAULT_TOTAL_MAX_PAPERS,
        min_citation_count: int = 0,
        include_reviews: bool = True,
        sort_by: SortKey = "overall",
    ) -> list[InvestigatedPaper]:
        """Analyze every entry and keep the best papers.

        Args:
            entries: Deduplicated bibliography entries.
            sequences: Keyword sequences to score relevance against.
            timeframe: Year window for temporal scoring (age ladder when None).
            total_max_papers: Number of top papers (by overall score) to keep.
            min_citation_count: Drop papers cited fewer times than this.
            include_reviews: Keep papers whose category is "review".
            sort_by: Order of the returned list; truncation always uses overall score.

        Returns:
            Investigated papers, at most total_max_papers of them.
        """
        papers = [self.analyze_paper(e, sequences, timeframe) for e in entries]
        kept = [
            p for p in papers
            if (p.citations or 0) >= min_citation_count
            and (include_reviews or p.research_category != "review")
        ]
        if len(kept) != len(papers):
            logger.debug(f"Filtered out {len(papers) - len(kept)} papers")

        ranked = sorted(kept, key=_sort_key("overall"))[:total_max_papers]
        if sort_by != "overall":
            ranked = sorted(ranked, key=_sort_key(sort_by))
        return ranked
