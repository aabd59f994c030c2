"""Reference Classifier service.

Assigns every paper a seven-dimension classification (research type,
methodology, evidence level, contribution type, impact, temporal bucket and
domain) with a confidence and a short rationale per dimension. Matching is
literal indicator-phrase containment over the paper's title and abstract;
weak signal falls back to documented defaults, never to "unclassified".

Also summarises a classified paper set: distributions, domain clusters,
methodology trends and evidence/methodology gaps.
"""

import logging
from collections import Counter
from datetime import date
from typing import get_args

from litmap.models.schemas import (
    BibliographyEntry,
    ClassificationDistribution,
    ClassificationGap,
    ClassificationSummary,
    ClassifiedMethodology,
    ContributionType,
    DomainCluster,
    EvidenceLevel,
    ImpactLevel,
    InvestigatedPaper,
    MethodologyTrend,
    PaperClassification,
    ResearchType,
    TemporalCategory,
)
from litmap.services.classification_rules import (
    DEFAULT_CLASSIFICATION_RULES,
    GENERAL_DOMAIN,
    ClassificationRules,
    matching_phrases,
)

logger = logging.getLogger(__name__)

_MAX_BASE_CONFIDENCE = 0.9
_TEXT_LENGTH_FOR_MAX_CONFIDENCE = 1000

_TREND_MIN_PAPERS = 3
_RECENT_METHOD_YEARS = 3
_TREND_LABEL_YEARS = 5
_MAX_CLASSIFICATION_GAPS = 5


def paper_identity(entry: BibliographyEntry) -> str:
    return entry.doi or entry.id or entry.title


def _join(items: list[str]) -> str:
    return ", ".join(items)


class ReferenceClassifier:
    """Rule-table classifier; rules are injected once and only read."""

    def __init__(
        self,
        rules: ClassificationRules | None = None,
        current_year: int | None = None,
    ):
        self._rules = rules or DEFAULT_CLASSIFICATION_RULES
        self._current_year = current_year

    @property
    def current_year(self) -> int:
        return self._current_year or date.today().year

    def classify(self, entry: BibliographyEntry) -> PaperClassification:
        """Classify a single paper across all seven dimensions.

        Args:
            entry: Any bibliography entry (investigated papers included).

        Returns:
            A fully populated PaperClassification.
        """
        text = f"{entry.title} {entry.abstract or ''}".lower()
        domain_text = " ".join([text, *(k.lower() for k in entry.keywords)])
        base = min(_MAX_BASE_CONFIDENCE, len(text) / _TEXT_LENGTH_FOR_MAX_CONFIDENCE)

        research_type, type_reason = self._research_type(text)
        methodology, method_reason = self._methodology(text)
        evidence, evidence_reason = self._evidence_level(text)
        contributions, contribution_reason = self._contributions(text)
        impact, impact_reason = self._impact(entry)
        temporal, temporal_reason = self._temporal(entry)
        domains, domain_reason = self._domains(domain_text)

        return PaperClassification(
            paper_id=paper_identity(entry),
            research_type=research_type,
            methodology=methodology,
            evidence_level=evidence,
            contribution_type=contributions,
            impact_level=impact,
            temporal_category=temporal,
            domain=domains,
            confidence={
                "research_type": round(max(0.6, base), 2),
                "methodology": round(max(0.7, base), 2),
                "evidence_level": round(max(0.6, base), 2),
                "contribution_type": round(max(0.5, base), 2),
                "impact_level": 0.9 if entry.citations is not None else 0.6,
                "temporal_category": 1.0 if entry.year is not None else 0.3,
                "domain": round(max(0.7, base), 2),
            },
            reasoning={
                "research_type": type_reason,
                "methodology": method_reason,
                "evidence_level": evidence_reason,
                "contribution_type": contribution_reason,
                "impact_level": impact_reason,
                "temporal_category": temporal_reason,
                "domain": domain_reason,
            },
        )

    def classify_all(self, entries: list[BibliographyEntry]) -> list[PaperClassification]:
        return [self.classify(e) for e in entries]

    def _research_type(self, text: str) -> tuple[ResearchType, str]:
        for rule_type, phrases in self._rules.research_types:
            found = matching_phrases(phrases, text)
            if not found:
                continue
            if rule_type == "review" and ("meta-analysis" in text or "meta analysis" in text):
                result = "meta_analysis"
            elif rule_type == "applied" and "case study" in text:
                result = "case_study"
            else:
                result = rule_type
            return result, f"Classified as {result} based on indicators: {_join(found)}"
        return "empirical", "Classified as empirical by default; no research-type indicators found"

    def _methodology(self, text: str) -> tuple[list[ClassifiedMethodology], str]:
        indicators = self._rules.methodology
        hits = {name: matching_phrases(phrases, text) for name, phrases in indicators.items()}

        methods: list[ClassifiedMethodology] = []
        if hits.get("quantitative"):
            methods.append("quantitative")
        if hits.get("qualitative"):
            methods.append("qualitative")
        if hits.get("quantitative") and hits.get("qualitative"):
            methods.append("mixed_methods")
        if hits.get("experimental"):
            methods.append("experimental")
        if hits.get("observational"):
            methods.append("observational")
            if "longitudinal" in text or "cohort" in text:
                methods.append("longitudinal")
            if "cross-sectional" in text:
                methods.append("cross_sectional")
        if hits.get("computational"):
            methods.append("computational")
            if "simulation" in text or "monte carlo" in text:
                methods.append("simulation")

        if not methods:
            return ["quantitative"], "Defaulted to quantitative; no methodology indicators found"
        found = [p for phrases in hits.values() for p in phrases]
        return methods, f"Identified methodologies: {_join(methods)} based on indicators: {_join(found)}"

    def _evidence_level(self, text: str) -> tuple[EvidenceLevel, str]:
        for level, phrases in self._rules.evidence_hierarchy:
            found = matching_phrases(phrases, text)
            if found:
                return level, f"Evidence level {level} based on indicators: {_join(found)}"
        return (
            "case_series_reports",
            "Evidence level case_series_reports by default; no evidence indicators found",
        )

    def _contributions(self, text: str) -> tuple[list[ContributionType], str]:
        contributions: list[ContributionType] = []
        found: list[str] = []
        for contribution, phrases in self._rules.contributions.items():
            matched = matching_phrases(phrases, text)
            if matched:
                contributions.append(contribution)
                found.extend(matched)
        if not contributions:
            return (
                ["empirical_validation"],
                "Defaulted to empirical_validation; no contribution indicators found",
            )
        return contributions, f"Contributions {_join(contributions)} based on indicators: {_join(found)}"

    def _impact(self, entry: BibliographyEntry) -> tuple[ImpactLevel, str]:
        citations = entry.citations or 0
        age = self.current_year - entry.year if entry.year is not None else 0
        per_year = citations / age if age > 0 else citations

        if citations > 500 or (per_year > 50 and age > 5):
            level = "foundational"
        elif citations > 100 or per_year > 20:
            level = "high_impact"
        elif citations > 20 or per_year > 5:
            level = "moderate_impact"
        elif age <= 3 and citations > 0:
            level = "emerging"
        else:
            level = "niche"
        return level, f"Impact level {level} based on {citations} citations over {age} years"

    def _temporal(self, entry: BibliographyEntry) -> tuple[TemporalCategory, str]:
        year = entry.year if entry.year is not None else self.current_year
        age = self.current_year - year
        if age <= 2:
            category = "cutting_edge"
        elif age <= 5:
            category = "recent"
        elif age <= 15:
            category = "established"
        else:
            category = "historical"
        if entry.year is None:
            return category, f"Temporal category {category}; publication year unknown, treated as current"
        return category, f"Temporal category {category} based on publication {age} years ago"

    def _domains(self, text: str) -> tuple[list[str], str]:
        domains: list[str] = []
        found: list[str] = []
        for domain, phrases in self._rules.domains.items():
            matched = matching_phrases(phrases, text)
            if matched:
                domains.append(domain)
                found.extend(p for p in matched if p not in found)
        if not domains:
            return [GENERAL_DOMAIN], "No domain indicators found; assigned general"
        return domains, f"Domains {_join(domains)} identified through indicators: {_join(found)}"

    def summarize(
        self,
        papers: list[InvestigatedPaper],
        classifications: list[PaperClassification] | None = None,
    ) -> ClassificationSummary:
        """Summarise a classified paper set.

        Args:
            papers: Investigated papers.
            classifications: Classifications in the same order as papers;
                computed here when omitted.

        Returns:
            Distributions, domain clusters, methodology trends and gaps.
        """
        if classifications is None:
            classifications = self.classify_all(papers)
        pairs = list(zip(papers, classifications))
        distributions = self._distributions(classifications)
        if not pairs:
            return ClassificationSummary(total_papers=0, distributions=distributions)

        return ClassificationSummary(
            total_papers=len(pairs),
            distributions=distributions,
            domain_clusters=self._domain_clusters(pairs),
            methodology_trends=self._methodology_trends(pairs),
            gaps=self._classification_gaps(distributions, len(pairs)),
        )

    def _distributions(self, classifications: list[PaperClassification]) -> ClassificationDistribution:
        def _counts(values, keys) -> dict[str, int]:
            counts = {k: 0 for k in keys}
            for v in values:
                counts[v] = counts.get(v, 0) + 1
            return counts

        domain_keys = [*self._rules.domains.keys(), GENERAL_DOMAIN]
        return ClassificationDistribution(
            by_research_type=_counts((c.research_type for c in classifications), get_args(ResearchType)),
            by_methodology=_counts(
                (m for c in classifications for m in c.methodology), get_args(ClassifiedMethodology)
            ),
            by_evidence_level=_counts((c.evidence_level for c in classifications), get_args(EvidenceLevel)),
            by_contribution_type=_counts(
                (t for c in classifications for t in c.contribution_type), get_args(ContributionType)
            ),
            by_impact_level=_counts((c.impact_level for c in classifications), get_args(ImpactLevel)),
            by_temporal_category=_counts(
                (c.temporal_category for c in classifications), get_args(TemporalCategory)
            ),
            by_domain=_counts((d for c in classifications for d in c.domain), domain_keys),
        )

    def _domain_clusters(
        self, pairs: list[tuple[InvestigatedPaper, PaperClassification]]
    ) -> list[DomainCluster]:
        grouped: dict[str, list[InvestigatedPaper]] = {}
        for paper, classification in pairs:
            for domain in classification.domain:
                grouped.setdefault(domain, []).append(paper)

        clusters: list[DomainCluster] = []
        for name, members in grouped.items():
            keyword_counts = Counter(k for p in members for k in p.matched_keywords)
            clusters.append(DomainCluster(
                name=name,
                papers=members,
                keywords=[k for k, _ in keyword_counts.most_common(10)],
                average_relevance=round(sum(p.relevance_score for p in members) / len(members), 2),
                representative_papers=sorted(members, key=lambda p: -p.overall_score)[:3],
            ))
        return clusters

    def _methodology_trends(
        self, pairs: list[tuple[InvestigatedPaper, PaperClassification]]
    ) -> list[MethodologyTrend]:
        year = self.current_year
        cutoff = year - _RECENT_METHOD_YEARS
        by_method: dict[str, list[InvestigatedPaper]] = {}
        for paper, classification in pairs:
            for method in classification.methodology:
                by_method.setdefault(method, []).append(paper)

        trends: list[MethodologyTrend] = []
        for method, members in by_method.items():
            if len(members) < _TREND_MIN_PAPERS:
                continue
            dated = [p.year for p in members if p.year is not None]
            recent = sum(1 for y in dated if y >= cutoff)
            older = len(dated) - recent
            ratio = recent / len(members)
            if ratio > 0.6:
                direction = "increasing"
            elif ratio < 0.3:
                direction = "decreasing"
            else:
                direction = "stable"
            trends.append(MethodologyTrend(
                methodology=method,
                trend=direction,
                timeframe=f"{year - _TREND_LABEL_YEARS}-{year}",
                evidence=f"{recent} recent papers, {older} older papers",
                papers=members[:5],
            ))
        return trends

    def _classification_gaps(
        self, distributions: ClassificationDistribution, total: int
    ) -> list[ClassificationGap]:
        gaps: list[ClassificationGap] = []

        for method, count in distributions.by_methodology.items():
            percentage = count / total * 100
            if percentage < 10 and count < 3:
                gaps.append(ClassificationGap(
                    gap=f"Limited {method} research",
                    severity="medium",
                    suggestion=f"Consider conducting more {method} studies",
                    related_terms=[method, "methodology", "approach"],
                ))

        # Appended after the methodology gaps, so the cap can drop it.
        evidence = distributions.by_evidence_level
        if (
            evidence.get("systematic_review_meta_analysis", 0) == 0
            and evidence.get("randomized_controlled_trial", 0) < 2
        ):
            gaps.append(ClassificationGap(
                gap="Lack of high-quality evidence",
                severity="high",
                suggestion="Systematic reviews and RCTs needed",
                related_terms=["systematic review", "meta-analysis", "RCT"],
            ))

        return gaps[:_MAX_CLASSIFICATION_GAPS]
