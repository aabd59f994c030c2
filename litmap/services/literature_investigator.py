"""Literature investigation pipeline.

Runs a single stateless investigation: validate the topic, generate keyword
sequences, search with bounded concurrency, score and classify the papers,
aggregate, recommend, and export. Only the search phase awaits anything;
every other phase is a sequential transformation of in-memory data.
"""

import logging
from typing import Any

from pydantic import ValidationError

from litmap.config import Settings, get_settings
from litmap.exceptions import InvalidTopicError
from litmap.models.schemas import (
    InvestigationParams,
    KeywordSequenceReport,
    LiteratureInvestigationResult,
    ResearchTopic,
)
from litmap.services.aggregate_analyzer import AggregateAnalyzer
from litmap.services.classification_rules import ClassificationRules
from litmap.services.domain_knowledge import KeywordTables
from litmap.services.exporters import build_exports
from litmap.services.keyword_generator import KeywordSequenceGenerator
from litmap.services.paper_analyzer import PaperAnalyzer
from litmap.services.recommender import Recommender
from litmap.services.reference_classifier import ReferenceClassifier
from litmap.services.search_orchestrator import BibliographicSearch, SearchOrchestrator

logger = logging.getLogger(__name__)


def validate_topic(topic: ResearchTopic | dict[str, Any]) -> ResearchTopic:
    """Coerce and check a topic before any work starts.

    Raises:
        InvalidTopicError: If the payload is invalid or title/domain are blank.
    """
    if not isinstance(topic, ResearchTopic):
        try:
            topic = ResearchTopic.model_validate(topic)
        except ValidationError as e:
            raise InvalidTopicError(f"Invalid research topic: {e}") from e
    if not topic.title.strip():
        raise InvalidTopicError("Research topic title is required")
    if not topic.domain.strip():
        raise InvalidTopicError("Research topic domain is required")
    return topic


class LiteratureInvestigator:
    """Investigates a research topic against an external search capability.

    Holds no per-run state: every call to investigate() is independent.
    Tables and the reference year are fixed at construction.
    """

    def __init__(
        self,
        search_client: BibliographicSearch,
        settings: Settings | None = None,
        keyword_tables: KeywordTables | None = None,
        classification_rules: ClassificationRules | None = None,
        current_year: int | None = None,
    ):
        self._search_client = search_client
        self._settings = settings or get_settings()
        self._keyword_generator = KeywordSequenceGenerator(keyword_tables, current_year)
        self._paper_analyzer = PaperAnalyzer(current_year)
        self._classifier = ReferenceClassifier(classification_rules, current_year)
        self._aggregate_analyzer = AggregateAnalyzer(current_year)
        self._recommender = Recommender()

    def generate_keyword_sequences(
        self,
        topic: ResearchTopic | dict[str, Any],
        max_sequences: int | None = None,
    ) -> KeywordSequenceReport:
        """Generate keyword sequences without searching."""
        topic = validate_topic(topic)
        return self._keyword_generator.build_report(
            topic, max_sequences or self._settings.max_sequences
        )

    def resolve_params(self, params: InvestigationParams | None) -> InvestigationParams:
        """Fill unset run parameters from settings."""
        params = params or InvestigationParams()
        s = self._settings
        return params.model_copy(update={
            "databases": params.databases or list(s.default_databases),
            "max_papers_per_sequence": params.max_papers_per_sequence or s.max_papers_per_sequence,
            "total_max_papers": params.total_max_papers or s.total_max_papers,
            "max_sequences": params.max_sequences or s.max_sequences,
            "max_concurrent_searches": params.max_concurrent_searches or s.max_concurrent_searches,
            "search_timeout_seconds": params.search_timeout_seconds or s.search_timeout_seconds,
        })

    async def investigate(
        self,
        topic: ResearchTopic | dict[str, Any],
        params: InvestigationParams | None = None,
    ) -> LiteratureInvestigationResult:
        """Run a full investigation.

        Args:
            topic: The research topic (model or dict).
            params: Run parameters; unset fields fall back to settings.

        Returns:
            The complete investigation result. Search failures never abort
            the run; they only reduce the number of papers found.

        Raises:
            InvalidTopicError: If the topic is missing a title or domain.
        """
        topic = validate_topic(topic)
        params = self.resolve_params(params)
        timeframe = params.timeframe or topic.timeframe
        logger.info(f"Starting literature investigation for '{topic.title}' ({topic.domain})")

        sequences = self._keyword_generator.generate_sequences(topic, params.max_sequences)
        if params.selected_sequence_ids is not None:
            wanted = set(params.selected_sequence_ids)
            sequences = [s for s in sequences if s.id in wanted]

        orchestrator = SearchOrchestrator(
            self._search_client,
            max_concurrent=params.max_concurrent_searches,
            timeout_seconds=params.search_timeout_seconds,
        )
        entries = await orchestrator.search_all(
            sequences,
            params.databases,
            params.max_papers_per_sequence,
            timeframe,
        )

        papers = self._paper_analyzer.analyze(
            entries,
            sequences,
            timeframe=timeframe,
            total_max_papers=params.total_max_papers,
            min_citation_count=params.min_citation_count,
            include_reviews=params.include_reviews,
            sort_by=params.sort_by,
        )
        classifications = self._classifier.classify_all(papers)
        analysis = self._aggregate_analyzer.analyze(papers, topic)

        result = LiteratureInvestigationResult(
            topic=topic,
            sequences=sequences,
            papers=papers,
            analysis=analysis,
            categorized_papers=self._recommender.categorize(papers),
            recommendations=self._recommender.recommend(papers, analysis),
            classifications=classifications,
            classification_summary=self._classifier.summarize(papers, classifications),
            exports=build_exports(topic, sequences, papers),
        )
        logger.info(
            f"Investigation complete: {len(sequences)} sequences, "
            f"{len(entries)} unique entries, {len(papers)} papers kept"
        )
        return result
