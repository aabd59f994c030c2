"""Search orchestration over an external bibliographic search capability.

Builds one boolean query per keyword sequence, dispatches the queries with a
bounded number in flight, and merges the results into a single list with
duplicate titles removed. A failing or slow source only ever empties its own
sequence's results.
"""

import asyncio
import logging
import re
from typing import Any, Iterable, Protocol

from pydantic import ValidationError

from litmap.exceptions import ExternalSearchFailure
from litmap.models.schemas import BibliographyEntry, DatabaseId, KeywordSequence, TimeFrame

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT = 3
DEFAULT_TIMEOUT_SECONDS = 10.0

_CORE_WEIGHT_FLOOR = 0.8
_SUPPORT_WEIGHT_FLOOR = 0.5
_MAX_CORE_TERMS = 5
_MAX_SUPPORT_TERMS = 3

_PUNCTUATION = re.compile(r"[^\w\s]")


class BibliographicSearch(Protocol):
    """The external search capability the engine depends on.

    Implementations may raise; the orchestrator isolates any failure.
    """

    async def search(
        self,
        query: str,
        databases: set[DatabaseId],
        max_results: int,
        year_range: TimeFrame | None = None,
    ) -> list[BibliographyEntry | dict[str, Any]]:
        ...


def normalize_title(title: str) -> str:
    """Lowercase, drop punctuation, strip surrounding whitespace."""
    return _PUNCTUATION.sub("", title.lower()).strip()


def deduplicate_entries(entries: Iterable[BibliographyEntry]) -> list[BibliographyEntry]:
    """Drop entries whose normalized title was already seen; first occurrence wins."""
    seen: set[str] = set()
    unique: list[BibliographyEntry] = []
    for entry in entries:
        key = normalize_title(entry.title)
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)
    return unique


def build_query(sequence: KeywordSequence) -> str:
    """Build a boolean query: strong keywords OR-ed, supporting keywords AND-ed."""
    core = [k.term for k in sequence.keywords if k.weight > _CORE_WEIGHT_FLOOR][:_MAX_CORE_TERMS]
    support = [
        k.term for k in sequence.keywords
        if _SUPPORT_WEIGHT_FLOOR < k.weight <= _CORE_WEIGHT_FLOOR
    ][:_MAX_SUPPORT_TERMS]

    groups: list[str] = []
    if core:
        groups.append("(" + " OR ".join(f'"{term}"' for term in core) + ")")
    if support:
        groups.append("(" + " AND ".join(support) + ")")
    if not groups and sequence.keywords:
        groups.append(f'"{sequence.keywords[0].term}"')
    return " AND ".join(groups)


def _coerce_entries(raw: Any) -> list[BibliographyEntry]:
    """Validate a collaborator payload; any malformed item rejects the whole payload."""
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        raise TypeError(f"expected a list of entries, got {type(raw).__name__}")
    entries: list[BibliographyEntry] = []
    for item in raw:
        if isinstance(item, BibliographyEntry):
            entries.append(item)
        elif isinstance(item, dict):
            entries.append(BibliographyEntry.model_validate(item))
        else:
            raise TypeError(f"unsupported entry type {type(item).__name__}")
    return entries


class SearchOrchestrator:
    """Fans keyword-sequence queries out to the search collaborator."""

    def __init__(
        self,
        search_client: BibliographicSearch,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self._client = search_client
        self._max_concurrent = max(1, max_concurrent)
        self._timeout_seconds = timeout_seconds

    async def search_all(
        self,
        sequences: list[KeywordSequence],
        databases: Iterable[DatabaseId],
        max_results_per_sequence: int,
        timeframe: TimeFrame | None = None,
    ) -> list[BibliographyEntry]:
        """Search every sequence and return the deduplicated union of results.

        Args:
            sequences: Keyword sequences to query with.
            databases: Databases the collaborator should search.
            max_results_per_sequence: Result cap requested for (and applied to) each query.
            timeframe: Optional publication-year window forwarded to the collaborator.

        Returns:
            Entries in sequence order with normalized-title duplicates removed.
            Sequences whose search failed contribute nothing.
        """
        if not sequences:
            return []

        semaphore = asyncio.Semaphore(self._max_concurrent)
        db_set = set(databases)
        batches = await asyncio.gather(*(
            self._search_sequence(seq, db_set, max_results_per_sequence, timeframe, semaphore)
            for seq in sequences
        ))

        merged = [entry for batch in batches for entry in batch]
        unique = deduplicate_entries(merged)
        logger.debug(
            f"Search returned {len(merged)} entries across {len(sequences)} sequences; "
            f"{len(unique)} after deduplication"
        )
        return unique

    async def _search_sequence(
        self,
        sequence: KeywordSequence,
        databases: set[DatabaseId],
        max_results: int,
        timeframe: TimeFrame | None,
        semaphore: asyncio.Semaphore,
    ) -> list[BibliographyEntry]:
        query = build_query(sequence)
        async with semaphore:
            try:
                raw = await asyncio.wait_for(
                    self._client.search(query, databases, max_results, timeframe),
                    timeout=self._timeout_seconds,
                )
                return _coerce_entries(raw)[:max_results]
            except asyncio.TimeoutError as e:
                failure = ExternalSearchFailure(sequence.id, query, e)
                logger.warning(f"{failure}: timed out after {self._timeout_seconds}s")
                return []
            except (ValidationError, TypeError) as e:
                failure = ExternalSearchFailure(sequence.id, query, e)
                logger.warning(f"{failure}: malformed response")
                return []
            except Exception as e:
                failure = ExternalSearchFailure(sequence.id, query, e)
                logger.warning(f"{failure}")
                return []
