"""Exceptions raised by the literature investigation engine."""


class LiteratureEngineError(Exception):
    """Base class for engine errors."""


class InvalidTopicError(LiteratureEngineError):
    """The research topic is missing a title or domain, or failed validation."""


class ExternalSearchFailure(LiteratureEngineError):
    """A single sequence's search failed, timed out, or returned malformed data.

    Never propagates out of the search phase; the orchestrator logs it and
    substitutes an empty result for the sequence.
    """

    def __init__(self, sequence_id: str, query: str, cause: BaseException | None = None):
        self.sequence_id = sequence_id
        self.query = query
        self.cause = cause
        reason = f"{type(cause).__name__}: {cause}" if cause is not None else "unknown error"
        super().__init__(f"Search for sequence '{sequence_id}' failed ({reason})")


class InsufficientKeywordsError(LiteratureEngineError):
    """A perspective could not assemble the minimum number of keywords."""

    def __init__(self, perspective: str, found: int, required: int):
        self.perspective = perspective
        self.found = found
        self.required = required
        super().__init__(
            f"Perspective '{perspective}' produced {found} keywords (need {required})"
        )
