"""
Exception hierarchy for the user search demo.

Startup failures (index creation, batch submission) are fatal; query failures
are recoverable at the session boundary; projection contract violations are
programming errors and propagate.
"""

from __future__ import annotations

from typing import Optional


class UserSearchError(Exception):
    """Base class for all errors raised by this package."""


class IndexCreationError(UserSearchError):
    """The in-memory index could not be built."""


class BatchSubmissionError(UserSearchError):
    """A batch of staged documents could not be committed to the index."""

    def __init__(self, message: str, batch_number: Optional[int] = None) -> None:
        super().__init__(message)
        self.batch_number = batch_number


class SearchError(UserSearchError):
    """A search request failed inside the index engine."""


class ProjectionContractError(UserSearchError, TypeError):
    """A hit does not honour the typed projection declared by the request."""

    def __init__(self, field: str, expected: str, value: object) -> None:
        super().__init__(
            f"Projected field '{field}' expected {expected}, got {type(value).__name__}: {value!r}"
        )
        self.field = field
        self.expected = expected
        self.value = value


__all__ = [
    "UserSearchError",
    "IndexCreationError",
    "BatchSubmissionError",
    "SearchError",
    "ProjectionContractError",
]
