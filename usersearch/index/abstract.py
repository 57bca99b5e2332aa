"""
Index boundary for the user search demo.

The loader and session only depend on the SearchIndex protocol below: create a
batch, stage documents in it, submit it atomically, and run a search request.
Concrete engines (e.g., the in-memory Whoosh index) implement the protocol.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Protocol, Tuple, runtime_checkable

from usersearch.domain.errors import BatchSubmissionError
from usersearch.domain.models import SearchRequest, SearchResult


class IndexBatch:
    """
    Ordered group of pending writes, submitted to an index exactly once.

    Indexes call ``mark_submitted`` before writing; a submitted batch accepts
    no further documents and cannot be submitted again.
    """

    def __init__(self) -> None:
        self._operations: List[Tuple[int, Dict[str, Any]]] = []
        self._submitted = False

    @property
    def submitted(self) -> bool:
        return self._submitted

    def add(self, document_id: int, document: Mapping[str, Any]) -> None:
        """Stage one document keyed by its unique identifier."""
        if self._submitted:
            raise BatchSubmissionError(f"Cannot add document {document_id} to a submitted batch")
        self._operations.append((document_id, dict(document)))

    def mark_submitted(self) -> None:
        if self._submitted:
            raise BatchSubmissionError("Batch was already submitted")
        self._submitted = True

    @property
    def document_ids(self) -> List[int]:
        return [document_id for document_id, _ in self._operations]

    def __len__(self) -> int:
        return len(self._operations)

    def __iter__(self) -> Iterator[Tuple[int, Dict[str, Any]]]:
        return iter(self._operations)


@runtime_checkable
class SearchIndex(Protocol):
    """
    Operations the demo needs from a full-text/faceted index.
    """

    def new_batch(self) -> IndexBatch:
        """Create an empty pending-write batch."""
        ...

    def submit(self, batch: IndexBatch) -> None:
        """
        Atomically apply every staged write.

        Raises
        ------
        BatchSubmissionError
            If the engine rejects the batch.
        """
        ...

    def search(self, request: SearchRequest) -> SearchResult:
        """
        Execute a query-string search with pagination and facets.

        Raises
        ------
        SearchError
            If the engine fails to parse or execute the request.
        """
        ...


__all__ = ["IndexBatch", "SearchIndex"]
