"""
In-memory Whoosh index for the user search demo.

Provides the concrete SearchIndex: a RAM-backed Whoosh index with a fixed user
schema, atomic batch commits, and query-string search with facets. The index
is created once at the entry point and handed to the components that need it.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from whoosh import sorting
from whoosh.fields import DATETIME, ID, NUMERIC, TEXT, Schema
from whoosh.filedb.filestore import RamStorage
from whoosh.index import Index
from whoosh.qparser import GtLtPlugin, MultifieldParser
from whoosh.query import NullQuery, NumericRange

from usersearch.domain.errors import BatchSubmissionError, IndexCreationError, SearchError
from usersearch.domain.models import (
    FacetResult,
    NumericBucket,
    NumericRangeFacet,
    SearchRequest,
    SearchResult,
    TermsFacet,
)
from usersearch.index.abstract import IndexBatch
from usersearch.utils.logging import get_logger

log = get_logger(__name__)

USER_SCHEMA = Schema(
    id=NUMERIC(int, stored=True, unique=True),
    firstname=TEXT(stored=True),
    lastname=TEXT(stored=True),
    gender=ID(stored=True, sortable=True),
    age=NUMERIC(int, stored=True, sortable=True),
    birthdate=DATETIME(stored=True),
    created_at=DATETIME(stored=True),
    last_online_at=DATETIME(stored=True),
)

# Fields matched by terms without an explicit "field:" prefix
DEFAULT_SEARCH_FIELDS: Sequence[str] = ("firstname", "lastname", "gender")


def _bound(value: Optional[float]) -> Optional[Union[int, float]]:
    if value is None:
        return None
    return int(value) if float(value).is_integer() else value


def _bucket_query(field: str, bucket: NumericBucket) -> NumericRange:
    # [lower, upper): inclusive start, exclusive end when bounded
    return NumericRange(
        field,
        _bound(bucket.lower),
        _bound(bucket.upper),
        startexcl=False,
        endexcl=bucket.upper is not None,
    )


def _facet_for(spec: Union[TermsFacet, NumericRangeFacet]) -> sorting.FacetType:
    if isinstance(spec, TermsFacet):
        return sorting.FieldFacet(spec.field, maptype=sorting.Count)
    queries = {bucket.label: _bucket_query(spec.field, bucket) for bucket in spec.buckets}
    return sorting.QueryFacet(queries, maptype=sorting.Count)


def _label(key: Any) -> str:
    return key.decode("utf-8") if isinstance(key, bytes) else str(key)


def _terms_result(spec: TermsFacet, counts: Mapping[Any, int]) -> FacetResult:
    named = [(_label(key), count) for key, count in counts.items() if key is not None]
    ranked = sorted(named, key=lambda item: (-item[1], item[0]))
    return FacetResult(name=spec.name, buckets=tuple(ranked[: spec.size]))


def _range_result(spec: NumericRangeFacet, counts: Mapping[Any, int]) -> FacetResult:
    return FacetResult(
        name=spec.name,
        buckets=tuple((label, counts.get(label, 0)) for label in spec.labels),
    )


class WhooshUserIndex:
    """
    SearchIndex implementation over an in-memory Whoosh index.

    Example
    -------
        index = WhooshUserIndex.create_in_memory()
        batch = index.new_batch()
        batch.add(user.id, user.to_document())
        index.submit(batch)
        result = index.search(request)
    """

    def __init__(
        self,
        index: Index,
        search_fields: Sequence[str] = DEFAULT_SEARCH_FIELDS,
    ) -> None:
        self._index = index
        self._parser = MultifieldParser(list(search_fields), schema=index.schema)
        self._parser.add_plugin(GtLtPlugin())

    @classmethod
    def create_in_memory(cls, schema: Schema = USER_SCHEMA) -> "WhooshUserIndex":
        """
        Build an empty RAM-backed index.

        Raises
        ------
        IndexCreationError
            If Whoosh cannot create the index for the given schema.
        """
        try:
            index = RamStorage().create_index(schema)
        except Exception as exc:  # noqa: BLE001 - any engine failure is fatal at startup
            raise IndexCreationError(f"Could not create in-memory index: {exc}") from exc
        log.debug("In-memory index created", extra={"fields": schema.names()})
        return cls(index)

    @property
    def doc_count(self) -> int:
        return self._index.doc_count()

    def new_batch(self) -> IndexBatch:
        return IndexBatch()

    def submit(self, batch: IndexBatch) -> None:
        """
        Write every staged document with a single writer and commit once.

        Nothing from a failed batch is visible to searches.
        """
        batch.mark_submitted()
        writer = self._index.writer()
        try:
            for document_id, document in batch:
                writer.add_document(**{**document, "id": document_id})
        except Exception as exc:  # noqa: BLE001 - surfaced as a submission failure
            writer.cancel()
            raise BatchSubmissionError(f"Could not stage batch: {exc}") from exc

        try:
            writer.commit()
        except Exception as exc:  # noqa: BLE001 - surfaced as a submission failure
            raise BatchSubmissionError(f"Could not commit batch: {exc}") from exc
        log.debug("Batch committed", extra={"documents": len(batch)})

    @staticmethod
    def _empty_result(request: SearchRequest) -> SearchResult:
        facets: Dict[str, FacetResult] = {}
        for spec in request.facets:
            if isinstance(spec, TermsFacet):
                facets[spec.name] = FacetResult(name=spec.name, buckets=())
            else:
                facets[spec.name] = _range_result(spec, {})
        return SearchResult(hits=[], total=0, facets=facets)

    def search(self, request: SearchRequest) -> SearchResult:
        """
        Run ``request`` and return the page ``[offset, offset + size)``.

        Facet counts cover every matching document, not only the returned page.
        A query string that parses to nothing (e.g., empty input) matches nothing.
        """
        try:
            query = self._parser.parse(request.query)
        except Exception as exc:  # noqa: BLE001 - parser errors are query errors
            raise SearchError(f"Could not parse query '{request.query}': {exc}") from exc

        if query is NullQuery:
            return self._empty_result(request)

        groupedby: Optional[Dict[str, sorting.FacetType]] = None
        if request.facets:
            groupedby = {spec.name: _facet_for(spec) for spec in request.facets}

        try:
            with self._index.searcher() as searcher:
                results = searcher.search(
                    query,
                    limit=request.offset + request.size,
                    groupedby=groupedby,
                )
                page = results[request.offset : request.offset + request.size]
                hits: List[Dict[str, Any]] = []
                for hit in page:
                    stored = hit.fields()
                    hits.append(
                        {name: stored[name] for name in request.field_names if name in stored}
                    )

                facets: Dict[str, FacetResult] = {}
                for spec in request.facets:
                    counts = results.groups(spec.name)
                    if isinstance(spec, TermsFacet):
                        facets[spec.name] = _terms_result(spec, counts)
                    else:
                        facets[spec.name] = _range_result(spec, counts)
                total = len(results)
        except Exception as exc:  # noqa: BLE001 - engine errors are query errors
            raise SearchError(f"Search failed for '{request.query}': {exc}") from exc

        log.debug("Search executed", extra={"query": request.query, "total": total})
        return SearchResult(hits=hits, total=total, facets=facets)


__all__ = ["USER_SCHEMA", "DEFAULT_SEARCH_FIELDS", "WhooshUserIndex"]
