"""
Query planning for the user search demo.

Turns raw operator input into a bounded SearchRequest: the text is passed to
the engine untouched, the first page of results is requested, and the same
projection and facets are attached to every request.
"""

from __future__ import annotations

from typing import Tuple

from usersearch.domain.models import (
    FieldType,
    NumericBucket,
    NumericRangeFacet,
    ProjectedField,
    SearchRequest,
    TermsFacet,
)

DEFAULT_PAGE_SIZE = 5

PROJECTION: Tuple[ProjectedField, ...] = (
    ProjectedField(name="id", label="#", value_type=FieldType.NUMERIC),
    ProjectedField(name="firstname", label="First Name", value_type=FieldType.TEXT),
    ProjectedField(name="lastname", label="Last Name", value_type=FieldType.TEXT),
    ProjectedField(name="age", label="Age", value_type=FieldType.NUMERIC),
)

GENDER_FACET = TermsFacet(name="gender", field="gender", size=2)

AGE_GROUP_FACET = NumericRangeFacet(
    name="age_group",
    field="age",
    buckets=(
        NumericBucket(label="teenager", upper=18),
        NumericBucket(label="young-adult", lower=18, upper=25),
        NumericBucket(label="adult", lower=25, upper=45),
        NumericBucket(label="senior-adult", lower=45, upper=64),
        NumericBucket(label="senior", lower=64),
    ),
)


class QueryPlanner:
    """Build the single-page, faceted request for a query string."""

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be > 0, got {page_size}")
        self.page_size = page_size

    def plan(self, raw_query: str) -> SearchRequest:
        # No trimming or escaping: query syntax belongs to the engine
        return SearchRequest(
            query=raw_query,
            offset=0,
            size=self.page_size,
            projection=PROJECTION,
            facets=(GENDER_FACET, AGE_GROUP_FACET),
        )


__all__ = [
    "AGE_GROUP_FACET",
    "DEFAULT_PAGE_SIZE",
    "GENDER_FACET",
    "PROJECTION",
    "QueryPlanner",
]
