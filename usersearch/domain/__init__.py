"""
Domain package for the user search demo.

Exports the core domain models and errors used across the factory, loader,
planner, index and renderer. Keep this package focused on data definitions
and validation concerns.
"""

from usersearch.domain.errors import (
    BatchSubmissionError,
    IndexCreationError,
    ProjectionContractError,
    SearchError,
    UserSearchError,
)
from usersearch.domain.models import (
    DateWindow,
    FacetResult,
    FieldType,
    NumericBucket,
    NumericRangeFacet,
    ProjectedField,
    SearchRequest,
    SearchResult,
    TermsFacet,
    UserRecord,
)

__all__ = [
    # Models
    "DateWindow",
    "FacetResult",
    "FieldType",
    "NumericBucket",
    "NumericRangeFacet",
    "ProjectedField",
    "SearchRequest",
    "SearchResult",
    "TermsFacet",
    "UserRecord",
    # Errors
    "BatchSubmissionError",
    "IndexCreationError",
    "ProjectionContractError",
    "SearchError",
    "UserSearchError",
]
