"""
Index package for the user search demo.

Re-exports the index boundary (batch + protocol) and the in-memory Whoosh
implementation so callers can import from `usersearch.index` directly.
"""

from usersearch.index.abstract import IndexBatch, SearchIndex
from usersearch.index.whoosh_index import USER_SCHEMA, WhooshUserIndex

__all__ = [
    # Boundary
    "IndexBatch",
    "SearchIndex",
    # Engine
    "USER_SCHEMA",
    "WhooshUserIndex",
]
