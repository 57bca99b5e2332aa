"""
User Search - interactive faceted search over synthetic user records.

This package generates synthetic users, loads them in bounded batches into an
in-memory full-text index, and runs operator queries from a terminal:

- Synthetic user generation with calendar-aware age derivation
- Batch loading with flush-on-remainder semantics
- Query planning with fixed pagination, projection and facets
- Typed tabular rendering of search hits
- An interactive read-search-render session
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from usersearch.config import Settings, get_settings
from usersearch.factory import UserFactory, age_on
from usersearch.index import IndexBatch, SearchIndex, WhooshUserIndex
from usersearch.loader import LoadReport, load
from usersearch.planner import QueryPlanner
from usersearch.renderer import ResultRenderer
from usersearch.session import Session
from usersearch.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Generation and loading
    "UserFactory",
    "age_on",
    "LoadReport",
    "load",
    # Index
    "IndexBatch",
    "SearchIndex",
    "WhooshUserIndex",
    # Querying
    "QueryPlanner",
    "ResultRenderer",
    "Session",
    # Logging
    "configure_logging",
    "get_logger",
]
