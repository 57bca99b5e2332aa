"""
Pytest configuration for the user search demo.

Provides fixtures for:
- Settings with fixed generation windows
- Deterministic user generation
- A recording fake index for loader/session tests
- A real in-memory Whoosh index, empty or seeded
"""

from __future__ import annotations

import io
from datetime import date
from typing import List, Optional

import pytest
from rich.console import Console

from usersearch.config import Settings
from usersearch.domain.errors import BatchSubmissionError, SearchError
from usersearch.domain.models import (
    DateWindow,
    NumericBucket,
    NumericRangeFacet,
    SearchRequest,
    SearchResult,
    UserRecord,
)
from usersearch.factory import UserFactory
from usersearch.index.abstract import IndexBatch
from usersearch.index.whoosh_index import WhooshUserIndex
from usersearch.loader import load

REFERENCE_DAY = date(2026, 6, 15)
TEST_SEED = 42


class RecordingIndex:
    """
    SearchIndex double that records submitted batches and search requests.

    ``fail_on_batch`` makes the n-th submission (1-based) fail; ``search_error``
    makes every search raise SearchError with that message.
    """

    def __init__(
        self,
        fail_on_batch: Optional[int] = None,
        search_error: Optional[str] = None,
        result: Optional[SearchResult] = None,
    ) -> None:
        self.submitted: List[List[int]] = []
        self.requests: List[SearchRequest] = []
        self.fail_on_batch = fail_on_batch
        self.search_error = search_error
        self.result = result or SearchResult(hits=[], total=0)

    def new_batch(self) -> IndexBatch:
        return IndexBatch()

    def submit(self, batch: IndexBatch) -> None:
        batch.mark_submitted()
        if self.fail_on_batch is not None and len(self.submitted) + 1 == self.fail_on_batch:
            raise BatchSubmissionError("simulated commit failure")
        self.submitted.append(batch.document_ids)

    def search(self, request: SearchRequest) -> SearchResult:
        self.requests.append(request)
        if self.search_error is not None:
            raise SearchError(self.search_error)
        return self.result


def in_window(window: DateWindow, day: date) -> bool:
    return window.start <= day <= window.end


def in_bucket(bucket: NumericBucket, value: float) -> bool:
    """Half-open membership: ``lower <= value < upper``, None bounds are open."""
    if bucket.lower is not None and value < bucket.lower:
        return False
    return bucket.upper is None or value < bucket.upper


def bucket_labels(facet: NumericRangeFacet, value: float) -> List[str]:
    return [bucket.label for bucket in facet.buckets if in_bucket(bucket, value)]


def make_user(
    user_id: int,
    first_name: str,
    last_name: str,
    gender: str,
    age: int,
    today: Optional[date] = None,
) -> UserRecord:
    """Build a user whose birthday (Jan 1) has already passed this year."""
    reference = today or date.today()
    return UserRecord(
        id=user_id,
        first_name=first_name,
        last_name=last_name,
        gender=gender,
        birth_date=date(reference.year - age, 1, 1),
        age=age,
        created_at=date(2019, 5, 1),
        last_online_at=date(2020, 4, 1),
    )


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with the default windows and a fixed seed.
    """
    return Settings(user_count=100, batch_size=10, id_offset=1000, seed=TEST_SEED)


@pytest.fixture
def factory(test_settings: Settings) -> UserFactory:
    return UserFactory.from_settings(test_settings)


@pytest.fixture
def users(factory: UserFactory) -> List[UserRecord]:
    return factory.generate(100, today=REFERENCE_DAY)


@pytest.fixture
def recording_index() -> RecordingIndex:
    return RecordingIndex()


@pytest.fixture
def whoosh_index() -> WhooshUserIndex:
    return WhooshUserIndex.create_in_memory()


@pytest.fixture
def known_users() -> List[UserRecord]:
    """
    Small hand-built corpus: one woman aged 30, two men, one teenager.
    """
    return [
        make_user(2000, "Alice", "Walker", "female", 30),
        make_user(2001, "Bob", "Stone", "male", 52),
        make_user(2002, "Carl", "Walker", "male", 70),
        make_user(2003, "Dana", "Reed", "male", 16),
    ]


@pytest.fixture
def seeded_index(whoosh_index: WhooshUserIndex, known_users: List[UserRecord]) -> WhooshUserIndex:
    load(whoosh_index, known_users, batch_size=3)
    return whoosh_index


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(output: io.StringIO) -> Console:
    """Console that writes plain text into the `output` buffer."""
    return Console(file=output, width=120, color_system=None, force_terminal=False)
