"""
Integration tests against a real in-memory Whoosh index.

These tests verify that:
1. Batches are committed and become searchable
2. Query strings, facets and pagination behave end to end
3. Engine failures surface as the package's own errors
4. The CLI seeds, answers a query and exits on the exit token
"""

from __future__ import annotations

import io

import pytest
from rich.console import Console
from typer.testing import CliRunner

from tests.conftest import REFERENCE_DAY
from usersearch.domain.errors import BatchSubmissionError, IndexCreationError
from usersearch.factory import UserFactory
from usersearch.index.whoosh_index import WhooshUserIndex
from usersearch.loader import load
from usersearch.main import USAGE_HINT, app
from usersearch.planner import QueryPlanner
from usersearch.renderer import ResultRenderer
from usersearch.session import FAREWELL, Session

EXPECTED_SEEDED_DOCS = 95
EXPECTED_BATCHES = 10


class TestSeeding:
    def test_generated_users_are_all_indexed(
        self, whoosh_index: WhooshUserIndex, factory: UserFactory
    ):
        users = factory.generate(EXPECTED_SEEDED_DOCS, today=REFERENCE_DAY)

        report = load(whoosh_index, users, batch_size=10)

        assert report.batches == EXPECTED_BATCHES
        assert whoosh_index.doc_count == EXPECTED_SEEDED_DOCS

    def test_failed_batch_leaves_index_unchanged(self, seeded_index: WhooshUserIndex):
        before = seeded_index.doc_count
        batch = seeded_index.new_batch()
        batch.add(9999, {"firstname": "Ghost", "unknown_field": "boom"})

        with pytest.raises(BatchSubmissionError):
            seeded_index.submit(batch)

        assert seeded_index.doc_count == before

    def test_batch_cannot_be_submitted_twice(self, whoosh_index: WhooshUserIndex):
        batch = whoosh_index.new_batch()
        batch.add(3000, {"firstname": "Eve", "lastname": "Marsh", "gender": "female", "age": 41})
        whoosh_index.submit(batch)

        with pytest.raises(BatchSubmissionError, match="already submitted"):
            whoosh_index.submit(batch)

        assert whoosh_index.doc_count == 1

    def test_submitted_batch_rejects_new_documents(self, whoosh_index: WhooshUserIndex):
        batch = whoosh_index.new_batch()
        whoosh_index.submit(batch)

        assert batch.submitted
        with pytest.raises(BatchSubmissionError):
            batch.add(3001, {"firstname": "Late"})


class TestSearch:
    def test_gender_query_finds_the_thirty_year_old_woman(
        self, seeded_index: WhooshUserIndex, console: Console, output: io.StringIO
    ):
        result = seeded_index.search(QueryPlanner().plan("gender:female"))

        assert result.total == 1
        hit = result.hits[0]
        assert hit == {"id": 2000, "firstname": "Alice", "lastname": "Walker", "age": 30}

        ResultRenderer(console=console).render(result)
        text = output.getvalue()
        assert "Alice" in text and "Walker" in text and "30" in text

    def test_numeric_comparison(self, seeded_index: WhooshUserIndex):
        result = seeded_index.search(QueryPlanner().plan("age:>=45"))

        assert sorted(hit["firstname"] for hit in result.hits) == ["Bob", "Carl"]

    def test_free_text_matches_analysed_names(self, seeded_index: WhooshUserIndex):
        result = seeded_index.search(QueryPlanner().plan("walker"))

        assert sorted(hit["id"] for hit in result.hits) == [2000, 2002]

    def test_facets_cover_all_matches(self, seeded_index: WhooshUserIndex):
        result = seeded_index.search(QueryPlanner().plan("age:>=0"))

        assert result.facets["gender"].buckets == (("male", 3), ("female", 1))
        assert result.facets["age_group"].buckets == (
            ("teenager", 1),
            ("young-adult", 0),
            ("adult", 1),
            ("senior-adult", 1),
            ("senior", 1),
        )

    def test_page_is_bounded_but_total_is_not(self, seeded_index: WhooshUserIndex):
        result = seeded_index.search(QueryPlanner(page_size=1).plan("gender:male"))

        assert len(result.hits) == 1
        assert result.total == 3
        assert dict(result.facets["gender"].buckets) == {"male": 3}

    def test_empty_query_matches_nothing(self, seeded_index: WhooshUserIndex):
        result = seeded_index.search(QueryPlanner().plan(""))

        assert result.hits == []
        assert result.total == 0
        assert dict(result.facets["age_group"].buckets)["adult"] == 0

    def test_session_over_real_index(
        self, seeded_index: WhooshUserIndex, console: Console, output: io.StringIO
    ):
        lines = iter(["lastname:reed\n", "exit\n"])
        session = Session(
            seeded_index,
            QueryPlanner(),
            ResultRenderer(console=console),
            read_line=lambda: next(lines),
        )

        session.run()

        text = output.getvalue()
        assert "Dana" in text
        assert "Goodbye!" in text


class TestCli:
    def test_run_seeds_answers_and_exits(self):
        result = CliRunner().invoke(
            app,
            ["run", "--users", "25", "--batch-size", "10", "--seed", "7"],
            input="gender:female\nexit\n",
        )

        assert result.exit_code == 0, result.output
        assert "- Seeding index" in result.output
        assert result.output.count("- Seeding batch") == 2
        assert "- Seeding last batch" in result.output
        assert "First Name" in result.output
        assert "Goodbye!" in result.output

    def test_end_of_input_exits_cleanly(self):
        result = CliRunner().invoke(app, ["run", "--users", "3"], input="")

        assert result.exit_code == 0, result.output

    def test_info_shows_configuration(self):
        result = CliRunner().invoke(app, ["info"])

        assert result.exit_code == 0
        assert "batch=10" in result.output

    def test_batch_failure_aborts_startup(self, monkeypatch: pytest.MonkeyPatch):
        def reject(self, batch):
            raise BatchSubmissionError("disk full")

        monkeypatch.setattr(WhooshUserIndex, "submit", reject)

        result = CliRunner().invoke(app, ["run", "--users", "5"], input="walker\nexit\n")

        assert result.exit_code == 1
        assert "Startup failed: disk full" in result.output
        assert USAGE_HINT not in result.output
        assert "First Name" not in result.output
        assert FAREWELL not in result.output

    def test_index_creation_failure_aborts_startup(self, monkeypatch: pytest.MonkeyPatch):
        def refuse(cls, schema=None):
            raise IndexCreationError("no storage")

        monkeypatch.setattr(WhooshUserIndex, "create_in_memory", classmethod(refuse))

        result = CliRunner().invoke(app, ["run", "--users", "5"], input="walker\nexit\n")

        assert result.exit_code == 1
        assert "Startup failed: no storage" in result.output
        assert "- Seeding index" not in result.output
        assert USAGE_HINT not in result.output
        assert FAREWELL not in result.output
