from __future__ import annotations

import sys
from typing import Optional

import typer
from rich.console import Console

from usersearch.config import Settings, get_settings
from usersearch.domain.errors import BatchSubmissionError, IndexCreationError
from usersearch.factory import UserFactory
from usersearch.index.whoosh_index import WhooshUserIndex
from usersearch.loader import LoadReport, load
from usersearch.planner import QueryPlanner
from usersearch.renderer import ResultRenderer
from usersearch.session import Session
from usersearch.utils.logging import configure_logging, get_logger
from usersearch.utils.profiler import profile_block

app = typer.Typer(help="Interactive faceted search over synthetic users.")
log = get_logger(__name__)

USAGE_HINT = "Type searchstring and press ENTER (ex: 'gender:female age:>=45')"


def _echo_progress(batch_number: int, size: int, partial: bool) -> None:
    typer.echo("- Seeding last batch" if partial else "- Seeding batch")


def seed_index(
    index: WhooshUserIndex, settings: Settings, users: int, batch_size: int, seed: Optional[int]
) -> LoadReport:
    """
    Generate ``users`` synthetic users and load them into ``index``.
    """
    factory = UserFactory.from_settings(settings, seed=seed)
    records = factory.generate(users)

    typer.echo("- Seeding index")
    with profile_block("seed-index") as stats:
        report = load(index, records, batch_size, on_batch=_echo_progress)
    stats.extra.update(batches=report.batches, documents=report.documents)
    log.info("Index seeded", extra=stats.as_log_fields())
    return report


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"users={settings.user_count} batch={settings.batch_size} "
        f"id_offset={settings.id_offset} page_size={settings.page_size} seed={settings.seed}"
    )
    typer.echo(
        f"created={settings.created_from}..{settings.created_to} "
        f"last_online={settings.last_online_from}..{settings.last_online_to} "
        f"birth={settings.birth_from}..{settings.birth_to}"
    )


@app.command()
def run(
    users: Optional[int] = typer.Option(
        None,
        "--users",
        "-u",
        min=0,
        help="Number of synthetic users to index (default from settings).",
    ),
    batch_size: Optional[int] = typer.Option(
        None,
        "--batch-size",
        "-b",
        min=1,
        help="Documents per index batch (default from settings).",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Deterministic generator seed.",
    ),
    facets: Optional[bool] = typer.Option(
        None,
        "--facets/--no-facets",
        help="Print facet counts below each result table.",
    ),
    json_logs: Optional[bool] = typer.Option(
        None,
        "--json-logs/--plain-logs",
        help="Emit logs as JSON.",
    ),
) -> None:
    """
    Seed an in-memory index and start the interactive search prompt.
    """
    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_logs=settings.json_logs if json_logs is None else json_logs,
    )

    try:
        index = WhooshUserIndex.create_in_memory()
        seed_index(
            index,
            settings,
            users=settings.user_count if users is None else users,
            batch_size=batch_size or settings.batch_size,
            seed=seed,
        )
    except (IndexCreationError, BatchSubmissionError) as exc:
        log.exception("Startup failed")
        typer.echo(f"Startup failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    console = Console()
    renderer = ResultRenderer(
        console=console,
        show_facets=settings.show_facets if facets is None else facets,
    )
    session = Session(index, QueryPlanner(settings.page_size), renderer, console=console)

    typer.echo(USAGE_HINT)
    session.run()


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
