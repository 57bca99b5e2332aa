"""
Interactive query loop for the user search demo.

Two states: reading (blocked on one line of input) and done. The literal exit
token, or end of input, ends the session; anything else is planned, searched
and rendered. Search failures are reported and the loop keeps reading.
"""

from __future__ import annotations

from typing import Callable, Optional

from rich.console import Console

from usersearch.domain.errors import SearchError
from usersearch.index.abstract import SearchIndex
from usersearch.planner import QueryPlanner
from usersearch.renderer import ResultRenderer
from usersearch.utils.logging import get_logger

log = get_logger(__name__)

EXIT_TOKEN = "exit"
PROMPT = "-> "
FAREWELL = "Goodbye!"
SEARCH_ERROR_MESSAGE = "Error while searching!"


class Session:
    """
    Read-search-render loop bound to one index.

    Parameters
    ----------
    index : SearchIndex
        Seeded index; only ``search`` is called.
    planner : QueryPlanner
        Builds the request for each line.
    renderer : ResultRenderer
        Prints results.
    console : rich.console.Console | None
        Output for prompts, errors and the farewell. Defaults to the renderer's.
    read_line : callable | None
        Returns the next line (trailing newline allowed) or raises EOFError.
        Defaults to ``console.input(PROMPT)``.
    """

    def __init__(
        self,
        index: SearchIndex,
        planner: QueryPlanner,
        renderer: ResultRenderer,
        console: Optional[Console] = None,
        read_line: Optional[Callable[[], str]] = None,
    ) -> None:
        self.index = index
        self.planner = planner
        self.renderer = renderer
        self.console = console or renderer.console
        self._read_line = read_line or (lambda: self.console.input(PROMPT))
        self.done = False

    def handle(self, line: str) -> bool:
        """
        Process one input line. Returns False once the session is done.
        """
        text = line.rstrip("\r\n")
        if text == EXIT_TOKEN:
            self.console.print(FAREWELL)
            self.done = True
            return False

        request = self.planner.plan(text)
        try:
            result = self.index.search(request)
        except SearchError as exc:
            log.warning("Query failed", extra={"query": text, "error": str(exc)})
            self.console.print(f"{SEARCH_ERROR_MESSAGE}\n {exc}", markup=False)
            return True

        log.info("Query executed", extra={"query": text, "total": result.total})
        self.renderer.render(result)
        return True

    def run(self) -> None:
        """Loop until the exit token or end of input."""
        while not self.done:
            try:
                line = self._read_line()
            except EOFError:
                log.info("End of input, closing session")
                self.done = True
                break
            self.handle(line)


__all__ = ["EXIT_TOKEN", "FAREWELL", "PROMPT", "SEARCH_ERROR_MESSAGE", "Session"]
