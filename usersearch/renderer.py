from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from usersearch.domain.errors import ProjectionContractError
from usersearch.domain.models import FieldType, ProjectedField, SearchResult
from usersearch.planner import PROJECTION


def _format_value(projected: ProjectedField, value: Any) -> Text:
    """
    Validate ``value`` against the declared projection type and render it.

    Cells are literal text; brackets in stored values are never read as markup.

    Raises ProjectionContractError when the value is absent or mistyped.
    """
    if not projected.value_type.accepts(value):
        raise ProjectionContractError(projected.name, projected.value_type.value, value)
    if projected.value_type is FieldType.NUMERIC and float(value).is_integer():
        return Text(str(int(value)))
    return Text(str(value))


class ResultRenderer:
    """
    Render search hits as a fixed-column rich table.

    Columns follow the projection passed at construction; the header uses each
    projected field's label (``#, First Name, Last Name, Age`` by default).
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        projection: Sequence[ProjectedField] = PROJECTION,
        show_facets: bool = False,
    ) -> None:
        self.console = console or Console()
        self.projection = tuple(projection)
        self.show_facets = show_facets

    def build_table(self, result: SearchResult) -> Table:
        table = Table(
            box=box.ROUNDED,
            caption=f"{len(result.hits)} of {result.total} hit(s)",
        )
        for projected in self.projection:
            justify = "right" if projected.value_type is FieldType.NUMERIC else "left"
            table.add_column(projected.label, justify=justify)

        for hit in result.hits:
            table.add_row(
                *[_format_value(projected, hit.get(projected.name)) for projected in self.projection]
            )
        return table

    def build_facet_tables(self, result: SearchResult) -> Dict[str, Table]:
        tables: Dict[str, Table] = {}
        for name, facet in result.facets.items():
            table = Table(title=name, box=box.SIMPLE)
            table.add_column("Bucket", style="cyan")
            table.add_column("Count", justify="right", style="magenta")
            for label, count in facet.buckets:
                table.add_row(Text(label), str(count))
            tables[name] = table
        return tables

    def render(self, result: SearchResult) -> None:
        """
        Print the hit table, followed by facet tables when enabled.

        The whole table is validated before anything is printed, so a contract
        violation leaves no partial output.
        """
        table = self.build_table(result)
        self.console.print(table)
        if self.show_facets:
            for facet_table in self.build_facet_tables(result).values():
                self.console.print(facet_table)


__all__ = ["ResultRenderer"]
