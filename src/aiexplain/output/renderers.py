"""
Terminal renderers for the analysis context.

Separates presentation from inspection: the CLI hands PreparedAnalysis
data to these functions and prints the returned rich renderables.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Group, RenderableType
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from aiexplain.engine import PreparedAnalysis
    from aiexplain.models import AnalysisRequest, PlanRow, TableDescriptor


# Access types from worst to best
ACCESS_TYPE_ORDER = [
    "ALL",      # Full table scan
    "index",    # Full index scan
    "range",    # Index range scan
    "index_merge",
    "ref_or_null",
    "ref",      # Non-unique index lookup
    "eq_ref",   # Unique index lookup
    "const",    # Single row (constant)
    "system",   # System table with one row
]


def access_type_style(access_type: str) -> str:
    """Colour for an access type: red for full scans, green for lookups."""
    if access_type == "ALL":
        return "red bold"
    if access_type in ("index", "range", "index_merge", "ref_or_null"):
        return "yellow"
    if access_type in ACCESS_TYPE_ORDER:
        return "green"
    return "dim"


def render_columns(table: "TableDescriptor") -> Table:
    """Column listing for one table."""
    grid = Table(title="Columns", title_justify="left", show_lines=False)
    grid.add_column("Field", style="cyan")
    grid.add_column("Type")
    grid.add_column("Null")
    grid.add_column("Key", style="magenta")
    grid.add_column("Default")
    grid.add_column("Extra", style="dim")

    for col in table.columns:
        grid.add_row(
            escape(col.field),
            escape(col.type),
            "YES" if col.nullable else "NO",
            col.key,
            "NULL" if col.default is None else escape(col.default),
            escape(col.extra),
        )
    return grid


def render_indexes(table: "TableDescriptor") -> Table:
    """Index listing for one table, one row per index."""
    grid = Table(title="Indexes", title_justify="left")
    grid.add_column("Index", style="cyan")
    grid.add_column("Columns")
    grid.add_column("Unique")

    for group in table.grouped_indexes():
        grid.add_row(
            escape(group.index_name),
            escape(", ".join(group.columns)),
            "[green]yes[/green]" if group.unique else "no",
        )
    return grid


def render_table(table: "TableDescriptor") -> Panel:
    """Columns, indexes and DDL of one table in a panel."""
    parts: list[RenderableType] = [render_columns(table)]
    if table.indexes:
        parts.append(render_indexes(table))
    else:
        parts.append(Text("No indexes", style="yellow"))
    if table.create_table:
        parts.append(Syntax(table.create_table, "sql", word_wrap=True))

    return Panel(Group(*parts), title=f"[bold]{escape(table.table_name)}[/bold]", border_style="blue")


def render_plan(plan: "list[PlanRow] | tuple[PlanRow, ...]") -> Table:
    """EXPLAIN rows in engine order."""
    grid = Table(title="EXPLAIN", title_justify="left")
    for name in (
        "id", "select_type", "table", "partitions", "type", "possible_keys",
        "key", "key_len", "ref", "rows", "filtered", "Extra",
    ):
        grid.add_column(name, justify="right" if name in ("rows", "filtered") else "left")

    for row in plan:
        style = access_type_style(row.access_type)
        rows = f"{row.rows:,}"
        extra = escape(row.extra)
        possible_keys = escape(row.possible_keys)
        if row.is_full_table_scan:
            rows = f"[red]{rows}[/red]"
        if row.is_using_filesort or row.is_using_temporary:
            extra = f"[yellow]{extra}[/yellow]"
        if row.has_unused_index:
            possible_keys = f"[yellow]{possible_keys}[/yellow]"

        grid.add_row(
            "" if row.id is None else str(row.id),
            row.select_type,
            escape(row.table),
            escape(row.partitions),
            f"[{style}]{row.access_type}[/{style}]" if row.access_type else "",
            possible_keys,
            escape(row.key),
            row.key_len,
            escape(row.ref),
            rows,
            f"{row.filtered:.2f}",
            extra,
        )
    return grid


def render_failures(failures: dict[str, str]) -> Text:
    """Tables that were left out of the analysis."""
    text = Text()
    for table, reason in failures.items():
        text.append(f"Skipped table {table}: ", style="yellow")
        text.append(f"{reason}\n", style="dim")
    return text


def render_context(prepared: "PreparedAnalysis", show_schema: bool = True) -> list[RenderableType]:
    """Everything printed before the AI analysis."""
    items: list[RenderableType] = []
    request = prepared.request

    if prepared.failures:
        items.append(render_failures(prepared.failures))

    if show_schema:
        for table in request.table_infos:
            items.append(render_table(table))

    items.append(render_plan(request.explain_plan))

    if request.mysql_version:
        items.append(Text(f"MySQL version: {request.mysql_version}", style="dim"))

    return items


def render_json(request: "AnalysisRequest") -> str:
    """The request exactly as embedded in the prompt."""
    return request.to_json()
