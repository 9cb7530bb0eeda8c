from __future__ import annotations

from datetime import datetime
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from roster.projector import Number, Projection

EMPTY_MESSAGE = "No records found."


def format_date(value: str) -> str:
    """
    Normalise a stored date to YYYY-MM-DD.

    Values that do not parse as an ISO date or datetime are shown unchanged.
    """
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value).date().isoformat()
    except ValueError:
        return value


def format_amount(value: Number) -> str:
    """Plain number text; whole floats drop the trailing `.0`."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def summary_line(projection: Projection) -> str:
    summary = projection.summary
    return f"Showing: {summary.count} | Total Salary: {format_amount(summary.total_salary)}"


def build_table(projection: Projection) -> Table:
    """
    Render a projection as a rich table.

    User-entered text is escaped so names containing `[` cannot inject markup.
    """
    title = "Students"
    if projection.filters.section:
        title = f"{title} [dim](section: {escape(projection.filters.section)})[/dim]"

    table = Table(title=title, box=box.ROUNDED, caption=summary_line(projection))
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Contact", style="magenta")
    table.add_column("Section", style="blue")
    table.add_column("Salary", justify="right", style="green")
    table.add_column("Join Date", style="yellow")

    if not projection.rows:
        table.add_row("", f"[dim]{EMPTY_MESSAGE}[/dim]", "", "", "", "")
        return table

    for record in projection.rows:
        salary = "" if record.salary is None else str(record.salary)
        table.add_row(
            escape(record.id),
            escape(record.name),
            escape(record.contact),
            escape(record.section),
            escape(salary),
            escape(format_date(record.join_date)),
        )
    return table


def print_projection(projection: Projection, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(build_table(projection))
    if projection.distinct_sections:
        sections = ", ".join(escape(s) for s in projection.distinct_sections)
        console.print(f"[dim]Sections:[/dim] {sections}")
