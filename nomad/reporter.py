from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nomad.codec import serialize
from nomad.record import Record


def _cell(text: Optional[str]) -> str:
    if text is None:
        return "[dim]null[/dim]"
    return escape(text)


def build_record_table(record: Record) -> Table:
    """
    Lay a record out as a rich table, one row per column in declaration order.

    Values are shown in their canonical text form so the table matches what
    the wire formats carry.
    """
    record_cls = type(record)
    table = Table(
        title=f"{record_cls.__name__} ({record.state.value})",
        box=box.ROUNDED,
        caption="Values shown in canonical text form",
    )

    table.add_column("Column", style="cyan", no_wrap=True)
    table.add_column("Type", style="magenta")
    table.add_column("Null", justify="center", style="blue")
    table.add_column("Default", style="yellow")
    table.add_column("Value", style="bold green")

    for column in record_cls.columns():
        table.add_row(
            escape(column.name),
            column.sql_type,
            "yes" if column.nullable else "no",
            _cell(serialize(column.default, column.logical_type)),
            _cell(serialize(record.get(column.name), column.logical_type)),
        )
    return table


def print_record(record: Record, console: Optional[Console] = None) -> None:
    """
    Render a record as a rich table.
    """
    console = console or Console()

    if not record.columns():
        console.print(f"[yellow]{type(record).__name__} declares no columns.[/yellow]")
        return

    console.print(build_record_table(record))


__all__ = ["build_record_table", "print_record"]
