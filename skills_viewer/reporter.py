from __future__ import annotations

from typing import Any, Dict, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from skills_viewer.domain.models import ResultEnvelope
from skills_viewer.presentation.dashboard import format_cell
from skills_viewer.queries.listing import SENSITIVE_FIELDS
from skills_viewer.queries.pagination import display_range


def _caption(envelope: ResultEnvelope) -> Optional[str]:
    if envelope.total is None or envelope.page is None or envelope.page_size is None:
        return None
    start, end = display_range(envelope.total, envelope.page, envelope.page_size)
    return (
        f"page {envelope.page}/{envelope.total_pages} · "
        f"showing {start}-{end} of {envelope.total:,}"
    )


def print_envelope(envelope: ResultEnvelope, title: str, console: Optional[Console] = None) -> None:
    """
    Render a result envelope as a rich table.

    Failure envelopes print the error instead. Columns follow the first
    record; sensitive fields are never shown.
    """
    console = console or Console()

    if not envelope.success:
        console.print(f"[bold red]{title}: {envelope.error}[/bold red]")
        return

    rows = envelope.data or []
    if not rows:
        console.print(f"[yellow]{title}: no rows.[/yellow]")
        return

    table = Table(title=title, box=box.ROUNDED, caption=_caption(envelope))
    columns = [c for c in rows[0] if c not in SENSITIVE_FIELDS]
    for column in columns:
        table.add_column(column, overflow="fold")

    for row in rows:
        table.add_row(*(format_cell(row.get(column)) for column in columns))

    console.print(table)


def print_db_check(result: Dict[str, Any], console: Optional[Console] = None) -> None:
    console = console or Console()
    if result.get("success"):
        console.print(f"[green]Database reachable[/green] {result.get('rows')}")
    else:
        console.print(f"[bold red]Database check failed: {result.get('error')}[/bold red]")


__all__ = ["print_db_check", "print_envelope"]
