"""History command for viewing past runs.

This module provides the `fatorder history` command for viewing the
record of past sort runs.
"""

import json
from datetime import datetime
from typing import Annotated

import typer
from rich.table import Table

from fatorder.core.state import RunHistory
from fatorder.models.history import RunRecord
from fatorder.utils.formatting import console, format_size, print_info, safe_markup

app = typer.Typer(
    name="history",
    help="View history of sort runs.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of runs to show.",
        ),
    ] = 20,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show past sort runs.

    Examples:
        fatorder history              # Show last 20 runs
        fatorder history -n 50        # Show last 50 runs
        fatorder history --json       # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    records = RunHistory().get_history(limit=limit)

    if not records:
        print_info("No runs recorded yet.")
        return

    if json_output:
        _print_json(records)
    else:
        _print_table(records)


def _print_table(records: list[RunRecord]) -> None:
    """Print run records as a Rich table."""
    table = Table(title="Sort History")
    table.add_column("ID", style="dim")
    table.add_column("Timestamp", style="info")
    table.add_column("Target")
    table.add_column("Scope")
    table.add_column("Files", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Result")

    for record in records:
        if record.success:
            outcome = "[success]ok[/]"
        elif record.staging_preserved:
            outcome = f"[error]{record.error_kind.value if record.error_kind else 'failed'}[/] "
            outcome += "[warning](staging kept)[/]"
        else:
            outcome = f"[error]{record.error_kind.value if record.error_kind else 'failed'}[/]"

        table.add_row(
            record.id[:8],
            _format_timestamp(record.timestamp),
            safe_markup(record.target),
            record.scope.value,
            str(record.files),
            format_size(record.total_bytes),
            outcome,
        )

    console.print(table)


def _format_timestamp(iso_timestamp: str) -> str:
    """Format ISO timestamp as YYYY-MM-DD HH:MM."""
    dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    return dt.strftime("%Y-%m-%d %H:%M")


def _print_json(records: list[RunRecord]) -> None:
    """Print run records as JSON."""
    output = [record.to_dict() for record in records]
    console.print_json(json.dumps(output))
