from collections.abc import Sequence
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from strict_type_args.core.diagnostics import load_diagnostic_index
from strict_type_args.models import MatchStrategy

console = Console()


def _render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def inspect(
    report: Annotated[str, typer.Argument(help="Flow JSON error report.")],
    match: Annotated[MatchStrategy, typer.Option(help="How report paths are keyed.")] = MatchStrategy.BASENAME,
    limit: Annotated[int, typer.Option(help="Max rows to return.")] = 50,
) -> None:
    """List the arity errors loaded from a report."""
    index = load_diagnostic_index(report, match)
    rows: list[tuple[Any, ...]] = []
    for key in index.files():
        for record in index.records_for(key):
            rows.append((key, record.start_offset, record.end_offset, record.required_arity))
    _render_table(["file", "start", "end", "arity"], rows[:limit])
    console.print(f"{len(index)} arity error(s) of {index.total_entries} diagnostic(s)")
