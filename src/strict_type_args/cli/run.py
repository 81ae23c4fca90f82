from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from strict_type_args.core.cache import ReportCache
from strict_type_args.core.run import DEFAULT_IGNORED_DIRS, run_transform
from strict_type_args.models import MatchStrategy, TransformOptions

console = Console()


def run(
    paths: Annotated[list[str], typer.Argument(help="Files or directories to rewrite.")],
    errors: Annotated[
        str | None,
        typer.Option(envvar="STRICT_TYPE_ARGS_ERRORS", help="Flow JSON error report (flow check --json)."),
    ] = None,
    match: Annotated[MatchStrategy, typer.Option(help="How report paths are matched to files.")] = MatchStrategy.BASENAME,
    placeholder: Annotated[str, typer.Option(help="Type inserted for each missing argument.")] = "any",
    language: Annotated[str | None, typer.Option(help="Grammar to parse with (tsx, typescript).")] = None,
    ignore: Annotated[list[str] | None, typer.Option(help="Directory names to skip.")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Report changes without writing files.")] = False,
) -> None:
    """Add placeholder type arguments at the locations of Flow arity errors."""
    options = TransformOptions(errors=errors, match=match, placeholder=placeholder, language=language)
    outcomes = run_transform(
        paths,
        options,
        cache=ReportCache(),
        dry_run=dry_run,
        ignore=ignore if ignore else DEFAULT_IGNORED_DIRS,
    )

    rewritten = [outcome for outcome in outcomes if outcome.status == "rewritten"]
    if rewritten:
        table = Table(show_lines=False)
        table.add_column("file")
        table.add_column("rewritten")
        for outcome in rewritten:
            table.add_row(str(outcome.path), str(outcome.rewritten))
        console.print(table)

    verb = "Would rewrite" if dry_run else "Rewrote"
    total = sum(outcome.rewritten for outcome in rewritten)
    console.print(f"[green]{verb}[/green] {total} type reference(s) in {len(rewritten)} of {len(outcomes)} file(s)")
    errored = sum(1 for outcome in outcomes if outcome.status == "error")
    if errored:
        console.print(f"[yellow]Skipped[/yellow] {errored} unreadable file(s)")
