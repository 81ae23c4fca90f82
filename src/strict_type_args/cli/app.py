import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from strict_type_args.cli.inspect import inspect
from strict_type_args.cli.run import run

app = typer.Typer(
    name="strict-type-args",
    help="Strict type args: add explicit arguments to polymorphic type applications flagged by Flow.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("run")(run)
app.command("inspect")(inspect)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def main() -> None:
    app()
