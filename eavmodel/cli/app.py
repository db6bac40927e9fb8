"""Typer application, shared console and the global flags."""

import logging
from typing import Annotated

import typer
from rich.console import Console

app = typer.Typer(
    name="eavmodel",
    help="Check and browse the families and attributes of an EAV model file.",
    no_args_is_help=True,
)

console = Console()

# Set by the callback before any command runs
_json_mode = False


def get_json_mode() -> bool:
    """Whether the current invocation asked for --json."""
    return _json_mode


def _print_version(requested: bool) -> None:
    if requested:
        from .. import __version__

        print(f"eavmodel {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print one JSON document instead of rich output"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log registry and build steps at DEBUG"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Print the eavmodel version",
            callback=_print_version,
            is_eager=True,
        ),
    ] = False,
):
    """Load a model file and report on it.

    Every command takes the model file (YAML or JSON) as first argument.
    """
    global _json_mode
    _json_mode = json_output
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
