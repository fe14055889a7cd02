"""jjstack command-line interface."""

from __future__ import annotations

import typer

from jjstack import __version__
from jjstack.cli.commands.stacks import stacks
from jjstack.cli.commands.sync import sync
from jjstack.cli.helpers import console

app = typer.Typer(
    name="jjstack",
    help="Maintain stack navigation blocks in stacked GitHub pull requests tracked by jj bookmarks.",
    no_args_is_help=True,
)

app.command(name="sync")(sync)
app.command(name="stacks")(stacks)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"jjstack {__version__}")
        raise typer.Exit()


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Maintain stack navigation blocks in stacked pull requests."""


def main() -> None:
    app()


__all__ = ["app", "main"]
