"""Stacks command - show how tracked pull requests link into stacks."""

from __future__ import annotations

from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table
from typing_extensions import Annotated

from jjstack.cli.helpers import console, fail, resolve_context, warn
from jjstack.core.stack_builder import build_stacks
from jjstack.core.sync import select_tracked
from jjstack.core.vcs import list_bookmarks
from jjstack.errors import JJStackError


def stacks(
    repo: Annotated[
        Optional[str],
        typer.Option("--repo", help="Repository as owner/name (default: gh repo set-default)"),
    ] = None,
    backend: Annotated[
        Optional[str], typer.Option("--backend", help="Hosting backend: gh or rest")
    ] = None,
) -> None:
    """List stacks of tracked pull requests without changing anything."""
    repo_root, _, hosting, resolved_repo = resolve_context(repo, backend)

    try:
        listing = list_bookmarks(repo_root)
        pull_requests = select_tracked(
            hosting.list_open_pull_requests(resolved_repo), listing.bookmarks
        )
    except JJStackError as exc:
        raise fail(str(exc))
    for message in [*listing.warnings, *hosting.warnings]:
        warn(message)

    topology = build_stacks(pull_requests)
    if not topology.stacks:
        console.print("[yellow]No tracked pull requests found.[/yellow]")
    else:
        table = Table(title=f"Stacks in {resolved_repo}", show_header=True)
        table.add_column("Stack", style="cyan", justify="right")
        table.add_column("#", justify="right")
        table.add_column("PR", style="green")
        table.add_column("Branch", style="magenta")
        table.add_column("Base", style="dim")
        table.add_column("Title", overflow="fold")

        for stack_index, stack in enumerate(topology.stacks, start=1):
            for position, pr in enumerate(stack, start=1):
                table.add_row(
                    str(stack_index) if position == 1 else "",
                    str(position),
                    f"#{pr.number}",
                    pr.head,
                    pr.base,
                    escape(pr.title),
                )
            table.add_section()
        console.print(table)

    for issue in topology.issues:
        warn(issue.message)


__all__ = ["stacks"]
