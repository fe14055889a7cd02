"""Sync command - write (or preview) stack navigation blocks on pull requests."""

from __future__ import annotations

import json as json_mod
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from jjstack.cli.helpers import console, err_console, fail, resolve_context, warn
from jjstack.core.sync import SyncReport, UpdateStatus, sync_stacks
from jjstack.core.vcs import list_bookmarks
from jjstack.errors import JJStackError


def _print_preview(report: SyncReport) -> None:
    for update in report.updates:
        pr = update.pull_request
        label = f"PR #{pr.number} {escape(json_mod.dumps(pr.title, ensure_ascii=False))}"
        if update.is_removal:
            console.print(f"{label}: [yellow]removed[/yellow]")
            continue
        console.print(f"{label}: updates with")
        for line in update.nav_block.splitlines():
            console.print(f"\t{line}", markup=False, highlight=False)
        console.print()


def _print_outcomes(report: SyncReport) -> None:
    for outcome in report.outcomes:
        pr = outcome.update.pull_request
        label = f"PR #{pr.number} {escape(json_mod.dumps(pr.title, ensure_ascii=False))}"
        if outcome.status == UpdateStatus.FAILED:
            action = "remove navigation block from" if outcome.update.is_removal else "update"
            err_console.print(
                f"[red]#{pr.number}: cannot {action} PR:[/red] {escape(outcome.error or '')}"
            )
        elif outcome.status == UpdateStatus.UNCHANGED:
            console.print(f"{label}: [dim]unchanged[/dim]")
        elif outcome.status == UpdateStatus.REMOVED:
            console.print(f"{label}: [yellow]removed[/yellow]")
        else:
            console.print(f"{label}: [green]updated[/green]")


def sync(
    apply: bool = typer.Option(
        False, "--apply", help="Write the navigation blocks (default: preview only)"
    ),
    repo: Optional[str] = typer.Option(
        None, "--repo", help="Repository as owner/name (default: gh repo set-default)"
    ),
    backend: Optional[str] = typer.Option(
        None, "--backend", help="Hosting backend: gh or rest"
    ),
    json_output: Optional[str] = typer.Option(
        None, "--json", help="Write a JSON report to this path"
    ),
) -> None:
    """Add, refresh or remove stack navigation blocks in pull request descriptions.

    Open pull requests whose head branch is a local jj bookmark are linked
    into stacks. Every member of a multi-PR stack gets a block listing the
    whole stack; a PR that left its stack has its old block removed.

    Examples:
        # Preview what would change
        jjstack sync

        # Write the changes
        jjstack sync --apply

        # Target another repository and keep a report
        jjstack sync --repo octo/widgets --json report.json
    """
    repo_root, _, hosting, resolved_repo = resolve_context(repo, backend)
    console.print(f"repo: {escape(resolved_repo)}")

    try:
        listing = list_bookmarks(repo_root)
    except JJStackError as exc:
        raise fail(str(exc))
    for message in listing.warnings:
        warn(message)

    if not listing.bookmarks:
        console.print("no bookmarks found.")
        return

    try:
        report = sync_stacks(hosting, resolved_repo, listing.bookmarks, apply=apply)
    except JJStackError as exc:
        raise fail(str(exc))

    for message in report.warnings:
        warn(message)
    report.warnings[:0] = listing.warnings
    for issue in report.topology.issues:
        warn(issue.message)

    if not report.pull_requests:
        console.print("no matching PRs found for bookmarks.")
    elif apply:
        _print_outcomes(report)
    else:
        _print_preview(report)

    if json_output:
        Path(json_output).write_text(
            json_mod.dumps(report.to_dict(), indent=2), encoding="utf-8"
        )


__all__ = ["sync"]
