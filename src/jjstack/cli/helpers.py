"""Shared console objects and setup helpers for jjstack commands."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from jjstack.config import StackConfig, load_config
from jjstack.core.vcs import find_repo_root
from jjstack.errors import JJStackError
from jjstack.hosting import HostingBackend, get_backend

console = Console()
err_console = Console(stderr=True)


def warn(message: str) -> None:
    """Print a warning to the error channel."""
    err_console.print(f"[yellow]Warning:[/yellow] {escape(message)}", highlight=False)


def fail(message: str) -> typer.Exit:
    """Print an error and return the Exit to raise."""
    err_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    return typer.Exit(1)


def resolve_context(
    repo: Optional[str],
    backend_name: Optional[str],
) -> tuple[Path | None, StackConfig, HostingBackend, str]:
    """Load config, build the backend and resolve the target repository.

    Returns:
        Tuple of (repo_root, config, backend, repo)

    Raises:
        typer.Exit: If configuration or repository resolution fails
    """
    repo_root = find_repo_root()
    try:
        config = load_config(repo_root).with_overrides(repo=repo, backend=backend_name)
        backend = get_backend(config)
        resolved_repo = config.repo or backend.resolve_repo()
    except JJStackError as exc:
        raise fail(str(exc))
    return repo_root, config, backend, resolved_repo
