"""Subprocess helpers and jj bookmark discovery."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from jjstack.errors import CommandError


@dataclass
class BookmarkListing:
    """Parsed ``jj bookmark list`` output.

    Attributes:
        bookmarks: Local bookmark names, in listing order
        warnings: Lines that could not be parsed
    """

    bookmarks: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def run_command(
    cmd: Sequence[str],
    *,
    check_return: bool = True,
    input_text: str | None = None,
    cwd: Path | str | None = None,
    timeout: float | None = None,
) -> tuple[int, str, str]:
    """Run a command and return (returncode, stdout, stderr).

    Args:
        cmd: Argument vector
        check_return: If True, raise CommandError on non-zero exit
        input_text: Text written to the process's stdin
        cwd: Working directory for command execution
        timeout: Seconds before the process is killed

    Returns:
        Tuple of (returncode, stdout, stderr); stderr is stripped, stdout is not

    Raises:
        CommandError: If the binary is missing, times out, or (when
            check_return) exits non-zero
    """
    try:
        result = subprocess.run(
            list(cmd),
            input=input_text,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=str(cwd) if cwd else None,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        raise CommandError(cmd, None) from exc
    except subprocess.TimeoutExpired as exc:
        raise CommandError(cmd, -1, f"timed out after {timeout}s") from exc

    stdout = result.stdout or ""
    stderr = (result.stderr or "").strip()
    if check_return and result.returncode != 0:
        raise CommandError(cmd, result.returncode, stderr)
    return result.returncode, stdout, stderr


def parse_bookmark_list(text: str) -> BookmarkListing:
    """Parse ``jj bookmark list`` output.

    Local bookmarks print as ``name: <change> <commit> <description>``.
    Remote tracking entries are indented and start with ``@remote:``; they
    refer to a local bookmark already listed and are skipped.
    """
    listing = BookmarkListing()
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith("@"):
            continue
        name, sep, _ = line.partition(":")
        name = name.strip()
        if not sep or not name:
            listing.warnings.append(f"skipping malformed bookmark line: {line!r}")
            continue
        listing.bookmarks.append(name)
    return listing


def list_bookmarks(repo_path: Path | None = None) -> BookmarkListing:
    """List local jj bookmarks for the working copy at ``repo_path``.

    Raises:
        CommandError: If ``jj bookmark list`` cannot be run
    """
    _, stdout, _ = run_command(["jj", "bookmark", "list"], cwd=repo_path)
    return parse_bookmark_list(stdout)


def find_repo_root(path: Path | None = None) -> Path | None:
    """Return the jj (or colocated git) working copy root containing ``path``."""
    current = (path or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / ".jj").is_dir() or (candidate / ".git").exists():
            return candidate
    return None


__all__ = [
    "BookmarkListing",
    "find_repo_root",
    "list_bookmarks",
    "parse_bookmark_list",
    "run_command",
]
