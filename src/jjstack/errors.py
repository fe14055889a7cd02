"""Exception hierarchy shared by the jjstack core, backends and CLI."""

from __future__ import annotations

from typing import Sequence


class JJStackError(Exception):
    """Base class for all jjstack errors."""

    pass


class ConfigError(JJStackError):
    """Invalid or unreadable configuration."""

    pass


class CommandError(JJStackError):
    """An external process exited unsuccessfully or could not be started.

    Attributes:
        cmd: The argument vector that was run
        returncode: Process exit code (None when the binary was not found)
        stderr: Captured standard error, stripped
    """

    def __init__(self, cmd: Sequence[str], returncode: int | None, stderr: str = "") -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = stderr
        joined = " ".join(self.cmd)
        if returncode is None:
            message = f"cannot run '{joined}': command not found"
        else:
            message = f"cannot run '{joined}': {stderr or f'exit code {returncode}'}"
        super().__init__(message)


class HostingError(JJStackError):
    """The hosting platform could not list, fetch or update pull requests."""

    pass


__all__ = [
    "CommandError",
    "ConfigError",
    "HostingError",
    "JJStackError",
]
