"""Shared fixtures: pull request factory and an in-memory hosting backend."""

from __future__ import annotations

import pytest

from jjstack.core.models import PullRequest
from jjstack.errors import HostingError


def make_pr(number: int, head: str, base: str = "main", body: str = "", title: str | None = None) -> PullRequest:
    return PullRequest(
        number=number,
        title=title if title is not None else f"Change {number}",
        head=head,
        base=base,
        body=body,
    )


class FakeBackend:
    """In-memory HostingBackend; bodies live in ``self.bodies`` keyed by number."""

    name = "fake"

    def __init__(self, pull_requests=(), repo="octo/widgets", fail_fetch=(), fail_write=()):
        self.pull_requests = list(pull_requests)
        self.repo = repo
        self.bodies = {pr.number: pr.body for pr in self.pull_requests}
        self.fail_fetch = set(fail_fetch)
        self.fail_write = set(fail_write)
        self.writes: list[tuple[str, int, str]] = []
        self.warnings: list[str] = []

    def resolve_repo(self) -> str:
        return self.repo

    def list_open_pull_requests(self, repo: str) -> list[PullRequest]:
        return list(self.pull_requests)

    def fetch_body(self, repo: str, number: int) -> str:
        if number in self.fail_fetch:
            raise HostingError(f"cannot fetch #{number}")
        return self.bodies[number]

    def write_body(self, repo: str, number: int, body: str) -> None:
        if number in self.fail_write:
            raise HostingError(f"HTTP 422 for #{number}")
        self.writes.append((repo, number, body))
        self.bodies[number] = body


@pytest.fixture
def linear_stack():
    """A(f1 <- main), B(f2 <- f1), C(f3 <- f2)."""
    return [
        make_pr(1, "f1", "main", title="Add parser"),
        make_pr(2, "f2", "f1", title="Use parser"),
        make_pr(3, "f3", "f2", title="Document parser"),
    ]
