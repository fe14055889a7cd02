"""HostingBackend protocol for code-review platforms."""

from typing import Protocol

from jjstack.core.models import PullRequest


class HostingBackend(Protocol):
    """
    Protocol for the platform that stores pull requests (GitHub via ``gh`` or REST).

    Every operation takes the repository explicitly as ``owner/name``; backends
    hold no per-repository state.

    Error contract:
    - All failures (process, network, HTTP status, payload decoding) raise
      jjstack.errors.HostingError
    - Records that cannot be parsed into a PullRequest are skipped and their
      reason appended to ``warnings``
    """

    name: str
    warnings: list[str]

    def resolve_repo(self) -> str:
        """
        Resolve the default repository for the current working copy.

        Returns:
            Repository in ``owner/name`` form
        """
        ...

    def list_open_pull_requests(self, repo: str) -> list[PullRequest]:
        """
        List every open pull request (all pages).

        Args:
            repo: Repository in ``owner/name`` form

        Returns:
            Pull requests in platform order
        """
        ...

    def fetch_body(self, repo: str, number: int) -> str:
        """
        Fetch the live description of one pull request.

        Returns:
            Body text ("" when the platform has none)
        """
        ...

    def write_body(self, repo: str, number: int, body: str) -> None:
        """
        Replace the description of one pull request.
        """
        ...


def parse_pull_requests(records: object, warnings: list[str]) -> list[PullRequest]:
    """Convert a decoded ``pulls`` payload, skipping malformed entries."""
    if not isinstance(records, list):
        raise TypeError(f"expected a list of pull requests, got {type(records).__name__}")
    pull_requests: list[PullRequest] = []
    for record in records:
        try:
            pull_requests.append(PullRequest.from_api(record))
        except ValueError as exc:
            warnings.append(f"skipping pull request: {exc}")
    return pull_requests
