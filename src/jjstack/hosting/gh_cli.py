"""GitHub backend that shells out to the ``gh`` CLI."""

from __future__ import annotations

import json
from typing import Any

from jjstack.core.models import PullRequest
from jjstack.core.vcs import run_command
from jjstack.errors import CommandError, HostingError
from jjstack.hosting.protocol import parse_pull_requests


def _decode_json_stream(text: str) -> list[Any]:
    """Decode concatenated JSON documents (``gh api --paginate`` prints one per page)."""
    decoder = json.JSONDecoder()
    documents: list[Any] = []
    index = 0
    length = len(text)
    while True:
        while index < length and text[index].isspace():
            index += 1
        if index >= length:
            return documents
        document, index = decoder.raw_decode(text, index)
        documents.append(document)


class GhCliBackend:
    """
    Hosting backend driven by the GitHub CLI.

    Authentication, host selection and retries are left to ``gh`` itself.
    """

    name = "gh"

    def __init__(self, executable: str = "gh") -> None:
        self.executable = executable
        self.warnings: list[str] = []

    def _gh(self, *args: str, input_text: str | None = None) -> str:
        try:
            _, stdout, _ = run_command([self.executable, *args], input_text=input_text)
        except CommandError as exc:
            raise HostingError(str(exc)) from exc
        return stdout

    def resolve_repo(self) -> str:
        repo = self._gh("repo", "set-default", "--view").strip()
        if not repo:
            raise HostingError(
                "No default repository set. Run 'gh repo set-default' or pass --repo."
            )
        return repo

    def list_open_pull_requests(self, repo: str) -> list[PullRequest]:
        url = f"repos/{repo}/pulls?state=open&per_page=100"
        stdout = self._gh("api", "--paginate", url)
        try:
            pages = _decode_json_stream(stdout)
        except json.JSONDecodeError as exc:
            raise HostingError(f"invalid JSON from 'gh api {url}': {exc}") from exc

        pull_requests: list[PullRequest] = []
        for page in pages:
            try:
                pull_requests.extend(parse_pull_requests(page, self.warnings))
            except TypeError as exc:
                raise HostingError(f"unexpected response from 'gh api {url}': {exc}") from exc
        return pull_requests

    def fetch_body(self, repo: str, number: int) -> str:
        url = f"repos/{repo}/pulls/{number}"
        stdout = self._gh("api", url)
        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as exc:
            raise HostingError(f"invalid JSON from 'gh api {url}': {exc}") from exc
        if not isinstance(data, dict):
            raise HostingError(f"unexpected response from 'gh api {url}'")
        return data.get("body") or ""

    def write_body(self, repo: str, number: int, body: str) -> None:
        url = f"repos/{repo}/pulls/{number}"
        payload = json.dumps({"body": body})
        self._gh("api", "--input", "-", "-X", "PATCH", url, input_text=payload)


__all__ = ["GhCliBackend"]
