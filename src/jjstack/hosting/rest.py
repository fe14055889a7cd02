"""GitHub REST backend built on httpx."""

from __future__ import annotations

from typing import Any

import httpx

from jjstack.config import DEFAULT_API_URL
from jjstack.core.models import PullRequest
from jjstack.errors import HostingError
from jjstack.hosting.protocol import parse_pull_requests


class RestBackend:
    """
    Hosting backend that calls the GitHub REST API directly.

    The token is sent as-is in the Authorization header; it is never
    obtained or refreshed here.
    """

    name = "rest"

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        token: str = "",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.warnings: list[str] = []
        self._client = client or httpx.Client(
            base_url=self.api_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=timeout,
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()  # Raises on 4xx/5xx
        except httpx.HTTPStatusError as exc:
            raise HostingError(
                f"{method} {exc.request.url} failed: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise HostingError(f"{method} {url} failed: {exc}") from exc
        return response

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise HostingError(f"invalid JSON from {response.request.url}: {exc}") from exc

    def resolve_repo(self) -> str:
        raise HostingError(
            "The rest backend cannot detect the repository. Pass --repo or set JJSTACK_REPO."
        )

    def list_open_pull_requests(self, repo: str) -> list[PullRequest]:
        pull_requests: list[PullRequest] = []
        url: str | None = f"/repos/{repo}/pulls"
        params: dict[str, Any] | None = {"state": "open", "per_page": 100}
        while url:
            response = self._request("GET", url, params=params)
            try:
                pull_requests.extend(parse_pull_requests(self._json(response), self.warnings))
            except TypeError as exc:
                raise HostingError(f"unexpected response from {response.request.url}: {exc}") from exc
            # The next link already carries the query string
            next_link = response.links.get("next")
            url = next_link["url"] if next_link else None
            params = None
        return pull_requests

    def fetch_body(self, repo: str, number: int) -> str:
        data = self._json(self._request("GET", f"/repos/{repo}/pulls/{number}"))
        if not isinstance(data, dict):
            raise HostingError(f"unexpected response for {repo}#{number}")
        return data.get("body") or ""

    def write_body(self, repo: str, number: int, body: str) -> None:
        self._request("PATCH", f"/repos/{repo}/pulls/{number}", json={"body": body})


__all__ = ["RestBackend"]
