"""Async GitHub REST client covering identity, org/repo listing and search."""

from typing import Any

import httpx

from werkday.common.errors import UpstreamError
from werkday.common.payload import safe_dict, safe_list
from werkday.integrations.http_errors import decode_json
from werkday.shared import USER_AGENT, build_github_api_url, build_http_timeout_seconds

SERVICE_NAME = "GitHub"
GITHUB_API_VERSION = "2022-11-28"
SEARCH_PAGE_SIZE = 50
LISTING_PAGE_SIZE = 100


class GitHubClient:
    """
    Thin wrapper over `httpx.AsyncClient` with bearer auth.

    Use as an async context manager; only the first page of any listing is read.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url or build_github_api_url(),
            timeout=timeout if timeout is not None else build_http_timeout_seconds(),
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
                "User-Agent": USER_AGENT,
            },
        )

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *_exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """
        GET a JSON document.

        Raises:
            UpstreamError: On transport failure or non-2xx status.
        """
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"{SERVICE_NAME} request failed: {exc}") from exc
        return decode_json(response, SERVICE_NAME)

    async def current_user(self) -> dict[str, Any]:
        return safe_dict(await self.get_json("/user"))

    async def list_orgs(self) -> list[dict[str, Any]]:
        return [safe_dict(org) for org in safe_list(await self.get_json("/user/orgs"))]

    async def list_repos(self, org: str | None = None) -> list[dict[str, Any]]:
        """Repos of an organization, or the user's own repos when `org` is None."""
        params: dict[str, Any] = {"per_page": LISTING_PAGE_SIZE, "sort": "updated"}
        if org:
            path = f"/orgs/{org}/repos"
        else:
            path = "/user/repos"
            params["affiliation"] = "owner"
        return [safe_dict(repo) for repo in safe_list(await self.get_json(path, params))]

    async def _search(self, kind: str, query: str, sort: str | None) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"q": query, "per_page": SEARCH_PAGE_SIZE, "order": "desc"}
        if sort:
            params["sort"] = sort
        payload = safe_dict(await self.get_json(f"/search/{kind}", params))
        return [safe_dict(item) for item in safe_list(payload.get("items"))]

    async def search_commits(self, username: str, since_day: str) -> list[dict[str, Any]]:
        return await self._search(
            "commits", f"author:{username} committer-date:>={since_day}", "committer-date"
        )

    async def search_authored_pull_requests(self, username: str, since_day: str) -> list[dict[str, Any]]:
        return await self._search("issues", f"author:{username} is:pr updated:>={since_day}", "updated")

    async def search_reviewed_pull_requests(self, username: str, since_day: str) -> list[dict[str, Any]]:
        return await self._search("issues", f"reviewed-by:{username} is:pr updated:>={since_day}", "updated")
