"""Async Jira Cloud REST v3 client with basic (email + API token) auth."""

from typing import Any

import httpx

from werkday.common.errors import UpstreamError
from werkday.common.payload import safe_dict, safe_list
from werkday.integrations.http_errors import decode_json
from werkday.shared import USER_AGENT, build_http_timeout_seconds, build_jira_base_url

SERVICE_NAME = "JIRA"
API_PREFIX = "/rest/api/3"
SEARCH_MAX_RESULTS = 100
SEARCH_FIELDS = ["summary", "status", "project", "updated", "created", "comment", "worklog"]


class JiraClient:
    """Wrapper over `httpx.AsyncClient`; `site_url` is the browse base for deep links."""

    def __init__(
        self,
        domain: str,
        email: str,
        api_token: str,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.site_url = (base_url or build_jira_base_url(domain)).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=f"{self.site_url}{API_PREFIX}",
            auth=httpx.BasicAuth(email, api_token),
            timeout=timeout if timeout is not None else build_http_timeout_seconds(),
            transport=transport,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            },
        )

    async def __aenter__(self) -> "JiraClient":
        return self

    async def __aexit__(self, *_exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Send one request under `/rest/api/3`.

        Raises:
            UpstreamError: On transport failure or non-2xx status.
        """
        try:
            response = await self._client.request(method, path, params=params, json=body)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"{SERVICE_NAME} request failed: {exc}") from exc
        return decode_json(response, SERVICE_NAME)

    async def myself(self) -> dict[str, Any]:
        return safe_dict(await self.request_json("GET", "/myself"))

    async def search_projects(self) -> list[dict[str, Any]]:
        payload = await self.request_json(
            "GET", "/project/search", params={"maxResults": SEARCH_MAX_RESULTS, "orderBy": "name"}
        )
        return [safe_dict(project) for project in safe_list(safe_dict(payload).get("values"))]

    async def search_issues(self, jql: str) -> list[dict[str, Any]]:
        """Run a JQL search with changelog expansion; first page only."""
        payload = await self.request_json(
            "POST",
            "/search/jql",
            body={
                "jql": jql,
                "maxResults": SEARCH_MAX_RESULTS,
                "fields": SEARCH_FIELDS,
                "expand": "changelog",
            },
        )
        return [safe_dict(issue) for issue in safe_list(safe_dict(payload).get("issues"))]
