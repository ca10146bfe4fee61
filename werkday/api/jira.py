"""Jira connection, project listing, sync and cached-activity endpoints under /api/jira."""

from datetime import timedelta
from typing import Any

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from werkday.activity_store import Workspace
from werkday.api.deps import get_http_transport, get_workspace, to_http_exception
from werkday.api.models import JiraConfigRequest, JiraSyncRequest, JiraValidateRequest
from werkday.common.dates import resolve_date_range
from werkday.common.payload import safe_str
from werkday.integrations.jira_client import JiraClient
from werkday.sync.jira_read import get_activity_for_range
from werkday.sync.jira_sync import sync_jira_range

router = APIRouter(prefix="/api/jira", tags=["jira"])


@router.get("/status")
def jira_status(workspace: Workspace = Depends(get_workspace)) -> dict[str, Any]:
    section = workspace.config.load()["issueTracker"]
    return {
        "connected": workspace.config.has_secret("issueTracker", "apiToken") and bool(section.get("domain")),
        "displayName": section.get("displayName"),
        "domain": section.get("domain"),
    }


@router.get("/config")
def get_jira_config(workspace: Workspace = Depends(get_workspace)) -> dict[str, Any]:
    return workspace.config.masked()["issueTracker"]


@router.post("/config")
def save_jira_config(payload: JiraConfigRequest, workspace: Workspace = Depends(get_workspace)) -> dict[str, bool]:
    try:
        workspace.config.save({"issueTracker": payload.updates()})
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return {"success": True}


@router.post("/validate")
async def validate_jira_credentials(
    payload: JiraValidateRequest,
    workspace: Workspace = Depends(get_workspace),
    transport: httpx.AsyncBaseTransport | None = Depends(get_http_transport),
) -> Any:
    """
    Check credentials against `/myself` and store them with the resolved identity.

    Returns:
        `{valid, displayName, accountId, emailAddress}` on success.
        400 when a field is missing, 401 when Jira rejects the credentials.
    """
    domain = safe_str(payload.domain)
    email = safe_str(payload.email)
    api_token = safe_str(payload.api_token)
    if not (domain and email and api_token):
        return JSONResponse(status_code=400, content={"valid": False, "error": "All fields are required"})
    try:
        async with JiraClient(domain, email, api_token, transport=transport) as client:
            user = await client.myself()
    except Exception as exc:
        return JSONResponse(status_code=401, content={"valid": False, "error": str(exc) or "Validation failed"})

    try:
        workspace.config.save(
            {
                "issueTracker": {
                    "domain": domain,
                    "email": email,
                    "apiToken": api_token,
                    "displayName": user.get("displayName"),
                    "accountId": user.get("accountId"),
                }
            }
        )
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return {
        "valid": True,
        "displayName": user.get("displayName"),
        "accountId": user.get("accountId"),
        "emailAddress": user.get("emailAddress"),
    }


@router.post("/disconnect")
def disconnect_jira(workspace: Workspace = Depends(get_workspace)) -> dict[str, bool]:
    try:
        workspace.config.reset("issueTracker")
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return {"success": True}


@router.get("/projects")
async def list_jira_projects(
    workspace: Workspace = Depends(get_workspace),
    transport: httpx.AsyncBaseTransport | None = Depends(get_http_transport),
) -> list[dict[str, Any]]:
    try:
        credentials = workspace.config.jira_credentials()
        async with JiraClient(
            credentials.domain, credentials.email, credentials.api_token, transport=transport
        ) as client:
            projects = await client.search_projects()
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return [
        {
            "id": project.get("id"),
            "key": project.get("key"),
            "name": project.get("name"),
            "avatarUrls": project.get("avatarUrls"),
        }
        for project in projects
    ]


@router.get("/activity")
def get_jira_activity(
    from_: str | None = Query(default=None, alias="from"),
    to: str | None = None,
    date: str | None = None,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, Any]:
    """Cached activity for a range; never calls Jira."""
    try:
        workspace.config.jira_credentials()
        date_range = resolve_date_range(from_, to, date)
        activity = get_activity_for_range(workspace.daily, date_range)
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return activity.to_dict()


@router.post("/sync")
async def sync_jira(
    payload: JiraSyncRequest | None = None,
    workspace: Workspace = Depends(get_workspace),
    transport: httpx.AsyncBaseTransport | None = Depends(get_http_transport),
) -> dict[str, Any]:
    """
    Fetch each day of the range from Jira and overwrite its bucket.

    Raises:
        HTTPException 400: Malformed range.
        HTTPException 401: Jira not connected.
        HTTPException 500: Upstream failure on any day.
    """
    body = payload or JiraSyncRequest()
    try:
        credentials = workspace.config.jira_credentials()
        date_range = resolve_date_range(body.from_, body.to, body.date)
        stale_after = (
            timedelta(seconds=body.stale_after_seconds) if body.stale_after_seconds else None
        )
        async with JiraClient(
            credentials.domain, credentials.email, credentials.api_token, transport=transport
        ) as client:
            activity = await sync_jira_range(
                client,
                workspace.daily,
                workspace.jira_cache,
                date_range,
                projects=credentials.projects,
                stale_after=stale_after,
            )
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return activity.to_dict()


@router.get("/cache")
def get_jira_cache(workspace: Workspace = Depends(get_workspace)) -> dict[str, Any]:
    return workspace.jira_cache.document()
