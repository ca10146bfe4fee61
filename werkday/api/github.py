"""GitHub connection, listing and activity endpoints under /api/github."""

from datetime import timedelta
from typing import Any

import httpx
from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from werkday.activity_store import Workspace
from werkday.api.deps import get_http_transport, get_workspace, to_http_exception
from werkday.api.models import GitHubConfigRequest, GitHubValidateRequest
from werkday.common.dates import parse_instant, utc_now
from werkday.common.errors import InputError, NotAuthenticatedError
from werkday.common.payload import safe_str
from werkday.integrations.github_client import GitHubClient
from werkday.shared import build_github_cache_max_age_seconds
from werkday.sync.github_activity import load_github_activity

router = APIRouter(prefix="/api/github", tags=["github"])

DEFAULT_ACTIVITY_LOOKBACK = timedelta(hours=24)


def _bearer_token(authorization: str | None) -> str:
    value = safe_str(authorization)
    if value.lower().startswith("bearer "):
        return value[len("bearer ") :].strip()
    return ""


@router.get("/status")
def github_status(workspace: Workspace = Depends(get_workspace)) -> dict[str, Any]:
    section = workspace.config.load()["sourceControl"]
    return {
        "connected": workspace.config.has_secret("sourceControl", "token"),
        "username": section.get("username"),
        "avatarUrl": section.get("avatarUrl"),
    }


@router.get("/config")
def get_github_config(workspace: Workspace = Depends(get_workspace)) -> dict[str, Any]:
    """Return the sourceControl section with the token masked."""
    return workspace.config.masked()["sourceControl"]


@router.post("/config")
def save_github_config(
    payload: GitHubConfigRequest, workspace: Workspace = Depends(get_workspace)
) -> dict[str, bool]:
    try:
        workspace.config.save({"sourceControl": payload.updates()})
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return {"success": True}


@router.post("/validate")
async def validate_github_token(
    payload: GitHubValidateRequest,
    workspace: Workspace = Depends(get_workspace),
    transport: httpx.AsyncBaseTransport | None = Depends(get_http_transport),
) -> Any:
    """
    Check a token against `/user` and store it with the resolved identity.

    Returns:
        `{valid, username, name, avatar_url}` on success.
        400 `{valid: false, error}` when no token is given, 401 when GitHub rejects it.
    """
    token = safe_str(payload.token)
    if not token:
        return JSONResponse(status_code=400, content={"valid": False, "error": "Token is required"})
    try:
        async with GitHubClient(token, transport=transport) as client:
            user = await client.current_user()
    except Exception as exc:
        return JSONResponse(status_code=401, content={"valid": False, "error": str(exc) or "Validation failed"})

    try:
        workspace.config.save(
            {
                "sourceControl": {
                    "token": token,
                    "username": user.get("login"),
                    "avatarUrl": user.get("avatar_url"),
                }
            }
        )
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return {
        "valid": True,
        "username": user.get("login"),
        "name": user.get("name"),
        "avatar_url": user.get("avatar_url"),
    }


@router.post("/disconnect")
def disconnect_github(workspace: Workspace = Depends(get_workspace)) -> dict[str, bool]:
    try:
        workspace.config.reset("sourceControl")
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return {"success": True}


def _listing_token(workspace: Workspace, authorization: str | None) -> str:
    token = _bearer_token(authorization)
    if token:
        return token
    return workspace.config.github_credentials().token


@router.get("/orgs")
async def list_github_orgs(
    authorization: str | None = Header(default=None),
    workspace: Workspace = Depends(get_workspace),
    transport: httpx.AsyncBaseTransport | None = Depends(get_http_transport),
) -> list[dict[str, Any]]:
    try:
        token = _listing_token(workspace, authorization)
        async with GitHubClient(token, transport=transport) as client:
            orgs = await client.list_orgs()
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return [
        {
            "id": org.get("id"),
            "login": org.get("login"),
            "avatar_url": org.get("avatar_url"),
            "description": org.get("description"),
        }
        for org in orgs
    ]


@router.get("/repos")
async def list_github_repos(
    org: str | None = None,
    authorization: str | None = Header(default=None),
    workspace: Workspace = Depends(get_workspace),
    transport: httpx.AsyncBaseTransport | None = Depends(get_http_transport),
) -> list[dict[str, Any]]:
    """List an organization's repos, or the user's own when `org` is absent or is the user."""
    username = workspace.config.load()["sourceControl"].get("username")
    try:
        token = _listing_token(workspace, authorization)
        async with GitHubClient(token, transport=transport) as client:
            repos = await client.list_repos(org if org and org != username else None)
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return [
        {
            "id": repo.get("id"),
            "name": repo.get("name"),
            "full_name": repo.get("full_name"),
            "private": repo.get("private"),
            "description": repo.get("description"),
            "updated_at": repo.get("updated_at"),
        }
        for repo in repos
    ]


@router.get("/activity")
async def get_github_activity(
    since: str | None = None,
    cache: str = "true",
    workspace: Workspace = Depends(get_workspace),
    transport: httpx.AsyncBaseTransport | None = Depends(get_http_transport),
) -> dict[str, Any]:
    """
    Commits, authored PRs and reviewed PRs since `since` (default: last 24h).

    Served from the rolling cache while it is fresh unless `cache=false`.
    """
    try:
        credentials = workspace.config.github_credentials()
        if not credentials.username:
            raise NotAuthenticatedError()
        since_value = since or (utc_now() - DEFAULT_ACTIVITY_LOOKBACK).isoformat()
        try:
            parse_instant(since_value)
        except ValueError as exc:
            raise InputError("since must be an ISO-8601 date or timestamp.") from exc
        async with GitHubClient(credentials.token, transport=transport) as client:
            activity = await load_github_activity(
                client,
                workspace.github_cache,
                credentials.username,
                since_value,
                use_cache=cache.strip().lower() != "false",
                max_age=timedelta(seconds=build_github_cache_max_age_seconds()),
            )
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return activity.to_dict()


@router.get("/cache")
def get_github_cache(workspace: Workspace = Depends(get_workspace)) -> dict[str, Any]:
    return workspace.github_cache.document()
