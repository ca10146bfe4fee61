"""Request-scoped dependencies and exception-to-HTTP mapping shared by routers."""

import logging

import httpx
from fastapi import HTTPException

from werkday.activity_store import Workspace, open_workspace
from werkday.common.errors import InputError, NotAuthenticatedError
from werkday.shared import build_data_dir

logger = logging.getLogger(__name__)


def get_workspace() -> Workspace:
    """Stores rooted at the configured data directory."""
    return open_workspace(build_data_dir())


def get_http_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for upstream clients; None uses httpx's network transport."""
    return None


def to_http_exception(exc: Exception) -> HTTPException:
    """
    Map a domain exception onto an HTTPException.

    InputError -> 400, NotAuthenticatedError -> 401, anything else -> 500.
    """
    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, InputError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, NotAuthenticatedError):
        return HTTPException(status_code=401, detail=str(exc))
    logger.exception("Request failed: %s", exc)
    return HTTPException(status_code=500, detail=str(exc) or exc.__class__.__name__)
