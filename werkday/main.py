"""
werkday/main.py
FastAPI application for Werkday: local activity sync and work summaries.
Endpoints: GET /health, /api/github/*, /api/jira/*, /api/summary/*, /api/notes, /api/config
"""

from contextlib import asynccontextmanager
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from werkday.api.config import router as config_router
from werkday.api.github import router as github_router
from werkday.api.jira import router as jira_router
from werkday.api.notes import router as notes_router
from werkday.api.summary import router as summary_router
from werkday.common.dates import utc_now_iso
from werkday.shared import build_data_dir

logger = logging.getLogger(__name__)
load_dotenv()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """FastAPI lifespan hook for startup/shutdown side effects."""
    logger.info("Werkday data directory: %s", build_data_dir())
    yield


app = FastAPI(title="Werkday", lifespan=lifespan)
app.include_router(github_router)
app.include_router(jira_router)
app.include_router(summary_router)
app.include_router(notes_router)
app.include_router(config_router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTP error as `{"error": message}`."""
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request input is a 400 with the first problem spelled out."""
    errors = exc.errors()
    message = "Invalid request."
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Last-resort 500 in the same envelope for anything a router did not map."""
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(status_code=500, content={"error": str(exc) or exc.__class__.__name__})


@app.get("/health")
def health_check() -> dict[str, str]:
    """Return service health status."""
    return {"status": "ok", "timestamp": utc_now_iso()}
