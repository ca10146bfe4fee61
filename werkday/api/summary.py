"""Summary endpoints: daily snapshot, AI-backed generation and per-day history."""

from typing import Any

from fastapi import APIRouter, Depends, Query

from werkday.activity_store import Workspace
from werkday.api.deps import get_workspace, to_http_exception
from werkday.api.models import DateRangeRequest
from werkday.common.dates import resolve_date_range, utc_now_iso
from werkday.report.aggregate import build_history, build_range_summary, collect_range
from werkday.report.ai_report import generate_ai_report

router = APIRouter(prefix="/api/summary", tags=["summary"])


@router.get("/daily")
def get_daily_summary(
    from_: str | None = Query(default=None, alias="from"),
    to: str | None = None,
    date: str | None = None,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, Any]:
    """Stored summary for a single generated day, else a fresh one without AI."""
    try:
        date_range = resolve_date_range(from_, to, date)
    except Exception as exc:
        raise to_http_exception(exc) from exc
    if date_range.is_single_day:
        stored = workspace.summaries.get(date_range.start)
        if stored is not None:
            return stored
    return build_range_summary(collect_range(workspace, date_range))


@router.post("/generate")
def generate_summary(
    payload: DateRangeRequest | None = None,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, Any]:
    """
    Build the range summary and ask the language model for a structured report.

    The report is absent when no key is configured, the range is empty, or
    the model answer is unusable. Single-day summaries are persisted by date.
    """
    body = payload or DateRangeRequest()
    try:
        date_range = resolve_date_range(body.from_, body.to, body.date)
        snapshot = collect_range(workspace, date_range)
        language_model = workspace.config.load()["languageModel"]
        api_key = language_model.get("apiKey") if workspace.config.has_secret("languageModel", "apiKey") else None
        ai_report = generate_ai_report(
            snapshot.counts(),
            snapshot.previews(),
            api_key=api_key,
            model=language_model.get("model") or "",
            is_range=not date_range.is_single_day,
        )
        summary = build_range_summary(snapshot, ai_report=ai_report, generated_at=utc_now_iso())
        if date_range.is_single_day:
            workspace.summaries.put(date_range.start, summary)
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return summary


@router.get("/history")
def get_summary_history(
    days: int = Query(default=7, ge=1, le=90),
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, Any]:
    return build_history(workspace, days)
