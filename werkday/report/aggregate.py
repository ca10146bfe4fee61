"""
werkday/report/aggregate.py
Range summaries over GitHub (rolling cache), Jira (daily buckets) and notes.
Exports: RangeSnapshot, collect_range, build_range_summary, build_history
"""

from dataclasses import dataclass, field
from typing import Any

from werkday.activity_store import Workspace
from werkday.common.dates import DateRange, day_of, trailing_range
from werkday.store.notes import Note
from werkday.store.types import (
    CommentRecord,
    CommitRecord,
    IssueTouchRecord,
    IssueTrackerRecord,
    PullRequestRecord,
    ReviewRecord,
    SourceControlRecord,
    TransitionRecord,
    WorklogRecord,
    record_to_dict,
)
from werkday.report.ai_report import AiReport, ReportPreviews
from werkday.sync.jira_read import union_range_records
from werkday.sync.range_activity import format_hours


def _count(records: list[Any], record_type: type) -> int:
    return sum(isinstance(record, record_type) for record in records)


def _day_counts(
    github: list[SourceControlRecord], jira: list[IssueTrackerRecord], notes: list[Note]
) -> dict[str, Any]:
    worklog_seconds = sum(record.seconds for record in jira if isinstance(record, WorklogRecord))
    return {
        "commits": _count(github, CommitRecord),
        "pullRequests": _count(github, PullRequestRecord),
        "reviews": _count(github, ReviewRecord),
        "issuesWorkedOn": len({record.issue_key for record in jira if record.issue_key}),
        "transitions": _count(jira, TransitionRecord),
        "comments": _count(jira, CommentRecord),
        "worklogs": _count(jira, WorklogRecord),
        "notes": len(notes),
        "timeLogged": format_hours(worklog_seconds),
    }


@dataclass
class RangeSnapshot:
    """Everything recorded for a date range, read from local stores only."""

    date_range: DateRange
    github: list[SourceControlRecord] = field(default_factory=list)
    jira: list[IssueTrackerRecord] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)

    def counts(self) -> dict[str, Any]:
        return _day_counts(self.github, self.jira, self.notes)

    def previews(self) -> ReportPreviews:
        issue_lines: list[str] = []
        seen_keys: set[str] = set()
        for record in self.jira:
            if record.issue_key in seen_keys:
                continue
            seen_keys.add(record.issue_key)
            issue_lines.append(f"{record.issue_key} {record.issue_summary}".strip())
        return ReportPreviews(
            commit_titles=[record.title for record in self.github if isinstance(record, CommitRecord)],
            issue_lines=issue_lines,
            note_titles=[note.title for note in self.notes],
        )


def collect_range(workspace: Workspace, date_range: DateRange) -> RangeSnapshot:
    """Gather GitHub records by day from the rolling cache, Jira by bucket union, notes by `updatedAt` day."""
    return RangeSnapshot(
        date_range=date_range,
        github=workspace.github_cache.records_between(date_range.start, date_range.end),
        jira=union_range_records(workspace.daily, date_range),
        notes=workspace.notes.updated_between(date_range.start, date_range.end),
    )


def build_range_summary(
    snapshot: RangeSnapshot,
    *,
    ai_report: AiReport | None = None,
    generated_at: str | None = None,
) -> dict[str, Any]:
    """
    Render a snapshot as the summary document returned to the UI.

    Args:
        snapshot: Range contents from collect_range.
        ai_report: Structured narrative, when one was produced.
        generated_at: Generation time; None for an on-the-fly summary.
    Returns:
        JSON-ready summary dict.
    """
    counts = snapshot.counts()
    date_range = snapshot.date_range
    return {
        "from": date_range.start,
        "to": date_range.end,
        "date": date_range.start,
        "generatedAt": generated_at,
        "github": {
            "commits": counts["commits"],
            "pullRequests": counts["pullRequests"],
            "reviews": counts["reviews"],
            "activities": [record_to_dict(record) for record in snapshot.github],
        },
        "jira": {
            "issuesWorkedOn": counts["issuesWorkedOn"],
            "transitions": counts["transitions"],
            "comments": counts["comments"],
            "worklogs": counts["worklogs"],
            "timeLogged": counts["timeLogged"],
            "activities": [record_to_dict(record) for record in snapshot.jira],
        },
        "notes": {
            "count": counts["notes"],
            "items": [note.to_dict() for note in snapshot.notes],
        },
        "aiReportStructured": ai_report.to_dict() if ai_report is not None else None,
    }


def build_history(workspace: Workspace, days: int, *, today: str | None = None) -> dict[str, Any]:
    """Per-day counts for the last `days` days ending today, oldest first."""
    date_range = trailing_range(days, today=today)
    github_by_day: dict[str, list[SourceControlRecord]] = {}
    for record in workspace.github_cache.records_between(date_range.start, date_range.end):
        github_by_day.setdefault(day_of(record.timestamp), []).append(record)
    notes_by_day: dict[str, list[Note]] = {}
    for note in workspace.notes.updated_between(date_range.start, date_range.end):
        notes_by_day.setdefault(day_of(note.updated_at), []).append(note)

    history: list[dict[str, Any]] = []
    for day in date_range.days():
        bucket = workspace.daily.get(day)
        jira = bucket.records if bucket is not None else []
        github = github_by_day.get(day, [])
        notes = notes_by_day.get(day, [])
        details = _day_counts(github, jira, notes)
        github_total = details["commits"] + details["pullRequests"] + details["reviews"]
        jira_total = _count(jira, IssueTouchRecord) + details["transitions"] + details["comments"] + details["worklogs"]
        history.append(
            {
                "date": day,
                "github": github_total,
                "jira": jira_total,
                "notes": len(notes),
                "total": github_total + jira_total + len(notes),
                "details": details,
            }
        )
    return {"days": days, "from": date_range.start, "to": date_range.end, "history": history}
