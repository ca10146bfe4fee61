"""Activity record dataclasses and their on-disk JSON shape."""

import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from werkday.common.payload import safe_dict, safe_list, safe_str

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitRecord:
    """One authored commit."""

    id: str
    timestamp: str
    url: str
    title: str
    repository: str
    kind: ClassVar[str] = "commit"


@dataclass(frozen=True)
class PullRequestRecord:
    """One authored pull request; status is open, merged or closed."""

    id: str
    timestamp: str
    url: str
    title: str
    repository: str
    status: str = "open"
    kind: ClassVar[str] = "pull_request"


@dataclass(frozen=True)
class ReviewRecord:
    """One pull request reviewed by the user."""

    id: str
    timestamp: str
    url: str
    title: str
    repository: str
    status: str | None = None
    kind: ClassVar[str] = "review"


@dataclass(frozen=True)
class IssueTouchRecord:
    """Synthetic marker that an issue saw user activity on a day."""

    id: str
    timestamp: str
    url: str
    issue_key: str
    issue_summary: str
    project: str
    kind: ClassVar[str] = "issue"


@dataclass(frozen=True)
class TransitionRecord:
    id: str
    timestamp: str
    url: str
    issue_key: str
    issue_summary: str
    project: str
    author: str | None = None
    from_status: str | None = None
    to_status: str | None = None
    kind: ClassVar[str] = "transition"


@dataclass(frozen=True)
class CommentRecord:
    id: str
    timestamp: str
    url: str
    issue_key: str
    issue_summary: str
    project: str
    author: str | None = None
    body: str = ""
    kind: ClassVar[str] = "comment"


@dataclass(frozen=True)
class WorklogRecord:
    id: str
    timestamp: str
    url: str
    issue_key: str
    issue_summary: str
    project: str
    author: str | None = None
    duration: str = ""
    seconds: int = 0
    comment: str | None = None
    kind: ClassVar[str] = "worklog"


SourceControlRecord = Union[CommitRecord, PullRequestRecord, ReviewRecord]
IssueTrackerRecord = Union[IssueTouchRecord, TransitionRecord, CommentRecord, WorklogRecord]
ActivityRecord = Union[SourceControlRecord, IssueTrackerRecord]

_SOURCE_CONTROL_TYPES = (CommitRecord, PullRequestRecord, ReviewRecord)
_RECORD_TYPES: dict[str, type] = {
    record_type.kind: record_type
    for record_type in (
        CommitRecord,
        PullRequestRecord,
        ReviewRecord,
        IssueTouchRecord,
        TransitionRecord,
        CommentRecord,
        WorklogRecord,
    )
}


@dataclass
class DailyBucket:
    """Fully resolved issue-tracker activity for one calendar day."""

    date: str
    synced_at: str
    records: list[IssueTrackerRecord] = field(default_factory=list)
    summary: dict[str, Any] = field(default_factory=dict)


def record_to_dict(record: ActivityRecord) -> dict[str, Any]:
    """Serialize a record into its persisted JSON object."""
    data: dict[str, Any] = {
        "id": record.id,
        "kind": record.kind,
        "timestamp": record.timestamp,
        "url": record.url,
    }
    if isinstance(record, _SOURCE_CONTROL_TYPES):
        data["title"] = record.title
        data["repository"] = record.repository
        status = getattr(record, "status", None)
        if status is not None:
            data["status"] = status
        return data

    data["issueKey"] = record.issue_key
    data["issueSummary"] = record.issue_summary
    data["project"] = record.project
    if isinstance(record, IssueTouchRecord):
        return data
    data["author"] = record.author
    if isinstance(record, TransitionRecord):
        data["details"] = {"from": record.from_status, "to": record.to_status}
    elif isinstance(record, CommentRecord):
        data["details"] = {"body": record.body}
    elif isinstance(record, WorklogRecord):
        data["details"] = {
            "duration": record.duration,
            "seconds": record.seconds,
            "comment": record.comment,
        }
    return data


def record_from_dict(data: dict[str, Any]) -> ActivityRecord | None:
    """
    Rebuild a record from its persisted JSON object.

    Returns:
        The typed record, or None for unknown kinds and malformed entries.
    """
    payload = safe_dict(data)
    kind = safe_str(payload.get("kind"))
    record_type = _RECORD_TYPES.get(kind)
    record_id = safe_str(payload.get("id"))
    if record_type is None or not record_id:
        logger.warning("Skipping stored activity with kind=%r id=%r.", kind, record_id)
        return None

    common = {
        "id": record_id,
        "timestamp": safe_str(payload.get("timestamp")),
        "url": safe_str(payload.get("url")),
    }
    if record_type in _SOURCE_CONTROL_TYPES:
        extra: dict[str, Any] = {
            "title": safe_str(payload.get("title")),
            "repository": safe_str(payload.get("repository")),
        }
        status = safe_str(payload.get("status"))
        if status and record_type is not CommitRecord:
            extra["status"] = status
        return record_type(**common, **extra)

    common.update(
        issue_key=safe_str(payload.get("issueKey")),
        issue_summary=safe_str(payload.get("issueSummary")),
        project=safe_str(payload.get("project")),
    )
    if record_type is IssueTouchRecord:
        return IssueTouchRecord(**common)

    author = safe_str(payload.get("author")) or None
    details = safe_dict(payload.get("details"))
    if record_type is TransitionRecord:
        return TransitionRecord(
            **common,
            author=author,
            from_status=safe_str(details.get("from")) or None,
            to_status=safe_str(details.get("to")) or None,
        )
    if record_type is CommentRecord:
        return CommentRecord(**common, author=author, body=safe_str(details.get("body")))
    try:
        seconds = int(details.get("seconds") or 0)
    except (TypeError, ValueError):
        seconds = 0
    return WorklogRecord(
        **common,
        author=author,
        duration=safe_str(details.get("duration")),
        seconds=seconds,
        comment=safe_str(details.get("comment")) or None,
    )


def records_from_list(items: Any) -> list[ActivityRecord]:
    """Deserialize a persisted list, dropping entries that cannot be rebuilt."""
    records: list[ActivityRecord] = []
    for item in safe_list(items):
        record = record_from_dict(item)
        if record is not None:
            records.append(record)
    return records


def records_to_list(records: list[ActivityRecord]) -> list[dict[str, Any]]:
    return [record_to_dict(record) for record in records]
