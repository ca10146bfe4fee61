"""Grouping and summary counts for issue-tracker activity over a date range."""

from dataclasses import dataclass, field
from typing import Any, Iterable, TypeVar

from werkday.store.types import (
    CommentRecord,
    IssueTouchRecord,
    IssueTrackerRecord,
    TransitionRecord,
    WorklogRecord,
    record_to_dict,
)

RecordT = TypeVar("RecordT")


def dedupe_by_id(records: Iterable[RecordT]) -> list[RecordT]:
    """Keep the first record for each id, preserving order."""
    seen: set[str] = set()
    unique: list[RecordT] = []
    for record in records:
        record_id = getattr(record, "id")
        if record_id in seen:
            continue
        seen.add(record_id)
        unique.append(record)
    return unique


def format_hours(seconds: int) -> str | None:
    """Render seconds as `"{hours}h"` rounded to one decimal, None when zero."""
    hours = round(seconds / 3600, 1)
    if hours <= 0:
        return None
    return f"{hours:g}h"


def summarize_jira(records: list[IssueTrackerRecord]) -> dict[str, Any]:
    """Counts for one list of records; issues are counted by distinct key."""
    worklogs = [record for record in records if isinstance(record, WorklogRecord)]
    return {
        "issuesWorkedOn": len({record.issue_key for record in records if record.issue_key}),
        "transitionsMade": sum(isinstance(record, TransitionRecord) for record in records),
        "commentsMade": sum(isinstance(record, CommentRecord) for record in records),
        "worklogsAdded": len(worklogs),
        "totalTimeLogged": format_hours(sum(record.seconds for record in worklogs)),
    }


@dataclass
class RangeActivity:
    """Issue-tracker activity over an inclusive day range, as returned to the UI."""

    start: str
    end: str
    synced: bool
    synced_at: str | None = None
    records: list[IssueTrackerRecord] = field(default_factory=list)

    def of_kind(self, record_type: type) -> list[IssueTrackerRecord]:
        return [record for record in self.records if isinstance(record, record_type)]

    @property
    def summary(self) -> dict[str, Any]:
        return summarize_jira(self.records)

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.start,
            "to": self.end,
            "synced": self.synced,
            "syncedAt": self.synced_at,
            "issues": [record_to_dict(record) for record in self.of_kind(IssueTouchRecord)],
            "transitions": [record_to_dict(record) for record in self.of_kind(TransitionRecord)],
            "comments": [record_to_dict(record) for record in self.of_kind(CommentRecord)],
            "worklogs": [record_to_dict(record) for record in self.of_kind(WorklogRecord)],
            "summary": self.summary,
        }
