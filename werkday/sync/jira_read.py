"""Cache-only reads of Jira activity across a date range."""

import logging

from werkday.common.dates import DateRange, sort_key
from werkday.store.daily import DailyStore
from werkday.store.types import IssueTouchRecord, IssueTrackerRecord
from werkday.sync.range_activity import RangeActivity, dedupe_by_id

logger = logging.getLogger(__name__)


def collapse_issue_touches(records: list[IssueTrackerRecord]) -> list[IssueTrackerRecord]:
    """Drop issue-touch records whose key is already covered by a more specific record."""
    claimed = {record.issue_key for record in records if not isinstance(record, IssueTouchRecord)}
    return [
        record
        for record in records
        if not (isinstance(record, IssueTouchRecord) and record.issue_key in claimed)
    ]


def get_activity_for_range(daily: DailyStore, date_range: DateRange) -> RangeActivity:
    """
    Read the range from daily buckets without calling upstream.

    Any day without a bucket makes the whole range unsynced and empty; a
    partial range is never returned as if it were complete.
    """
    collected: list[IssueTrackerRecord] = []
    latest_synced_at: str | None = None
    for day in date_range.days():
        bucket = daily.get(day)
        if bucket is None:
            logger.info("Jira read: %s not synced; range %s..%s incomplete.", day, date_range.start, date_range.end)
            return RangeActivity(start=date_range.start, end=date_range.end, synced=False)
        collected.extend(bucket.records)
        if latest_synced_at is None or sort_key(bucket.synced_at) > sort_key(latest_synced_at):
            latest_synced_at = bucket.synced_at

    return RangeActivity(
        start=date_range.start,
        end=date_range.end,
        synced=True,
        synced_at=latest_synced_at,
        records=collapse_issue_touches(dedupe_by_id(collected)),
    )


def union_range_records(daily: DailyStore, date_range: DateRange) -> list[IssueTrackerRecord]:
    """Every record from the range's existing buckets; missing days contribute nothing."""
    collected: list[IssueTrackerRecord] = []
    for day in date_range.days():
        bucket = daily.get(day)
        if bucket is not None:
            collected.extend(bucket.records)
    return dedupe_by_id(collected)
