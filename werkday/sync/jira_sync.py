"""
werkday/sync/jira_sync.py
Per-day Jira sync: query upstream, normalize, overwrite the day's bucket.
Exports: build_day_jql, extract_day_records, sync_jira_range
"""

import asyncio
from datetime import datetime, timedelta
import logging
from typing import Any

from werkday.common.dates import DateRange, day_of, next_day, parse_instant, sort_key, utc_now, utc_now_iso
from werkday.common.payload import safe_dict, safe_list, safe_str
from werkday.common.text_extract import extract_adf_text, truncate_text
from werkday.integrations.jira_client import JiraClient
from werkday.store.daily import DailyStore
from werkday.store.rolling import RollingCache
from werkday.store.types import (
    CommentRecord,
    DailyBucket,
    IssueTouchRecord,
    IssueTrackerRecord,
    TransitionRecord,
    WorklogRecord,
)
from werkday.sync.range_activity import RangeActivity, dedupe_by_id, summarize_jira

logger = logging.getLogger(__name__)


def build_day_jql(day: str, projects: list[str] | None = None) -> str:
    """JQL selecting issues updated within `[day, day + 1)`, newest first."""
    jql = f'updated >= "{day}" AND updated < "{next_day(day)}"'
    if projects:
        quoted = ", ".join(f'"{key}"' for key in projects)
        jql += f" AND project IN ({quoted})"
    return jql + " ORDER BY updated DESC"


def _on_day(timestamp: str, day: str) -> bool:
    try:
        return day_of(timestamp) == day
    except ValueError:
        logger.warning("Skipping Jira entry with unparseable timestamp %r.", timestamp)
        return False


def _display_name(person: Any) -> str | None:
    return safe_str(safe_dict(person).get("displayName")) or None


def _issue_transitions(issue: dict[str, Any], day: str, common: dict[str, str]) -> list[TransitionRecord]:
    records: list[TransitionRecord] = []
    histories = safe_list(safe_dict(issue.get("changelog")).get("histories"))
    for history in map(safe_dict, histories):
        created = safe_str(history.get("created"))
        if not _on_day(created, day):
            continue
        status_items = [
            item for item in map(safe_dict, safe_list(history.get("items"))) if item.get("field") == "status"
        ]
        for position, item in enumerate(status_items, start=1):
            record_id = f"transition-{issue.get('id')}-{history.get('id')}"
            if position > 1:
                record_id += f"-{position}"
            records.append(
                TransitionRecord(
                    id=record_id,
                    timestamp=created,
                    url=common["url"],
                    issue_key=common["issue_key"],
                    issue_summary=common["issue_summary"],
                    project=common["project"],
                    author=_display_name(history.get("author")),
                    from_status=safe_str(item.get("fromString")) or None,
                    to_status=safe_str(item.get("toString")) or None,
                )
            )
    return records


def _issue_comments(issue: dict[str, Any], day: str, common: dict[str, str]) -> list[CommentRecord]:
    fields = safe_dict(issue.get("fields"))
    records: list[CommentRecord] = []
    for comment in map(safe_dict, safe_list(safe_dict(fields.get("comment")).get("comments"))):
        created = safe_str(comment.get("created"))
        if not _on_day(created, day):
            continue
        records.append(
            CommentRecord(
                id=f"comment-{issue.get('id')}-{comment.get('id')}",
                timestamp=created,
                url=f"{common['url']}?focusedCommentId={comment.get('id')}",
                issue_key=common["issue_key"],
                issue_summary=common["issue_summary"],
                project=common["project"],
                author=_display_name(comment.get("author")),
                body=truncate_text(extract_adf_text(comment.get("body"))),
            )
        )
    return records


def _issue_worklogs(issue: dict[str, Any], day: str, common: dict[str, str]) -> list[WorklogRecord]:
    fields = safe_dict(issue.get("fields"))
    records: list[WorklogRecord] = []
    for worklog in map(safe_dict, safe_list(safe_dict(fields.get("worklog")).get("worklogs"))):
        started = safe_str(worklog.get("started"))
        if not _on_day(started, day):
            continue
        try:
            seconds = int(worklog.get("timeSpentSeconds") or 0)
        except (TypeError, ValueError):
            seconds = 0
        records.append(
            WorklogRecord(
                id=f"worklog-{issue.get('id')}-{worklog.get('id')}",
                timestamp=started,
                url=f"{common['url']}?focusedWorklogId={worklog.get('id')}",
                issue_key=common["issue_key"],
                issue_summary=common["issue_summary"],
                project=common["project"],
                author=_display_name(worklog.get("author")),
                duration=safe_str(worklog.get("timeSpent")),
                seconds=seconds,
                comment=extract_adf_text(worklog.get("comment")) or None,
            )
        )
    return records


def extract_day_records(issues: list[dict[str, Any]], day: str, base_url: str) -> list[IssueTrackerRecord]:
    """
    Normalize one day's search results into activity records.

    Only changelog status items, comments and worklogs whose own timestamp
    falls on `day` are kept. An issue with at least one match also yields an
    IssueTouchRecord stamped with the issue's `updated` when that is on `day`,
    otherwise with its latest matched entry.

    Args:
        issues: Issues from the JQL search, with changelog expanded.
        day: Target UTC day, `YYYY-MM-DD`.
        base_url: Site URL used to build `/browse/{key}` links.
    Returns:
        Records for the day, grouped per issue.
    """
    records: list[IssueTrackerRecord] = []
    for issue in map(safe_dict, issues):
        fields = safe_dict(issue.get("fields"))
        key = safe_str(issue.get("key"))
        common = {
            "url": f"{base_url}/browse/{key}",
            "issue_key": key,
            "issue_summary": safe_str(fields.get("summary")),
            "project": safe_str(safe_dict(fields.get("project")).get("key")),
        }
        matched: list[IssueTrackerRecord] = [
            *_issue_transitions(issue, day, common),
            *_issue_comments(issue, day, common),
            *_issue_worklogs(issue, day, common),
        ]
        if not matched:
            continue
        updated = safe_str(fields.get("updated"))
        if not _on_day(updated, day):
            updated = max((record.timestamp for record in matched), key=sort_key)
        records.extend(matched)
        records.append(IssueTouchRecord(id=f"issue-{issue.get('id')}", timestamp=updated, **common))
    return records


def _is_fresh(bucket: DailyBucket, stale_after: timedelta, now: datetime) -> bool:
    try:
        return now - parse_instant(bucket.synced_at) < stale_after
    except ValueError:
        return False


async def sync_jira_range(
    client: JiraClient,
    daily: DailyStore,
    rolling: RollingCache,
    date_range: DateRange,
    *,
    projects: list[str] | None = None,
    base_url: str | None = None,
    stale_after: timedelta | None = None,
) -> RangeActivity:
    """
    Sync every day of the range oldest first, one upstream query per day.

    Each day's bucket is overwritten wholesale. Days already written stay
    written if a later day fails.

    Args:
        client: Open Jira client.
        daily: Per-day bucket store.
        rolling: Jira rolling cache, fed best-effort.
        date_range: Inclusive range to sync.
        projects: Optional project keys restricting the search.
        base_url: Browse base for links; defaults to the client's site URL.
        stale_after: When set, buckets younger than this are reused as-is.
    Returns:
        Aggregated activity over the whole range with `synced=True`.
    Raises:
        UpstreamError: When any day's search fails.
    """
    site_url = base_url or client.site_url
    days = date_range.days()
    logger.info("Jira sync: %d day(s) %s..%s", len(days), date_range.start, date_range.end)

    collected: list[IssueTrackerRecord] = []
    latest_synced_at: str | None = None
    for day in days:
        existing = await asyncio.to_thread(daily.get, day) if stale_after is not None else None
        if existing is not None and _is_fresh(existing, stale_after, utc_now()):
            logger.info("Jira sync: reusing fresh bucket for %s.", day)
            bucket = existing
        else:
            issues = await client.search_issues(build_day_jql(day, projects))
            day_records = extract_day_records(issues, day, site_url)
            bucket = DailyBucket(
                date=day,
                synced_at=utc_now_iso(),
                records=day_records,
                summary=summarize_jira(day_records),
            )
            await asyncio.to_thread(daily.put, bucket)
            logger.info("Jira sync: %s -> %d record(s) from %d issue(s).", day, len(day_records), len(issues))
            try:
                await asyncio.to_thread(rolling.add_activities, day_records)
            except Exception:
                logger.exception("Failed to update Jira rolling cache for %s.", day)
        collected.extend(bucket.records)
        if latest_synced_at is None or sort_key(bucket.synced_at) > sort_key(latest_synced_at):
            latest_synced_at = bucket.synced_at

    return RangeActivity(
        start=date_range.start,
        end=date_range.end,
        synced=True,
        synced_at=latest_synced_at,
        records=dedupe_by_id(collected),
    )
