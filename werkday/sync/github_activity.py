"""
werkday/sync/github_activity.py
Source-control activity: three-way search fan-out written through the rolling cache.
Exports: GitHubActivity, fetch_github_activity, load_github_activity, normalize_commit,
         normalize_pull_request, normalize_review
"""

import asyncio
from dataclasses import dataclass, field
from datetime import timedelta
import logging
from typing import Any, Awaitable

from werkday.common.dates import day_of, parse_instant, utc_now
from werkday.common.payload import safe_dict, safe_str
from werkday.integrations.github_client import GitHubClient
from werkday.store.rolling import RollingCache
from werkday.store.types import (
    CommitRecord,
    PullRequestRecord,
    ReviewRecord,
    SourceControlRecord,
    record_to_dict,
)

logger = logging.getLogger(__name__)


def _repository_from_url(repository_url: str) -> str:
    """`https://api.github.com/repos/octo/app` -> `octo/app`."""
    return "/".join(repository_url.rstrip("/").split("/")[-2:])


def normalize_commit(item: dict[str, Any]) -> CommitRecord:
    commit = safe_dict(item.get("commit"))
    message = safe_str(commit.get("message"))
    return CommitRecord(
        id=f"commit-{safe_str(item.get('sha'))}",
        timestamp=safe_str(safe_dict(commit.get("committer")).get("date")),
        url=safe_str(item.get("html_url")),
        title=message.split("\n", 1)[0].strip(),
        repository=safe_str(safe_dict(item.get("repository")).get("full_name")),
    )


def normalize_pull_request(item: dict[str, Any]) -> PullRequestRecord:
    merged = bool(safe_dict(item.get("pull_request")).get("merged_at"))
    return PullRequestRecord(
        id=f"pr-{safe_str(item.get('id'))}",
        timestamp=safe_str(item.get("updated_at")),
        url=safe_str(item.get("html_url")),
        title=safe_str(item.get("title")),
        repository=_repository_from_url(safe_str(item.get("repository_url"))),
        status="merged" if merged else (safe_str(item.get("state")) or "open"),
    )


def normalize_review(item: dict[str, Any]) -> ReviewRecord:
    return ReviewRecord(
        id=f"review-{safe_str(item.get('id'))}",
        timestamp=safe_str(item.get("updated_at")),
        url=safe_str(item.get("html_url")),
        title=safe_str(item.get("title")),
        repository=_repository_from_url(safe_str(item.get("repository_url"))),
    )


@dataclass
class GitHubActivity:
    commits: list[CommitRecord] = field(default_factory=list)
    pull_requests: list[PullRequestRecord] = field(default_factory=list)
    reviews: list[ReviewRecord] = field(default_factory=list)
    from_cache: bool = False
    last_sync: str | None = None

    @property
    def records(self) -> list[SourceControlRecord]:
        return [*self.commits, *self.pull_requests, *self.reviews]

    def to_dict(self) -> dict[str, Any]:
        return {
            "commits": [record_to_dict(record) for record in self.commits],
            "pullRequests": [record_to_dict(record) for record in self.pull_requests],
            "reviews": [record_to_dict(record) for record in self.reviews],
            "fromCache": self.from_cache,
            "lastSync": self.last_sync,
        }


async def _items_or_empty(label: str, call: Awaitable[list[dict[str, Any]]]) -> list[dict[str, Any]]:
    try:
        return await call
    except Exception:
        logger.exception("GitHub %s search failed; continuing without it.", label)
        return []


async def fetch_github_activity(client: GitHubClient, username: str, since_day: str) -> GitHubActivity:
    """
    Run commit, authored-PR and reviewed-PR searches concurrently.

    A failing branch contributes an empty list instead of failing the others.
    Reviews of the user's own pull requests are excluded.
    """
    commit_items, pr_items, review_items = await asyncio.gather(
        _items_or_empty("commit", client.search_commits(username, since_day)),
        _items_or_empty("pull request", client.search_authored_pull_requests(username, since_day)),
        _items_or_empty("review", client.search_reviewed_pull_requests(username, since_day)),
    )
    return GitHubActivity(
        commits=[normalize_commit(item) for item in commit_items],
        pull_requests=[normalize_pull_request(item) for item in pr_items],
        reviews=[
            normalize_review(item)
            for item in review_items
            if safe_str(safe_dict(item.get("user")).get("login")) != username
        ],
    )


def _cache_is_fresh(last_sync: str | None, max_age: timedelta) -> bool:
    if not last_sync:
        return False
    try:
        return utc_now() - parse_instant(last_sync) < max_age
    except ValueError:
        return False


def _since_filter(records: list[SourceControlRecord], since: str) -> list[SourceControlRecord]:
    threshold = parse_instant(since)
    kept: list[SourceControlRecord] = []
    for record in records:
        try:
            if parse_instant(record.timestamp) >= threshold:
                kept.append(record)
        except ValueError:
            continue
    return kept


async def load_github_activity(
    client: GitHubClient,
    cache: RollingCache,
    username: str,
    since: str,
    *,
    use_cache: bool = True,
    max_age: timedelta = timedelta(minutes=5),
) -> GitHubActivity:
    """
    Answer from the rolling cache when it is fresh, otherwise fetch and write through.

    Args:
        client: Open GitHub client; untouched on a cache hit.
        cache: GitHub rolling cache.
        username: GitHub login to search for.
        since: ISO date or instant lower bound.
        use_cache: False forces an upstream fetch.
        max_age: Cache age below which the cache answers.
    Returns:
        GitHubActivity with `from_cache` telling which path answered.
    """
    if use_cache:
        last_sync, cached = await asyncio.to_thread(cache.snapshot)
        if _cache_is_fresh(last_sync, max_age):
            recent = _since_filter(cached, since)
            return GitHubActivity(
                commits=[record for record in recent if isinstance(record, CommitRecord)],
                pull_requests=[record for record in recent if isinstance(record, PullRequestRecord)],
                reviews=[record for record in recent if isinstance(record, ReviewRecord)],
                from_cache=True,
                last_sync=last_sync,
            )

    activity = await fetch_github_activity(client, username, day_of(since))
    await asyncio.to_thread(cache.add_activities, activity.records)
    activity.last_sync = (await asyncio.to_thread(cache.snapshot))[0]
    return activity
