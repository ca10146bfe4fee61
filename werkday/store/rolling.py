"""Append-only, bounded, most-recent-first activity cache per upstream."""

import logging
from typing import Any

from werkday.common.dates import day_of, sort_key, utc_now_iso
from werkday.store.blob import BlobStore
from werkday.store.types import ActivityRecord, records_from_list, records_to_list

logger = logging.getLogger(__name__)

DEFAULT_CACHE_LIMIT = 500
GITHUB_CACHE_KEY = "github-cache.json"
JIRA_CACHE_KEY = "jira-cache.json"


def _empty_cache() -> dict[str, Any]:
    return {"lastSync": None, "activities": []}


class RollingCache:
    """
    Recent-activity fast path stored as `{"lastSync", "activities"}`.

    Existing ids are never replaced, so the first copy of a record wins.
    """

    def __init__(self, blob: BlobStore, key: str, limit: int = DEFAULT_CACHE_LIMIT) -> None:
        self.blob = blob
        self.key = key
        self.limit = limit

    def document(self) -> dict[str, Any]:
        """Return the raw persisted document, normalized to the expected shape."""
        data = self.blob.read(self.key, _empty_cache())
        if not isinstance(data, dict):
            return _empty_cache()
        activities = data.get("activities")
        return {
            "lastSync": data.get("lastSync"),
            "activities": activities if isinstance(activities, list) else [],
        }

    def snapshot(self) -> tuple[str | None, list[ActivityRecord]]:
        data = self.document()
        return data["lastSync"], records_from_list(data["activities"])

    def add_activities(self, new_records: list[ActivityRecord]) -> int:
        """
        Merge new records into the cache and persist it.

        Args:
            new_records: Freshly normalized records from one upstream.
        Returns:
            Number of records that were not already cached.
        """
        _last_sync, existing = self.snapshot()
        seen = {record.id for record in existing}
        fresh: list[ActivityRecord] = []
        for record in new_records:
            if record.id in seen:
                continue
            seen.add(record.id)
            fresh.append(record)

        merged = sorted(fresh + existing, key=lambda record: sort_key(record.timestamp), reverse=True)
        self.blob.write(
            self.key,
            {"lastSync": utc_now_iso(), "activities": records_to_list(merged[: self.limit])},
        )
        logger.info("Rolling cache %s: %d new, %d kept.", self.key, len(fresh), min(len(merged), self.limit))
        return len(fresh)

    def records_between(self, start: str, end: str) -> list[ActivityRecord]:
        """Records whose UTC day falls within `[start, end]` inclusive."""
        _last_sync, records = self.snapshot()
        matched: list[ActivityRecord] = []
        for record in records:
            try:
                day = day_of(record.timestamp)
            except ValueError:
                continue
            if start <= day <= end:
                matched.append(record)
        return matched
