"""Per-day issue-tracker buckets: the unit of incremental sync."""

import logging

from werkday.common.dates import parse_day
from werkday.common.payload import safe_dict, safe_str
from werkday.store.blob import BlobStore
from werkday.store.types import DailyBucket, records_from_list, records_to_list

logger = logging.getLogger(__name__)

DAILY_PREFIX = "jira-daily"


class DailyStore:
    """Absent bucket means never synced; an empty bucket means synced with no activity."""

    def __init__(self, blob: BlobStore, prefix: str = DAILY_PREFIX) -> None:
        self.blob = blob
        self.prefix = prefix

    def _key(self, day: str) -> str:
        return f"{self.prefix}/{parse_day(day).isoformat()}.json"

    def get(self, day: str) -> DailyBucket | None:
        data = self.blob.read(self._key(day), None)
        if not isinstance(data, dict):
            return None
        synced_at = safe_str(data.get("syncedAt"))
        if not synced_at:
            logger.warning("Daily bucket %s has no syncedAt; treating as unsynced.", day)
            return None
        return DailyBucket(
            date=day,
            synced_at=synced_at,
            records=records_from_list(data.get("activities")),
            summary=safe_dict(data.get("summary")),
        )

    def put(self, bucket: DailyBucket) -> None:
        """Overwrite the whole bucket for its day."""
        self.blob.write(
            self._key(bucket.date),
            {
                "date": bucket.date,
                "syncedAt": bucket.synced_at,
                "activities": records_to_list(bucket.records),
                "summary": bucket.summary,
            },
        )

    def synced_dates(self) -> list[str]:
        return [key.rsplit("/", 1)[-1][: -len(".json")] for key in self.blob.list_keys(self.prefix)]
