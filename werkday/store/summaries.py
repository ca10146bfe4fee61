"""Generated single-day summaries keyed by date in `summaries.json`."""

from typing import Any

from werkday.common.payload import safe_dict
from werkday.store.blob import BlobStore

SUMMARIES_KEY = "summaries.json"


class SummaryStore:
    def __init__(self, blob: BlobStore) -> None:
        self.blob = blob

    def _summaries(self) -> dict[str, Any]:
        return safe_dict(safe_dict(self.blob.read(SUMMARIES_KEY, {"summaries": {}})).get("summaries"))

    def get(self, day: str) -> dict[str, Any] | None:
        summary = self._summaries().get(day)
        return summary if isinstance(summary, dict) else None

    def put(self, day: str, summary: dict[str, Any]) -> None:
        summaries = self._summaries()
        summaries[day] = summary
        self.blob.write(SUMMARIES_KEY, {"summaries": summaries})
