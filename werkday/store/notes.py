"""Free-form work notes kept newest first in `notes.json`."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from werkday.common.dates import day_of, utc_now_iso
from werkday.common.payload import safe_dict, safe_list, safe_str
from werkday.store.blob import BlobStore

logger = logging.getLogger(__name__)

NOTES_KEY = "notes.json"
DEFAULT_NOTE_TITLE = "Untitled"


@dataclass
class Note:
    id: str
    title: str
    content: str
    created_at: str
    updated_at: str
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Note":
        return cls(
            id=safe_str(data.get("id")),
            title=safe_str(data.get("title")) or DEFAULT_NOTE_TITLE,
            content=str(data.get("content") or ""),
            created_at=safe_str(data.get("createdAt")),
            updated_at=safe_str(data.get("updatedAt")),
            tags=[safe_str(tag) for tag in safe_list(data.get("tags")) if safe_str(tag)],
        )


class NoteStore:
    def __init__(self, blob: BlobStore) -> None:
        self.blob = blob

    def _read(self) -> list[dict[str, Any]]:
        data = safe_dict(self.blob.read(NOTES_KEY, {"notes": []}))
        return [item for item in safe_list(data.get("notes")) if isinstance(item, dict)]

    def list_notes(self) -> list[Note]:
        return [Note.from_dict(item) for item in self._read()]

    def save(
        self,
        *,
        note_id: str | None = None,
        title: str | None = None,
        content: str | None = None,
        created_at: str | None = None,
        tags: list[str] | None = None,
    ) -> Note:
        """
        Insert or replace a note.

        An existing id is replaced in place and keeps its `createdAt` unless one
        is given; a new note goes to the front. `updatedAt` is always stamped
        with the current time.
        """
        now = utc_now_iso()
        items = self._read()
        resolved_id = note_id or str(uuid.uuid4())
        previous = next((item for item in items if item.get("id") == resolved_id), {})
        note = Note(
            id=resolved_id,
            title=title or DEFAULT_NOTE_TITLE,
            content=content or "",
            created_at=created_at or safe_str(previous.get("createdAt")) or now,
            updated_at=now,
            tags=list(tags or []),
        )
        for index, item in enumerate(items):
            if item.get("id") == note.id:
                items[index] = note.to_dict()
                break
        else:
            items.insert(0, note.to_dict())
        self.blob.write(NOTES_KEY, {"notes": items})
        return note

    def delete(self, note_id: str) -> bool:
        items = self._read()
        remaining = [item for item in items if item.get("id") != note_id]
        self.blob.write(NOTES_KEY, {"notes": remaining})
        return len(remaining) != len(items)

    def updated_between(self, start: str, end: str) -> list[Note]:
        """Notes whose `updatedAt` UTC day falls within the inclusive range."""
        matched: list[Note] = []
        for note in self.list_notes():
            try:
                day = day_of(note.updated_at)
            except ValueError:
                logger.warning("Note %s has unparseable updatedAt %r.", note.id, note.updated_at)
                continue
            if start <= day <= end:
                matched.append(note)
        return matched
