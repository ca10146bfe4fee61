"""Notes CRUD under /api/notes."""

from typing import Any

from fastapi import APIRouter, Depends

from werkday.activity_store import Workspace
from werkday.api.deps import get_workspace, to_http_exception
from werkday.api.models import NoteRequest

router = APIRouter(prefix="/api/notes", tags=["notes"])


@router.get("")
def list_notes(workspace: Workspace = Depends(get_workspace)) -> list[dict[str, Any]]:
    return [note.to_dict() for note in workspace.notes.list_notes()]


@router.post("")
def save_note(payload: NoteRequest, workspace: Workspace = Depends(get_workspace)) -> dict[str, Any]:
    """Create a note, or replace the one with the same id."""
    try:
        note = workspace.notes.save(
            note_id=payload.id,
            title=payload.title,
            content=payload.content,
            created_at=payload.created_at,
            tags=payload.tags,
        )
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return note.to_dict()


@router.delete("/{note_id}")
def delete_note(note_id: str, workspace: Workspace = Depends(get_workspace)) -> dict[str, bool]:
    try:
        workspace.notes.delete(note_id)
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return {"success": True}
