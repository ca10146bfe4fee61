"""Generic config read/write and language-model settings under /api/config."""

from typing import Any

from fastapi import APIRouter, Depends

from werkday.activity_store import Workspace
from werkday.api.deps import get_workspace, to_http_exception
from werkday.api.models import LanguageModelRequest

router = APIRouter(prefix="/api/config", tags=["config"])


@router.get("")
def get_config(workspace: Workspace = Depends(get_workspace)) -> dict[str, Any]:
    return workspace.config.masked()


@router.post("")
def save_config(payload: dict[str, Any], workspace: Workspace = Depends(get_workspace)) -> dict[str, bool]:
    """Merge a partial config; `"***"` secrets are ignored, explicit null clears them."""
    try:
        workspace.config.save(payload)
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return {"success": True}


@router.post("/llm")
def save_language_model(
    payload: LanguageModelRequest, workspace: Workspace = Depends(get_workspace)
) -> dict[str, bool]:
    """
    Update the model key and id.

    An omitted or masked key keeps the current one; an explicit null disconnects.
    """
    updates: dict[str, Any] = {}
    if "api_key" in payload.model_fields_set and payload.api_key is None:
        updates["apiKey"] = None
    elif payload.api_key:
        updates["apiKey"] = payload.api_key
    if payload.model:
        updates["model"] = payload.model
    try:
        workspace.config.save({"languageModel": updates})
    except Exception as exc:
        raise to_http_exception(exc) from exc
    return {"success": True}
