"""Whole-document JSON blobs keyed by relative path under one data directory."""

import copy
import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_KEY_SEGMENT_RE = re.compile(r"^[A-Za-z0-9._-]+$")


class BlobStore:
    """
    JSON document store with atomic replace-on-write semantics.

    Keys are `/`-separated relative names such as `config.json` or
    `jira-daily/2024-03-05.json`.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).expanduser()

    def path_for(self, key: str) -> Path:
        """
        Resolve a key to its file path.

        Raises:
            ValueError: If the key is empty or has a segment outside the allowed charset.
        """
        segments = str(key).split("/")
        if not key or any(
            not _KEY_SEGMENT_RE.match(segment) or segment in {".", ".."}
            for segment in segments
        ):
            raise ValueError(f"Invalid blob key: {key!r}")
        return self.root.joinpath(*segments)

    def read(self, key: str, default: Any) -> Any:
        """Return the stored document, or a copy of `default` when missing or unreadable."""
        path = self.path_for(key)
        if not path.exists():
            return copy.deepcopy(default)
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, ValueError):
            logger.exception("Failed to read blob %s; using default.", key)
            return copy.deepcopy(default)

    def write(self, key: str, value: Any) -> None:
        """Replace the document atomically so readers never see a partial file."""
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(value, handle, ensure_ascii=False, indent=2, default=str)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    def list_keys(self, prefix: str) -> list[str]:
        """List `.json` keys directly under a directory prefix, sorted by name."""
        directory = self.path_for(prefix)
        if not directory.is_dir():
            return []
        return sorted(
            f"{prefix}/{entry.name}"
            for entry in directory.iterdir()
            if entry.is_file() and entry.suffix == ".json"
        )
