"""
werkday/activity_store.py
Facade bundling every local store rooted at one data directory.
Exports: Workspace, open_workspace, BlobStore, RollingCache, DailyStore, NoteStore, SummaryStore
"""

from dataclasses import dataclass
from pathlib import Path

from werkday.config import ConfigStore
from werkday.store.blob import BlobStore
from werkday.store.daily import DailyStore
from werkday.store.notes import NoteStore
from werkday.store.rolling import GITHUB_CACHE_KEY, JIRA_CACHE_KEY, RollingCache
from werkday.store.summaries import SummaryStore

__all__ = [
    "BlobStore",
    "DailyStore",
    "NoteStore",
    "RollingCache",
    "SummaryStore",
    "Workspace",
    "open_workspace",
]


@dataclass
class Workspace:
    """Every store a request handler needs, sharing one blob root."""

    blob: BlobStore
    config: ConfigStore
    github_cache: RollingCache
    jira_cache: RollingCache
    daily: DailyStore
    notes: NoteStore
    summaries: SummaryStore


def open_workspace(data_dir: str | Path) -> Workspace:
    """Build the stores for a data directory; nothing is created on disk until first write."""
    blob = BlobStore(data_dir)
    return Workspace(
        blob=blob,
        config=ConfigStore(blob),
        github_cache=RollingCache(blob, GITHUB_CACHE_KEY),
        jira_cache=RollingCache(blob, JIRA_CACHE_KEY),
        daily=DailyStore(blob),
        notes=NoteStore(blob),
        summaries=SummaryStore(blob),
    )
