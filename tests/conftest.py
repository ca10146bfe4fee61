"""Shared pytest fixtures for the Werkday test suite."""

from typing import Any

import pytest


@pytest.fixture(autouse=True)
def _isolated_data_dir(monkeypatch, tmp_path):
    """Point every store at a temp directory and keep language-model calls off."""
    monkeypatch.setenv("WERKDAY_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("WERKDAY_AI_ENABLED", "false")
    for name in (
        "WERKDAY_GITHUB_API_URL",
        "WERKDAY_JIRA_URL_TEMPLATE",
        "WERKDAY_HTTP_TIMEOUT_SECONDS",
        "WERKDAY_GITHUB_CACHE_MAX_AGE_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def workspace(tmp_path):
    from werkday.activity_store import open_workspace

    return open_workspace(tmp_path / "data")


@pytest.fixture
def make_issue():
    """Factory for Jira search results with changelog, comments and worklogs."""

    def _make_issue(
        issue_id: str = "10001",
        key: str = "ABC-1",
        *,
        updated: str = "2024-03-05T18:00:00.000+0000",
        histories: list[dict[str, Any]] | None = None,
        comments: list[dict[str, Any]] | None = None,
        worklogs: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        return {
            "id": issue_id,
            "key": key,
            "fields": {
                "summary": f"Summary of {key}",
                "project": {"key": key.split("-")[0]},
                "updated": updated,
                "comment": {"comments": comments or []},
                "worklog": {"worklogs": worklogs or []},
            },
            "changelog": {"histories": histories or []},
        }

    return _make_issue
