"""
tests/test_report.py
Unit tests for werkday/report/aggregate.py and werkday/report/ai_report.py.
"""

from unittest.mock import MagicMock, patch

import pytest


def _seed(workspace):
    from werkday.store.types import (
        CommitRecord,
        DailyBucket,
        IssueTouchRecord,
        PullRequestRecord,
        TransitionRecord,
        WorklogRecord,
    )

    workspace.github_cache.add_activities(
        [
            CommitRecord(id="commit-a", timestamp="2024-03-05T10:00:00Z", url="u", title="Add cache", repository="octo/app"),
            CommitRecord(id="commit-b", timestamp="2024-03-04T10:00:00Z", url="u", title="Old work", repository="octo/app"),
            PullRequestRecord(
                id="pr-1", timestamp="2024-03-05T12:00:00Z", url="u", title="Cache PR", repository="octo/app", status="open"
            ),
        ]
    )
    common = {"url": "u", "issue_key": "ABC-1", "issue_summary": "Fix login", "project": "ABC"}
    workspace.daily.put(
        DailyBucket(
            date="2024-03-05",
            synced_at="2024-03-05T23:00:00+00:00",
            records=[
                TransitionRecord(id="transition-1-10", timestamp="2024-03-05T09:00:00Z", **common),
                WorklogRecord(id="worklog-1-9", timestamp="2024-03-05T09:00:00Z", duration="1h 30m", seconds=5400, **common),
                IssueTouchRecord(id="issue-1", timestamp="2024-03-05T18:00:00Z", **common),
            ],
        )
    )


def test_collect_range_counts(workspace):
    from werkday.common.dates import resolve_date_range
    from werkday.report.aggregate import collect_range

    _seed(workspace)
    workspace.notes.save(title="Standup")
    snapshot = collect_range(workspace, resolve_date_range("2024-03-05"))

    counts = snapshot.counts()
    assert counts["commits"] == 1
    assert counts["pullRequests"] == 1
    assert counts["issuesWorkedOn"] == 1
    assert counts["transitions"] == 1
    assert counts["worklogs"] == 1
    assert counts["timeLogged"] == "1.5h"
    assert counts["notes"] == 0
    assert snapshot.previews().issue_lines == ["ABC-1 Fix login"]


def test_build_range_summary_shape(workspace):
    from werkday.common.dates import resolve_date_range
    from werkday.report.aggregate import build_range_summary, collect_range
    from werkday.report.ai_report import AiReport

    _seed(workspace)
    snapshot = collect_range(workspace, resolve_date_range("2024-03-04", "2024-03-05"))
    report = AiReport(executive_summary="Shipped caching.", highlights=["Cache"], next_steps=["Tune TTL"])
    summary = build_range_summary(snapshot, ai_report=report, generated_at="2024-03-06T00:00:00+00:00")

    assert summary["from"] == "2024-03-04"
    assert summary["to"] == "2024-03-05"
    assert summary["github"]["commits"] == 2
    assert summary["jira"]["timeLogged"] == "1.5h"
    assert len(summary["jira"]["activities"]) == 3
    assert summary["notes"] == {"count": 0, "items": []}
    assert summary["aiReportStructured"] == {
        "executiveSummary": "Shipped caching.",
        "highlights": ["Cache"],
        "nextSteps": ["Tune TTL"],
    }


def test_build_history_per_day(workspace):
    from werkday.report.aggregate import build_history

    _seed(workspace)
    history = build_history(workspace, 2, today="2024-03-05")

    assert (history["from"], history["to"], history["days"]) == ("2024-03-04", "2024-03-05", 2)
    first, second = history["history"]
    assert first["date"] == "2024-03-04"
    assert (first["github"], first["jira"], first["total"]) == (1, 0, 1)
    assert second["github"] == 2
    assert second["jira"] == 3
    assert second["details"]["timeLogged"] == "1.5h"


def test_parse_ai_report_is_lenient_but_typed():
    from werkday.report.ai_report import parse_ai_report

    report = parse_ai_report(
        '```json\n{"executiveSummary": " Did {things} ", "highlights": ["a", "", 3, {"x": 1}], "nextSteps": ["b"]}\n```'
    )
    assert report is not None
    assert report.executive_summary == "Did {things}"
    assert report.highlights == ["a", "3"]
    assert report.next_steps == ["b"]
    assert parse_ai_report("I cannot help with that.") is None
    assert parse_ai_report('{"highlights": ["a"]}') is None


def test_prompt_is_bounded_and_scaled_by_range():
    from werkday.report.ai_report import ReportPreviews, build_report_prompt

    previews = ReportPreviews(
        commit_titles=[f"commit {index}" for index in range(10)],
        issue_lines=[f"ABC-{index} thing" for index in range(10)],
        note_titles=[],
    )
    counts = {"commits": 10, "issuesWorkedOn": 10, "timeLogged": "2h"}
    prompt = build_report_prompt(counts, previews, is_range=True)
    assert "commit 4" in prompt
    assert "commit 5" not in prompt
    assert "ABC-2 thing" in prompt
    assert "ABC-3 thing" not in prompt
    assert "2h logged" in prompt
    assert "4-5 specific accomplishments" in prompt
    assert "3-4 specific accomplishments" in build_report_prompt(counts, previews, is_range=False)


@pytest.fixture
def ai_on(monkeypatch):
    monkeypatch.setenv("WERKDAY_AI_ENABLED", "true")


@patch("werkday.report.ai_report.LLM")
def test_generate_ai_report_calls_model_once(mock_llm_cls, ai_on):
    from werkday.report.ai_report import ReportPreviews, generate_ai_report

    mock_llm = MagicMock()
    mock_llm.call.return_value = '{"executiveSummary": "Good day.", "highlights": ["x"], "nextSteps": ["y"]}'
    mock_llm_cls.return_value = mock_llm

    report = generate_ai_report(
        {"commits": 1}, ReportPreviews(["c"], [], []), api_key="sk-1", model="openrouter/x", is_range=False
    )

    assert report is not None
    assert report.executive_summary == "Good day."
    mock_llm_cls.assert_called_once_with(model="openrouter/x", api_key="sk-1", max_tokens=400)
    mock_llm.call.assert_called_once()


@patch("werkday.report.ai_report.LLM")
def test_generate_ai_report_skips_without_key_or_activity(mock_llm_cls, ai_on):
    from werkday.report.ai_report import ReportPreviews, generate_ai_report

    previews = ReportPreviews([], [], [])
    assert generate_ai_report({"commits": 1}, previews, api_key=None, model="m", is_range=False) is None
    assert generate_ai_report({"commits": 0}, previews, api_key="sk-1", model="m", is_range=True) is None
    mock_llm_cls.assert_not_called()


@patch("werkday.report.ai_report.LLM")
def test_generate_ai_report_failures_become_none(mock_llm_cls, ai_on):
    from werkday.report.ai_report import ReportPreviews, generate_ai_report

    mock_llm_cls.return_value.call.side_effect = RuntimeError("429 rate limited")
    previews = ReportPreviews(["c"], [], [])
    assert generate_ai_report({"commits": 1}, previews, api_key="sk-1", model="m", is_range=True) is None

    mock_llm_cls.return_value.call.side_effect = None
    mock_llm_cls.return_value.call.return_value = "not json at all"
    assert generate_ai_report({"commits": 1}, previews, api_key="sk-1", model="m", is_range=True) is None


@patch("werkday.report.ai_report.LLM")
def test_generate_ai_report_respects_disable_flag(mock_llm_cls):
    from werkday.report.ai_report import ReportPreviews, generate_ai_report

    assert generate_ai_report({"commits": 1}, ReportPreviews(["c"], [], []), api_key="sk-1", model="m", is_range=False) is None
    mock_llm_cls.assert_not_called()
