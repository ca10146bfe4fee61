"""
tests/test_record_types.py
Unit tests for werkday/store/types.py.
"""


def test_worklog_serializes_details_nested():
    from werkday.store.types import WorklogRecord, record_to_dict

    record = WorklogRecord(
        id="worklog-1-2",
        timestamp="2024-03-05T09:00:00.000+0000",
        url="https://acme.atlassian.net/browse/ABC-1?focusedWorklogId=2",
        issue_key="ABC-1",
        issue_summary="Fix login",
        project="ABC",
        author="Dana",
        duration="1h 30m",
        seconds=5400,
    )
    assert record_to_dict(record) == {
        "id": "worklog-1-2",
        "kind": "worklog",
        "timestamp": "2024-03-05T09:00:00.000+0000",
        "url": "https://acme.atlassian.net/browse/ABC-1?focusedWorklogId=2",
        "issueKey": "ABC-1",
        "issueSummary": "Fix login",
        "project": "ABC",
        "author": "Dana",
        "details": {"duration": "1h 30m", "seconds": 5400, "comment": None},
    }


def test_issue_touch_has_no_author_or_details():
    from werkday.store.types import IssueTouchRecord, record_to_dict

    data = record_to_dict(
        IssueTouchRecord(id="issue-1", timestamp="t", url="u", issue_key="ABC-1", issue_summary="s", project="ABC")
    )
    assert "details" not in data
    assert "author" not in data
    assert data["kind"] == "issue"


def test_pull_request_round_trip_keeps_type_and_status():
    from werkday.store.types import PullRequestRecord, record_from_dict, record_to_dict

    record = PullRequestRecord(
        id="pr-9", timestamp="2024-03-05T10:00:00Z", url="u", title="Add cache", repository="octo/app", status="merged"
    )
    restored = record_from_dict(record_to_dict(record))
    assert restored == record
    assert isinstance(restored, PullRequestRecord)


def test_transition_reads_from_and_to_details():
    from werkday.store.types import TransitionRecord, record_from_dict

    record = record_from_dict(
        {
            "id": "transition-1-5",
            "kind": "transition",
            "timestamp": "2024-03-05T10:00:00Z",
            "url": "u",
            "issueKey": "ABC-1",
            "issueSummary": "s",
            "project": "ABC",
            "author": "Dana",
            "details": {"from": "To Do", "to": "In Progress"},
        }
    )
    assert isinstance(record, TransitionRecord)
    assert (record.from_status, record.to_status) == ("To Do", "In Progress")


def test_unknown_kind_and_missing_id_are_skipped():
    from werkday.store.types import records_from_list

    records = records_from_list(
        [
            {"id": "x-1", "kind": "mystery"},
            {"kind": "commit"},
            "not a dict",
            {"id": "commit-abc", "kind": "commit", "timestamp": "t", "url": "u", "title": "t", "repository": "r"},
        ]
    )
    assert [record.id for record in records] == ["commit-abc"]


def test_records_from_list_tolerates_non_list():
    from werkday.store.types import records_from_list

    assert records_from_list(None) == []
    assert records_from_list({"id": "x"}) == []


def test_commit_round_trip_has_no_status():
    from werkday.store.types import CommitRecord, record_from_dict, record_to_dict

    record = CommitRecord(
        id="commit-abc", timestamp="2024-03-05T10:00:00Z", url="u", title="Add cache", repository="octo/app"
    )
    data = record_to_dict(record)
    assert "status" not in data
    assert record_from_dict(data) == record


def test_commit_ignores_stored_status():
    from werkday.store.types import CommitRecord, record_from_dict

    restored = record_from_dict(
        {"id": "commit-abc", "kind": "commit", "timestamp": "t", "url": "u", "title": "x", "repository": "r", "status": "open"}
    )
    assert restored == CommitRecord(id="commit-abc", timestamp="t", url="u", title="x", repository="r")
