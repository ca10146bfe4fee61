"""
tests/test_jira_read.py
Unit tests for werkday/sync/jira_read.py.
"""


def _touch(day: str, issue_id: str = "1", key: str = "ABC-1"):
    from werkday.store.types import IssueTouchRecord

    return IssueTouchRecord(
        id=f"issue-{issue_id}",
        timestamp=f"{day}T18:00:00.000+0000",
        url=f"https://acme.atlassian.net/browse/{key}",
        issue_key=key,
        issue_summary="Fix login",
        project="ABC",
    )


def _transition(day: str, history_id: str, issue_id: str = "1", key: str = "ABC-1"):
    from werkday.store.types import TransitionRecord

    return TransitionRecord(
        id=f"transition-{issue_id}-{history_id}",
        timestamp=f"{day}T10:00:00.000+0000",
        url=f"https://acme.atlassian.net/browse/{key}",
        issue_key=key,
        issue_summary="Fix login",
        project="ABC",
        from_status="To Do",
        to_status="Done",
    )


def _put(workspace, day: str, records, synced_at: str | None = None):
    from werkday.store.types import DailyBucket

    workspace.daily.put(DailyBucket(date=day, synced_at=synced_at or f"{day}T23:00:00+00:00", records=records))


def test_partial_sync_is_reported_as_unsynced_and_empty(workspace):
    from werkday.common.dates import resolve_date_range
    from werkday.sync.jira_read import get_activity_for_range

    _put(workspace, "2024-03-05", [_touch("2024-03-05"), _transition("2024-03-05", "10")])
    _put(workspace, "2024-03-07", [_transition("2024-03-07", "11")])

    activity = get_activity_for_range(workspace.daily, resolve_date_range("2024-03-05", "2024-03-07"))
    data = activity.to_dict()
    assert data["synced"] is False
    assert data["syncedAt"] is None
    assert data["issues"] == data["transitions"] == data["comments"] == data["worklogs"] == []
    assert data["summary"] == {
        "issuesWorkedOn": 0,
        "transitionsMade": 0,
        "commentsMade": 0,
        "worklogsAdded": 0,
        "totalTimeLogged": None,
    }


def test_multi_day_aggregation_dedupes_issue_keys(workspace):
    from werkday.common.dates import resolve_date_range
    from werkday.sync.jira_read import get_activity_for_range

    _put(workspace, "2024-03-05", [_transition("2024-03-05", "10"), _touch("2024-03-05")], "2024-03-05T23:00:00+00:00")
    _put(workspace, "2024-03-06", [_transition("2024-03-06", "11"), _touch("2024-03-06")], "2024-03-06T23:30:00+00:00")

    activity = get_activity_for_range(workspace.daily, resolve_date_range("2024-03-05", "2024-03-06"))
    data = activity.to_dict()
    assert data["synced"] is True
    assert data["syncedAt"] == "2024-03-06T23:30:00+00:00"
    assert data["summary"]["issuesWorkedOn"] == 1
    assert data["summary"]["transitionsMade"] == 2
    assert [item["id"] for item in data["transitions"]] == ["transition-1-10", "transition-1-11"]
    assert data["issues"] == []


def test_issue_touch_kept_when_no_other_record_claims_its_key(workspace):
    from werkday.common.dates import resolve_date_range
    from werkday.sync.jira_read import get_activity_for_range

    _put(workspace, "2024-03-05", [_transition("2024-03-05", "10"), _touch("2024-03-05", "2", "ABC-2")])

    data = get_activity_for_range(workspace.daily, resolve_date_range("2024-03-05")).to_dict()
    assert [item["issueKey"] for item in data["issues"]] == ["ABC-2"]
    assert data["summary"]["issuesWorkedOn"] == 2


def test_empty_synced_day_reads_as_synced_with_zero_counts(workspace):
    from werkday.common.dates import resolve_date_range
    from werkday.sync.jira_read import get_activity_for_range

    _put(workspace, "2024-03-05", [])

    data = get_activity_for_range(workspace.daily, resolve_date_range("2024-03-05")).to_dict()
    assert data["synced"] is True
    assert data["syncedAt"] == "2024-03-05T23:00:00+00:00"
    assert data["summary"]["issuesWorkedOn"] == 0


def test_union_range_records_skips_missing_days(workspace):
    from werkday.common.dates import resolve_date_range
    from werkday.sync.jira_read import union_range_records

    _put(workspace, "2024-03-05", [_transition("2024-03-05", "10")])
    records = union_range_records(workspace.daily, resolve_date_range("2024-03-04", "2024-03-06"))
    assert [record.id for record in records] == ["transition-1-10"]
