"""
tests/test_stores.py
Unit tests for the rolling cache, daily buckets, notes and summaries stores.
"""

from datetime import datetime, timedelta, timezone


def _commit(index: int, *, base: datetime | None = None):
    from werkday.store.types import CommitRecord

    moment = (base or datetime(2024, 1, 1, tzinfo=timezone.utc)) + timedelta(minutes=index)
    return CommitRecord(
        id=f"commit-{index}",
        timestamp=moment.isoformat().replace("+00:00", "Z"),
        url=f"https://github.com/octo/app/commit/{index}",
        title=f"Commit {index}",
        repository="octo/app",
    )


def test_rolling_cache_keeps_500_most_recent_after_600_single_inserts(workspace):
    cache = workspace.github_cache
    for index in range(600):
        cache.add_activities([_commit(index)])

    last_sync, records = cache.snapshot()
    assert last_sync is not None
    assert len(records) == 500
    assert {record.id for record in records} == {f"commit-{index}" for index in range(100, 600)}
    assert records[0].id == "commit-599"
    assert records[-1].id == "commit-100"


def test_rolling_cache_never_replaces_existing_ids(workspace):
    from werkday.store.types import CommitRecord

    cache = workspace.github_cache
    original = _commit(1)
    cache.add_activities([original])
    changed = CommitRecord(
        id=original.id, timestamp=original.timestamp, url=original.url, title="Rewritten", repository="octo/app"
    )
    added = cache.add_activities([changed, _commit(2), _commit(2)])

    _, records = cache.snapshot()
    assert added == 1
    assert [record.id for record in records] == ["commit-2", "commit-1"]
    assert records[1].title == "Commit 1"


def test_rolling_cache_records_between_uses_utc_day(workspace):
    from werkday.store.types import CommitRecord

    late = CommitRecord(id="commit-late", timestamp="2024-03-05T23:59:59Z", url="u", title="t", repository="r")
    next_day = CommitRecord(id="commit-next", timestamp="2024-03-06T00:00:00Z", url="u", title="t", repository="r")
    workspace.github_cache.add_activities([late, next_day])

    assert [record.id for record in workspace.github_cache.records_between("2024-03-05", "2024-03-05")] == [
        "commit-late"
    ]


def test_rolling_cache_document_defaults_when_missing(workspace):
    assert workspace.jira_cache.document() == {"lastSync": None, "activities": []}


def test_daily_store_distinguishes_absent_from_empty(workspace):
    from werkday.store.types import DailyBucket

    assert workspace.daily.get("2024-03-05") is None
    workspace.daily.put(DailyBucket(date="2024-03-05", synced_at="2024-03-06T08:00:00+00:00"))

    bucket = workspace.daily.get("2024-03-05")
    assert bucket is not None
    assert bucket.records == []
    assert bucket.synced_at == "2024-03-06T08:00:00+00:00"
    assert workspace.daily.synced_dates() == ["2024-03-05"]


def test_daily_store_put_overwrites(workspace):
    from werkday.store.types import DailyBucket, IssueTouchRecord

    touch = IssueTouchRecord(id="issue-1", timestamp="t", url="u", issue_key="ABC-1", issue_summary="s", project="ABC")
    workspace.daily.put(DailyBucket(date="2024-03-05", synced_at="a", records=[touch]))
    workspace.daily.put(DailyBucket(date="2024-03-05", synced_at="b", records=[]))

    bucket = workspace.daily.get("2024-03-05")
    assert bucket.synced_at == "b"
    assert bucket.records == []


def test_notes_upsert_replaces_in_place_and_inserts_at_front(workspace):
    first = workspace.notes.save(title="First", content="one")
    second = workspace.notes.save(content="two", tags=["x"])
    assert second.title == "Untitled"
    assert [note.id for note in workspace.notes.list_notes()] == [second.id, first.id]

    edited = workspace.notes.save(note_id=first.id, title="First edited", created_at=first.created_at)
    notes = workspace.notes.list_notes()
    assert [note.id for note in notes] == [second.id, first.id]
    assert notes[1].title == "First edited"
    assert edited.created_at == first.created_at


def test_notes_upsert_without_created_at_keeps_original(workspace):
    from werkday.store.notes import NOTES_KEY

    workspace.blob.write(
        NOTES_KEY,
        {
            "notes": [
                {
                    "id": "n1",
                    "title": "Old",
                    "content": "",
                    "createdAt": "2024-01-01T00:00:00+00:00",
                    "updatedAt": "2024-01-01T00:00:00+00:00",
                    "tags": [],
                }
            ]
        },
    )
    edited = workspace.notes.save(note_id="n1", title="New")

    assert edited.created_at == "2024-01-01T00:00:00+00:00"
    assert edited.updated_at != "2024-01-01T00:00:00+00:00"
    assert workspace.notes.list_notes()[0].created_at == "2024-01-01T00:00:00+00:00"


def test_notes_delete(workspace):
    note = workspace.notes.save(title="Bye")
    assert workspace.notes.delete(note.id) is True
    assert workspace.notes.delete(note.id) is False
    assert workspace.notes.list_notes() == []


def test_summary_store_keyed_by_date(workspace):
    assert workspace.summaries.get("2024-03-05") is None
    workspace.summaries.put("2024-03-05", {"date": "2024-03-05"})
    workspace.summaries.put("2024-03-06", {"date": "2024-03-06"})
    assert workspace.summaries.get("2024-03-05") == {"date": "2024-03-05"}
