"""
tests/test_dates.py
Unit tests for werkday/common/dates.py.
"""

import pytest


@pytest.mark.parametrize(
    "timestamp",
    [
        "2024-03-05T23:59:59Z",
        "2024-03-05T23:59:59.999+00:00",
        "2024-03-05T23:59:59.000+0000",
        "2024-03-05T00:00:00Z",
    ],
)
def test_day_of_end_of_day_stays_on_same_day(timestamp):
    from werkday.common.dates import day_of

    assert day_of(timestamp) == "2024-03-05"


def test_day_of_converts_offsets_to_utc():
    from werkday.common.dates import day_of

    assert day_of("2024-03-05T20:00:00.000-0500") == "2024-03-06"
    assert day_of("2024-03-06T01:00:00+02:00") == "2024-03-05"


def test_parse_instant_rejects_garbage():
    from werkday.common.dates import parse_instant

    with pytest.raises(ValueError):
        parse_instant("yesterday")


def test_iter_days_is_inclusive_and_crosses_months():
    from werkday.common.dates import iter_days

    assert list(iter_days("2024-02-28", "2024-03-01")) == ["2024-02-28", "2024-02-29", "2024-03-01"]


def test_resolve_date_range_defaults():
    from werkday.common.dates import resolve_date_range

    assert resolve_date_range(None, None, None, today="2024-03-05").days() == ["2024-03-05"]
    assert resolve_date_range(None, None, "2024-03-01").start == "2024-03-01"
    date_range = resolve_date_range("2024-03-01", "2024-03-03")
    assert (date_range.start, date_range.end, date_range.is_single_day) == ("2024-03-01", "2024-03-03", False)


@pytest.mark.parametrize(
    "start,end",
    [("2024-13-01", None), ("2024-03-05", "2024-03-04"), ("2023-01-01", "2024-01-02"), ("2024-03-05", "tomorrow")],
)
def test_resolve_date_range_rejects_bad_input(start, end):
    from werkday.common.dates import resolve_date_range
    from werkday.common.errors import InputError

    with pytest.raises(InputError):
        resolve_date_range(start, end)


def test_trailing_range_ends_today():
    from werkday.common.dates import trailing_range

    date_range = trailing_range(3, today="2024-03-05")
    assert date_range.days() == ["2024-03-03", "2024-03-04", "2024-03-05"]
