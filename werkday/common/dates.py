"""Date and instant helpers shared by sync, read and report paths."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
import re
from typing import Iterator

from werkday.common.errors import InputError

MAX_RANGE_DAYS = 366
_COMPACT_OFFSET_RE = re.compile(r"([+-]\d{2})(\d{2})$")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def utc_today() -> str:
    return utc_now().date().isoformat()


def parse_instant(value: str) -> datetime:
    """
    Parse an upstream ISO-8601 instant into an aware UTC datetime.

    Accepts `Z`, `+00:00` and Jira's compact `+0000` offsets. Naive values
    are taken as UTC.

    Raises:
        ValueError: If the value is not a parseable timestamp.
    """
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _COMPACT_OFFSET_RE.sub(r"\1:\2", text)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def day_of(value: str) -> str:
    """Return the UTC calendar day (`YYYY-MM-DD`) an instant falls on."""
    return parse_instant(value).date().isoformat()


def sort_key(value: str) -> datetime:
    """Ordering key for timestamps; unparseable values sort as oldest."""
    try:
        return parse_instant(value)
    except (TypeError, ValueError):
        return datetime.min.replace(tzinfo=timezone.utc)


def parse_day(value: str, *, field: str = "date") -> date:
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise InputError(f"{field} must be a YYYY-MM-DD date.") from exc


def next_day(day: str) -> str:
    return (date.fromisoformat(day) + timedelta(days=1)).isoformat()


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days."""

    start: str
    end: str

    @property
    def is_single_day(self) -> bool:
        return self.start == self.end

    def days(self) -> list[str]:
        return list(iter_days(self.start, self.end))

    def contains(self, day: str) -> bool:
        return self.start <= day <= self.end


def iter_days(start: str, end: str) -> Iterator[str]:
    """Yield every `YYYY-MM-DD` from start to end inclusive, oldest first."""
    current = date.fromisoformat(start)
    last = date.fromisoformat(end)
    while current <= last:
        yield current.isoformat()
        current += timedelta(days=1)


def resolve_date_range(
    start: str | None,
    end: str | None = None,
    single: str | None = None,
    *,
    today: str | None = None,
) -> DateRange:
    """
    Resolve `from`/`to`/`date` request values into a validated DateRange.

    Args:
        start: Range start (`from`).
        end: Range end (`to`), defaults to the start.
        single: Legacy single `date` value, used when `from` is absent.
        today: Override for the default day (UTC today).
    Returns:
        DateRange with normalized ISO days.
    Raises:
        InputError: On malformed, inverted or overlong ranges.
    """
    first = parse_day(start or single or today or utc_today(), field="from")
    last = parse_day(end, field="to") if end else first
    if last < first:
        raise InputError("to must not be before from.")
    if (last - first).days + 1 > MAX_RANGE_DAYS:
        raise InputError(f"Date range cannot exceed {MAX_RANGE_DAYS} days.")
    return DateRange(start=first.isoformat(), end=last.isoformat())


def trailing_range(days: int, *, today: str | None = None) -> DateRange:
    """Range of the last `days` calendar days ending today."""
    last = date.fromisoformat(today or utc_today())
    first = last - timedelta(days=days - 1)
    return DateRange(start=first.isoformat(), end=last.isoformat())
