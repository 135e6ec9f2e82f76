"""Local calendar-day and elapsed-time helpers."""

import math
from datetime import date, datetime, timedelta, timezone

UTC = timezone.utc

DAY = timedelta(days=1)
HOUR = timedelta(hours=1)


def now_local() -> datetime:
    """Get the current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


def to_zone_of(dt: datetime, ref: datetime) -> datetime:
    """Express ``dt`` in the timezone of ``ref``.

    Naive datetimes are assumed to already be in ``ref``'s zone, so comparing
    a naive value against a naive ``now`` stays a plain wall-clock comparison.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=ref.tzinfo)
    if ref.tzinfo is None:
        return dt.astimezone().replace(tzinfo=None)
    return dt.astimezone(ref.tzinfo)


def local_date(dt: datetime, ref: datetime) -> date:
    """Calendar date of ``dt`` as seen from ``ref``'s timezone."""
    return to_zone_of(dt, ref).date()


def is_same_local_day(dt: datetime, now: datetime) -> bool:
    return local_date(dt, now) == now.date()


def elapsed(since: datetime, now: datetime) -> timedelta:
    """Wall-clock time from ``since`` to ``now``."""
    return now - to_zone_of(since, now)


def elapsed_hours(since: datetime, now: datetime) -> float:
    return elapsed(since, now) / HOUR


def ceil_days(delta: timedelta) -> int:
    """Whole days, rounded up (a partial day counts as one)."""
    return math.ceil(delta / DAY)


def days_until(target: datetime, now: datetime) -> int:
    """Days left until ``target``, rounded up; negative once it has passed."""
    return ceil_days(to_zone_of(target, now) - now)


def parse_timestamp(value: datetime | str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp, passing datetimes through untouched."""
    if value is None or isinstance(value, datetime):
        return value
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)
