"""Local-calendar date helpers shared by aggregation, insights and streaks."""

import calendar
from datetime import date, datetime, time, timedelta


def to_local(dt: datetime) -> datetime:
    """Normalize to a naive local datetime (aware values are converted first)."""
    if dt.tzinfo:
        return dt.astimezone().replace(tzinfo=None)
    return dt


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp (trailing Z allowed) into naive local time."""
    if isinstance(value, datetime):
        return to_local(value)
    return to_local(datetime.fromisoformat(str(value).replace("Z", "+00:00")))


def day_key(dt: datetime) -> date:
    return to_local(dt).date()


def start_of_day(dt: datetime) -> datetime:
    return datetime.combine(to_local(dt).date(), time.min)


def end_of_day(dt: datetime) -> datetime:
    return datetime.combine(to_local(dt).date(), time.max)


def week_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Monday 00:00 through Sunday 23:59:59.999999 of now's week."""
    monday = start_of_day(now) - timedelta(days=to_local(now).weekday())
    return monday, end_of_day(monday + timedelta(days=6))


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """First through last calendar day of now's month."""
    local = to_local(now)
    last_day = calendar.monthrange(local.year, local.month)[1]
    first = datetime(local.year, local.month, 1)
    return first, end_of_day(first.replace(day=last_day))


def week_identifier(now: datetime) -> str:
    """Year plus Monday-based week number, stable for all seven days of a week.

    The day-of-year is shifted by the weekday of January 1st so that every
    Monday starts a new bucket.
    """
    local = to_local(now)
    jan1_offset = date(local.year, 1, 1).weekday()
    week = (local.timetuple().tm_yday - 1 + jan1_offset) // 7
    return f"{local.year}-W{week:02d}"
