from __future__ import annotations

from datetime import date, datetime, time

from ..core.constants import DATE_FORMAT, TIME_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def parse_time_of_day(value: str) -> time:
    """Parse HH:MM:SS (or HH:MM) string into time."""
    value = (value or "").strip()
    for fmt in (TIME_FORMAT, "%H:%M"):
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time of day: {value!r}")


def seconds_between(a: str, b: str) -> float:
    """Absolute distance between two time-of-day strings, in seconds.

    Note: Both values are anchored to the same day, so 23:59:50 and 00:00:05
    are almost a full day apart.
    """
    ta = parse_time_of_day(a)
    tb = parse_time_of_day(b)
    sa = ta.hour * 3600 + ta.minute * 60 + ta.second
    sb = tb.hour * 3600 + tb.minute * 60 + tb.second
    return float(abs(sa - sb))


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_time(value: datetime) -> str:
    return value.strftime(TIME_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
