"""Calendar-day parsing and window helpers."""

from __future__ import annotations

from datetime import date, datetime, timedelta

DayLike = date | datetime | str

DATE_FORMAT = "%Y-%m-%d"
# Day stamps written by older clients: the day at midnight UTC
ZERO_TIME_SUFFIXES = ("T00:00:00.000Z", "T00:00:00Z", "T00:00:00")


def parse_day(value: DayLike) -> date:
    """Return the calendar day for ``value``, ignoring any time of day.

    Accepts ``date``/``datetime`` objects, ``YYYY-MM-DD`` strings and the
    zero-time ISO stamp ``YYYY-MM-DDT00:00:00.000Z``. Anything else raises
    ``ValueError``.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unsupported day value: {value!r}")

    text = value.strip()
    for suffix in ZERO_TIME_SUFFIXES:
        if text.endswith(suffix):
            text = text[: -len(suffix)]
            break
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as exc:
        raise ValueError(f"Malformed day {value!r}; expected YYYY-MM-DD") from exc


def format_day(day: date) -> str:
    """Canonical ``YYYY-MM-DD`` form."""

    return day.strftime(DATE_FORMAT)


def day_window(end: date, days: int) -> list[date]:
    """Return ``days`` consecutive days ending at ``end`` (inclusive), ascending."""

    if days <= 0:
        raise ValueError("Window must cover at least one day")
    start = end - timedelta(days=days - 1)
    return [start + timedelta(days=offset) for offset in range(days)]


def days_between(start: date, end: date) -> list[date]:
    """Return every day from ``start`` to ``end`` inclusive, ascending."""

    if start > end:
        raise ValueError(f"Window start {start} is after window end {end}")
    return day_window(end, (end - start).days + 1)


def weekday_label(day: date) -> str:
    """Short weekday name, e.g. ``Mon``."""

    return day.strftime("%a")
