"""Mood history series built from journal sentiment scores.

The chart and timeline series are always dense: every day of the requested
window appears exactly once, in ascending order, so renderers never have to
fill date gaps themselves. Days without a journal entry carry ``NO_MOOD`` in
the weekly chart and ``None`` in the timeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..constants.moods import NO_MOOD, is_valid_mood
from .dates import DayLike, day_window, days_between, parse_day, weekday_label

WEEKLY_WINDOW_DAYS = 7


@dataclass(frozen=True, slots=True)
class MoodRecord:
    """One day's sentiment score for a user."""

    day: date
    score: int

    @classmethod
    def from_raw(cls, day: DayLike, score: int) -> "MoodRecord":
        """Build a record from loosely typed input, validating both fields."""

        return cls(day=parse_day(day), score=_checked_score(score))


@dataclass(frozen=True, slots=True)
class ChartPoint:
    day_label: str
    day: date
    value: int


@dataclass(frozen=True, slots=True)
class TimelinePoint:
    day: date
    value: Optional[int]


@dataclass(frozen=True, slots=True)
class WeeklySeries:
    """Seven chart points ending at the window end."""

    points: tuple[ChartPoint, ...]

    @property
    def labels(self) -> list[str]:
        return [point.day_label for point in self.points]

    @property
    def values(self) -> list[int]:
        return [point.value for point in self.points]

    @property
    def average(self) -> Optional[float]:
        return average_mood(self.values)


@dataclass(frozen=True, slots=True)
class HistoryAggregate:
    """Chart, average and timeline for one user, as of ``fetched_at``."""

    chart_series: tuple[ChartPoint, ...]
    average_mood: Optional[float]
    timeline_series: tuple[TimelinePoint, ...]
    fetched_at: datetime
    is_stale: bool = field(default=False)

    @property
    def chart_labels(self) -> list[str]:
        return [point.day_label for point in self.chart_series]

    @property
    def chart_values(self) -> list[int]:
        return [point.value for point in self.chart_series]


def _checked_score(score: object) -> int:
    if not is_valid_mood(score):
        raise ValueError(f"Sentiment score must be an integer from 1 to 5, got {score!r}")
    return score  # type: ignore[return-value]


def _score_lookup(records: Iterable[MoodRecord]) -> dict[date, int]:
    """Map day -> score; later records win for duplicate days."""

    lookup: dict[date, int] = {}
    for record in records:
        lookup[parse_day(record.day)] = _checked_score(record.score)
    return lookup


def average_mood(values: Sequence[int]) -> Optional[float]:
    """Average of logged scores; ``None`` when nothing was logged."""

    logged = [value for value in values if value != NO_MOOD]
    if not logged:
        return None
    return sum(logged) / len(logged)


def build_weekly_series(records: Iterable[MoodRecord], window_end: DayLike) -> WeeklySeries:
    """Return the 7-day chart series ending at ``window_end``."""

    lookup = _score_lookup(records)
    days = day_window(parse_day(window_end), WEEKLY_WINDOW_DAYS)
    return WeeklySeries(
        points=tuple(
            ChartPoint(day_label=weekday_label(day), day=day, value=lookup.get(day, NO_MOOD))
            for day in days
        )
    )


def build_timeline_series(
    records: Iterable[MoodRecord], window_start: DayLike, window_end: DayLike
) -> list[TimelinePoint]:
    """Return one point per day from ``window_start`` to ``window_end`` inclusive."""

    lookup = _score_lookup(records)
    days = days_between(parse_day(window_start), parse_day(window_end))
    return [TimelinePoint(day=day, value=lookup.get(day)) for day in days]


def build_history_aggregate(
    weekly_records: Iterable[MoodRecord],
    timeline_records: Iterable[MoodRecord],
    *,
    today: date,
    fetched_at: datetime,
    timeline_days: int = 30,
) -> HistoryAggregate:
    """Assemble the history aggregate from the two window query results."""

    weekly = build_weekly_series(weekly_records, today)
    timeline_start = day_window(today, timeline_days)[0]
    timeline = build_timeline_series(timeline_records, timeline_start, today)
    return HistoryAggregate(
        chart_series=weekly.points,
        average_mood=weekly.average,
        timeline_series=tuple(timeline),
        fetched_at=fetched_at,
    )


__all__ = [
    "ChartPoint",
    "HistoryAggregate",
    "MoodRecord",
    "TimelinePoint",
    "WEEKLY_WINDOW_DAYS",
    "WeeklySeries",
    "average_mood",
    "build_history_aggregate",
    "build_timeline_series",
    "build_weekly_series",
]
