"""Service module exports."""

from . import (
    analytics,
    dates,
    habits,
    history,
    history_cache,
    journal,
    reports,
    streaks,
)

__all__ = [
    "analytics",
    "dates",
    "habits",
    "history",
    "history_cache",
    "journal",
    "reports",
    "streaks",
]
