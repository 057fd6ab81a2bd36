"""Mood history charts rendered with matplotlib."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from ..constants.moods import MAX_MOOD, MIN_MOOD, MOOD_LEVELS
from .history import ChartPoint, HistoryAggregate, TimelinePoint

_MOOD_COLORS = {1: "#22C55E", 2: "#84CC16", 3: "#EAB308", 4: "#F97316", 5: "#EF4444"}


def _mood_axis(ax: Axes) -> None:
    ax.set_ylim(0, MAX_MOOD + 0.5)
    ax.set_yticks([mood["level"] for mood in MOOD_LEVELS])
    ax.set_yticklabels([mood["label"] for mood in MOOD_LEVELS], fontsize=8)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)


def _draw_weekly(ax: Axes, points: Sequence[ChartPoint], average: float | None) -> None:
    values = [point.value for point in points]
    # Sentinel days get a zero-height bar, i.e. an empty slot
    colors = [_MOOD_COLORS.get(value, "#E5E7EB") for value in values]
    ax.bar(range(len(values)), values, color=colors, edgecolor="white", linewidth=1.2)
    ax.set_xticks(range(len(points)))
    ax.set_xticklabels([point.day_label for point in points])
    _mood_axis(ax)

    if average is not None:
        ax.axhline(average, color="#6366F1", linestyle="--", linewidth=1)
        ax.text(len(values) - 0.5, average, f"avg {average:.1f}", va="bottom", ha="right",
                fontsize=9, color="#6366F1")
    else:
        ax.text(0.5, 0.5, "No journal entries this week", transform=ax.transAxes,
                ha="center", va="center", fontsize=12, color="#999")
    ax.set_title("Mood, last 7 days", fontsize=13, fontweight="bold")


def _draw_timeline(ax: Axes, points: Sequence[TimelinePoint]) -> None:
    xs = list(range(len(points)))
    # NaN keeps matplotlib from joining the line across absent days
    ys = [float(point.value) if point.value is not None else float("nan") for point in points]
    ax.plot(xs, ys, marker="o", color="#6366F1", linewidth=2, markersize=4)

    step = max(1, len(points) // 6)
    ax.set_xticks(xs[::step])
    ax.set_xticklabels([points[i].day.strftime("%b %d") for i in xs[::step]], fontsize=8)
    _mood_axis(ax)
    ax.set_ylim(MIN_MOOD - 0.5, MAX_MOOD + 0.5)
    ax.grid(True, axis="y", alpha=0.3)

    if all(point.value is None for point in points):
        ax.text(0.5, 0.5, "No journal entries yet", transform=ax.transAxes,
                ha="center", va="center", fontsize=12, color="#999")
    ax.set_title(f"Mood timeline, last {len(points)} days", fontsize=13, fontweight="bold")


def build_weekly_mood_chart(points: Sequence[ChartPoint], *, average: float | None = None) -> Figure:
    """Bar chart of the last seven days with the average mood as a reference line."""

    fig, ax = plt.subplots(figsize=(8, 4))
    _draw_weekly(ax, points, average)
    fig.tight_layout()
    return fig


def build_timeline_chart(points: Sequence[TimelinePoint]) -> Figure:
    """Line chart over the timeline window."""

    fig, ax = plt.subplots(figsize=(10, 4))
    _draw_timeline(ax, points)
    fig.tight_layout()
    return fig


def history_chart_png(aggregate: HistoryAggregate, output_path: Path | str) -> Path:
    """Render the weekly chart above the timeline into one PNG and return its path."""

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig, (top, bottom) = plt.subplots(2, 1, figsize=(10, 8))
    try:
        _draw_weekly(top, aggregate.chart_series, aggregate.average_mood)
        _draw_timeline(bottom, aggregate.timeline_series)
        fig.tight_layout()
        fig.savefig(path, bbox_inches="tight", dpi=100)
    finally:
        plt.close(fig)
    return path


__all__ = ["build_timeline_chart", "build_weekly_mood_chart", "history_chart_png"]
