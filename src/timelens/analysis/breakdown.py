"""Flat breakdowns of processed entries.

Totals by goal, category, day, hour and weekday for the general dashboard.
Durations are minutes except where noted as hours.
"""

from dataclasses import dataclass
from datetime import tzinfo

from timelens.config.categories import DEFAULT_COLOR, CategoryRegistry
from timelens.records.models import DateRange, ProcessedEntry

from .aggregator import NO_GOAL_NAME, UNCATEGORIZED_NAME
from .rounding import round_half_up, to_hours

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


@dataclass
class AnalysisMetrics:
    """Headline numbers for a set of entries."""

    total_time: int
    total_entries: int
    avg_duration: int
    active_days: int
    top_goal: str | None
    top_category: str | None


@dataclass
class ChartDataPoint:
    """A named value with an optional color."""

    name: str
    value: float
    color: str | None = None


def _hours(minutes: float) -> float:
    return to_hours(minutes)


def group_by_goal(entries: list[ProcessedEntry]) -> list[ChartDataPoint]:
    """Minutes per goal name, largest first."""
    totals: dict[str, int] = {}
    for entry in entries:
        name = entry.goal_name or NO_GOAL_NAME
        totals[name] = totals.get(name, 0) + entry.duration
    points = [ChartDataPoint(name, value) for name, value in totals.items()]
    points.sort(key=lambda p: p.value, reverse=True)
    return points


def group_by_category(
    entries: list[ProcessedEntry], registry: CategoryRegistry | None = None
) -> list[ChartDataPoint]:
    """Minutes per category name, largest first."""
    registry = registry or CategoryRegistry()
    totals: dict[str, int] = {}
    category_ids: dict[str, str | None] = {}
    for entry in entries:
        name = entry.category_name or UNCATEGORIZED_NAME
        totals[name] = totals.get(name, 0) + entry.duration
        category_ids.setdefault(name, entry.category_id)

    points = [
        ChartDataPoint(name, value, registry.color_of(category_ids[name], DEFAULT_COLOR))
        for name, value in totals.items()
    ]
    points.sort(key=lambda p: p.value, reverse=True)
    return points


def group_by_day(
    entries: list[ProcessedEntry], date_range: DateRange, tz: tzinfo | None = None
) -> list[ChartDataPoint]:
    """Hours per calendar day in the range, oldest first, zero-filled."""
    totals = {day: 0 for day in date_range.days(tz)}
    for entry in entries:
        totals[entry.date] = totals.get(entry.date, 0) + entry.duration
    return [ChartDataPoint(day.isoformat(), _hours(value)) for day, value in sorted(totals.items())]


def group_by_hour(entries: list[ProcessedEntry]) -> list[ChartDataPoint]:
    """Hours started in each hour of the day."""
    totals = [0] * 24
    for entry in entries:
        totals[entry.hour] += entry.duration
    return [ChartDataPoint(f"{hour}:00", _hours(value)) for hour, value in enumerate(totals)]


def group_by_weekday(entries: list[ProcessedEntry]) -> list[ChartDataPoint]:
    """Hours per weekday, Monday first."""
    totals = [0] * 7
    for entry in entries:
        totals[entry.weekday] += entry.duration
    return [ChartDataPoint(WEEKDAY_NAMES[day], _hours(value)) for day, value in enumerate(totals)]


def calculate_metrics(entries: list[ProcessedEntry]) -> AnalysisMetrics:
    """Totals, averages and the top goal and category."""
    if not entries:
        return AnalysisMetrics(0, 0, 0, 0, None, None)

    total_time = sum(e.duration for e in entries)
    goals = group_by_goal(entries)
    categories = group_by_category(entries)

    return AnalysisMetrics(
        total_time=total_time,
        total_entries=len(entries),
        avg_duration=round_half_up(total_time / len(entries)),
        active_days=len({e.date for e in entries}),
        top_goal=goals[0].name if goals else None,
        top_category=categories[0].name if categories else None,
    )


__all__ = [
    "WEEKDAY_NAMES",
    "AnalysisMetrics",
    "ChartDataPoint",
    "calculate_metrics",
    "group_by_category",
    "group_by_day",
    "group_by_goal",
    "group_by_hour",
    "group_by_weekday",
]
