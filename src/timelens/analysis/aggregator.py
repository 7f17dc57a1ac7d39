"""Calendar-aligned time-allocation series.

Builds day- or week-bucketed hours per category (or per goal cluster). Every
bucket that is not in the future is topped up to its full capacity with
inferred unrecorded time under the "uncategorized" key, so an elapsed day
always accounts for 24 hours.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta, tzinfo
from typing import Any, Protocol

from timelens.clock import local_date, local_hour
from timelens.config.categories import (
    DEFAULT_COLOR,
    DEFAULT_ORDER,
    UNCATEGORIZED_COLOR,
    CategoryRegistry,
)
from timelens.records.models import Category, DateRange, Goal, ProcessedEntry, TimeEntry

from .clustering import cluster_color
from .models import GoalCluster
from .rounding import to_hours

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"
UNCATEGORIZED_NAME = "Uncategorized"
NO_GOAL_NAME = "No goal"

MINUTES_PER_DAY = 1440
MINUTES_PER_WEEK = 7 * MINUTES_PER_DAY

WEEKDAY_NUMBERS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}
SUNDAY = WEEKDAY_NUMBERS["sunday"]


@dataclass(frozen=True)
class SeriesKey:
    """One line of a trend chart."""

    id: str
    name: str
    color: str
    order: int


@dataclass(frozen=True)
class BucketSpan:
    """Inclusive run of days covered by one bucket."""

    start: date
    end: date

    @property
    def label(self) -> str:
        return f"{self.start:%m/%d}-{self.end:%m/%d}"

    @property
    def day_count(self) -> int:
        return (self.end - self.start).days + 1


@dataclass
class TrendBucket:
    """Hours per series key for one day or week."""

    start: date
    end: date
    label: str
    values: dict[str, float]

    @property
    def total(self) -> float:
        return sum(self.values.values())


@dataclass
class TrendSeries:
    """Ordered buckets plus the ordered series keys to draw."""

    buckets: list[TrendBucket]
    keys: list[SeriesKey]

    def bucket_for(self, day: date) -> TrendBucket | None:
        """Bucket containing ``day``, if any."""
        for bucket in self.buckets:
            if bucket.start <= day <= bucket.end:
                return bucket
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "buckets": [
                {
                    "start": b.start.isoformat(),
                    "end": b.end.isoformat(),
                    "label": b.label,
                    "values": dict(b.values),
                }
                for b in self.buckets
            ],
            "keys": [vars(k).copy() for k in self.keys],
        }


class SeriesResolver(Protocol):
    """Maps entries to series keys and describes each key."""

    def key_of(self, entry: ProcessedEntry) -> str:
        """Series key for an entry (UNCATEGORIZED when unknown)."""
        ...

    def describe(self, key: str, entry: ProcessedEntry | None) -> SeriesKey:
        """Display info for a key; ``entry`` is the first entry seen with it."""
        ...


class CategorySeries:
    """Series keyed by category id."""

    def __init__(self, registry: CategoryRegistry | None = None) -> None:
        self._registry = registry or CategoryRegistry()

    def key_of(self, entry: ProcessedEntry) -> str:
        return entry.category_id or UNCATEGORIZED

    def describe(self, key: str, entry: ProcessedEntry | None) -> SeriesKey:
        if key == UNCATEGORIZED:
            return SeriesKey(UNCATEGORIZED, UNCATEGORIZED_NAME, UNCATEGORIZED_COLOR, DEFAULT_ORDER)
        name = entry.category_name if entry else self._registry.name_of(key) or key
        return SeriesKey(
            id=key,
            name=name,
            color=self._registry.color_of(key, DEFAULT_COLOR),
            order=self._registry.order_of(key),
        )


class ClusterSeries:
    """Series keyed by goal-cluster id; goal-less entries go to UNCATEGORIZED."""

    def __init__(self, clusters: Sequence[GoalCluster]) -> None:
        self._clusters = {c.id: (index, c) for index, c in enumerate(clusters)}
        self._cluster_of_goal = {
            goal_id: c.id for c in clusters for goal_id in c.goal_ids
        }

    def key_of(self, entry: ProcessedEntry) -> str:
        if entry.goal_id is None:
            return UNCATEGORIZED
        return self._cluster_of_goal.get(entry.goal_id, UNCATEGORIZED)

    def describe(self, key: str, entry: ProcessedEntry | None) -> SeriesKey:
        if key not in self._clusters:
            return SeriesKey(UNCATEGORIZED, UNCATEGORIZED_NAME, UNCATEGORIZED_COLOR, DEFAULT_ORDER)
        index, cluster = self._clusters[key]
        return SeriesKey(id=key, name=cluster.name, color=cluster_color(index), order=index)


def parse_week_start(name: str) -> int:
    """Weekday number (Monday = 0) for a day name such as "sunday".

    Raises:
        ValueError: If the name is not a weekday
    """
    try:
        return WEEKDAY_NUMBERS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown week start day: {name!r}") from None


def week_start_of(day: date, week_starts_on: int = SUNDAY) -> date:
    """First day of the week containing ``day``."""
    return day - timedelta(days=(day.weekday() - week_starts_on) % 7)


def week_spans(
    date_range: DateRange, week_starts_on: int = SUNDAY, tz: tzinfo | None = None
) -> list[BucketSpan]:
    """Week buckets covering the range, clipped to its first and last day."""
    days = date_range.days(tz)
    if not days:
        return []
    first, last = days[0], days[-1]

    spans: list[BucketSpan] = []
    week_start = week_start_of(first, week_starts_on)
    while week_start <= last:
        week_end = week_start + timedelta(days=6)
        spans.append(BucketSpan(max(week_start, first), min(week_end, last)))
        week_start += timedelta(days=7)
    return spans


def recent_weeks(
    reference: date, count: int = 3, week_starts_on: int = SUNDAY
) -> list[BucketSpan]:
    """The ``count`` full weeks before the week containing ``reference``, oldest first."""
    current = week_start_of(reference, week_starts_on)
    spans = []
    for weeks_ago in range(count, 0, -1):
        start = current - timedelta(weeks=weeks_ago)
        spans.append(BucketSpan(start, start + timedelta(days=6)))
    return spans


def process_entries(
    entries: list[TimeEntry],
    goals: list[Goal],
    categories: list[Category],
    *,
    tz: tzinfo | None = None,
) -> list[ProcessedEntry]:
    """Join finished entries with their category and goal names.

    Durations are truncated to whole minutes; entries shorter than a
    minute (or with negative spans) are dropped.
    """
    goal_names = {g.id: g.name for g in goals}
    category_names = {c.id: c.name for c in categories}

    processed: list[ProcessedEntry] = []
    for entry in entries:
        if not entry.is_eligible or entry.end_time is None:
            continue
        duration = max(0, int(entry.duration_minutes))
        if duration <= 0:
            continue
        day = local_date(entry.start_time, tz)
        processed.append(
            ProcessedEntry(
                id=entry.id,
                start_time=entry.start_time,
                end_time=entry.end_time,
                duration=duration,
                activity=entry.activity,
                category_id=entry.category_id,
                category_name=(
                    category_names.get(entry.category_id, UNCATEGORIZED_NAME)
                    if entry.category_id
                    else UNCATEGORIZED_NAME
                ),
                goal_id=entry.goal_id,
                goal_name=(
                    goal_names.get(entry.goal_id, NO_GOAL_NAME) if entry.goal_id else NO_GOAL_NAME
                ),
                date=day,
                hour=local_hour(entry.start_time, tz),
                weekday=day.weekday(),
            )
        )
    return processed


def _aggregate(
    entries: list[ProcessedEntry],
    spans: list[BucketSpan],
    labels: list[str],
    resolver: SeriesResolver,
    today: date,
) -> TrendSeries:
    """Shared bucketing for day and week granularity."""
    first_entry_for_key: dict[str, ProcessedEntry | None] = {}
    for entry in entries:
        first_entry_for_key.setdefault(resolver.key_of(entry), entry)
    first_entry_for_key.setdefault(UNCATEGORIZED, None)

    bucket_of_day: dict[date, int] = {}
    for index, span in enumerate(spans):
        for offset in range(span.day_count):
            bucket_of_day[span.start + timedelta(days=offset)] = index

    minutes: list[dict[str, float]] = [
        {key: 0.0 for key in first_entry_for_key} for _ in spans
    ]
    recorded = [0.0] * len(spans)

    for entry in entries:
        index = bucket_of_day.get(entry.date)
        if index is None:
            continue
        minutes[index][resolver.key_of(entry)] += entry.duration
        recorded[index] += entry.duration

    for index, span in enumerate(spans):
        if span.start > today:
            continue
        elapsed_days = (min(span.end, today) - span.start).days + 1
        capacity = min(MINUTES_PER_WEEK, elapsed_days * MINUTES_PER_DAY)
        minutes[index][UNCATEGORIZED] += max(0.0, capacity - recorded[index])

    keys = [resolver.describe(key, entry) for key, entry in first_entry_for_key.items()]
    keys.sort(key=lambda k: (k.id == UNCATEGORIZED, k.order))

    buckets = [
        TrendBucket(
            start=span.start,
            end=span.end,
            label=label,
            values={k.id: to_hours(minutes[index][k.id]) for k in keys},
        )
        for index, (span, label) in enumerate(zip(spans, labels))
    ]
    logger.debug("Aggregated %d entries into %d buckets", len(entries), len(buckets))
    return TrendSeries(buckets=buckets, keys=keys)


def aggregate_by_day(
    entries: list[ProcessedEntry],
    date_range: DateRange,
    resolver: SeriesResolver,
    *,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> TrendSeries:
    """Day buckets over the range with any series resolver."""
    days = date_range.days(tz)
    spans = [BucketSpan(day, day) for day in days]
    labels = [f"{day:%m/%d}" for day in days]
    return _aggregate(entries, spans, labels, resolver, today or date.today())


def aggregate_by_week(
    entries: list[ProcessedEntry],
    resolver: SeriesResolver,
    date_range: DateRange | None = None,
    *,
    weeks: list[BucketSpan] | None = None,
    week_starts_on: int = SUNDAY,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> TrendSeries:
    """Week buckets, either explicit ``weeks`` or derived from the range."""
    if weeks is None:
        if date_range is None:
            raise ValueError("Either date_range or weeks is required")
        weeks = week_spans(date_range, week_starts_on, tz)
    labels = [span.label for span in weeks]
    return _aggregate(entries, weeks, labels, resolver, today or date.today())


def aggregate_by_day_and_category(
    entries: list[ProcessedEntry],
    date_range: DateRange,
    *,
    today: date | None = None,
    registry: CategoryRegistry | None = None,
    tz: tzinfo | None = None,
) -> TrendSeries:
    """Daily hours per category, including inferred unrecorded time.

    Args:
        entries: Processed entries (see process_entries)
        date_range: Inclusive window; one bucket per calendar day
        today: Days after this get no inferred time. Defaults to today.
        registry: Category order and color lookup
        tz: Analysis timezone used to enumerate the range's days

    Returns:
        TrendSeries with hours rounded to one decimal
    """
    return aggregate_by_day(
        entries, date_range, CategorySeries(registry), today=today, tz=tz
    )


def aggregate_by_week_and_category(
    entries: list[ProcessedEntry],
    date_range: DateRange | None = None,
    *,
    weeks: list[BucketSpan] | None = None,
    week_starts_on: int = SUNDAY,
    today: date | None = None,
    registry: CategoryRegistry | None = None,
    tz: tzinfo | None = None,
) -> TrendSeries:
    """Weekly hours per category, including inferred unrecorded time."""
    return aggregate_by_week(
        entries,
        CategorySeries(registry),
        date_range,
        weeks=weeks,
        week_starts_on=week_starts_on,
        today=today,
        tz=tz,
    )


def aggregate_by_day_and_cluster(
    entries: list[ProcessedEntry],
    clusters: Sequence[GoalCluster],
    date_range: DateRange,
    *,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> TrendSeries:
    """Daily hours per goal cluster, including inferred unrecorded time."""
    return aggregate_by_day(entries, date_range, ClusterSeries(clusters), today=today, tz=tz)


def aggregate_by_week_and_cluster(
    entries: list[ProcessedEntry],
    clusters: Sequence[GoalCluster],
    date_range: DateRange | None = None,
    *,
    weeks: list[BucketSpan] | None = None,
    week_starts_on: int = SUNDAY,
    today: date | None = None,
    tz: tzinfo | None = None,
) -> TrendSeries:
    """Weekly hours per goal cluster, including inferred unrecorded time."""
    return aggregate_by_week(
        entries,
        ClusterSeries(clusters),
        date_range,
        weeks=weeks,
        week_starts_on=week_starts_on,
        today=today,
        tz=tz,
    )


__all__ = [
    "MINUTES_PER_DAY",
    "MINUTES_PER_WEEK",
    "NO_GOAL_NAME",
    "UNCATEGORIZED",
    "UNCATEGORIZED_NAME",
    "CategorySeries",
    "ClusterSeries",
    "SeriesKey",
    "SeriesResolver",
    "TrendBucket",
    "TrendSeries",
    "BucketSpan",
    "aggregate_by_day",
    "aggregate_by_day_and_category",
    "aggregate_by_day_and_cluster",
    "aggregate_by_week",
    "aggregate_by_week_and_category",
    "aggregate_by_week_and_cluster",
    "parse_week_start",
    "process_entries",
    "recent_weeks",
    "week_spans",
    "week_start_of",
]
