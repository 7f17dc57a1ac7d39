"""Per-cluster engagement statistics.

Derives total time, active days, streaks and recency health for goal
clusters from their linked time entries.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime, tzinfo

from timelens.clock import local_date
from timelens.records.models import DateRange, TimeEntry

from .clustering import cluster_color
from .models import (
    ClusterStats,
    GoalCluster,
    GoalDistributionItem,
    HealthStatus,
    OverviewStats,
    SubGoalDetail,
)
from .rounding import round_half_up

logger = logging.getLogger(__name__)

ACTIVE_WITHIN_DAYS = 7
SLOWING_WITHIN_DAYS = 14


def longest_streak(active_dates: Iterable[date]) -> int:
    """Length of the longest run of consecutive calendar days.

    Examples:
        >>> longest_streak([date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 5)])
        2
    """
    ordered = sorted(set(active_dates))
    if not ordered:
        return 0

    best = current = 1
    for previous, current_date in zip(ordered, ordered[1:]):
        if (current_date - previous).days == 1:
            current += 1
            best = max(best, current)
        else:
            current = 1
    return best


def health_status_for(
    last_active: datetime | None, now: datetime, tz: tzinfo | None = None
) -> HealthStatus:
    """Recency label from the days elapsed since the last activity.

    Args:
        last_active: Start of the most recent entry, or None
        now: Current instant
        tz: Analysis timezone for calendar-day arithmetic

    Returns:
        ACTIVE within 7 days, SLOWING within 14, otherwise STALLED
    """
    if last_active is None:
        return HealthStatus.STALLED

    days_since = (local_date(now, tz) - local_date(last_active, tz)).days
    if days_since <= ACTIVE_WITHIN_DAYS:
        return HealthStatus.ACTIVE
    if days_since <= SLOWING_WITHIN_DAYS:
        return HealthStatus.SLOWING
    return HealthStatus.STALLED


def calculate_cluster_stats(
    cluster: GoalCluster,
    entries: list[TimeEntry],
    *,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> ClusterStats:
    """Compute engagement metrics for one cluster.

    Args:
        cluster: Cluster whose goals select the entries
        entries: Entries already limited to the analysis window
        now: Current instant; when given, health status is included
        tz: Analysis timezone for calendar dates

    Returns:
        ClusterStats with durations rounded to whole minutes
    """
    goal_ids = set(cluster.goal_ids)
    cluster_entries = [
        e for e in entries if e.is_eligible and e.goal_id is not None and e.goal_id in goal_ids
    ]

    if not cluster_entries:
        return ClusterStats(
            cluster_id=cluster.id,
            cluster_name=cluster.name,
            total_duration=0,
            active_days=0,
            avg_daily_duration=0,
            first_active_date=None,
            last_active_date=None,
            longest_streak=0,
            entry_count=0,
            health_status=HealthStatus.STALLED if now is not None else None,
        )

    total_minutes = 0.0
    active_dates: set[date] = set()
    first_active: datetime | None = None
    last_active: datetime | None = None

    for entry in cluster_entries:
        total_minutes += max(0.0, entry.duration_minutes)
        active_dates.add(local_date(entry.start_time, tz))
        if last_active is None or entry.start_time > last_active:
            last_active = entry.start_time
        if first_active is None or entry.start_time < first_active:
            first_active = entry.start_time

    active_days = len(active_dates)
    avg_daily = total_minutes / active_days if active_days > 0 else 0.0

    return ClusterStats(
        cluster_id=cluster.id,
        cluster_name=cluster.name,
        total_duration=round_half_up(total_minutes),
        active_days=active_days,
        avg_daily_duration=round_half_up(avg_daily),
        first_active_date=first_active,
        last_active_date=last_active,
        longest_streak=longest_streak(active_dates),
        entry_count=len(cluster_entries),
        health_status=health_status_for(last_active, now, tz) if now is not None else None,
    )


def sub_goal_details(cluster: GoalCluster, entries: list[TimeEntry]) -> list[SubGoalDetail]:
    """Time per member goal of a cluster, longest first."""
    goal_ids = set(cluster.goal_ids)
    minutes: dict[str, float] = {}
    counts: dict[str, int] = {}

    for entry in entries:
        if not entry.is_eligible or entry.goal_id not in goal_ids:
            continue
        minutes[entry.goal_id] = minutes.get(entry.goal_id, 0.0) + max(
            0.0, entry.duration_minutes
        )
        counts[entry.goal_id] = counts.get(entry.goal_id, 0) + 1

    details = [
        SubGoalDetail(
            goal_id=goal.id,
            goal_name=goal.name,
            date=goal.date,
            duration=round_half_up(minutes.get(goal.id, 0.0)),
            entry_count=counts.get(goal.id, 0),
        )
        for goal in cluster.goals
    ]
    details.sort(key=lambda d: d.duration, reverse=True)
    return details


def calculate_overview_stats(
    entries: list[TimeEntry],
    stats: list[ClusterStats],
    date_range: DateRange,
    tz: tzinfo | None = None,
) -> OverviewStats:
    """Summarize goal-linked time across the analysis window."""
    goal_linked = 0.0
    all_minutes = 0.0

    for entry in entries:
        if not entry.is_eligible:
            continue
        minutes = max(0.0, entry.duration_minutes)
        all_minutes += minutes
        if entry.goal_id:
            goal_linked += minutes

    days_in_range = max(1, len(date_range.days(tz)))

    return OverviewStats(
        total_duration=round_half_up(goal_linked),
        daily_avg_duration=round_half_up(goal_linked / days_in_range),
        goal_coverage_rate=goal_linked / all_minutes if all_minutes > 0 else 0.0,
        active_clusters=sum(1 for s in stats if s.total_duration > 0),
        total_entries=len(entries),
        days_in_range=days_in_range,
    )


def calculate_goal_distribution(
    stats: list[ClusterStats], clusters: list[GoalCluster]
) -> list[GoalDistributionItem]:
    """Share of goal-linked time per cluster, skipping idle clusters."""
    total = sum(s.total_duration for s in stats)
    names = {c.id: c.name for c in clusters}

    active = [s for s in stats if s.total_duration > 0]
    return [
        GoalDistributionItem(
            cluster_id=s.cluster_id,
            cluster_name=names.get(s.cluster_id, s.cluster_name),
            total_duration=s.total_duration,
            percentage=s.total_duration / total if total > 0 else 0.0,
            color=cluster_color(index),
        )
        for index, s in enumerate(active)
    ]


__all__ = [
    "ACTIVE_WITHIN_DAYS",
    "SLOWING_WITHIN_DAYS",
    "calculate_cluster_stats",
    "calculate_goal_distribution",
    "calculate_overview_stats",
    "health_status_for",
    "longest_streak",
    "sub_goal_details",
]
