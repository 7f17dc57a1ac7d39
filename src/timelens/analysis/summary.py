"""Natural language summaries of goal analysis.

The chat assistant embeds these in its prompt instead of raw numbers.
"""

import logging
from datetime import datetime, tzinfo

from timelens.clock import local_date
from timelens.records.models import DateRange

from .models import GoalAnalysisResult
from .rounding import round_half_up, to_hours

logger = logging.getLogger(__name__)


def format_duration(minutes: float) -> str:
    """Format minutes as e.g. "2 hours and 15 minutes"."""
    total = round_half_up(minutes)
    hours = total // 60
    mins = total % 60

    if hours > 0 and mins > 0:
        return f"{hours} hour{'s' if hours > 1 else ''} and {mins} minute{'s' if mins > 1 else ''}"
    if hours > 0:
        return f"{hours} hour{'s' if hours > 1 else ''}"
    return f"{mins} minute{'s' if mins != 1 else ''}"


def format_hours(minutes: float) -> str:
    """Format minutes as decimal hours, e.g. "2.5h"."""
    return f"{to_hours(minutes)}h"


def relative_time_description(
    when: datetime | None, now: datetime, tz: tzinfo | None = None
) -> str:
    """Describe how long ago something happened ("today", "3 days ago")."""
    if when is None:
        return "never"

    days = (local_date(now, tz) - local_date(when, tz)).days
    if days <= 0:
        return "today"
    if days == 1:
        return "yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        weeks = days // 7
        return f"{weeks} week{'s' if weeks > 1 else ''} ago"
    months = days // 30
    return f"{months} month{'s' if months > 1 else ''} ago"


def _join(parts: list[str]) -> str:
    if len(parts) == 1:
        return parts[0]
    if len(parts) == 2:
        return f"{parts[0]} and {parts[1]}"
    return f"{', '.join(parts[:-1])}, and {parts[-1]}"


def summarize_analysis(
    result: GoalAnalysisResult,
    date_range: DateRange | None = None,
    top: int = 3,
) -> str:
    """Summarize an analysis in a few sentences.

    Args:
        result: Output of GoalAnalyzer.analyze
        date_range: Window the analysis covered, for the opening phrase
        top: Number of clusters to name

    Returns:
        Plain-text summary
    """
    overview = result.overview
    if overview.total_duration <= 0:
        return "I don't have any goal-linked time in this period yet."

    period = (
        f"Between {date_range.start:%b %d} and {date_range.end:%b %d}"
        if date_range is not None
        else "In this period"
    )
    coverage = round_half_up(overview.goal_coverage_rate * 100)
    sentences = [
        f"{period} you spent {format_duration(overview.total_duration)} on goals "
        f"({coverage}% of tracked time) across {overview.active_clusters} active "
        f"goal group{'s' if overview.active_clusters != 1 else ''}."
    ]

    leaders = [
        f"{item.cluster_name} ({format_duration(item.total_duration)})"
        for item in result.distribution[:top]
    ]
    if leaders:
        sentences.append(f"Most time went to {_join(leaders)}.")

    health = result.health_summary
    warnings = []
    if health.slowing:
        warnings.append(f"{health.slowing} slowing")
    if health.stalled:
        warnings.append(f"{health.stalled} stalled")
    if warnings:
        sentences.append(f"Goal groups needing attention: {_join(warnings)}.")

    if result.unlinked_suggestions:
        count = len(result.unlinked_suggestions)
        noun, verb = ("entries", "look") if count > 1 else ("entry", "looks")
        sentences.append(f"{count} {noun} without a goal {verb} related to one of your goals.")

    return " ".join(sentences)


__all__ = [
    "format_duration",
    "format_hours",
    "relative_time_description",
    "summarize_analysis",
]
