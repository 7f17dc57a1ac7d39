"""Suggestions for linking goal-less entries to clusters."""

import logging
from datetime import tzinfo

from timelens.clock import local_date
from timelens.records.models import TimeEntry

from .clustering import match_event_to_cluster
from .models import GoalCluster, UnlinkedEventSuggestion
from .rounding import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTION_LIMIT = 10


def find_unlinked_event_suggestions(
    entries: list[TimeEntry],
    clusters: list[GoalCluster],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
    *,
    min_confidence: float = 0.0,
    tz: tzinfo | None = None,
) -> list[UnlinkedEventSuggestion]:
    """Rank orphan entries by how well they match a cluster.

    Args:
        entries: Entries in the analysis window
        clusters: Clusters to match against, in priority order
        limit: Maximum number of suggestions
        min_confidence: Extra floor applied after matching
        tz: Analysis timezone for the suggestion date

    Returns:
        Suggestions, most confident first
    """
    suggestions: list[UnlinkedEventSuggestion] = []

    for entry in entries:
        if not entry.is_eligible or entry.goal_id is not None:
            continue
        match = match_event_to_cluster(entry.activity, clusters)
        if match is None or match.confidence < min_confidence:
            continue
        suggestions.append(
            UnlinkedEventSuggestion(
                entry_id=entry.id,
                activity=entry.activity,
                date=local_date(entry.start_time, tz).isoformat(),
                duration=round_half_up(max(0.0, entry.duration_minutes)),
                suggested_cluster_id=match.cluster_id,
                suggested_cluster_name=match.cluster_name,
                confidence=match.confidence,
                keywords=match.keywords,
            )
        )

    suggestions.sort(key=lambda s: s.confidence, reverse=True)
    logger.debug("Found %d unlinked entry suggestions", len(suggestions))
    return suggestions[:limit]


__all__ = ["DEFAULT_SUGGESTION_LIMIT", "find_unlinked_event_suggestions"]
