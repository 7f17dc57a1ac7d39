"""Data models for goal analysis.

Defines clustering settings, clusters, per-cluster statistics, unlinked-entry
suggestions and the composed analysis result.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from timelens.records.models import Goal

if TYPE_CHECKING:
    from .aggregator import TrendSeries


class Sensitivity(Enum):
    """How eagerly automatic clustering merges goals."""

    LOOSE = "loose"
    STANDARD = "standard"
    STRICT = "strict"

    @property
    def threshold(self) -> float:
        return SIMILARITY_THRESHOLDS[self]


SIMILARITY_THRESHOLDS: dict[Sensitivity, float] = {
    Sensitivity.LOOSE: 0.2,
    Sensitivity.STANDARD: 0.35,
    Sensitivity.STRICT: 0.5,
}


class HealthStatus(Enum):
    """Recency label for a cluster."""

    ACTIVE = "active"
    SLOWING = "slowing"
    STALLED = "stalled"


@dataclass
class ClusterRule:
    """User rule grouping goals whose names contain any keyword."""

    id: str
    name: str
    keywords: list[str]
    priority: int = 0


@dataclass
class ClusterSettings:
    """Clustering configuration."""

    sensitivity: Sensitivity = Sensitivity.STANDARD
    rules: list[ClusterRule] = field(default_factory=list)

    @property
    def threshold(self) -> float:
        return self.sensitivity.threshold

    @classmethod
    def from_name(
        cls, sensitivity: str, rules: list[ClusterRule] | None = None
    ) -> "ClusterSettings":
        """Build settings from a sensitivity name such as "strict".

        Raises:
            ValueError: If the name is not loose, standard or strict
        """
        return cls(sensitivity=Sensitivity(sensitivity.lower()), rules=rules or [])


DEFAULT_CLUSTER_SETTINGS = ClusterSettings()


@dataclass
class GoalCluster:
    """Goals considered the same underlying intent."""

    id: str
    name: str
    keywords: list[str]
    goal_ids: list[str]
    goals: list[Goal]
    is_manual: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "keywords": list(self.keywords),
            "goal_ids": list(self.goal_ids),
            "is_manual": self.is_manual,
        }


@dataclass
class ClusterStats:
    """Engagement metrics for one cluster."""

    cluster_id: str
    cluster_name: str
    total_duration: int  # minutes
    active_days: int
    avg_daily_duration: int  # minutes per active day
    first_active_date: datetime | None
    last_active_date: datetime | None
    longest_streak: int
    entry_count: int
    health_status: HealthStatus | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "cluster_id": self.cluster_id,
            "cluster_name": self.cluster_name,
            "total_duration": self.total_duration,
            "active_days": self.active_days,
            "avg_daily_duration": self.avg_daily_duration,
            "first_active_date": _iso(self.first_active_date),
            "last_active_date": _iso(self.last_active_date),
            "longest_streak": self.longest_streak,
            "entry_count": self.entry_count,
            "health_status": self.health_status.value if self.health_status else None,
        }


@dataclass
class UnlinkedEventSuggestion:
    """A goal-less entry that probably belongs to a cluster."""

    entry_id: str
    activity: str
    date: str  # YYYY-MM-DD
    duration: int  # minutes
    suggested_cluster_id: str
    suggested_cluster_name: str
    confidence: float
    keywords: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "entry_id": self.entry_id,
            "activity": self.activity,
            "date": self.date,
            "duration": self.duration,
            "suggested_cluster_id": self.suggested_cluster_id,
            "suggested_cluster_name": self.suggested_cluster_name,
            "confidence": self.confidence,
            "keywords": list(self.keywords),
        }


@dataclass
class OverviewStats:
    """Goal-linked time across the whole analysis window."""

    total_duration: int
    daily_avg_duration: int
    goal_coverage_rate: float
    active_clusters: int
    total_entries: int
    days_in_range: int


@dataclass
class GoalDistributionItem:
    """Share of goal-linked time spent in one cluster."""

    cluster_id: str
    cluster_name: str
    total_duration: int
    percentage: float  # 0-1
    color: str


@dataclass
class SubGoalDetail:
    """Per-goal time inside an expanded cluster."""

    goal_id: str
    goal_name: str
    date: str
    duration: int
    entry_count: int


@dataclass
class HealthSummary:
    """Counts of clusters per health status."""

    active: int = 0
    slowing: int = 0
    stalled: int = 0


@dataclass
class GoalAnalysisResult:
    """Everything the goal dashboard and chat need from one analysis."""

    clusters: list[GoalCluster]
    stats: list[ClusterStats]
    unlinked_suggestions: list[UnlinkedEventSuggestion]
    overview: OverviewStats
    distribution: list[GoalDistributionItem]
    category_trend: "TrendSeries | None" = None
    cluster_trend: "TrendSeries | None" = None

    @property
    def health_summary(self) -> HealthSummary:
        summary = HealthSummary()
        for stat in self.stats:
            if stat.health_status is HealthStatus.ACTIVE:
                summary.active += 1
            elif stat.health_status is HealthStatus.SLOWING:
                summary.slowing += 1
            elif stat.health_status is HealthStatus.STALLED:
                summary.stalled += 1
        return summary

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation with stable ordering."""
        return {
            "clusters": [c.to_dict() for c in self.clusters],
            "stats": [s.to_dict() for s in self.stats],
            "unlinked_suggestions": [s.to_dict() for s in self.unlinked_suggestions],
            "overview": vars(self.overview).copy(),
            "distribution": [vars(d).copy() for d in self.distribution],
            "category_trend": self.category_trend.to_dict() if self.category_trend else None,
            "cluster_trend": self.cluster_trend.to_dict() if self.cluster_trend else None,
        }


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


__all__ = [
    "DEFAULT_CLUSTER_SETTINGS",
    "SIMILARITY_THRESHOLDS",
    "ClusterRule",
    "ClusterSettings",
    "ClusterStats",
    "GoalAnalysisResult",
    "GoalCluster",
    "GoalDistributionItem",
    "HealthStatus",
    "HealthSummary",
    "OverviewStats",
    "Sensitivity",
    "SubGoalDetail",
    "UnlinkedEventSuggestion",
]
