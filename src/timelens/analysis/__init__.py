"""Goal analysis module for Timelens.

Clusters free-text goals, measures engagement per cluster, suggests goal
links for orphan entries and builds calendar-aligned time-allocation series.
"""

from .aggregator import (
    UNCATEGORIZED,
    BucketSpan,
    CategorySeries,
    ClusterSeries,
    SeriesKey,
    TrendBucket,
    TrendSeries,
    aggregate_by_day_and_category,
    aggregate_by_day_and_cluster,
    aggregate_by_week_and_category,
    aggregate_by_week_and_cluster,
    process_entries,
    recent_weeks,
    week_spans,
)
from .analyzer import GoalAnalyzer, analyze_goals
from .breakdown import (
    AnalysisMetrics,
    ChartDataPoint,
    calculate_metrics,
    group_by_category,
    group_by_day,
    group_by_goal,
    group_by_hour,
    group_by_weekday,
)
from .clustering import cluster_goals, match_event_to_cluster
from .matcher import find_unlinked_event_suggestions
from .models import (
    ClusterRule,
    ClusterSettings,
    ClusterStats,
    GoalAnalysisResult,
    GoalCluster,
    GoalDistributionItem,
    HealthStatus,
    HealthSummary,
    OverviewStats,
    Sensitivity,
    SubGoalDetail,
    UnlinkedEventSuggestion,
)
from .rounding import round_half_up, to_hours
from .stats import (
    calculate_cluster_stats,
    calculate_goal_distribution,
    calculate_overview_stats,
    sub_goal_details,
)
from .summary import format_duration, format_hours, relative_time_description, summarize_analysis
from .tokenizer import jaccard_similarity, similarity, tokenize

__all__ = [
    # Models
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
    # Tokenizer
    "jaccard_similarity",
    "similarity",
    "tokenize",
    # Clustering and stats
    "cluster_goals",
    "match_event_to_cluster",
    "calculate_cluster_stats",
    "calculate_goal_distribution",
    "calculate_overview_stats",
    "sub_goal_details",
    "find_unlinked_event_suggestions",
    # Trends
    "UNCATEGORIZED",
    "BucketSpan",
    "CategorySeries",
    "ClusterSeries",
    "SeriesKey",
    "TrendBucket",
    "TrendSeries",
    "aggregate_by_day_and_category",
    "aggregate_by_day_and_cluster",
    "aggregate_by_week_and_category",
    "aggregate_by_week_and_cluster",
    "process_entries",
    "recent_weeks",
    "week_spans",
    # Breakdowns
    "AnalysisMetrics",
    "ChartDataPoint",
    "calculate_metrics",
    "group_by_category",
    "group_by_day",
    "group_by_goal",
    "group_by_hour",
    "group_by_weekday",
    # Orchestration and summaries
    "GoalAnalyzer",
    "analyze_goals",
    "format_duration",
    "format_hours",
    "relative_time_description",
    "round_half_up",
    "summarize_analysis",
    "to_hours",
]
