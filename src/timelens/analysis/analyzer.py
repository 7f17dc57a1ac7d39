"""Goal analysis orchestrator.

Loads records from a RecordSource and runs clustering, statistics,
unlinked-entry matching and the optional trend series in one pass.
"""

import logging
from datetime import date, datetime, tzinfo
from zoneinfo import ZoneInfo

from timelens.clock import Clock, SystemClock, local_date
from timelens.config import CategoryConfig, TimelensConfig
from timelens.config.categories import DEFAULT_COLOR, CategoryRegistry
from timelens.records.models import Category, DateRange, Goal, TimeEntry
from timelens.storage.source import RecordSource

from .aggregator import (
    TrendSeries,
    aggregate_by_day_and_category,
    aggregate_by_day_and_cluster,
    aggregate_by_week_and_category,
    parse_week_start,
    process_entries,
    recent_weeks,
)
from .clustering import cluster_goals
from .matcher import find_unlinked_event_suggestions
from .models import ClusterSettings, GoalAnalysisResult
from .stats import calculate_cluster_stats, calculate_goal_distribution, calculate_overview_stats

logger = logging.getLogger(__name__)


class GoalAnalyzer:
    """Runs goal analysis against a record source.

    Analysis is read-only and deterministic for a given clock reading, so
    repeated calls over unchanged records give identical results.
    """

    def __init__(
        self,
        source: RecordSource,
        clock: Clock | None = None,
        config: TimelensConfig | None = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            source: Where entries, goals and categories are loaded from
            clock: Source of "now"; defaults to the system clock
            config: Analysis defaults and category display settings
        """
        self._config = config or TimelensConfig()
        self._tz: tzinfo | None = (
            ZoneInfo(self._config.analysis.timezone) if self._config.analysis.timezone else None
        )
        self._source = source
        self._clock = clock or SystemClock(self._tz)

    @property
    def timezone(self) -> tzinfo | None:
        return self._tz

    def default_range(self, now: datetime | None = None) -> DateRange:
        """Lookback window ending at the end of yesterday."""
        return DateRange.goal_analysis_default(
            now or self._clock.now(), self._config.analysis.lookback_days, self._tz
        )

    def default_settings(self) -> ClusterSettings:
        return ClusterSettings.from_name(self._config.analysis.sensitivity)

    def analyze(
        self,
        date_range: DateRange | None = None,
        settings: ClusterSettings | None = None,
        *,
        include_health: bool = True,
        include_trends: bool = False,
    ) -> GoalAnalysisResult:
        """Run a complete goal analysis.

        Args:
            date_range: Window to analyze; defaults to the lookback window
            settings: Clustering settings; defaults to the configured sensitivity
            include_health: Attach recency health to each cluster's stats
            include_trends: Also build daily category and cluster series

        Returns:
            GoalAnalysisResult with clusters sorted by total time

        Raises:
            PyMongoError: If loading from storage fails
        """
        now = self._clock.now()
        date_range = date_range or self.default_range(now)
        settings = settings or self.default_settings()
        tz = self._tz

        entries, goals, categories = self._load(date_range, include_trends)
        entries = [e for e in entries if e.is_eligible and date_range.contains(e.start_time)]
        goals = [g for g in goals if not g.deleted]

        clusters = cluster_goals(goals, settings)
        stats = [
            calculate_cluster_stats(
                cluster, entries, now=now if include_health else None, tz=tz
            )
            for cluster in clusters
        ]

        ranked = sorted(zip(clusters, stats), key=lambda pair: pair[1].total_duration, reverse=True)
        clusters = [cluster for cluster, _ in ranked]
        stats = [stat for _, stat in ranked]

        suggestions = find_unlinked_event_suggestions(
            entries, clusters, self._config.analysis.suggestion_limit, tz=tz
        )
        overview = calculate_overview_stats(entries, stats, date_range, tz)
        distribution = calculate_goal_distribution(stats, clusters)

        category_trend: TrendSeries | None = None
        cluster_trend: TrendSeries | None = None
        if include_trends:
            processed = process_entries(entries, goals, categories, tz=tz)
            today = local_date(now, tz)
            category_trend = aggregate_by_day_and_category(
                processed,
                date_range,
                today=today,
                registry=self._registry(categories),
                tz=tz,
            )
            cluster_trend = aggregate_by_day_and_cluster(
                processed, clusters, date_range, today=today, tz=tz
            )

        logger.info(
            "Analyzed %d entries and %d goals into %d clusters (%d suggestions)",
            len(entries),
            len(goals),
            len(clusters),
            len(suggestions),
        )

        return GoalAnalysisResult(
            clusters=clusters,
            stats=stats,
            unlinked_suggestions=suggestions,
            overview=overview,
            distribution=distribution,
            category_trend=category_trend,
            cluster_trend=cluster_trend,
        )

    def weekly_comparison(self, weeks: int = 3, reference: date | None = None) -> TrendSeries:
        """Category hours for the full weeks before the current one.

        Args:
            weeks: Number of previous weeks to compare
            reference: Day inside the current week; defaults to today

        Returns:
            TrendSeries with one bucket per week, oldest first

        Raises:
            ValueError: If the configured week start is unknown
        """
        now = self._clock.now()
        today = local_date(now, self._tz)
        week_start = parse_week_start(self._config.analysis.week_starts_on)
        spans = recent_weeks(reference or today, weeks, week_start)

        date_range = DateRange.for_dates(spans[0].start, spans[-1].end, self._tz)
        entries, goals, categories = self._load(date_range, True)
        processed = process_entries(entries, goals, categories, tz=self._tz)

        return aggregate_by_week_and_category(
            processed,
            weeks=spans,
            today=today,
            registry=self._registry(categories),
            tz=self._tz,
        )

    def _load(
        self, date_range: DateRange, with_categories: bool
    ) -> tuple[list[TimeEntry], list[Goal], list[Category]]:
        try:
            entries = self._source.load_entries(date_range)
            goals = self._source.load_goals()
            categories = self._source.load_categories() if with_categories else []
        except Exception as e:
            logger.error("Failed to load records for analysis: %s", str(e))
            raise
        return entries, goals, categories

    def _registry(self, categories: list[Category]) -> CategoryRegistry:
        """Configured display settings, extended with stored categories."""
        merged = dict(self._config.categories)
        for category in categories:
            if category.id not in merged:
                merged[category.id] = CategoryConfig(
                    category.id, category.name, DEFAULT_COLOR, category.order
                )
        return CategoryRegistry(merged)


def analyze_goals(
    source: RecordSource,
    date_range: DateRange | None = None,
    settings: ClusterSettings | None = None,
    *,
    clock: Clock | None = None,
    config: TimelensConfig | None = None,
    include_health: bool = True,
    include_trends: bool = False,
) -> GoalAnalysisResult:
    """Convenience wrapper around GoalAnalyzer.analyze."""
    analyzer = GoalAnalyzer(source, clock=clock, config=config)
    return analyzer.analyze(
        date_range,
        settings,
        include_health=include_health,
        include_trends=include_trends,
    )


__all__ = ["GoalAnalyzer", "analyze_goals"]
