"""Unit tests for natural language analysis summaries."""

from datetime import date, timedelta

import pytest
from conftest import NOW

from timelens.analysis.models import (
    ClusterStats,
    GoalAnalysisResult,
    GoalDistributionItem,
    HealthStatus,
    OverviewStats,
    UnlinkedEventSuggestion,
)
from timelens.analysis.summary import (
    format_duration,
    format_hours,
    relative_time_description,
    summarize_analysis,
)
from timelens.records.models import DateRange


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        ("minutes", "expected"),
        [
            (0, "0 minutes"),
            (1, "1 minute"),
            (45, "45 minutes"),
            (60, "1 hour"),
            (61, "1 hour and 1 minute"),
            (135, "2 hours and 15 minutes"),
            (180, "3 hours"),
        ],
    )
    def test_format(self, minutes: int, expected: str) -> None:
        """Test human readable durations."""
        assert format_duration(minutes) == expected

    def test_format_hours(self) -> None:
        """Test decimal hour formatting."""
        assert format_hours(150) == "2.5h"


class TestRelativeTime:
    """Tests for relative_time_description."""

    @pytest.mark.parametrize(
        ("days_ago", "expected"),
        [
            (0, "today"),
            (1, "yesterday"),
            (3, "3 days ago"),
            (7, "1 week ago"),
            (20, "2 weeks ago"),
            (65, "2 months ago"),
        ],
    )
    def test_description(self, days_ago: int, expected: str) -> None:
        """Test recency phrases."""
        assert relative_time_description(NOW - timedelta(days=days_ago), NOW) == expected

    def test_never(self) -> None:
        """Test missing timestamps read as never."""
        assert relative_time_description(None, NOW) == "never"


class TestSummarizeAnalysis:
    """Tests for summarize_analysis."""

    def _result(self, total: int = 300) -> GoalAnalysisResult:
        stats = [
            ClusterStats("a", "写论文", 240, 3, 80, None, None, 2, 4, HealthStatus.ACTIVE),
            ClusterStats("b", "健身", 60, 1, 60, None, None, 1, 1, HealthStatus.STALLED),
        ]
        return GoalAnalysisResult(
            clusters=[],
            stats=stats,
            unlinked_suggestions=[
                UnlinkedEventSuggestion(
                    "e9", "写论文", "2024-03-02", 30, "a", "写论文", 0.5, []
                )
            ],
            overview=OverviewStats(total, 10, 0.5, 2, 6, 30),
            distribution=[
                GoalDistributionItem("a", "写论文", 240, 0.8, "#3b82f6"),
                GoalDistributionItem("b", "健身", 60, 0.2, "#10b981"),
            ],
        )

    def test_empty(self) -> None:
        """Test a window without goal time."""
        summary = summarize_analysis(self._result(total=0))
        assert "don't have any goal-linked time" in summary

    def test_summary_sentences(self) -> None:
        """Test totals, leaders, health and suggestions are mentioned."""
        date_range = DateRange.for_dates(date(2024, 3, 1), date(2024, 3, 30))

        summary = summarize_analysis(self._result(), date_range)

        assert summary.startswith("Between Mar 01 and Mar 30 you spent 5 hours on goals")
        assert "(50% of tracked time)" in summary
        assert "across 2 active goal groups" in summary
        assert "写论文 (4 hours) and 健身 (1 hour)" in summary
        assert "1 stalled" in summary
        assert "1 entry without a goal" in summary
