"""Timelens - goal analytics for personal time tracking.

Timelens reads time entries and free-text daily goals and provides:
- Goal clustering by token overlap, with user rules
- Per-cluster engagement statistics and recency health
- Suggestions for linking goal-less entries to clusters
- Day and week time-allocation series that account for every hour

Usage:
    python -m timelens --profile dev
    python -m timelens --days 14 --json
"""

__version__ = "0.1.0"

from .analysis import GoalAnalyzer, analyze_goals, cluster_goals, summarize_analysis
from .config import TimelensConfig
from .config.loader import load_config

__all__ = [
    "GoalAnalyzer",
    "TimelensConfig",
    "__version__",
    "analyze_goals",
    "cluster_goals",
    "load_config",
    "summarize_analysis",
]
