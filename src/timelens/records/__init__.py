"""Records module for Timelens.

Provides the time-entry, goal and category records read from storage.
"""

from .models import Category, DateRange, Goal, ProcessedEntry, TimeEntry

__all__ = [
    "Category",
    "DateRange",
    "Goal",
    "ProcessedEntry",
    "TimeEntry",
]
