"""MongoDB storage module for Timelens.

Provides read access to time entries, goals and categories, plus the
RecordSource protocol the analysis engine loads through.
"""

from .client import MongoStorageClient, retry_on_connection_failure
from .repositories import CategoryRepository, GoalRepository, TimeEntryRepository
from .source import InMemoryRecordSource, MongoRecordSource, RecordSource

__all__ = [
    "MongoStorageClient",
    "retry_on_connection_failure",
    "TimeEntryRepository",
    "GoalRepository",
    "CategoryRepository",
    "RecordSource",
    "MongoRecordSource",
    "InMemoryRecordSource",
]
