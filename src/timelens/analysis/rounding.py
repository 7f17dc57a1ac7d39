"""Half-up rounding for reported durations.

Halves always round up (2.5 minutes is 3, 15 minutes is 0.3 hours), unlike
the built-in round(), which rounds halves to even.
"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves up."""
    return math.floor(value + 0.5)


def to_hours(minutes: float) -> float:
    """Minutes as hours rounded half-up to one decimal."""
    return math.floor(minutes / 60 * 10 + 0.5) / 10


__all__ = ["round_half_up", "to_hours"]
