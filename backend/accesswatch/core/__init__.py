"""
Core utilities for AccessWatch.
"""
from accesswatch.core.exceptions import (
    AccessWatchError,
    InvalidScoreError,
    NotFoundError,
    RateLimitedError,
    ScoringApiError,
)

__all__ = [
    "AccessWatchError",
    "InvalidScoreError",
    "NotFoundError",
    "RateLimitedError",
    "ScoringApiError",
]
