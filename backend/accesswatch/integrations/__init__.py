"""
External service integrations for AccessWatch.

- pagespeed: Google PageSpeed Insights accessibility scoring
"""

from accesswatch.integrations.pagespeed import FailingCheck, PageSpeedClient, ScoringResult

__all__ = [
    "FailingCheck",
    "PageSpeedClient",
    "ScoringResult",
]
