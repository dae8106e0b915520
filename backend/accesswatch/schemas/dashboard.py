"""
Dashboard schemas.
"""
from datetime import datetime

from accesswatch.schemas.common import BaseSchema


class ScoreDistribution(BaseSchema):
    """Pages bucketed by the grade of their latest score."""

    excellent: int = 0
    good: int = 0
    needs_work: int = 0
    poor: int = 0


class DashboardSummary(BaseSchema):
    """Overall dashboard statistics."""

    total_pages: int
    total_audits: int
    average_score: int
    pages_needing_attention: int
    score_distribution: ScoreDistribution


class PageSummary(BaseSchema):
    """Page-level dashboard row."""

    page_id: int
    name: str
    url: str
    latest_score: int | None
    latest_audit_date: datetime | None
    total_audits: int
    cadence: str
    enabled: bool
