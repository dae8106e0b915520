"""
Pydantic schemas for AccessWatch.
"""
from accesswatch.schemas.common import BaseSchema, IDSchema
from accesswatch.schemas.audit import (
    AuditComparisonResponse,
    AuditResponse,
    IssueResponse,
    ScorePoint,
    TrendSummary,
)
from accesswatch.schemas.dashboard import DashboardSummary, PageSummary, ScoreDistribution

__all__ = [
    "BaseSchema",
    "IDSchema",
    "AuditComparisonResponse",
    "AuditResponse",
    "IssueResponse",
    "ScorePoint",
    "TrendSummary",
    "DashboardSummary",
    "PageSummary",
    "ScoreDistribution",
]
