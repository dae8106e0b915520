"""
SQLAlchemy models for AccessWatch.
"""
from accesswatch.models.base import Base, BaseModel, UTCDateTime, utc_now
from accesswatch.models.page import AuditCadence, Page
from accesswatch.models.audit import (
    AccessibilityScore,
    Audit,
    AuditComparison,
    AuditStatus,
    Issue,
    IssueCategory,
    IssueSeverity,
    ScoreDelta,
    Trend,
)

__all__ = [
    "Base",
    "BaseModel",
    "UTCDateTime",
    "utc_now",
    "AuditCadence",
    "Page",
    "AccessibilityScore",
    "Audit",
    "AuditComparison",
    "AuditStatus",
    "Issue",
    "IssueCategory",
    "IssueSeverity",
    "ScoreDelta",
    "Trend",
]
