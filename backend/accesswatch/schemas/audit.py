"""
Audit schemas.
"""
from datetime import datetime

from accesswatch.models.audit import AuditStatus, IssueCategory, IssueSeverity, Trend
from accesswatch.schemas.common import BaseSchema, IDSchema


class IssueResponse(IDSchema):
    """Accessibility issue response."""

    audit_id: int
    severity: IssueSeverity
    category: IssueCategory
    check_id: str | None
    title: str
    description: str
    element_selector: str | None
    help_url: str | None
    created_at: datetime


class AuditResponse(IDSchema):
    """Audit response, with the issues found."""

    page_id: int
    score: int
    status: AuditStatus
    audit_date: datetime
    error_message: str | None
    retry_count: int
    created_at: datetime
    issues: list[IssueResponse] = []


class AuditComparisonResponse(IDSchema):
    """Comparison between an audit and the page's previous audit."""

    current_audit_id: int
    previous_audit_id: int
    score_delta: int
    new_issues_count: int
    resolved_issues_count: int
    persistent_issues_count: int
    trend: Trend
    created_at: datetime


class ScorePoint(BaseSchema):
    """One point of a score time series."""

    score: int
    date: str


class TrendSummary(BaseSchema):
    """Score history summary for a page."""

    total_audits: int
    latest_score: int | None
    latest_grade: str | None
    average_score: int
    trend: Trend
    series: list[ScorePoint]
