"""
Audit models for accessibility scoring results.
"""
from dataclasses import dataclass
from enum import Enum as PyEnum

from sqlalchemy import Column, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship, validates

from accesswatch.core.exceptions import InvalidScoreError
from accesswatch.models.base import Base, BaseModel, UTCDateTime, utc_now


class AuditStatus(str, PyEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def label(self) -> str:
        match self:
            case AuditStatus.PENDING:
                return "Pending"
            case AuditStatus.IN_PROGRESS:
                return "In Progress"
            case AuditStatus.COMPLETED:
                return "Completed"
            case AuditStatus.FAILED:
                return "Failed"

    @property
    def is_terminal(self) -> bool:
        match self:
            case AuditStatus.COMPLETED | AuditStatus.FAILED:
                return True
            case AuditStatus.PENDING | AuditStatus.IN_PROGRESS:
                return False


class IssueSeverity(str, PyEnum):
    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"

    @property
    def label(self) -> str:
        match self:
            case IssueSeverity.CRITICAL:
                return "Critical"
            case IssueSeverity.SERIOUS:
                return "Serious"
            case IssueSeverity.MODERATE:
                return "Moderate"
            case IssueSeverity.MINOR:
                return "Minor"

    @property
    def weight(self) -> int:
        match self:
            case IssueSeverity.CRITICAL:
                return 4
            case IssueSeverity.SERIOUS:
                return 3
            case IssueSeverity.MODERATE:
                return 2
            case IssueSeverity.MINOR:
                return 1


class IssueCategory(str, PyEnum):
    COLOR_CONTRAST = "color_contrast"
    ARIA = "aria"
    FORMS = "forms"
    IMAGES = "images"
    NAVIGATION = "navigation"
    TABLES = "tables"
    OTHER = "other"

    @property
    def label(self) -> str:
        match self:
            case IssueCategory.COLOR_CONTRAST:
                return "Color Contrast"
            case IssueCategory.ARIA:
                return "ARIA"
            case IssueCategory.FORMS:
                return "Forms"
            case IssueCategory.IMAGES:
                return "Images"
            case IssueCategory.NAVIGATION:
                return "Navigation"
            case IssueCategory.TABLES:
                return "Tables"
            case IssueCategory.OTHER:
                return "Other"


class Trend(str, PyEnum):
    IMPROVING = "improving"
    DEGRADING = "degrading"
    STABLE = "stable"

    @property
    def label(self) -> str:
        match self:
            case Trend.IMPROVING:
                return "Improving"
            case Trend.DEGRADING:
                return "Degrading"
            case Trend.STABLE:
                return "Stable"

    @classmethod
    def from_delta(cls, delta: int) -> "Trend":
        if delta > 0:
            return cls.IMPROVING
        if delta < 0:
            return cls.DEGRADING
        return cls.STABLE


@dataclass(frozen=True)
class AccessibilityScore:
    """Accessibility score in the closed range 0-100."""

    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidScoreError(self.value)
        if self.value < 0 or self.value > 100:
            raise InvalidScoreError(self.value)

    def delta(self, previous: "AccessibilityScore") -> int:
        return self.value - previous.value

    def grade(self) -> str:
        if self.value >= 90:
            return "Excellent"
        if self.value >= 70:
            return "Good"
        if self.value >= 50:
            return "Needs Improvement"
        return "Poor"


@dataclass(frozen=True)
class ScoreDelta:
    """Signed difference between two scores."""

    value: int

    @property
    def is_improvement(self) -> bool:
        return self.value > 0

    @property
    def is_degradation(self) -> bool:
        return self.value < 0

    @property
    def is_stable(self) -> bool:
        return self.value == 0

    @property
    def absolute_value(self) -> int:
        return abs(self.value)

    @property
    def direction_label(self) -> str:
        if self.value > 0:
            return f"+{self.value}"
        return str(self.value)


class Audit(Base, BaseModel):
    """One scoring attempt for one page."""

    __tablename__ = "audits"

    page_id = Column(
        Integer,
        ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    score = Column(Integer, default=0, nullable=False)
    status = Column(
        Enum(AuditStatus),
        default=AuditStatus.PENDING,
        nullable=False,
    )
    audit_date = Column(UTCDateTime(), default=utc_now, nullable=False, index=True)
    raw_response = Column(Text, nullable=True)
    error_message = Column(Text, nullable=True)
    retry_count = Column(Integer, default=0, nullable=False)

    # Relationships
    page = relationship("Page", back_populates="audits")
    issues = relationship(
        "Issue",
        back_populates="audit",
        cascade="all, delete-orphan",
        order_by="Issue.id",
    )

    @validates("score")
    def validate_score(self, key, value):
        return AccessibilityScore(value).value

    @validates("retry_count")
    def validate_retry_count(self, key, value):
        if value < 0:
            raise ValueError("retry_count cannot be negative")
        return value

    @property
    def accessibility_score(self) -> AccessibilityScore:
        return AccessibilityScore(self.score)

    def increment_retry_count(self) -> None:
        self.retry_count = (self.retry_count or 0) + 1

    def __repr__(self) -> str:
        return f"<Audit {self.id} page={self.page_id} ({self.status.value})>"


class Issue(Base, BaseModel):
    """One accessibility finding attached to an audit."""

    __tablename__ = "issues"

    audit_id = Column(
        Integer,
        ForeignKey("audits.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    severity = Column(Enum(IssueSeverity), nullable=False)
    category = Column(Enum(IssueCategory), nullable=False)
    check_id = Column(String(255), nullable=True)
    sub_score = Column(Float, nullable=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    element_selector = Column(Text, nullable=True)
    help_url = Column(String(2048), nullable=True)

    # Relationships
    audit = relationship("Audit", back_populates="issues")

    def __repr__(self) -> str:
        return f"<Issue {self.title[:30]}... ({self.severity.value})>"


class AuditComparison(Base, BaseModel):
    """Diff between a completed audit and the page's previous one."""

    __tablename__ = "audit_comparisons"

    current_audit_id = Column(
        Integer,
        ForeignKey("audits.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    previous_audit_id = Column(
        Integer,
        ForeignKey("audits.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    score_delta = Column(Integer, nullable=False)
    new_issues_count = Column(Integer, default=0, nullable=False)
    resolved_issues_count = Column(Integer, default=0, nullable=False)
    persistent_issues_count = Column(Integer, default=0, nullable=False)
    trend = Column(Enum(Trend), nullable=False)

    # Relationships
    current_audit = relationship("Audit", foreign_keys=[current_audit_id])
    previous_audit = relationship("Audit", foreign_keys=[previous_audit_id])

    @property
    def delta(self) -> ScoreDelta:
        return ScoreDelta(self.score_delta)

    def __repr__(self) -> str:
        return f"<AuditComparison {self.current_audit_id} vs {self.previous_audit_id} ({self.trend.value})>"
