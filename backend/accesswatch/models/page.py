"""
Page model for monitored URLs.

Pages are owned by the management layer; the audit engine only reads them
and stamps ``last_audited_at`` after a successful run.
"""
from datetime import timedelta
from enum import Enum as PyEnum

from sqlalchemy import Boolean, Column, Enum, String
from sqlalchemy.orm import relationship

from accesswatch.models.base import Base, BaseModel, TimestampMixin, UTCDateTime


class AuditCadence(str, PyEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"

    @property
    def label(self) -> str:
        match self:
            case AuditCadence.DAILY:
                return "Daily"
            case AuditCadence.WEEKLY:
                return "Weekly"
            case AuditCadence.BIWEEKLY:
                return "Biweekly"
            case AuditCadence.MONTHLY:
                return "Monthly"

    @property
    def interval_hours(self) -> int:
        match self:
            case AuditCadence.DAILY:
                return 24
            case AuditCadence.WEEKLY:
                return 168
            case AuditCadence.BIWEEKLY:
                return 336
            case AuditCadence.MONTHLY:
                return 720

    @property
    def interval(self) -> timedelta:
        return timedelta(hours=self.interval_hours)


class Page(Base, BaseModel, TimestampMixin):
    """A URL registered for recurring accessibility audits."""

    __tablename__ = "pages"

    url = Column(String(2048), nullable=False)
    name = Column(String(255), nullable=True)
    cadence = Column(
        Enum(AuditCadence),
        default=AuditCadence.WEEKLY,
        nullable=False,
    )
    enabled = Column(Boolean, default=True, nullable=False, index=True)
    last_audited_at = Column(UTCDateTime(), nullable=True)

    # Relationships
    audits = relationship("Audit", back_populates="page", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Page {self.id} {self.url} ({self.cadence.value})>"
