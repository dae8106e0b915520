"""
Base model mixins for AccessWatch.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


def utc_now() -> datetime:
    """Default clock: timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """DateTime that always hands back timezone-aware UTC values.

    SQLite drops tzinfo on the way in; values are normalised to UTC before
    binding and re-tagged as UTC on the way out.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class IDMixin:
    """Mixin for storage-assigned integer primary key."""

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)


class CreatedAtMixin:
    """Mixin for an immutable created_at timestamp."""

    created_at = Column(UTCDateTime(), default=utc_now, nullable=False)


class TimestampMixin(CreatedAtMixin):
    """Mixin for created_at and updated_at timestamps."""

    updated_at = Column(UTCDateTime(), default=utc_now, onupdate=utc_now, nullable=False)


class BaseModel(IDMixin, CreatedAtMixin):
    """Base model with integer ID and creation timestamp."""

    __abstract__ = True
