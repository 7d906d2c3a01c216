"""
Base model configuration for SQLAlchemy ORM.

Provides the declarative base and the mixins shared by every billing
table: a string UUID primary key and created/updated timestamps.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from school_billing.utils.datetime_utils import DateTimeHelper


class Base(DeclarativeBase):
    """Root SQLAlchemy base class."""
    pass


class UUIDMixin:
    """Mixin for UUID primary key stored as text."""

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
        comment="Primary key (UUID)",
    )


class TimestampMixin:
    """
    Mixin for timestamp tracking.

    Timestamps are naive UTC, set on the Python side so ordering is
    deterministic across database backends.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=DateTimeHelper.utc_now,
        index=True,
        comment="Record creation timestamp (UTC)",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=DateTimeHelper.utc_now,
        onupdate=DateTimeHelper.utc_now,
        comment="Record last update timestamp (UTC)",
    )


class BaseModel(Base, UUIDMixin, TimestampMixin):
    """Abstract base for billing entities."""

    __abstract__ = True

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"
