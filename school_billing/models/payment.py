"""
Payment model.

A payment is created pending when a payment flow starts and moved to
succeeded/failed by the gateway callback. Amounts are integer cents.
"""

from datetime import date as Date
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Column,
    Date as SQLDate,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_billing.core.money import Money
from school_billing.models.base import Base, BaseModel
from school_billing.schemas.common.enums import PaymentStatus, PaymentType

if TYPE_CHECKING:
    from school_billing.models.family import Student


payment_students = Table(
    "payment_students",
    Base.metadata,
    Column("payment_id", ForeignKey("payments.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
)


class Payment(BaseModel):
    """Payment attempt for one family covering zero or more students."""

    __tablename__ = "payments"
    __table_args__ = (
        Index("ix_payments_family_type_status", "family_id", "type", "status"),
    )

    family_id: Mapped[str] = mapped_column(
        ForeignKey("families.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    type: Mapped[PaymentType] = mapped_column(
        Enum(PaymentType, name="payment_type_enum", native_enum=False),
        nullable=False,
    )
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, name="payment_status_enum", native_enum=False),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    subtotal_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    discount_code_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("discount_codes.id", ondelete="SET NULL"),
        nullable=True,
    )
    discount_amount_cents: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    total_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    payment_date: Mapped[Optional[Date]] = mapped_column(
        SQLDate,
        nullable=True,
        index=True,
        comment="Date the payment succeeded",
    )

    students: Mapped[List["Student"]] = relationship(secondary=payment_students)

    @property
    def student_ids(self) -> frozenset:
        return frozenset(student.id for student in self.students)

    @property
    def subtotal_amount(self) -> Money:
        return Money(self.subtotal_amount_cents, self.currency)

    @property
    def discount_amount(self) -> Optional[Money]:
        if self.discount_amount_cents is None:
            return None
        return Money(self.discount_amount_cents, self.currency)

    @property
    def total_amount(self) -> Money:
        return Money(self.total_amount_cents, self.currency)
