"""
Discount code and usage ledger models.

`discount_value` is a percentage for percentage codes and a major-unit
amount for fixed-amount codes; the schema layer turns it into a tagged
DiscountValue so callers never inspect the raw column.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from school_billing.models.base import BaseModel
from school_billing.schemas.common.enums import (
    DiscountScope,
    DiscountType,
    UsageType,
)
from school_billing.utils.datetime_utils import DateTimeHelper


class DiscountCode(BaseModel):
    __tablename__ = "discount_codes"

    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    discount_type: Mapped[DiscountType] = mapped_column(
        Enum(DiscountType, name="discount_type_enum", native_enum=False),
        nullable=False,
    )
    discount_value: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    usage_type: Mapped[UsageType] = mapped_column(
        Enum(UsageType, name="usage_type_enum", native_enum=False),
        nullable=False,
        default=UsageType.ONGOING,
    )
    max_uses: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    current_uses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    scope: Mapped[DiscountScope] = mapped_column(
        Enum(DiscountScope, name="discount_scope_enum", native_enum=False),
        nullable=False,
        default=DiscountScope.PER_FAMILY,
    )
    applicable_to: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="PaymentType values this code may be used against",
    )

    family_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("families.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
        comment="NULL means the code is global",
    )
    student_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    valid_from: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    valid_until: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)


class DiscountCodeUsage(BaseModel):
    """One redemption of a discount code against a payment."""

    __tablename__ = "discount_code_usage"

    discount_code_id: Mapped[str] = mapped_column(
        ForeignKey("discount_codes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    payment_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("payments.id", ondelete="SET NULL"),
        nullable=True,
    )
    family_id: Mapped[str] = mapped_column(
        ForeignKey("families.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("students.id", ondelete="SET NULL"),
        nullable=True,
    )
    discount_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    original_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    final_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    used_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=DateTimeHelper.utc_now,
    )
