"""
Payment schemas.

PaymentRecord is the engine's read-only view of a persisted payment;
PendingPaymentMatch is what the duplicate guard hands back to the caller.
"""

from datetime import date as Date, datetime
from typing import FrozenSet, List, Optional

from pydantic import Field, model_validator

from school_billing.core.money import Money
from school_billing.schemas.common.base import BaseSchema
from school_billing.schemas.common.enums import PaymentStatus, PaymentType

__all__ = [
    "PaymentRecord",
    "PendingPaymentMatch",
]


class PaymentRecord(BaseSchema):
    """
    Snapshot of a payment row.

    Settled payments must satisfy total = subtotal - discount with the
    discount never exceeding the subtotal.
    """

    id: str
    family_id: str
    student_ids: FrozenSet[str] = Field(default_factory=frozenset)
    type: PaymentType
    status: PaymentStatus
    subtotal_amount: Money
    discount_code_id: Optional[str] = None
    discount_amount: Optional[Money] = None
    total_amount: Money
    payment_date: Optional[Date] = Field(
        None,
        description="Date the payment succeeded; unset rows never count for eligibility",
    )
    created_at: datetime

    @model_validator(mode="after")
    def check_amounts(self) -> "PaymentRecord":
        discount = self.discount_amount or Money.zero(self.subtotal_amount.currency)
        if discount > self.subtotal_amount:
            raise ValueError("Discount cannot exceed the subtotal")
        if self.status is PaymentStatus.SUCCEEDED:
            if self.total_amount != self.subtotal_amount - discount:
                raise ValueError("Total must equal subtotal minus discount for settled payments")
        return self

    @classmethod
    def from_model(cls, payment) -> "PaymentRecord":
        return cls(
            id=payment.id,
            family_id=payment.family_id,
            student_ids=payment.student_ids,
            type=payment.type,
            status=payment.status,
            subtotal_amount=payment.subtotal_amount,
            discount_code_id=payment.discount_code_id,
            discount_amount=payment.discount_amount,
            total_amount=payment.total_amount,
            payment_date=payment.payment_date,
            created_at=payment.created_at,
        )


class PendingPaymentMatch(BaseSchema):
    """An in-flight payment equivalent to the one about to be started."""

    payment_id: str
    type: PaymentType
    created_at: datetime
    total_amount: Money
    discount_amount: Optional[Money] = None
    student_ids: FrozenSet[str] = Field(default_factory=frozenset)
    student_names: List[str] = Field(default_factory=list)

    @property
    def student_names_display(self) -> str:
        return ", ".join(self.student_names)
