"""
Pricing tier schemas.
"""

from typing import Optional

from pydantic import Field

from school_billing.core.money import Money
from school_billing.schemas.common.base import BaseSchema
from school_billing.schemas.common.enums import EnrollmentStatus, TierLabel

__all__ = [
    "EnrollmentPaymentOption",
    "TierResolution",
]


class EnrollmentPaymentOption(BaseSchema):
    """Fee configuration a student inherits from one active enrollment."""

    enrollment_id: str
    student_id: str
    program_id: str
    program_name: str = ""
    status: EnrollmentStatus = EnrollmentStatus.ACTIVE
    monthly_amount: Optional[Money] = None
    yearly_amount: Optional[Money] = None
    individual_session_amount: Optional[Money] = None

    @classmethod
    def from_model(cls, enrollment, currency: str) -> "EnrollmentPaymentOption":
        program = enrollment.program

        def _money(cents: Optional[int]) -> Optional[Money]:
            return Money(cents, currency) if cents is not None else None

        return cls(
            enrollment_id=enrollment.id,
            student_id=enrollment.student_id,
            program_id=enrollment.program_id,
            program_name=program.name if program else "",
            status=enrollment.status,
            monthly_amount=_money(program.monthly_fee_cents) if program else None,
            yearly_amount=_money(program.yearly_fee_cents) if program else None,
            individual_session_amount=_money(program.individual_session_fee_cents) if program else None,
        )


class TierResolution(BaseSchema):
    """Next amount due for a student and which tier it came from."""

    student_id: str
    amount: Money
    tier_label: TierLabel
    monthly_amount: Optional[Money] = None
    yearly_amount: Optional[Money] = None
    individual_session_amount: Optional[Money] = None
    amount_unresolved: bool = Field(
        False,
        description="True when no tier is configured; amount is zero and must not be charged",
    )
    past_payment_count: int = Field(0, ge=0)
