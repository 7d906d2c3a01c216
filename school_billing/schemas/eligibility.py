"""
Attendance eligibility schemas.
"""

from datetime import date as Date
from typing import Optional

from pydantic import Field, model_validator

from school_billing.schemas.common.base import BaseSchema
from school_billing.schemas.common.enums import EligibilityReason

__all__ = ["StudentEligibility"]


class StudentEligibility(BaseSchema):
    """
    Derived, never persisted: recomputed on every request from the
    student's successful payments.
    """

    student_id: str
    eligible: bool
    reason: EligibilityReason
    last_payment_date: Optional[Date] = Field(
        None,
        description="Most recent successful payment date; unset for Trial",
    )

    @model_validator(mode="after")
    def check_consistency(self) -> "StudentEligibility":
        expected = self.reason is not EligibilityReason.EXPIRED
        if self.eligible != expected:
            raise ValueError(f"{self.reason.value} eligibility must have eligible={expected}")
        return self

    @property
    def needs_payment(self) -> bool:
        """Trial students may upgrade; expired students must pay."""
        return self.reason in (EligibilityReason.TRIAL, EligibilityReason.EXPIRED)

    @classmethod
    def trial(cls, student_id: str) -> "StudentEligibility":
        return cls(student_id=student_id, eligible=True, reason=EligibilityReason.TRIAL)

    @classmethod
    def paid(cls, student_id: str, last_payment_date: Date) -> "StudentEligibility":
        return cls(
            student_id=student_id,
            eligible=True,
            reason=EligibilityReason.PAID,
            last_payment_date=last_payment_date,
        )

    @classmethod
    def expired(cls, student_id: str, last_payment_date: Optional[Date] = None) -> "StudentEligibility":
        return cls(
            student_id=student_id,
            eligible=False,
            reason=EligibilityReason.EXPIRED,
            last_payment_date=last_payment_date,
        )
