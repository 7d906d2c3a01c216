"""
Per-family payment view consumed by the presentation layer.
"""

from datetime import date as Date
from typing import List, Optional

from pydantic import Field

from school_billing.core.money import Money
from school_billing.schemas.common.base import BaseSchema
from school_billing.schemas.common.enums import TierLabel
from school_billing.schemas.eligibility import StudentEligibility

__all__ = [
    "IndividualSessionPurchaseInfo",
    "IndividualSessionBalance",
    "StudentIssue",
    "StudentPaymentDetail",
    "FamilyPaymentSummary",
]


class IndividualSessionPurchaseInfo(BaseSchema):
    id: str
    purchase_date: Date
    quantity_purchased: int = Field(..., ge=0)
    quantity_remaining: int = Field(..., ge=0)


class IndividualSessionBalance(BaseSchema):
    total_purchased: int = 0
    total_remaining: int = 0
    purchases: List[IndividualSessionPurchaseInfo] = Field(default_factory=list)

    @classmethod
    def from_purchases(cls, purchases: List[IndividualSessionPurchaseInfo]) -> "IndividualSessionBalance":
        return cls(
            total_purchased=sum(p.quantity_purchased for p in purchases),
            total_remaining=sum(p.quantity_remaining for p in purchases),
            purchases=purchases,
        )


class StudentIssue(BaseSchema):
    """A per-student failure recorded without blanking the rest of the view."""

    code: str
    message: str


class StudentPaymentDetail(BaseSchema):
    student_id: str
    first_name: str
    last_name: str
    eligibility: StudentEligibility
    needs_payment: bool
    next_amount: Money
    tier_label: TierLabel
    amount_unresolved: bool = False
    monthly_amount: Optional[Money] = None
    yearly_amount: Optional[Money] = None
    individual_session_amount: Optional[Money] = None
    past_payment_count: int = 0
    individual_session_balance: IndividualSessionBalance = Field(default_factory=IndividualSessionBalance)
    issues: List[StudentIssue] = Field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class FamilyPaymentSummary(BaseSchema):
    family_id: str
    family_name: str
    per_student: List[StudentPaymentDetail] = Field(default_factory=list)
    has_available_discounts: bool = False
    warnings: List[str] = Field(default_factory=list)

    @property
    def partial(self) -> bool:
        """True when at least one student's view was computed with a failure."""
        return any(detail.issues for detail in self.per_student)

    def for_student(self, student_id: str) -> "FamilyPaymentSummary":
        return self.model_copy(
            update={"per_student": [d for d in self.per_student if d.student_id == student_id]}
        )
