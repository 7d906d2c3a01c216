"""
Pydantic schemas for engine inputs and results.
"""

from school_billing.schemas.common import *  # noqa: F401,F403
from school_billing.schemas.common import __all__ as _common_all
from school_billing.schemas.discount import (
    AvailableDiscount,
    DiscountCodeRecord,
    DiscountValue,
    FixedAmountDiscount,
    PercentageDiscount,
    ValidatedDiscount,
)
from school_billing.schemas.eligibility import StudentEligibility
from school_billing.schemas.family_payment import (
    FamilyPaymentSummary,
    IndividualSessionBalance,
    IndividualSessionPurchaseInfo,
    StudentIssue,
    StudentPaymentDetail,
)
from school_billing.schemas.payment import PaymentRecord, PendingPaymentMatch
from school_billing.schemas.pricing import EnrollmentPaymentOption, TierResolution

__all__ = list(_common_all) + [
    "AvailableDiscount",
    "DiscountCodeRecord",
    "DiscountValue",
    "FixedAmountDiscount",
    "PercentageDiscount",
    "ValidatedDiscount",
    "StudentEligibility",
    "FamilyPaymentSummary",
    "IndividualSessionBalance",
    "IndividualSessionPurchaseInfo",
    "StudentIssue",
    "StudentPaymentDetail",
    "PaymentRecord",
    "PendingPaymentMatch",
    "EnrollmentPaymentOption",
    "TierResolution",
]
