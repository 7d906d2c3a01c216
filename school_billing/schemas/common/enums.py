"""
All enumeration types used across the billing engine.

These enums represent the core domain concepts for payments, pricing
tiers, eligibility and discount codes.
"""

from enum import Enum

__all__ = [
    "PaymentType",
    "PaymentStatus",
    "EnrollmentStatus",
    "EligibilityReason",
    "TierLabel",
    "DiscountType",
    "UsageType",
    "DiscountScope",
    "DiscountInvalidReason",
    "GROUP_PAYMENT_TYPES",
]


class PaymentType(str, Enum):
    """Payment category; also the discount applicable-to vocabulary."""

    MONTHLY_GROUP = "monthly_group"
    YEARLY_GROUP = "yearly_group"
    INDIVIDUAL_SESSION = "individual_session"
    STORE_PURCHASE = "store_purchase"
    EVENT_REGISTRATION = "event_registration"
    OTHER = "other"

    @property
    def is_group(self) -> bool:
        return self in GROUP_PAYMENT_TYPES


GROUP_PAYMENT_TYPES = frozenset({PaymentType.MONTHLY_GROUP, PaymentType.YEARLY_GROUP})


class PaymentStatus(str, Enum):
    """Payment status enumeration."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING


class EnrollmentStatus(str, Enum):
    """Program enrollment status."""

    ACTIVE = "active"
    TRIAL = "trial"
    INACTIVE = "inactive"
    WAITLISTED = "waitlisted"
    DROPPED = "dropped"


class EligibilityReason(str, Enum):
    """Why a student may or may not attend class today."""

    TRIAL = "Trial"
    PAID = "Paid"
    EXPIRED = "Expired"


class TierLabel(str, Enum):
    """Pricing tier, in selection priority order."""

    MONTHLY = "Monthly"
    YEARLY = "Yearly"
    INDIVIDUAL_SESSION = "Individual Session"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


class UsageType(str, Enum):
    ONE_TIME = "one_time"
    ONGOING = "ongoing"


class DiscountScope(str, Enum):
    """Whether usage is tracked per student or per family."""

    PER_STUDENT = "per_student"
    PER_FAMILY = "per_family"


class DiscountInvalidReason(str, Enum):
    """Specific reason a discount code was rejected."""

    NOT_FOUND = "NotFound"
    INACTIVE = "Inactive"
    NOT_YET_VALID = "NotYetValid"
    EXPIRED = "Expired"
    SCOPE_MISMATCH = "ScopeMismatch"
    USAGE_EXHAUSTED = "UsageExhausted"
    ALREADY_USED = "AlreadyUsed"
    NOT_APPLICABLE_TO_PAYMENT_TYPE = "NotApplicableToPaymentType"
