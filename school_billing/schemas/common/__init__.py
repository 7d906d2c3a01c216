from school_billing.schemas.common.base import BaseSchema
from school_billing.schemas.common.enums import (
    GROUP_PAYMENT_TYPES,
    DiscountInvalidReason,
    DiscountScope,
    DiscountType,
    EligibilityReason,
    EnrollmentStatus,
    PaymentStatus,
    PaymentType,
    TierLabel,
    UsageType,
)

__all__ = [
    "BaseSchema",
    "GROUP_PAYMENT_TYPES",
    "DiscountInvalidReason",
    "DiscountScope",
    "DiscountType",
    "EligibilityReason",
    "EnrollmentStatus",
    "PaymentStatus",
    "PaymentType",
    "TierLabel",
    "UsageType",
]
