"""
Usability rules shared by the discount catalog and validator.

Rules are checked in a fixed order and the first failing one is
reported. Usage lookups are passed in as callables so the store is only
queried when a code gets that far.
"""

from datetime import datetime
from typing import Callable, Optional

from school_billing.schemas.common.enums import (
    DiscountInvalidReason,
    DiscountScope,
    PaymentType,
    UsageType,
)
from school_billing.schemas.discount import DiscountCodeRecord

INVALID_REASON_MESSAGES = {
    DiscountInvalidReason.NOT_FOUND: "Discount code not found",
    DiscountInvalidReason.INACTIVE: "This discount code is no longer active",
    DiscountInvalidReason.NOT_YET_VALID: "This discount code is not valid yet",
    DiscountInvalidReason.EXPIRED: "This discount code has expired",
    DiscountInvalidReason.NOT_APPLICABLE_TO_PAYMENT_TYPE: "This discount code cannot be used for this type of payment",
    DiscountInvalidReason.SCOPE_MISMATCH: "This discount code is not available for this family or student",
    DiscountInvalidReason.USAGE_EXHAUSTED: "This discount code has reached its usage limit",
    DiscountInvalidReason.ALREADY_USED: "This discount code has already been used",
}


def first_failing_reason(
    record: DiscountCodeRecord,
    *,
    family_id: str,
    student_id: Optional[str],
    applicable_to: PaymentType,
    now: datetime,
    usage_count: Callable[[], int],
    already_used: Callable[[], bool],
) -> Optional[DiscountInvalidReason]:
    """Return the first rule the code fails, or None when it is usable."""
    if not record.is_active:
        return DiscountInvalidReason.INACTIVE
    if record.valid_from is not None and record.valid_from > now:
        return DiscountInvalidReason.NOT_YET_VALID
    if record.valid_until is not None and record.valid_until < now:
        return DiscountInvalidReason.EXPIRED
    if applicable_to not in record.applicable_to:
        return DiscountInvalidReason.NOT_APPLICABLE_TO_PAYMENT_TYPE

    if record.family_id is not None and record.family_id != family_id:
        return DiscountInvalidReason.SCOPE_MISMATCH
    if record.student_id is not None and record.student_id != student_id:
        return DiscountInvalidReason.SCOPE_MISMATCH
    if record.scope is DiscountScope.PER_STUDENT and not student_id:
        return DiscountInvalidReason.SCOPE_MISMATCH

    if record.max_uses is not None and usage_count() >= record.max_uses:
        return DiscountInvalidReason.USAGE_EXHAUSTED
    if record.usage_type is UsageType.ONE_TIME and already_used():
        return DiscountInvalidReason.ALREADY_USED

    return None
