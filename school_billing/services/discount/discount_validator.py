"""
Server-side validation of a typed-in discount code.

Every condition the catalog applies is re-derived here at commit time;
a code shown as available a minute ago may no longer be usable.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from school_billing.config.settings import Settings
from school_billing.core.exceptions import StoreUnavailableError, ValidationError
from school_billing.core.money import Money
from school_billing.repositories.discount_code_repository import DiscountCodeRepository
from school_billing.schemas.common.enums import DiscountInvalidReason, PaymentType
from school_billing.schemas.discount import DiscountCodeRecord, ValidatedDiscount
from school_billing.services.base.base_service import BaseService
from school_billing.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)
from school_billing.services.discount.rules import INVALID_REASON_MESSAGES, first_failing_reason
from school_billing.utils.datetime_utils import DateTimeHelper


def invalid_discount(reason: DiscountInvalidReason, code: str) -> ServiceResult:
    return ServiceResult.failure(
        ServiceError(
            code=ErrorCode.INVALID_DISCOUNT,
            message=INVALID_REASON_MESSAGES[reason],
            severity=ErrorSeverity.INFO,
            field="code",
            details={"reason": reason, "code": code},
        )
    )


class DiscountValidator(BaseService):
    def __init__(
        self,
        db_session: Session,
        discount_code_repository: Optional[DiscountCodeRepository] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(db_session, settings)
        self.discount_codes = discount_code_repository or DiscountCodeRepository(db_session)

    def validate(
        self,
        code: str,
        family_id: str,
        student_id: Optional[str],
        subtotal: Money,
        applicable_to: PaymentType,
        now: Optional[datetime] = None,
    ) -> ServiceResult[ValidatedDiscount]:
        if not subtotal.is_positive():
            return ServiceResult.validation_failure(
                "A discount can only be applied to a positive amount",
                field="subtotal",
                details={"subtotal": subtotal.to_dict()},
            )

        applicable_to = PaymentType(applicable_to)
        now = DateTimeHelper.to_naive_utc(now) if now else DateTimeHelper.utc_now()
        log_context = {
            "code": (code or "").strip(),
            "family_id": family_id,
            "student_id": student_id,
            "payment_type": applicable_to.value,
        }

        try:
            model = self.discount_codes.get_by_code(code)
            if model is None:
                self._logger.info("Discount code rejected", extra={**log_context, "reason": "NotFound"})
                return invalid_discount(DiscountInvalidReason.NOT_FOUND, log_context["code"])

            record = DiscountCodeRecord.from_model(model, subtotal.currency)
            reason = first_failing_reason(
                record,
                family_id=family_id,
                student_id=student_id,
                applicable_to=applicable_to,
                now=now,
                usage_count=lambda: self.discount_codes.count_usages(record.id),
                already_used=lambda: self.discount_codes.has_usage_by(record.id, family_id, student_id),
            )
        except (StoreUnavailableError, ValidationError, ValueError) as e:
            return self._handle_exception(e, "validate discount code", log_context["code"], additional_context=log_context)

        if reason is not None:
            self._logger.info("Discount code rejected", extra={**log_context, "reason": reason.value})
            return invalid_discount(reason, record.code)

        discount_amount = Money.min_of(record.value.savings_for(subtotal), subtotal)
        validated = ValidatedDiscount(
            discount_code_id=record.id,
            code=record.code,
            name=record.name,
            subtotal=subtotal,
            discount_amount=discount_amount,
        )
        self._logger.info(
            "Discount code accepted",
            extra={**log_context, "discount_code_id": record.id, "discount_cents": discount_amount.minor_units},
        )
        return ServiceResult.success(validated)
