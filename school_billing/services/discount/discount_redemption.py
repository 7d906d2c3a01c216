"""
Redeeming a validated discount code against a payment.

The code is re-validated, a usage row is written and the usage counter
is bumped with a conditional update, all in one transaction. When the
conditional update touches no row the last use went to a concurrent
request and everything is rolled back.

When a payment fails at the gateway its redemption is released again so
the family can retry with the same code.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from school_billing.config.settings import Settings
from school_billing.core.exceptions import StoreUnavailableError
from school_billing.core.logging import get_structured_logger
from school_billing.core.money import Money
from school_billing.repositories.discount_code_repository import DiscountCodeRepository
from school_billing.repositories.payment_repository import PaymentRepository
from school_billing.schemas.common.enums import DiscountInvalidReason, PaymentStatus, PaymentType
from school_billing.schemas.discount import ValidatedDiscount
from school_billing.services.base.base_service import BaseService
from school_billing.services.base.service_result import ServiceResult
from school_billing.services.discount.discount_validator import DiscountValidator, invalid_discount
from school_billing.utils.datetime_utils import DateTimeHelper

audit_log = get_structured_logger("school_billing.audit")


class DiscountRedemptionService(BaseService):
    def __init__(
        self,
        db_session: Session,
        validator: Optional[DiscountValidator] = None,
        discount_code_repository: Optional[DiscountCodeRepository] = None,
        payment_repository: Optional[PaymentRepository] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(db_session, settings)
        self.discount_codes = discount_code_repository or DiscountCodeRepository(db_session)
        self.payments = payment_repository or PaymentRepository(db_session)
        self.validator = validator or DiscountValidator(db_session, self.discount_codes, self.settings)

    def redeem(
        self,
        code: str,
        family_id: str,
        student_id: Optional[str],
        subtotal: Money,
        applicable_to: PaymentType,
        payment_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ServiceResult[ValidatedDiscount]:
        now = DateTimeHelper.to_naive_utc(now) if now else DateTimeHelper.utc_now()

        result = self.validator.validate(code, family_id, student_id, subtotal, applicable_to, now)
        if not result.is_success:
            return result

        validated = result.data
        try:
            self.discount_codes.record_usage(
                discount_code_id=validated.discount_code_id,
                family_id=family_id,
                student_id=student_id,
                payment_id=payment_id,
                discount_amount_cents=validated.discount_amount.minor_units,
                original_amount_cents=validated.subtotal.minor_units,
                final_amount_cents=validated.total_amount.minor_units,
                used_at=now,
            )
            claimed = self.discount_codes.increment_usage_if_available(validated.discount_code_id)
            if not claimed:
                self._rollback()
                self._logger.warning(
                    "Discount code usage limit reached during redemption",
                    extra={"discount_code_id": validated.discount_code_id, "family_id": family_id},
                )
                return invalid_discount(DiscountInvalidReason.USAGE_EXHAUSTED, validated.code)
            self._commit()
        except StoreUnavailableError as e:
            self._rollback()
            return self._handle_exception(
                e,
                "redeem discount code",
                validated.discount_code_id,
                additional_context={"family_id": family_id, "payment_id": payment_id},
            )

        audit_log.info(
            "discount_redeemed",
            discount_code_id=validated.discount_code_id,
            family_id=family_id,
            student_id=student_id,
            payment_id=payment_id,
            discount_cents=validated.discount_amount.minor_units,
            final_cents=validated.total_amount.minor_units,
        )
        return ServiceResult.success(validated)

    def restore_for_failed_payment(self, payment_id: str) -> ServiceResult[List[str]]:
        """
        Release the discount redeemed for a payment that failed.

        Deletes the payment's usage rows and gives one use back to each
        code they referenced. Returns the released code ids; a second call
        finds no rows and changes nothing.
        """
        try:
            payment = self.payments.get(payment_id)
            if payment is None:
                return ServiceResult.not_found("Payment", payment_id)
            if payment.status is not PaymentStatus.FAILED:
                return ServiceResult.validation_failure(
                    "Only a failed payment can release its discount",
                    field="payment_id",
                    details={"payment_id": payment_id, "status": payment.status.value},
                )

            with self.transaction():
                code_ids = self.discount_codes.delete_usages_for_payment(payment_id)
                for code_id in code_ids:
                    self.discount_codes.decrement_usage(code_id)
        except StoreUnavailableError as e:
            return self._handle_exception(e, "restore discount for failed payment", payment_id)

        if code_ids:
            audit_log.info("discount_restored", payment_id=payment_id, discount_code_ids=code_ids)
        return ServiceResult.success(code_ids)
