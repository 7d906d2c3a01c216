"""
Discount codes a family could apply to a payment right now.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from school_billing.config.settings import Settings
from school_billing.core.exceptions import StoreUnavailableError, ValidationError
from school_billing.core.money import Money
from school_billing.repositories.discount_code_repository import DiscountCodeRepository
from school_billing.schemas.common.enums import PaymentType
from school_billing.schemas.discount import AvailableDiscount, DiscountCodeRecord
from school_billing.services.base.base_service import BaseService
from school_billing.services.base.service_result import ServiceResult
from school_billing.services.discount.rules import first_failing_reason
from school_billing.utils.datetime_utils import DateTimeHelper


class DiscountCatalog(BaseService):
    def __init__(
        self,
        db_session: Session,
        discount_code_repository: Optional[DiscountCodeRepository] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(db_session, settings)
        self.discount_codes = discount_code_repository or DiscountCodeRepository(db_session)

    def _to_available(self, record: DiscountCodeRecord, subtotal: Money) -> AvailableDiscount:
        return AvailableDiscount(
            discount_code_id=record.id,
            code=record.code,
            name=record.name,
            description=record.description,
            value=record.value,
            computed_savings=record.value.savings_for(subtotal),
            formatted_display=record.formatted_display,
            created_at=record.created_at,
        )

    def list_available(
        self,
        family_id: str,
        student_id: Optional[str],
        applicable_to: PaymentType,
        subtotal: Money,
        now: Optional[datetime] = None,
    ) -> ServiceResult[List[AvailableDiscount]]:
        """
        Usable codes for the family, best savings first.

        Ties keep store order: oldest code first, then by id. Nothing is
        offered against a zero or negative subtotal.
        """
        if not subtotal.is_positive():
            return ServiceResult.success([])

        applicable_to = PaymentType(applicable_to)
        now = DateTimeHelper.to_naive_utc(now) if now else DateTimeHelper.utc_now()

        try:
            candidates = self.discount_codes.list_candidates(family_id)
            available = []
            for model in candidates:
                try:
                    record = DiscountCodeRecord.from_model(model, subtotal.currency)
                except (ValueError, ValidationError) as e:
                    self._logger.warning(
                        "Skipping malformed discount code",
                        extra={"discount_code_id": model.id, "error": str(e)},
                    )
                    continue

                reason = first_failing_reason(
                    record,
                    family_id=family_id,
                    student_id=student_id,
                    applicable_to=applicable_to,
                    now=now,
                    usage_count=lambda: self.discount_codes.count_usages(record.id),
                    already_used=lambda: self.discount_codes.has_usage_by(record.id, family_id, student_id),
                )
                if reason is None:
                    available.append(self._to_available(record, subtotal))
        except StoreUnavailableError as e:
            return self._handle_exception(
                e,
                "list available discounts",
                family_id,
                additional_context={"payment_type": applicable_to.value},
            )

        # sorted() is stable, so equal savings keep created_at/id order
        available = sorted(available, key=lambda d: -d.computed_savings.minor_units)

        self._logger.debug(
            "Available discounts computed",
            extra={
                "family_id": family_id,
                "student_id": student_id,
                "payment_type": applicable_to.value,
                "candidates": len(candidates),
                "available": len(available),
            },
        )
        return ServiceResult.success(available)

    def best_available(
        self,
        family_id: str,
        student_id: Optional[str],
        applicable_to: PaymentType,
        subtotal: Money,
        now: Optional[datetime] = None,
    ) -> ServiceResult[Optional[AvailableDiscount]]:
        """The code to auto-apply, if any."""
        result = self.list_available(family_id, student_id, applicable_to, subtotal, now)
        if not result.is_success:
            return result
        return ServiceResult.success(result.data[0] if result.data else None)

    def has_any_active(self, family_id: str, now: Optional[datetime] = None) -> ServiceResult[bool]:
        now = DateTimeHelper.to_naive_utc(now) if now else DateTimeHelper.utc_now()
        try:
            return ServiceResult.success(self.discount_codes.exists_active(family_id, now))
        except StoreUnavailableError as e:
            return self._handle_exception(e, "check for active discounts", family_id)
