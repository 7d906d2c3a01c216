"""
Advisory detection of duplicate in-flight payments.

Two submissions are equivalent when they share family and payment type
and, for group payments naming students, cover exactly the same set of
students. This only warns; exclusivity belongs to a store constraint.
"""

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from school_billing.config.settings import Settings
from school_billing.core.exceptions import StoreUnavailableError
from school_billing.repositories.payment_repository import PaymentRepository
from school_billing.schemas.common.enums import PaymentType
from school_billing.schemas.payment import PendingPaymentMatch
from school_billing.services.base.base_service import BaseService
from school_billing.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)
from school_billing.utils.datetime_utils import DateTimeHelper


class DuplicatePaymentGuard(BaseService):
    def __init__(
        self,
        db_session: Session,
        payment_repository: Optional[PaymentRepository] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(db_session, settings)
        self.payments = payment_repository or PaymentRepository(db_session)

    @property
    def window_minutes(self) -> int:
        return self.settings.DUPLICATE_PAYMENT_WINDOW_MINUTES

    @staticmethod
    def _matches(payment, payment_type: PaymentType, student_ids: frozenset) -> bool:
        if payment_type.is_group and student_ids:
            return payment.student_ids == student_ids
        # Non-group payments, or a group payment without a student list
        return True

    def find_duplicate(
        self,
        family_id: str,
        payment_type: PaymentType,
        student_ids: Optional[Iterable[str]] = None,
        now: Optional[datetime] = None,
    ) -> ServiceResult[Optional[PendingPaymentMatch]]:
        """Most recent equivalent pending payment inside the window, if any."""
        payment_type = PaymentType(payment_type)
        wanted = frozenset(student_ids or ())
        since = DateTimeHelper.minutes_ago(self.window_minutes, now)

        try:
            pending = self.payments.list_recent_pending(family_id, payment_type, since)
        except StoreUnavailableError as e:
            return self._handle_exception(
                e,
                "check for pending payments",
                family_id,
                additional_context={"payment_type": payment_type.value},
            )

        for payment in pending:
            if not self._matches(payment, payment_type, wanted):
                continue

            students = sorted(payment.students, key=lambda s: (s.first_name, s.last_name, s.id))
            match = PendingPaymentMatch(
                payment_id=payment.id,
                type=payment.type,
                created_at=payment.created_at,
                total_amount=payment.total_amount,
                discount_amount=payment.discount_amount,
                student_ids=payment.student_ids,
                student_names=[s.full_name for s in students],
            )
            self._logger.info(
                "Pending payment already in progress",
                extra={
                    "family_id": family_id,
                    "payment_type": payment_type.value,
                    "payment_id": payment.id,
                },
            )
            return ServiceResult.success(match)

        return ServiceResult.success(None)

    def ensure_no_duplicate(
        self,
        family_id: str,
        payment_type: PaymentType,
        student_ids: Optional[Iterable[str]] = None,
        now: Optional[datetime] = None,
    ) -> ServiceResult[None]:
        """Fail with DUPLICATE_PENDING when an equivalent payment is in flight."""
        result = self.find_duplicate(family_id, payment_type, student_ids, now)
        if not result.is_success:
            return result

        match = result.data
        if match is None:
            return ServiceResult.success(None)

        now = DateTimeHelper.to_naive_utc(now) if now else DateTimeHelper.utc_now()
        minutes = max(int((now - match.created_at).total_seconds() // 60), 0)
        names = match.student_names_display
        message = (
            f"A {match.type.value.replace('_', ' ')} payment of {match.total_amount.format()}"
            + (f" for {names}" if names else "")
            + f" was started {minutes} minute{'s' if minutes != 1 else ''} ago and is still processing."
            + " Please wait for it to complete before paying again."
        )
        return ServiceResult.failure(
            ServiceError(
                code=ErrorCode.DUPLICATE_PENDING,
                message=message,
                severity=ErrorSeverity.WARNING,
                details={"match": match},
            )
        )
