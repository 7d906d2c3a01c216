"""
Class-attendance eligibility.

A student may attend while on trial (no dated successful payment yet)
or while their most recent successful payment falls inside the
eligibility window. Anything the engine cannot determine is treated as
Expired by callers, never as Paid or Trial.
"""

from datetime import date as Date
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from school_billing.config.settings import Settings
from school_billing.core.exceptions import StoreUnavailableError
from school_billing.repositories.payment_repository import PaymentRepository
from school_billing.schemas.eligibility import StudentEligibility
from school_billing.services.base.base_service import BaseService
from school_billing.services.base.service_result import ServiceResult
from school_billing.utils.datetime_utils import DateTimeHelper


def evaluate_eligibility(
    student_id: str,
    successful_payments: Iterable,
    today: Date,
    window_days: int,
) -> StudentEligibility:
    """
    Decide eligibility from successful payments ordered most recent first.

    Payments without a payment date are ignored. The first remaining
    payment is taken as-is; the caller's ordering is not re-checked.
    """
    dated = [p for p in successful_payments if p.payment_date is not None]
    if not dated:
        return StudentEligibility.trial(student_id)

    last_payment_date = dated[0].payment_date
    cutoff = DateTimeHelper.days_before(today, window_days)
    if last_payment_date >= cutoff:
        return StudentEligibility.paid(student_id, last_payment_date)
    return StudentEligibility.expired(student_id, last_payment_date)


class EligibilityEvaluator(BaseService):
    """Decides whether a student may attend class today."""

    def __init__(
        self,
        db_session: Session,
        payment_repository: Optional[PaymentRepository] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(db_session, settings)
        self.payments = payment_repository or PaymentRepository(db_session)

    @property
    def window_days(self) -> int:
        return self.settings.ELIGIBILITY_WINDOW_DAYS

    def today(self) -> Date:
        return DateTimeHelper.today(self.settings.TIMEZONE)

    def evaluate(self, student_id: str, successful_payments: Iterable, today: Date) -> StudentEligibility:
        return evaluate_eligibility(student_id, successful_payments, today, self.window_days)

    @staticmethod
    def fail_closed(student_id: str) -> StudentEligibility:
        """Conservative answer to use when eligibility could not be determined."""
        return StudentEligibility.expired(student_id)

    def check_student_eligibility(
        self,
        student_id: str,
        today: Optional[Date] = None,
    ) -> ServiceResult[StudentEligibility]:
        today = today or self.today()
        try:
            payments = self.payments.list_succeeded_for_student(student_id)
        except StoreUnavailableError as e:
            return self._handle_exception(e, "check student eligibility", student_id)

        eligibility = self.evaluate(student_id, payments, today)
        self._logger.debug(
            "Eligibility evaluated",
            extra={
                "student_id": student_id,
                "reason": eligibility.reason.value,
                "last_payment_date": str(eligibility.last_payment_date) if eligibility.last_payment_date else None,
                "today": str(today),
            },
        )
        return ServiceResult.success(eligibility)
