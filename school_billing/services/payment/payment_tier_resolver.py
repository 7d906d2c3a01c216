"""
Next-payment amount resolution across pricing tiers.
"""

from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from school_billing.config.settings import Settings
from school_billing.core.exceptions import StoreUnavailableError
from school_billing.core.money import Money
from school_billing.repositories.enrollment_repository import EnrollmentRepository
from school_billing.repositories.payment_repository import PaymentRepository
from school_billing.schemas.common.enums import TierLabel
from school_billing.schemas.pricing import EnrollmentPaymentOption, TierResolution
from school_billing.services.base.base_service import BaseService
from school_billing.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

TIER_FIELDS = (
    (TierLabel.MONTHLY, "monthly_amount"),
    (TierLabel.YEARLY, "yearly_amount"),
    (TierLabel.INDIVIDUAL_SESSION, "individual_session_amount"),
)


def _first_configured(options: Sequence[EnrollmentPaymentOption], field: str) -> Optional[Money]:
    for option in options:
        amount = getattr(option, field)
        if amount is not None and amount.is_positive():
            return amount
    return None


def resolve_tier(
    student_id: str,
    enrollment_options: Sequence[EnrollmentPaymentOption],
    past_successful_payment_count: int,
    currency: str,
) -> TierResolution:
    """
    Pick the amount due next: Monthly, then Yearly, then Individual Session.

    Each tier takes its amount from the first option that configures it.
    With no tier configured the amount is zero, labelled Monthly, and
    flagged unresolved.
    """
    amounts = {field: _first_configured(enrollment_options, field) for _, field in TIER_FIELDS}

    selected_label, selected_amount = TierLabel.MONTHLY, None
    for label, field in TIER_FIELDS:
        if amounts[field] is not None:
            selected_label, selected_amount = label, amounts[field]
            break

    return TierResolution(
        student_id=student_id,
        amount=selected_amount if selected_amount is not None else Money.zero(currency),
        tier_label=selected_label,
        amount_unresolved=selected_amount is None,
        past_payment_count=past_successful_payment_count,
        **amounts,
    )


class PaymentTierResolver(BaseService):
    def __init__(
        self,
        db_session: Session,
        enrollment_repository: Optional[EnrollmentRepository] = None,
        payment_repository: Optional[PaymentRepository] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(db_session, settings)
        self.enrollments = enrollment_repository or EnrollmentRepository(db_session)
        self.payments = payment_repository or PaymentRepository(db_session)

    def load_options(self, student_id: str) -> List[EnrollmentPaymentOption]:
        currency = self.settings.CURRENCY
        return [
            EnrollmentPaymentOption.from_model(enrollment, currency)
            for enrollment in self.enrollments.list_priced_enrollments(student_id)
        ]

    def resolve(
        self,
        student_id: str,
        enrollment_options: Sequence[EnrollmentPaymentOption],
        past_successful_payment_count: int,
    ) -> TierResolution:
        return resolve_tier(
            student_id,
            enrollment_options,
            past_successful_payment_count,
            self.settings.CURRENCY,
        )

    def resolve_for_student(
        self,
        student_id: str,
        past_count: Optional[int] = None,
    ) -> ServiceResult[TierResolution]:
        """
        Resolve the next amount for a student from their enrollments.

        An unconfigured student is a failure: the zero amount must not be
        charged. The resolution is still attached under details["resolution"].
        """
        try:
            options = self.load_options(student_id)
            if past_count is None:
                past_count = self.payments.count_succeeded_for_student(student_id)
        except StoreUnavailableError as e:
            return self._handle_exception(e, "resolve payment amount", student_id)

        resolution = self.resolve(student_id, options, past_count)
        if resolution.amount_unresolved:
            self._logger.warning(
                "No pricing tier configured for student",
                extra={"student_id": student_id, "enrollment_count": len(options)},
            )
            return ServiceResult.failure(
                ServiceError(
                    code=ErrorCode.AMOUNT_UNRESOLVED,
                    message="No pricing tier is configured for this student's enrollments",
                    severity=ErrorSeverity.WARNING,
                    details={"student_id": student_id, "resolution": resolution},
                )
            )

        return ServiceResult.success(resolution)
