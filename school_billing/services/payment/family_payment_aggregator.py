"""
Per-family payment view.

Composes eligibility, tier pricing, individual-session balances and the
discount availability flag. A failure for one student is recorded on that
student and never blanks the others; a failure loading the family itself
fails the whole view.
"""

from datetime import date as Date
from typing import List, Optional

from sqlalchemy.orm import Session

from school_billing.config.settings import Settings
from school_billing.core.exceptions import BaseAppException, StoreUnavailableError
from school_billing.core.logging import family_id as family_id_var
from school_billing.core.money import Money
from school_billing.repositories.family_repository import FamilyRepository
from school_billing.repositories.individual_session_repository import IndividualSessionRepository
from school_billing.repositories.payment_repository import PaymentRepository
from school_billing.schemas.common.enums import TierLabel
from school_billing.schemas.family_payment import (
    FamilyPaymentSummary,
    IndividualSessionBalance,
    IndividualSessionPurchaseInfo,
    StudentIssue,
    StudentPaymentDetail,
)
from school_billing.schemas.pricing import TierResolution
from school_billing.services.base.base_service import BaseService
from school_billing.services.base.service_result import ErrorCode, ServiceResult, user_message
from school_billing.services.discount.discount_catalog import DiscountCatalog
from school_billing.services.payment.eligibility_evaluator import EligibilityEvaluator
from school_billing.services.payment.payment_tier_resolver import PaymentTierResolver


class FamilyPaymentAggregator(BaseService):
    def __init__(
        self,
        db_session: Session,
        family_repository: Optional[FamilyRepository] = None,
        payment_repository: Optional[PaymentRepository] = None,
        individual_session_repository: Optional[IndividualSessionRepository] = None,
        eligibility_evaluator: Optional[EligibilityEvaluator] = None,
        tier_resolver: Optional[PaymentTierResolver] = None,
        discount_catalog: Optional[DiscountCatalog] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(db_session, settings)
        self.families = family_repository or FamilyRepository(db_session)
        self.payments = payment_repository or PaymentRepository(db_session)
        self.individual_sessions = individual_session_repository or IndividualSessionRepository(db_session)
        self.eligibility = eligibility_evaluator or EligibilityEvaluator(
            db_session, self.payments, self.settings
        )
        self.tiers = tier_resolver or PaymentTierResolver(
            db_session, payment_repository=self.payments, settings=self.settings
        )
        self.catalog = discount_catalog or DiscountCatalog(db_session, settings=self.settings)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def aggregate(self, family_id: str, today: Optional[Date] = None) -> ServiceResult[FamilyPaymentSummary]:
        token = family_id_var.set(family_id)
        try:
            return self._aggregate(family_id, today or self.eligibility.today())
        finally:
            family_id_var.reset(token)

    def _aggregate(self, family_id: str, today: Date) -> ServiceResult[FamilyPaymentSummary]:
        try:
            family = self.families.get(family_id)
            if family is None:
                return ServiceResult.not_found("Family", family_id)
            students = self.families.list_students(family_id)
            payments = self.payments.list_succeeded_for_family(family_id)
        except StoreUnavailableError as e:
            return self._handle_exception(e, "load family payment information", family_id)

        warnings: List[str] = []
        balance = self._individual_session_balance(family_id, warnings)

        per_student = [
            self._student_detail(student, payments, balance, today)
            for student in students
        ]

        discounts = self.catalog.has_any_active(family_id)
        if discounts.is_success:
            has_available_discounts = discounts.data
        else:
            has_available_discounts = False
            warnings.append("Discount availability could not be checked")

        summary = FamilyPaymentSummary(
            family_id=family.id,
            family_name=family.name,
            per_student=per_student,
            has_available_discounts=has_available_discounts,
            warnings=warnings,
        )
        self._log_operation(
            "family payment view built",
            family_id,
            extra={
                "students": len(per_student),
                "needs_payment": sum(1 for d in per_student if d.needs_payment),
                "partial": summary.partial,
            },
        )
        return ServiceResult.success(summary)

    def aggregate_for_student(
        self,
        student_id: str,
        today: Optional[Date] = None,
    ) -> ServiceResult[FamilyPaymentSummary]:
        """The family view narrowed to one student."""
        try:
            student = self.families.get_student(student_id)
        except StoreUnavailableError as e:
            return self._handle_exception(e, "load student payment information", student_id)

        if student is None or not student.family_id:
            return ServiceResult.not_found("Student", student_id)

        result = self.aggregate(student.family_id, today)
        if not result.is_success:
            return result
        return ServiceResult.success(result.data.for_student(student_id))

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _individual_session_balance(self, family_id: str, warnings: List[str]) -> IndividualSessionBalance:
        try:
            purchases = self.individual_sessions.list_for_family(family_id)
        except StoreUnavailableError:
            warnings.append("Individual session balance could not be loaded")
            return IndividualSessionBalance()

        return IndividualSessionBalance.from_purchases(
            [
                IndividualSessionPurchaseInfo(
                    id=p.id,
                    purchase_date=p.purchase_date,
                    quantity_purchased=p.quantity_purchased,
                    quantity_remaining=p.quantity_remaining,
                )
                for p in purchases
            ]
        )

    def _student_detail(
        self,
        student,
        family_payments,
        balance: IndividualSessionBalance,
        today: Date,
    ) -> StudentPaymentDetail:
        issues: List[StudentIssue] = []
        student_payments = [p for p in family_payments if student.id in p.student_ids]

        try:
            eligibility = self.eligibility.evaluate(student.id, student_payments, today)
        except (ValueError, BaseAppException) as e:
            self._logger.error(
                "Eligibility could not be determined",
                exc_info=True,
                extra={"student_id": student.id},
            )
            eligibility = EligibilityEvaluator.fail_closed(student.id)
            issues.append(StudentIssue(code=ErrorCode.INTERNAL_ERROR.value, message=str(e)))

        resolution = self._resolve_tier(student.id, len(student_payments), issues)

        return StudentPaymentDetail(
            student_id=student.id,
            first_name=student.first_name,
            last_name=student.last_name,
            eligibility=eligibility,
            needs_payment=eligibility.needs_payment,
            next_amount=resolution.amount,
            tier_label=resolution.tier_label,
            amount_unresolved=resolution.amount_unresolved,
            monthly_amount=resolution.monthly_amount,
            yearly_amount=resolution.yearly_amount,
            individual_session_amount=resolution.individual_session_amount,
            past_payment_count=resolution.past_payment_count,
            individual_session_balance=balance,
            issues=issues,
        )

    def _resolve_tier(self, student_id: str, past_count: int, issues: List[StudentIssue]) -> TierResolution:
        try:
            options = self.tiers.load_options(student_id)
            return self.tiers.resolve(student_id, options, past_count)
        except (StoreUnavailableError, ValueError) as e:
            failure = self._handle_exception(e, "resolve payment amount", student_id)
            issues.append(StudentIssue(code=failure.error.code.value, message=user_message(failure.error)))
            return TierResolution(
                student_id=student_id,
                amount=Money.zero(self.settings.CURRENCY),
                tier_label=TierLabel.MONTHLY,
                amount_unresolved=True,
                past_payment_count=past_count,
            )
