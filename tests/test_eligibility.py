from datetime import timedelta
from types import SimpleNamespace

import pytest
from sqlalchemy import text

from school_billing.schemas.common.enums import EligibilityReason, PaymentStatus
from school_billing.services.base.service_result import ErrorCode
from school_billing.services.payment.eligibility_evaluator import evaluate_eligibility
from tests.conftest import TODAY


def paid_on(*dates):
    return [SimpleNamespace(payment_date=d) for d in dates]


class TestEvaluateEligibility:
    def test_no_payments_is_trial(self):
        result = evaluate_eligibility("s-1", [], TODAY, 35)
        assert result.eligible is True
        assert result.reason is EligibilityReason.TRIAL
        assert result.last_payment_date is None
        assert result.needs_payment is True

    def test_only_undated_payments_is_trial(self):
        result = evaluate_eligibility("s-1", paid_on(None, None), TODAY, 35)
        assert result.reason is EligibilityReason.TRIAL

    def test_boundary_day_is_still_paid(self):
        last = TODAY - timedelta(days=35)
        result = evaluate_eligibility("s-1", paid_on(last), TODAY, 35)
        assert result.eligible is True
        assert result.reason is EligibilityReason.PAID
        assert result.last_payment_date == last
        assert result.needs_payment is False

    def test_one_day_past_boundary_is_expired(self):
        last = TODAY - timedelta(days=36)
        result = evaluate_eligibility("s-1", paid_on(last), TODAY, 35)
        assert result.eligible is False
        assert result.reason is EligibilityReason.EXPIRED
        assert result.last_payment_date == last
        assert result.needs_payment is True

    def test_undated_payments_are_skipped_before_taking_the_first(self):
        recent = TODAY - timedelta(days=3)
        result = evaluate_eligibility("s-1", paid_on(None, recent), TODAY, 35)
        assert result.reason is EligibilityReason.PAID
        assert result.last_payment_date == recent

    def test_first_payment_is_taken_without_resorting(self):
        old, recent = TODAY - timedelta(days=90), TODAY - timedelta(days=2)
        result = evaluate_eligibility("s-1", paid_on(old, recent), TODAY, 35)
        assert result.reason is EligibilityReason.EXPIRED
        assert result.last_payment_date == old

    def test_window_is_configurable(self):
        last = TODAY - timedelta(days=20)
        assert evaluate_eligibility("s-1", paid_on(last), TODAY, 14).reason is EligibilityReason.EXPIRED
        assert evaluate_eligibility("s-1", paid_on(last), TODAY, 30).reason is EligibilityReason.PAID


class TestCheckStudentEligibility:
    @pytest.fixture
    def student(self, seed):
        family = seed.family()
        return family, seed.student(family, "Mai")

    def test_uses_most_recent_succeeded_payment(self, services, seed, student):
        family, mai = student
        seed.payment(family, [mai], payment_date=TODAY - timedelta(days=60))
        seed.payment(family, [mai], payment_date=TODAY - timedelta(days=10))
        seed.payment(family, [mai], status=PaymentStatus.FAILED, payment_date=TODAY - timedelta(days=1))

        result = services.eligibility.check_student_eligibility(mai.id, today=TODAY)

        assert result.is_success
        assert result.data.reason is EligibilityReason.PAID
        assert result.data.last_payment_date == TODAY - timedelta(days=10)

    def test_pending_payments_do_not_count(self, services, seed, student):
        family, mai = student
        seed.payment(family, [mai], status=PaymentStatus.PENDING, payment_date=TODAY)

        result = services.eligibility.check_student_eligibility(mai.id, today=TODAY)

        assert result.data.reason is EligibilityReason.TRIAL

    def test_store_failure_is_not_paid_or_trial(self, services, session, student):
        _, mai = student
        session.execute(text("DROP TABLE payment_students"))

        result = services.eligibility.check_student_eligibility(mai.id, today=TODAY)

        assert not result.is_success
        assert result.data is None
        assert result.error.code is ErrorCode.STORE_UNAVAILABLE

    def test_fail_closed_is_expired(self, services):
        eligibility = services.eligibility.fail_closed("s-1")
        assert eligibility.eligible is False
        assert eligibility.reason is EligibilityReason.EXPIRED
