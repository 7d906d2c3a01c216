import pytest

from school_billing.core.money import Money
from school_billing.schemas.common.enums import EnrollmentStatus, TierLabel
from school_billing.schemas.pricing import EnrollmentPaymentOption
from school_billing.services.base.service_result import ErrorCode
from school_billing.services.payment.payment_tier_resolver import resolve_tier


def option(enrollment_id, monthly=None, yearly=None, individual=None):
    def _money(cents):
        return Money(cents) if cents is not None else None

    return EnrollmentPaymentOption(
        enrollment_id=enrollment_id,
        student_id="s-1",
        program_id=f"p-{enrollment_id}",
        monthly_amount=_money(monthly),
        yearly_amount=_money(yearly),
        individual_session_amount=_money(individual),
    )


class TestResolveTier:
    def test_monthly_wins_over_other_tiers(self):
        result = resolve_tier("s-1", [option("e1", monthly=12000, yearly=120000, individual=4000)], 2, "USD")
        assert result.amount == Money(12000)
        assert result.tier_label is TierLabel.MONTHLY
        assert result.amount_unresolved is False
        assert result.past_payment_count == 2

    def test_yearly_when_no_monthly(self):
        result = resolve_tier("s-1", [option("e1", yearly=120000, individual=4000)], 0, "USD")
        assert result.tier_label is TierLabel.YEARLY
        assert result.amount == Money(120000)

    def test_individual_session_last(self):
        result = resolve_tier("s-1", [option("e1", individual=4000)], 0, "USD")
        assert result.tier_label is TierLabel.INDIVIDUAL_SESSION
        assert result.amount == Money(4000)

    def test_first_option_defining_a_tier_supplies_it(self):
        options = [
            option("e1", yearly=110000),
            option("e2", monthly=9000, yearly=150000),
            option("e3", monthly=15000),
        ]
        result = resolve_tier("s-1", options, 0, "USD")
        assert result.tier_label is TierLabel.MONTHLY
        assert result.amount == Money(9000)
        assert result.yearly_amount == Money(110000)

    def test_zero_amount_does_not_configure_a_tier(self):
        result = resolve_tier("s-1", [option("e1", monthly=0, yearly=50000)], 0, "USD")
        assert result.tier_label is TierLabel.YEARLY

    def test_nothing_configured_is_unresolved_zero(self):
        result = resolve_tier("s-1", [], 0, "USD")
        assert result.amount == Money.zero("USD")
        assert result.tier_label is TierLabel.MONTHLY
        assert result.amount_unresolved is True


class TestResolveForStudent:
    @pytest.fixture
    def family(self, seed):
        return seed.family()

    def test_uses_active_and_trial_enrollments_only(self, services, seed, family):
        student = seed.student(family, "Linh")
        dropped = seed.program("Old Class", monthly=5000)
        trial = seed.program("Trial Class", monthly=12000)
        seed.enroll(student, dropped, EnrollmentStatus.DROPPED)
        seed.enroll(student, trial, EnrollmentStatus.TRIAL)

        result = services.tiers.resolve_for_student(student.id)

        assert result.is_success
        assert result.data.amount == Money(12000)
        assert result.data.past_payment_count == 0

    def test_counts_past_successful_payments(self, services, seed, family):
        student = seed.student(family, "Linh")
        seed.enroll(student, seed.program(monthly=12000))
        seed.payment(family, [student])
        seed.payment(family, [student])

        result = services.tiers.resolve_for_student(student.id)

        assert result.data.past_payment_count == 2

    def test_unconfigured_student_is_a_failure_with_resolution_attached(self, services, seed, family):
        student = seed.student(family, "Linh")
        seed.enroll(student, seed.program("Unpriced"))

        result = services.tiers.resolve_for_student(student.id)

        assert not result.is_success
        assert result.error.code is ErrorCode.AMOUNT_UNRESOLVED
        resolution = result.error.details["resolution"]
        assert resolution.amount_unresolved is True
        assert resolution.amount.is_zero()
