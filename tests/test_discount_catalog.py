from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import text

from school_billing.core.money import Money
from school_billing.schemas.common.enums import (
    DiscountScope,
    DiscountType,
    PaymentType,
    UsageType,
)
from school_billing.schemas.discount import FixedAmountDiscount, PercentageDiscount
from school_billing.services.base.service_result import ErrorCode
from tests.conftest import NOW


class TestListAvailable:
    @pytest.fixture
    def family(self, seed):
        return seed.family()

    def available_codes(self, services, family, subtotal=Money(20000), student_id=None,
                        payment_type=PaymentType.MONTHLY_GROUP):
        result = services.catalog.list_available(family.id, student_id, payment_type, subtotal, now=NOW)
        assert result.is_success
        return [d.code for d in result.data]

    def test_non_positive_subtotal_returns_empty(self, services, seed, family):
        seed.discount_code("TEN")
        assert self.available_codes(services, family, subtotal=Money(0)) == []
        assert self.available_codes(services, family, subtotal=Money(-100)) == []

    def test_sorted_by_savings_then_creation(self, services, seed, family):
        seed.discount_code("TEN", value="10")
        seed.discount_code(
            "TWENTY-OFF",
            discount_type=DiscountType.FIXED_AMOUNT,
            value="20.00",
        )
        seed.discount_code("FIFTEEN", value="15")

        result = services.catalog.list_available(
            family.id, None, PaymentType.MONTHLY_GROUP, Money(20000), now=NOW
        )

        # 15% = $30, 10% = $20, fixed $20 (created later than TEN)
        assert [d.code for d in result.data] == ["FIFTEEN", "TEN", "TWENTY-OFF"]
        assert [d.computed_savings for d in result.data] == [Money(3000), Money(2000), Money(2000)]

    def test_negative_fixed_amount_is_not_offered(self, services, seed, family):
        seed.discount_code("TEN", value="10")
        seed.discount_code("MINUS", discount_type=DiscountType.FIXED_AMOUNT, value="-5.00")

        assert self.available_codes(services, family) == ["TEN"]

    def test_discount_value_is_tagged(self, services, seed, family):
        seed.discount_code("TEN", value="10")
        seed.discount_code("FIXED", discount_type=DiscountType.FIXED_AMOUNT, value="5.00")

        result = services.catalog.list_available(
            family.id, None, PaymentType.MONTHLY_GROUP, Money(20000), now=NOW
        )
        values = {d.code: d.value for d in result.data}

        assert values["TEN"] == PercentageDiscount(percent=Decimal("10"))
        assert values["FIXED"] == FixedAmountDiscount(amount=Money(500))

    def test_formatted_display(self, services, seed, family):
        seed.discount_code("TEN", name="Sibling", value="10")
        seed.discount_code(
            "FIXED",
            name="Loyalty",
            description="thanks for staying",
            discount_type=DiscountType.FIXED_AMOUNT,
            value="5.00",
        )

        result = services.catalog.list_available(
            family.id, None, PaymentType.MONTHLY_GROUP, Money(20000), now=NOW
        )
        displays = {d.code: d.formatted_display for d in result.data}

        assert displays["TEN"] == "Sibling 10%"
        assert displays["FIXED"] == "Loyalty 5.00$ (thanks for staying)"

    def test_inactive_expired_and_future_codes_are_excluded(self, services, seed, family):
        seed.discount_code("OFF", is_active=False)
        seed.discount_code("OLD", valid_until=NOW - timedelta(days=1))
        seed.discount_code("SOON", valid_from=NOW + timedelta(days=1))
        seed.discount_code("OK", valid_from=NOW - timedelta(days=1), valid_until=NOW + timedelta(days=1))

        assert self.available_codes(services, family) == ["OK"]

    def test_payment_type_must_be_applicable(self, services, seed, family):
        seed.discount_code("STORE", applicable_to=(PaymentType.STORE_PURCHASE,))
        seed.discount_code("BOTH", applicable_to=(PaymentType.STORE_PURCHASE, PaymentType.MONTHLY_GROUP))

        assert self.available_codes(services, family) == ["BOTH"]
        assert self.available_codes(services, family, payment_type=PaymentType.STORE_PURCHASE) == ["STORE", "BOTH"]

    def test_other_family_code_is_excluded(self, services, seed, family):
        other = seed.family("Other")
        seed.discount_code("MINE", family=family)
        seed.discount_code("THEIRS", family=other)
        seed.discount_code("GLOBAL")

        assert sorted(self.available_codes(services, family)) == ["GLOBAL", "MINE"]

    def test_code_restricted_to_another_student_is_excluded(self, services, seed, family):
        anna, ben = seed.student(family, "Anna"), seed.student(family, "Ben")
        seed.discount_code("ANNA-ONLY", family=family, student=anna)

        assert self.available_codes(services, family, student_id=anna.id) == ["ANNA-ONLY"]
        assert self.available_codes(services, family, student_id=ben.id) == []

    def test_per_student_code_requires_student(self, services, seed, family):
        anna = seed.student(family, "Anna")
        seed.discount_code("PER-KID", scope=DiscountScope.PER_STUDENT)

        assert self.available_codes(services, family) == []
        assert self.available_codes(services, family, student_id=anna.id) == ["PER-KID"]

    def test_usage_limit_uses_ledger_count(self, services, seed, family):
        code = seed.discount_code("LIMITED", max_uses=2, current_uses=0)
        seed.usage(code, seed.family("A"))
        seed.usage(code, seed.family("B"))

        assert self.available_codes(services, family) == []

    def test_one_time_code_already_used_by_family_is_excluded(self, services, seed, family):
        code = seed.discount_code("WELCOME", usage_type=UsageType.ONE_TIME)
        other = seed.family("Other")
        seed.usage(code, family)

        assert self.available_codes(services, family) == []
        assert self.available_codes(services, other) == ["WELCOME"]

    def test_best_available_is_first_entry(self, services, seed, family):
        seed.discount_code("TEN", value="10")
        seed.discount_code("TWENTY", value="20")

        result = services.catalog.best_available(
            family.id, None, PaymentType.MONTHLY_GROUP, Money(20000), now=NOW
        )

        assert result.data.code == "TWENTY"

    def test_best_available_none_when_nothing_applies(self, services, family):
        result = services.catalog.best_available(
            family.id, None, PaymentType.MONTHLY_GROUP, Money(20000), now=NOW
        )
        assert result.is_success
        assert result.data is None


class TestHasAnyActive:
    def test_true_with_global_code(self, services, seed):
        family = seed.family()
        seed.discount_code("GLOBAL")
        assert services.catalog.has_any_active(family.id, now=NOW).data is True

    def test_ignores_expired_and_other_family(self, services, seed):
        family, other = seed.family(), seed.family("Other")
        seed.discount_code("OLD", valid_until=NOW - timedelta(days=1))
        seed.discount_code("THEIRS", family=other)
        assert services.catalog.has_any_active(family.id, now=NOW).data is False

    def test_store_failure(self, services, seed, session):
        family = seed.family()
        session.execute(text("DROP TABLE discount_codes"))

        result = services.catalog.has_any_active(family.id, now=NOW)

        assert result.error.code is ErrorCode.STORE_UNAVAILABLE
