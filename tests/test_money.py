from decimal import Decimal

import pytest

from school_billing.core.exceptions import CurrencyMismatchError, ValidationError
from school_billing.core.money import Money
from school_billing.schemas.pricing import TierResolution
from school_billing.schemas.common.enums import TierLabel


class TestConstruction:
    def test_minor_units_round_trip(self):
        assert Money.from_minor_units(12000).to_minor_units() == 12000

    def test_float_is_rejected(self):
        with pytest.raises(TypeError):
            Money(12.5)

    def test_bool_is_rejected(self):
        with pytest.raises(TypeError):
            Money(True)

    def test_currency_is_normalised(self):
        assert Money(100, "cad").currency == "CAD"

    def test_from_decimal_rejects_sub_cent_precision(self):
        with pytest.raises(ValidationError):
            Money.from_decimal(Decimal("12.345"))

    def test_from_decimal_major_units(self):
        assert Money.from_decimal(Decimal("5.00")) == Money(500)

    def test_zero_is_well_formed(self):
        zero = Money.zero("USD")
        assert zero.is_zero()
        assert zero.to_dict() == {"amount": 0, "currency": "USD"}


class TestArithmetic:
    def test_add_and_subtract(self):
        assert Money(1000) + Money(250) == Money(1250)
        assert Money(1000) - Money(250) == Money(750)

    def test_currency_mismatch(self):
        with pytest.raises(CurrencyMismatchError):
            Money(100, "USD").add(Money(100, "CAD"))

    def test_multiply_by_int(self):
        assert Money(1500).multiply_by_int(3) == Money(4500)

    def test_multiply_rejects_negative_and_float(self):
        with pytest.raises(ValidationError):
            Money(100).multiply_by_int(-1)
        with pytest.raises(TypeError):
            Money(100).multiply_by_int(1.5)

    def test_percentage_of_two_hundred_dollars(self):
        assert Money(20000).percentage_of(Decimal("10")) == Money(2000)

    def test_percentage_of_three_cents_rounds_to_zero(self):
        assert Money(3).percentage_of(10) == Money(0)

    def test_percentage_of_rounds_half_up(self):
        assert Money(5).percentage_of(10) == Money(1)
        assert Money(1999).percentage_of(Decimal("12.5")) == Money(250)

    def test_percentage_of_rejects_float(self):
        with pytest.raises(TypeError):
            Money(100).percentage_of(10.0)


class TestComparisonAndDisplay:
    def test_compare(self):
        assert Money.compare(Money(1), Money(2)) == -1
        assert Money.compare(Money(2), Money(2)) == 0
        assert Money.compare(Money(3), Money(2)) == 1

    def test_min_of(self):
        assert Money.min_of(Money(2000), Money(500)) == Money(500)

    def test_sign_predicates(self):
        assert Money(1).is_positive()
        assert Money(-1).is_negative()
        assert not Money(0).is_positive()

    def test_format(self):
        assert Money(123456).format() == "$1,234.56"
        assert Money(12000).format() == "$120.00"

    def test_dict_round_trip(self):
        assert Money.from_dict(Money(4250, "USD").to_dict()) == Money(4250, "USD")

    def test_from_dict_rejects_non_integer_amount(self):
        with pytest.raises(ValidationError):
            Money.from_dict({"amount": "12.50", "currency": "USD"})

    def test_pydantic_field_accepts_wire_shape(self):
        resolution = TierResolution(
            student_id="s-1",
            amount={"amount": 12000, "currency": "USD"},
            tier_label=TierLabel.MONTHLY,
        )
        assert resolution.amount == Money(12000)
        assert resolution.model_dump()["amount"] == {"amount": 12000, "currency": "USD"}
