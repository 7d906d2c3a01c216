"""
Money value type.

All monetary values in the engine are an exact integer count of minor
currency units (cents) plus an ISO 4217 currency code. Arithmetic never
passes through float; percentages are applied with Decimal and rounded
half-up to the nearest minor unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Dict, Union

from pydantic_core import core_schema

from school_billing.core.exceptions import CurrencyMismatchError, ValidationError

DEFAULT_CURRENCY = "USD"
MINOR_UNITS_PER_MAJOR = 100

_CURRENCY_SYMBOLS = {"USD": "$", "CAD": "$", "EUR": "€", "GBP": "£", "INR": "₹"}


def _to_decimal(value: Union[Decimal, int, str]) -> Decimal:
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError("Monetary arithmetic does not accept float or bool values")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValidationError(f"Invalid decimal value: {value!r}") from e


@dataclass(frozen=True)
class Money:
    """Immutable amount in minor units."""

    minor_units: int
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise TypeError(
                f"Money requires an integer number of minor units, got {type(self.minor_units).__name__}"
            )
        currency = (self.currency or "").upper().strip()
        if len(currency) != 3:
            raise ValidationError("Currency code must be exactly 3 characters")
        object.__setattr__(self, "currency", currency)

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #
    @classmethod
    def from_minor_units(cls, n: int, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(n, currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(0, currency)

    @classmethod
    def from_decimal(cls, amount: Union[Decimal, int, str], currency: str = DEFAULT_CURRENCY) -> "Money":
        """Build from a major-unit amount such as Decimal("12.34").

        Amounts with sub-cent precision are rejected rather than rounded.
        """
        value = _to_decimal(amount) * MINOR_UNITS_PER_MAJOR
        if value != value.to_integral_value():
            raise ValidationError(f"Amount {amount} has more precision than the currency allows")
        return cls(int(value), currency)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Money":
        """Inverse of to_dict(); amount is in minor units."""
        amount = data.get("amount")
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValidationError("Money amount must be an integer number of minor units")
        return cls(amount, data.get("currency", DEFAULT_CURRENCY))

    # ------------------------------------------------------------------ #
    # Conversion
    # ------------------------------------------------------------------ #
    def to_minor_units(self) -> int:
        return self.minor_units

    def to_decimal(self) -> Decimal:
        return (Decimal(self.minor_units) / MINOR_UNITS_PER_MAJOR).quantize(Decimal("0.01"))

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": self.minor_units, "currency": self.currency}

    def format(self) -> str:
        symbol = _CURRENCY_SYMBOLS.get(self.currency, f"{self.currency} ")
        sign = "-" if self.minor_units < 0 else ""
        return f"{sign}{symbol}{abs(self.to_decimal()):,.2f}"

    # ------------------------------------------------------------------ #
    # Arithmetic
    # ------------------------------------------------------------------ #
    def _check_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Expected Money, got {type(other).__name__}")
        if other.currency != self.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    def add(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.minor_units + other.minor_units, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.minor_units - other.minor_units, self.currency)

    def multiply_by_int(self, n: int) -> "Money":
        if isinstance(n, bool) or not isinstance(n, int):
            raise TypeError("Money can only be multiplied by an integer")
        if n < 0:
            raise ValidationError("Multiplier must be non-negative")
        return Money(self.minor_units * n, self.currency)

    def percentage_of(self, percent: Union[Decimal, int, str]) -> "Money":
        """Return percent% of this amount, rounded half-up to a minor unit."""
        pct = _to_decimal(percent)
        exact = Decimal(self.minor_units) * pct / Decimal(100)
        return Money(int(exact.quantize(Decimal(1), rounding=ROUND_HALF_UP)), self.currency)

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.subtract(other)

    # ------------------------------------------------------------------ #
    # Comparison
    # ------------------------------------------------------------------ #
    @staticmethod
    def compare(a: "Money", b: "Money") -> int:
        a._check_currency(b)
        if a.minor_units < b.minor_units:
            return -1
        if a.minor_units > b.minor_units:
            return 1
        return 0

    def __lt__(self, other: "Money") -> bool:
        return Money.compare(self, other) < 0

    def __le__(self, other: "Money") -> bool:
        return Money.compare(self, other) <= 0

    def __gt__(self, other: "Money") -> bool:
        return Money.compare(self, other) > 0

    def __ge__(self, other: "Money") -> bool:
        return Money.compare(self, other) >= 0

    def is_positive(self) -> bool:
        return self.minor_units > 0

    def is_negative(self) -> bool:
        return self.minor_units < 0

    def is_zero(self) -> bool:
        return self.minor_units == 0

    @staticmethod
    def min_of(a: "Money", b: "Money") -> "Money":
        return a if Money.compare(a, b) <= 0 else b

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        """Validate as an exact Money instance or its {amount, currency} dict."""
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(lambda m: m.to_dict()),
        )

    @classmethod
    def _coerce(cls, value: Any) -> "Money":
        if isinstance(value, Money):
            return value
        if isinstance(value, dict):
            try:
                return cls.from_dict(value)
            except (ValidationError, TypeError) as e:
                raise ValueError(str(e)) from e
        raise ValueError(f"Expected Money, got {type(value).__name__}")

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Money({self.minor_units}, '{self.currency}')"


__all__ = ["Money", "DEFAULT_CURRENCY", "MINOR_UNITS_PER_MAJOR"]
