"""
Discount code schemas.

A discount's value is a tagged variant: either a percentage of the
subtotal or a fixed Money amount. Nothing downstream inspects the raw
numeric column to guess which one it is.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, FrozenSet, Literal, Optional, Union

from pydantic import Field, field_validator

from school_billing.core.money import Money
from school_billing.schemas.common.base import BaseSchema
from school_billing.schemas.common.enums import (
    DiscountScope,
    DiscountType,
    PaymentType,
    UsageType,
)

__all__ = [
    "PercentageDiscount",
    "FixedAmountDiscount",
    "DiscountValue",
    "DiscountCodeRecord",
    "AvailableDiscount",
    "ValidatedDiscount",
]


class PercentageDiscount(BaseSchema):
    kind: Literal["percentage"] = "percentage"
    percent: Decimal = Field(..., gt=0, le=100)

    @property
    def discount_type(self) -> DiscountType:
        return DiscountType.PERCENTAGE

    def savings_for(self, subtotal: Money) -> Money:
        return subtotal.percentage_of(self.percent)

    def display(self) -> str:
        return f"{self.percent.normalize():f}%"


class FixedAmountDiscount(BaseSchema):
    kind: Literal["fixed_amount"] = "fixed_amount"
    amount: Money

    @field_validator("amount")
    @classmethod
    def amount_must_be_positive(cls, v: Money) -> Money:
        if not v.is_positive():
            raise ValueError("A fixed discount amount must be positive")
        return v

    @property
    def discount_type(self) -> DiscountType:
        return DiscountType.FIXED_AMOUNT

    def savings_for(self, subtotal: Money) -> Money:
        # Never re-interpreted against the subtotal; clamping is the validator's job
        return self.amount

    def display(self) -> str:
        return f"{self.amount.to_decimal()}$"


DiscountValue = Annotated[
    Union[PercentageDiscount, FixedAmountDiscount],
    Field(discriminator="kind"),
]


class DiscountCodeRecord(BaseSchema):
    """Read-only snapshot of a discount code row."""

    id: str
    code: str
    name: str
    description: Optional[str] = None
    value: DiscountValue
    usage_type: UsageType = UsageType.ONGOING
    max_uses: Optional[int] = Field(None, ge=0)
    scope: DiscountScope = DiscountScope.PER_FAMILY
    applicable_to: FrozenSet[PaymentType] = Field(default_factory=frozenset)
    family_id: Optional[str] = None
    student_id: Optional[str] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: bool = True
    created_at: datetime

    @property
    def discount_type(self) -> DiscountType:
        return self.value.discount_type

    @property
    def formatted_display(self) -> str:
        """"<name> <value>[%|$] (<description>)" as shown in the code picker."""
        text = f"{self.name} {self.value.display()}"
        if self.description:
            text += f" ({self.description})"
        return text

    @classmethod
    def from_model(cls, model, currency: str) -> "DiscountCodeRecord":
        if model.discount_type is DiscountType.PERCENTAGE:
            value = PercentageDiscount(percent=Decimal(model.discount_value))
        else:
            value = FixedAmountDiscount(amount=Money.from_decimal(Decimal(model.discount_value), currency))

        applicable = set()
        for raw in model.applicable_to or []:
            try:
                applicable.add(PaymentType(raw))
            except ValueError:
                continue

        return cls(
            id=model.id,
            code=model.code,
            name=model.name,
            description=model.description,
            value=value,
            usage_type=model.usage_type,
            max_uses=model.max_uses,
            scope=model.scope,
            applicable_to=frozenset(applicable),
            family_id=model.family_id,
            student_id=model.student_id,
            valid_from=model.valid_from,
            valid_until=model.valid_until,
            is_active=model.is_active,
            created_at=model.created_at,
        )


class AvailableDiscount(BaseSchema):
    """A usable code annotated with what it would save on the subtotal."""

    discount_code_id: str
    code: str
    name: str
    description: Optional[str] = None
    value: DiscountValue
    computed_savings: Money
    formatted_display: str
    created_at: datetime

    @property
    def discount_type(self) -> DiscountType:
        return self.value.discount_type


class ValidatedDiscount(BaseSchema):
    """A code re-verified at commit time with the exact amount to apply."""

    discount_code_id: str
    code: str
    name: str
    subtotal: Money
    discount_amount: Money

    @property
    def total_amount(self) -> Money:
        return self.subtotal - self.discount_amount
