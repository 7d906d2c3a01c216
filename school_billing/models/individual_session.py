"""
Individual (one-on-one) session purchases.

Sessions are bought in blocks per family; `quantity_remaining` is the
balance shown alongside each student's payment status.
"""

from datetime import date as Date
from typing import Optional

from sqlalchemy import Date as SQLDate, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from school_billing.models.base import BaseModel


class IndividualSessionPurchase(BaseModel):
    __tablename__ = "individual_session_purchases"

    family_id: Mapped[str] = mapped_column(
        ForeignKey("families.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    payment_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("payments.id", ondelete="SET NULL"),
        nullable=True,
    )
    purchase_date: Mapped[Date] = mapped_column(SQLDate, nullable=False)
    quantity_purchased: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity_remaining: Mapped[int] = mapped_column(Integer, nullable=False)
