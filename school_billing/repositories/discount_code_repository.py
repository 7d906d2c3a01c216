# school_billing/repositories/discount_code_repository.py
"""
Discount code and usage-ledger queries.

Usage counts are always read from the `discount_code_usage` ledger at
call time; the `current_uses` column is only touched by the conditional
increment that guards redemption and the decrement that releases a use
when a payment fails.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import case, delete, func, or_, select, update
from sqlalchemy.orm import Session

from school_billing.models.discount import DiscountCode, DiscountCodeUsage
from school_billing.repositories.base import BaseRepository


class DiscountCodeRepository(BaseRepository[DiscountCode]):
    def __init__(self, session: Session):
        super().__init__(session, DiscountCode)

    def get_by_code(self, code: str) -> Optional[DiscountCode]:
        """Case-insensitive lookup on the trimmed code string."""
        normalized = (code or "").strip().lower()
        if not normalized:
            return None
        with self._store_call("get_by_code"):
            stmt = (
                select(DiscountCode)
                .where(func.lower(func.trim(DiscountCode.code)) == normalized)
                .order_by(DiscountCode.created_at.asc(), DiscountCode.id.asc())
                .limit(1)
            )
            return self.session.execute(stmt).scalar_one_or_none()

    def list_candidates(self, family_id: str) -> List[DiscountCode]:
        """Active codes that are global or belong to the family, in store order."""
        with self._store_call("list_candidates"):
            stmt = (
                select(DiscountCode)
                .where(
                    DiscountCode.is_active.is_(True),
                    or_(DiscountCode.family_id.is_(None), DiscountCode.family_id == family_id),
                )
                .order_by(DiscountCode.created_at.asc(), DiscountCode.id.asc())
            )
            return list(self.session.execute(stmt).scalars().all())

    def exists_active(self, family_id: str, now: datetime) -> bool:
        with self._store_call("exists_active"):
            stmt = (
                select(DiscountCode.id)
                .where(
                    DiscountCode.is_active.is_(True),
                    or_(DiscountCode.family_id.is_(None), DiscountCode.family_id == family_id),
                    or_(DiscountCode.valid_until.is_(None), DiscountCode.valid_until >= now),
                )
                .limit(1)
            )
            return self.session.execute(stmt).first() is not None

    def count_usages(self, discount_code_id: str) -> int:
        with self._store_call("count_usages"):
            stmt = select(func.count(DiscountCodeUsage.id)).where(
                DiscountCodeUsage.discount_code_id == discount_code_id
            )
            return self.session.execute(stmt).scalar_one()

    def has_usage_by(
        self,
        discount_code_id: str,
        family_id: str,
        student_id: Optional[str] = None,
    ) -> bool:
        """
        Whether the family already redeemed the code.

        With a student, a family-wide redemption (no student recorded) also
        counts as used.
        """
        with self._store_call("has_usage_by"):
            stmt = select(DiscountCodeUsage.id).where(
                DiscountCodeUsage.discount_code_id == discount_code_id,
                DiscountCodeUsage.family_id == family_id,
            )
            if student_id:
                stmt = stmt.where(
                    or_(
                        DiscountCodeUsage.student_id == student_id,
                        DiscountCodeUsage.student_id.is_(None),
                    )
                )
            return self.session.execute(stmt.limit(1)).first() is not None

    def record_usage(
        self,
        *,
        discount_code_id: str,
        family_id: str,
        student_id: Optional[str],
        payment_id: Optional[str],
        discount_amount_cents: int,
        original_amount_cents: int,
        final_amount_cents: int,
        used_at: datetime,
    ) -> DiscountCodeUsage:
        usage = DiscountCodeUsage(
            discount_code_id=discount_code_id,
            family_id=family_id,
            student_id=student_id,
            payment_id=payment_id,
            discount_amount_cents=discount_amount_cents,
            original_amount_cents=original_amount_cents,
            final_amount_cents=final_amount_cents,
            used_at=used_at,
        )
        self.add(usage, "record_usage")
        return usage

    def increment_usage_if_available(self, discount_code_id: str) -> bool:
        """
        Bump `current_uses` only while it is below `max_uses`.

        Returns False when no row was updated, meaning the last use was
        consumed concurrently.
        """
        with self._store_call("increment_usage_if_available"):
            stmt = (
                update(DiscountCode)
                .where(
                    DiscountCode.id == discount_code_id,
                    or_(
                        DiscountCode.max_uses.is_(None),
                        DiscountCode.current_uses < DiscountCode.max_uses,
                    ),
                )
                .values(current_uses=DiscountCode.current_uses + 1)
                .execution_options(synchronize_session=False)
            )
            result = self.session.execute(stmt)
            return result.rowcount == 1

    def delete_usages_for_payment(self, payment_id: str) -> List[str]:
        """Remove the usage rows written for a payment; returns the codes they used."""
        with self._store_call("delete_usages_for_payment"):
            code_ids = list(
                self.session.execute(
                    select(DiscountCodeUsage.discount_code_id)
                    .where(DiscountCodeUsage.payment_id == payment_id)
                    .distinct()
                ).scalars()
            )
            if code_ids:
                self.session.execute(
                    delete(DiscountCodeUsage)
                    .where(DiscountCodeUsage.payment_id == payment_id)
                    .execution_options(synchronize_session=False)
                )
            return code_ids

    def decrement_usage(self, discount_code_id: str) -> None:
        """Give one use back, never going below zero."""
        with self._store_call("decrement_usage"):
            self.session.execute(
                update(DiscountCode)
                .where(DiscountCode.id == discount_code_id)
                .values(
                    current_uses=case(
                        (DiscountCode.current_uses > 0, DiscountCode.current_uses - 1),
                        else_=0,
                    )
                )
                .execution_options(synchronize_session=False)
            )
