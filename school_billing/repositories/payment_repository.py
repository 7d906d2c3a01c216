# school_billing/repositories/payment_repository.py
"""
Payment queries used by eligibility and duplicate detection.
"""

from __future__ import annotations

from datetime import datetime
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from school_billing.models.payment import Payment, payment_students
from school_billing.repositories.base import BaseRepository
from school_billing.schemas.common.enums import PaymentStatus, PaymentType


class PaymentRepository(BaseRepository[Payment]):
    """Repository for payment reads."""

    def __init__(self, session: Session):
        super().__init__(session, Payment)

    def _succeeded_for_student_stmt(self, student_id: str):
        return (
            select(Payment)
            .join(payment_students, payment_students.c.payment_id == Payment.id)
            .where(
                payment_students.c.student_id == student_id,
                Payment.status == PaymentStatus.SUCCEEDED,
            )
        )

    def list_succeeded_for_student(self, student_id: str) -> List[Payment]:
        """
        Successful payments covering a student, most recent payment date
        first. Rows without a payment date sort last.
        """
        with self._store_call("list_succeeded_for_student"):
            stmt = self._succeeded_for_student_stmt(student_id).order_by(
                Payment.payment_date.desc().nulls_last(),
                Payment.created_at.desc(),
                Payment.id.asc(),
            )
            return list(self.session.execute(stmt).scalars().all())

    def count_succeeded_for_student(self, student_id: str) -> int:
        with self._store_call("count_succeeded_for_student"):
            stmt = (
                select(func.count(Payment.id))
                .join(payment_students, payment_students.c.payment_id == Payment.id)
                .where(
                    payment_students.c.student_id == student_id,
                    Payment.status == PaymentStatus.SUCCEEDED,
                )
            )
            return self.session.execute(stmt).scalar_one()

    def list_succeeded_for_family(self, family_id: str) -> List[Payment]:
        """All successful family payments with their student links loaded."""
        with self._store_call("list_succeeded_for_family"):
            stmt = (
                select(Payment)
                .options(selectinload(Payment.students))
                .where(
                    Payment.family_id == family_id,
                    Payment.status == PaymentStatus.SUCCEEDED,
                )
                .order_by(
                    Payment.payment_date.desc().nulls_last(),
                    Payment.created_at.desc(),
                    Payment.id.asc(),
                )
            )
            return list(self.session.execute(stmt).scalars().all())

    def list_recent_pending(
        self,
        family_id: str,
        payment_type: PaymentType,
        since: datetime,
    ) -> List[Payment]:
        """Pending payments of one type created at or after `since`, newest first."""
        with self._store_call("list_recent_pending"):
            stmt = (
                select(Payment)
                .options(selectinload(Payment.students))
                .where(
                    Payment.family_id == family_id,
                    Payment.type == payment_type,
                    Payment.status == PaymentStatus.PENDING,
                    Payment.created_at >= since,
                )
                .order_by(Payment.created_at.desc(), Payment.id.asc())
            )
            return list(self.session.execute(stmt).scalars().all())
