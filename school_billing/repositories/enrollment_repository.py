# school_billing/repositories/enrollment_repository.py
from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from school_billing.models.program import Enrollment
from school_billing.repositories.base import BaseRepository
from school_billing.schemas.common.enums import EnrollmentStatus

PRICED_ENROLLMENT_STATUSES = (EnrollmentStatus.ACTIVE, EnrollmentStatus.TRIAL)


class EnrollmentRepository(BaseRepository[Enrollment]):
    def __init__(self, session: Session):
        super().__init__(session, Enrollment)

    def list_priced_enrollments(self, student_id: str) -> List[Enrollment]:
        """Active and trial enrollments with their program, oldest first."""
        with self._store_call("list_priced_enrollments"):
            stmt = (
                select(Enrollment)
                .options(joinedload(Enrollment.program))
                .where(
                    Enrollment.student_id == student_id,
                    Enrollment.status.in_(PRICED_ENROLLMENT_STATUSES),
                )
                .order_by(Enrollment.created_at.asc(), Enrollment.id.asc())
            )
            return list(self.session.execute(stmt).scalars().all())
