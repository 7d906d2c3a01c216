# school_billing/repositories/family_repository.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from school_billing.models.family import Family, Student
from school_billing.repositories.base import BaseRepository


class FamilyRepository(BaseRepository[Family]):
    def __init__(self, session: Session):
        super().__init__(session, Family)

    def get_student(self, student_id: str) -> Optional[Student]:
        with self._store_call("get_student"):
            stmt = select(Student).where(Student.id == student_id)
            return self.session.execute(stmt).scalar_one_or_none()

    def list_students(self, family_id: str) -> List[Student]:
        """Students of a family in a stable order (oldest record first)."""
        with self._store_call("list_students"):
            stmt = (
                select(Student)
                .where(Student.family_id == family_id)
                .order_by(Student.created_at.asc(), Student.id.asc())
            )
            return list(self.session.execute(stmt).scalars().all())
