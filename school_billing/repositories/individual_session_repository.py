# school_billing/repositories/individual_session_repository.py
from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from school_billing.models.individual_session import IndividualSessionPurchase
from school_billing.repositories.base import BaseRepository


class IndividualSessionRepository(BaseRepository[IndividualSessionPurchase]):
    def __init__(self, session: Session):
        super().__init__(session, IndividualSessionPurchase)

    def list_for_family(self, family_id: str) -> List[IndividualSessionPurchase]:
        with self._store_call("list_for_family"):
            stmt = (
                select(IndividualSessionPurchase)
                .where(IndividualSessionPurchase.family_id == family_id)
                .order_by(
                    IndividualSessionPurchase.purchase_date.desc(),
                    IndividualSessionPurchase.id.asc(),
                )
            )
            return list(self.session.execute(stmt).scalars().all())
