# school_billing/repositories/base.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Generic, Iterator, Optional, Type, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from school_billing.core.exceptions import StoreUnavailableError
from school_billing.core.logging import get_logger
from school_billing.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)

logger = get_logger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository with common query helpers.

    - Does not commit/rollback; caller manages transactions.
    - Any SQLAlchemy failure surfaces as StoreUnavailableError so services
      can fail closed without knowing about the driver.
    """

    def __init__(self, session: Session, model: Type[ModelType]):
        self.session = session
        self.model = model

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    @property
    def table_name(self) -> str:
        return getattr(self.model, "__tablename__", self.model.__name__)

    @contextmanager
    def _store_call(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error(
                f"Store query failed: {operation}",
                exc_info=True,
                extra={"operation": operation, "table": self.table_name},
            )
            raise StoreUnavailableError(
                f"Store query failed during {operation}",
                operation=operation,
                table=self.table_name,
            ) from exc

    def _base_select(self) -> Select[tuple[ModelType]]:
        return select(self.model)

    # ------------------------------------------------------------------ #
    # Basic operations
    # ------------------------------------------------------------------ #
    def get(self, id_: str) -> Optional[ModelType]:
        with self._store_call("get"):
            stmt = self._base_select().where(self.model.id == id_)
            return self.session.execute(stmt).scalar_one_or_none()

    def add(self, db_obj: Base, operation: str = "add") -> Base:
        """Stage any mapped object in the current transaction."""
        with self._store_call(operation):
            self.session.add(db_obj)
            # flush to populate PK
            self.session.flush()
        return db_obj
