"""Database initialization utilities."""
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from school_billing.core.logging import get_logger
from school_billing.models import Base

logger = get_logger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create all billing tables that do not exist yet.

    Note: This is suitable for development/testing only.
    Production schemas are managed by migrations.
    """
    if bind is None:
        from school_billing.db.session import engine as bind

    existing_tables = inspect(bind).get_table_names()
    Base.metadata.create_all(bind=bind)
    logger.info(
        "Database initialized",
        extra={"existing_tables": len(existing_tables), "tables": len(Base.metadata.tables)},
    )


def drop_db(bind: Optional[Engine] = None) -> None:
    """
    Drop all billing tables.

    WARNING: This will delete all data! Only for development/testing purposes.
    """
    if bind is None:
        from school_billing.db.session import engine as bind

    Base.metadata.drop_all(bind=bind)
    logger.warning("All database tables dropped")
