"""Database session management."""
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from school_billing.config.settings import settings


def build_engine(database_url: str = None, echo: bool = None) -> Engine:
    """Create an engine for the configured store."""
    url = database_url or settings.DATABASE_URL
    kwargs = {
        "pool_pre_ping": True,
        "echo": settings.DB_ECHO if echo is None else echo,
    }
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_size"] = settings.DB_POOL_SIZE
        kwargs["max_overflow"] = settings.DB_POOL_OVERFLOW
    return create_engine(url, **kwargs)


engine = build_engine()

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Yield a request-scoped database session.

    Usage from a request handler:
        for db in get_db():
            services = build_payment_services(db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
