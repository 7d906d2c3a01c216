from school_billing.core.exceptions import (
    BaseAppException,
    CurrencyMismatchError,
    DatabaseError,
    ResourceNotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from school_billing.core.money import Money

__all__ = [
    "BaseAppException",
    "CurrencyMismatchError",
    "DatabaseError",
    "ResourceNotFoundError",
    "StoreUnavailableError",
    "ValidationError",
    "Money",
]
