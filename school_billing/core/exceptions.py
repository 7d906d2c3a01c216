"""
Custom Exceptions for the School Billing engine

Exceptions raised below the service layer (repositories and the money
type). Services translate them into ServiceResult failures.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ExceptionCode(str, Enum):
    """Codes carried by exceptions raised below the service layer"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CURRENCY_MISMATCH = "CURRENCY_MISMATCH"

    # Database errors
    DATABASE_ERROR = "DATABASE_ERROR"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ExceptionCode = ExceptionCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, ExceptionCode.VALIDATION_ERROR, details)


class CurrencyMismatchError(ValidationError):
    """Raised when money values of different currencies are combined"""

    def __init__(self, left: str, right: str):
        super().__init__(f"Cannot combine {left} with {right}")
        self.error_code = ExceptionCode.CURRENCY_MISMATCH
        self.details = {"left": left, "right": right}


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, ExceptionCode.RESOURCE_NOT_FOUND, details)


# ========================================
# Database Exceptions
# ========================================

class DatabaseError(BaseAppException):
    """Exception raised when database operations fail"""

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        error_code: ExceptionCode = ExceptionCode.DATABASE_ERROR,
    ):
        details = {
            "operation": operation,
            "table": table
        }
        super().__init__(message, error_code, details)


class StoreUnavailableError(DatabaseError):
    """The relational store could not answer a query.

    Callers on money-affecting paths must fail closed when they see this.
    """

    def __init__(
        self,
        message: str = "Payment data store is unavailable",
        operation: Optional[str] = None,
        table: Optional[str] = None,
    ):
        super().__init__(
            message,
            operation=operation,
            table=table,
            error_code=ExceptionCode.STORE_UNAVAILABLE,
        )


__all__ = [
    "ExceptionCode",
    "BaseAppException",
    "ValidationError",
    "CurrencyMismatchError",
    "ResourceNotFoundError",
    "DatabaseError",
    "StoreUnavailableError",
]
