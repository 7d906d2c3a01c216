"""
SQLAlchemy models for the billing store.

Importing this package registers every table on Base.metadata.
"""

from school_billing.models.base import Base, BaseModel
from school_billing.models.family import Family, Student
from school_billing.models.program import Enrollment, Program
from school_billing.models.payment import Payment, payment_students
from school_billing.models.discount import DiscountCode, DiscountCodeUsage
from school_billing.models.individual_session import IndividualSessionPurchase

__all__ = [
    "Base",
    "BaseModel",
    "Family",
    "Student",
    "Program",
    "Enrollment",
    "Payment",
    "payment_students",
    "DiscountCode",
    "DiscountCodeUsage",
    "IndividualSessionPurchase",
]
