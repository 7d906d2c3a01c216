"""
Repositories: the query interface to the relational store.

Repositories never commit; the calling service owns the transaction.
"""

from school_billing.repositories.base import BaseRepository
from school_billing.repositories.discount_code_repository import DiscountCodeRepository
from school_billing.repositories.enrollment_repository import EnrollmentRepository
from school_billing.repositories.family_repository import FamilyRepository
from school_billing.repositories.individual_session_repository import IndividualSessionRepository
from school_billing.repositories.payment_repository import PaymentRepository

__all__ = [
    "BaseRepository",
    "DiscountCodeRepository",
    "EnrollmentRepository",
    "FamilyRepository",
    "IndividualSessionRepository",
    "PaymentRepository",
]
