"""
Service layer root package.

Services are plain classes over a request-scoped SQLAlchemy Session and
return ServiceResult values. Typical use from a request handler:

    for db in get_db():
        services = build_payment_services(db)
        result = services.aggregator.aggregate(family_id)
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from school_billing.config.settings import Settings, get_settings
from school_billing.repositories import (
    DiscountCodeRepository,
    EnrollmentRepository,
    FamilyRepository,
    IndividualSessionRepository,
    PaymentRepository,
)
from school_billing.services.base import ErrorCode, ErrorSeverity, ServiceError, ServiceResult, user_message
from school_billing.services.discount import DiscountCatalog, DiscountRedemptionService, DiscountValidator
from school_billing.services.payment import (
    DuplicatePaymentGuard,
    EligibilityEvaluator,
    FamilyPaymentAggregator,
    PaymentTierResolver,
)


@dataclass
class PaymentServices:
    """Services sharing one session and one set of repositories."""

    eligibility: EligibilityEvaluator
    tiers: PaymentTierResolver
    catalog: DiscountCatalog
    validator: DiscountValidator
    redemption: DiscountRedemptionService
    duplicate_guard: DuplicatePaymentGuard
    aggregator: FamilyPaymentAggregator


def build_payment_services(session: Session, settings: Optional[Settings] = None) -> PaymentServices:
    settings = settings or get_settings()

    payments = PaymentRepository(session)
    discount_codes = DiscountCodeRepository(session)

    eligibility = EligibilityEvaluator(session, payments, settings)
    tiers = PaymentTierResolver(session, EnrollmentRepository(session), payments, settings)
    catalog = DiscountCatalog(session, discount_codes, settings)
    validator = DiscountValidator(session, discount_codes, settings)

    return PaymentServices(
        eligibility=eligibility,
        tiers=tiers,
        catalog=catalog,
        validator=validator,
        redemption=DiscountRedemptionService(
            session,
            validator=validator,
            discount_code_repository=discount_codes,
            payment_repository=payments,
            settings=settings,
        ),
        duplicate_guard=DuplicatePaymentGuard(session, payments, settings),
        aggregator=FamilyPaymentAggregator(
            session,
            family_repository=FamilyRepository(session),
            payment_repository=payments,
            individual_session_repository=IndividualSessionRepository(session),
            eligibility_evaluator=eligibility,
            tier_resolver=tiers,
            discount_catalog=catalog,
            settings=settings,
        ),
    )


__all__ = [
    "PaymentServices",
    "build_payment_services",
    "ErrorCode",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
    "user_message",
]
