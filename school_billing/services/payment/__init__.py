from school_billing.services.payment.duplicate_payment_guard import DuplicatePaymentGuard
from school_billing.services.payment.eligibility_evaluator import EligibilityEvaluator, evaluate_eligibility
from school_billing.services.payment.family_payment_aggregator import FamilyPaymentAggregator
from school_billing.services.payment.payment_tier_resolver import PaymentTierResolver, resolve_tier

__all__ = [
    "DuplicatePaymentGuard",
    "EligibilityEvaluator",
    "FamilyPaymentAggregator",
    "PaymentTierResolver",
    "evaluate_eligibility",
    "resolve_tier",
]
