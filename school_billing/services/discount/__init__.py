from school_billing.services.discount.discount_catalog import DiscountCatalog
from school_billing.services.discount.discount_redemption import DiscountRedemptionService
from school_billing.services.discount.discount_validator import DiscountValidator

__all__ = [
    "DiscountCatalog",
    "DiscountRedemptionService",
    "DiscountValidator",
]
