"""
Order services package.

validate → convert (coupon, totals) → CMS create → storefront create →
woocommerce_id link-back, composed by OrderOrchestrator.
"""

from .converters import OrderConverter
from .orchestrator import OrderOrchestrator, create_order_orchestrator
from .resolvers import OrderResolver
from .validators import OrderValidator

__all__ = [
    "OrderConverter",
    "OrderOrchestrator",
    "create_order_orchestrator",
    "OrderResolver",
    "OrderValidator",
]
