"""
WooCommerce REST clients organized by responsibility.
"""

from .base_client import BaseWooCommerceClient
from .customer_client import WooCustomerClient
from .order_client import WooOrderClient
from .unified_client import PLATFORM_ALIASES, WooCommerceClient, WooCommerceRegistry

__all__ = [
    "BaseWooCommerceClient",
    "WooCustomerClient",
    "WooOrderClient",
    "WooCommerceClient",
    "WooCommerceRegistry",
    "PLATFORM_ALIASES",
]
