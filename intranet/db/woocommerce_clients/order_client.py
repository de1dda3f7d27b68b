"""
WooCommerce order operations.
"""

import logging
from typing import Any, Dict

from .base_client import BaseWooCommerceClient

logger = logging.getLogger(__name__)


class WooOrderClient:
    """Order endpoints of one storefront, sharing the base client's session."""

    def __init__(self, base: BaseWooCommerceClient):
        self.base = base

    async def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.info(f"🛒 [{self.base.platform}] Creating order with {len(payload.get('line_items', []))} items")
        return await self.base.post("orders", payload)

    async def update(self, order_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.info(f"🔄 [{self.base.platform}] Updating order {order_id}: {sorted(payload.keys())}")
        return await self.base.put(f"orders/{order_id}", payload)
