"""
WooCommerce customer operations.
"""

import logging
import secrets
import time
from typing import Any, Dict, Optional

from .base_client import BaseWooCommerceClient

logger = logging.getLogger(__name__)


class WooCustomerClient:
    """Customer endpoints of one storefront, sharing the base client's session."""

    def __init__(self, base: BaseWooCommerceClient):
        self.base = base

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """GET customers?email=...&per_page=1, first match or None."""
        customers = await self.base.get("customers", params={"email": email, "per_page": 1})
        if isinstance(customers, list) and customers:
            return customers[0]
        return None

    async def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = dict(payload)
        email = data.get("email") or ""
        timestamp = int(time.time())
        data.setdefault("username", f"{email.split('@')[0]}_{timestamp}")
        data.setdefault("password", secrets.token_urlsafe(16))
        return await self.base.post("customers", data)

    async def update(self, customer_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self.base.put(f"customers/{customer_id}", payload)

    async def create_or_update(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Match by email: update the existing storefront customer or create one.

        Args:
            payload: WooCommerce customer payload (must contain email)

        Returns:
            Storefront customer as returned by WooCommerce
        """
        email = payload.get("email")
        existing = await self.find_by_email(email) if email else None

        if existing:
            logger.info(f"🔄 [{self.base.platform}] Updating customer {existing['id']} ({email})")
            return await self.update(existing["id"], payload)

        logger.info(f"➕ [{self.base.platform}] Creating customer {email}")
        return await self.create(payload)
