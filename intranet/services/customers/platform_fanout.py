"""
PlatformFanout service - concurrent writes to WooCommerce storefronts.

Each selected platform gets its own create-or-update call. Calls run
concurrently and fail independently: one storefront's error never cancels,
blocks or rolls back another.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from intranet.db.woocommerce_clients import WooCommerceRegistry
from intranet.domain.models import Person
from intranet.services.results import PlatformResult
from intranet.utils.error_handler import describe_error
from intranet.utils.name_utils import split_platform_name

logger = logging.getLogger(__name__)

# Bloques opcionales que se copian al payload de la tienda y a rawWooData
EXTRA_BLOCKS = ("billing", "shipping", "meta_data")


def build_customer_payload(person: Person, extras: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """
    WooCommerce customer payload for a person.

    first_name is the first token of the full name and last_name the rest.
    """
    first_name, last_name = split_platform_name(person.full_name)
    payload: dict[str, Any] = {
        "email": person.primary_email,
        "first_name": first_name,
        "last_name": last_name,
    }
    for key in EXTRA_BLOCKS:
        if extras and extras.get(key):
            payload[key] = extras[key]
    return payload


def build_raw_payload(external_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
    """Snapshot stored as rawWooData on the shadow record."""
    raw = {
        "id": external_id,
        "email": payload.get("email"),
        "first_name": payload.get("first_name"),
        "last_name": payload.get("last_name"),
    }
    for key in EXTRA_BLOCKS:
        if payload.get(key):
            raw[key] = payload[key]
    return raw


class PlatformFanout:
    """Sends one logical change to every selected storefront concurrently."""

    def __init__(self, registry: WooCommerceRegistry):
        """
        Args:
            registry: Platform code to storefront client mapping
        """
        self.registry = registry

    def resolve_platforms(self, platforms: Optional[list[str]]) -> list[str]:
        return self.registry.resolve_platforms(platforms)

    def is_known(self, platform: str) -> bool:
        return self.registry.is_known(platform)

    async def _run(
        self, platform: str, operation: Callable[[Any], Awaitable[dict[str, Any]]]
    ) -> PlatformResult:
        if not self.registry.is_known(platform):
            return PlatformResult(success=False, error=f"Plataforma desconocida: {platform}")

        client = self.registry.get(platform)
        if client is None:
            logger.warning(f"⚠️ [{platform}] sin URL o credenciales, se omite")
            return PlatformResult(success=False, error=f"Plataforma {platform} no configurada (faltan URL o credenciales)")

        data = await operation(client)
        return PlatformResult(success=True, data=data)

    async def _gather(
        self, platforms: list[str], operation: Callable[[Any], Awaitable[dict[str, Any]]]
    ) -> dict[str, PlatformResult]:
        outcomes = await asyncio.gather(
            *(self._run(platform, operation) for platform in platforms),
            return_exceptions=True,
        )

        results: dict[str, PlatformResult] = {}
        for platform, outcome in zip(platforms, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"❌ [{platform}] storefront write failed: {describe_error(outcome)}")
                results[platform] = PlatformResult(success=False, error=describe_error(outcome))
            else:
                if outcome.success:
                    logger.info(f"✅ [{platform}] storefront write ok (id={outcome.external_id})")
                results[platform] = outcome
        return results

    async def sync_to_platforms(
        self, person: Person, platforms: Optional[list[str]], extras: Optional[dict[str, Any]] = None
    ) -> dict[str, PlatformResult]:
        """
        Create or update the person as a customer on each selected platform.

        Args:
            person: Canonical person (needs a primary email)
            platforms: Selected platform names; empty means all registered
            extras: Optional billing, shipping and meta_data blocks

        Returns:
            Map platform code → PlatformResult, one entry per selected platform
        """
        selected = self.resolve_platforms(platforms)
        payload = build_customer_payload(person, extras)
        logger.info(f"🌐 Syncing customer {payload['email']} to {selected}")

        async def create_or_update(client) -> dict[str, Any]:
            return await client.customers.create_or_update(payload)

        return await self._gather(selected, create_or_update)

    async def create_order_on_platform(self, platform: str, order_payload: dict[str, Any]) -> PlatformResult:
        """Single-platform order creation, with the same failure capture as customers."""

        async def create(client) -> dict[str, Any]:
            return await client.orders.create(order_payload)

        results = await self._gather([platform], create)
        return results[platform]

    async def update_order_on_platform(
        self, platform: str, external_id: int, order_payload: dict[str, Any]
    ) -> PlatformResult:
        """Single-platform order update (status changes)."""

        async def update(client) -> dict[str, Any]:
            return await client.orders.update(external_id, order_payload)

        results = await self._gather([platform], update)
        return results[platform]
