"""
Unified WooCommerce client and the per-platform registry.

``WooCommerceClient`` bundles the customer and order clients of one
storefront over a single session. ``WooCommerceRegistry`` holds one client
per configured platform and resolves loosely written platform names.
"""

import logging
from typing import Dict, Iterable, List, Optional

from intranet.core.config import Settings, get_settings

from .base_client import BaseWooCommerceClient
from .customer_client import WooCustomerClient
from .order_client import WooOrderClient

logger = logging.getLogger(__name__)

# Fragmentos aceptados al elegir plataformas desde la intranet ("moraleja", "Escolar"...)
PLATFORM_ALIASES = {
    "woo_moraleja": ("moraleja",),
    "woo_escolar": ("escolar",),
}


class WooCommerceClient(BaseWooCommerceClient):
    """Storefront client exposing ``customers`` and ``orders``."""

    def __init__(self, platform: str, store_url: str, consumer_key: str, consumer_secret: str):
        super().__init__(platform, store_url, consumer_key, consumer_secret)
        self.customers = WooCustomerClient(self)
        self.orders = WooOrderClient(self)


class WooCommerceRegistry:
    """
    Platform code → storefront client.

    A platform listed in ``known_platforms`` without credentials stays known
    (it can be selected) but has no client; writes to it are reported as
    failures by the fan-out.
    """

    def __init__(
        self,
        clients: Dict[str, object],
        known_platforms: Optional[Iterable[str]] = None,
        aliases: Optional[Dict[str, Iterable[str]]] = None,
    ):
        self._clients = dict(clients)
        self.known_platforms: List[str] = list(known_platforms or self._clients.keys())
        for platform in self._clients:
            if platform not in self.known_platforms:
                self.known_platforms.append(platform)
        self.aliases = {key: tuple(value) for key, value in (aliases or PLATFORM_ALIASES).items()}

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "WooCommerceRegistry":
        settings = settings or get_settings()
        clients = {}
        platforms = settings.get_woocommerce_platforms()
        for platform, credentials in platforms.items():
            if credentials["url"] and credentials["consumer_key"] and credentials["consumer_secret"]:
                clients[platform] = WooCommerceClient(
                    platform,
                    credentials["url"],
                    credentials["consumer_key"],
                    credentials["consumer_secret"],
                )
            else:
                logger.warning(f"⚠️ WooCommerce [{platform}] no configurado (faltan URL o credenciales)")
        return cls(clients, known_platforms=platforms.keys())

    def get(self, platform: str):
        """Client for a platform code, or None if it is not configured."""
        return self._clients.get(platform)

    def is_known(self, platform: str) -> bool:
        return platform in self.known_platforms

    def resolve_platforms(self, selected: Optional[Iterable[str]]) -> List[str]:
        """
        Map caller-selected platform names to platform codes.

        Empty selection means every known platform. Each entry matches a code
        exactly (case-insensitive) or through an alias substring. Unmatched
        entries are kept as given so the caller can report them. Order
        follows the selection.
        """
        selected = [str(item).strip() for item in (selected or []) if item and str(item).strip()]
        if not selected:
            return list(self.known_platforms)

        resolved: List[str] = []
        for entry in selected:
            lowered = entry.lower()
            match = None
            for platform in self.known_platforms:
                if lowered == platform.lower() or any(alias in lowered for alias in self.aliases.get(platform, ())):
                    match = platform
                    break
            if match is None:
                logger.warning(f"⚠️ Plataforma desconocida: {entry}")
                match = entry
            if match not in resolved:
                resolved.append(match)
        return resolved

    async def close(self):
        for client in self._clients.values():
            await client.close()
