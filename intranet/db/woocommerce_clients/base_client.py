"""
Base WooCommerce REST client.

One instance per storefront (platform code). Authenticates with the
store's consumer key/secret over basic auth against ``{url}/wp-json/wc/v3``.
"""

import logging
from typing import Any, Dict, Optional

import aiohttp

from intranet.core.config import get_settings
from intranet.db.http_client import BaseRESTClient

logger = logging.getLogger(__name__)


class BaseWooCommerceClient(BaseRESTClient):
    """
    Base client for a single WooCommerce storefront.

    Attributes:
        platform: Platform code (e.g. "woo_moraleja")
        store_url: Storefront root URL
    """

    def __init__(self, platform: str, store_url: str, consumer_key: str, consumer_secret: str):
        settings = get_settings()
        self.platform = platform
        self.store_url = store_url.rstrip("/")
        self.service_name = platform
        super().__init__(
            base_url=f"{self.store_url}{settings.WOO_API_PATH}",
            headers={
                "Content-Type": "application/json",
                "User-Agent": f"{settings.APP_NAME}/{settings.APP_VERSION}",
            },
            auth=aiohttp.BasicAuth(consumer_key, consumer_secret),
        )
        logger.info(f"Initialized WooCommerce client [{platform}] for {self.store_url}")

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, data: Dict[str, Any]) -> Any:
        return await self._request("POST", path, json=data)

    async def put(self, path: str, data: Dict[str, Any]) -> Any:
        return await self._request("PUT", path, json=data)
