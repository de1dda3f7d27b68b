"""
Strapi REST client.

Every record that leaves this module is flat: Strapi v4 wraps fields under
``attributes`` and relations under ``{"data": ...}``, Strapi v5 returns them
flat. ``flatten_entity`` removes that difference at the boundary so the
services never branch on record shape.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from intranet.core.config import get_settings
from intranet.db.http_client import BaseRESTClient
from intranet.utils.error_handler import TransportException

logger = logging.getLogger(__name__)


def flatten_entity(value: Any) -> Any:
    """
    Flatten a Strapi entity, list of entities or relation wrapper.

    Examples:
        {"id": 1, "attributes": {"rut": "1-9"}}      -> {"id": 1, "rut": "1-9"}
        {"data": {"id": 2, "attributes": {...}}}      -> {"id": 2, ...}
        {"data": [{"id": 3, "attributes": {...}}]}    -> [{"id": 3, ...}]
        {"data": None}                                -> None
    """
    if isinstance(value, list):
        return [flatten_entity(item) for item in value]
    if not isinstance(value, dict):
        return value

    # Relación envuelta: {"data": ...} sin otros campos de entidad
    if "data" in value and set(value.keys()) <= {"data", "meta"}:
        return flatten_entity(value["data"])

    attributes = value.get("attributes")
    if isinstance(attributes, dict):
        flat = {key: item for key, item in value.items() if key != "attributes"}
        for key, item in attributes.items():
            flat.setdefault(key, item)
    else:
        flat = dict(value)

    return {key: flatten_entity(item) for key, item in flat.items()}


class StrapiClient(BaseRESTClient):
    """
    Client for the Strapi REST API.

    Collections are addressed by plural API id (``personas``, ``wo-clientes``,
    ``pedidos``...). Entities are addressed by numeric id or document id.
    """

    service_name = "strapi"

    def __init__(self, base_url: Optional[str] = None, api_token: Optional[str] = None):
        settings = get_settings()
        headers = settings.get_strapi_headers()
        if api_token:
            headers["Authorization"] = f"Bearer {api_token}"
        super().__init__(base_url=base_url or settings.strapi_api_base_url, headers=headers)
        logger.info(f"Initialized Strapi client for {self.base_url}")

    async def find(self, collection: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        GET a collection and return flat records.

        Args:
            collection: Collection API id
            params: Strapi query params (filters[...], populate, pagination[...])

        Returns:
            List of flat records
        """
        records, _ = await self.find_with_meta(collection, params)
        return records

    async def find_with_meta(
        self, collection: str, params: Optional[Dict[str, Any]] = None
    ) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """GET a collection, returning flat records and the pagination meta."""
        body = await self._request("GET", collection, params=params)
        if not isinstance(body, dict):
            return [], {}
        data = flatten_entity(body.get("data"))
        if data is None:
            records: List[Dict[str, Any]] = []
        elif isinstance(data, list):
            records = data
        else:
            records = [data]
        return records, body.get("meta") or {}

    async def find_one(
        self, collection: str, identifier: Any, params: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """
        GET a single entity by id or document id.

        Returns:
            Flat record, or None when Strapi answers 404
        """
        try:
            body = await self._request("GET", f"{collection}/{identifier}", params=params)
        except TransportException as e:
            if e.is_not_found:
                logger.debug(f"{collection}/{identifier} not found (404)")
                return None
            raise
        if not isinstance(body, dict):
            return None
        return flatten_entity(body.get("data", body))

    async def create(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """POST ``{data: ...}`` and return the created flat record."""
        body = await self._request("POST", collection, json={"data": data})
        return flatten_entity((body or {}).get("data", body)) or {}

    async def update(self, collection: str, identifier: Any, data: Dict[str, Any]) -> Dict[str, Any]:
        """PUT a partial ``{data: ...}`` update and return the updated flat record."""
        body = await self._request("PUT", f"{collection}/{identifier}", json={"data": data})
        return flatten_entity((body or {}).get("data", body)) or {}

    async def delete(self, collection: str, identifier: Any) -> None:
        """DELETE an entity by document id."""
        await self._request("DELETE", f"{collection}/{identifier}")
