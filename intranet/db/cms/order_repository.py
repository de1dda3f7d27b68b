"""
OrderRepository: orders in the ``pedidos`` collection.
"""

import logging
from typing import Any, Dict

from intranet.db.cms.base import BaseRepository, log_operation

logger = logging.getLogger(__name__)


class OrderRepository(BaseRepository):
    """Repository for CMS order records."""

    collection = "pedidos"
    populate = {"populate": "*"}

    @log_operation()
    async def link_external_order(self, identifier: Any, external_id: int, raw_payload: Dict[str, Any]) -> Dict[str, Any]:
        """Store the storefront order id and payload on the CMS order."""
        return await self.update(identifier, {"woocommerce_id": external_id, "rawWooData": raw_payload})
