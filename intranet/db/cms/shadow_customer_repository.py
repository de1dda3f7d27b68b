"""
ShadowCustomerRepository: platform-scoped customers in ``wo-clientes``.
"""

import logging
from typing import Any, Dict, Optional

from intranet.db.cms.base import BaseRepository, log_operation

logger = logging.getLogger(__name__)


class ShadowCustomerRepository(BaseRepository):
    """Repository for WooCommerce shadow customer records."""

    collection = "wo-clientes"
    populate = {"populate[persona]": "true"}

    # Populate usado en GET /clientes/{id}: teléfonos y correos de la persona
    detail_populate = {
        "populate[persona][populate][telefonos]": "true",
        "populate[persona][populate][emails]": "true",
    }

    @log_operation()
    async def find_for_person(self, person_document_id: str, platform: str) -> Optional[Dict[str, Any]]:
        """Shadow record linked to a person on one platform."""
        records = await self.find(
            {
                "filters[persona][documentId][$eq]": person_document_id,
                "filters[originPlatform][$eq]": platform,
            }
        )
        return records[0] if records else None

    @log_operation()
    async def find_by_email(self, email: str, platform: str) -> Optional[Dict[str, Any]]:
        """Shadow record on one platform matched by contact email."""
        records = await self.find(
            {
                "filters[correo_electronico][$eq]": email,
                "filters[originPlatform][$eq]": platform,
            }
        )
        return records[0] if records else None
