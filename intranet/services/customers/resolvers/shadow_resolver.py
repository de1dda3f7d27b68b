"""ShadowCustomerResolver service - wo-clientes lookup by path identifier."""

import logging
from typing import Any, Dict, Optional

from intranet.core.config import get_settings
from intranet.db.cms import ShadowCustomerRepository

from .chain import (
    Record,
    ResolverKeys,
    direct_fetch_strategy,
    document_id_filter,
    filter_strategy,
    id_filter,
    matches_identifier,
    resolve_first,
    scan_strategy,
)

logger = logging.getLogger(__name__)


class ShadowCustomerResolver:
    """Resolves a shadow customer from a numeric id or document id."""

    def __init__(self, shadow_repo: ShadowCustomerRepository, scan_page_size: Optional[int] = None):
        self.shadow_repo = shadow_repo
        self.scan_page_size = scan_page_size or get_settings().RESOLVER_SCAN_PAGE_SIZE

    def _chain(self, populate: Dict[str, Any]):
        strapi = self.shadow_repo.strapi
        collection = self.shadow_repo.collection
        return [
            filter_strategy(strapi, collection, "shadow_by_id", id_filter, populate),
            filter_strategy(strapi, collection, "shadow_by_document_id", document_id_filter, populate),
            scan_strategy(strapi, collection, matches_identifier, self.scan_page_size, populate),
            direct_fetch_strategy(strapi, collection, populate),
        ]

    async def resolve(self, identifier: Any, detailed: bool = False) -> Optional[Record]:
        """
        Shadow record for a path identifier, or None.

        Args:
            identifier: Numeric id or document id
            detailed: Populate the person's phones and emails
        """
        populate = self.shadow_repo.detail_populate if detailed else self.shadow_repo.populate
        record = await resolve_first(self._chain(populate), ResolverKeys.from_identifier(identifier))
        if record is None:
            logger.debug(f"wo-cliente {identifier} not found")
        return record
