"""OrderResolver service - pedidos lookup by any order identifier."""

import logging
from typing import Any, Dict, Optional

from intranet.core.config import get_settings
from intranet.db.cms import OrderRepository
from intranet.services.customers.resolvers.chain import (
    Record,
    ResolverKeys,
    direct_fetch_strategy,
    document_id_filter,
    filter_strategy,
    id_filter,
    resolve_first,
    scan_strategy,
)

logger = logging.getLogger(__name__)


def order_number_filter(keys: ResolverKeys) -> Optional[Dict[str, Any]]:
    return {"filters[numero_pedido][$eq]": keys.document_id} if keys.document_id else None


def woocommerce_id_filter(keys: ResolverKeys) -> Optional[Dict[str, Any]]:
    numeric = keys.numeric_id
    return {"filters[woocommerce_id][$eq]": numeric} if numeric is not None else None


def matches_order(record: Record, keys: ResolverKeys) -> bool:
    """Client-side comparison against id, documentId, woocommerce_id and numero_pedido."""
    target = str(keys.document_id or keys.id or "").strip()
    if not target:
        return False
    candidates = (
        record.get("id"),
        record.get("documentId"),
        record.get("woocommerce_id"),
        record.get("numero_pedido"),
    )
    return any(value is not None and str(value) == target for value in candidates)


def document_id_only(keys: ResolverKeys):
    """Identifier for the direct fetch tried first: non-numeric document ids only."""
    if keys.numeric_id is None and keys.document_id:
        return [keys.document_id]
    return []


class OrderResolver:
    """
    Resolves an order from a document id, order number, storefront id or CMS id.

    Strategy order: direct fetch for document ids, documentId filter,
    numero_pedido filter, woocommerce_id filter, id filter, full scan (only
    after a transport failure) and finally a direct fetch.
    """

    def __init__(self, order_repo: OrderRepository, scan_page_size: Optional[int] = None):
        self.order_repo = order_repo
        self.scan_page_size = scan_page_size or get_settings().RESOLVER_SCAN_PAGE_SIZE

    def chain(self):
        strapi = self.order_repo.strapi
        collection = self.order_repo.collection
        populate = self.order_repo.populate
        return [
            direct_fetch_strategy(strapi, collection, populate, identifiers=document_id_only),
            filter_strategy(strapi, collection, "order_by_document_id", document_id_filter, populate),
            filter_strategy(strapi, collection, "order_by_number", order_number_filter, populate),
            filter_strategy(strapi, collection, "order_by_woocommerce_id", woocommerce_id_filter, populate),
            filter_strategy(strapi, collection, "order_by_id", id_filter, populate),
            scan_strategy(strapi, collection, matches_order, self.scan_page_size, populate),
            direct_fetch_strategy(strapi, collection, populate),
        ]

    async def resolve(self, identifier: Any) -> Optional[Record]:
        record = await resolve_first(self.chain(), ResolverKeys.from_identifier(identifier))
        if record is None:
            logger.debug(f"Pedido {identifier} not found")
        return record
