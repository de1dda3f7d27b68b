"""
Fallback-chain record resolution.

A strategy is an async function ``(keys) -> record | None``. ``resolve_first``
runs strategies in order and stops at the first record. A TransportException
moves the chain to the next strategy; AuthException (and anything else)
propagates. Strategies marked with ``after_transport_error`` only run once an
earlier strategy in the same chain failed at the transport level.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Sequence

from intranet.db.strapi_client import StrapiClient
from intranet.utils.error_handler import TransportException

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


@dataclass(frozen=True)
class ResolverKeys:
    """
    Candidate keys for a resolution.

    Attributes:
        id: Numeric CMS id (string or int)
        document_id: CMS document id
        rut: National tax id, any format
        email: Email address
    """

    id: Optional[Any] = None
    document_id: Optional[str] = None
    rut: Optional[str] = None
    email: Optional[str] = None

    @property
    def numeric_id(self) -> Optional[int]:
        if self.id is None:
            return None
        text = str(self.id).strip()
        return int(text) if text.isdigit() else None

    @property
    def has_identifier(self) -> bool:
        return self.id is not None or bool(self.document_id)

    def only_rut(self) -> "ResolverKeys":
        return ResolverKeys(rut=self.rut)

    def only_email(self) -> "ResolverKeys":
        return ResolverKeys(email=self.email)

    def only_identifiers(self) -> "ResolverKeys":
        return ResolverKeys(id=self.id, document_id=self.document_id)

    @classmethod
    def from_identifier(cls, identifier: Any) -> "ResolverKeys":
        """Keys for a path parameter that may be a numeric id or a document id."""
        text = str(identifier).strip()
        if text.isdigit():
            return cls(id=text, document_id=text)
        return cls(document_id=text)


Strategy = Callable[[ResolverKeys], Awaitable[Optional[Record]]]


def after_transport_error(strategy: Strategy) -> Strategy:
    """Mark a strategy as a fallback that only runs after a transport failure."""
    strategy.after_transport_error = True
    return strategy


async def resolve_first(strategies: Sequence[Strategy], keys: ResolverKeys) -> Optional[Record]:
    """
    Try each strategy in order and return the first record found.

    Args:
        strategies: Ordered strategies
        keys: Candidate keys

    Returns:
        First record found, or None when every strategy came up empty
    """
    transport_failed = False

    for strategy in strategies:
        name = getattr(strategy, "__name__", repr(strategy))
        if getattr(strategy, "after_transport_error", False) is True and not transport_failed:
            continue
        try:
            record = await strategy(keys)
        except TransportException as e:
            transport_failed = True
            logger.warning(f"⚠️ Resolver strategy {name} failed, trying next: {e.message}")
            continue
        if record is not None:
            logger.debug(f"Resolver strategy {name} matched")
            return record

    return None


# === Strategy builders ===


def filter_strategy(
    strapi: StrapiClient,
    collection: str,
    name: str,
    build_filters: Callable[[ResolverKeys], Optional[Dict[str, Any]]],
    populate: Optional[Dict[str, Any]] = None,
    accept: Optional[Callable[[Record, ResolverKeys], bool]] = None,
) -> Strategy:
    """
    Strategy that queries the collection with targeted filters.

    ``build_filters`` returns None when the keys do not apply, which skips
    the request. ``accept`` re-checks candidates client-side.
    """

    async def strategy(keys: ResolverKeys) -> Optional[Record]:
        filters = build_filters(keys)
        if not filters:
            return None
        params = dict(populate or {})
        params.update(filters)
        for record in await strapi.find(collection, params):
            if accept is None or accept(record, keys):
                return record
        return None

    strategy.__name__ = name
    return strategy


def scan_strategy(
    strapi: StrapiClient,
    collection: str,
    matcher: Callable[[Record, ResolverKeys], bool],
    page_size: int,
    populate: Optional[Dict[str, Any]] = None,
) -> Strategy:
    """Exhaustive scan of one large page, comparing keys client-side."""

    async def scan(keys: ResolverKeys) -> Optional[Record]:
        params = dict(populate or {})
        params["pagination[pageSize]"] = page_size
        records = await strapi.find(collection, params)
        logger.info(f"🔎 Scanning {len(records)} {collection} records client-side")
        for record in records:
            if matcher(record, keys):
                return record
        return None

    scan.__name__ = f"scan_{collection}"
    return after_transport_error(scan)


def direct_fetch_strategy(
    strapi: StrapiClient,
    collection: str,
    populate: Optional[Dict[str, Any]] = None,
    identifiers: Optional[Callable[[ResolverKeys], Iterable[Any]]] = None,
) -> Strategy:
    """GET /{collection}/{id}; a 404 means not found."""

    def default_identifiers(keys: ResolverKeys) -> Iterable[Any]:
        seen = []
        for value in (keys.document_id, keys.id):
            if value is not None and str(value) and str(value) not in seen:
                seen.append(str(value))
        return seen

    async def direct_fetch(keys: ResolverKeys) -> Optional[Record]:
        for identifier in (identifiers or default_identifiers)(keys):
            record = await strapi.find_one(collection, identifier, populate)
            if record:
                return record
        return None

    direct_fetch.__name__ = f"direct_fetch_{collection}"
    return direct_fetch


def id_filter(keys: ResolverKeys) -> Optional[Dict[str, Any]]:
    numeric = keys.numeric_id
    return {"filters[id][$eq]": numeric} if numeric is not None else None


def document_id_filter(keys: ResolverKeys) -> Optional[Dict[str, Any]]:
    return {"filters[documentId][$eq]": keys.document_id} if keys.document_id else None


def matches_identifier(record: Record, keys: ResolverKeys) -> bool:
    """Client-side id/documentId comparison."""
    if keys.id is not None and str(record.get("id")) == str(keys.id).strip():
        return True
    return bool(keys.document_id) and record.get("documentId") == keys.document_id
