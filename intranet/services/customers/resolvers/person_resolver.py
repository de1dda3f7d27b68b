"""PersonResolver service - canonical person lookup."""

import logging
from typing import Any, Dict, Optional

from intranet.core.config import get_settings
from intranet.db.cms import PersonRepository
from intranet.domain.models import Person
from intranet.utils.rut_utils import rut_variants, ruts_match

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


def rut_filter(keys: ResolverKeys) -> Optional[Dict[str, Any]]:
    variants = rut_variants(keys.rut)
    if not variants:
        return None
    return {f"filters[rut][$in][{index}]": value for index, value in enumerate(variants)}


def email_filter(keys: ResolverKeys) -> Optional[Dict[str, Any]]:
    email = (keys.email or "").strip()
    return {"filters[emails][email][$eqi]": email} if email else None


def matches_rut(record: Record, keys: ResolverKeys) -> bool:
    return ruts_match(keys.rut, record.get("rut"))


def matches_email(record: Record, keys: ResolverKeys) -> bool:
    wanted = (keys.email or "").strip().lower()
    if not wanted:
        return False
    return any((item.get("email") or "").strip().lower() == wanted for item in record.get("emails") or [])


def matches_person(record: Record, keys: ResolverKeys) -> bool:
    """Scan matcher: any supplied key equal on its normalized form."""
    return matches_identifier(record, keys) or matches_rut(record, keys) or matches_email(record, keys)


class PersonResolver:
    """
    Resolves a canonical person from partial keys (SRP: lookup only).

    Chain: id filter → documentId filter → scan (after transport errors) →
    direct fetch → the same chain scoped to rut, then to email.
    """

    def __init__(self, person_repo: PersonRepository, scan_page_size: Optional[int] = None):
        """
        Initialize with repository dependency (DIP).

        Args:
            person_repo: Repository for the personas collection
            scan_page_size: Page size for the exhaustive scan fallback
        """
        self.person_repo = person_repo
        strapi = person_repo.strapi
        collection = person_repo.collection
        populate = person_repo.populate
        page_size = scan_page_size or get_settings().RESOLVER_SCAN_PAGE_SIZE
        scan = scan_strategy(strapi, collection, matches_person, page_size, populate)

        self.identifier_chain = [
            filter_strategy(strapi, collection, "person_by_id", id_filter, populate),
            filter_strategy(strapi, collection, "person_by_document_id", document_id_filter, populate),
            scan,
            direct_fetch_strategy(strapi, collection, populate),
        ]
        self.rut_chain = [
            filter_strategy(strapi, collection, "person_by_rut", rut_filter, populate, accept=matches_rut),
            scan,
        ]
        self.email_chain = [
            filter_strategy(strapi, collection, "person_by_email", email_filter, populate, accept=matches_email),
            scan,
        ]

    async def resolve_record(self, keys: ResolverKeys) -> Optional[Record]:
        """Flat CMS record for the keys, or None."""
        if keys.has_identifier:
            record = await resolve_first(self.identifier_chain, keys.only_identifiers())
            if record:
                return record

        if keys.rut:
            record = await resolve_first(self.rut_chain, keys.only_rut())
            if record:
                return record

        if keys.email:
            record = await resolve_first(self.email_chain, keys.only_email())
            if record:
                return record

        logger.debug(f"Persona not found for keys {keys}")
        return None

    async def resolve(self, keys: ResolverKeys) -> Optional[Person]:
        """
        Resolve a person.

        Returns:
            Person or None (not found is not an error)

        Raises:
            AuthException: If the CMS rejects the credentials
        """
        record = await self.resolve_record(keys)
        return Person.from_record(record) if record else None

    async def find_by_rut(self, rut: str) -> Optional[Person]:
        """Rut-only resolution used by the uniqueness pre-check."""
        return await self.resolve(ResolverKeys(rut=rut))
