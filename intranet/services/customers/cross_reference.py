"""
CrossReferenceWriter service - storefront id write-back.

After the fan-out, each (person, platform) shadow record in ``wo-clientes``
is linked to the storefront customer id. The write is best-effort: failures
come back as a SideEffect and are never raised.
"""

import logging
from typing import Any, Optional

from intranet.db.cms import ShadowCustomerRepository
from intranet.domain.models import Person, ShadowCustomer
from intranet.services.results import SideEffect
from intranet.utils.error_handler import describe_error

logger = logging.getLogger(__name__)


class CrossReferenceWriter:
    """Creates or patches the shadow record of a person on one platform."""

    def __init__(self, shadow_repo: ShadowCustomerRepository):
        self.shadow_repo = shadow_repo

    async def find_shadow(self, person: Person, platform: str) -> Optional[dict[str, Any]]:
        """By persona relation first, then by contact email."""
        record = None
        if person.document_id:
            record = await self.shadow_repo.find_for_person(person.document_id, platform)
        if record is None and person.primary_email:
            record = await self.shadow_repo.find_by_email(person.primary_email, platform)
        return record

    async def write_cross_reference(
        self,
        person: Person,
        platform: str,
        external_id: Optional[int],
        raw_payload: Optional[dict[str, Any]],
        shadow_defaults: Optional[dict[str, Any]] = None,
    ) -> SideEffect:
        """
        Link the shadow record of ``person`` on ``platform``.

        Found: PUT ``{wooId, rawWooData}``. Missing: POST a new shadow record
        with ``shadow_defaults``. Without an external id (storefront write
        failed) only a missing shadow record is created.

        Returns:
            SideEffect named ``cross_reference:<platform>``
        """
        name = f"cross_reference:{platform}"
        try:
            existing = await self.find_shadow(person, platform)

            if existing is not None:
                if external_id is None:
                    return SideEffect.skipped(name, "sin id de la tienda")
                identifier = existing.get("documentId") or existing.get("id")
                await self.shadow_repo.update(identifier, {"wooId": external_id, "rawWooData": raw_payload})
                logger.info(f"🔗 [{platform}] wo-cliente {identifier} linked to wooId {external_id}")
                return SideEffect.ok(name)

            shadow = ShadowCustomer(
                name=person.full_name or "",
                email=person.primary_email or "",
                origin_platform=platform,
                person_reference=person.document_id or (str(person.id) if person.id else None),
                external_id=external_id,
                raw_payload=raw_payload if external_id is not None else None,
                **(shadow_defaults or {}),
            )
            record = await self.shadow_repo.create(shadow.to_cms())
            logger.info(f"➕ [{platform}] wo-cliente created: {record.get('documentId') or record.get('id')}")
            return SideEffect.ok(name)

        except Exception as e:
            logger.error(f"❌ [{platform}] cross-reference write failed for {person.reference}: {describe_error(e)}")
            return SideEffect.failed(name, describe_error(e))
