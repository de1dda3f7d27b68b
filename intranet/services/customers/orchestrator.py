"""
CustomerSyncOrchestrator - Main coordinator for customer sync.

Flow for create/update:
1. Resolve the canonical person
2. Upsert the person in the CMS (success boundary)
3. Fan out to the selected storefronts concurrently
4. Write cross-references back to the shadow records
5. Aggregate the canonical record, per-platform map and side effects
"""

import logging
from typing import Any, Optional

from intranet.api.v1.schemas.customer_schemas import CustomerData, PersonaPayload, PhoneInput
from intranet.db.cms import PersonRepository, ShadowCustomerRepository
from intranet.db.strapi_client import StrapiClient
from intranet.db.woocommerce_clients import WooCommerceRegistry
from intranet.domain.models import PhoneRecord
from intranet.services.customers.cross_reference import CrossReferenceWriter
from intranet.services.customers.interfaces import ICrossReferenceWriter, IPersonResolver, IPersonUpsert, IPlatformFanout
from intranet.services.customers.person_upsert import PersonUpsertResult, PersonUpsertService
from intranet.services.customers.platform_fanout import PlatformFanout, build_customer_payload, build_raw_payload
from intranet.services.customers.resolvers import PersonResolver, ResolverKeys, ShadowCustomerResolver
from intranet.services.results import OperationResult, PlatformResult
from intranet.utils.error_handler import NotFoundException

logger = logging.getLogger(__name__)


class CustomerSyncOrchestrator:
    """
    Orchestrates customer create/update across the CMS and the storefronts.

    Each collaborator has a single responsibility and is injected via
    constructor.
    """

    def __init__(
        self,
        person_resolver: IPersonResolver,
        shadow_resolver: ShadowCustomerResolver,
        upsert_service: IPersonUpsert,
        fanout: IPlatformFanout,
        cross_reference_writer: ICrossReferenceWriter,
        shadow_repo: ShadowCustomerRepository,
    ):
        """
        Initialize orchestrator with service dependencies (DIP).

        Args:
            person_resolver: Canonical person lookup
            shadow_resolver: wo-clientes lookup by path identifier
            upsert_service: Person create/update
            fanout: Concurrent storefront writes
            cross_reference_writer: Shadow record write-back
            shadow_repo: wo-clientes repository for list/delete
        """
        self.person_resolver = person_resolver
        self.shadow_resolver = shadow_resolver
        self.upsert_service = upsert_service
        self.fanout = fanout
        self.cross_reference_writer = cross_reference_writer
        self.shadow_repo = shadow_repo

    # ------------------------- Create / update -------------------------

    async def create_customer(self, data: CustomerData) -> dict[str, Any]:
        """POST /clientes: a new person unless the payload names an existing one."""
        persona = self._with_phone_shortcut(data)
        resolved = None
        if persona.id is not None or persona.document_id:
            resolved = await self.person_resolver.resolve(
                ResolverKeys(id=persona.id, document_id=persona.document_id)
            )
        operation = await self._sync(persona, resolved, data)
        return self._response(operation, data, action="created")

    async def update_customer(self, identifier: Any, data: CustomerData) -> dict[str, Any]:
        """
        PUT /clientes/{id}.

        The person is resolved from the explicit persona documentId, the
        shadow record's persona relation, the rut and finally the email.
        """
        persona = self._with_phone_shortcut(data)

        person_reference = persona.document_id
        if not person_reference:
            shadow = await self.shadow_resolver.resolve(identifier)
            person_reference = self._person_reference(shadow)

        emails = [item.email for item in persona.emails or [] if item.email]
        keys = ResolverKeys(
            id=persona.id,
            document_id=person_reference,
            rut=persona.rut,
            email=emails[0] if emails else None,
        )
        resolved = await self.person_resolver.resolve(keys)
        if resolved is None:
            logger.info(f"Persona not found for wo-cliente {identifier}, a new one will be created")

        operation = await self._sync(persona, resolved, data)
        return self._response(operation, data, action="updated")

    async def _sync(self, persona: PersonaPayload, resolved, data: CustomerData) -> OperationResult[PersonUpsertResult]:
        upsert = await self.upsert_service.upsert_person(persona, resolved)
        operation = OperationResult(primary=upsert)
        operation.extend(upsert.side_effects)
        person = upsert.person

        extras = data.woocommerce_data.extras()
        if person.primary_email:
            platform_results = await self.fanout.sync_to_platforms(person, data.canales, extras)
        else:
            logger.warning(f"⚠️ Persona {person.reference} has no email, storefronts skipped")
            platform_results = {
                platform: PlatformResult(success=False, error="La persona no tiene correo electrónico")
                for platform in self.fanout.resolve_platforms(data.canales)
            }
        operation.platform_results = platform_results

        payload = build_customer_payload(person, extras)
        for platform, result in platform_results.items():
            if not self.fanout.is_known(platform):
                continue
            external_id = result.external_id
            raw_payload = build_raw_payload(external_id, payload) if external_id is not None else None
            operation.add(
                await self.cross_reference_writer.write_cross_reference(
                    person, platform, external_id, raw_payload, data.shadow_defaults()
                )
            )
        return operation

    @staticmethod
    def _with_phone_shortcut(data: CustomerData) -> PersonaPayload:
        """Fold ``data.telefono`` into the persona phones when none were sent."""
        persona = data.persona
        if data.telefono is not None and persona.telefonos is None:
            persona.telefonos = [PhoneInput(telefono_raw=data.telefono)] if data.telefono.strip() else []
        return persona

    @staticmethod
    def _person_reference(shadow: Optional[dict[str, Any]]) -> Optional[str]:
        if not shadow:
            return None
        persona = shadow.get("persona")
        if isinstance(persona, dict):
            return persona.get("documentId") or (str(persona["id"]) if persona.get("id") else None)
        return str(persona) if persona else None

    @staticmethod
    def _response(operation: OperationResult, data: CustomerData, action: str) -> dict[str, Any]:
        upsert: PersonUpsertResult = operation.primary
        platforms = {platform: result.to_dict() for platform, result in operation.platform_results.items()}
        succeeded = [platform for platform, result in operation.platform_results.items() if result.success]
        logger.info(
            f"✅ Customer {action}: persona={upsert.document_id} "
            f"platforms ok={succeeded} side_effects={len(operation.failed_side_effects)} failed"
        )
        return {
            "success": True,
            "action": action,
            "persona": {
                "id": upsert.id,
                "documentId": upsert.document_id,
                "created": upsert.created,
                "nombre_completo": upsert.person.full_name,
                "rut": upsert.person.rut,
            },
            "platforms": platforms,
            "side_effects": operation.side_effects_dict(),
            "message": f"Cliente {'creado' if action == 'created' else 'actualizado'} exitosamente",
        }

    # ------------------------- Read / delete -------------------------

    async def list_customers(self, page: int = 1, page_size: int = 25) -> dict[str, Any]:
        records, meta = await self.shadow_repo.list_page(page, page_size)
        return {"success": True, "data": records, "meta": meta}

    async def get_customer(self, identifier: Any) -> dict[str, Any]:
        """Shadow record with the person's principal phone and email."""
        record = await self.shadow_resolver.resolve(identifier, detailed=True)
        if record is None:
            raise NotFoundException(message=f"Cliente {identifier} no encontrado", resource="wo-clientes", identifier=identifier)

        persona = record.get("persona")
        if isinstance(persona, dict):
            phones = [phone for phone in (PhoneRecord.from_dict(item) for item in persona.get("telefonos") or []) if phone]
            principal = next((phone for phone in phones if phone.is_primary), phones[0] if phones else None)
            if principal and not record.get("telefono"):
                record["telefono"] = principal.raw
            emails = persona.get("emails") or []
            principal_email = next((item for item in emails if item.get("tipo") == "Personal"), emails[0] if emails else None)
            if principal_email and not record.get("correo_electronico"):
                record["correo_electronico"] = principal_email.get("email")

        return {"success": True, "data": record}

    async def delete_customer(self, identifier: Any) -> dict[str, Any]:
        record = await self.shadow_resolver.resolve(identifier)
        if record is None:
            raise NotFoundException(message=f"Cliente {identifier} no encontrado", resource="wo-clientes", identifier=identifier)

        target = record.get("documentId") or record.get("id")
        await self.shadow_repo.delete(target)
        logger.info(f"🗑️ wo-cliente {target} deleted")
        return {"success": True, "message": "Cliente eliminado exitosamente", "documentId": record.get("documentId")}


# Factory function to create orchestrator with all dependencies
def create_customer_orchestrator(
    strapi: StrapiClient,
    registry: WooCommerceRegistry,
) -> CustomerSyncOrchestrator:
    """
    Factory function to create fully initialized customer orchestrator.

    Args:
        strapi: CMS client shared by the repositories
        registry: Storefront clients per platform

    Returns:
        CustomerSyncOrchestrator: Fully configured orchestrator
    """
    person_repo = PersonRepository(strapi)
    shadow_repo = ShadowCustomerRepository(strapi)
    person_resolver = PersonResolver(person_repo)

    return CustomerSyncOrchestrator(
        person_resolver=person_resolver,
        shadow_resolver=ShadowCustomerResolver(shadow_repo),
        upsert_service=PersonUpsertService(person_repo, person_resolver),
        fanout=PlatformFanout(registry),
        cross_reference_writer=CrossReferenceWriter(shadow_repo),
        shadow_repo=shadow_repo,
    )
