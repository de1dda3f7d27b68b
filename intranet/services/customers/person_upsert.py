"""PersonUpsertService - canonical person lifecycle (SRP: create or update only)."""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from intranet.api.v1.schemas.customer_schemas import PersonaPayload
from intranet.db.cms import PersonRepository
from intranet.domain.models import EmailRecord, Person, PhoneRecord
from intranet.domain.models.person import is_valid_email
from intranet.services.customers.resolvers import PersonResolver
from intranet.services.results import SideEffect
from intranet.utils.error_handler import AppException, ConflictException, ValidationException, describe_error
from intranet.utils.name_utils import join_full_name, split_full_name
from intranet.utils.rut_utils import format_rut

logger = logging.getLogger(__name__)

# Campos escalares de Persona que se copian tal cual en una actualización parcial
_SCALAR_FIELDS = ("nombres", "primer_apellido", "segundo_apellido", "nombre_completo", "genero")


@dataclass
class PersonUpsertResult:
    """
    Outcome of an upsert.

    Attributes:
        id: Numeric CMS id
        document_id: CMS document id
        created: True when a new person was created
        person: Person as known after the write
        side_effects: Best-effort writes (phones)
    """

    id: Optional[int]
    document_id: Optional[str]
    created: bool
    person: Person
    side_effects: list[SideEffect] = field(default_factory=list)


def phones_from_payload(payload: PersonaPayload) -> list[PhoneRecord]:
    phones = []
    for item in payload.telefonos or []:
        phone = PhoneRecord.from_dict(item.model_dump(exclude_none=True))
        if phone:
            phones.append(phone)
    return phones


def emails_from_payload(payload: PersonaPayload) -> list[EmailRecord]:
    return [
        EmailRecord(email=item.email.strip(), category=item.tipo or "Personal")
        for item in payload.emails or []
        if item.email and item.email.strip()
    ]


class PersonUpsertService:
    """
    Creates or updates the canonical person.

    Updates are partial and never re-derive names. Creation validates the
    mandatory fields, checks rut uniqueness through the resolver and writes
    phones in a follow-up request.
    """

    def __init__(self, person_repo: PersonRepository, resolver: PersonResolver):
        """
        Initialize with dependencies (DIP).

        Args:
            person_repo: Repository for the personas collection
            resolver: Resolver used for the rut uniqueness pre-check
        """
        self.person_repo = person_repo
        self.resolver = resolver

    async def upsert_person(self, payload: PersonaPayload, resolved: Optional[Person]) -> PersonUpsertResult:
        """
        Update ``resolved`` or create a new person.

        Raises:
            ValidationException: Missing mandatory field on creation (no request issued)
            ConflictException: Rut already registered
        """
        if resolved is not None:
            return await self._update(payload, resolved)
        return await self._create(payload)

    # ------------------------- Update -------------------------

    def build_update_data(self, payload: PersonaPayload) -> dict[str, Any]:
        """Only the fields explicitly present in the payload."""
        fields_set = payload.model_fields_set
        data: dict[str, Any] = {}

        for name in _SCALAR_FIELDS:
            if name in fields_set:
                data[name] = getattr(payload, name)
        if "rut" in fields_set and payload.rut:
            data["rut"] = format_rut(payload.rut)
        if "emails" in fields_set and payload.emails is not None:
            data["emails"] = [record.to_cms() for record in emails_from_payload(payload)]
        if "telefonos" in fields_set and payload.telefonos is not None:
            data["telefonos"] = [phone.to_cms() for phone in phones_from_payload(payload)]
        return data

    async def _update(self, payload: PersonaPayload, resolved: Person) -> PersonUpsertResult:
        data = self.build_update_data(payload)
        person = resolved

        if data:
            logger.info(f"🔄 Updating persona {resolved.reference}: {sorted(data.keys())}")
            record = await self.person_repo.update(resolved.reference, data)
            if record:
                person = Person.from_record({**self._as_record(resolved), **record})
        else:
            logger.info(f"Persona {resolved.reference} unchanged (no fields in payload)")

        return PersonUpsertResult(id=person.id, document_id=person.document_id, created=False, person=person)

    @staticmethod
    def _as_record(person: Person) -> dict[str, Any]:
        return {
            "id": person.id,
            "documentId": person.document_id,
            "nombres": person.given_names,
            "primer_apellido": person.first_surname,
            "segundo_apellido": person.second_surname,
            "nombre_completo": person.full_name,
            "rut": person.rut,
            "emails": [record.to_cms() for record in person.emails],
            "telefonos": [phone.to_cms() for phone in person.phones],
        }

    # ------------------------- Creation -------------------------

    def validate_new_person(self, payload: PersonaPayload) -> None:
        """
        Mandatory fields for a new person. No network access.

        Raises:
            ValidationException: First missing or malformed field
        """
        if not payload.nombre_completo and not payload.nombres:
            raise ValidationException(
                message="El nombre completo de la persona es obligatorio",
                field="nombre_completo",
            )
        if not payload.rut:
            raise ValidationException(message="El RUT es obligatorio", field="rut")

        emails = emails_from_payload(payload)
        if not emails:
            raise ValidationException(message="El correo electrónico es obligatorio", field="emails")
        if not any(is_valid_email(record.email) for record in emails):
            raise ValidationException(
                message="El correo electrónico no es válido",
                field="emails",
                invalid_value=emails[0].email,
                expected_format="local@dominio.tld",
            )

    def build_create_data(self, payload: PersonaPayload) -> dict[str, Any]:
        names = {
            "nombres": payload.nombres,
            "primer_apellido": payload.primer_apellido,
            "segundo_apellido": payload.segundo_apellido,
        }
        if not payload.nombres and payload.nombre_completo:
            names = split_full_name(payload.nombre_completo)

        full_name = payload.nombre_completo or join_full_name(
            names["nombres"], names["primer_apellido"], names["segundo_apellido"]
        )
        return {
            "rut": format_rut(payload.rut),
            **names,
            "nombre_completo": full_name,
            "emails": [record.to_cms() for record in emails_from_payload(payload)],
            "genero": payload.genero,
        }

    async def _create(self, payload: PersonaPayload) -> PersonUpsertResult:
        self.validate_new_person(payload)

        rut = format_rut(payload.rut)
        existing = await self.resolver.find_by_rut(rut)
        if existing is not None:
            logger.warning(f"❌ RUT {rut} already registered on persona {existing.reference}")
            raise ConflictException(
                message=f"El RUT {rut} ya está registrado. Cada cliente debe tener un RUT único.",
                field="rut",
                value=rut,
                existing_id=existing.reference,
            )

        data = self.build_create_data(payload)
        logger.info(f"➕ Creating persona {data['nombre_completo']} ({rut})")
        record = await self.person_repo.create(data)
        person = Person.from_record({**data, **record})
        result = PersonUpsertResult(id=person.id, document_id=person.document_id, created=True, person=person)
        logger.info(f"✅ Persona created: id={person.id} documentId={person.document_id}")

        phones = phones_from_payload(payload)
        if phones:
            result.side_effects.append(await self._attach_phones(person, phones))
        return result

    async def _attach_phones(self, person: Person, phones: list[PhoneRecord]) -> SideEffect:
        try:
            await self.person_repo.set_phones(person.reference, phones)
        except AppException as e:
            logger.warning(f"⚠️ Persona {person.reference} created without phones: {describe_error(e)}")
            return SideEffect.failed("person_phones", describe_error(e))
        person.phones = phones
        return SideEffect.ok("person_phones")
