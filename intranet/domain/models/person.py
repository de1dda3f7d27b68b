"""
Person domain model.

Canonical natural-person identity stored in the CMS ``personas`` collection.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Optional

from intranet.domain.enums import PhoneCategory
from intranet.utils.name_utils import join_full_name

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_NOISE = re.compile(r"[\s\-().]")


def is_valid_email(value: Optional[str]) -> bool:
    """Simple local@domain.tld check."""
    return bool(value) and bool(EMAIL_PATTERN.match(value.strip()))


def normalize_phone(value: Optional[str]) -> str:
    """Remove spacing and punctuation, keep digits and a leading +."""
    return _PHONE_NOISE.sub("", (value or "").strip())


@dataclass
class EmailRecord:
    """Email component of a Person."""

    email: str
    category: str = "Personal"

    def to_cms(self) -> dict[str, Any]:
        return {"email": self.email, "tipo": self.category}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmailRecord":
        return cls(email=(data.get("email") or "").strip(), category=data.get("tipo") or "Personal")


@dataclass
class PhoneRecord:
    """
    Phone component of a Person.

    Attributes:
        raw: Value as entered by the user
        normalized: Value without spacing/punctuation
        category: Personal, Laboral, Institucional or None
        is_primary: Principal phone flag
        active: Status flag
    """

    raw: str
    normalized: str = ""
    category: Optional[PhoneCategory] = None
    is_primary: bool = True
    active: bool = True

    def __post_init__(self) -> None:
        if not self.normalized:
            self.normalized = normalize_phone(self.raw)

    def to_cms(self) -> dict[str, Any]:
        return {
            "telefono_raw": self.raw,
            "telefono_norm": self.normalized,
            "tipo": self.category.value if self.category else None,
            "principal": self.is_primary,
            "status": self.active,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Optional["PhoneRecord"]:
        """Build from any of the accepted input shapes. Empty numbers yield None."""
        value = ""
        for key in ("numero", "telefono", "telefono_raw", "telefono_norm", "value"):
            if data.get(key):
                value = str(data[key]).strip()
                break
        if not value:
            return None
        return cls(
            raw=value,
            normalized=normalize_phone(data.get("telefono_norm") or value),
            category=PhoneCategory.parse(data.get("tipo")),
            is_primary=data["principal"] if data.get("principal") is not None else True,
            active=data["status"] if data.get("status") is not None else True,
        )


@dataclass
class Person:
    """
    Domain model representing a canonical person.

    Attributes:
        id: Numeric CMS id (None for new persons)
        document_id: CMS document id
        given_names: nombres
        first_surname: primer_apellido
        second_surname: segundo_apellido
        full_name: nombre_completo, derived from the parts when empty
        rut: National tax id as stored
        emails: Email components
        phones: Phone components
    """

    given_names: Optional[str] = None
    first_surname: Optional[str] = None
    second_surname: Optional[str] = None
    full_name: Optional[str] = None
    rut: Optional[str] = None
    emails: list[EmailRecord] = field(default_factory=list)
    phones: list[PhoneRecord] = field(default_factory=list)
    id: Optional[int] = None
    document_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.full_name:
            derived = join_full_name(self.given_names, self.first_surname, self.second_surname)
            self.full_name = derived or None

    @property
    def primary_email(self) -> Optional[str]:
        """First "Personal" email, otherwise the first email."""
        for record in self.emails:
            if record.category == "Personal" and record.email:
                return record.email
        return self.emails[0].email if self.emails else None

    @property
    def reference(self) -> str:
        """Identifier used for CMS relations: document id when known."""
        return self.document_id or str(self.id)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Person":
        """Create a Person from a flattened CMS record."""
        phones = []
        for raw_phone in record.get("telefonos") or []:
            phone = PhoneRecord.from_dict(raw_phone)
            if phone:
                phones.append(phone)
        return cls(
            id=record.get("id"),
            document_id=record.get("documentId"),
            given_names=record.get("nombres"),
            first_surname=record.get("primer_apellido"),
            second_surname=record.get("segundo_apellido"),
            full_name=record.get("nombre_completo"),
            rut=record.get("rut"),
            emails=[EmailRecord.from_dict(item) for item in record.get("emails") or [] if item.get("email")],
            phones=phones,
        )
