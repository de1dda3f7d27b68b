"""
Platform shadow customer domain model.

Projection of a Person onto one WooCommerce storefront, stored in the CMS
``wo-clientes`` collection.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


@dataclass
class ShadowCustomer:
    """
    Domain model representing a platform-scoped customer record.

    Attributes:
        name: nombre
        email: correo_electronico
        origin_platform: originPlatform (woo_moraleja, woo_escolar, otros)
        person_reference: persona relation (documentId of the Person)
        orders_count: pedidos
        total_spent: gasto_total
        registered_at: fecha_registro (ISO-8601)
        last_activity: ultima_actividad
        external_id: wooId, None until the storefront write succeeds
        raw_payload: rawWooData, snapshot of the last storefront payload
        id: Numeric CMS id
        document_id: CMS document id
    """

    name: str
    email: str
    origin_platform: str
    person_reference: Optional[str] = None
    orders_count: int = 0
    total_spent: float = 0.0
    registered_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    last_activity: Optional[str] = None
    external_id: Optional[int] = None
    raw_payload: Optional[dict[str, Any]] = None
    id: Optional[int] = None
    document_id: Optional[str] = None

    def to_cms(self) -> dict[str, Any]:
        """Payload for POST /wo-clientes."""
        data: dict[str, Any] = {
            "nombre": self.name,
            "correo_electronico": self.email,
            "pedidos": int(self.orders_count or 0),
            "gasto_total": float(self.total_spent or 0),
            "fecha_registro": self.registered_at,
            "originPlatform": self.origin_platform,
        }
        if self.person_reference:
            data["persona"] = self.person_reference
        if self.last_activity:
            data["ultima_actividad"] = self.last_activity
        if self.external_id is not None:
            data["wooId"] = self.external_id
        if self.raw_payload is not None:
            data["rawWooData"] = self.raw_payload
        return data

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "ShadowCustomer":
        """Create from a flattened CMS record."""
        persona = record.get("persona")
        if isinstance(persona, dict):
            person_reference = persona.get("documentId") or (str(persona["id"]) if persona.get("id") else None)
        else:
            person_reference = str(persona) if persona else None
        return cls(
            id=record.get("id"),
            document_id=record.get("documentId"),
            name=record.get("nombre") or "",
            email=record.get("correo_electronico") or "",
            origin_platform=record.get("originPlatform") or "",
            person_reference=person_reference,
            orders_count=int(record.get("pedidos") or 0),
            total_spent=float(record.get("gasto_total") or 0),
            registered_at=record.get("fecha_registro") or datetime.now(timezone.utc).isoformat(),
            last_activity=record.get("ultima_actividad"),
            external_id=record.get("wooId"),
            raw_payload=record.get("rawWooData"),
        )
