"""
Modelos Pydantic para clientes (Persona + WO-Clientes).

El cuerpo de POST/PUT /clientes sigue el sobre de la intranet:
``{"data": {"persona": {...}, "canales": [...], "woocommerce_data": {...}}}``.
"""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class EmailInput(BaseModel):
    """Correo de una persona."""

    email: str = Field(..., description="Dirección de correo")
    tipo: Optional[str] = Field(default="Personal", description="Personal, Laboral o Institucional")


class PhoneInput(BaseModel):
    """
    Teléfono de una persona.

    La intranet envía el número bajo distintos nombres según el formulario.
    """

    model_config = ConfigDict(extra="allow")

    numero: Optional[str] = None
    telefono: Optional[str] = None
    telefono_raw: Optional[str] = None
    telefono_norm: Optional[str] = None
    value: Optional[str] = None
    tipo: Optional[str] = None
    principal: Optional[bool] = None
    status: Optional[bool] = None


class PersonaPayload(BaseModel):
    """
    Datos de la persona canónica.

    Solo los campos presentes en el cuerpo se envían en una actualización
    (``model_fields_set``).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    document_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("documentId", "document_id"))
    nombres: Optional[str] = None
    primer_apellido: Optional[str] = None
    segundo_apellido: Optional[str] = None
    nombre_completo: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("nombre_completo", "full_name")
    )
    rut: Optional[str] = Field(default=None, validation_alias=AliasChoices("rut", "tax_id"))
    genero: Optional[str] = None
    emails: Optional[list[EmailInput]] = None
    telefonos: Optional[list[PhoneInput]] = None

    @field_validator("nombres", "primer_apellido", "segundo_apellido", "nombre_completo", "rut", mode="before")
    @classmethod
    def strip_text(cls, v):
        """Recorta espacios; cadenas vacías quedan como None."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class WooCommerceData(BaseModel):
    """Bloques opcionales que viajan a las tiendas."""

    billing: Optional[dict[str, Any]] = None
    shipping: Optional[dict[str, Any]] = None
    meta_data: Optional[list[dict[str, Any]]] = None

    def extras(self) -> dict[str, Any]:
        return {key: value for key, value in self.model_dump().items() if value}


class CustomerData(BaseModel):
    """Contenido de ``data`` para crear o editar un cliente."""

    model_config = ConfigDict(populate_by_name=True)

    persona: PersonaPayload
    canales: list[str] = Field(default_factory=list, validation_alias=AliasChoices("canales", "platforms"))
    woocommerce_data: WooCommerceData = Field(default_factory=WooCommerceData)
    telefono: Optional[str] = Field(default=None, description="Atajo para un único teléfono")
    pedidos: Optional[int] = Field(default=None, ge=0)
    gasto_total: Optional[float] = Field(default=None, ge=0)
    fecha_registro: Optional[str] = None
    ultima_actividad: Optional[str] = None

    def shadow_defaults(self) -> dict[str, Any]:
        """Valores iniciales de los registros WO-Clientes nuevos."""
        defaults: dict[str, Any] = {
            "orders_count": self.pedidos or 0,
            "total_spent": self.gasto_total or 0.0,
        }
        if self.fecha_registro:
            defaults["registered_at"] = self.fecha_registro
        if self.ultima_actividad:
            defaults["last_activity"] = self.ultima_actividad
        return defaults


class CustomerRequest(BaseModel):
    """Cuerpo de POST/PUT /clientes."""

    data: CustomerData
