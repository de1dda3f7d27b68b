"""
Modelos Pydantic para pedidos.

Los montos llegan como números o cadenas desde los formularios de la
intranet; se aceptan tal cual y los valida OrderValidator, que responde
con un ValidationException descriptivo en vez de un 422 genérico.
"""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class OrderItemInput(BaseModel):
    """Línea de un pedido tal como la envía la intranet."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    nombre: Optional[str] = Field(default=None, validation_alias=AliasChoices("nombre", "name"))
    cantidad: Any = Field(default=None, validation_alias=AliasChoices("cantidad", "quantity", "qty"))
    precio: Any = Field(
        default=None, validation_alias=AliasChoices("precio", "precio_unitario", "price")
    )
    total: Any = None
    producto_id: Any = None
    product_id: Any = None
    libro_id: Any = None
    sku: Optional[str] = None

    @property
    def external_product_id(self) -> Optional[int]:
        """Primer id de producto numérico entre producto_id, product_id y libro_id."""
        for candidate in (self.producto_id, self.product_id, self.libro_id):
            if candidate is None or isinstance(candidate, bool):
                continue
            try:
                value = int(str(candidate).strip())
            except ValueError:
                continue
            if value > 0:
                return value
        return None


class OrderData(BaseModel):
    """
    Contenido de ``data`` para crear o editar un pedido.

    En una edición solo se aplican los campos presentes en el cuerpo
    (``model_fields_set``).
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    numero_pedido: Any = None
    fecha_pedido: Optional[str] = None
    estado: Optional[str] = None
    total: Any = None
    subtotal: Any = None
    impuestos: Any = None
    envio: Any = None
    descuento: Any = None
    moneda: Optional[str] = None
    origen: Optional[str] = None
    metodo_pago: Optional[str] = None
    metodo_pago_titulo: Optional[str] = None
    nota_cliente: Optional[str] = None
    cliente: Any = None
    origin_platform: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("originPlatform", "origin_platform")
    )
    items: Optional[list[OrderItemInput]] = None
    billing: Optional[dict[str, Any]] = None
    shipping: Optional[dict[str, Any]] = None
    cupon: Optional[str] = Field(default=None, validation_alias=AliasChoices("cupon", "coupon_code"))

    def provided_fields(self) -> set[str]:
        """Campos enviados explícitamente con valor distinto de None."""
        return {name for name in self.model_fields_set if getattr(self, name) is not None}

    @property
    def is_status_only(self) -> bool:
        return self.provided_fields() == {"estado"}


class OrderRequest(BaseModel):
    """Cuerpo de POST/PUT /pedidos."""

    data: OrderData
