"""
Order domain model (Aggregate Root).

Represents an order stored in the CMS ``pedidos`` collection and mirrored
to the WooCommerce storefront of its origin platform.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from intranet.domain.value_objects.money import Money


@dataclass
class LineItem:
    """
    Order line item, embedded in the order.

    Attributes:
        name: Product name
        quantity: Units ordered (> 0)
        price: Unit price
        total: Line total, price × quantity within 0.01
        product_id: External product id (producto_id/product_id/libro_id)
        sku: Optional SKU
    """

    name: str
    quantity: int
    price: Money
    total: Money
    product_id: Optional[int] = None
    sku: Optional[str] = None

    def to_cms(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "nombre": self.name,
            "cantidad": self.quantity,
            "precio_unitario": self.price.to_float(),
            "total": self.total.to_float(),
        }
        if self.product_id is not None:
            data["producto_id"] = self.product_id
        if self.sku:
            data["sku"] = self.sku
        return data

    def to_woo(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "quantity": self.quantity,
            "price": self.price.to_wire(),
            "subtotal": self.total.to_wire(),
            "total": self.total.to_wire(),
        }
        if self.product_id is not None:
            data["product_id"] = self.product_id
        if self.sku:
            data["sku"] = self.sku
        return data


@dataclass
class OrderDomain:
    """
    Domain model representing an order (Aggregate Root).

    Monetary fields share the order currency. ``total`` is the value that gets
    persisted: the caller-reported total when it was reconcilable, otherwise the
    computed one.
    """

    number: str
    items: list[LineItem]
    subtotal: Money
    tax: Money
    shipping: Money
    discount: Money
    total: Money
    currency: str = "CLP"
    origin_platform: str = "woo_moraleja"
    status: str = "pending"
    payment_method: str = "bacs"
    payment_method_title: Optional[str] = None
    origin: str = "web"
    ordered_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    customer: Optional[str] = None
    customer_note: Optional[str] = None
    billing: Optional[dict[str, Any]] = None
    shipping_address: Optional[dict[str, Any]] = None
    coupon_code: Optional[str] = None
    set_paid: bool = False
    external_id: Optional[int] = None
    document_id: Optional[str] = None

    @property
    def computed_total(self) -> Money:
        """subtotal + tax + shipping - discount."""
        gross = self.subtotal + self.tax + self.shipping
        if self.discount.amount >= gross.amount:
            return Money.zero(self.currency)
        return gross - self.discount

    @property
    def items_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_woo_payload(self) -> dict[str, Any]:
        """WooCommerce-shaped order (also cached in rawWooData)."""
        payload: dict[str, Any] = {
            "payment_method": self.payment_method,
            "payment_method_title": self.payment_method_title or self.payment_method,
            "status": self.status,
            "set_paid": self.set_paid,
            "customer_id": 0,
            "currency": self.currency,
            "billing": self.billing or {},
            "shipping": self.shipping_address or {},
            "line_items": [item.to_woo() for item in self.items if item.product_id is not None],
            "shipping_total": self.shipping.to_wire(),
            "total_tax": self.tax.to_wire(),
            "discount_total": self.discount.to_wire(),
            "subtotal": self.subtotal.to_wire(),
            "total": self.total.to_wire(),
        }
        if self.coupon_code:
            payload["coupon_lines"] = [{"code": self.coupon_code}]
        if self.customer_note:
            payload["customer_note"] = self.customer_note
        return payload

    def to_cms(self) -> dict[str, Any]:
        """Payload for POST /pedidos."""
        data: dict[str, Any] = {
            "numero_pedido": self.number,
            "fecha_pedido": self.ordered_at,
            "estado": self.status,
            "total": self.total.to_float(),
            "subtotal": self.subtotal.to_float(),
            "impuestos": self.tax.to_float(),
            "envio": self.shipping.to_float(),
            "descuento": self.discount.to_float(),
            "moneda": self.currency,
            "origen": self.origin,
            "metodo_pago": self.payment_method,
            "metodo_pago_titulo": self.payment_method_title,
            "nota_cliente": self.customer_note,
            "originPlatform": self.origin_platform,
            "items": [item.to_cms() for item in self.items],
            "billing": self.billing,
            "shipping": self.shipping_address,
        }
        if self.customer:
            data["cliente"] = self.customer
        if self.coupon_code:
            data["cupon"] = self.coupon_code
        if self.origin_platform != "otros":
            data["rawWooData"] = self.to_woo_payload()
        return data
