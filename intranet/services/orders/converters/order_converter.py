"""OrderConverter service - converts intranet order payloads to domain models (SRP)."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from intranet.api.v1.schemas.order_schemas import OrderData
from intranet.db.cms import CouponRepository
from intranet.domain.enums import OrderOrigin, OrderStatus, OriginPlatform, PaymentMethod
from intranet.domain.models import LineItem, OrderDomain
from intranet.domain.value_objects.money import Money
from intranet.services.orders.validators import OrderValidator
from intranet.utils.error_handler import ValidationException
from intranet.utils.name_utils import split_platform_name

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_METHOD_TITLE = "Transferencia bancaria directa"


def guest_address(guest_name: str, country: str) -> dict[str, Any]:
    """Dirección mínima para pedidos sin cliente asociado."""
    first_name, last_name = split_platform_name(guest_name)
    return {"first_name": first_name, "last_name": last_name, "country": country}


class OrderConverter:
    """
    Converts a validated order payload into an OrderDomain.

    Responsibilities:
    - Canonicalize status, payment method and origin
    - Apply the optional coupon
    - Compute and reconcile totals
    - Fill guest billing/shipping for storefront orders
    """

    def __init__(
        self,
        validator: OrderValidator,
        coupon_repo: CouponRepository,
        guest_name: str = "Cliente Invitado",
        country: str = "CL",
    ):
        """
        Args:
            validator: Field and totals validation
            coupon_repo: wo-cupones lookup
            guest_name: Billing/shipping name for guest orders
            country: Default billing/shipping country
        """
        self.validator = validator
        self.coupon_repo = coupon_repo
        self.guest_name = guest_name
        self.country = country

    async def convert(self, data: OrderData) -> OrderDomain:
        """
        Build the domain order for a create request.

        Raises:
            ValidationException: Invalid fields, coupon or irreconcilable totals
        """
        items = self.validator.validate(data)
        platform = self.validator.validate_origin_platform(data.origin_platform)
        number = str(data.numero_pedido).strip()
        currency = self.validator.currency

        if data.moneda and data.moneda.strip().upper() != currency:
            raise ValidationException(
                message=f"Moneda no soportada: {data.moneda}",
                field="moneda",
                invalid_value=data.moneda,
                expected_format=currency,
            )

        if platform.is_storefront and not any(item.product_id is not None for item in items):
            raise ValidationException(
                message="Los items deben tener un producto_id válido",
                field="items",
                expected_format="producto_id, product_id o libro_id numérico",
            )

        subtotal = Money.zero(currency)
        for item in items:
            subtotal = subtotal + item.total
        tax = self.validator.parse_amount(data.impuestos, "impuestos")
        shipping = self.validator.parse_amount(data.envio, "envio")
        discount = self.validator.parse_amount(data.descuento, "descuento")

        coupon_code = None
        if data.cupon:
            discount = await self.apply_coupon(data.cupon, platform, subtotal, items)
            coupon_code = data.cupon.strip()

        status = OrderStatus.canonicalize(data.estado)
        payment_method = PaymentMethod.canonicalize(data.metodo_pago)

        order = OrderDomain(
            number=number,
            items=items,
            subtotal=subtotal,
            tax=tax,
            shipping=shipping,
            discount=discount,
            total=Money.zero(currency),
            currency=currency,
            origin_platform=platform.value,
            status=status,
            payment_method=payment_method,
            payment_method_title=data.metodo_pago_titulo or DEFAULT_PAYMENT_METHOD_TITLE,
            origin=OrderOrigin.canonicalize(data.origen),
            ordered_at=data.fecha_pedido or datetime.now(timezone.utc).isoformat(),
            customer=str(data.cliente) if data.cliente else None,
            customer_note=data.nota_cliente,
            billing=data.billing,
            shipping_address=data.shipping,
            coupon_code=coupon_code,
            set_paid=status == OrderStatus.COMPLETED.value,
        )
        order.total = self.validator.reconcile_total(number, order.computed_total, data.total)

        if platform.is_storefront:
            if not order.billing:
                order.billing = guest_address(self.guest_name, self.country)
            if not order.shipping_address:
                order.shipping_address = guest_address(self.guest_name, self.country)

        logger.info(
            f"🧾 Order {number} converted: {len(items)} items, subtotal={subtotal.to_wire()} "
            f"total={order.total.to_wire()} platform={platform.value}"
        )
        return order

    async def apply_coupon(
        self, code: str, platform: OriginPlatform, subtotal: Money, items: list[LineItem]
    ) -> Money:
        """
        Discount granted by a coupon, clamped to [0, subtotal].

        Raises:
            ValidationException: Unknown coupon, other platform or expired
        """
        coupon = await self.coupon_repo.find_by_code(code)
        if coupon is None:
            raise ValidationException(message=f"El cupón {code} no existe", field="cupon", invalid_value=code)

        if coupon.origin_platform != platform.value:
            raise ValidationException(
                message=f"El cupón {code} no es válido para {platform.value}",
                field="cupon",
                invalid_value=code,
                expected_format=coupon.origin_platform,
            )

        if coupon.is_expired():
            raise ValidationException(message=f"El cupón {code} está vencido", field="cupon", invalid_value=code)

        quantity = sum(item.quantity for item in items)
        discount = coupon.compute_discount(subtotal, quantity)
        logger.info(f"🏷️ Coupon {code} applied: discount={discount.to_wire()}")
        return discount

    @staticmethod
    def canonical_update_fields(data: OrderData) -> dict[str, Any]:
        """
        CMS fields for a partial update, canonicalized.

        Only fields present in the request are returned.
        """
        fields = data.provided_fields()
        update: dict[str, Any] = {}

        if "numero_pedido" in fields:
            update["numero_pedido"] = str(data.numero_pedido).strip() or None
        if "fecha_pedido" in fields:
            update["fecha_pedido"] = data.fecha_pedido
        if "estado" in fields:
            update["estado"] = OrderStatus.canonicalize(data.estado)
        if "moneda" in fields:
            update["moneda"] = data.moneda
        if "origen" in fields:
            update["origen"] = OrderOrigin.canonicalize(data.origen)
        if "metodo_pago" in fields:
            update["metodo_pago"] = PaymentMethod.canonicalize(data.metodo_pago)
        for name in ("metodo_pago_titulo", "nota_cliente", "cliente", "billing", "shipping"):
            if name in fields:
                update[name] = getattr(data, name)
        return update

    def repair_stored_fields(self, record: dict[str, Any]) -> dict[str, Any]:
        """Canonical values for stored origen/metodo_pago that are not valid anymore."""
        repaired: dict[str, Any] = {}
        origin = record.get("origen")
        if origin and not OrderOrigin.is_valid(origin):
            repaired["origen"] = OrderOrigin.canonicalize(origin)
        payment_method = record.get("metodo_pago")
        if payment_method and not PaymentMethod.is_valid(payment_method):
            repaired["metodo_pago"] = PaymentMethod.canonicalize(payment_method)
        if repaired:
            logger.info(f"🔧 Repairing stored order fields: {repaired}")
        return repaired

    def parse_update_amounts(self, data: OrderData) -> dict[str, Optional[float]]:
        fields = data.provided_fields()
        amounts: dict[str, Optional[float]] = {}
        for name in ("total", "subtotal", "impuestos", "envio", "descuento"):
            if name in fields:
                amounts[name] = self.validator.parse_amount(getattr(data, name), name).to_float()
        return amounts
