"""Tests unitarios para enums canónicos, Money y cupones."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from intranet.domain.enums import DiscountType, OrderOrigin, OrderStatus, OriginPlatform, PaymentMethod
from intranet.domain.models import Coupon
from intranet.domain.value_objects.money import Money


class TestCanonicalEnums:
    """Tests para la canonicalización de valores libres."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("completado", "completed"),
            ("Completed", "completed"),
            (" en espera ", "on-hold"),
            ("cancelado", "cancelled"),
            ("whatever", "pending"),
            (None, "pending"),
        ],
    )
    def test_order_status(self, value, expected):
        """Debe traducir alias en español y caer a pending si es desconocido."""
        assert OrderStatus.canonicalize(value) == expected

    def test_payment_method_aliases(self):
        """Debe traducir alias de medio de pago y caer a bacs."""
        assert PaymentMethod.canonicalize("Tarjeta") == "stripe"
        assert PaymentMethod.canonicalize("transferencia bancaria") == "transferencia"
        assert PaymentMethod.canonicalize("bitcoin") == "bacs"

    def test_order_origin_default(self):
        """Debe caer a web para orígenes desconocidos."""
        assert OrderOrigin.canonicalize("rest api") == "rest-api"
        assert OrderOrigin.canonicalize("fax") == "web"

    def test_is_valid_only_for_canonical_values(self):
        """Solo los valores canónicos son válidos."""
        assert PaymentMethod.is_valid("stripe") is True
        assert PaymentMethod.is_valid("Tarjeta") is False

    def test_origin_platform_rejects_unknown(self):
        """Una plataforma desconocida es un error, no se reemplaza."""
        with pytest.raises(ValueError):
            OriginPlatform.parse("shopify")

    def test_origin_platform_default_when_missing(self):
        """Sin valor se usa el default entregado."""
        assert OriginPlatform.parse(None, default=OriginPlatform.WOO_MORALEJA) is OriginPlatform.WOO_MORALEJA
        assert OriginPlatform.parse("otros").is_storefront is False


class TestMoney:
    """Tests para Money."""

    def test_parse_numeric_string(self):
        """Debe aceptar números como texto y normalizar a 2 decimales."""
        assert Money.parse("1990").to_wire() == "1990.00"

    def test_parse_missing_is_zero(self):
        """Un monto ausente es cero."""
        assert Money.parse(None).is_zero
        assert Money.parse("").is_zero

    @pytest.mark.parametrize("value", ["abc", "-5", True, "nan", "1e30", "9" * 30])
    def test_parse_rejects_invalid(self, value):
        """Debe rechazar texto no numérico, negativos, booleanos, NaN y montos fuera de rango."""
        with pytest.raises(ValueError):
            Money.parse(value)


class TestCouponDiscount:
    """Tests para el cálculo de descuento de cupones."""

    def test_percent_over_100_is_clamped_to_subtotal(self):
        """Un cupón de 150% sobre 1000 descuenta exactamente 1000."""
        coupon = Coupon(code="MEGA", origin_platform="woo_moraleja", discount_type=DiscountType.PERCENT, amount=Decimal("150"))

        discount = coupon.compute_discount(Money(amount=Decimal("1000")))

        assert discount.amount == Decimal("1000.00")

    def test_fixed_product_multiplies_quantity(self):
        """fixed_product descuenta el monto por unidad."""
        coupon = Coupon(code="X", origin_platform="woo_moraleja", discount_type=DiscountType.FIXED_PRODUCT, amount=Decimal("100"))

        assert coupon.compute_discount(Money(amount=Decimal("1000")), items_quantity=3).amount == Decimal("300.00")

    def test_fixed_cart(self):
        """fixed_cart descuenta un monto fijo."""
        coupon = Coupon(code="X", origin_platform="woo_moraleja", discount_type=DiscountType.FIXED_CART, amount=Decimal("250"))

        assert coupon.compute_discount(Money(amount=Decimal("1000"))).amount == Decimal("250.00")

    def test_expiry(self):
        """Debe considerar vencido un cupón con fecha pasada."""
        past = datetime.now(timezone.utc) - timedelta(days=1)
        coupon = Coupon(code="X", origin_platform="woo_moraleja", discount_type=DiscountType.PERCENT, amount=Decimal("10"), expires_at=past)

        assert coupon.is_expired() is True

    def test_from_record_reads_cms_fields(self):
        """Debe leer los campos del CMS, incluida la fecha ISO con Z."""
        coupon = Coupon.from_record(
            {
                "id": 1,
                "code": "VERANO",
                "originPlatform": "woo_escolar",
                "discount_type": "fixed_cart",
                "amount": "500",
                "date_expires": "2099-01-01T00:00:00Z",
            }
        )

        assert coupon.origin_platform == "woo_escolar"
        assert coupon.discount_type is DiscountType.FIXED_CART
        assert coupon.amount == Decimal("500")
        assert coupon.is_expired() is False
