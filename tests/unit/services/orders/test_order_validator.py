"""Tests unitarios para OrderValidator."""

from decimal import Decimal

import pytest

from intranet.api.v1.schemas.order_schemas import OrderData
from intranet.domain.enums import OriginPlatform
from intranet.domain.value_objects.money import Money
from intranet.services.orders.validators import OrderValidator
from intranet.utils.error_handler import ValidationException


def order(items=None, **fields):
    data = {
        "numero_pedido": "P-1001",
        "items": items if items is not None else [{"nombre": "Cuaderno", "cantidad": 2, "precio": 1000, "total": 2000, "producto_id": 55}],
    }
    data.update(fields)
    return OrderData.model_validate(data)


@pytest.fixture
def validator():
    return OrderValidator(mismatch_ratio=0.05, currency="CLP")


class TestLineItems:
    """Tests para la validación de líneas del pedido."""

    def test_exact_line_total_is_accepted(self, validator):
        """precio 1000 × cantidad 2 con total 2000 es válido."""
        items = validator.validate(order())

        assert len(items) == 1
        assert items[0].total.amount == Decimal("2000.00")
        assert items[0].product_id == 55

    def test_line_total_off_by_one_is_rejected(self, validator):
        """precio 1000 × cantidad 2 con total 1999 se rechaza."""
        data = order(items=[{"nombre": "Cuaderno", "cantidad": 2, "precio": 1000, "total": 1999}])

        with pytest.raises(ValidationException) as exc_info:
            validator.validate(data)

        assert exc_info.value.field == "items[0].total"

    def test_empty_items_rejected(self, validator):
        """Un pedido sin items es inválido."""
        with pytest.raises(ValidationException) as exc_info:
            validator.validate(order(items=[]))

        assert exc_info.value.field == "items"

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "dos"])
    def test_invalid_quantity(self, validator, quantity):
        """La cantidad debe ser un entero mayor a 0."""
        data = order(items=[{"nombre": "Lápiz", "cantidad": quantity, "precio": 100, "total": 100}])

        with pytest.raises(ValidationException) as exc_info:
            validator.validate(data)

        assert exc_info.value.field == "items[0].cantidad"

    def test_negative_price(self, validator):
        """El precio no puede ser negativo."""
        data = order(items=[{"nombre": "Lápiz", "cantidad": 1, "precio": -100, "total": 0}])

        with pytest.raises(ValidationException) as exc_info:
            validator.validate(data)

        assert exc_info.value.field == "items[0].precio"

    def test_amount_beyond_decimal_precision(self, validator):
        """Un monto gigantesco es un error de validación, no un error interno."""
        data = order(items=[{"nombre": "Libro", "cantidad": 1, "precio": "1e30", "total": "1e30"}])

        with pytest.raises(ValidationException) as exc_info:
            validator.validate(data)

        assert exc_info.value.field == "items[0].precio"

    def test_missing_name(self, validator):
        """Cada item debe tener nombre."""
        data = order(items=[{"cantidad": 1, "precio": 100, "total": 100}])

        with pytest.raises(ValidationException):
            validator.validate(data)

    def test_english_aliases_and_numeric_strings(self, validator):
        """Acepta name/quantity/price y números como texto."""
        data = order(items=[{"name": "Libro", "quantity": "3", "price": "1500", "total": "4500", "product_id": "77"}])

        items = validator.validate(data)

        assert items[0].name == "Libro"
        assert items[0].quantity == 3
        assert items[0].product_id == 77


class TestOrderFields:
    """Tests para campos del pedido."""

    def test_numero_pedido_required(self, validator):
        """El número de pedido es obligatorio."""
        with pytest.raises(ValidationException) as exc_info:
            validator.validate(order(numero_pedido="  "))

        assert exc_info.value.field == "numero_pedido"

    def test_unknown_origin_platform(self, validator):
        """Una plataforma desconocida es un error de validación."""
        with pytest.raises(ValidationException) as exc_info:
            validator.validate(order(originPlatform="shopify"))

        assert exc_info.value.field == "originPlatform"

    def test_missing_origin_platform_defaults(self, validator):
        """Sin plataforma se asume woo_moraleja."""
        assert validator.validate_origin_platform(None) is OriginPlatform.WOO_MORALEJA

    def test_parse_amount_rejects_text(self, validator):
        """Los montos no numéricos se rechazan indicando el campo."""
        with pytest.raises(ValidationException) as exc_info:
            validator.parse_amount("mil", "envio")

        assert exc_info.value.field == "envio"


class TestReconcileTotal:
    """Tests para la conciliación del total informado."""

    def test_missing_reported_total_uses_computed(self, validator):
        """Sin total informado se persiste el calculado."""
        computed = Money(amount=Decimal("5000"))
        assert validator.reconcile_total("P-1", computed, None) == computed

    def test_small_drift_keeps_reported(self, validator):
        """Una diferencia dentro del ratio conserva el total informado."""
        total = validator.reconcile_total("P-1", Money(amount=Decimal("10000")), "10200")

        assert total.amount == Decimal("10200.00")

    def test_large_drift_is_rejected(self, validator):
        """Una diferencia sobre el ratio es irreconciliable."""
        with pytest.raises(ValidationException) as exc_info:
            validator.reconcile_total("P-1", Money(amount=Decimal("10000")), 20000)

        assert exc_info.value.field == "total"

    def test_nonzero_reported_against_zero_computed(self, validator):
        """Un total informado distinto de un calculado 0 se rechaza."""
        with pytest.raises(ValidationException):
            validator.reconcile_total("P-1", Money.zero(), 100)
