"""
OrderValidator service for validating intranet orders before they are
written to the CMS.

This service follows SRP (Single Responsibility Principle) by focusing only
on validation: required fields, line items, monetary amounts, origin
platform and total reconciliation. Nothing here calls an external system.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from intranet.api.v1.schemas.order_schemas import OrderData, OrderItemInput
from intranet.domain.enums import OriginPlatform
from intranet.domain.models import LineItem
from intranet.domain.value_objects.money import Money
from intranet.utils.error_handler import ValidationException

logger = logging.getLogger(__name__)

# price × quantity debe coincidir con el total de la línea bajo esta tolerancia
LINE_TOTAL_TOLERANCE = Decimal("0.01")


class OrderValidator:
    """
    Validates intranet orders.

    Responsibilities:
    - Validate required fields
    - Validate and parse line items
    - Parse monetary amounts
    - Validate the origin platform
    - Reconcile caller-reported totals
    """

    def __init__(self, mismatch_ratio: float = 0.05, currency: str = "CLP"):
        """
        Args:
            mismatch_ratio: Maximum relative drift between reported and computed totals
            currency: Currency for parsed amounts
        """
        self.mismatch_ratio = Decimal(str(mismatch_ratio))
        self.currency = currency

    def validate(self, data: OrderData) -> list[LineItem]:
        """
        Validates an order payload for creation.

        Args:
            data: Order payload

        Returns:
            list[LineItem]: Parsed line items

        Raises:
            ValidationException: If validation fails
        """
        self._validate_required_fields(data)
        self.validate_origin_platform(data.origin_platform)
        items = self.validate_line_items(data.items)

        logger.info(f"Order {data.numero_pedido} validation passed ({len(items)} items)")
        return items

    def _validate_required_fields(self, data: OrderData) -> None:
        number = str(data.numero_pedido).strip() if data.numero_pedido is not None else ""
        if not number:
            raise ValidationException(
                message="El número de pedido es obligatorio",
                field="numero_pedido",
                invalid_value=data.numero_pedido,
            )

    def validate_origin_platform(
        self, value: Optional[str], default: OriginPlatform = OriginPlatform.WOO_MORALEJA
    ) -> OriginPlatform:
        try:
            return OriginPlatform.parse(value, default=default)
        except ValueError as e:
            valid = ", ".join(member.value for member in OriginPlatform)
            raise ValidationException(
                message=f"originPlatform debe ser uno de: {valid}",
                field="originPlatform",
                invalid_value=value,
                expected_format=valid,
            ) from e

    def parse_amount(self, value: Any, field: str) -> Money:
        """
        Parse a non-negative monetary amount; missing values are zero.

        Raises:
            ValidationException: If the value is not numeric or is negative
        """
        try:
            return Money.parse(value, self.currency)
        except ValueError as e:
            raise ValidationException(
                message=f"El campo {field} debe ser un número mayor o igual a 0",
                field=field,
                invalid_value=value,
                expected_format="número >= 0",
            ) from e

    def _parse_quantity(self, value: Any, field: str) -> int:
        try:
            if value is None or isinstance(value, bool):
                raise InvalidOperation
            quantity = Decimal(str(value).strip())
            if not quantity.is_finite() or quantity != quantity.to_integral_value():
                raise InvalidOperation
        except InvalidOperation as e:
            raise ValidationException(
                message=f"La cantidad de {field} debe ser un número entero",
                field=field,
                invalid_value=value,
                expected_format="entero > 0",
            ) from e
        if quantity <= 0:
            raise ValidationException(
                message=f"La cantidad de {field} debe ser mayor a 0",
                field=field,
                invalid_value=value,
                expected_format="entero > 0",
            )
        return int(quantity)

    def validate_line_items(self, items: Optional[list[OrderItemInput]]) -> list[LineItem]:
        """
        Validates every line item and returns them as domain objects.

        Each item needs a name, quantity > 0, price >= 0 and total >= 0, and
        its total must equal price × quantity within LINE_TOTAL_TOLERANCE.

        Raises:
            ValidationException: If the list is empty or an item is invalid
        """
        if not items:
            raise ValidationException(
                message="El pedido debe tener al menos un item",
                field="items",
                invalid_value=items,
            )

        parsed = []
        for index, item in enumerate(items):
            parsed.append(self._validate_line_item(index, item))

        logger.debug(f"Line items validation passed: {len(parsed)} items")
        return parsed

    def _validate_line_item(self, index: int, item: OrderItemInput) -> LineItem:
        label = f"items[{index}]"

        name = (item.nombre or "").strip()
        if not name:
            raise ValidationException(
                message=f"El item {index + 1} debe tener un nombre",
                field=f"{label}.nombre",
                invalid_value=item.nombre,
            )

        for field_name in ("cantidad", "precio", "total"):
            if getattr(item, field_name) is None or getattr(item, field_name) == "":
                raise ValidationException(
                    message=f"El item {index + 1} debe tener {field_name}",
                    field=f"{label}.{field_name}",
                )

        quantity = self._parse_quantity(item.cantidad, f"{label}.cantidad")
        price = self.parse_amount(item.precio, f"{label}.precio")
        total = self.parse_amount(item.total, f"{label}.total")

        expected = price.amount * quantity
        if abs(expected - total.amount) >= LINE_TOTAL_TOLERANCE:
            raise ValidationException(
                message=(
                    f"El total del item {index + 1} ({total.to_wire()}) no coincide con "
                    f"precio × cantidad ({expected:.2f})"
                ),
                field=f"{label}.total",
                invalid_value=item.total,
                expected_format=f"{expected:.2f}",
            )

        return LineItem(
            name=name,
            quantity=quantity,
            price=price,
            total=total,
            product_id=item.external_product_id,
            sku=item.sku,
        )

    def reconcile_total(self, number: str, computed: Money, reported: Any) -> Money:
        """
        Compare a caller-reported total against the computed one.

        A small drift is logged and the reported total is kept. A drift above
        ``mismatch_ratio`` is irreconcilable.

        Returns:
            Money: Total to persist

        Raises:
            ValidationException: If the drift exceeds the allowed ratio
        """
        if reported is None or reported == "":
            return computed

        reported_total = self.parse_amount(reported, "total")
        difference = abs(reported_total.amount - computed.amount)
        if difference < LINE_TOTAL_TOLERANCE:
            return reported_total

        if computed.amount > 0:
            drift = difference / computed.amount
        else:
            drift = None

        if drift is None or drift > self.mismatch_ratio:
            raise ValidationException(
                message=(
                    f"El total informado ({reported_total.to_wire()}) no coincide con el "
                    f"total calculado ({computed.to_wire()})"
                ),
                field="total",
                invalid_value=reported,
                expected_format=computed.to_wire(),
            )

        logger.warning(
            f"⚠️ Order {number}: reported total {reported_total.to_wire()} differs from "
            f"computed {computed.to_wire()} ({drift:.2%})"
        )
        return reported_total
