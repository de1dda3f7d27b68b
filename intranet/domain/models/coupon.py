"""
Coupon domain model.

Coupons live in the CMS ``wo-cupones`` collection and belong to a single
origin platform.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from intranet.domain.enums import DiscountType
from intranet.domain.value_objects.money import Money


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Coupon:
    """
    Domain model representing a discount coupon.

    Attributes:
        code: Coupon code as typed by the customer
        origin_platform: Platform where the coupon is valid
        discount_type: percent, fixed_cart or fixed_product
        amount: Percentage (for percent) or currency amount
        expires_at: Expiry instant, None if it never expires
    """

    code: str
    origin_platform: str
    discount_type: DiscountType
    amount: Decimal
    expires_at: Optional[datetime] = None
    id: Optional[int] = None
    document_id: Optional[str] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at < (now or datetime.now(timezone.utc))

    def compute_discount(self, subtotal: Money, items_quantity: int = 1) -> Money:
        """
        Discount for an order subtotal, clamped to [0, subtotal].

        A 150% coupon on 1000 yields exactly 1000.
        """
        if self.discount_type is DiscountType.PERCENT:
            raw = subtotal.amount * self.amount / Decimal("100")
        elif self.discount_type is DiscountType.FIXED_PRODUCT:
            raw = self.amount * Decimal(items_quantity)
        else:
            raw = self.amount
        raw = max(raw, Decimal("0"))
        return Money(amount=raw, currency=subtotal.currency).clamp(subtotal)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Coupon":
        """Create from a flattened CMS record."""
        amount = record.get("amount")
        if amount is None:
            amount = record.get("monto")
        return cls(
            id=record.get("id"),
            document_id=record.get("documentId"),
            code=record.get("code") or record.get("codigo") or "",
            origin_platform=record.get("originPlatform") or "woo_moraleja",
            discount_type=DiscountType(record.get("discount_type") or record.get("tipo_descuento") or "percent"),
            amount=Decimal(str(amount or 0)),
            expires_at=_parse_datetime(record.get("date_expires") or record.get("fecha_expiracion")),
        )
