"""
Canonical enumerations shared by the CMS and the storefronts.

Free-text values arrive in Spanish display vocabulary or in WooCommerce's
English vocabulary. Each enum canonicalizes them through ``_missing_``:
lowercase/trim, pass through valid members, translate known aliases and
otherwise fall back to the enum's declared default member.
"""

from enum import Enum
from typing import Any, Optional


class CanonicalEnum(str, Enum):
    """str Enum with alias translation and a declared default member."""

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {}

    @classmethod
    def default(cls) -> "CanonicalEnum":
        raise NotImplementedError

    @classmethod
    def _missing_(cls, value: Any):
        key = str(value).strip().lower() if value is not None else ""
        for member in cls:
            if member.value == key:
                return member
        alias = cls._aliases().get(key)
        if alias is not None:
            return cls(alias)
        return cls.default()

    @classmethod
    def canonicalize(cls, value: Any) -> str:
        """Canonical wire value for any input; never raises."""
        return cls(value).value

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        """True if value is already a canonical member value."""
        return value in {member.value for member in cls}


class OrderStatus(CanonicalEnum):
    AUTO_DRAFT = "auto-draft"
    PENDING = "pending"
    PROCESSING = "processing"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    FAILED = "failed"
    CHECKOUT_DRAFT = "checkout-draft"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return _STATUS_ALIASES

    @classmethod
    def default(cls) -> "OrderStatus":
        return cls.PENDING

    @property
    def display_label(self) -> str:
        """Etiqueta en español para la intranet."""
        return _STATUS_LABELS.get(self.value, "pendiente")


class PaymentMethod(CanonicalEnum):
    BACS = "bacs"
    CHEQUE = "cheque"
    COD = "cod"
    PAYPAL = "paypal"
    STRIPE = "stripe"
    TRANSFERENCIA = "transferencia"
    OTRO = "otro"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return _PAYMENT_ALIASES

    @classmethod
    def default(cls) -> "PaymentMethod":
        return cls.BACS


class OrderOrigin(CanonicalEnum):
    WEB = "web"
    CHECKOUT = "checkout"
    REST_API = "rest-api"
    ADMIN = "admin"
    MOBILE = "mobile"
    DIRECTO = "directo"
    OTRO = "otro"

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return _ORIGIN_ALIASES

    @classmethod
    def default(cls) -> "OrderOrigin":
        return cls.WEB


class OriginPlatform(str, Enum):
    """
    Plataforma de origen de un registro sombra o pedido.

    A diferencia de los enums canónicos, un valor desconocido es un error
    de validación y no se reemplaza por defecto.
    """

    WOO_MORALEJA = "woo_moraleja"
    WOO_ESCOLAR = "woo_escolar"
    OTROS = "otros"

    @classmethod
    def parse(cls, value: Optional[str], default: Optional["OriginPlatform"] = None) -> Optional["OriginPlatform"]:
        if value is None or value == "":
            return default
        return cls(value)

    @property
    def is_storefront(self) -> bool:
        return self is not OriginPlatform.OTROS


class PhoneCategory(str, Enum):
    PERSONAL = "Personal"
    LABORAL = "Laboral"
    INSTITUCIONAL = "Institucional"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PhoneCategory"]:
        """Categoría válida o None; el CMS no acepta otros valores."""
        if not value:
            return None
        for member in cls:
            if member.value.lower() == str(value).strip().lower():
                return member
        return None


class DiscountType(str, Enum):
    PERCENT = "percent"
    FIXED_CART = "fixed_cart"
    FIXED_PRODUCT = "fixed_product"


_STATUS_ALIASES = {
    "pendiente": "pending",
    "procesando": "processing",
    "en_espera": "on-hold",
    "en espera": "on-hold",
    "onhold": "on-hold",
    "completado": "completed",
    "cancelado": "cancelled",
    "reembolsado": "refunded",
    "fallido": "failed",
}

_STATUS_LABELS = {
    "pending": "pendiente",
    "processing": "procesando",
    "on-hold": "en_espera",
    "completed": "completado",
    "cancelled": "cancelado",
    "refunded": "reembolsado",
    "failed": "fallido",
}

_PAYMENT_ALIASES = {
    "tarjeta": "stripe",
    "tarjeta de crédito": "stripe",
    "tarjeta de debito": "stripe",
    "debit card": "stripe",
    "credit card": "stripe",
    "card": "stripe",
    "transfer": "transferencia",
    "transferencia bancaria": "transferencia",
    "bank transfer": "transferencia",
    "check": "cheque",
    "cash on delivery": "cod",
    "contra entrega": "cod",
    "other": "otro",
}

_ORIGIN_ALIASES = {
    "restapi": "rest-api",
    "rest api": "rest-api",
    "woocommerce": "web",
}
