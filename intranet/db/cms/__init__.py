"""
CMS Repository Package.

One repository per Strapi collection used by the sync flows:
- PersonRepository: canonical persons (personas)
- ShadowCustomerRepository: platform customers (wo-clientes)
- OrderRepository: orders (pedidos)
- CouponRepository: coupons (wo-cupones)
- SchoolRepository: schools and courses (colegios, cursos)
"""

from .base import BaseRepository
from .coupon_repository import CouponRepository
from .order_repository import OrderRepository
from .person_repository import PersonRepository
from .school_repository import SchoolRepository
from .shadow_customer_repository import ShadowCustomerRepository

__all__ = [
    "BaseRepository",
    "PersonRepository",
    "ShadowCustomerRepository",
    "OrderRepository",
    "CouponRepository",
    "SchoolRepository",
]
