"""
Domain models for business entities.

These models represent core business concepts and contain
business logic and invariants.
"""

from .coupon import Coupon
from .order import LineItem, OrderDomain
from .person import EmailRecord, Person, PhoneRecord
from .shadow_customer import ShadowCustomer

__all__ = ["Coupon", "EmailRecord", "LineItem", "OrderDomain", "Person", "PhoneRecord", "ShadowCustomer"]
