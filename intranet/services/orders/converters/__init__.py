"""
Converter services for transforming intranet payloads to domain orders.
"""

from .order_converter import OrderConverter, guest_address

__all__ = ["OrderConverter", "guest_address"]
