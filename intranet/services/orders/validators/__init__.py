"""
Validator services for validating business rules and data integrity.
"""

from .order_validator import LINE_TOTAL_TOLERANCE, OrderValidator

__all__ = ["LINE_TOTAL_TOLERANCE", "OrderValidator"]
