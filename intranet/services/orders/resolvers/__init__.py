"""
Order resolvers.
"""

from .order_resolver import OrderResolver, matches_order

__all__ = ["OrderResolver", "matches_order"]
