"""
Identity resolvers.

Every resolver is an ordered list of strategies composed by ``resolve_first``.
"""

from .chain import (
    ResolverKeys,
    after_transport_error,
    direct_fetch_strategy,
    filter_strategy,
    resolve_first,
    scan_strategy,
)
from .person_resolver import PersonResolver
from .shadow_resolver import ShadowCustomerResolver

__all__ = [
    "ResolverKeys",
    "resolve_first",
    "after_transport_error",
    "filter_strategy",
    "scan_strategy",
    "direct_fetch_strategy",
    "PersonResolver",
    "ShadowCustomerResolver",
]
