"""
Interfaces/Protocols for order services (Dependency Inversion Principle).

These protocols define contracts that services must implement,
allowing for loose coupling and easy testing.
"""

from typing import Any, Optional, Protocol

from intranet.api.v1.schemas.order_schemas import OrderData
from intranet.domain.models import OrderDomain
from intranet.services.results import PlatformResult


class IOrderConverter(Protocol):
    """Protocol for payload validation and conversion."""

    validator: Any

    async def convert(self, data: OrderData) -> OrderDomain:
        """Validate the payload and build the domain order."""
        ...

    def canonical_update_fields(self, data: OrderData) -> dict[str, Any]:
        """CMS fields for a partial update."""
        ...

    def repair_stored_fields(self, record: dict[str, Any]) -> dict[str, Any]:
        """Canonical replacements for invalid stored values."""
        ...

    def parse_update_amounts(self, data: OrderData) -> dict[str, Optional[float]]:
        """Monetary fields present in a partial update."""
        ...


class IOrderResolver(Protocol):
    """Protocol for order lookup."""

    async def resolve(self, identifier: Any) -> Optional[dict[str, Any]]:
        """Return the CMS order record or None."""
        ...


class IOrderPlatformWriter(Protocol):
    """Protocol for storefront order writes."""

    async def create_order_on_platform(self, platform: str, order_payload: dict[str, Any]) -> PlatformResult:
        """Create the order on one storefront."""
        ...

    async def update_order_on_platform(
        self, platform: str, external_id: int, order_payload: dict[str, Any]
    ) -> PlatformResult:
        """Update an existing storefront order."""
        ...
