"""
Interfaces/Protocols for customer sync services (Dependency Inversion Principle).

These protocols define contracts that services must implement,
allowing for loose coupling and easy testing.
"""

from typing import Any, Optional, Protocol

from intranet.domain.models import Person
from intranet.services.customers.resolvers import ResolverKeys
from intranet.services.results import PlatformResult, SideEffect


class IPersonResolver(Protocol):
    """Protocol for canonical person resolution."""

    async def resolve(self, keys: ResolverKeys) -> Optional[Person]:
        """Return the matching person or None."""
        ...


class IPersonUpsert(Protocol):
    """Protocol for the create-or-update of canonical persons."""

    async def upsert_person(self, payload: Any, resolved: Optional[Person]) -> Any:
        """Update the resolved person or create a new one."""
        ...


class IPlatformFanout(Protocol):
    """Protocol for concurrent storefront writes."""

    async def sync_to_platforms(
        self, person: Person, platforms: list[str], extras: Optional[dict[str, Any]] = None
    ) -> dict[str, PlatformResult]:
        """Write the person to every selected platform independently."""
        ...

    def resolve_platforms(self, platforms: Optional[list[str]]) -> list[str]:
        """Platform codes for a caller selection; unknown entries are kept."""
        ...

    def is_known(self, platform: str) -> bool:
        ...


class ICrossReferenceWriter(Protocol):
    """Protocol for best-effort shadow record write-back."""

    async def write_cross_reference(
        self,
        person: Person,
        platform: str,
        external_id: Optional[int],
        raw_payload: Optional[dict[str, Any]],
        shadow_defaults: Optional[dict[str, Any]] = None,
    ) -> SideEffect:
        """Link the shadow record to the storefront id. Never raises."""
        ...
