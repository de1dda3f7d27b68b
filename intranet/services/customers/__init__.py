"""
Customer services package for CMS and storefront synchronization.

resolve → upsert canonical person → fan-out to storefronts →
cross-reference write-back, composed by CustomerSyncOrchestrator.
"""

from .cross_reference import CrossReferenceWriter
from .orchestrator import CustomerSyncOrchestrator, create_customer_orchestrator
from .person_upsert import PersonUpsertResult, PersonUpsertService
from .platform_fanout import PlatformFanout

__all__ = [
    "CrossReferenceWriter",
    "CustomerSyncOrchestrator",
    "create_customer_orchestrator",
    "PersonUpsertResult",
    "PersonUpsertService",
    "PlatformFanout",
]
