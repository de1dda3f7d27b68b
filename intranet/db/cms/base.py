"""
Base Repository for CMS collections.

Each repository owns one Strapi collection (or a pair of closely related
ones) and converts between flat CMS records and domain payloads. HTTP
concerns (retries, error mapping, record flattening) live in StrapiClient.
"""

import functools
import logging
from typing import Any, Callable, Dict, List, Optional

from intranet.db.strapi_client import StrapiClient

logger = logging.getLogger(__name__)


def log_operation(operation_name: Optional[str] = None) -> Callable:
    """
    Decorator for logging repository operations.

    Args:
        operation_name: Optional custom name for the operation

    Returns:
        Decorated function with logging
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            op_name = operation_name or f"{self.__class__.__name__}.{func.__name__}"
            logger.debug(f"Starting operation: {op_name}")

            try:
                result = await func(self, *args, **kwargs)
                logger.debug(f"Operation successful: {op_name}")
                return result
            except Exception as e:
                logger.error(f"Operation failed: {op_name} - {e}")
                raise

        return wrapper

    return decorator


class BaseRepository:
    """
    Base repository bound to a single Strapi collection.

    Attributes:
        collection: Collection API id (e.g. "personas")
        populate: Default populate parameters for reads
    """

    collection: str = ""
    populate: Dict[str, Any] = {}

    def __init__(self, strapi: StrapiClient):
        self.strapi = strapi

    def read_params(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Merge the default populate with request-specific params."""
        merged = dict(self.populate)
        merged.update(params or {})
        return merged

    @log_operation()
    async def find(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        return await self.strapi.find(self.collection, self.read_params(params))

    @log_operation()
    async def find_one(self, identifier: Any, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        return await self.strapi.find_one(self.collection, identifier, self.read_params(params))

    @log_operation()
    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.strapi.create(self.collection, data)

    @log_operation()
    async def update(self, identifier: Any, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.strapi.update(self.collection, identifier, data)

    @log_operation()
    async def delete(self, identifier: Any) -> None:
        await self.strapi.delete(self.collection, identifier)

    async def list_page(self, page: int = 1, page_size: int = 25, params: Optional[Dict[str, Any]] = None):
        """One page of records plus Strapi's pagination meta."""
        query = self.read_params(params)
        query.update({"pagination[page]": page, "pagination[pageSize]": page_size})
        return await self.strapi.find_with_meta(self.collection, query)
